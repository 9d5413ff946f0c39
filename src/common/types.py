"""
どこで: `common` の型定義。
何を: Vec2/Mat3Like などの軽量エイリアス（組込みジェネリックで記述）。
なぜ: 依存の少ない場所に配置して循環と分散定義を避けるため。
"""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np

NumberLike = Union[float, int]
Vec2 = tuple[float, float]
# 2 成分の座標（list/tuple/ndarray いずれも可）
Vec2Like = Union[np.ndarray, Sequence[NumberLike]]
# 3x3 同次行列（ネストした list/tuple または ndarray）
Mat3Like = Union[np.ndarray, Sequence[Sequence[NumberLike]]]


__all__ = ["NumberLike", "Vec2", "Vec2Like", "Mat3Like"]
