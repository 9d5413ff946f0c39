"""
どこで: `frames.errors`
何を: フレーム計算で送出する例外階層。
なぜ: 呼び出し側が `FrameError` 一つで捕捉でき、かつ標準例外（ValueError 等）としても扱えるようにするため。
"""

from __future__ import annotations


class FrameError(Exception):
    """フレーム計算エラーの基底。"""


class SingularMatrixError(FrameError, ArithmeticError):
    """2x2 線形部の行列式が 0（閾値以下）で逆行列を持たない。"""


class InvalidFrameError(FrameError, TypeError):
    """フレーム（行列を持つノード）が必要な箇所に非フレームが渡された。"""


class ShapeMismatchError(FrameError, ValueError):
    """座標配列/行列の次元が想定と一致しない。"""


class NotAffineError(FrameError, ValueError):
    """3x3 だが最下行が [0, 0, 1] でない、または非有限値を含む。"""


__all__ = [
    "FrameError",
    "SingularMatrixError",
    "InvalidFrameError",
    "ShapeMismatchError",
    "NotAffineError",
]
