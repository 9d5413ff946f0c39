"""
どこで: `frames.transforms`（フレームに対する平行移動/回転/拡大/正規化/比率調整）。
何を: 小さな行列スタックを組み、`frames.propagation` を通して子孫ごとフレームへ適用する。
なぜ: 子が親に追従する剛体/拡大変換を、任意の「参照フレーム」から見た量として指定できるようにするため。

合成規則（`multiply_stack` はリスト先頭から順に適用）:
- 参照フレームなし: `multiply_stack([M, W]) = W @ M`
  → M はフレーム自身の局所基底で解釈される（回転は自身の原点まわり）。
- 参照フレーム R あり: `multiply_stack([W, inv(R), M, R]) = R @ M @ inv(R) @ W`
  → M は R の基底で解釈され、フレームの親座標系へ換算して適用される。
  `rel_frame=frame` を渡すと参照なしと同じ結果になる。

命名規則:
- 過去分詞形（`translated_frame`, `rotated_frame`, ...）は木を複製して新しい木を返す。
- 命令形（`translate_frame`, `rotate_frame`, ...）は渡された木を就地で書き換えて同じ参照を返す。
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Optional

import numpy as np

from common.types import Mat3Like, Vec2Like

from .errors import ShapeMismatchError, SingularMatrixError
from .matrix2d import as_affine, basis, from_basis, inverse, multiply_stack, norm
from .propagation import give_world_matrix, with_world_matrix
from .tree import Frame, require_frame

logger = logging.getLogger(__name__)

_Apply = Callable[[Frame, Mat3Like], Frame]


# ── 行列コンストラクタ ─────────────────────


def _pair(values: Vec2Like, name: str) -> tuple[float, float]:
    arr = np.asarray(values, dtype=np.float64)
    if arr.shape != (2,):
        raise ShapeMismatchError(f"{name} は長さ 2 である必要があります: shape={arr.shape}")
    return float(arr[0]), float(arr[1])


def translation_matrix(vec: Vec2Like) -> np.ndarray:
    """平行移動 `(dx, dy)`。"""
    dx, dy = _pair(vec, "vec")
    return as_affine([[1.0, 0.0, dx], [0.0, 1.0, dy], [0.0, 0.0, 1.0]])


def rotation_matrix(theta: float) -> np.ndarray:
    """反時計回り回転 [rad]。"""
    c, s = math.cos(theta), math.sin(theta)
    return as_affine([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def scaling_matrix(scales: Vec2Like) -> np.ndarray:
    """軸ごとの拡大 `(sx, sy)`。0 を含めば特異行列になる（次の逆行列計算で検出）。"""
    sx, sy = _pair(scales, "scales")
    return as_affine([[sx, 0.0, 0.0], [0.0, sy, 0.0], [0.0, 0.0, 1.0]])


# ── 合成 ──────────────────────────────


def transform_matrix(
    frame: Frame, matrix: Mat3Like, rel_frame: Optional[Frame] = None
) -> np.ndarray:
    """`frame` を `matrix` で変換した後の新しい `world_matrix` を返す（木は変更しない）。

    Parameters
    ----------
    frame : Frame
        変換対象。
    matrix : Mat3Like
        変換行列。`rel_frame` 指定時はその局所基底で解釈する。
    rel_frame : Frame, optional
        参照フレーム。`frame` と同じ親座標系で表されていること。

    Raises
    ------
    InvalidFrameError
        `frame`/`rel_frame` が `Frame` でない場合。
    SingularMatrixError
        `rel_frame.world_matrix` が特異な場合。
    """
    target = require_frame(frame)
    m = as_affine(matrix)
    if rel_frame is None:
        return multiply_stack([m, target.world_matrix])
    ref = require_frame(rel_frame, "rel_frame")
    return multiply_stack([target.world_matrix, inverse(ref.world_matrix), m, ref.world_matrix])


def _transform(
    apply: _Apply, frame: Frame, matrix: Mat3Like, rel_frame: Optional[Frame]
) -> Frame:
    new_matrix = transform_matrix(frame, matrix, rel_frame)
    logger.debug("%s: relative=%s", apply.__name__, rel_frame is not None)
    return apply(frame, new_matrix)


def transformed_by_matrix(
    frame: Frame, matrix: Mat3Like, rel_frame: Optional[Frame] = None
) -> Frame:
    """複製版: `matrix` で変換した新しい木を返す。"""
    return _transform(with_world_matrix, frame, matrix, rel_frame)


def transform_with_matrix(
    frame: Frame, matrix: Mat3Like, rel_frame: Optional[Frame] = None
) -> Frame:
    """就地版: `matrix` で変換し、同じ参照を返す。"""
    return _transform(give_world_matrix, frame, matrix, rel_frame)


def translated_frame(frame: Frame, vec: Vec2Like, rel_frame: Optional[Frame] = None) -> Frame:
    return transformed_by_matrix(frame, translation_matrix(vec), rel_frame)


def translate_frame(frame: Frame, vec: Vec2Like, rel_frame: Optional[Frame] = None) -> Frame:
    return transform_with_matrix(frame, translation_matrix(vec), rel_frame)


def rotated_frame(frame: Frame, theta: float, rel_frame: Optional[Frame] = None) -> Frame:
    """複製版の回転（反時計回り, rad）。参照なしなら自身の原点まわり。"""
    return transformed_by_matrix(frame, rotation_matrix(theta), rel_frame)


def rotate_frame(frame: Frame, theta: float, rel_frame: Optional[Frame] = None) -> Frame:
    return transform_with_matrix(frame, rotation_matrix(theta), rel_frame)


def scaled_frame(frame: Frame, scales: Vec2Like, rel_frame: Optional[Frame] = None) -> Frame:
    return transformed_by_matrix(frame, scaling_matrix(scales), rel_frame)


def scale_frame(frame: Frame, scales: Vec2Like, rel_frame: Optional[Frame] = None) -> Frame:
    return transform_with_matrix(frame, scaling_matrix(scales), rel_frame)


# ── 基底の正規化 ───────────────────────


def normalized_matrix(frame: Frame) -> np.ndarray:
    """基底ベクトル（線形部の各列）を 2-ノルム 1 に揃えた行列。平行移動と各列の向きは保つ。

    Raises
    ------
    SingularMatrixError
        長さ 0 の基底ベクトルがある場合。
    """
    m = require_frame(frame).world_matrix
    e1, e2 = basis(m)
    n1, n2 = norm(e1), norm(e2)
    if n1 == 0.0 or n2 == 0.0:
        raise SingularMatrixError("長さ 0 の基底ベクトルは正規化できません。")
    return from_basis(e1 / n1, e2 / n2, m[:2, 2])


def normalized_frame(frame: Frame) -> Frame:
    """複製版: 基底を正規化した新しい木を返す。"""
    return with_world_matrix(frame, normalized_matrix(frame))


def normalize_frame(frame: Frame) -> Frame:
    """就地版: 基底を正規化する。"""
    return give_world_matrix(frame, normalized_matrix(frame))


# ── 基底ノルム比の調整 ───────────────────


def ratio_scale(frame: Frame, ratio: float) -> float:
    """`||γ e1|| / ||e2 / γ|| = ratio` を満たす γ を返す。

    `γ = sqrt(ratio * ||e2|| / ||e1||)`。
    `(γ, 1/γ)` の拡大は行列式（符号付き面積倍率）を変えない。
    """
    r = float(ratio)
    if not math.isfinite(r) or r <= 0.0:
        raise ValueError(f"ratio は正の有限値である必要があります: {ratio!r}")
    e1, e2 = basis(require_frame(frame).world_matrix)
    n1, n2 = norm(e1), norm(e2)
    if n1 == 0.0 or n2 == 0.0:
        raise SingularMatrixError("長さ 0 の基底ベクトルを持つフレームの比率は調整できません。")
    return math.sqrt(r * n2 / n1)


def with_ratio(frame: Frame, ratio: float) -> Frame:
    """複製版: 基底ノルム比を `ratio` にし、行列式は保つ。"""
    gamma = ratio_scale(frame, ratio)
    return scaled_frame(frame, (gamma, 1.0 / gamma))


def give_ratio(frame: Frame, ratio: float) -> Frame:
    """就地版の `with_ratio`。"""
    gamma = ratio_scale(frame, ratio)
    return scale_frame(frame, (gamma, 1.0 / gamma))


__all__ = [
    "translation_matrix",
    "rotation_matrix",
    "scaling_matrix",
    "transform_matrix",
    "transformed_by_matrix",
    "transform_with_matrix",
    "translated_frame",
    "translate_frame",
    "rotated_frame",
    "rotate_frame",
    "scaled_frame",
    "scale_frame",
    "normalized_matrix",
    "normalized_frame",
    "normalize_frame",
    "ratio_scale",
    "with_ratio",
    "give_ratio",
]
