"""
どこで: `frames.coordinates`
何を: 2 つのフレーム間で点座標・ベクトル座標を変換する。
なぜ: 描画/アニメーション側が任意フレームでの位置を毎ティック問い合わせられるようにするため。

要点:
- 変換行列は `frame_to_frame_matrix(f1, f2) = inv(f2.world_matrix) @ f1.world_matrix`。
  両フレームの行列が同じ親座標系で表されていることが前提（検証しない。呼び出し側の責務）。
- 点は同次座標 `(x, y, 1)`、自由ベクトルは `(x, y, 0)` に持ち上げる。
  ベクトルは線形部のみを受け、平行移動の影響を受けない（両者を混同しないこと）。
- 一括版は逆行列を 1 度だけ計算し、全行へ同じ行列を適用する。
  行ごとの適用は numba カーネル（`PFR_USE_NUMBA=0` で numpy の行列積）。
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from numba import njit  # type: ignore[attr-defined]

from common import settings as _settings
from common.types import Vec2Like

from .errors import ShapeMismatchError
from .matrix2d import inverse, multiply
from .tree import Frame, require_frame

# ── 同次座標の持ち上げ/落とし込み ───────────────────


def _as_coord(coords: Vec2Like) -> np.ndarray:
    try:
        arr = np.asarray(coords, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise ShapeMismatchError(f"座標として解釈できません: {exc}") from exc
    if arr.shape != (2,):
        raise ShapeMismatchError(f"座標は長さ 2 である必要があります: shape={arr.shape}")
    return arr


def _as_coords(coords_seq: Sequence[Vec2Like] | np.ndarray) -> np.ndarray:
    try:
        arr = np.asarray(coords_seq, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        # ラグド入力（次元の揃わない行）を含む
        raise ShapeMismatchError(f"座標列の次元が揃っていません: {exc}") from exc
    if arr.size == 0:
        return np.empty((0, 2), dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ShapeMismatchError(f"座標列は形状 (N, 2) である必要があります: shape={arr.shape}")
    return arr


def prep_loc(coords: Vec2Like) -> np.ndarray:
    """点 `(x, y)` → 列ベクトル `[[x], [y], [1]]`。"""
    xy = _as_coord(coords)
    return np.array([[xy[0]], [xy[1]], [1.0]], dtype=np.float64)


def prep_vec(coords: Vec2Like) -> np.ndarray:
    """ベクトル `(x, y)` → 列ベクトル `[[x], [y], [0]]`。"""
    xy = _as_coord(coords)
    return np.array([[xy[0]], [xy[1]], [0.0]], dtype=np.float64)


def _lift(coords_seq: Sequence[Vec2Like] | np.ndarray, w: float) -> np.ndarray:
    xy = _as_coords(coords_seq)
    out = np.empty((3, xy.shape[0]), dtype=np.float64)
    out[:2] = xy.T
    out[2] = w
    return out


def prep_locs(coords_seq: Sequence[Vec2Like] | np.ndarray) -> np.ndarray:
    """点列 `(N, 2)` → 列ベクトル束 `(3, N)`（最下行 1）。"""
    return _lift(coords_seq, 1.0)


def prep_vecs(coords_seq: Sequence[Vec2Like] | np.ndarray) -> np.ndarray:
    """ベクトル列 `(N, 2)` → 列ベクトル束 `(3, N)`（最下行 0）。"""
    return _lift(coords_seq, 0.0)


def prep_array(column: np.ndarray | Sequence[Sequence[float]]) -> np.ndarray:
    """列ベクトル `(3, 1)` → `(2,)`（同次成分を落とす）。"""
    arr = np.asarray(column, dtype=np.float64)
    if arr.shape != (3, 1):
        raise ShapeMismatchError(f"同次列ベクトルは形状 (3, 1) である必要があります: {arr.shape}")
    return arr[:2, 0].copy()


def prep_arrays(columns: np.ndarray | Sequence[Sequence[float]]) -> np.ndarray:
    """列ベクトル束 `(3, N)` → `(N, 2)`。"""
    arr = np.asarray(columns, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[0] != 3:
        raise ShapeMismatchError(f"同次列ベクトル束は形状 (3, N) である必要があります: {arr.shape}")
    return np.ascontiguousarray(arr[:2].T)


# ── フレーム間変換 ───────────────────────────


def frame_to_frame_matrix(frame1: Frame, frame2: Frame) -> np.ndarray:
    """`frame1` の局所座標を `frame2` の局所座標へ写す行列。

    Raises
    ------
    InvalidFrameError
        どちらかが `Frame` でない場合。
    SingularMatrixError
        `frame2.world_matrix` が特異な場合。
    """
    f1 = require_frame(frame1, "frame1")
    f2 = require_frame(frame2, "frame2")
    return multiply(inverse(f2.world_matrix), f1.world_matrix)


@njit(cache=True)  # type: ignore[misc]
def _apply_affine_rows(m: np.ndarray, xy: np.ndarray, w: float) -> np.ndarray:
    """各行 `(x, y)` に `m @ (x, y, w)` を適用し、上 2 成分を返す。"""
    n = xy.shape[0]
    out = np.empty((n, 2), dtype=np.float64)
    for i in range(n):
        x = xy[i, 0]
        y = xy[i, 1]
        out[i, 0] = m[0, 0] * x + m[0, 1] * y + m[0, 2] * w
        out[i, 1] = m[1, 0] * x + m[1, 1] * y + m[1, 2] * w
    return out


def _transform_rows(
    coords_seq: Sequence[Vec2Like] | np.ndarray, frame1: Frame, frame2: Frame, w: float
) -> np.ndarray:
    xy = _as_coords(coords_seq)
    m = np.array(frame_to_frame_matrix(frame1, frame2))
    if xy.shape[0] == 0:
        return xy
    if _settings.get().USE_NUMBA:
        return _apply_affine_rows(m, np.ascontiguousarray(xy), float(w))
    return prep_arrays(m @ _lift(xy, w))


def point_transform(coords: Vec2Like, frame1: Frame, frame2: Frame) -> np.ndarray:
    """`frame1` での点座標を `frame2` での点座標へ変換する。

    Parameters
    ----------
    coords : Vec2Like
        `frame1` の局所座標 `(x, y)`。
    frame1, frame2 : Frame
        変換元/変換先。同じ親座標系で行列が表されていること。

    Returns
    -------
    np.ndarray
        形状 `(2,)` の座標。
    """
    m = frame_to_frame_matrix(frame1, frame2)
    return prep_array(m @ prep_loc(coords))


def points_transform(
    coords_seq: Sequence[Vec2Like] | np.ndarray, frame1: Frame, frame2: Frame
) -> np.ndarray:
    """点列版 `point_transform`。`(N, 2)` → `(N, 2)`（逆行列は 1 度だけ計算）。"""
    return _transform_rows(coords_seq, frame1, frame2, 1.0)


def vector_transform(coords: Vec2Like, frame1: Frame, frame2: Frame) -> np.ndarray:
    """`frame1` での自由ベクトルを `frame2` へ変換する（平行移動は無関係）。"""
    m = frame_to_frame_matrix(frame1, frame2)
    return prep_array(m @ prep_vec(coords))


def vectors_transform(
    coords_seq: Sequence[Vec2Like] | np.ndarray, frame1: Frame, frame2: Frame
) -> np.ndarray:
    """ベクトル列版 `vector_transform`。"""
    return _transform_rows(coords_seq, frame1, frame2, 0.0)


__all__ = [
    "prep_loc",
    "prep_locs",
    "prep_vec",
    "prep_vecs",
    "prep_array",
    "prep_arrays",
    "frame_to_frame_matrix",
    "point_transform",
    "points_transform",
    "vector_transform",
    "vectors_transform",
]
