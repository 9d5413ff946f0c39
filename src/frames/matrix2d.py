"""
どこで: `frames.matrix2d`（最内層の数値プリミティブ）。
何を: 3x3 同次アフィン行列の生成・積・逆行列・転置と、2 ベクトルの内積/ノルム。
なぜ: 上位（coordinates/propagation/transforms）が numpy の細部に触れず、
      「新しい読み取り専用配列を返す純関数」という一つの約束だけで行列を扱えるようにするため。

データモデル（不変条件）:
- 行列は `float64 ndarray`。すべての関数は新しい配列を返し、返り値は `write=False`。
- アフィン行列は `(3, 3)` で最下行 `[0, 0, 1]`、左上 2x2 が線形部、右列上 2 要素が平行移動。

合成順（重要）:
- `multiply_stack([M1, M2, ..., Mn])` は `Mn @ ... @ M2 @ M1` を返す。
  リスト先頭が最も内側（最初に適用される）変換。上位のビルダはすべてこの順序に依存する。

    # 例: 拡大 S を適用してから平行移動 T
    #   multiply_stack([S, T]) == T @ S
"""

from __future__ import annotations

import logging
from functools import reduce
from typing import Iterable

import numpy as np

from common import settings as _settings
from common.types import Mat3Like, Vec2Like

from .errors import NotAffineError, ShapeMismatchError, SingularMatrixError

logger = logging.getLogger(__name__)

_BOTTOM_ROW = np.array([0.0, 0.0, 1.0], dtype=np.float64)


def _frozen(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


def identity() -> np.ndarray:
    """3x3 単位行列。"""
    return _frozen(np.eye(3, dtype=np.float64))


def as_matrix(m: Mat3Like) -> np.ndarray:
    """任意形状の 2 次元配列を float64 の読み取り専用コピーに正規化する。

    Raises
    ------
    ShapeMismatchError
        2 次元配列として解釈できない（ラグド入力・1 次元入力など）場合。
    """
    try:
        arr = np.array(m, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise ShapeMismatchError(f"行列として解釈できない入力です: {exc}") from exc
    if arr.ndim != 2:
        raise ShapeMismatchError(f"行列は 2 次元である必要があります: ndim={arr.ndim}")
    return _frozen(arr)


def as_affine(m: Mat3Like) -> np.ndarray:
    """3x3 アフィン行列へ正規化・検証する。

    Parameters
    ----------
    m : Mat3Like
        `[[a, b, tx], [c, d, ty], [0, 0, 1]]` 形式の行列。

    Returns
    -------
    np.ndarray
        `(3, 3) float64` の読み取り専用配列。

    Raises
    ------
    ShapeMismatchError
        形状が `(3, 3)` でない場合。
    NotAffineError
        最下行が `[0, 0, 1]` でない場合（常に検証）、または
        `settings.VALIDATE_AFFINE` が有効で非有限値を含む場合。
    """
    arr = as_matrix(m)
    if arr.shape != (3, 3):
        raise ShapeMismatchError(f"アフィン行列は形状 (3, 3) である必要があります: {arr.shape}")
    if _settings.get().VALIDATE_AFFINE and not np.all(np.isfinite(arr)):
        raise NotAffineError("行列に非有限値（nan/inf）が含まれています。")
    # 最下行は設定によらず常に検証する
    if not np.allclose(arr[2], _BOTTOM_ROW, rtol=0.0, atol=1e-12):
        raise NotAffineError(f"最下行は [0, 0, 1] である必要があります: {arr[2].tolist()}")
    return arr


def multiply(a: Mat3Like, b: Mat3Like) -> np.ndarray:
    """行列積 `a @ b`（非可換）。列ベクトル束 `(3, N)` との積にも使える。"""
    left = as_matrix(a)
    right = as_matrix(b)
    if left.shape[1] != right.shape[0]:
        raise ShapeMismatchError(f"積の内側次元が一致しません: {left.shape} @ {right.shape}")
    return _frozen(left @ right)


def multiply_stack(matrices: Iterable[Mat3Like]) -> np.ndarray:
    """行列スタックの積 `Mn @ ... @ M1` を返す（空なら単位行列）。

    再帰ではなく累積（reduce）で計算するため、長い変換チェーンでも深さの制約はない。
    """
    mats = [as_matrix(m) for m in matrices]
    if not mats:
        return identity()
    return reduce(lambda acc, m: multiply(m, acc), mats[1:], mats[0])


def determinant(m: Mat3Like) -> float:
    """左上 2x2 線形部の行列式（符号付き面積倍率）。"""
    arr = as_matrix(m)
    return float(arr[0, 0] * arr[1, 1] - arr[0, 1] * arr[1, 0])


def inverse(m: Mat3Like) -> np.ndarray:
    """アフィン行列の逆行列（2x2 ブロックの閉形式）。

    `M = [[L, t], [0, 1]]` に対し `M^-1 = [[L^-1, -L^-1 t], [0, 1]]`。

    Raises
    ------
    SingularMatrixError
        `|det L| <= settings.SINGULAR_EPS` の場合。単位行列などで代用はしない。
    """
    arr = as_affine(m)
    det = determinant(arr)
    eps = _settings.get().SINGULAR_EPS
    if not np.isfinite(det) or abs(det) <= eps:
        logger.debug("singular linear block: det=%r eps=%r", det, eps)
        raise SingularMatrixError(f"線形部の行列式が 0 です（det={det!r}）。逆行列を計算できません。")
    a, b = arr[0, 0], arr[0, 1]
    c, d = arr[1, 0], arr[1, 1]
    lin_inv = np.array([[d, -b], [-c, a]], dtype=np.float64) / det
    out = np.empty((3, 3), dtype=np.float64)
    out[:2, :2] = lin_inv
    out[:2, 2] = -(lin_inv @ arr[:2, 2])
    out[2] = _BOTTOM_ROW
    return _frozen(out)


def transpose(m: Mat3Like) -> np.ndarray:
    """転置（任意形状の 2 次元配列）。"""
    return _frozen(np.array(as_matrix(m).T))


def _as_vector(v: Vec2Like, name: str) -> np.ndarray:
    try:
        arr = np.asarray(v, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise ShapeMismatchError(f"{name} をベクトルとして解釈できません: {exc}") from exc
    if arr.ndim != 1:
        raise ShapeMismatchError(f"{name} は 1 次元ベクトルである必要があります: shape={arr.shape}")
    return arr


def dot(u: Vec2Like, v: Vec2Like) -> float:
    """同じ長さのベクトル同士の内積。"""
    a = _as_vector(u, "u")
    b = _as_vector(v, "v")
    if a.shape != b.shape:
        raise ShapeMismatchError(f"内積の長さが一致しません: {a.shape} vs {b.shape}")
    return float(np.dot(a, b))


def norm(v: Vec2Like) -> float:
    """ユークリッドノルム。"""
    return float(np.linalg.norm(_as_vector(v, "v")))


def basis(m: Mat3Like) -> tuple[np.ndarray, np.ndarray]:
    """線形部の基底ベクトル（第 1 列, 第 2 列）を返す。"""
    arr = as_affine(m)
    return _frozen(np.array(arr[:2, 0])), _frozen(np.array(arr[:2, 1]))


def from_basis(e1: Vec2Like, e2: Vec2Like, origin: Vec2Like = (0.0, 0.0)) -> np.ndarray:
    """基底ベクトル 2 本と原点からアフィン行列を組み立てる（`basis` の逆）。"""
    c1 = _as_vector(e1, "e1")
    c2 = _as_vector(e2, "e2")
    t = _as_vector(origin, "origin")
    if c1.shape != (2,) or c2.shape != (2,) or t.shape != (2,):
        raise ShapeMismatchError("基底ベクトルと原点は長さ 2 である必要があります。")
    out = np.eye(3, dtype=np.float64)
    out[:2, 0] = c1
    out[:2, 1] = c2
    out[:2, 2] = t
    return _frozen(out)


__all__ = [
    "identity",
    "as_matrix",
    "as_affine",
    "multiply",
    "multiply_stack",
    "determinant",
    "inverse",
    "transpose",
    "dot",
    "norm",
    "basis",
    "from_basis",
]
