"""
どこで: `frames.propagation`（フレーム行列の付け替えと子孫への伝播）。
何を: フレーム `F` に新しい行列 `M` を設置し、各子孫の「F に対する相対配置」が不変になるよう
      子孫すべての行列を更新する。複製版（copy-on-write）と就地版（in-place）の 2 入口を持つ。
なぜ: 親の移動/回転/拡大に子が追従する木構造を、一つの純粋な計算関数で両入口から共有するため。

アルゴリズム:
- 変更前の行列の逆 `Minv = inv(F.world_matrix)` を 1 度だけ捕捉する。
- 子孫フレーム N ごとに `multiply_stack([N, Minv, M]) = M @ Minv @ N` を計算する。
  各子孫は捕捉済みの `Minv`/`M` のみを使い、直近の親の差分には依存しない（走査順は任意）。
- 最後に `F.world_matrix = M`。
- `Opaque` ノードとその配下は書き換えない。

    # 例: root(I) に M=[[2,0,3],[0,1,4],[0,0,1]] を設置
    #   子 A=[[-1,0,1],[0,-2,0]] → M @ I^-1 @ A = [[-2,0,5],[0,-2,4]]
"""

from __future__ import annotations

import logging

import numpy as np

from common.types import Mat3Like

from .matrix2d import as_affine, inverse, multiply_stack
from .tree import Frame, clone_tree, iter_frames, require_frame

logger = logging.getLogger(__name__)


def propagated_matrices(frame: Frame, matrix: Mat3Like) -> list[tuple[Frame, np.ndarray]]:
    """`frame` に `matrix` を設置したときの新しい行列を計算する（木は変更しない）。

    Returns
    -------
    list[tuple[Frame, np.ndarray]]
        `(ノード, 新しい行列)` の列。先頭は `frame` 自身（新しい行列は `matrix`）。

    Raises
    ------
    InvalidFrameError
        `frame` が `Frame` でない場合。
    SingularMatrixError
        現在の `frame.world_matrix` が特異な場合。
    ShapeMismatchError, NotAffineError
        `matrix` がアフィン行列として不正な場合。
    """
    root = require_frame(frame)
    new_matrix = as_affine(matrix)
    old_inv = inverse(root.world_matrix)
    updates: list[tuple[Frame, np.ndarray]] = [(root, new_matrix)]
    for node, parent in iter_frames(root):
        if parent is None:
            continue
        updates.append((node, multiply_stack([node.world_matrix, old_inv, new_matrix])))
    return updates


def _apply(updates: list[tuple[Frame, np.ndarray]]) -> None:
    for node, new_matrix in updates:
        node.world_matrix = new_matrix


def with_world_matrix(frame: Frame, matrix: Mat3Like) -> Frame:
    """複製版: 部分木をディープコピーしてから行列を設置し、コピーを返す（入力は不変）。"""
    new_frame = clone_tree(require_frame(frame))
    updates = propagated_matrices(new_frame, matrix)  # type: ignore[arg-type]
    _apply(updates)
    logger.debug("with_world_matrix: rewrote %d frame(s) on a copy", len(updates))
    return new_frame  # type: ignore[return-value]


def give_world_matrix(frame: Frame, matrix: Mat3Like) -> Frame:
    """就地版: `frame` とその子孫フレームの `world_matrix` を直接書き換え、同じ参照を返す。

    書き換えるのは `frame` と `Opaque` を跨がずに到達できる子孫フレームのみ。
    新しい行列はすべて代入前に計算するため、例外時に木は変更されない。
    """
    updates = propagated_matrices(frame, matrix)
    _apply(updates)
    logger.debug("give_world_matrix: rewrote %d frame(s) in place", len(updates))
    return frame


__all__ = ["propagated_matrices", "with_world_matrix", "give_world_matrix"]
