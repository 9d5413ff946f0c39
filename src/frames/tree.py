"""
どこで: `frames.tree`（フレーム木のデータモデル）。
何を: `Frame`（行列を持つノード）と `Opaque`（行列を持たない構造上のノード）、
      およびそれらの走査・複製・リテラル構築ヘルパ。
なぜ: 「行列を持つか」をフィールド探索で都度判定せず、ノード種別を型で 1 度だけ確定させるため。

データモデル（不変条件）:
- `Frame.world_matrix` は `(3, 3) float64` の読み取り専用配列（最下行 `[0, 0, 1]`）。
  名前に反して「親フレームの座標系」での基底/原点を表す（大域座標ではない）。
- `children` は順序付きリストで、親が子を所有する。
- `Opaque` はフレームとして扱わない。行列の書き換え走査では `Opaque` の配下へ降りない。
- `data` / `payload` はエンジンが一切触れない不透明な値。

直感図:

    # root(I)
    # └── A (Frame)
    #     ├── B (Frame)
    #     └── note (Opaque)      ← 行列なし。配下の Frame も走査対象外
    #         └── C (Frame)
    #
    # iter_frames(root) → root, A, B
"""

from __future__ import annotations

import copy
from typing import Any, Iterable, Iterator, Mapping, Optional, Union

import numpy as np

from common.types import Mat3Like

from .errors import InvalidFrameError
from .matrix2d import as_affine, identity


class Frame:
    """親相対のアフィン行列を持つ木ノード。

    フィールド:
    - `world_matrix`: 親座標系での 3x3 同次行列（設定時に検証・読み取り専用化）。
    - `children`: 子ノード（`Frame` / `Opaque`）のリスト。
    - `data`: 任意のペイロード。

    等価性は同一性（`is`）に基づく。数値比較は呼び出し側で行う。
    """

    __slots__ = ("_world_matrix", "children", "data")

    type = "frame"

    def __init__(
        self,
        world_matrix: Mat3Like | None = None,
        children: Iterable["Node"] = (),
        data: Any = None,
    ) -> None:
        self.world_matrix = identity() if world_matrix is None else world_matrix
        self.children: list[Node] = list(children)
        self.data = data

    @property
    def world_matrix(self) -> np.ndarray:
        return self._world_matrix

    @world_matrix.setter
    def world_matrix(self, value: Mat3Like) -> None:
        self._world_matrix = as_affine(value)

    def __repr__(self) -> str:  # pragma: no cover - 表示用
        m = self._world_matrix
        return (
            f"Frame(linear=[[{m[0, 0]:g}, {m[0, 1]:g}], [{m[1, 0]:g}, {m[1, 1]:g}]], "
            f"origin=({m[0, 2]:g}, {m[1, 2]:g}), children={len(self.children)})"
        )


class Opaque:
    """行列を持たない木ノード（構造上の一員だがフレームではない）。"""

    __slots__ = ("payload", "children", "kind")

    def __init__(
        self, payload: Any = None, children: Iterable["Node"] = (), kind: str = "opaque"
    ) -> None:
        self.payload = payload
        self.children: list[Node] = list(children)
        self.kind = kind

    @property
    def type(self) -> str:
        return self.kind

    def __repr__(self) -> str:  # pragma: no cover - 表示用
        return f"Opaque(kind={self.kind!r}, children={len(self.children)})"


Node = Union[Frame, Opaque]


def identity_frame(data: Any = None) -> Frame:
    """単位行列を持つ子なしフレームを新規に返す。"""
    return Frame(identity(), (), data)


def require_frame(node: object, role: str = "frame") -> Frame:
    """`node` が `Frame` であることを確認して返す。

    Raises
    ------
    InvalidFrameError
        `Frame` 以外（`Opaque`・行列を持たない任意オブジェクト）の場合。
    """
    if not isinstance(node, Frame):
        raise InvalidFrameError(
            f"{role} には行列を持つ Frame が必要です: {type(node).__name__}"
        )
    return node


def with_child(frame: Frame, child: Node) -> Frame:
    """`child` を先頭に追加した浅いコピーを返す（入力は不変）。"""
    frame = require_frame(frame)
    return Frame(frame.world_matrix, [child, *frame.children], frame.data)


def iter_frames(root: Node) -> Iterator[tuple[Frame, Optional[Frame]]]:
    """`root` から到達できる全 `Frame` を `(frame, parent)` として深さ優先で列挙する。

    - `Opaque` は列挙せず、その配下へも降りない。
    - 同一ノードが複数箇所に現れても 1 度だけ列挙する（循環参照でも停止する）。
    - 再帰ではなく明示スタックで走査する。
    """
    seen: set[int] = set()
    stack: list[tuple[Node, Optional[Frame]]] = [(root, None)]
    while stack:
        node, parent = stack.pop()
        if not isinstance(node, Frame) or id(node) in seen:
            continue
        seen.add(id(node))
        yield node, parent
        # 文書順に取り出すため逆順に積む
        for child in reversed(node.children):
            stack.append((child, node))


def _shallow_clone(node: Node) -> Node:
    if isinstance(node, Frame):
        # 行列は読み取り専用なので共有してよい
        return Frame(node.world_matrix, (), copy.deepcopy(node.data))
    return Opaque(copy.deepcopy(node.payload), (), node.kind)


def clone_tree(root: Node) -> Node:
    """部分木の構造コピー（所有権は独立、ペイロードも複製）。

    同一ノードが複数箇所に現れる場合は 1 度だけ複製し、コピー側でも同じ共有関係を保つ
    （循環参照でも停止する）。
    """
    new_root = _shallow_clone(root)
    clones: dict[int, Node] = {id(root): new_root}
    stack: list[tuple[Node, Node]] = [(root, new_root)]
    while stack:
        src, dst = stack.pop()
        for child in src.children:
            seen = clones.get(id(child))
            if seen is not None:
                dst.children.append(seen)
                continue
            new_child = _shallow_clone(child)
            clones[id(child)] = new_child
            dst.children.append(new_child)
            stack.append((child, new_child))
    return new_root


_MATRIX_KEYS = ("world_matrix", "worldMatrix")


def from_mapping(obj: Mapping[str, Any]) -> Node:
    """ネストした辞書リテラルからノードを構築する。

    行列キー（`world_matrix` / `worldMatrix`）に値を持つ辞書は `Frame`、
    キーが無いか値が `None` の辞書は `Opaque`。

        # 例
        from_mapping({
            "type": "frame",
            "worldMatrix": [[1, 0, 0], [0, 1, 0], [0, 0, 1]],
            "data": {"name": "main"},
            "children": [{"type": "note", "data": "memo"}],
        })
    """
    children = [from_mapping(c) for c in obj.get("children", ())]
    for key in _MATRIX_KEYS:
        if obj.get(key) is not None:
            return Frame(obj[key], children, obj.get("data"))
    return Opaque(obj.get("data"), children, str(obj.get("type", "opaque")))


def to_mapping(node: Node) -> dict[str, Any]:
    """`from_mapping` の逆変換（行列はネストした list）。"""
    children = [to_mapping(c) for c in node.children]
    if isinstance(node, Frame):
        return {
            "type": node.type,
            "world_matrix": node.world_matrix.tolist(),
            "data": node.data,
            "children": children,
        }
    return {"type": node.kind, "data": node.payload, "children": children}


__all__ = [
    "Frame",
    "Opaque",
    "Node",
    "identity_frame",
    "require_frame",
    "with_child",
    "iter_frames",
    "clone_tree",
    "from_mapping",
    "to_mapping",
]
