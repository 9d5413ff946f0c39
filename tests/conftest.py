"""共通フィクスチャ。

- 乱数シード固定
- 設定（settings）の環境変数汚染を防ぐ
- 小さなフレーム木の試料
"""

from __future__ import annotations

from typing import Iterator

import numpy as np
import pytest

from common import settings
from frames.tree import Frame, from_mapping, iter_frames


@pytest.fixture(scope="session", autouse=True)
def np_seed() -> None:
    """NumPy の乱数を固定。"""
    np.random.seed(12345)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """`PFR_*` を消した状態で設定を読み直し、テスト後にも読み直す。"""
    for name in ("PFR_SINGULAR_EPS", "PFR_USE_NUMBA", "PFR_VALIDATE_AFFINE", "PFR_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    settings.reload_from_env()
    yield
    monkeypatch.undo()
    settings.reload_from_env()


def _sample_mapping() -> dict:
    # root(I) → papa → {frame1, frame2 → baby}
    baby = {
        "type": "frame",
        "worldMatrix": [[1, 0, 2], [0, 1, 1], [0, 0, 1]],
        "data": {"name": "babyFrame"},
        "children": [],
    }
    frame2 = {
        "type": "frame",
        "worldMatrix": [[1, 2, -5], [1, -2, 8], [0, 0, 1]],
        "data": {"name": "frame2"},
        "children": [baby],
    }
    frame1 = {
        "type": "frame",
        "worldMatrix": [[1, 0, 0], [0, 1, -1], [0, 0, 1]],
        "data": {"name": "frame1"},
        "children": [],
    }
    papa = {
        "type": "frame",
        "worldMatrix": [[-1, 0, 1], [0, -2, 0], [0, 0, 1]],
        "data": {"name": "papaFrame"},
        "children": [frame1, frame2],
    }
    return {
        "type": "frame",
        "worldMatrix": [[1, 0, 0], [0, 1, 0], [0, 0, 1]],
        "data": {"name": "main"},
        "children": [papa],
    }


@pytest.fixture()
def sample_tree() -> Frame:
    """main(I) → papa → {frame1, frame2 → baby} の 5 ノード木。"""
    root = from_mapping(_sample_mapping())
    assert isinstance(root, Frame)
    return root


@pytest.fixture()
def rotation_tree() -> Frame:
    """原点 (9, -6) のフレームと、その子 1 つ。"""
    child = Frame([[1, 1, 10], [-1, 1, -5], [0, 0, 1]])
    return Frame([[1, 0, 9], [0, 1, -6], [0, 0, 1]], [child])


@pytest.fixture()
def by_name():
    """`data["name"]` → `world_matrix` の辞書を作る関数（比較用）。"""

    def _collect(root: Frame) -> dict[str, np.ndarray]:
        return {node.data["name"]: np.asarray(node.world_matrix) for node, _ in iter_frames(root)}

    return _collect
