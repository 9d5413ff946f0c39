from __future__ import annotations

import numpy as np
import pytest

from frames.coordinates import point_transform
from frames.errors import InvalidFrameError, NotAffineError, SingularMatrixError
from frames.propagation import give_world_matrix, propagated_matrices, with_world_matrix
from frames.tree import Frame, Opaque, clone_tree, from_mapping, iter_frames, to_mapping

NEW = [[2, 0, 3], [0, 1, 4], [0, 0, 1]]

# main に NEW を設置した後の期待値
EXPECTED = {
    "main": [[2, 0, 3], [0, 1, 4], [0, 0, 1]],
    "papaFrame": [[-2, 0, 5], [0, -2, 4], [0, 0, 1]],
    "frame1": [[2, 0, 3], [0, 1, 3], [0, 0, 1]],
    "frame2": [[2, 4, -7], [1, -2, 12], [0, 0, 1]],
    "babyFrame": [[2, 0, 7], [0, 1, 5], [0, 0, 1]],
}


def test_with_world_matrix_fixture(sample_tree: Frame, by_name) -> None:
    before = to_mapping(sample_tree)
    moved = with_world_matrix(sample_tree, NEW)
    assert moved is not sample_tree
    assert to_mapping(sample_tree) == before  # 入力は不変
    got = by_name(moved)
    assert set(got) == set(EXPECTED)
    for name, expected in EXPECTED.items():
        np.testing.assert_allclose(got[name], expected, atol=1e-12, err_msg=name)


def test_give_world_matrix_mutates_same_reference(sample_tree: Frame, by_name) -> None:
    nodes_before = [n for n, _ in iter_frames(sample_tree)]
    out = give_world_matrix(sample_tree, NEW)
    assert out is sample_tree
    assert [n for n, _ in iter_frames(sample_tree)] == nodes_before
    got = by_name(sample_tree)
    for name, expected in EXPECTED.items():
        np.testing.assert_allclose(got[name], expected, atol=1e-12, err_msg=name)


def test_copy_and_in_place_agree(rotation_tree: Frame) -> None:
    matrix = [[12, -12, 5], [12, 12, 13], [0, 0, 1]]
    transformed = with_world_matrix(rotation_tree, matrix)
    give_world_matrix(rotation_tree, matrix)
    for (a, _), (b, _) in zip(iter_frames(transformed), iter_frames(rotation_tree)):
        np.testing.assert_allclose(a.world_matrix, b.world_matrix, rtol=1e-12, atol=1e-12)


def test_relative_geometry_preserved(sample_tree: Frame) -> None:
    frame2 = sample_tree.children[0].children[1]
    baby = frame2.children[0]
    p = [0.7, -3.1]
    before = point_transform(p, baby, frame2)
    moved = with_world_matrix(frame2, [[0.5, -1.5, 2.0], [3.0, 0.25, -7.0], [0, 0, 1]])
    after = point_transform(p, moved.children[0], moved)
    np.testing.assert_allclose(after, before, atol=1e-10)


def test_only_subtree_is_touched(sample_tree: Frame) -> None:
    papa = sample_tree.children[0]
    frame1, frame2 = papa.children
    frame1_before = frame1.world_matrix
    main_before = sample_tree.world_matrix
    give_world_matrix(frame2, [[1, 0, 0], [0, 1, 0], [0, 0, 1]])
    assert frame1.world_matrix is frame1_before
    assert sample_tree.world_matrix is main_before
    np.testing.assert_array_equal(frame2.world_matrix, np.eye(3))


def test_opaque_subtree_passes_through_unchanged() -> None:
    hidden = Frame([[3, 0, 1], [0, 3, 1], [0, 0, 1]])
    note = Opaque({"text": "memo"}, [hidden])
    visible = Frame([[1, 0, 1], [0, 1, 1], [0, 0, 1]])
    root = Frame(children=[note, visible])

    moved = with_world_matrix(root, [[2, 0, 0], [0, 2, 0], [0, 0, 1]])
    moved_note = moved.children[0]
    assert isinstance(moved_note, Opaque)
    assert moved_note.payload == {"text": "memo"}
    np.testing.assert_array_equal(moved_note.children[0].world_matrix, hidden.world_matrix)
    np.testing.assert_allclose(moved.children[1].world_matrix, [[2, 0, 2], [0, 2, 2], [0, 0, 1]])

    give_world_matrix(root, [[2, 0, 0], [0, 2, 0], [0, 0, 1]])
    np.testing.assert_array_equal(hidden.world_matrix, [[3, 0, 1], [0, 3, 1], [0, 0, 1]])


def test_propagated_matrices_is_pure(sample_tree: Frame) -> None:
    snapshot = to_mapping(sample_tree)
    updates = propagated_matrices(sample_tree, NEW)
    assert to_mapping(sample_tree) == snapshot
    assert updates[0][0] is sample_tree
    assert len(updates) == 5


def test_singular_old_matrix_raises_and_leaves_tree_untouched() -> None:
    child = Frame([[1, 0, 1], [0, 1, 1], [0, 0, 1]])
    flat = Frame([[1, 2, 0], [2, 4, 0], [0, 0, 1]], [child])
    child_before = child.world_matrix
    with pytest.raises(SingularMatrixError):
        give_world_matrix(flat, np.eye(3))
    assert child.world_matrix is child_before
    np.testing.assert_array_equal(flat.world_matrix, [[1, 2, 0], [2, 4, 0], [0, 0, 1]])


def test_invalid_inputs() -> None:
    with pytest.raises(InvalidFrameError):
        with_world_matrix(Opaque(), np.eye(3))
    f = Frame()
    with pytest.raises(NotAffineError):
        give_world_matrix(f, [[1, 0, 0], [0, 1, 0], [1, 1, 1]])


def test_clone_then_give_equals_with(sample_tree: Frame) -> None:
    m = [[0.0, -1.0, 2.0], [1.0, 0.0, -3.0], [0, 0, 1]]
    a = give_world_matrix(clone_tree(sample_tree), m)
    b = with_world_matrix(sample_tree, m)
    assert to_mapping(a) == to_mapping(b)


def test_null_matrix_node_passes_through_unchanged() -> None:
    tree = from_mapping(
        {
            "worldMatrix": [[1, 0, 0], [0, 1, 0], [0, 0, 1]],
            "children": [
                {
                    "type": "note",
                    "worldMatrix": None,
                    "data": "memo",
                    "children": [{"worldMatrix": [[1, 0, 1], [0, 1, 1], [0, 0, 1]]}],
                }
            ],
        }
    )
    moved = with_world_matrix(tree, [[2, 0, 5], [0, 2, 0], [0, 0, 1]])
    note = moved.children[0]
    assert isinstance(note, Opaque)
    assert note.payload == "memo"
    np.testing.assert_array_equal(note.children[0].world_matrix, [[1, 0, 1], [0, 1, 1], [0, 0, 1]])


def test_copy_variant_stops_on_cyclic_structure() -> None:
    child = Frame([[1, 0, 1], [0, 1, 0], [0, 0, 1]])
    root = Frame(children=[child])
    child.children.append(root)
    moved = with_world_matrix(root, [[1, 0, 3], [0, 1, 0], [0, 0, 1]])
    np.testing.assert_allclose(moved.children[0].world_matrix, [[1, 0, 4], [0, 1, 0], [0, 0, 1]])
    assert moved.children[0].children[0] is moved
    np.testing.assert_array_equal(root.world_matrix, np.eye(3))
