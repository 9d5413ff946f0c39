"""
どこで: `frames` パッケージ（フレーム木エンジン本体）。
何を: 行列プリミティブ・座標変換・行列伝播・変換ビルダを提供。
なぜ: 2D アフィン座標系の木を、描画など上位層から独立した純計算として扱うため。

依存の向き: errors → matrix2d → tree → coordinates / propagation → transforms
"""

from .coordinates import (
    frame_to_frame_matrix,
    point_transform,
    points_transform,
    prep_array,
    prep_arrays,
    prep_loc,
    prep_locs,
    prep_vec,
    prep_vecs,
    vector_transform,
    vectors_transform,
)
from .errors import (
    FrameError,
    InvalidFrameError,
    NotAffineError,
    ShapeMismatchError,
    SingularMatrixError,
)
from .propagation import give_world_matrix, propagated_matrices, with_world_matrix
from .tree import (
    Frame,
    Node,
    Opaque,
    clone_tree,
    from_mapping,
    identity_frame,
    iter_frames,
    require_frame,
    to_mapping,
    with_child,
)
from .transforms import (
    give_ratio,
    normalize_frame,
    normalized_frame,
    normalized_matrix,
    ratio_scale,
    rotate_frame,
    rotated_frame,
    rotation_matrix,
    scale_frame,
    scaled_frame,
    scaling_matrix,
    transform_matrix,
    transform_with_matrix,
    transformed_by_matrix,
    translate_frame,
    translated_frame,
    translation_matrix,
    with_ratio,
)

__all__ = [
    # tree
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
    # coordinates
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
    # propagation
    "propagated_matrices",
    "with_world_matrix",
    "give_world_matrix",
    # transforms
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
    # errors
    "FrameError",
    "SingularMatrixError",
    "InvalidFrameError",
    "ShapeMismatchError",
    "NotAffineError",
]
