"""
どこで: `api` 入口（高レベル公開 API）。
何を: `frames` の公開関数・ノード型・例外と、ロギング初期化 `setup_default_logging` を再輸出。
なぜ: 利用者が単一名前空間からフレーム木の構築→変換→座標問い合わせまで完結できるようにするため。

Usage:
    from api import Frame, rotated_frame, point_transform

    root = Frame([[1, 0, 0], [0, 1, 0], [0, 0, 1]])
    arm = Frame([[1, 0, 2], [0, 1, 0], [0, 0, 1]])
    root.children.append(arm)

    turned = rotated_frame(root, 0.5)          # 新しい木（root は不変）
    tip = point_transform((1.0, 0.0), turned.children[0], turned)
"""

from common.logging import setup_default_logging
from frames import (
    Frame,
    FrameError,
    InvalidFrameError,
    Node,
    NotAffineError,
    Opaque,
    ShapeMismatchError,
    SingularMatrixError,
    clone_tree,
    frame_to_frame_matrix,
    from_mapping,
    give_ratio,
    give_world_matrix,
    identity_frame,
    iter_frames,
    normalize_frame,
    normalized_frame,
    normalized_matrix,
    point_transform,
    points_transform,
    prep_array,
    prep_arrays,
    prep_loc,
    prep_locs,
    prep_vec,
    prep_vecs,
    propagated_matrices,
    ratio_scale,
    require_frame,
    rotate_frame,
    rotated_frame,
    rotation_matrix,
    scale_frame,
    scaled_frame,
    scaling_matrix,
    to_mapping,
    transform_matrix,
    transform_with_matrix,
    transformed_by_matrix,
    translate_frame,
    translated_frame,
    translation_matrix,
    vector_transform,
    vectors_transform,
    with_child,
    with_ratio,
    with_world_matrix,
)
from frames import matrix2d as matrix2d

__all__ = [
    # ノード
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
    # 同次座標ヘルパ
    "prep_loc",
    "prep_locs",
    "prep_vec",
    "prep_vecs",
    "prep_array",
    "prep_arrays",
    # 座標変換
    "frame_to_frame_matrix",
    "point_transform",
    "points_transform",
    "vector_transform",
    "vectors_transform",
    # 行列の設置（複製版 / 就地版）
    "propagated_matrices",
    "with_world_matrix",
    "give_world_matrix",
    # 変換行列とビルダ
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
    # 行列プリミティブ
    "matrix2d",
    # 例外
    "FrameError",
    "SingularMatrixError",
    "InvalidFrameError",
    "ShapeMismatchError",
    "NotAffineError",
    # ロギング
    "setup_default_logging",
]

# バージョン情報
__version__ = "2026.10"
