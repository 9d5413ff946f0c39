from __future__ import annotations

import math

import numpy as np
import pytest

# What this tests
# - Public API surface can be imported from the single `api` namespace.
# - A minimal flow `Frame -> rotated_frame -> point_transform` works end to end.


@pytest.mark.smoke
def test_api_import_and_min_flow():
    import api
    from api import Frame, point_transform, rotated_frame

    for name in api.__all__:
        assert hasattr(api, name), name

    root = Frame([[1, 0, 0], [0, 1, 0], [0, 0, 1]])
    arm = Frame([[1, 0, 2], [0, 1, 0], [0, 0, 1]])
    root.children.append(arm)

    turned = rotated_frame(root, math.pi / 2)
    # arm の原点は root 座標で (2, 0) のまま（arm は root に追従）
    tip = point_transform((1.0, 0.0), turned.children[0], turned)
    np.testing.assert_allclose(tip, [3.0, 0.0], atol=1e-12)


@pytest.mark.smoke
def test_api_errors_share_base():
    from api import (
        FrameError,
        InvalidFrameError,
        NotAffineError,
        ShapeMismatchError,
        SingularMatrixError,
    )

    for exc in (InvalidFrameError, NotAffineError, ShapeMismatchError, SingularMatrixError):
        assert issubclass(exc, FrameError)
    assert issubclass(ShapeMismatchError, ValueError)
    assert issubclass(InvalidFrameError, TypeError)


@pytest.mark.smoke
def test_api_reexports_whole_frames_surface():
    import api
    import frames

    missing = sorted(set(frames.__all__) - set(api.__all__))
    assert missing == []
    for name in frames.__all__:
        assert getattr(api, name) is getattr(frames, name), name
