#!/usr/bin/env python3
"""
クイックスタート: 2 関節アームのフレーム木を回し、先端位置をログに出す
"""

import logging
import math
import os
import sys

# src を import path の先頭に追加
SRC_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir, "src"))
try:
    while SRC_DIR in sys.path:
        sys.path.remove(SRC_DIR)
except ValueError:
    pass
sys.path.insert(0, SRC_DIR)

from api import Frame, point_transform, points_transform, rotate_frame, translate_frame
from common.logging import setup_default_logging

logger = logging.getLogger("tutorials.quickstart")


def build_arm() -> Frame:
    """base → upper → lower の 3 段の木（各リンク長 2）。"""
    lower = Frame([[1, 0, 4], [0, 1, 0], [0, 0, 1]], data={"name": "lower"})
    upper = Frame([[1, 0, 2], [0, 1, 0], [0, 0, 1]], [lower], data={"name": "upper"})
    return Frame(children=[upper], data={"name": "base"})


def step(base: Frame, t: int) -> None:
    upper = base.children[0]
    lower = upper.children[0]
    # 各関節は自身の原点まわりに回す
    rotate_frame(upper, 0.1)
    rotate_frame(lower, 0.05 * math.sin(t * 0.3))
    if t % 10 == 9:
        translate_frame(base, (0.5, 0.0))


def main(ticks: int = 30) -> None:
    setup_default_logging()
    base = build_arm()
    outline = [[0.0, 0.0], [1.0, 0.0], [1.0, 0.2]]
    for t in range(ticks):
        step(base, t)
        lower = base.children[0].children[0]
        tip = point_transform((2.0, 0.0), lower, Frame())
        logger.info("t=%02d tip=(%.3f, %.3f)", t, tip[0], tip[1])
    world = points_transform(outline, base.children[0].children[0], Frame())
    logger.info("outline in world: %s", world.round(3).tolist())


if __name__ == "__main__":
    main()
