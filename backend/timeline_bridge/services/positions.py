"""
Canvas geometry and the canonical position buckets.

The editor addresses overlays in absolute pixels on a 1080x1920 (9:16) canvas,
while the declarative config only knows named positions. Forward conversion
looks a bucket up; reverse conversion snaps pixels back to the nearest bucket.
"""
import math
from typing import Dict, NamedTuple

from timeline_bridge.schemas.overlay_config import GraphicPosition, TextPosition

CANVAS_W = 1080
CANVAS_H = 1920


class Box(NamedTuple):
    left: int
    top: int
    width: int
    height: int


# Full-width bands for hook / caption / CTA text
POSITION_MAP: Dict[str, Box] = {
    "top": Box(0, 80, CANVAS_W, 300),
    "center": Box(0, 810, CANVAS_W, 300),
    "bottom": Box(0, 1520, CANVAS_W, 300),
}

# Anchor points for a fixed-size graphic box
GRAPHIC_SIZE = 160
GRAPHIC_POSITION_MAP: Dict[str, Box] = {
    "top_left": Box(40, 40, GRAPHIC_SIZE, GRAPHIC_SIZE),
    "top_right": Box(880, 40, GRAPHIC_SIZE, GRAPHIC_SIZE),
    "bottom_left": Box(40, 1720, GRAPHIC_SIZE, GRAPHIC_SIZE),
    "bottom_right": Box(880, 1720, GRAPHIC_SIZE, GRAPHIC_SIZE),
    "center": Box(440, 860, GRAPHIC_SIZE, GRAPHIC_SIZE),
}

# CTA button sits inside the bottom band, inset from both edges
CTA_INSET = 200
CTA_BOX = Box(
    POSITION_MAP["bottom"].left + CTA_INSET,
    POSITION_MAP["bottom"].top,
    CANVAS_W - 2 * CTA_INSET,
    120,
)

FULL_CANVAS = Box(0, 0, CANVAS_W, CANVAS_H)
END_CARD_TEXT_BOX = Box(0, 760, CANVAS_W, 400)


def position_box(position: str | None, default: str = "top") -> Box:
    return POSITION_MAP.get(position or default, POSITION_MAP[default])


def graphic_box(position: str | None) -> Box:
    return GRAPHIC_POSITION_MAP.get(position or "center", GRAPHIC_POSITION_MAP["center"])


def nearest_position(top: float) -> TextPosition:
    """Text bucket whose band top is closest to `top` (first wins on a tie)."""
    return min(POSITION_MAP, key=lambda key: abs(top - POSITION_MAP[key].top))


def nearest_graphic_position(left: float, top: float) -> GraphicPosition:
    """Graphic bucket whose anchor is closest to (left, top) by Euclidean distance."""
    return min(
        GRAPHIC_POSITION_MAP,
        key=lambda key: math.hypot(
            left - GRAPHIC_POSITION_MAP[key].left,
            top - GRAPHIC_POSITION_MAP[key].top,
        ),
    )
