"""Rotation, axis and put-type constants for the packing engine."""

from __future__ import annotations

from enum import IntEnum


class RotationType(IntEnum):
    """
    Axis permutation applied to an item's base (W, H, D).

    rotation code meaning:
      0:(W,H,D) 1:(H,W,D) 2:(H,D,W) 3:(D,H,W) 4:(D,W,H) 5:(W,D,H)
    """

    RT_WHD = 0
    RT_HWD = 1
    RT_HDW = 2
    RT_DHW = 3
    RT_DWH = 4
    RT_WDH = 5


class Axis(IntEnum):
    WIDTH = 0
    HEIGHT = 1
    DEPTH = 2


class PutType(IntEnum):
    """Presentation order of a container's placed items."""

    GENERAL = 1
    OPEN_TOP = 2


ALL_ROTATIONS: tuple[RotationType, ...] = (
    RotationType.RT_WHD,
    RotationType.RT_HWD,
    RotationType.RT_HDW,
    RotationType.RT_DHW,
    RotationType.RT_DWH,
    RotationType.RT_WDH,
)

# Depth stays vertical: only the footprint may turn.
NO_UPDOWN_ROTATIONS: tuple[RotationType, ...] = (
    RotationType.RT_WHD,
    RotationType.RT_HWD,
)

CUBE_KIND = "cube"
DEFAULT_COLOR = "#3498db"
