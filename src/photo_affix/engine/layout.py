"""
Placement arithmetic for stacking images along one axis.

All functions here are pure: given an image's intrinsic size, the user's
zoom and the fixed canvas size they return where the image lands and
where the next one starts. The stitching axis is the one images are
concatenated along; the perpendicular ("across") axis always spans the
whole canvas.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass

from photo_affix.bitmaps.core import Rect
from photo_affix.constants import MIN_SAMPLE_SIZE
from photo_affix.type_defs import Axis

RectFactory = Callable[[int, int, int, int], Rect]


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def scale_to_target(
    along: int,
    across: int,
    selected_scale: float,
    target: int,
    *,
    scale_priority: bool,
) -> tuple[int, int]:
    """
    Return the scaled (along, across) size of an image.

    The image is first scaled by ``selected_scale``. With
    ``scale_priority`` ("fill up") an across size smaller than ``target``
    is raised to it; without ("fill down") a larger one is lowered to it.
    In both cases the along size is recomputed from the aspect ratio.
    """
    if along <= 0 or across <= 0:
        msg = f"Image has a zero or negative dimension: {along}x{across}"
        raise ValueError(msg)
    ratio = along / across

    scaled_along = round_half_away(along * selected_scale)
    scaled_across = round_half_away(across * selected_scale)

    if scale_priority:
        if scaled_across < target:
            scaled_across = target
            scaled_along = round_half_away(scaled_across * ratio)
    elif scaled_across > target:
        scaled_across = target
        scaled_along = round_half_away(scaled_across * ratio)
    return scaled_along, scaled_across


def sample_size_for(
    width: int,
    height: int,
    dst_width: int,
    dst_height: int,
) -> int:
    """
    Return the integer downsample factor to decode an image at.

    The factor is the largest one that keeps the decoded image at least
    as large as its destination on both axes; never below 1. An empty
    destination draws nothing and needs no reduction.
    """
    if width <= 0 or height <= 0:
        msg = "Extents must be positive to compute a sample size"
        raise ValueError(msg)
    if dst_width <= 0 or dst_height <= 0:
        return MIN_SAMPLE_SIZE
    return max(MIN_SAMPLE_SIZE, min(width // dst_width, height // dst_height))


@dataclass(frozen=True, slots=True)
class Placement:
    """Where one image is drawn and where the next one starts."""

    scaled_width: int
    scaled_height: int
    rect: Rect
    sample_size: int
    next_cursor: int


def place_horizontal(  # noqa: PLR0913
    width: int,
    height: int,
    cursor: int,
    *,
    selected_scale: float,
    result_height: int,
    spacing: int,
    scale_priority: bool,
    rect_factory: RectFactory = Rect,
) -> Placement:
    """Place an image left to right, spanning the full canvas height."""
    scaled_width, scaled_height = scale_to_target(
        width, height, selected_scale, result_height,
        scale_priority=scale_priority,
    )
    rect = rect_factory(cursor, 0, cursor + scaled_width, result_height)
    return Placement(
        scaled_width=scaled_width,
        scaled_height=scaled_height,
        rect=rect,
        sample_size=sample_size_for(width, height, *rect.size()),
        next_cursor=rect.right + spacing,
    )


def place_vertical(  # noqa: PLR0913
    width: int,
    height: int,
    cursor: int,
    *,
    selected_scale: float,
    result_width: int,
    spacing: int,
    scale_priority: bool,
    rect_factory: RectFactory = Rect,
) -> Placement:
    """Place an image top to bottom, spanning the full canvas width."""
    scaled_height, scaled_width = scale_to_target(
        height, width, selected_scale, result_width,
        scale_priority=scale_priority,
    )
    rect = rect_factory(0, cursor, result_width, cursor + scaled_height)
    return Placement(
        scaled_width=scaled_width,
        scaled_height=scaled_height,
        rect=rect,
        sample_size=sample_size_for(width, height, *rect.size()),
        next_cursor=rect.bottom + spacing,
    )


@dataclass(frozen=True, slots=True)
class AxisLayout:
    """Placement settings for one stitch call along a single axis."""

    axis: Axis
    selected_scale: float
    result_width: int
    result_height: int
    spacing: int
    scale_priority: bool
    rect_factory: RectFactory = Rect

    def place(self, width: int, height: int, cursor: int) -> Placement:
        """Place an image of intrinsic ``width`` x ``height`` at ``cursor``."""
        if self.axis == "horizontal":
            return place_horizontal(
                width, height, cursor,
                selected_scale=self.selected_scale,
                result_height=self.result_height,
                spacing=self.spacing,
                scale_priority=self.scale_priority,
                rect_factory=self.rect_factory,
            )
        return place_vertical(
            width, height, cursor,
            selected_scale=self.selected_scale,
            result_width=self.result_width,
            spacing=self.spacing,
            scale_priority=self.scale_priority,
            rect_factory=self.rect_factory,
        )
