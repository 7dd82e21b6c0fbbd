"""Destination canvas allocation and drawing."""

from __future__ import annotations

from typing import TYPE_CHECKING

from PIL import Image

from photo_affix.bitmaps.core import argb_to_rgba
from photo_affix.constants import COLOR_MODE_RGBA

if TYPE_CHECKING:  # pragma: no cover
    from photo_affix.bitmaps.core import Paint, Rect

_TRANSPARENT_RGBA = (0, 0, 0, 0)


class SurfaceProvider:
    """Allocates empty destination bitmaps and wraps them in canvases."""

    def create_empty_bitmap(self, width: int, height: int) -> Image.Image:
        """Return a fully transparent RGBA image of the given size."""
        if width <= 0 or height <= 0:
            msg = f"Bitmap size must be positive, got {width}x{height}"
            raise ValueError(msg)
        return Image.new(COLOR_MODE_RGBA, (width, height), _TRANSPARENT_RGBA)

    def canvas_for(self, bitmap: Image.Image) -> Canvas:
        """Return a drawing surface over ``bitmap``."""
        return Canvas(bitmap)


class Canvas:
    """Drawing surface that mutates the wrapped image in place."""

    def __init__(self, image: Image.Image) -> None:
        if image.mode != COLOR_MODE_RGBA:
            msg = f"Canvas requires an RGBA image, got {image.mode}"
            raise ValueError(msg)
        self.image = image

    def fill_color(self, color: int) -> None:
        """Replace every pixel with the packed ARGB ``color``."""
        self.image.paste(argb_to_rgba(color), (0, 0, *self.image.size))

    def draw_image_into(
        self,
        source: Image.Image,
        dst: Rect,
        paint: Paint,
    ) -> None:
        """
        Resample ``source`` to ``dst`` and composite it over the canvas.

        Parts of ``dst`` outside the canvas are clipped. Empty rectangles
        draw nothing.
        """
        if dst.is_empty():
            return
        visible_w = min(dst.width, self.image.width - dst.left)
        visible_h = min(dst.height, self.image.height - dst.top)
        if visible_w <= 0 or visible_h <= 0:
            return

        temporaries: list[Image.Image] = []
        try:
            if source.mode != COLOR_MODE_RGBA:
                source = source.convert(
                    COLOR_MODE_RGBA, dither=paint.dither_mode)
                temporaries.append(source)
            scaled = source.resize(dst.size(), paint.resample)
            temporaries.append(scaled)
            self.image.alpha_composite(
                scaled,
                dest=(dst.left, dst.top),
                source=(0, 0, visible_w, visible_h),
            )
        finally:
            for temp in temporaries:
                temp.close()
