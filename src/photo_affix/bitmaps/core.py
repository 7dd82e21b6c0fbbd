"""Core raster primitives: rectangles, colors, paints and density."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from PIL import Image

from photo_affix.constants import ARGB_MAX, DENSITY_INFO_KEYS

if TYPE_CHECKING:  # pragma: no cover
    from photo_affix.type_defs import RGBA

_HEX_RGB_LENGTH = 6
_HEX_ARGB_LENGTH = 8
_OPAQUE_ALPHA = 0xFF000000


@dataclass(frozen=True, slots=True)
class Rect:
    """Axis-aligned rectangle in integer pixel coordinates."""

    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self) -> int:
        """Width."""
        return self.right - self.left

    @property
    def height(self) -> int:
        """Height."""
        return self.bottom - self.top

    def size(self) -> tuple[int, int]:
        """Return (width, height)."""
        return self.width, self.height

    def is_empty(self) -> bool:
        """Return True when the rectangle covers no pixels."""
        return self.width <= 0 or self.height <= 0


def argb_to_rgba(color: int) -> RGBA:
    """Split a packed ARGB integer into an (r, g, b, a) tuple."""
    if not 0 <= color <= ARGB_MAX:
        msg = f"ARGB color out of range: {color:#x}"
        raise ValueError(msg)
    return (
        (color >> 16) & 0xFF,
        (color >> 8) & 0xFF,
        color & 0xFF,
        (color >> 24) & 0xFF,
    )


def parse_color(text: str) -> int:
    """
    Parse ``#rrggbb`` or ``#aarrggbb`` into a packed ARGB integer.

    Six-digit colors are treated as fully opaque.
    """
    stripped = text.strip().lstrip("#")
    if len(stripped) not in (_HEX_RGB_LENGTH, _HEX_ARGB_LENGTH):
        msg = "color must look like #rrggbb or #aarrggbb"
        raise ValueError(msg)
    try:
        value = int(stripped, 16)
    except ValueError as exc:
        msg = "color contains invalid hex digits"
        raise ValueError(msg) from exc
    if len(stripped) == _HEX_RGB_LENGTH:
        value |= _OPAQUE_ALPHA
    return value


def normalize_density(image: Image.Image) -> Image.Image:
    """Drop density metadata so draws never apply a secondary scale."""
    for key in DENSITY_INFO_KEYS:
        image.info.pop(key, None)
    return image


@dataclass(frozen=True, slots=True)
class Paint:
    """Options applied when an image is resampled onto a canvas."""

    filter_bitmap: bool = True
    anti_alias: bool = True
    dither: bool = True

    @property
    def resample(self) -> Image.Resampling:
        """Resampling filter implied by the filter/anti-alias flags."""
        if self.filter_bitmap and self.anti_alias:
            return Image.Resampling.LANCZOS
        if self.filter_bitmap:
            return Image.Resampling.BILINEAR
        return Image.Resampling.NEAREST

    @property
    def dither_mode(self) -> Image.Dither:
        """Dither used when a source must be converted to the canvas mode."""
        if self.dither:
            return Image.Dither.FLOYDSTEINBERG
        return Image.Dither.NONE


def default_paint() -> Paint:
    """Return the filtered, anti-aliased, dithered paint used for stitching."""
    return Paint(filter_bitmap=True, anti_alias=True, dither=True)
