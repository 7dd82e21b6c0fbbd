"""
Raster primitives, drawing surfaces and image sources.

The package exposes the most commonly used entry points directly.
"""

from __future__ import annotations

from . import core, source, surface
from .core import (
    Paint,
    Rect,
    argb_to_rgba,
    default_paint,
    normalize_density,
    parse_color,
)
from .source import FileImageSource, ImageBounds, ImageSource, decoded
from .surface import Canvas, SurfaceProvider

__all__ = [
    "Canvas",
    "FileImageSource",
    "ImageBounds",
    "ImageSource",
    "Paint",
    "Rect",
    "SurfaceProvider",
    "argb_to_rgba",
    "core",
    "decoded",
    "default_paint",
    "normalize_density",
    "parse_color",
    "source",
    "surface",
]
