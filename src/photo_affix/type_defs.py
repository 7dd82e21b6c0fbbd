"""
Defines shared type aliases for the photo stitcher.

Centralizes reusable type hints to improve consistency and readability.
"""
from __future__ import annotations

from typing import Literal

OutputFormat = Literal["PNG", "JPEG", "WEBP"]
Axis = Literal["horizontal", "vertical"]
RGBA = tuple[int, int, int, int]

OUTPUT_FORMATS: tuple[OutputFormat, ...] = ("PNG", "JPEG", "WEBP")
