"""Public package exports for photo_affix."""

from __future__ import annotations

from .bitmaps import FileImageSource, SurfaceProvider
from .config import AffixConfig, ConfigLoader, LayoutConfig
from .engine import (
    EngineOwner,
    LoggingEngineOwner,
    ProcessingFailure,
    ProcessingResult,
    StitchEngine,
)
from .image_io import save_result
from .units import DpConverter

__all__ = [
    "AffixConfig",
    "ConfigLoader",
    "DpConverter",
    "EngineOwner",
    "FileImageSource",
    "LayoutConfig",
    "LoggingEngineOwner",
    "ProcessingFailure",
    "ProcessingResult",
    "StitchEngine",
    "SurfaceProvider",
    "save_result",
]
