"""Stitch engine, placement math and result types."""

from .layout import (
    AxisLayout,
    Placement,
    place_horizontal,
    place_vertical,
    round_half_away,
    sample_size_for,
    scale_to_target,
)
from .owner import EngineOwner, LoggingEngineOwner
from .result import ProcessingFailure, ProcessingResult
from .stitch import StitchEngine

__all__ = [
    "AxisLayout",
    "EngineOwner",
    "LoggingEngineOwner",
    "Placement",
    "ProcessingFailure",
    "ProcessingResult",
    "StitchEngine",
    "place_horizontal",
    "place_vertical",
    "round_half_away",
    "sample_size_for",
    "scale_to_target",
]
