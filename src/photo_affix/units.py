"""Density-independent unit conversion."""

from __future__ import annotations

from dataclasses import dataclass

from photo_affix.config_defaults import DEFAULT_DENSITY


@dataclass(frozen=True, slots=True)
class DpConverter:
    """Convert density-independent pixels (dp) into device pixels."""

    density: float = DEFAULT_DENSITY

    def __post_init__(self) -> None:
        if self.density <= 0:
            msg = f"Density must be positive, got {self.density}"
            raise ValueError(msg)

    def to_px(self, dp: float) -> float:
        """Return the pixel size of ``dp`` at this converter's density."""
        return dp * self.density
