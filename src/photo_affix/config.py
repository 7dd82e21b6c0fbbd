"""
Configuration schema and loader for the photo stitcher.

Defines Pydantic models for the layout preferences, display density and
output encoding, plus a TOML-based loader and a helper that overlays
command-line values on a loaded configuration.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import tomlkit
from pydantic import BaseModel, Field

from photo_affix.config_defaults import (
    DEFAULT_BG_FILL_COLOR,
    DEFAULT_DENSITY,
    DEFAULT_FORMAT,
    DEFAULT_OUTPUT_PATH,
    DEFAULT_QUALITY,
    DEFAULT_SCALE_PRIORITY,
    DEFAULT_SPACING_HORIZONTAL,
    DEFAULT_SPACING_VERTICAL,
    DEFAULT_STACK_HORIZONTALLY,
)
from photo_affix.constants import ARGB_MAX, QUALITY_MAX, QUALITY_MIN
from photo_affix.type_defs import OutputFormat


class LayoutConfig(BaseModel):
    """User preferences that shape how images are stacked."""

    stack_horizontally: bool = DEFAULT_STACK_HORIZONTALLY
    scale_priority: bool = DEFAULT_SCALE_PRIORITY
    spacing_vertical: int = Field(DEFAULT_SPACING_VERTICAL, ge=0)
    spacing_horizontal: int = Field(DEFAULT_SPACING_HORIZONTAL, ge=0)
    bg_fill_color: int = Field(DEFAULT_BG_FILL_COLOR, ge=0, le=ARGB_MAX)


class DisplayConfig(BaseModel):
    """Pixel density used to convert dp spacing into pixels."""

    density: float = Field(DEFAULT_DENSITY, gt=0)


class OutputConfig(BaseModel):
    """Encoding settings for the stitched image."""

    format: OutputFormat = Field(DEFAULT_FORMAT)
    quality: int = Field(DEFAULT_QUALITY, ge=QUALITY_MIN, le=QUALITY_MAX)
    output: str = Field(DEFAULT_OUTPUT_PATH)


class AffixConfig(BaseModel):
    """
    Root configuration object combining all supported sections.

    Mirrors the structure of config.toml, grouping related parameters
    under logical categories.
    """

    # model_validate({}) populates defaults from the Field(...) declarations.
    layout: LayoutConfig = Field(
        default_factory=lambda: LayoutConfig.model_validate({}),
    )
    display: DisplayConfig = Field(
        default_factory=lambda: DisplayConfig.model_validate({}),
    )
    output: OutputConfig = Field(
        default_factory=lambda: OutputConfig.model_validate({}),
    )


class ConfigLoader:
    """
    Loads and parses a TOML configuration file into a typed config object.

    Falls back to defaults for any missing subsections or fields.
    """

    @staticmethod
    def load(path: str) -> AffixConfig:
        """Load and validate a configuration from a TOML file."""
        config_path = Path(path)
        if not config_path.is_file():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)

        with config_path.open("r", encoding="utf-8") as f:
            doc = tomlkit.load(f)

        return AffixConfig.model_validate(doc.unwrap())


# CLI argument name -> (config section, field name)
_CLI_FIELD_MAP: dict[str, tuple[str, str]] = {
    "stack_horizontally": ("layout", "stack_horizontally"),
    "scale_priority": ("layout", "scale_priority"),
    "spacing_vertical": ("layout", "spacing_vertical"),
    "spacing_horizontal": ("layout", "spacing_horizontal"),
    "bg_fill_color": ("layout", "bg_fill_color"),
    "density": ("display", "density"),
    "format": ("output", "format"),
    "quality": ("output", "quality"),
    "out": ("output", "output"),
}


def build_config_from_cli(
    cli_args: dict[str, Any],
    base_config: AffixConfig | None = None,
) -> AffixConfig:
    """
    Overlay command-line values onto a base configuration.

    Only keys that are present in ``cli_args`` and not None override the
    base. The merged data is validated again, so out-of-range CLI values
    raise ``ValidationError`` just like values from a config file.
    """
    base = base_config or AffixConfig.model_validate({})
    data = base.model_dump()
    for arg_name, (section, field) in _CLI_FIELD_MAP.items():
        value = cli_args.get(arg_name)
        if value is not None:
            data[section][field] = value
    return AffixConfig.model_validate(data)
