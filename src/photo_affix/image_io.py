"""Encoding of stitched results."""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from PIL import Image

from photo_affix.constants import (
    COLOR_BLACK,
    COLOR_MODE_RGB,
    COLOR_MODE_RGBA,
)
from photo_affix.logging_utils import logger

if TYPE_CHECKING:  # pragma: no cover
    from photo_affix.engine.result import ProcessingResult

# Formats whose encoders accept a quality setting
_LOSSY_FORMATS = frozenset({"JPEG", "WEBP"})
# Formats that cannot store an alpha channel
_OPAQUE_FORMATS = frozenset({"JPEG"})


def flatten(img: Image.Image, bg_color: tuple[int, int, int]) -> Image.Image:
    """Composite an image with alpha over a solid color, returning RGB."""
    if img.mode == COLOR_MODE_RGB:
        return img
    bg = Image.new(COLOR_MODE_RGBA, img.size, (*bg_color, 255))
    comp = Image.alpha_composite(bg, img.convert(COLOR_MODE_RGBA))
    return comp.convert(COLOR_MODE_RGB)


def save_result(result: ProcessingResult, path: str | Path) -> Path:
    """
    Encode a stitched result to ``path`` using its format and quality.

    JPEG cannot carry transparency, so transparent areas become black.

    Returns:
        The path written.

    Raises:
        ValueError: If the result has no output image.

    """
    if result.output is None or result.format is None:
        msg = "Result has no output image to save"
        raise ValueError(msg)

    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    image = result.output
    if result.format in _OPAQUE_FORMATS:
        image = flatten(image, COLOR_BLACK)

    params: dict[str, int] = {}
    if result.format in _LOSSY_FORMATS and result.quality is not None:
        params["quality"] = result.quality
    image.save(out_path, format=result.format, **params)

    logger.info("Stitched image saved to: %s", out_path)
    return out_path
