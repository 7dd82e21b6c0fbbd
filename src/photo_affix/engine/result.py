"""Outcome types returned by the stitch engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from PIL import Image

    from photo_affix.type_defs import OutputFormat


class ProcessingFailure(Exception):
    """
    Raised when an image cannot be decoded, placed or drawn.

    ``index`` is the 1-based position of the offending image, or None
    when the failure happened before the first image (canvas setup).
    The underlying error is chained as ``__cause__``.
    """

    def __init__(self, index: int | None, detail: str) -> None:
        self.index = index
        if index is None:
            msg = f"Failed to prepare the canvas: {detail}"
        else:
            msg = f"Failed to stitch image #{index}: {detail}"
        super().__init__(msg)


@dataclass(frozen=True, slots=True)
class ProcessingResult:
    """
    Result of one stitch call.

    ``output`` is present exactly when ``processed_count`` is positive.
    A failed call carries ``error`` and no output; an empty input carries
    neither.
    """

    processed_count: int = 0
    output: Image.Image | None = None
    format: OutputFormat | None = None
    quality: int | None = None
    error: ProcessingFailure | None = None

    def __post_init__(self) -> None:
        if self.processed_count < 0:
            msg = "processed_count must not be negative"
            raise ValueError(msg)
        if (self.output is not None) != (self.processed_count > 0):
            msg = "output must be present exactly when images were processed"
            raise ValueError(msg)
        if self.error is not None and self.processed_count:
            msg = "a failed result cannot report processed images"
            raise ValueError(msg)

    @property
    def succeeded(self) -> bool:
        """True unless the call failed."""
        return self.error is None
