"""Helpers shared by the test modules: fake sources and recorders."""
from __future__ import annotations

import asyncio
from typing import Any

from PIL import Image

from photo_affix.bitmaps import ImageBounds, Rect
from photo_affix.constants import COLOR_MODE_RGBA
from photo_affix.engine import ProcessingResult, StitchEngine

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)
TRANSPARENT = (0, 0, 0, 0)


class MemoryImageSource:
    """
    Image source over in-memory images.

    Entries may be images or bare ``(width, height)`` tuples; the latter
    only report bounds and fail when decoded. ``fail_at`` makes decoding
    the image at that 1-based position raise ``OSError``.
    """

    def __init__(
        self,
        entries: list[Image.Image | tuple[int, int]],
        fail_at: int | None = None,
    ) -> None:
        self.entries = entries
        self.fail_at = fail_at
        self.position = -1
        self.reset_count = 0
        self.descriptors: list[ImageBounds] = []
        self.handed_out: list[Image.Image] = []
        self.closed: list[Image.Image] = []
        self._current: ImageBounds | None = None

    def reset(self) -> None:
        self.position = -1
        self._current = None
        self.reset_count += 1

    def __iter__(self) -> MemoryImageSource:
        return self

    def __next__(self) -> ImageBounds:
        if self.position + 1 >= len(self.entries):
            raise StopIteration
        self.position += 1
        entry = self.entries[self.position]
        width, height = entry if isinstance(entry, tuple) else entry.size
        self._current = ImageBounds(width=width, height=height)
        self.descriptors.append(self._current)
        return self._current

    def current_bitmap(self) -> Image.Image:
        assert self._current is not None
        assert self._current.decode_now
        if self.fail_at == self.position + 1:
            msg = "corrupt image"
            raise OSError(msg)
        entry = self.entries[self.position]
        if isinstance(entry, tuple):
            msg = "bounds-only entry cannot be decoded"
            raise OSError(msg)
        bitmap = entry.copy()
        original_close = bitmap.close

        def close() -> None:
            self.closed.append(bitmap)
            original_close()

        bitmap.close = close  # type: ignore[method-assign]
        self.handed_out.append(bitmap)
        return bitmap

    @property
    def all_released(self) -> bool:
        """True when every handed-out bitmap has been closed."""
        return all(
            any(b is c for c in self.closed) for b in self.handed_out)


class RectRecorder:
    """Rectangle factory that remembers every rectangle it builds."""

    def __init__(self) -> None:
        self.rects: list[Rect] = []

    def __call__(self, left: int, top: int, right: int, bottom: int) -> Rect:
        rect = Rect(left, top, right, bottom)
        self.rects.append(rect)
        return rect


def solid(size: tuple[int, int], color: tuple[int, ...] = RED) -> Image.Image:
    """Create a solid RGBA image."""
    return Image.new(COLOR_MODE_RGBA, size, color)


def run_stitch(engine: StitchEngine, *args: Any) -> ProcessingResult:
    """Drive the async stitch call to completion."""
    return asyncio.run(engine.stitch(*args))
