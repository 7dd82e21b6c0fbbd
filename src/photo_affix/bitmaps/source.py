"""
Lazy, resettable sources of images to stitch.

A source yields one ``ImageBounds`` descriptor per image, reading only
what is needed to know the image size. The consumer marks the descriptor
for decoding, optionally asks for a downsampled decode, and then pulls
the pixels with ``current_bitmap()``. Only the consumer holds decoded
pixels, and only until it closes them.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from PIL import Image

from photo_affix.constants import COLOR_MODE_RGBA, MIN_SAMPLE_SIZE
from photo_affix.logging_utils import logger

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Iterable, Iterator


@dataclass(slots=True)
class ImageBounds:
    """Size of a source image plus the consumer's decode request."""

    width: int
    height: int
    decode_now: bool = False
    sample_size: int = MIN_SAMPLE_SIZE


class ImageSource(Protocol):
    """Contract the stitch engine relies on."""

    def reset(self) -> None:
        """Rewind to before the first image."""
        ...

    def __iter__(self) -> Iterator[ImageBounds]:
        """Yield descriptors from the current position onwards."""
        ...

    def current_bitmap(self) -> Image.Image:
        """Decode the image behind the most recently yielded descriptor."""
        ...


@contextmanager
def decoded(source: ImageSource) -> Iterator[Image.Image]:
    """Yield the current bitmap and close it on every exit path."""
    bitmap = source.current_bitmap()
    try:
        yield bitmap
    finally:
        bitmap.close()


class FileImageSource:
    """Image source backed by a list of image files."""

    def __init__(self, paths: Iterable[str | Path]) -> None:
        self._paths = [Path(p) for p in paths]
        self._index = -1
        self._current: ImageBounds | None = None

    def __len__(self) -> int:
        return len(self._paths)

    @property
    def position(self) -> int:
        """Index of the current image, -1 before the first one."""
        return self._index

    def reset(self) -> None:
        """Rewind to before the first image."""
        self._index = -1
        self._current = None

    def __iter__(self) -> Iterator[ImageBounds]:
        return self

    def __next__(self) -> ImageBounds:
        if self._index + 1 >= len(self._paths):
            self._index = len(self._paths)
            self._current = None
            raise StopIteration
        self._index += 1
        path = self._paths[self._index]
        try:
            with Image.open(path) as img:
                width, height = img.size
        except FileNotFoundError as e:
            msg = f"Image file not found: '{path}'"
            raise FileNotFoundError(msg) from e
        except OSError as e:
            msg = f"Error reading image '{path}': {e!s}"
            raise OSError(msg) from e
        self._current = ImageBounds(width=width, height=height)
        return self._current

    def current_bitmap(self) -> Image.Image:
        """
        Decode the current image as RGBA.

        Honors the descriptor's ``sample_size``: JPEG files use Pillow's
        draft mode so the reduction happens during decoding, other
        formats are reduced right after loading.

        Raises:
            RuntimeError: If no descriptor is current or it was not
                marked with ``decode_now``.
            OSError: If the file cannot be decoded.

        """
        bounds = self._current
        if bounds is None:
            msg = "No current image; iterate the source first"
            raise RuntimeError(msg)
        if not bounds.decode_now:
            msg = "Descriptor has not been marked for decoding"
            raise RuntimeError(msg)

        path = self._paths[self._index]
        factor = max(MIN_SAMPLE_SIZE, bounds.sample_size)
        requested = (
            max(1, bounds.width // factor),
            max(1, bounds.height // factor),
        )
        try:
            with Image.open(path) as img:
                drafted = factor > 1 and img.draft(None, requested) is not None
                img.load()
                if factor > 1 and not drafted:
                    with img.reduce(factor) as reduced:
                        return reduced.convert(COLOR_MODE_RGBA)
                logger.debug("Decoded %s at %dx%d", path, *img.size)
                return img.convert(COLOR_MODE_RGBA)
        except OSError as e:
            msg = f"Error decoding image '{path}': {e!s}"
            raise OSError(msg) from e
