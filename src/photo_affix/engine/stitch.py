"""
Stitch engine: composites a stream of images into one canvas.

The engine reads the layout preferences once per call, allocates the
canvas, and walks the image source on a worker thread, decoding one
image at a time, drawing it into its placement and releasing it before
moving on. Owner callbacks (loading indicator, error dialog) run on the
foreground context: the event loop awaiting ``stitch``, or the
``main_executor`` when one is supplied.
"""

from __future__ import annotations

import asyncio
import functools
from typing import TYPE_CHECKING, Any

from photo_affix.bitmaps.core import Rect, default_paint, normalize_density
from photo_affix.bitmaps.source import decoded
from photo_affix.bitmaps.surface import SurfaceProvider
from photo_affix.config_defaults import DEFAULT_FORMAT, DEFAULT_QUALITY
from photo_affix.constants import COLOR_TRANSPARENT
from photo_affix.engine.layout import AxisLayout
from photo_affix.engine.result import ProcessingFailure, ProcessingResult
from photo_affix.logging_utils import logger
from photo_affix.units import DpConverter

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Callable
    from concurrent.futures import Executor

    from PIL import Image

    from photo_affix.bitmaps.core import Paint
    from photo_affix.bitmaps.source import ImageSource
    from photo_affix.config import LayoutConfig
    from photo_affix.engine.layout import RectFactory
    from photo_affix.engine.owner import EngineOwner
    from photo_affix.type_defs import OutputFormat


class StitchEngine:
    """Stacks images horizontally or vertically onto a fixed-size canvas."""

    def __init__(  # noqa: PLR0913
        self,
        config: LayoutConfig,
        dp_converter: DpConverter | None = None,
        surface_provider: SurfaceProvider | None = None,
        *,
        paint_factory: Callable[[], Paint] = default_paint,
        rect_factory: RectFactory = Rect,
        main_executor: Executor | None = None,
        io_executor: Executor | None = None,
    ) -> None:
        self._config = config
        self._dp_converter = dp_converter or DpConverter()
        self._surface_provider = surface_provider or SurfaceProvider()
        self._paint_factory = paint_factory
        self._rect_factory = rect_factory
        self._main_executor = main_executor
        self._io_executor = io_executor
        self._source: ImageSource | None = None
        self._owner: EngineOwner | None = None

    def setup(self, source: ImageSource, owner: EngineOwner) -> None:
        """Bind the image source and the owner used by ``stitch``."""
        self._source = source
        self._owner = owner

    async def stitch(  # noqa: PLR0913
        self,
        selected_scale: float,
        result_width: int,
        result_height: int,
        output_format: OutputFormat = DEFAULT_FORMAT,
        quality: int = DEFAULT_QUALITY,
    ) -> ProcessingResult:
        """
        Stitch every image from the source onto a new canvas.

        ``output_format`` and ``quality`` are not interpreted here; they
        travel with the result to whatever encodes it.

        Returns:
            The stitched result. On failure the result has no output,
            a zero count and the ``ProcessingFailure`` in ``error``; the
            owner has been shown the error and the source was reset.

        Raises:
            RuntimeError: If ``setup`` has not been called.
            ValueError: If the scale or canvas size is not positive.

        """
        source, owner = self._source, self._owner
        if source is None or owner is None:
            msg = "setup() must be called before stitch()"
            raise RuntimeError(msg)
        if selected_scale <= 0:
            msg = f"Scale must be positive, got {selected_scale}"
            raise ValueError(msg)
        if result_width <= 0 or result_height <= 0:
            msg = (f"Canvas size must be positive, "
                   f"got {result_width}x{result_height}")
            raise ValueError(msg)

        prefs = self._config.model_copy()
        horizontal = prefs.stack_horizontally
        spacing_dp = (prefs.spacing_horizontal if horizontal
                      else prefs.spacing_vertical)
        spacing = int(int(self._dp_converter.to_px(spacing_dp))
                      * selected_scale)
        layout = AxisLayout(
            axis="horizontal" if horizontal else "vertical",
            selected_scale=selected_scale,
            result_width=result_width,
            result_height=result_height,
            spacing=spacing,
            scale_priority=prefs.scale_priority,
            rect_factory=self._rect_factory,
        )
        logger.info(
            "Stitching %s onto %dx%d canvas (scale %g, spacing %dpx)",
            layout.axis, result_width, result_height, selected_scale,
            spacing,
        )

        await self._on_main(owner.show_content_loading, True)
        try:
            loop = asyncio.get_running_loop()
            try:
                processed, output = await loop.run_in_executor(
                    self._io_executor,
                    functools.partial(
                        self._composite, source, layout, prefs.bg_fill_color,
                    ),
                )
            except ProcessingFailure as failure:
                cause = failure.__cause__
                if cause is not None:
                    logger.error("%s (%s)", failure, type(cause).__name__)
                else:
                    logger.error("%s", failure)
                await self._on_main(owner.show_error_dialog, failure)
                source.reset()
                return ProcessingResult(error=failure)
        finally:
            await self._on_main(owner.show_content_loading, False)

        logger.info("Stitched %d image(s)", processed)
        if processed == 0:
            output.close()
            return ProcessingResult()
        return ProcessingResult(
            processed_count=processed,
            output=output,
            format=output_format,
            quality=quality,
        )

    def _composite(
        self,
        source: ImageSource,
        layout: AxisLayout,
        bg_fill_color: int,
    ) -> tuple[int, Image.Image]:
        """Draw every image onto a fresh canvas; runs on the io executor."""
        processed = 0
        started = False
        result: Image.Image | None = None
        try:
            result = self._surface_provider.create_empty_bitmap(
                layout.result_width, layout.result_height)
            canvas = self._surface_provider.canvas_for(result)
            if bg_fill_color != COLOR_TRANSPARENT:
                canvas.fill_color(bg_fill_color)
            paint = self._paint_factory()

            started = True
            cursor = 0
            source.reset()
            for bounds in source:
                placement = layout.place(bounds.width, bounds.height, cursor)
                logger.debug(
                    "Image #%d (%dx%d) -> %s",
                    processed + 1, bounds.width, bounds.height,
                    placement.rect,
                )
                bounds.decode_now = True
                bounds.sample_size = placement.sample_size
                with decoded(source) as bitmap:
                    normalize_density(bitmap)
                    canvas.draw_image_into(bitmap, placement.rect, paint)
                cursor = placement.next_cursor
                processed += 1
        except Exception as exc:
            if result is not None:
                result.close()
            index = processed + 1 if started else None
            raise ProcessingFailure(index, str(exc) or repr(exc)) from exc
        return processed, result

    async def _on_main(self, fn: Callable[..., Any], *args: Any) -> None:
        """Run an owner callback on the foreground context."""
        if self._main_executor is None:
            fn(*args)
            return
        await asyncio.wrap_future(self._main_executor.submit(fn, *args))
