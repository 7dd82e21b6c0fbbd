"""CLI argument parsing and main entry point."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import TYPE_CHECKING, TypeVar

from pydantic import ValidationError

import photo_affix.config as pa_config
import photo_affix.image_io as pa_image_io
from photo_affix.bitmaps import FileImageSource, parse_color
from photo_affix.config_defaults import DEFAULT_SELECTED_SCALE
from photo_affix.engine import LoggingEngineOwner, StitchEngine
from photo_affix.logging_utils import logger, set_verbosity
from photo_affix.type_defs import OUTPUT_FORMATS
from photo_affix.units import DpConverter
from photo_affix.version import resolve_project_version

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Callable, Sequence

T = TypeVar("T")

_SIZE_PARTS = 2
EXIT_OK = 0
EXIT_FAILURE = 1


def non_negative_int(text: str) -> int:
    """Argparse-style validator for integers that may be zero."""
    try:
        value = int(text)
    except ValueError as exc:
        msg = "must be an integer"
        raise ValueError(msg) from exc
    if value < 0:
        msg = "must not be negative"
        raise ValueError(msg)
    return value


def positive_float(text: str) -> float:
    """Argparse-style validator for strictly positive floats."""
    try:
        value = float(text)
    except ValueError as exc:
        msg = "must be a number"
        raise ValueError(msg) from exc
    if value <= 0:
        msg = "must be positive"
        raise ValueError(msg)
    return value


def size_2d(text: str) -> tuple[int, int]:
    """Parse ``WxH`` strings into integer tuples and validate positivity."""
    parts = text.lower().split("x")
    if len(parts) != _SIZE_PARTS:
        msg = "must look like WxH, e.g., 1920x1080"
        raise ValueError(msg)
    try:
        width, height = int(parts[0]), int(parts[1])
    except ValueError as exc:
        msg = "width and height must be integers"
        raise ValueError(msg) from exc
    if width <= 0 or height <= 0:
        msg = "width and height must be positive"
        raise ValueError(msg)
    return width, height


def _wrap_validator(validator: Callable[[str], T]) -> Callable[[str], T]:
    """Convert ``ValueError`` from a validator into ``ArgumentTypeError``."""

    def wrapper(text: str) -> T:
        try:
            return validator(text)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc

    wrapper.__name__ = validator.__name__
    return wrapper


def build_arg_parser() -> argparse.ArgumentParser:
    """Construct the argument parser for the command-line interface."""
    p = argparse.ArgumentParser(
        prog="photo-affix",
        description=(
            "Stack photos side by side or top to bottom into one image."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  photo-affix a.jpg b.jpg --size 1800x600 --out strip.png\n"
            "  photo-affix a.jpg b.jpg --vertical --size 600x1800 "
            "--spacing-v 8 --bg-color '#ffffff' --out column.jpg "
            "--format JPEG --quality 90\n"
        ),
    )
    p.add_argument(
        "images", nargs="*", type=Path,
        help="Images to stitch, in order")
    p.add_argument(
        "--version", action="version",
        version=f"%(prog)s {resolve_project_version()}")
    p.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log every image placement")

    canvas = p.add_argument_group("canvas")
    canvas.add_argument(
        "--size", type=_wrap_validator(size_2d),
        help="Output canvas size as WxH, e.g., 1800x600")
    canvas.add_argument(
        "--scale", type=_wrap_validator(positive_float),
        default=DEFAULT_SELECTED_SCALE,
        help=f"Zoom applied to every image (default: "
             f"{DEFAULT_SELECTED_SCALE})")

    layout = p.add_argument_group("layout")
    axis = layout.add_mutually_exclusive_group()
    axis.add_argument(
        "--horizontal", dest="stack_horizontally", action="store_const",
        const=True, default=None, help="Stack images left to right")
    axis.add_argument(
        "--vertical", dest="stack_horizontally", action="store_const",
        const=False, help="Stack images top to bottom")
    priority = layout.add_mutually_exclusive_group()
    priority.add_argument(
        "--scale-priority", dest="scale_priority", action="store_const",
        const=True, default=None,
        help="Scale images up so they fill the canvas across the stack")
    priority.add_argument(
        "--no-scale-priority", dest="scale_priority", action="store_const",
        const=False,
        help="Scale images down so they never exceed the canvas")
    layout.add_argument(
        "--spacing-h", dest="spacing_horizontal",
        type=_wrap_validator(non_negative_int),
        help="Gap between horizontally stacked images, in dp")
    layout.add_argument(
        "--spacing-v", dest="spacing_vertical",
        type=_wrap_validator(non_negative_int),
        help="Gap between vertically stacked images, in dp")
    layout.add_argument(
        "--bg-color", dest="bg_fill_color", type=_wrap_validator(parse_color),
        help="Background fill as #rrggbb or #aarrggbb (default: none)")
    layout.add_argument(
        "--density", type=_wrap_validator(positive_float),
        help="Pixels per dp used for spacing")

    output = p.add_argument_group("output")
    output.add_argument("--out", type=str, help="Output file path")
    output.add_argument(
        "--format", choices=list(OUTPUT_FORMATS), help="Output format")
    output.add_argument(
        "--quality", type=int, help="Encoder quality, 0-100")

    cfg = p.add_argument_group("config")
    cfg.add_argument(
        "--config", type=str, help="Path to config.toml file")
    cfg.add_argument(
        "--validate-config-only", action="store_true",
        help="Validate config file and exit without stitching")

    return p


def log_parameters(
    args: argparse.Namespace,
    cfg: pa_config.AffixConfig,
) -> None:
    """Log the effective parameters of a run."""
    if args.config:
        logger.info("Loaded config from: %s", args.config)
    logger.info("Images: %d", len(args.images))
    logger.info("Canvas: %dx%d", *args.size)
    logger.info("Scale: %g", args.scale)
    logger.info("Orientation: %s",
                "Horizontal" if cfg.layout.stack_horizontally
                else "Vertical")
    logger.info("Scale Priority: %s",
                "Enabled" if cfg.layout.scale_priority else "Disabled")
    logger.info("Spacing (dp): horizontal %d, vertical %d",
                cfg.layout.spacing_horizontal, cfg.layout.spacing_vertical)
    logger.info("Background: %#010x", cfg.layout.bg_fill_color)
    logger.info("Output: %s (%s, quality %d)", cfg.output.output,
                cfg.output.format, cfg.output.quality)


def run_from_args(args: argparse.Namespace) -> int:
    """Stitch images according to parsed arguments; return an exit code."""
    base_cfg: pa_config.AffixConfig | None = None
    if args.config:
        base_cfg = pa_config.ConfigLoader.load(args.config)
        if args.validate_config_only:
            logger.info("Config %s validated successfully.", args.config)
            return EXIT_OK

    cfg = pa_config.build_config_from_cli(vars(args), base_config=base_cfg)
    log_parameters(args, cfg)

    engine = StitchEngine(cfg.layout, DpConverter(cfg.display.density))
    owner = LoggingEngineOwner()
    engine.setup(FileImageSource(args.images), owner)

    width, height = args.size
    result = asyncio.run(engine.stitch(
        args.scale, width, height, cfg.output.format, cfg.output.quality,
    ))
    if not result.succeeded:
        return EXIT_FAILURE
    if result.output is None:
        logger.warning("No images were stitched")
        return EXIT_FAILURE

    try:
        pa_image_io.save_result(result, cfg.output.output)
    finally:
        result.output.close()
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command-line interface."""
    arg_parser = build_arg_parser()
    args = arg_parser.parse_args(argv)
    set_verbosity(args.verbose)
    if args.validate_config_only:
        if not args.config:
            arg_parser.error("--validate-config-only requires --config")
    elif not args.images or args.size is None:
        arg_parser.error(
            "the following arguments are required: images, --size")

    try:
        return run_from_args(args)
    except ValidationError as exc:
        arg_parser.error(f"invalid configuration:\n{exc}")


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
