# tests/test_cli.py
"""
Tests for the CLI parser and execution logic.

These tests verify argument parsing and validation, config fallback
behavior, exit codes and main entry point integration.

Modules tested:
- build_arg_parser()
- run_from_args()
- main()
"""

from __future__ import annotations

import argparse
import logging
import os
import subprocess
import sys
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from PIL import Image
from support import BLUE, GREEN, RED

import photo_affix.cli as pa_cli
from photo_affix.logging_utils import logger, set_verbosity

if TYPE_CHECKING:
    from _pytest.logging import LogCaptureFixture
    from _pytest.monkeypatch import MonkeyPatch


class TestValidators:
    """Argparse type helpers."""

    def test_size_2d(self) -> None:
        """Sizes parse from WxH, case-insensitively."""
        assert pa_cli.size_2d("1920x1080") == (1920, 1080)
        assert pa_cli.size_2d("10X20") == (10, 20)

    @pytest.mark.parametrize("text", ["1920", "ax10", "0x10", "10x-1"])
    def test_size_2d_invalid(self, text: str) -> None:
        """Malformed or non-positive sizes raise ValueError."""
        with pytest.raises(ValueError):  # noqa: PT011
            pa_cli.size_2d(text)

    @pytest.mark.parametrize("text", ["-1", "x"])
    def test_non_negative_int_invalid(self, text: str) -> None:
        """Negative or non-numeric spacing is rejected."""
        with pytest.raises(ValueError):  # noqa: PT011
            pa_cli.non_negative_int(text)

    @pytest.mark.parametrize("text", ["0", "-2.5", "abc"])
    def test_positive_float_invalid(self, text: str) -> None:
        """Zero, negative or non-numeric values are rejected."""
        with pytest.raises(ValueError):  # noqa: PT011
            pa_cli.positive_float(text)

    def test_wrap_validator_converts_errors(self) -> None:
        """Wrapped validators raise ArgumentTypeError for argparse."""
        wrapped = pa_cli._wrap_validator(pa_cli.size_2d)  # noqa: SLF001
        assert wrapped.__name__ == "size_2d"
        with pytest.raises(argparse.ArgumentTypeError, match="WxH"):
            wrapped("nonsense")


class TestCLIArgumentParsing:
    """Unit tests for CLI flag parsing."""

    def test_defaults(self) -> None:
        """Unset layout and output flags stay None so config wins."""
        args = pa_cli.build_arg_parser().parse_args(["a.png"])

        assert args.images == [Path("a.png")]
        assert args.size is None
        assert args.scale == 1.0
        assert args.stack_horizontally is None
        assert args.scale_priority is None
        assert args.spacing_horizontal is None
        assert args.bg_fill_color is None
        assert args.out is None
        assert args.format is None

    def test_flag_parsing(self) -> None:
        """Layout and output flags map onto config field names."""
        args = pa_cli.build_arg_parser().parse_args([
            "a.png", "b.png",
            "--size", "600x1800",
            "--scale", "0.5",
            "--vertical",
            "--scale-priority",
            "--spacing-v", "8",
            "--spacing-h", "2",
            "--bg-color", "#ffffff",
            "--density", "2",
            "--out", "column.jpg",
            "--format", "JPEG",
            "--quality", "90",
        ])

        assert args.size == (600, 1800)
        assert args.scale == 0.5  # noqa: PLR2004
        assert args.stack_horizontally is False
        assert args.scale_priority is True
        assert args.spacing_vertical == 8  # noqa: PLR2004
        assert args.spacing_horizontal == 2  # noqa: PLR2004
        assert args.bg_fill_color == 0xFFFFFFFF  # noqa: PLR2004
        assert args.density == 2.0  # noqa: PLR2004
        assert args.out == "column.jpg"
        assert args.format == "JPEG"
        assert args.quality == 90  # noqa: PLR2004

    def test_no_scale_priority(self) -> None:
        """The negative flag stores False."""
        args = pa_cli.build_arg_parser().parse_args(
            ["a.png", "--horizontal", "--no-scale-priority"])
        assert args.stack_horizontally is True
        assert args.scale_priority is False

    @pytest.mark.parametrize(
        "argv",
        [
            ["a.png", "--horizontal", "--vertical"],
            ["a.png", "--scale-priority", "--no-scale-priority"],
            ["a.png", "--bg-color", "red"],
            ["a.png", "--size", "100"],
            ["a.png", "--format", "BMP"],
            ["a.png", "--spacing-h", "-3"],
        ],
    )
    def test_invalid_flags_exit(self, argv: list[str]) -> None:
        """Conflicting or malformed flags are parser errors."""
        with pytest.raises(SystemExit):
            pa_cli.build_arg_parser().parse_args(argv)

    def test_required_args_missing(self, monkeypatch: MonkeyPatch) -> None:
        """Test that missing required arguments triggers SystemExit."""
        monkeypatch.setattr(sys, "argv", ["prog"])
        with pytest.raises(SystemExit):
            pa_cli.main()

    def test_size_required(self) -> None:
        """Images without a canvas size are rejected."""
        with pytest.raises(SystemExit):
            pa_cli.main(["a.png"])

    def test_validate_only_requires_config(self) -> None:
        """--validate-config-only is meaningless without --config."""
        with pytest.raises(SystemExit):
            pa_cli.main(["--validate-config-only"])


class TestRunFromArgs:
    """End-to-end runs through main()."""

    def test_stitches_and_saves(
        self,
        make_image_file: Callable[..., Path],
        tmp_path: Path,
    ) -> None:
        """Two images are stitched side by side and written to disk."""
        first = make_image_file("a.png", (100, 50), RED)
        second = make_image_file("b.png", (80, 50), BLUE)
        out = tmp_path / "strip.png"

        code = pa_cli.main([
            str(first), str(second),
            "--size", "190x50",
            "--spacing-h", "10",
            "--bg-color", "#00ff00",
            "--out", str(out),
        ])

        assert code == pa_cli.EXIT_OK
        with Image.open(out) as saved:
            assert saved.size == (190, 50)
            assert saved.convert("RGBA").getpixel((10, 10)) == RED
            assert saved.convert("RGBA").getpixel((105, 10)) == GREEN
            assert saved.convert("RGBA").getpixel((150, 10)) == BLUE

    def test_config_file_supplies_layout(
        self,
        make_image_file: Callable[..., Path],
        tmp_path: Path,
    ) -> None:
        """Layout and output settings may come from a config file."""
        image = make_image_file("a.png", (40, 100), RED)
        out = tmp_path / "col.jpg"
        config = tmp_path / "config.toml"
        config.write_text(
            "[layout]\nstack_horizontally = false\nscale_priority = true\n"
            f"[output]\nformat = 'JPEG'\nquality = 80\noutput = '{out}'\n",
            encoding="utf-8",
        )

        code = pa_cli.main([
            str(image), "--size", "80x200", "--config", str(config)])

        assert code == pa_cli.EXIT_OK
        with Image.open(out) as saved:
            assert saved.format == "JPEG"
            assert saved.size == (80, 200)

    def test_unreadable_image_fails(
        self,
        make_image_file: Callable[..., Path],
        tmp_path: Path,
        caplog: LogCaptureFixture,
    ) -> None:
        """A corrupt input makes the run fail without writing output."""
        good = make_image_file("good.png", (10, 10))
        bad = tmp_path / "bad.png"
        bad.write_bytes(b"definitely not a png")
        out = tmp_path / "never.png"

        with caplog.at_level("ERROR"):
            code = pa_cli.main([
                str(good), str(bad), "--size", "20x10", "--out", str(out)])

        assert code == pa_cli.EXIT_FAILURE
        assert not out.exists()
        assert "image #2" in caplog.text
        errors = [r for r in caplog.records if r.levelname == "ERROR"]
        assert len(errors) == 1

    def test_validate_config_only(
        self,
        tmp_path: Path,
        caplog: LogCaptureFixture,
    ) -> None:
        """A valid config is checked without stitching anything."""
        config = tmp_path / "config.toml"
        config.write_text("[layout]\nspacing_vertical = 4\n",
                          encoding="utf-8")

        with caplog.at_level("INFO"):
            code = pa_cli.main(
                ["--config", str(config), "--validate-config-only"])

        assert code == pa_cli.EXIT_OK
        assert "validated successfully" in caplog.text

    def test_invalid_config_exits(self, tmp_path: Path) -> None:
        """Validation errors are reported as parser errors."""
        config = tmp_path / "config.toml"
        config.write_text("[output]\nquality = 500\n", encoding="utf-8")

        with pytest.raises(SystemExit):
            pa_cli.main(["--config", str(config), "--validate-config-only"])

    def test_log_parameters_logs_config(
        self,
        caplog: LogCaptureFixture,
    ) -> None:
        """The effective settings are logged before stitching."""
        args = pa_cli.build_arg_parser().parse_args([
            "a.png", "--size", "10x20", "--vertical"])
        cfg = pa_cli.pa_config.build_config_from_cli(vars(args))

        with caplog.at_level("INFO"):
            pa_cli.log_parameters(args, cfg)

        assert "Canvas: 10x20" in caplog.text
        assert "Orientation: Vertical" in caplog.text
        assert "Loaded config" not in caplog.text


class TestCLIMainFlow:
    """Container for top-level CLI flow entry point tests."""

    def test_main_invokes_run(self, monkeypatch: MonkeyPatch) -> None:
        """Test that main() runs the CLI flow and returns its code."""
        called: dict[str, bool] = {}

        def fake_run(_: argparse.Namespace) -> int:
            called["ran"] = True
            return 7

        monkeypatch.setattr(pa_cli, "run_from_args", fake_run)

        assert pa_cli.main(["a.png", "--size", "10x10"]) == 7  # noqa: PLR2004
        assert called.get("ran") is True

    def test_verbose_enables_debug(self, monkeypatch: MonkeyPatch) -> None:
        """-v switches the shared logger to DEBUG."""
        monkeypatch.setattr(pa_cli, "run_from_args", lambda _: 0)
        try:
            pa_cli.main(["a.png", "--size", "10x10", "-v"])
            assert logger.level == logging.DEBUG
        finally:
            set_verbosity(False)  # noqa: FBT003


@pytest.mark.integration
def test_module_main_entry(tmp_path: Path) -> None:
    """Integration test: execute the CLI module via subprocess."""
    first = tmp_path / "a.jpg"
    second = tmp_path / "b.jpg"
    Image.new("RGB", (64, 48), color="blue").save(first)
    Image.new("RGB", (32, 48), color="green").save(second)
    out = tmp_path / "out.png"

    env = os.environ.copy()
    env["PYTHONPATH"] = str(Path(__file__).parent.parent / "src")

    result = subprocess.run(  # noqa: S603
        [
            sys.executable,
            "-m",
            "photo_affix.cli",
            str(first),
            str(second),
            "--size",
            "96x48",
            "--out",
            str(out),
        ],
        capture_output=True,
        text=True,
        cwd=Path(__file__).parent.parent.resolve(),
        env=env,
        timeout=180,
        check=False,
    )

    assert result.returncode == 0, (
        f"Script failed with return code {result.returncode}\n"
        f"--- STDOUT ---\n{result.stdout}\n"
        f"--- STDERR ---\n{result.stderr}\n"
    )
    assert out.is_file()
    assert "Stitched image saved to" in result.stderr
