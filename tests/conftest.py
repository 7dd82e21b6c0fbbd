"""
Test configuration and shared fixtures for photo_affix.

This module defines reusable pytest fixtures for image files, rectangle
recording and engine construction. Fake sources and other plain helpers
live in ``support.py``.

Note:
    This file is automatically loaded by pytest and should not be
    renamed.

"""
from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from support import RED, RectRecorder, solid

from photo_affix.config import LayoutConfig
from photo_affix.engine import StitchEngine
from photo_affix.logging_utils import logger
from photo_affix.units import DpConverter


@pytest.fixture
def rect_recorder() -> RectRecorder:
    """Provide a fresh recording rectangle factory."""
    return RectRecorder()


@pytest.fixture
def make_engine(
    rect_recorder: RectRecorder,
) -> Callable[..., StitchEngine]:
    """
    Build StitchEngine instances with layout overrides.

    Every engine records its rectangles in the shared ``rect_recorder``.
    """

    def _build(
        *,
        density: float = 1.0,
        engine_kwargs: dict[str, Any] | None = None,
        **layout: Any,
    ) -> StitchEngine:
        config = LayoutConfig.model_validate(layout)
        return StitchEngine(
            config,
            DpConverter(density),
            rect_factory=rect_recorder,
            **(engine_kwargs or {}),
        )

    return _build


@pytest.fixture
def make_image_file(tmp_path: Path) -> Callable[..., Path]:
    """Save a solid image under tmp_path and return its path."""

    def _make(
        name: str,
        size: tuple[int, int],
        color: tuple[int, ...] = RED,
        fmt: str | None = None,
    ) -> Path:
        path = tmp_path / name
        img = solid(size, color)
        if path.suffix.lower() in (".jpg", ".jpeg"):
            img = img.convert("RGB")
        img.save(path, format=fmt)
        return path

    return _make


@pytest.fixture(autouse=True)
def enable_logger_propagation(monkeypatch: pytest.MonkeyPatch) -> None:
    """Enable propagation for the package logger to allow caplog to work."""
    monkeypatch.setattr(logger, "propagate", True)
