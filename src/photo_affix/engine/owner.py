"""Callbacks the engine uses to report progress and errors."""

from __future__ import annotations

from typing import Protocol

from photo_affix.logging_utils import logger


class EngineOwner(Protocol):
    """Receives loading-state changes and error notifications."""

    def show_content_loading(self, loading: bool) -> None:  # noqa: FBT001
        """Toggle the loading indicator."""
        ...

    def show_error_dialog(self, error: Exception) -> None:
        """Present an error to the user."""
        ...


class LoggingEngineOwner:
    """Owner for headless runs that reports through the shared logger."""

    def __init__(self) -> None:
        self.loading = False
        self.errors: list[Exception] = []

    def show_content_loading(self, loading: bool) -> None:  # noqa: FBT001
        """Record and log the loading state."""
        self.loading = loading
        if loading:
            logger.info("Stitching images...")

    def show_error_dialog(self, error: Exception) -> None:
        """Record an error; the engine has already logged it."""
        self.errors.append(error)
