"""Resolve the version string shown by ``photo-affix --version``."""

from __future__ import annotations

import tomllib
from importlib import metadata as importlib_metadata
from pathlib import Path

from photo_affix.logging_utils import logger

DISTRIBUTION_NAME = "photo-affix"
FALLBACK_VERSION = "0.0.0"


def _version_from_pyproject(start: Path) -> str | None:
    """Return project.version from the nearest pyproject.toml above start."""
    for parent in start.parents:
        candidate = parent / "pyproject.toml"
        if not candidate.is_file():
            continue
        try:
            with candidate.open("rb") as handle:
                data = tomllib.load(handle)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            logger.warning("Error reading %s: %s", candidate, exc)
            return None
        version = data.get("project", {}).get("version")
        if isinstance(version, str) and version.strip():
            return version.strip()
        return None
    return None


def resolve_project_version() -> str:
    """
    Return the installed version, else the checkout's, else a placeholder.

    A source checkout run through ``run_affix.py`` has no distribution
    metadata, so the pyproject.toml next to ``src/`` is consulted.
    """
    try:
        return importlib_metadata.version(DISTRIBUTION_NAME)
    except importlib_metadata.PackageNotFoundError:
        pass
    return (_version_from_pyproject(Path(__file__).resolve())
            or FALLBACK_VERSION)
