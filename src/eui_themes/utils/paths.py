"""Path and filesystem helper functions."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

LOGGER = logging.getLogger(__name__)


class BootstrapError(OSError):
    """Raised when an output directory cannot be created."""


def ensure_directories(paths: Iterable[Path], logger: logging.Logger | None = None) -> list[Path]:
    """Create all directories in the iterable if they do not exist.

    Existing directories (and the files in them) are left untouched, so calling this twice
    is harmless.
    """

    effective_logger = logger or LOGGER
    created_or_existing: list[Path] = []
    for directory in paths:
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise BootstrapError(f"Cannot create output directory {directory}: {exc}") from exc
        effective_logger.debug("bootstrap.directory_ready path=%s", directory)
        created_or_existing.append(directory)
    return created_or_existing
