"""Discover theme source files from glob patterns."""

from __future__ import annotations

import glob
import logging
import os
from pathlib import Path
from typing import Callable

LOGGER = logging.getLogger(__name__)

PathFilter = Callable[[Path], bool]


class DiscoveryError(ValueError):
    """Raised when a source pattern is malformed or its directory cannot be read."""


def _validate_pattern(pattern: str) -> None:
    if not pattern.strip():
        raise DiscoveryError("Source pattern must not be empty.")
    depth = 0
    for char in pattern:
        if char == "[":
            depth += 1
        elif char == "]" and depth > 0:
            depth -= 1
    if depth != 0:
        raise DiscoveryError(f"Source pattern has an unterminated character class: {pattern!r}")


def _pattern_base_dir(pattern_path: Path) -> Path:
    """Return the longest leading directory of a pattern that contains no glob magic."""

    parts: list[str] = []
    for part in pattern_path.parts[:-1]:
        if glob.has_magic(part):
            break
        parts.append(part)
    return Path(*parts) if parts else Path(".")


def build_theme_filter(
    target_theme: str | None,
    theme_dir: Path,
    *,
    prefix: str = "theme_",
    extension: str = ".scss",
) -> PathFilter | None:
    """Build a predicate that keeps only `<theme_dir>/<prefix><target_theme><extension>`.

    Returns None when no theme is targeted, meaning every discovered file is kept.
    """

    if target_theme is None:
        return None
    expected = (theme_dir / f"{prefix}{target_theme}{extension}").resolve(strict=False)

    def _matches_target_theme(path: Path) -> bool:
        return path.resolve(strict=False) == expected

    return _matches_target_theme


def discover_source_files(
    pattern: str,
    path_filter: PathFilter | None = None,
    *,
    root: Path | None = None,
    logger: logging.Logger | None = None,
) -> list[Path]:
    """Expand a glob pattern into a sorted list of files, optionally filtered."""

    effective_logger = logger or LOGGER
    _validate_pattern(pattern)

    pattern_path = Path(pattern)
    root_dir = None if pattern_path.is_absolute() else (root or Path.cwd())

    base_dir = _pattern_base_dir(pattern_path)
    if root_dir is not None:
        base_dir = root_dir / base_dir
    if not base_dir.exists():
        effective_logger.warning("discover.base_dir_missing pattern=%s base_dir=%s", pattern, base_dir)
        return []
    if not os.access(base_dir, os.R_OK | os.X_OK):
        raise DiscoveryError(f"Source directory is not readable: {base_dir}")

    try:
        matches = glob.glob(pattern, root_dir=root_dir, recursive=True)
    except OSError as exc:
        raise DiscoveryError(f"Cannot expand source pattern {pattern!r}: {exc}") from exc

    files: list[Path] = []
    for match in sorted(matches):
        candidate = Path(match) if root_dir is None else root_dir / match
        if not candidate.is_file():
            continue
        if path_filter is not None and not path_filter(candidate):
            continue
        files.append(candidate)

    effective_logger.info(
        "discover.complete pattern=%s matched=%s kept=%s filtered=%s",
        pattern,
        len(matches),
        len(files),
        path_filter is not None,
    )
    return files
