"""Ingestion package for theme source discovery."""

from eui_themes.ingest.descriptors import InputDescriptor, describe_input
from eui_themes.ingest.discover import (
    DiscoveryError,
    PathFilter,
    build_theme_filter,
    discover_source_files,
)

__all__ = [
    "InputDescriptor",
    "describe_input",
    "DiscoveryError",
    "PathFilter",
    "build_theme_filter",
    "discover_source_files",
]
