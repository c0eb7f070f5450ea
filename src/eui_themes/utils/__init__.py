"""Shared utility helpers."""

from eui_themes.utils.paths import BootstrapError, ensure_directories
from eui_themes.utils.time_utils import now_utc

__all__ = [
    "BootstrapError",
    "ensure_directories",
    "now_utc",
]
