from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from eui_themes.config import AppSettings, load_settings

SETTINGS_YAML = """\
paths:
  dist_root: dist
  docs_vars_root: docs/_json
  artifacts_root: artifacts
  logs_root: logs
families:
  - name: legacy
    source_pattern: src/themes/legacy/legacy_*.scss
  - name: amsterdam
    source_pattern: src/themes/amsterdam/theme_*.scss
build:
  named_theme_dir: src/themes/amsterdam
"""

COLORS_PARTIAL = """\
// shared palette
$eui-color-primary: #0a1b2c !default;
$eui-color-ghost: rgba(255, 255, 255, 0.5);
"""

THEME_LIGHT = """\
@import 'colors';

$colors: (primary: #000000);
$spacing: (base: 8);
$eui-font-family: 'Inter UI', -apple-system, sans-serif;
$eui-breakpoints: (xs: 0, s: 575px, m: 768px);

.euiButton {
  color: $eui-color-primary;
  background: map-get($colors, primary);
  padding: map-get($spacing, base) * 1px;
  font-family: $eui-font-family;
}
"""

THEME_DARK = """\
@import 'colors';

$colors: (primary: #ffffff);
$spacing: (base: 16);

.euiButton {
  color: $eui-color-primary;
  padding: map-get($spacing, base) * 1px;
}
"""

LEGACY_LIGHT = """\
$eui-size: 16px;
$eui-is-legacy: true;

.euiPanel {
  padding: $eui-size;
}
"""

BROKEN_THEME = """\
$colors: (primary: #000000);

.euiButton {
  color: ;
"""


def write_file(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TARGET_THEME", raising=False)
    monkeypatch.delenv("EUI_THEMES_SETTINGS_FILE", raising=False)


@pytest.fixture()
def theme_project(tmp_path: Path) -> Path:
    """A throwaway project with one legacy theme and two named themes."""

    write_file(tmp_path / "configs" / "settings.yaml", SETTINGS_YAML)
    write_file(tmp_path / "src" / "themes" / "legacy" / "legacy_light.scss", LEGACY_LIGHT)
    amsterdam = tmp_path / "src" / "themes" / "amsterdam"
    write_file(amsterdam / "_colors.scss", COLORS_PARTIAL)
    write_file(amsterdam / "theme_light.scss", THEME_LIGHT)
    write_file(amsterdam / "theme_dark.scss", THEME_DARK)
    return tmp_path


@pytest.fixture()
def make_settings(theme_project: Path) -> Callable[..., AppSettings]:
    def _make(**overrides: object) -> AppSettings:
        return load_settings(config_file=theme_project / "configs" / "settings.yaml", **overrides)

    return _make
