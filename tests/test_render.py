from __future__ import annotations

from pathlib import Path

import pytest

from eui_themes.compile.render import EXTRACT_FUNCTION_NAME, RenderError, build_capture_block, render_theme

from conftest import BROKEN_THEME, write_file


def test_render_returns_css_and_variables_from_one_compile(theme_project: Path) -> None:
    source = theme_project / "src" / "themes" / "amsterdam" / "theme_light.scss"

    result = render_theme(source)

    assert result.variables == {
        "euiColorPrimary": "#0a1b2c",
        "euiColorGhost": "rgba(255, 255, 255, 0.5)",
        "colors": {"primary": "#000000"},
        "spacing": {"base": 8},
        "euiFontFamily": ["Inter UI", "-apple-system", "sans-serif"],
        "euiBreakpoints": {"xs": 0, "s": "575px", "m": "768px"},
    }
    assert list(result.variables) == [
        "euiColorPrimary",
        "euiColorGhost",
        "colors",
        "spacing",
        "euiFontFamily",
        "euiBreakpoints",
    ]
    assert ".euiButton" in result.css_text
    assert "#0a1b2c" in result.css_text
    assert "8px" in result.css_text


def test_capture_block_adds_nothing_to_css(theme_project: Path) -> None:
    source = theme_project / "src" / "themes" / "legacy" / "legacy_light.scss"

    result = render_theme(source)

    assert result.variables == {"euiSize": "16px", "euiIsLegacy": True}
    assert "eui-themes" not in result.css_text
    assert result.css_text.count("{") == 1


def test_build_capture_block() -> None:
    block = build_capture_block(["eui-size", "colors"])

    assert block.splitlines() == [
        '@if global-variable-exists("eui-size") { '
        f'$eui-themes-extracted: {EXTRACT_FUNCTION_NAME}("eui-size", $eui-size) !global; }}',
        '@if global-variable-exists("colors") { '
        f'$eui-themes-extracted: {EXTRACT_FUNCTION_NAME}("colors", $colors) !global; }}',
    ]


def test_globals_assigned_inside_blocks_are_captured(tmp_path: Path) -> None:
    source = write_file(
        tmp_path / "theme_global.scss",
        """\
@mixin set-radius {
  $eui-radius: 6px !global;
}
@include set-radius;

@if true {
  $eui-accent: #ff0000 !global;
}
@if false {
  $eui-never-set: 1px !global;
}

.a {
  color: $eui-accent;
  border-radius: $eui-radius;
}
""",
    )

    result = render_theme(source)

    assert result.variables == {"euiRadius": "6px", "euiAccent": "#ff0000"}
    assert "border-radius: 6px" in result.css_text


def test_unquoted_url_does_not_hide_later_variables(tmp_path: Path) -> None:
    source = write_file(
        tmp_path / "theme_url.scss",
        "$eui-bg-image: url(http://example.com/bg.png);\n$eui-size: 16px;\n.a { padding: $eui-size; }\n",
    )

    result = render_theme(source)

    assert list(result.variables) == ["euiBgImage", "euiSize"]
    assert result.variables["euiSize"] == "16px"


def test_syntax_error_raises_render_error(tmp_path: Path) -> None:
    source = write_file(tmp_path / "theme_broken.scss", BROKEN_THEME)

    with pytest.raises(RenderError) as excinfo:
        render_theme(source)

    assert excinfo.value.source_path == source
    assert "theme_broken.scss" in str(excinfo.value)


def test_missing_import_raises_render_error(tmp_path: Path) -> None:
    source = write_file(tmp_path / "theme_orphan.scss", "@import 'does-not-exist';\n$a: 1;\n")

    with pytest.raises(RenderError):
        render_theme(source)


def test_missing_source_raises_render_error(tmp_path: Path) -> None:
    with pytest.raises(RenderError):
        render_theme(tmp_path / "theme_gone.scss")


def test_include_paths_are_searched(tmp_path: Path) -> None:
    shared = tmp_path / "shared"
    write_file(shared / "_tokens.scss", "$eui-radius: 4px;\n")
    source = write_file(tmp_path / "themes" / "theme_x.scss", "@import 'tokens';\n.a { border-radius: $eui-radius; }\n")

    result = render_theme(source, include_paths=[shared])

    assert result.variables == {"euiRadius": "4px"}
    assert "4px" in result.css_text
