from __future__ import annotations

import json
from pathlib import Path

import pytest

from eui_themes.ingest.descriptors import describe_input
from eui_themes.utils.paths import BootstrapError, ensure_directories
from eui_themes.writer import ArtifactSet, ArtifactWriteError, serialize_variable_tree, write_artifacts


def _artifacts() -> ArtifactSet:
    variable_json = serialize_variable_tree({"colors": {"primary": "#000000"}, "spacing": {"base": 8}})
    return ArtifactSet(
        css_text="a {\n  color: #000;\n}\n",
        minified_css_text="a{color:#000}\n",
        variable_json_text=variable_json,
        type_declaration_text="declare module 'pkg/dist/eui_x.json' {}\n",
        docs_json_text=variable_json,
    )


def test_serialized_tree_keeps_insertion_order() -> None:
    text = serialize_variable_tree({"spacing": {"base": 8}, "colors": {"primary": "#000000"}})

    assert json.loads(text) == {"spacing": {"base": 8}, "colors": {"primary": "#000000"}}
    assert text.index("spacing") < text.index("colors")
    assert text.endswith("}\n")


def test_serialized_tree_keeps_non_ascii_text_literal() -> None:
    text = serialize_variable_tree({"euiFontFamily": ["Inter UI", "Noto Sans JP 日本"], "euiQuote": "“”"})

    assert '"Noto Sans JP 日本"' in text
    assert '"“”"' in text
    assert "\\u" not in text


@pytest.mark.asyncio
async def test_write_artifacts_writes_all_five(tmp_path: Path) -> None:
    ensure_directories([tmp_path / "dist", tmp_path / "docs"])
    descriptor = describe_input(
        tmp_path / "src" / "x.scss",
        destination_dir=tmp_path / "dist",
        docs_vars_dir=tmp_path / "docs",
        package_name="pkg",
        project_root=tmp_path,
    )
    artifacts = _artifacts()

    written = await write_artifacts(artifacts, descriptor)

    assert written == descriptor.output_paths()
    for path, text in zip(written, artifacts.texts()):
        assert path.read_text(encoding="utf-8") == text
    assert not list((tmp_path / "dist").glob(".*.tmp"))


@pytest.mark.asyncio
async def test_failed_write_keeps_files_already_written(tmp_path: Path) -> None:
    ensure_directories([tmp_path / "dist"])
    descriptor = describe_input(
        tmp_path / "src" / "x.scss",
        destination_dir=tmp_path / "dist",
        docs_vars_dir=tmp_path / "missing-docs",
        package_name="pkg",
        project_root=tmp_path,
    )

    with pytest.raises(ArtifactWriteError, match="missing-docs"):
        await write_artifacts(_artifacts(), descriptor)

    assert (tmp_path / "dist" / "eui_x.css").exists()
    assert (tmp_path / "dist" / "eui_x.json.d.ts").exists()


def test_bootstrap_is_idempotent(tmp_path: Path) -> None:
    dist = tmp_path / "dist"
    ensure_directories([dist])
    existing = dist / "eui_theme_light.css"
    existing.write_text("keep me\n", encoding="utf-8")

    ensure_directories([dist])
    ensure_directories([dist])

    assert existing.read_text(encoding="utf-8") == "keep me\n"


def test_bootstrap_fails_when_path_is_a_file(tmp_path: Path) -> None:
    blocker = tmp_path / "dist"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(BootstrapError):
        ensure_directories([blocker])
