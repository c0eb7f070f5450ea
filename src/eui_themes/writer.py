"""Theme artifact writers with atomic file replacement."""

from __future__ import annotations

import asyncio
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from uuid import uuid4

from eui_themes.compile.variables import VariableTree
from eui_themes.ingest.descriptors import InputDescriptor


class ArtifactWriteError(OSError):
    """Raised when one or more artifacts of a theme could not be written."""


@dataclass(frozen=True, slots=True)
class ArtifactSet:
    """The five output texts of one theme source."""

    css_text: str
    minified_css_text: str
    variable_json_text: str
    type_declaration_text: str
    docs_json_text: str

    def texts(self) -> tuple[str, str, str, str, str]:
        """Texts in the same order as `InputDescriptor.output_paths()`."""

        return (
            self.css_text,
            self.minified_css_text,
            self.variable_json_text,
            self.type_declaration_text,
            self.docs_json_text,
        )


def serialize_variable_tree(tree: VariableTree) -> str:
    """Serialize a variable tree as indented JSON, keeping declaration order."""

    return json.dumps(tree, indent=2, ensure_ascii=False) + "\n"


def _atomic_temp_path(target_path: Path) -> Path:
    """Create a unique temp path next to the target for atomic replacement."""

    return target_path.parent / f".{target_path.name}.{uuid4().hex}.tmp"


def _write_text_atomically(text: str, output_path: Path) -> Path:
    """Write text atomically via temporary file then os.replace."""

    temp_path = _atomic_temp_path(output_path)
    try:
        temp_path.write_text(text, encoding="utf-8")
        os.replace(temp_path, output_path)
    finally:
        if temp_path.exists():
            temp_path.unlink()
    return output_path


async def write_artifacts(artifacts: ArtifactSet, descriptor: InputDescriptor) -> tuple[Path, ...]:
    """Write all five artifacts concurrently.

    Every write is awaited before the first failure is raised; files that were written stay
    in place.
    """

    paths = descriptor.output_paths()
    outcomes = await asyncio.gather(
        *(asyncio.to_thread(_write_text_atomically, text, path) for text, path in zip(artifacts.texts(), paths)),
        return_exceptions=True,
    )
    failures = [(path, outcome) for path, outcome in zip(paths, outcomes) if isinstance(outcome, BaseException)]
    if failures:
        first_error = failures[0][1]
        failed_names = ", ".join(str(path) for path, _ in failures)
        raise ArtifactWriteError(f"Failed to write {failed_names}: {first_error}") from first_error
    return paths


def write_json_atomically(payload: dict[str, Any], output_path: Path) -> Path:
    """Write a JSON report atomically, creating its directory when needed."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    return _write_text_atomically(json.dumps(payload, indent=2, sort_keys=True, default=str) + "\n", output_path)
