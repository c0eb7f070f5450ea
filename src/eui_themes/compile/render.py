"""Render one SCSS theme into CSS and its variable tree with a single libsass compile."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

import sass

from eui_themes.compile.variables import (
    UnsupportedVariableError,
    VariableTree,
    collect_global_variable_names,
    to_variable_node,
    variable_key,
)

LOGGER = logging.getLogger(__name__)

EXTRACT_FUNCTION_NAME = "eui-themes-extract-variable"
_CAPTURE_SINK = "$eui-themes-extracted"


class RenderError(RuntimeError):
    """Raised when a theme source cannot be compiled."""

    def __init__(self, source_path: Path, message: str) -> None:
        super().__init__(f"Failed to render {source_path}: {message}")
        self.source_path = source_path


@dataclass(frozen=True, slots=True)
class RenderResult:
    """CSS text and variable tree produced by the same render."""

    css_text: str
    variables: VariableTree


def build_capture_block(names: Iterable[str]) -> str:
    """Build SCSS statements that pass each global variable to the capture function.

    The statements are plain variable assignments, so they add nothing to the CSS output. Each one
    is guarded by `global-variable-exists`, since a `!global` assignment inside a mixin or a
    control block may never run.
    """

    lines = [
        f'@if global-variable-exists("{name}") {{ '
        f'{_CAPTURE_SINK}: {EXTRACT_FUNCTION_NAME}("{name}", ${name}) !global; }}'
        for name in names
    ]
    return "\n".join(lines)


def render_theme(
    source_path: Path,
    *,
    include_paths: Iterable[Path] = (),
    output_style: str = "expanded",
    precision: int = 5,
    logger: logging.Logger | None = None,
) -> RenderResult:
    """Compile a theme source and capture every global variable it declares."""

    effective_logger = logger or LOGGER
    search_paths = tuple(include_paths)

    try:
        source_text = source_path.read_text(encoding="utf-8")
        names = collect_global_variable_names(source_path, search_paths)
    except OSError as exc:
        raise RenderError(source_path, str(exc)) from exc

    captured: dict[str, Any] = {}

    def _capture(name: str, value: Any) -> None:
        captured[name] = value
        return None

    try:
        css_text = sass.compile(
            string=f"{source_text}\n{build_capture_block(names)}\n",
            include_paths=[str(path) for path in (source_path.parent, *search_paths)],
            output_style=output_style,
            precision=precision,
            custom_functions={EXTRACT_FUNCTION_NAME: _capture},
        )
    except sass.CompileError as exc:
        raise RenderError(source_path, str(exc)) from exc

    variables: VariableTree = {}
    for name in names:
        if name not in captured:
            continue
        try:
            variables[variable_key(name)] = to_variable_node(captured[name], precision=precision)
        except UnsupportedVariableError as exc:
            raise RenderError(source_path, f"variable ${name}: {exc}") from exc

    effective_logger.debug(
        "render.complete source=%s css_chars=%s variables=%s",
        source_path,
        len(css_text),
        len(variables),
    )
    return RenderResult(css_text=css_text, variables=variables)
