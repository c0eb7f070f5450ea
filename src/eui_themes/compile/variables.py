"""Global SCSS variable discovery and conversion of libsass values into plain JSON nodes."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Iterable, TypeAlias, Union

import sass

VariableNode: TypeAlias = Union[str, int, float, bool, None, list["VariableNode"], dict[str, "VariableNode"]]
VariableTree: TypeAlias = dict[str, VariableNode]

_DECLARATION_RE = re.compile(r"\$([A-Za-z_][\w-]*)\s*:(?!:)")
_QUOTED_RE = re.compile(r"""["']([^"']+)["']""")
_GLOBAL_FLAG_RE = re.compile(r"!global\b")
_URL_OPEN_RE = re.compile(r"url\(\s*", re.IGNORECASE)
_NAME_SPLIT_RE = re.compile(r"[-_]+")
_EXTERNAL_IMPORT_PREFIXES = ("http://", "https://", "//")


class UnsupportedVariableError(TypeError):
    """Raised when a variable value has no JSON representation."""


def _skip_string(text: str, start: int) -> int:
    """Return the index just past the quoted string opening at `start`."""

    quote = text[start]
    index = start + 1
    while index < len(text):
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char == quote or char == "\n":
            return index + 1
        index += 1
    return len(text)


def _statement_end(text: str, start: int) -> int:
    index = start
    while index < len(text):
        char = text[index]
        if char in "\"'":
            index = _skip_string(text, index)
            continue
        if char in ";{}":
            return index
        index += 1
    return len(text)


def _skip_unquoted_url(text: str, start: int) -> int | None:
    """Return the index just past an unquoted `url(...)` token, or None for anything else."""

    match = _URL_OPEN_RE.match(text, start)
    if match is None or text[match.end() : match.end() + 1] in ("\"", "'"):
        return None
    if start > 0 and (text[start - 1].isalnum() or text[start - 1] in "-_"):
        return None
    close = text.find(")", match.end())
    return len(text) if close == -1 else close + 1


def scan_top_level(text: str) -> list[tuple[str, str]]:
    """Scan SCSS source for global declarations and top-level imports.

    Returns ordered `("variable", name)` and `("import", target)` events. A declaration counts
    when it sits outside any block or parenthesis, or when it is flagged `!global` inside a
    block. Comments, string contents and unquoted `url(...)` tokens are ignored.
    """

    events: list[tuple[str, str]] = []
    brace_depth = 0
    paren_depth = 0
    at_statement_start = True
    index = 0
    length = len(text)

    while index < length:
        char = text[index]
        if char in "\"'":
            index = _skip_string(text, index)
            at_statement_start = False
            continue
        if char in "uU":
            url_end = _skip_unquoted_url(text, index)
            if url_end is not None:
                index = url_end
                at_statement_start = False
                continue
        if text.startswith("//", index):
            newline = text.find("\n", index)
            index = length if newline == -1 else newline
            continue
        if text.startswith("/*", index):
            end = text.find("*/", index + 2)
            index = length if end == -1 else end + 2
            continue
        if char.isspace():
            index += 1
            continue
        if char == "{":
            brace_depth += 1
            at_statement_start = True
            index += 1
            continue
        if char == "}":
            brace_depth = max(0, brace_depth - 1)
            at_statement_start = True
            index += 1
            continue
        if char == ";":
            at_statement_start = True
            index += 1
            continue

        if at_statement_start and paren_depth == 0:
            if char == "$":
                match = _DECLARATION_RE.match(text, index)
                if match is not None and (
                    brace_depth == 0
                    or _GLOBAL_FLAG_RE.search(text, match.end(), _statement_end(text, match.end()))
                ):
                    events.append(("variable", match.group(1)))
            elif brace_depth == 0 and text.startswith("@import", index):
                end = _statement_end(text, index)
                for target in _QUOTED_RE.findall(text, index, end):
                    events.append(("import", target))
                index = end
                at_statement_start = False
                continue

        if char == "(":
            paren_depth += 1
        elif char == ")":
            paren_depth = max(0, paren_depth - 1)
        at_statement_start = False
        index += 1

    return events


def _import_candidates(path: Path) -> list[Path]:
    parent, name = path.parent, path.name
    if path.suffix == ".scss":
        return [path, parent / f"_{name}"]
    return [
        parent / f"{name}.scss",
        parent / f"_{name}.scss",
        path / "index.scss",
        path / "_index.scss",
    ]


def resolve_import(target: str, importer_dir: Path, include_paths: Iterable[Path] = ()) -> Path | None:
    """Resolve an `@import` target the way libsass looks up SCSS partials."""

    if target.endswith(".css") or target.startswith(_EXTERNAL_IMPORT_PREFIXES):
        return None
    for base in (importer_dir, *include_paths):
        for candidate in _import_candidates(base / target):
            if candidate.is_file():
                return candidate
    return None


def collect_global_variable_names(source_path: Path, include_paths: Iterable[Path] = ()) -> list[str]:
    """Collect every global variable declared by a source and its imports, in declaration order.

    Unresolvable imports are skipped here; the render reports them.
    """

    search_paths = tuple(include_paths)
    names: dict[str, None] = {}
    visited: set[Path] = set()

    def _visit(path: Path) -> None:
        resolved = path.resolve()
        if resolved in visited:
            return
        visited.add(resolved)
        for kind, value in scan_top_level(path.read_text(encoding="utf-8")):
            if kind == "variable":
                # Sass treats `-` and `_` in names as the same identifier.
                names.setdefault(value.replace("_", "-"), None)
                continue
            imported = resolve_import(value, path.parent, search_paths)
            if imported is not None:
                _visit(imported)

    _visit(source_path)
    return list(names)


def variable_key(name: str) -> str:
    """Convert a Sass variable name to its camelCase JSON key (`$eui-size-s` -> `euiSizeS`)."""

    parts = [part for part in _NAME_SPLIT_RE.split(name.lstrip("$")) if part]
    if not parts:
        return name
    return parts[0] + "".join(part[:1].upper() + part[1:] for part in parts[1:])


def _format_number(value: float, precision: int) -> int | float:
    rounded = round(value, precision)
    if rounded.is_integer():
        return int(rounded)
    return rounded


def _color_text(color: sass.SassColor, precision: int) -> str:
    red, green, blue = (min(255, max(0, int(round(channel)))) for channel in (color.r, color.g, color.b))
    if color.a >= 1:
        return f"#{red:02x}{green:02x}{blue:02x}"
    return f"rgba({red}, {green}, {blue}, {_format_number(color.a, precision)})"


def _map_key(key: Any, precision: int) -> str:
    node = to_variable_node(key, precision=precision)
    if isinstance(node, str):
        return node
    if isinstance(node, bool):
        return "true" if node else "false"
    if node is None:
        return "null"
    if isinstance(node, (int, float)):
        return str(node)
    raise UnsupportedVariableError(f"Map keys must be scalar, got {type(key).__name__}")


def to_variable_node(value: Any, *, precision: int = 5) -> VariableNode:
    """Convert a libsass value into a JSON-compatible variable node."""

    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, sass.SassNumber):
        number = _format_number(value.value, precision)
        return f"{number}{value.unit}" if value.unit else number
    if isinstance(value, sass.SassColor):
        return _color_text(value, precision)
    if isinstance(value, sass.SassMap):
        return {_map_key(key, precision): to_variable_node(item, precision=precision) for key, item in value.items()}
    if isinstance(value, sass.SassList):
        return [to_variable_node(item, precision=precision) for item in value.items]
    if isinstance(value, str):
        return value
    raise UnsupportedVariableError(f"Unsupported Sass value type: {type(value).__name__}")
