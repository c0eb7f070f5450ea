"""Derive a TypeScript declaration describing the shape of a variable tree.

The tree is first turned into a small type model (primitives, object literals, arrays and
tuples) so that list elements can be compared structurally; the model is then rendered as
an ambient module declaration for the JSON artifact:

    declare module '@elastic/eui/dist/eui_theme_light.json' {
      const json: {
        colors: {
          primary: string;
        };
      };
      export default json;
    }
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Union

from eui_themes.compile.variables import UnsupportedVariableError, VariableNode

INDENT = "  "
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


@dataclass(frozen=True, slots=True)
class PrimitiveType:
    name: str


@dataclass(frozen=True, slots=True)
class ObjectType:
    fields: tuple[tuple[str, "TypeNode"], ...]


@dataclass(frozen=True, slots=True)
class ArrayType:
    element: "TypeNode"


@dataclass(frozen=True, slots=True)
class TupleType:
    elements: tuple["TypeNode", ...]


TypeNode = Union[PrimitiveType, ObjectType, ArrayType, TupleType]

STRING = PrimitiveType("string")
NUMBER = PrimitiveType("number")
BOOLEAN = PrimitiveType("boolean")
NULL = PrimitiveType("null")
NEVER = PrimitiveType("never")


def infer_type(node: VariableNode) -> TypeNode:
    """Map a variable node to its narrowest structural type."""

    # bool is a subclass of int, so it has to be checked first.
    if isinstance(node, bool):
        return BOOLEAN
    if node is None:
        return NULL
    if isinstance(node, str):
        return STRING
    if isinstance(node, (int, float)):
        return NUMBER
    if isinstance(node, Mapping):
        return ObjectType(tuple((str(key), infer_type(value)) for key, value in node.items()))
    if isinstance(node, list):
        if not node:
            return ArrayType(NEVER)
        element_types = tuple(infer_type(item) for item in node)
        first = element_types[0]
        if all(element == first for element in element_types[1:]):
            return ArrayType(first)
        return TupleType(element_types)
    raise UnsupportedVariableError(f"Cannot derive a type for {type(node).__name__} value {node!r}")


def _property_name(key: str) -> str:
    return key if _IDENTIFIER_RE.match(key) else json.dumps(key)


def render_type(type_node: TypeNode, level: int = 0) -> str:
    """Render a type model as TypeScript, indenting nested object literals from `level`."""

    if isinstance(type_node, PrimitiveType):
        return type_node.name
    if isinstance(type_node, ObjectType):
        if not type_node.fields:
            return "{}"
        inner = INDENT * (level + 1)
        lines = [f"{inner}{_property_name(key)}: {render_type(value, level + 1)};" for key, value in type_node.fields]
        return "{\n" + "\n".join(lines) + "\n" + INDENT * level + "}"
    if isinstance(type_node, ArrayType):
        return f"{render_type(type_node.element, level)}[]"
    if isinstance(type_node, TupleType):
        return "[" + ", ".join(render_type(element, level) for element in type_node.elements) + "]"
    raise UnsupportedVariableError(f"Unknown type node {type_node!r}")


def _module_specifier(module_path: str) -> str:
    escaped = module_path.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def derive_variable_types(tree: Mapping[str, VariableNode], json_module_path: str) -> str:
    """Build the `.d.ts` module declaration for the JSON file at `json_module_path`."""

    body = render_type(infer_type(dict(tree)), level=1)
    return (
        f"declare module {_module_specifier(json_module_path)} {{\n"
        f"{INDENT}const json: {body};\n"
        f"{INDENT}export default json;\n"
        "}\n"
    )
