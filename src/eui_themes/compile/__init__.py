"""Theme rendering and variable type derivation."""

from eui_themes.compile.render import RenderError, RenderResult, render_theme
from eui_themes.compile.types import derive_variable_types, infer_type, render_type
from eui_themes.compile.variables import (
    UnsupportedVariableError,
    VariableNode,
    VariableTree,
    collect_global_variable_names,
    to_variable_node,
    variable_key,
)

__all__ = [
    "RenderError",
    "RenderResult",
    "render_theme",
    "derive_variable_types",
    "infer_type",
    "render_type",
    "UnsupportedVariableError",
    "VariableNode",
    "VariableTree",
    "collect_global_variable_names",
    "to_variable_node",
    "variable_key",
]
