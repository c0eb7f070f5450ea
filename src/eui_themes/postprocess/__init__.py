"""Stylesheet postprocessing."""

from eui_themes.postprocess.pipeline import (
    TRAILING_NEWLINE_STAGE,
    PostprocessConfig,
    PostprocessStage,
    TransformError,
    banner_stage,
    build_base_config,
    minify_stage,
    normalize_stage,
    postprocess,
    with_minification,
)

__all__ = [
    "TRAILING_NEWLINE_STAGE",
    "PostprocessConfig",
    "PostprocessStage",
    "TransformError",
    "banner_stage",
    "build_base_config",
    "minify_stage",
    "normalize_stage",
    "postprocess",
    "with_minification",
]
