"""Configurable CSS postprocessing pipelines."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import sass

from eui_themes.config import AppSettings

LOGGER = logging.getLogger(__name__)

CssTransform = Callable[[str], str]


class TransformError(RuntimeError):
    """Raised when a postprocessing stage rejects its input."""

    def __init__(self, stage_name: str, message: str, source_path: Path | None = None) -> None:
        location = f" for {source_path}" if source_path is not None else ""
        super().__init__(f"Postprocess stage '{stage_name}' failed{location}: {message}")
        self.stage_name = stage_name
        self.source_path = source_path


@dataclass(frozen=True, slots=True)
class PostprocessStage:
    """A named CSS-to-CSS transformation."""

    name: str
    transform: CssTransform


@dataclass(frozen=True, slots=True)
class PostprocessConfig:
    """An ordered, immutable list of postprocessing stages."""

    stages: tuple[PostprocessStage, ...] = ()

    def with_stage(self, stage: PostprocessStage) -> "PostprocessConfig":
        """Return a new configuration with `stage` appended; this one is left unchanged."""

        return PostprocessConfig(stages=(*self.stages, stage))

    @property
    def stage_names(self) -> tuple[str, ...]:
        return tuple(stage.name for stage in self.stages)


def normalize_stage(precision: int = 5) -> PostprocessStage:
    """Re-serialize CSS in expanded style; libsass rejects CSS it cannot parse."""

    def _normalize(css_text: str) -> str:
        if not css_text.strip():
            return ""
        return sass.compile(string=css_text, output_style="expanded", precision=precision)

    return PostprocessStage(name="normalize", transform=_normalize)


def banner_stage(banner: str) -> PostprocessStage:
    """Prepend a preserved `/*! ... */` comment, which also survives minification."""

    comment = f"/*! {banner.strip()} */\n"

    def _prepend_banner(css_text: str) -> str:
        return comment + css_text

    return PostprocessStage(name="banner", transform=_prepend_banner)


def _ensure_trailing_newline(css_text: str) -> str:
    if not css_text.strip():
        return ""
    return css_text.rstrip() + "\n"


TRAILING_NEWLINE_STAGE = PostprocessStage(name="trailing_newline", transform=_ensure_trailing_newline)


def minify_stage(precision: int = 5) -> PostprocessStage:
    def _minify(css_text: str) -> str:
        if not css_text.strip():
            return ""
        return sass.compile(string=css_text, output_style="compressed", precision=precision)

    return PostprocessStage(name="minify", transform=_minify)


def build_base_config(settings: AppSettings) -> PostprocessConfig:
    """Build the base pipeline shared by the plain and minified stylesheets."""

    config = PostprocessConfig().with_stage(normalize_stage(settings.sass.precision))
    if settings.postprocess.banner:
        config = config.with_stage(banner_stage(settings.postprocess.banner))
    return config.with_stage(TRAILING_NEWLINE_STAGE)


def with_minification(config: PostprocessConfig, precision: int = 5) -> PostprocessConfig:
    """Return an independent copy of `config` extended with the minify stage."""

    return config.with_stage(minify_stage(precision))


def postprocess(
    css_text: str,
    config: PostprocessConfig,
    *,
    source_path: Path | None = None,
    logger: logging.Logger | None = None,
) -> str:
    """Apply every stage of `config` in order to `css_text`."""

    effective_logger = logger or LOGGER
    result = css_text
    for stage in config.stages:
        try:
            result = stage.transform(result)
        except Exception as exc:
            raise TransformError(stage.name, str(exc), source_path) from exc
    effective_logger.debug(
        "postprocess.complete source=%s stages=%s chars_in=%s chars_out=%s",
        source_path,
        ",".join(config.stage_names),
        len(css_text),
        len(result),
    )
    return result
