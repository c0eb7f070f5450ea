"""Concurrent theme build orchestration with per-file failure isolation."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, ClassVar, Iterable, Union
from uuid import uuid4

from eui_themes.compile.render import render_theme
from eui_themes.compile.types import derive_variable_types
from eui_themes.config import AppSettings
from eui_themes.ingest.descriptors import InputDescriptor, describe_input
from eui_themes.ingest.discover import PathFilter, build_theme_filter, discover_source_files
from eui_themes.postprocess.pipeline import (
    PostprocessConfig,
    build_base_config,
    postprocess,
    with_minification,
)
from eui_themes.utils.paths import ensure_directories
from eui_themes.utils.time_utils import elapsed_seconds, now_utc
from eui_themes.writer import ArtifactSet, serialize_variable_tree, write_artifacts, write_json_atomically

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BuildContext:
    """Read-only options shared by every per-file pipeline of one run."""

    base_config: PostprocessConfig
    minified_config: PostprocessConfig
    include_paths: tuple[Path, ...] = ()
    output_style: str = "expanded"
    precision: int = 5

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "BuildContext":
        base_config = build_base_config(settings)
        project_root = settings.paths.project_root
        return cls(
            base_config=base_config,
            minified_config=with_minification(base_config, settings.sass.precision),
            include_paths=tuple(
                path if path.is_absolute() else (project_root / path).resolve() for path in settings.sass.include_paths
            ),
            output_style=settings.sass.output_style,
            precision=settings.sass.precision,
        )


@dataclass(frozen=True, slots=True)
class JobSuccess:
    """A theme source whose five artifacts were written."""

    ok: ClassVar[bool] = True

    descriptor: InputDescriptor
    output_paths: tuple[Path, ...]

    @property
    def source_path(self) -> Path:
        return self.descriptor.source_path


@dataclass(frozen=True, slots=True)
class JobFailure:
    """A theme source whose pipeline raised; siblings are unaffected."""

    ok: ClassVar[bool] = False

    descriptor: InputDescriptor
    error_type: str
    error_message: str

    @property
    def source_path(self) -> Path:
        return self.descriptor.source_path


JobResult = Union[JobSuccess, JobFailure]


@dataclass(frozen=True, slots=True)
class ThemeBuildResult:
    """Return object for one build run."""

    run_id: str
    results: tuple[JobResult, ...]
    summary: dict[str, Any]
    summary_path: Path | None

    @property
    def succeeded(self) -> list[JobSuccess]:
        return [result for result in self.results if isinstance(result, JobSuccess)]

    @property
    def failed(self) -> list[JobFailure]:
        return [result for result in self.results if isinstance(result, JobFailure)]

    def exit_code(self, fail_on_error: bool) -> int:
        """Process exit code under the configured failure policy."""

        return 1 if fail_on_error and self.failed else 0


async def compile_theme_file(
    descriptor: InputDescriptor,
    context: BuildContext,
    *,
    logger: logging.Logger | None = None,
) -> tuple[Path, ...]:
    """Render one source once and derive, postprocess and write all of its artifacts."""

    effective_logger = logger or LOGGER
    source_path = descriptor.source_path
    rendered = await asyncio.to_thread(
        render_theme,
        source_path,
        include_paths=context.include_paths,
        output_style=context.output_style,
        precision=context.precision,
        logger=effective_logger,
    )
    type_declaration = derive_variable_types(rendered.variables, descriptor.json_module_path)

    # Both variants start from the same rendered CSS; the minified one is never fed the other's output.
    css_text, minified_css_text = await asyncio.gather(
        asyncio.to_thread(postprocess, rendered.css_text, context.base_config, source_path=source_path),
        asyncio.to_thread(postprocess, rendered.css_text, context.minified_config, source_path=source_path),
    )

    variable_json = serialize_variable_tree(rendered.variables)
    artifacts = ArtifactSet(
        css_text=css_text,
        minified_css_text=minified_css_text,
        variable_json_text=variable_json,
        type_declaration_text=type_declaration,
        docs_json_text=variable_json,
    )
    return await write_artifacts(artifacts, descriptor)


async def _run_job(descriptor: InputDescriptor, context: BuildContext, logger: logging.Logger) -> JobResult:
    logger.info("compile.start source=%s", descriptor.source_path)
    try:
        output_paths = await compile_theme_file(descriptor, context, logger=logger)
    except Exception as exc:
        logger.exception("compile.failed source=%s error_type=%s", descriptor.source_path, type(exc).__name__)
        return JobFailure(descriptor=descriptor, error_type=type(exc).__name__, error_message=str(exc))

    logger.info(
        "compile.finished source=%s outputs=%s",
        descriptor.source_path,
        ",".join(str(path) for path in output_paths),
    )
    return JobSuccess(descriptor=descriptor, output_paths=output_paths)


async def run_jobs(
    descriptors: Iterable[InputDescriptor],
    context: BuildContext,
    *,
    logger: logging.Logger | None = None,
) -> list[JobResult]:
    """Run one independent task per descriptor and collect one result per task."""

    effective_logger = logger or LOGGER
    tasks = [asyncio.create_task(_run_job(descriptor, context, effective_logger)) for descriptor in descriptors]
    if not tasks:
        return []
    return list(await asyncio.gather(*tasks))


def discover_build_inputs(
    settings: AppSettings,
    package_name: str,
    path_filter: PathFilter | None,
    *,
    logger: logging.Logger | None = None,
) -> list[InputDescriptor]:
    """Discover every configured theme family with the same explicit filter."""

    effective_logger = logger or LOGGER
    descriptors: list[InputDescriptor] = []
    for family in settings.families:
        sources = discover_source_files(
            family.source_pattern,
            path_filter,
            root=settings.paths.project_root,
            logger=effective_logger,
        )
        effective_logger.info("build.family_discovered family=%s files=%s", family.name, len(sources))
        descriptors.extend(
            describe_input(
                source,
                destination_dir=settings.paths.dist_root,
                docs_vars_dir=settings.paths.docs_vars_root,
                package_name=package_name,
                project_root=settings.paths.project_root,
                artifact_prefix=settings.build.artifact_prefix,
            )
            for source in sources
        )
    return descriptors


async def run_build(
    settings: AppSettings,
    package_name: str,
    *,
    logger: logging.Logger | None = None,
) -> ThemeBuildResult:
    """Bootstrap output directories, discover all theme families and compile them concurrently.

    Bootstrap and discovery failures abort the run; failures inside a file's pipeline only
    produce a `JobFailure` for that file.
    """

    effective_logger = logger or LOGGER
    run_id = f"theme-build-{uuid4().hex[:12]}"
    started_ts = now_utc()
    started_mono = time.monotonic()

    ensure_directories([settings.paths.dist_root, settings.paths.docs_vars_root], logger=effective_logger)

    theme_filter = build_theme_filter(
        settings.target_theme,
        settings.named_theme_dir(),
        prefix=settings.build.named_theme_prefix,
        extension=settings.build.source_extension,
    )
    descriptors = discover_build_inputs(settings, package_name, theme_filter, logger=effective_logger)
    context = BuildContext.from_settings(settings)

    effective_logger.info(
        "theme_build.start run_id=%s files=%s target_theme=%s package=%s",
        run_id,
        len(descriptors),
        settings.target_theme,
        package_name,
    )
    results = await run_jobs(descriptors, context, logger=effective_logger)

    failures = [result for result in results if isinstance(result, JobFailure)]
    summary: dict[str, Any] = {
        "run_id": run_id,
        "started_ts": started_ts.isoformat(),
        "finished_ts": now_utc().isoformat(),
        "duration_sec": elapsed_seconds(started_mono),
        "package_name": package_name,
        "target_theme": settings.target_theme,
        "files_total": len(results),
        "files_succeeded": len(results) - len(failures),
        "files_failed": len(failures),
        "failed_files": [
            {"source_file": str(failure.source_path), "error_type": failure.error_type, "error": failure.error_message}
            for failure in failures
        ],
        "outputs": {
            "dist_root": str(settings.paths.dist_root),
            "docs_vars_root": str(settings.paths.docs_vars_root),
        },
    }

    summary_path: Path | None = None
    if settings.build.write_run_summary:
        target_path = settings.paths.artifacts_root / "run_summaries" / f"{run_id}_theme_build_summary.json"
        try:
            summary_path = write_json_atomically(summary, target_path)
        except OSError:
            effective_logger.exception("theme_build.summary_write_failed run_id=%s path=%s", run_id, target_path)

    effective_logger.info(
        "theme_build.complete run_id=%s success=%s failed=%s summary_path=%s",
        run_id,
        summary["files_succeeded"],
        summary["files_failed"],
        summary_path,
    )
    return ThemeBuildResult(
        run_id=run_id,
        results=tuple(results),
        summary=summary,
        summary_path=summary_path,
    )
