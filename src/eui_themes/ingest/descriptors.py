"""Per-source output path derivation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class InputDescriptor:
    """One theme source and the five artifact paths derived from it."""

    source_path: Path
    output_css_path: Path
    output_min_css_path: Path
    output_vars_path: Path
    output_types_path: Path
    output_docs_vars_path: Path
    package_name: str
    json_module_path: str

    @property
    def name(self) -> str:
        return self.source_path.stem

    def output_paths(self) -> tuple[Path, Path, Path, Path, Path]:
        """Artifact paths in writer order: css, min css, vars json, types, docs json."""

        return (
            self.output_css_path,
            self.output_min_css_path,
            self.output_vars_path,
            self.output_types_path,
            self.output_docs_vars_path,
        )


def _module_subpath(path: Path, project_root: Path) -> str:
    try:
        return path.resolve(strict=False).relative_to(project_root.resolve(strict=False)).as_posix()
    except ValueError:
        return path.name


def describe_input(
    source_path: Path,
    *,
    destination_dir: Path,
    docs_vars_dir: Path,
    package_name: str,
    project_root: Path,
    artifact_prefix: str = "eui_",
) -> InputDescriptor:
    """Derive the artifact paths for one source from its base name."""

    base_name = f"{artifact_prefix}{source_path.stem}"
    output_vars_path = destination_dir / f"{base_name}.json"
    return InputDescriptor(
        source_path=source_path,
        output_css_path=destination_dir / f"{base_name}.css",
        output_min_css_path=destination_dir / f"{base_name}.min.css",
        output_vars_path=output_vars_path,
        output_types_path=destination_dir / f"{base_name}.json.d.ts",
        output_docs_vars_path=docs_vars_dir / f"{base_name}.json",
        package_name=package_name,
        json_module_path=f"{package_name}/{_module_subpath(output_vars_path, project_root)}",
    )
