"""Add a platform target to an existing Compose Multiplatform module.

The module's ``build.gradle.kts`` is edited in place: imports, the plugin
alias, the target declaration, its source set dependencies and any top-level
configuration block are inserted using the same fragments the project
generator uses.  Seed sources for the new source set are copied from the
template tree, and the root project files are updated where the target needs
it.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from composables.config import Config
from composables.models import ProjectIdentity, Target
from composables.scaffolder.fragments import plugin_line, target_fragments
from composables.scaffolder.generator import GenerationResult, ProjectGenerator

from .blocks import ConfigDocument, kotlin_block, plugins_block, source_sets_block
from .project_files import (
    ROOT_BUILD_FILE,
    update_gradle_properties,
    update_root_build_file,
    update_version_catalog,
)


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------

# A target counts as present when any of its markers appears in the build file.
TARGET_MARKERS: dict[Target, tuple[str, ...]] = {
    Target.ANDROID: ("androidTarget {", "android {"),
    Target.JVM: ("jvm()",),
    Target.IOS: ("iosArm64()", "iosSimulatorArm64()"),
    Target.WEB: ("js {", "js(", "wasmJs {", "wasmJs("),
}

COMPOSE_DEPENDENCIES: tuple[str, ...] = (
    "compose.components.resources",
    "compose.components.uiToolingPreview",
    "compose.material3",
    "compose.desktop.currentOs",
    "compose.preview",
    "compose.runtime",
)

GRADLE_PROJECT_FILES: tuple[str, ...] = (
    "build.gradle.kts",
    "build.gradle",
    "settings.gradle.kts",
    "settings.gradle",
)

_NAMESPACE_RE = re.compile(r'^\s*(?:namespace|packageName)\s*=\s*"([^"]+)"', re.MULTILINE)
_PACKAGE_RE = re.compile(r"^\s*package\s+([A-Za-z_][\w.]*)", re.MULTILINE)


def has_target(build_text: str, target: Target) -> bool:
    return any(marker in build_text for marker in TARGET_MARKERS[target])


def has_compose_dependencies(build_text: str) -> bool:
    return any(dependency in build_text for dependency in COMPOSE_DEPENDENCIES)


def is_gradle_project(directory: str | Path) -> bool:
    """True when *directory* holds a Gradle build or settings script."""
    directory = Path(directory)
    return any((directory / name).is_file() for name in GRADLE_PROJECT_FILES)


def find_compose_modules(project_root: str | Path) -> list[Path]:
    """Return the build files of the Compose modules directly below *project_root*.

    The list is empty when *project_root* has no root ``build.gradle.kts``.
    Modules are sorted by directory name.
    """
    project_root = Path(project_root)
    if not (project_root / ROOT_BUILD_FILE).is_file():
        return []
    modules = []
    for child in sorted(project_root.iterdir(), key=lambda p: p.name):
        build_file = child / "build.gradle.kts"
        if child.is_dir() and build_file.is_file():
            if has_compose_dependencies(build_file.read_text(encoding="utf-8")):
                modules.append(build_file)
    return modules


def extract_namespace(build_text: str) -> Optional[str]:
    """The first ``namespace = "..."`` or ``packageName = "..."`` value, if any."""
    match = _NAMESPACE_RE.search(build_text)
    return match.group(1) if match else None


def source_namespace(module_dir: str | Path) -> Optional[str]:
    """The package declared by the first Kotlin file of ``commonMain``, if any."""
    source_root = Path(module_dir) / "src" / "commonMain" / "kotlin"
    if not source_root.is_dir():
        return None
    for path in sorted(source_root.rglob("*.kt")):
        match = _PACKAGE_RE.search(path.read_text(encoding="utf-8"))
        if match:
            return match.group(1)
    return None


# ---------------------------------------------------------------------------
# Result model
# ---------------------------------------------------------------------------


class TargetStatus(str, Enum):
    ADDED = "added"
    ALREADY_PRESENT = "already_present"
    NOT_A_PROJECT = "not_a_project"
    NO_MODULE = "no_module"
    FAILED = "failed"


class TargetResult(BaseModel):
    """Outcome of adding one target."""

    target: Target
    status: TargetStatus
    build_file: Optional[Path] = None
    message: str = ""
    applied: list[str] = Field(default_factory=list, description="Build file edits made")
    skipped: list[str] = Field(
        default_factory=list, description="Edits skipped because their block was missing"
    )
    sources: Optional[GenerationResult] = None

    @property
    def ok(self) -> bool:
        return self.status in (TargetStatus.ADDED, TargetStatus.ALREADY_PRESENT)


# ---------------------------------------------------------------------------
# TargetAdder
# ---------------------------------------------------------------------------


class TargetAdder:
    """Retrofits a platform target into an existing module.

    Args:
        config: Global configuration (defaults, versions, iOS link switch).
        generator: Generator used to copy the target's seed sources.
    """

    def __init__(
        self,
        config: Config | None = None,
        generator: ProjectGenerator | None = None,
    ) -> None:
        self.config = config or Config()
        self.generator = generator or ProjectGenerator(self.config)

    async def add(
        self,
        target: Target,
        project_root: str | Path,
        build_file: str | Path | None = None,
    ) -> TargetResult:
        """Add *target* to the module whose build script is *build_file*.

        When *build_file* is omitted the first Compose module of
        *project_root* is used.
        """
        project_root = Path(project_root)

        if build_file is None:
            if not (project_root / ROOT_BUILD_FILE).is_file():
                return TargetResult(
                    target=target,
                    status=TargetStatus.NOT_A_PROJECT,
                    message="This is not a recognized Compose Multiplatform project.",
                )
            modules = find_compose_modules(project_root)
            if not modules:
                return TargetResult(
                    target=target,
                    status=TargetStatus.NO_MODULE,
                    message="No module with Compose dependencies was found.",
                )
            build_file = modules[0]
        build_file = Path(build_file)

        text = build_file.read_text(encoding="utf-8")
        if has_target(text, target):
            return TargetResult(
                target=target,
                status=TargetStatus.ALREADY_PRESENT,
                build_file=build_file,
                message=f"{target.label} target already exists in {build_file}",
            )

        module_dir = build_file.parent
        namespace = (
            extract_namespace(text)
            or source_namespace(module_dir)
            or self.config.default_namespace
        )
        try:
            identity = ProjectIdentity(
                namespace=namespace,
                app_name=self.config.default_app_name,
                module_name=module_dir.name,
            )
        except ValidationError as exc:
            return TargetResult(
                target=target,
                status=TargetStatus.FAILED,
                build_file=build_file,
                message=f"Cannot derive project names from {module_dir}: {exc}",
            )

        result = TargetResult(target=target, status=TargetStatus.ADDED, build_file=build_file)
        self._patch_build_file(build_file, text, identity, result)

        result.sources = await self.generator.generate_target_sources(
            project_root, module_dir, target, identity
        )

        if target is Target.ANDROID:
            fragments = target_fragments(target, identity, self.generator.renderer)
            update_root_build_file(project_root, fragments.plugin_aliases)
            update_gradle_properties(project_root)
            update_version_catalog(project_root, {target}, self.config.versions)

        if target is Target.IOS and self.config.link_ios:
            await self.generator.link_ios(project_root)

        result.message = f"Added {target.label} target to {build_file}"
        return result

    def _patch_build_file(
        self,
        build_file: Path,
        text: str,
        identity: ProjectIdentity,
        result: TargetResult,
    ) -> None:
        fragments = target_fragments(result.target, identity, self.generator.renderer)
        doc = ConfigDocument.from_text(text, build_file)

        for import_line in fragments.imports:
            if doc.ensure_import(import_line):
                result.applied.append(f"import {import_line.split()[-1]}")

        steps = [
            ("plugins", plugins_block, [plugin_line(a) for a in fragments.plugin_aliases]),
            ("kotlin", kotlin_block, ["", *fragments.kotlin_target]),
            ("sourceSets", source_sets_block, ["", *fragments.dependencies]),
        ]
        for name, opener, lines in steps:
            if not any(line.strip() for line in lines):
                continue
            if doc.insert_into_block(opener, lines):
                result.applied.append(name)
            else:
                result.skipped.append(name)

        if fragments.configuration:
            doc.append(["", *fragments.configuration])
            result.applied.append("configuration")

        doc.save()
