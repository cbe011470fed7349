"""Main scaffolding orchestrator.

Copies the bundled template tree into a destination directory, pruning the
source sets of unselected targets, relocating the placeholder namespace and
module directories, and finally replacing the ``{{token}}`` markers of every
copied text file.
"""

from __future__ import annotations

import asyncio
import os
import stat
from collections.abc import Iterable
from pathlib import Path, PurePosixPath
from typing import Optional

from pydantic import BaseModel, Field

from composables.config import Config
from composables.errors import TemplateNotFoundError, WrapperDownloadError
from composables.models import ProjectIdentity, Target
from composables.utils import (
    gradle_script,
    print_debug,
    print_info,
    print_warning,
    run_command,
)

from .filters import PathFilter, contributed_by
from .fragments import assemble_fragments
from .resources import TemplateSource, detect_template_source
from .templates import TemplateRenderer, find_tokens, substitute
from .wrapper import WRAPPER_JAR, fetch_wrapper_jar, unbundled_name


# ---------------------------------------------------------------------------
# File handling rules
# ---------------------------------------------------------------------------

# Copied verbatim, never substituted.
BINARY_EXTENSIONS: frozenset[str] = frozenset(
    {".jar", ".png", ".jpg", ".jpeg", ".ico", ".icns", ".class", ".webp", ".gif"}
)

EXECUTABLE_FILES: frozenset[str] = frozenset({"gradlew"})

IOS_LINK_TASK = "compileIosMainKotlinMetadata"


# ---------------------------------------------------------------------------
# Result model
# ---------------------------------------------------------------------------


class GenerationResult(BaseModel):
    """What a generation run wrote to disk.

    Paths are posix paths relative to :attr:`root`.
    """

    root: Path
    written: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list, description="Existing files kept")
    substituted: list[str] = Field(default_factory=list)
    unresolved: dict[str, list[str]] = Field(
        default_factory=dict, description="Placeholder names left in each file"
    )
    wrapper_fetched: Optional[bool] = Field(
        default=None, description="Outcome of the wrapper jar download, None when not attempted"
    )
    ios_linked: Optional[bool] = Field(
        default=None, description="Outcome of the iOS IDE link, None when not attempted"
    )


# ---------------------------------------------------------------------------
# File helpers (run in worker threads)
# ---------------------------------------------------------------------------


def _write_bytes(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


def _make_executable(path: Path) -> None:
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def _relative(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Materializes Compose Multiplatform projects from the template tree.

    Args:
        config: Global configuration; supplies the template placeholder names,
            library versions and the iOS link switch.
        source: Template tree to copy from.  Detected from *config* when omitted.
        renderer: Fragment renderer shared with the target patcher.
    """

    def __init__(
        self,
        config: Config | None = None,
        source: TemplateSource | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config or Config()
        self.source = source or detect_template_source(self.config.template_dir)
        self.renderer = renderer or TemplateRenderer()

    # -- Public API --------------------------------------------------------

    async def generate(
        self,
        destination: str | Path,
        identity: ProjectIdentity,
        targets: Iterable[Target],
    ) -> GenerationResult:
        """Generate a complete project in *destination*.

        Args:
            destination: Project directory; created when missing.
            identity: Names of the project.
            targets: Platform targets to include.

        Returns:
            The :class:`GenerationResult` of the run.
        """
        destination = Path(destination)
        selected = frozenset(targets)
        path_filter = self._path_filter(selected)

        paths = self.source.list()
        if not paths:
            raise TemplateNotFoundError(repr(self.source))
        plan = [
            (path, destination / self.rewrite_path(path, identity))
            for path in paths
            if path_filter.include(path)
        ]

        await asyncio.to_thread(destination.mkdir, parents=True, exist_ok=True)
        tokens = assemble_fragments(selected, identity, self.config.versions, self.renderer)
        result = await self._materialize(destination, plan, tokens)

        has_jar = (destination / WRAPPER_JAR).is_file()
        if self.config.fetch_wrapper and (destination / "gradlew").is_file() and not has_jar:
            result.wrapper_fetched = await self.fetch_wrapper(destination)
        if Target.IOS in selected and self.config.link_ios:
            result.ios_linked = await self.link_ios(destination)
        return result

    async def generate_module(
        self,
        project_root: str | Path,
        identity: ProjectIdentity,
        targets: Iterable[Target],
    ) -> GenerationResult:
        """Add a new module (and its iOS app when selected) to an existing project.

        Only the module subtree of the template is copied; the root Gradle
        files of *project_root* are left for the patcher to update.
        """
        project_root = Path(project_root)
        selected = frozenset(targets)
        path_filter = self._path_filter(selected)
        roots = [self.config.template_module]
        if Target.IOS in selected:
            roots.append(self.config.template_ios_app)

        listings = {root: self.source.list(root) for root in roots}
        if not listings[self.config.template_module]:
            raise TemplateNotFoundError(f"{self.config.template_module}/ in {self.source!r}")
        plan = [
            (path, project_root / self.rewrite_path(path, identity))
            for root in roots
            for path in listings[root]
            if path_filter.include(path)
        ]

        tokens = assemble_fragments(selected, identity, self.config.versions, self.renderer)
        result = await self._materialize(project_root, plan, tokens)

        if Target.IOS in selected and self.config.link_ios:
            result.ios_linked = await self.link_ios(project_root)
        return result

    async def generate_target_sources(
        self,
        project_root: str | Path,
        module_dir: str | Path,
        target: Target,
        identity: ProjectIdentity,
    ) -> GenerationResult:
        """Copy the seed files *target* alone contributes to an existing project.

        Module paths land in *module_dir*, everything else (the iOS app) in
        *project_root*.  Files that already exist are kept untouched.
        """
        project_root = Path(project_root)
        module_dir = Path(module_dir)
        predicate = contributed_by(
            target, self.config.template_module, self.config.template_ios_app
        )
        module_prefix = f"{self.config.template_module}/"

        plan: list[tuple[str, Path]] = []
        for path in self.source.list():
            if not predicate(path):
                continue
            rewritten = PurePosixPath(self.rewrite_path(path, identity))
            if path.startswith(module_prefix):
                output = module_dir.joinpath(*rewritten.parts[1:])
            else:
                output = project_root / rewritten
            plan.append((path, output))

        tokens = assemble_fragments({target}, identity, self.config.versions, self.renderer)
        return await self._materialize(project_root, plan, tokens, keep_existing=True)

    async def link_ios(self, project_root: str | Path) -> bool:
        """Run the Gradle task that makes the iOS source set visible to the IDE.

        Failures are reported as warnings; the generated files stay in place.
        """
        cmd = [gradle_script(), IOS_LINK_TASK, "--quiet"]
        try:
            returncode, _stdout, stderr = await run_command(cmd, cwd=project_root)
        except OSError as exc:
            print_warning(f"Could not run {cmd[0]} to link the iOS source set: {exc}")
            return False
        if returncode != 0:
            print_warning(
                f"Linking the iOS source set failed (exit code {returncode}). "
                f"Run '{' '.join(cmd)}' manually."
            )
            if stderr:
                print_debug(stderr)
            return False
        return True

    async def fetch_wrapper(self, project_root: str | Path) -> bool:
        """Download the Gradle wrapper jar into *project_root*.

        A failed download is a warning; ``gradle wrapper`` restores the jar later.
        """
        destination = Path(project_root) / WRAPPER_JAR
        try:
            await fetch_wrapper_jar(self.config.wrapper_jar_url, destination)
        except WrapperDownloadError as exc:
            print_warning(f"Could not fetch the Gradle wrapper jar: {exc}")
            print_info("Run 'gradle wrapper' in the project before using gradlew.")
            return False
        return True

    def rewrite_path(self, relative_path: str, identity: ProjectIdentity) -> str:
        """Map a template path to its location in the generated project.

        The placeholder namespace directories become the identity's namespace
        path, the placeholder module directory becomes the module name and a
        leading iOS app directory becomes ``ios<BinaryName>``.  A bundled
        ``.jarX`` file gets its ``.jar`` name back.
        """
        parts = list(PurePosixPath(relative_path).parts)
        if parts:
            parts[-1] = unbundled_name(parts[-1])
        if parts and parts[0] == self.config.template_ios_app:
            parts[0] = identity.ios_app_name
        parts = [
            identity.module_name if part == self.config.template_module else part
            for part in parts
        ]
        wrapped = "/" + "/".join(parts) + "/"
        wrapped = wrapped.replace(
            f"/{self.config.template_namespace_path}/", f"/{identity.namespace_path}/"
        )
        return wrapped.strip("/")

    # -- Internals ---------------------------------------------------------

    def _path_filter(self, targets: frozenset[Target]) -> PathFilter:
        return PathFilter(
            targets,
            module_base_name=self.config.template_module,
            ios_app_dir=self.config.template_ios_app,
        )

    async def _materialize(
        self,
        root: Path,
        plan: list[tuple[str, Path]],
        tokens: dict[str, str],
        keep_existing: bool = False,
    ) -> GenerationResult:
        """Copy every ``(template path, output path)`` pair, then substitute."""
        result = GenerationResult(root=root)
        written: list[Path] = []

        for template_path, output in plan:
            if keep_existing and output.exists():
                result.skipped.append(_relative(output, root))
                continue
            data = self.source.read(template_path)
            await asyncio.to_thread(_write_bytes, output, data)
            if output.name in EXECUTABLE_FILES and os.name != "nt":
                await asyncio.to_thread(_make_executable, output)
            written.append(output)
            result.written.append(_relative(output, root))

        for output in written:
            changed, leftover = await self._substitute_file(output, tokens)
            relative = _relative(output, root)
            if changed:
                result.substituted.append(relative)
            if leftover:
                result.unresolved[relative] = sorted(leftover)

        if result.unresolved:
            print_warning(
                f"Unresolved placeholders left in {len(result.unresolved)} file(s): "
                + ", ".join(result.unresolved)
            )
        return result

    async def _substitute_file(
        self, path: Path, tokens: dict[str, str]
    ) -> tuple[bool, set[str]]:
        """Replace markers in *path*.

        Returns whether the file changed and the marker names still in it.
        """
        if path.suffix.lower() in BINARY_EXTENSIONS:
            return False, set()
        raw = await asyncio.to_thread(path.read_bytes)
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            print_debug(f"Skipping placeholder substitution for non-text file {path}")
            return False, set()
        updated = substitute(text, tokens)
        leftover = find_tokens(updated)
        if updated == text:
            return False, leftover
        await asyncio.to_thread(
            path.write_bytes, (updated.strip() + "\n").encode("utf-8")
        )
        return True, leftover
