"""Idempotent updates to the project-level Gradle files.

Every function returns ``True`` when it changed a file and ``False`` when the
file already had what was asked for.  A missing file is reported as a warning
and counts as "no change".
"""

from __future__ import annotations

import re
import tomllib
from collections.abc import Iterable
from pathlib import Path

from composables.config import VersionConfig
from composables.errors import PatchError
from composables.models import Target
from composables.scaffolder.fragments import ANDROID_PROPERTIES, catalog_entries, plugin_line
from composables.utils import print_warning

from .blocks import ConfigDocument, buildscript_block, plugins_block

ROOT_BUILD_FILE = "build.gradle.kts"
SETTINGS_FILE = "settings.gradle.kts"
GRADLE_PROPERTIES = "gradle.properties"
VERSION_CATALOG = "gradle/libs.versions.toml"

CATALOG_SECTIONS = ("versions", "libraries", "plugins")

INCLUDE_PATTERN = re.compile(r"""include\s*\(\s*["']([^"']+)["']\s*\)""")


def _existing(path: Path) -> bool:
    if path.is_file():
        return True
    print_warning(f"{path.name} not found in {path.parent}, skipping")
    return False


# ---------------------------------------------------------------------------
# Root build file
# ---------------------------------------------------------------------------


def update_root_build_file(project_root: str | Path, aliases: Iterable[str]) -> bool:
    """Declare each catalog plugin alias in the root ``plugins {}`` with ``apply false``.

    A build file without a ``plugins {}`` block gets one.
    """
    path = Path(project_root) / ROOT_BUILD_FILE
    if not _existing(path):
        return False

    doc = ConfigDocument.load(path)
    missing = [
        alias for alias in aliases
        if not doc.contains(f"libs.plugins.{alias})")
    ]
    if not missing:
        return False
    declarations = [plugin_line(alias, apply=False) for alias in missing]
    if not doc.insert_into_block(plugins_block, declarations):
        doc.insert_before(_plugins_block_index(doc), ["plugins {", *declarations, "}", ""])
    doc.save()
    return True


def _plugins_block_index(doc: ConfigDocument) -> int:
    """Where a new ``plugins {}`` goes: after the imports and any ``buildscript {}``."""
    index = 0
    for position, line in enumerate(doc.lines):
        if line.startswith("import "):
            index = position + 1
    buildscript_end = doc.find_block_end(buildscript_block)
    if buildscript_end is not None:
        index = max(index, buildscript_end + 1)
    while index < len(doc.lines) and not doc.lines[index].strip():
        index += 1
    return index


# ---------------------------------------------------------------------------
# Version catalog
# ---------------------------------------------------------------------------


def update_version_catalog(
    project_root: str | Path,
    targets: Iterable[Target],
    versions: VersionConfig | None = None,
) -> bool:
    """Add the catalog entries *targets* need and the catalog does not define.

    Existing keys are read with ``tomllib``; new lines are inserted right after
    their section header, or in a new section appended to the file.

    Raises:
        PatchError: If the catalog is not valid TOML.
    """
    path = Path(project_root) / VERSION_CATALOG
    if not _existing(path):
        return False

    text = path.read_text(encoding="utf-8")
    try:
        catalog = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise PatchError(str(path), f"invalid version catalog: {exc}") from exc

    wanted = catalog_entries(targets, versions or VersionConfig())
    lines = text.split("\n")
    changed = False

    for section in CATALOG_SECTIONS:
        defined = catalog.get(section, {})
        new_lines = [line for key, line in wanted.get(section, []) if key not in defined]
        if not new_lines:
            continue
        changed = True
        header = _section_header(lines, section)
        if header is None:
            while lines and not lines[-1].strip():
                lines.pop()
            lines.extend(["", f"[{section}]", *new_lines, ""])
        else:
            lines[header + 1:header + 1] = new_lines

    if changed:
        path.write_text("\n".join(lines), encoding="utf-8")
    return changed


def _section_header(lines: list[str], section: str) -> int | None:
    for index, line in enumerate(lines):
        if line.strip() == f"[{section}]":
            return index
    return None


# ---------------------------------------------------------------------------
# gradle.properties
# ---------------------------------------------------------------------------


def update_gradle_properties(project_root: str | Path) -> bool:
    """Enable the AndroidX flags an Android target needs."""
    path = Path(project_root) / GRADLE_PROPERTIES
    if not _existing(path):
        return False

    content = path.read_text(encoding="utf-8")
    if "android.useAndroidX" in content:
        return False
    block = "\n".join(ANDROID_PROPERTIES)
    path.write_text(f"{content.rstrip()}\n\n{block}\n", encoding="utf-8")
    return True


# ---------------------------------------------------------------------------
# settings.gradle.kts
# ---------------------------------------------------------------------------


def included_modules(settings_text: str) -> set[str]:
    """Module paths (``:name``) included by a settings script."""
    return set(INCLUDE_PATTERN.findall(settings_text))


def add_module_to_settings(project_root: str | Path, module_name: str) -> bool:
    """Append ``include(":<module>")`` unless the module is already included."""
    path = Path(project_root) / SETTINGS_FILE
    if not _existing(path):
        return False

    content = path.read_text(encoding="utf-8")
    if f":{module_name}" in included_modules(content):
        print_warning(f"Module ':{module_name}' is already included in {SETTINGS_FILE}")
        return False
    path.write_text(f'{content.rstrip()}\n\ninclude(":{module_name}")\n', encoding="utf-8")
    return True
