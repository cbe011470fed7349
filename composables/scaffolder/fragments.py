"""Per-target Gradle fragments and the placeholder token table.

Fragments are assembled once per invocation from the selected targets and the
project identity.  The generator feeds them to ``substitute`` as the values of
the ``{{imports}}``, ``{{plugins}}``, ``{{kotlin_targets}}``... markers of the
template tree; the ``target`` patcher inserts the same fragments into an
existing build file.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, Field

from composables.config import VersionConfig
from composables.models import ProjectIdentity, Target, ordered_targets

from .templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Static fragment tables
# ---------------------------------------------------------------------------

TARGET_IMPORTS: dict[Target, list[str]] = {
    Target.ANDROID: ["import org.jetbrains.kotlin.gradle.dsl.JvmTarget"],
    Target.JVM: ["import org.jetbrains.compose.desktop.application.dsl.TargetFormat"],
    Target.IOS: [],
    Target.WEB: [
        "import org.jetbrains.kotlin.gradle.ExperimentalWasmDsl",
        "import org.jetbrains.kotlin.gradle.targets.js.webpack.KotlinWebpackConfig",
    ],
}

# Version catalog plugin aliases a module applies, in dotted accessor form.
BASE_PLUGIN_ALIASES: list[str] = [
    "jetbrains.kotlin.multiplatform",
    "jetbrains.compose",
    "jetbrains.compose.compiler",
    "jetbrains.compose.hotreload",
]

TARGET_PLUGIN_ALIASES: dict[Target, list[str]] = {
    Target.ANDROID: ["android.application"],
}

ANDROID_PROPERTIES: list[str] = [
    "#Android",
    "android.nonTransitiveRClass=true",
    "android.useAndroidX=true",
]


def plugin_line(alias: str, apply: bool = True) -> str:
    """Kotlin DSL line applying the catalog plugin *alias*."""
    line = f"    alias(libs.plugins.{alias})"
    return line if apply else f"{line} apply false"


def plugin_aliases(targets: Iterable[Target]) -> list[str]:
    """Base plugin aliases plus those required by *targets*."""
    aliases = list(BASE_PLUGIN_ALIASES)
    for target in ordered_targets(targets):
        aliases.extend(TARGET_PLUGIN_ALIASES.get(target, []))
    return aliases


# ---------------------------------------------------------------------------
# Version catalog entries
# ---------------------------------------------------------------------------

CatalogEntries = dict[str, list[tuple[str, str]]]


def base_catalog_entries(versions: VersionConfig) -> CatalogEntries:
    """Catalog entries every Compose Multiplatform project needs."""
    return {
        "versions": [
            ("kotlin", f'kotlin = "{versions.kotlin}"'),
            ("compose-multiplatform", f'compose-multiplatform = "{versions.compose}"'),
            ("compose-hotreload", f'compose-hotreload = "{versions.compose_hotreload}"'),
        ],
        "libraries": [],
        "plugins": [
            (
                "jetbrains-kotlin-multiplatform",
                'jetbrains-kotlin-multiplatform = { id = "org.jetbrains.kotlin.multiplatform", version.ref = "kotlin" }',
            ),
            (
                "jetbrains-compose",
                'jetbrains-compose = { id = "org.jetbrains.compose", version.ref = "compose-multiplatform" }',
            ),
            (
                "jetbrains-compose-compiler",
                'jetbrains-compose-compiler = { id = "org.jetbrains.kotlin.plugin.compose", version.ref = "kotlin" }',
            ),
            (
                "jetbrains-compose-hotreload",
                'jetbrains-compose-hotreload = { id = "org.jetbrains.compose.hot-reload", version.ref = "compose-hotreload" }',
            ),
        ],
    }


def android_catalog_entries(versions: VersionConfig) -> CatalogEntries:
    """Catalog entries added by the android target."""
    return {
        "versions": [
            ("agp", f'agp = "{versions.agp}"'),
            ("android-compileSdk", f'android-compileSdk = "{versions.android_compile_sdk}"'),
            ("android-minSdk", f'android-minSdk = "{versions.android_min_sdk}"'),
            ("android-targetSdk", f'android-targetSdk = "{versions.android_target_sdk}"'),
            ("androidx-activity", f'androidx-activity = "{versions.androidx_activity}"'),
        ],
        "libraries": [
            (
                "androidx-activitycompose",
                'androidx-activitycompose = { module = "androidx.activity:activity-compose", version.ref = "androidx-activity" }',
            ),
        ],
        "plugins": [
            (
                "android-application",
                'android-application = { id = "com.android.application", version.ref = "agp" }',
            ),
        ],
    }


def catalog_entries(targets: Iterable[Target], versions: VersionConfig) -> CatalogEntries:
    """All catalog entries required by a project with *targets*."""
    entries = base_catalog_entries(versions)
    if Target.ANDROID in set(targets):
        for section, items in android_catalog_entries(versions).items():
            entries[section].extend(items)
    return entries


# ---------------------------------------------------------------------------
# Per-target fragments
# ---------------------------------------------------------------------------


class TargetFragments(BaseModel):
    """The Gradle snippets one target contributes to a module build file."""

    target: Target
    imports: list[str] = Field(default_factory=list)
    plugin_aliases: list[str] = Field(default_factory=list)
    kotlin_target: list[str] = Field(default_factory=list, description="Lines inside kotlin {}")
    dependencies: list[str] = Field(default_factory=list, description="Lines inside sourceSets {}")
    configuration: list[str] = Field(default_factory=list, description="Top-level block lines")


def _fragment_context(identity: ProjectIdentity) -> dict[str, str]:
    return {
        "namespace": identity.namespace,
        "module_name": identity.module_name,
        "app_name": identity.app_name,
    }


def target_fragments(
    target: Target,
    identity: ProjectIdentity,
    renderer: TemplateRenderer | None = None,
) -> TargetFragments:
    """Render every fragment *target* contributes for *identity*."""
    renderer = renderer or TemplateRenderer()
    context = _fragment_context(identity)
    return TargetFragments(
        target=target,
        imports=list(TARGET_IMPORTS[target]),
        plugin_aliases=list(TARGET_PLUGIN_ALIASES.get(target, [])),
        kotlin_target=renderer.render_lines(f"{target.value}/target.kts.j2", context),
        dependencies=renderer.render_lines(f"{target.value}/dependencies.kts.j2", context),
        configuration=renderer.render_lines(f"{target.value}/configuration.kts.j2", context),
    )


# ---------------------------------------------------------------------------
# Token table
# ---------------------------------------------------------------------------


def _block(lines: list[str]) -> str:
    return "\n".join(lines)


def _catalog_lines(entries: list[tuple[str, str]]) -> list[str]:
    return [line for _, line in entries]


def assemble_fragments(
    targets: Iterable[Target],
    identity: ProjectIdentity,
    versions: VersionConfig | None = None,
    renderer: TemplateRenderer | None = None,
) -> dict[str, str]:
    """Build the placeholder token table for *targets* and *identity*."""
    versions = versions or VersionConfig()
    renderer = renderer or TemplateRenderer()
    selected = ordered_targets(targets)
    fragments = [target_fragments(t, identity, renderer) for t in selected]
    has_android = Target.ANDROID in selected

    imports = [line for f in fragments for line in f.imports]
    plugins = [plugin_line(alias) for alias in plugin_aliases(selected)]
    kotlin_targets = [_block(f.kotlin_target) for f in fragments if f.kotlin_target]
    dependencies = [
        _block(renderer.render_lines("common/dependencies.kts.j2", _fragment_context(identity)))
    ]
    dependencies.extend(_block(f.dependencies) for f in fragments if f.dependencies)
    configurations = [_block(f.configuration) for f in fragments if f.configuration]

    android = android_catalog_entries(versions)

    return {
        "app_name": identity.app_name,
        "namespace": identity.namespace,
        "module_name": identity.module_name,
        "root_project_name": identity.directory_name or identity.module_name,
        "ios_binary_name": identity.binary_name,
        "target_name": identity.target_name,
        "kotlin_version": versions.kotlin,
        "compose_version": versions.compose,
        "compose_hotreload_version": versions.compose_hotreload,
        "android_versions": (
            _block(["# Android", *_catalog_lines(android["versions"])]) + "\n"
            if has_android else ""
        ),
        "android_libraries": (
            _block(_catalog_lines(android["libraries"])) + "\n" if has_android else ""
        ),
        "android_plugins": _block(_catalog_lines(android["plugins"])) if has_android else "",
        "android_plugin": (
            plugin_line("android.application", apply=False) + "\n" if has_android else ""
        ),
        "android_properties": _block(ANDROID_PROPERTIES) + "\n" if has_android else "",
        "imports": _block(imports) + "\n" if imports else "",
        "plugins": _block(["plugins {", *plugins, "}"]),
        "kotlin_targets": "\n\n".join(kotlin_targets) + "\n" if kotlin_targets else "",
        "sourcesets": _block(["    sourceSets {", "\n\n".join(dependencies), "    }"]),
        "configuration_blocks": "\n\n".join(configurations),
    }
