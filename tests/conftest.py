"""Shared pytest fixtures for the composables test suite.

Provides reusable fixtures for:
- Configuration with the iOS IDE link and the wrapper download switched off
- A default project identity
- A small hand-built template tree
- Generated projects built from the bundled templates
- Mock subprocess helpers
"""

from __future__ import annotations

import textwrap
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from composables.config import Config
from composables.models import ProjectIdentity, Target
from composables.scaffolder.generator import ProjectGenerator
from composables.scaffolder.resources import DirectoryTemplateSource


# ---------------------------------------------------------------------------
# Configuration & identity
# ---------------------------------------------------------------------------

@pytest.fixture
def config() -> Config:
    """Default configuration that never spawns Gradle or touches the network."""
    return Config(link_ios=False, fetch_wrapper=False)


@pytest.fixture
def identity() -> ProjectIdentity:
    """Identity of a project created with ``composables init myapp``."""
    return ProjectIdentity(
        namespace="com.acme.demo",
        app_name="Demo App",
        module_name="composeApp",
        directory_name="myapp",
    )


@pytest.fixture
def generator(config: Config) -> ProjectGenerator:
    """Generator over the bundled template tree."""
    return ProjectGenerator(config)


# ---------------------------------------------------------------------------
# Hand-built template tree
# ---------------------------------------------------------------------------

MINI_TEMPLATE_FILES: dict[str, bytes] = {
    "settings.gradle.kts": b'rootProject.name = "{{root_project_name}}"\ninclude(":{{module_name}}")\n',
    "gradlew": b"#!/bin/sh\necho gradle\n",
    "composeApp/build.gradle.kts": b"{{plugins}}\n\nkotlin {\n{{kotlin_targets}}\n{{sourcesets}}\n}\n",
    "composeApp/src/commonMain/kotlin/org/example/project/App.kt": (
        b"package {{namespace}}\n\nfun appName() = \"{{app_name}}\"\n\n\n"
    ),
    "composeApp/src/jvmMain/kotlin/org/example/project/main.kt": b"package {{namespace}}\n",
    "composeApp/src/androidMain/AndroidManifest.xml": b"<manifest/>\n",
    "composeApp/src/webMain/kotlin/main.web.kt": b"// {{module_name}}\n",
    "composeApp/webpack.config.d/watch.js": b"// watch\n",
    "composeApp/src/commonMain/composeResources/drawable/logo.png": b"\x89PNG{{app_name}}",
    "composeApp/src/commonMain/composeResources/files/blob.dat": b"\xff\xfe{{app_name}}",
    "iosApp/iosApp/ContentView.swift": b"import {{ios_binary_name}}\n",
}


@pytest.fixture
def mini_template_dir(tmp_path: Path) -> Path:
    """A small template tree exercising every filtering rule."""
    root = tmp_path / "templates"
    for relative, data in MINI_TEMPLATE_FILES.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    return root


@pytest.fixture
def mini_generator(config: Config, mini_template_dir: Path) -> ProjectGenerator:
    return ProjectGenerator(config, source=DirectoryTemplateSource(mini_template_dir))


# ---------------------------------------------------------------------------
# Generated projects
# ---------------------------------------------------------------------------

@pytest.fixture
async def jvm_project(
    tmp_path: Path, generator: ProjectGenerator, identity: ProjectIdentity
) -> Path:
    """A project generated from the bundled templates with only the JVM target."""
    project_root = tmp_path / "myapp"
    await generator.generate(project_root, identity, {Target.JVM})
    return project_root


# ---------------------------------------------------------------------------
# Sample build files
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_build_script() -> str:
    """A hand-written module build script with one JVM target."""
    return textwrap.dedent("""\
        import org.jetbrains.compose.desktop.application.dsl.TargetFormat

        plugins {
            alias(libs.plugins.jetbrains.kotlin.multiplatform)
            alias(libs.plugins.jetbrains.compose)
        }

        kotlin {
            jvm()

            sourceSets {
                commonMain.dependencies {
                    implementation(compose.runtime)
                }
                jvmMain.dependencies {
                    implementation(compose.desktop.currentOs)
                }
            }
        }
    """)


# ---------------------------------------------------------------------------
# Subprocess helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_run_command():
    """Patch the generator's ``run_command`` so Gradle is never started."""
    with patch(
        "composables.scaffolder.generator.run_command",
        new_callable=AsyncMock,
        return_value=(0, "", ""),
    ) as mock:
        yield mock
