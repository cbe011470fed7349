"""composables configuration.

Centralised, typed configuration for the CLI. All settings use Pydantic v2
models so they can be validated at construction time and serialised to/from
JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

_FALSE_VALUES = ("0", "false", "no", "off")


class VersionConfig(BaseModel):
    """Library and tool versions written into generated version catalogs."""

    kotlin: str = Field(default="2.2.20")
    compose: str = Field(default="1.9.0", description="Compose Multiplatform version")
    compose_hotreload: str = Field(default="1.0.0-rc01")
    agp: str = Field(default="8.11.2", description="Android Gradle Plugin version")
    android_compile_sdk: int = Field(default=36, ge=21)
    android_min_sdk: int = Field(default=24, ge=21)
    android_target_sdk: int = Field(default=36, ge=21)
    androidx_activity: str = Field(default="1.11.0")


class Config(BaseModel):
    """Global composables configuration.

    Instances are typically created once by the CLI entry point and then passed
    through the generator and patcher.
    """

    default_namespace: str = Field(default="com.example.app")
    default_app_name: str = Field(default="My App")
    default_module_name: str = Field(default="composeApp")

    # Placeholder names used inside the bundled template tree.
    template_namespace: str = Field(default="org.example.project")
    template_module: str = Field(default="composeApp")
    template_ios_app: str = Field(default="iosApp")

    template_dir: Optional[Path] = Field(
        default=None, description="Use this directory instead of the bundled templates"
    )
    link_ios: bool = Field(
        default=True, description="Run the Gradle IDE metadata task after adding iOS"
    )
    update_url: str = Field(default="https://composables.com/get-composables.sh")
    fetch_wrapper: bool = Field(
        default=True,
        description="Download the Gradle wrapper jar when the template tree does not bundle it",
    )
    wrapper_jar_url: str = Field(
        default="https://raw.githubusercontent.com/gradle/gradle/v8.14.3/gradle/wrapper/gradle-wrapper.jar"
    )
    versions: VersionConfig = Field(default_factory=VersionConfig)

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def template_namespace_path(self) -> str:
        """The placeholder namespace as a path (``org/example/project``)."""
        return self.template_namespace.replace(".", "/")

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return path

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            COMPOSABLES_TEMPLATE_DIR, COMPOSABLES_LINK_IOS, COMPOSABLES_FETCH_WRAPPER,
            COMPOSABLES_UPDATE_URL, COMPOSABLES_DEFAULT_NAMESPACE,
            COMPOSABLES_DEFAULT_MODULE.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("COMPOSABLES_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["COMPOSABLES_TEMPLATE_DIR"])
        for variable, field in (
            ("COMPOSABLES_LINK_IOS", "link_ios"),
            ("COMPOSABLES_FETCH_WRAPPER", "fetch_wrapper"),
        ):
            if os.environ.get(variable):
                kwargs[field] = os.environ[variable].strip().lower() not in _FALSE_VALUES
        if os.environ.get("COMPOSABLES_UPDATE_URL"):
            kwargs["update_url"] = os.environ["COMPOSABLES_UPDATE_URL"]
        if os.environ.get("COMPOSABLES_DEFAULT_NAMESPACE"):
            kwargs["default_namespace"] = os.environ["COMPOSABLES_DEFAULT_NAMESPACE"]
        if os.environ.get("COMPOSABLES_DEFAULT_MODULE"):
            kwargs["default_module_name"] = os.environ["COMPOSABLES_DEFAULT_MODULE"]
        return cls(**kwargs)
