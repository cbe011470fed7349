"""Pydantic v2 models for the project being scaffolded.

Defines the platform ``Target`` enumeration, helpers for working with target
sets, and the immutable ``ProjectIdentity`` that names the generated project
(package namespace, display name, module and directory).
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .errors import InvalidTargetError


# ---------------------------------------------------------------------------
# Targets
# ---------------------------------------------------------------------------

class Target(str, Enum):
    """A platform backend the generated application can run on."""
    ANDROID = "android"
    JVM = "jvm"
    IOS = "ios"
    WEB = "web"

    @property
    def label(self) -> str:
        """Human-readable name used in prompts and messages."""
        return _TARGET_LABELS[self]


_TARGET_LABELS: dict[Target, str] = {
    Target.ANDROID: "Android",
    Target.JVM: "JVM (Desktop)",
    Target.IOS: "iOS",
    Target.WEB: "Web",
}

# Canonical listing order for prompts and fragment assembly.
TARGET_ORDER: tuple[Target, ...] = (Target.ANDROID, Target.JVM, Target.IOS, Target.WEB)


def parse_target(name: str) -> Target:
    """Return the ``Target`` for *name* (case-insensitive).

    Raises:
        InvalidTargetError: If *name* is not a known target.
    """
    try:
        return Target(name.strip().lower())
    except ValueError:
        raise InvalidTargetError(name) from None


def parse_targets(names: Iterable[str | Target]) -> frozenset[Target]:
    """Build a target set from names or ``Target`` values."""
    return frozenset(
        name if isinstance(name, Target) else parse_target(name) for name in names
    )


def ordered_targets(targets: Iterable[Target]) -> list[Target]:
    """Return *targets* sorted in canonical order."""
    selected = set(targets)
    return [t for t in TARGET_ORDER if t in selected]


# ---------------------------------------------------------------------------
# Name helpers
# ---------------------------------------------------------------------------

_IDENTIFIER_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")
_MODULE_RE = re.compile(r"^[A-Za-z0-9_-]+$")


def pascal_case(value: str) -> str:
    """Upper-case the first letter of each ``-``/``_`` separated part.

    The rest of each part is kept as-is, so ``composeApp`` becomes
    ``ComposeApp`` and ``my-app`` becomes ``MyApp``.
    """
    parts = re.split(r"[-_]", value)
    return "".join(part[:1].upper() + part[1:] for part in parts)


def is_valid_namespace(namespace: str) -> bool:
    """True for a dotted package name with at least two identifier segments."""
    if not namespace:
        return False
    parts = namespace.split(".")
    if len(parts) < 2:
        return False
    return all(_IDENTIFIER_RE.match(part) for part in parts)


def is_valid_app_name(app_name: str) -> bool:
    """True when the name is non-empty and has at least one letter or digit."""
    return bool(app_name) and any(ch.isalnum() for ch in app_name)


def is_valid_module_name(module_name: str) -> bool:
    """True for names made of letters, digits, hyphens and underscores."""
    if not module_name or not _MODULE_RE.match(module_name):
        return False
    return any(ch.isalnum() for ch in module_name)


# ---------------------------------------------------------------------------
# Project identity
# ---------------------------------------------------------------------------

class ProjectIdentity(BaseModel):
    """Names that identify a generated project. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    namespace: str = Field(..., description="Package namespace, e.g. 'com.example.app'")
    app_name: str = Field(..., description="Display name of the application")
    module_name: str = Field(default="composeApp", description="Gradle module directory name")
    directory_name: str = Field(default="", description="Project directory name")

    @field_validator("namespace")
    @classmethod
    def _check_namespace(cls, value: str) -> str:
        if not is_valid_namespace(value):
            raise ValueError(
                "Must be a valid Java package name (e.g., com.example.app)"
            )
        return value

    @field_validator("app_name")
    @classmethod
    def _check_app_name(cls, value: str) -> str:
        if not is_valid_app_name(value):
            raise ValueError("App name must contain at least one letter or digit")
        return value

    @field_validator("module_name")
    @classmethod
    def _check_module_name(cls, value: str) -> str:
        if not is_valid_module_name(value):
            raise ValueError(
                "Module name must contain only letters, digits, hyphens, or underscores"
            )
        return value

    @model_validator(mode="after")
    def _module_differs_from_directory(self) -> "ProjectIdentity":
        if self.directory_name and self.module_name == self.directory_name:
            raise ValueError(
                f"Module name cannot be the same as the project name \"{self.directory_name}\""
            )
        return self

    @property
    def namespace_path(self) -> str:
        """The namespace as a relative directory path (``com/example/app``)."""
        return self.namespace.replace(".", "/")

    @property
    def binary_name(self) -> str:
        """Framework base name derived from the module name."""
        return pascal_case(self.module_name)

    @property
    def ios_app_name(self) -> str:
        """Directory name of the companion Xcode project."""
        return f"ios{self.binary_name}"

    @property
    def target_name(self) -> str:
        """Xcode product name of the iOS app."""
        return f"{self.binary_name}.app"
