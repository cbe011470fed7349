"""Exception hierarchy for the composables CLI."""

from __future__ import annotations


class ComposablesError(Exception):
    """Base class for every error raised by composables."""


class TemplateNotFoundError(ComposablesError):
    """Raised when a required bundled template file does not exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Template resource not found: {path}")


class UnknownSourceSetError(ComposablesError):
    """Raised when a template path names a source set no target owns."""

    def __init__(self, source_set: str, path: str) -> None:
        self.source_set = source_set
        self.path = path
        super().__init__(f"Unknown source set '{source_set}' in template path: {path}")


class InvalidTargetError(ComposablesError):
    """Raised when a target name is not one of android, jvm, ios, web."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown target '{name}'")


class PatchError(ComposablesError):
    """Raised when an existing project file cannot be patched."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}")


class UpdateError(ComposablesError):
    """Raised when the install script cannot be downloaded."""


class WrapperDownloadError(ComposablesError):
    """Raised when the Gradle wrapper jar cannot be fetched."""
