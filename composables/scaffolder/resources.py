"""Access to the bundled project template tree.

The template tree ships inside the package under ``templates/project``.  When
composables runs from an installed or checked-out package the tree is a plain
directory; when it runs from a zip application (``.pyz``) the tree lives inside
the archive.  Both are exposed through the same two-call interface so callers
never need to know which one is active.
"""

from __future__ import annotations

import zipfile
from pathlib import Path, PurePosixPath
from typing import Optional, Protocol

from composables.errors import TemplateNotFoundError


_PACKAGE_DIR = Path(__file__).parent
_TEMPLATE_SUBDIR = "templates/project"


class TemplateSource(Protocol):
    """Read-only tree of template files addressed by posix relative paths."""

    def list(self, prefix: str = "") -> list[str]:
        """Return sorted file paths under *prefix* (relative to the root)."""
        ...

    def read(self, path: str) -> bytes:
        """Return the raw bytes of the file at *path*."""
        ...


def _normalize(path: str) -> str:
    normalized = PurePosixPath(path.replace("\\", "/")).as_posix().strip("/")
    return "" if normalized == "." else normalized


# ---------------------------------------------------------------------------
# Loose directory
# ---------------------------------------------------------------------------


class DirectoryTemplateSource:
    """Templates stored as regular files below *root*."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def list(self, prefix: str = "") -> list[str]:
        prefix = _normalize(prefix)
        base = self.root / prefix if prefix else self.root
        if base.is_file():
            return [prefix]
        if not base.is_dir():
            return []
        return sorted(
            p.relative_to(self.root).as_posix()
            for p in base.rglob("*")
            if p.is_file()
        )

    def read(self, path: str) -> bytes:
        file_path = self.root / _normalize(path)
        if not file_path.is_file():
            raise TemplateNotFoundError(path)
        return file_path.read_bytes()

    def __repr__(self) -> str:
        return f"DirectoryTemplateSource({str(self.root)!r})"


# ---------------------------------------------------------------------------
# Zip archive
# ---------------------------------------------------------------------------


class ArchiveTemplateSource:
    """Templates stored as members of a zip archive below *member_root*."""

    def __init__(self, archive: str | Path, member_root: str = "") -> None:
        self.archive = Path(archive)
        self.member_root = _normalize(member_root)

    def _member(self, path: str) -> str:
        path = _normalize(path)
        if self.member_root and path:
            return f"{self.member_root}/{path}"
        return self.member_root or path

    def list(self, prefix: str = "") -> list[str]:
        if not self.archive.is_file():
            return []
        member_prefix = self._member(prefix)
        root_len = len(self.member_root) + 1 if self.member_root else 0
        with zipfile.ZipFile(self.archive) as zf:
            names = [
                name
                for name in zf.namelist()
                if not name.endswith("/")
                and (
                    not member_prefix
                    or name == member_prefix
                    or name.startswith(member_prefix + "/")
                )
            ]
        return sorted(name[root_len:] for name in names)

    def read(self, path: str) -> bytes:
        member = self._member(path)
        with zipfile.ZipFile(self.archive) as zf:
            try:
                return zf.read(member)
            except KeyError:
                raise TemplateNotFoundError(path) from None

    def __repr__(self) -> str:
        return f"ArchiveTemplateSource({str(self.archive)!r}, {self.member_root!r})"


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------


def _zip_location() -> Optional[tuple[Path, str]]:
    """Return ``(archive, member_dir)`` when this module was imported from a zip."""
    loader = globals().get("__loader__")
    archive = getattr(loader, "archive", None)
    if not archive:
        return None
    module_path = Path(__file__).as_posix()
    archive_path = Path(archive).as_posix()
    if not module_path.startswith(archive_path + "/"):
        return None
    inner = PurePosixPath(module_path[len(archive_path) + 1:]).parent
    return Path(archive), str(inner / _TEMPLATE_SUBDIR)


def detect_template_source(override: str | Path | None = None) -> TemplateSource:
    """Pick the template source for this run.

    An explicit *override* directory always wins.  Otherwise the archive
    variant is used when the package was loaded by ``zipimport`` and the
    bundled directory next to this module in every other case.
    """
    if override is not None:
        return DirectoryTemplateSource(override)
    location = _zip_location()
    if location is not None:
        archive, member_root = location
        return ArchiveTemplateSource(archive, member_root)
    return DirectoryTemplateSource(_PACKAGE_DIR / _TEMPLATE_SUBDIR)
