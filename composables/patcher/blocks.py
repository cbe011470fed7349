"""Line-oriented editing of Gradle Kotlin DSL files.

Blocks are located by counting braces line by line: the opening line puts the
scan at depth 1, every following line adds its ``{`` count and subtracts its
``}`` count, and the line that brings the depth back to 0 closes the block.
Braces inside string literals or comments are counted like any other brace.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Optional

# Opening-line predicates for the blocks the patcher edits.  Lines are
# compared after stripping surrounding whitespace.
BlockOpener = Callable[[str], bool]


def plugins_block(line: str) -> bool:
    return line.startswith("plugins {")


def buildscript_block(line: str) -> bool:
    return line.startswith("buildscript {")


def kotlin_block(line: str) -> bool:
    return line.startswith("kotlin {")


def source_sets_block(line: str) -> bool:
    return "sourceSets" in line and "{" in line


class ConfigDocument:
    """An editable, in-memory copy of a text configuration file."""

    def __init__(self, lines: Iterable[str], path: Path | None = None) -> None:
        self.lines: list[str] = list(lines)
        self.path = path

    # -- Construction / persistence ----------------------------------------

    @classmethod
    def from_text(cls, text: str, path: Path | None = None) -> "ConfigDocument":
        return cls(text.split("\n"), path)

    @classmethod
    def load(cls, path: str | Path) -> "ConfigDocument":
        path = Path(path)
        return cls.from_text(path.read_text(encoding="utf-8"), path)

    def text(self) -> str:
        return "\n".join(self.lines)

    def save(self, path: str | Path | None = None) -> Path:
        """Write the document back to *path* (defaults to where it was loaded)."""
        target = Path(path) if path is not None else self.path
        if target is None:
            raise ValueError("ConfigDocument has no path to save to")
        target.write_text(self.text(), encoding="utf-8")
        return target

    # -- Queries -------------------------------------------------------------

    def contains(self, needle: str) -> bool:
        return any(needle in line for line in self.lines)

    def find_block_end(self, opener: BlockOpener) -> Optional[int]:
        """Return the index of the line closing the first block *opener* matches.

        Returns ``None`` when no line matches or the block is never closed.
        """
        for start, line in enumerate(self.lines):
            if not opener(line.strip()):
                continue
            depth = 1
            for index in range(start + 1, len(self.lines)):
                current = self.lines[index]
                depth += current.count("{") - current.count("}")
                if depth <= 0:
                    return index
            return None
        return None

    # -- Mutations -----------------------------------------------------------

    def insert_before(self, index: int, lines: Iterable[str]) -> None:
        """Insert *lines* so that the first of them lands at *index*."""
        self.lines[index:index] = list(lines)

    def insert_into_block(self, opener: BlockOpener, lines: Iterable[str]) -> bool:
        """Insert *lines* just before the closing line of a block.

        Returns ``False`` (leaving the document unchanged) when the block is
        not present.
        """
        end = self.find_block_end(opener)
        if end is None:
            return False
        self.insert_before(end, lines)
        return True

    def ensure_import(self, import_line: str) -> bool:
        """Add *import_line* unless the document already has it.

        The line goes after the last ``import`` line, or before the first line
        that is neither blank nor a comment when there are no imports.
        """
        if any(line.strip() == import_line for line in self.lines):
            return False

        last_import = None
        for index, line in enumerate(self.lines):
            if line.startswith("import "):
                last_import = index
        if last_import is not None:
            self.insert_before(last_import + 1, [import_line])
            return True

        for index, line in enumerate(self.lines):
            stripped = line.strip()
            if stripped and not stripped.startswith("//"):
                self.insert_before(index, [import_line])
                return True
        return False

    def append(self, lines: Iterable[str]) -> None:
        """Append *lines* at the end, ignoring trailing blank lines."""
        while self.lines and not self.lines[-1].strip():
            self.lines.pop()
        self.lines.extend(lines)
        self.lines.append("")
