"""Decide which template paths belong to a project for a given target set.

Paths are posix paths relative to the template root, e.g.
``composeApp/src/androidMain/AndroidManifest.xml``.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import PurePosixPath

from composables.errors import UnknownSourceSetError
from composables.models import Target

SOURCE_ROOT = "src"
COMMON_SOURCE_SET = "commonMain"
WEBPACK_CONFIG_DIR = "webpack.config.d"

# Source set directory -> target that owns it.
SOURCE_SET_TARGETS: dict[str, Target] = {
    "androidMain": Target.ANDROID,
    "iosMain": Target.IOS,
    "jvmMain": Target.JVM,
    "jsMain": Target.WEB,
    "wasmJsMain": Target.WEB,
    "webMain": Target.WEB,
}


class PathFilter:
    """Include/exclude decisions for template paths.

    Args:
        targets: Selected platform targets.
        module_base_name: Name of the module directory inside the template.
        ios_app_dir: Name of the top-level Xcode project directory.
    """

    def __init__(
        self,
        targets: Iterable[Target],
        module_base_name: str = "composeApp",
        ios_app_dir: str = "iosApp",
    ) -> None:
        self.targets = frozenset(targets)
        self.module_base_name = module_base_name
        self.ios_app_dir = ios_app_dir

    def include(self, relative_path: str) -> bool:
        """Return ``True`` when *relative_path* belongs in the output.

        Raises:
            UnknownSourceSetError: If the path sits in a source set that no
                target owns.
        """
        parts = PurePosixPath(relative_path).parts
        if not parts:
            return False

        if parts[0] == self.ios_app_dir and Target.IOS not in self.targets:
            return False

        source_set = self._source_set(parts)
        if source_set is not None and source_set != COMMON_SOURCE_SET:
            owner = SOURCE_SET_TARGETS.get(source_set)
            if owner is None:
                raise UnknownSourceSetError(source_set, relative_path)
            if owner not in self.targets:
                return False

        if WEBPACK_CONFIG_DIR in parts[:-1] and Target.WEB not in self.targets:
            return False

        return True

    def _source_set(self, parts: tuple[str, ...]) -> str | None:
        """Return the source set segment of *parts*, if it has one."""
        for index, part in enumerate(parts[:-2]):
            if part != SOURCE_ROOT:
                continue
            if index == 0 or parts[index - 1] == self.module_base_name:
                return parts[index + 1]
        return None


def include(
    relative_path: str,
    targets: Iterable[Target],
    module_base_name: str = "composeApp",
) -> bool:
    """Functional form of :meth:`PathFilter.include`."""
    return PathFilter(targets, module_base_name).include(relative_path)


def contributed_by(
    target: Target,
    module_base_name: str = "composeApp",
    ios_app_dir: str = "iosApp",
):
    """Return a predicate for the paths that *target* alone adds to a project.

    A path qualifies when it is included with ``{target}`` selected but not
    with an empty selection, i.e. it is not shared code.
    """
    with_target = PathFilter({target}, module_base_name, ios_app_dir)
    without = PathFilter((), module_base_name, ios_app_dir)

    def _predicate(relative_path: str) -> bool:
        return with_target.include(relative_path) and not without.include(relative_path)

    return _predicate
