"""composables patcher -- structural edits to existing Gradle projects.

Usage::

    from composables.models import Target
    from composables.patcher import TargetAdder, find_compose_modules

    modules = find_compose_modules(project_root)
    result = await TargetAdder().add(Target.ANDROID, project_root, modules[0])
    print(result.status)
"""

from composables.patcher.blocks import ConfigDocument
from composables.patcher.project_files import (
    add_module_to_settings,
    update_gradle_properties,
    update_root_build_file,
    update_version_catalog,
)
from composables.patcher.targets import (
    TargetAdder,
    TargetResult,
    TargetStatus,
    find_compose_modules,
    is_gradle_project,
)

__all__ = [
    "ConfigDocument",
    "TargetAdder",
    "TargetResult",
    "TargetStatus",
    "add_module_to_settings",
    "find_compose_modules",
    "is_gradle_project",
    "update_gradle_properties",
    "update_root_build_file",
    "update_version_catalog",
]
