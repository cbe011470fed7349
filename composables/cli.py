"""composables command-line interface.

Subcommands:

init     -- create a new Compose Multiplatform project, or add a module to an
            existing Gradle project.
target   -- add a platform target to the project in the working directory.
update   -- update composables itself with the published install script.

Usage::

    composables init myapp
    composables target android
    composables update
    composables --version
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional, Sequence

from composables import __version__
from composables.config import Config
from composables.errors import ComposablesError, InvalidTargetError, UpdateError
from composables.models import ProjectIdentity, Target, ordered_targets, parse_target
from composables.patcher import (
    TargetAdder,
    TargetStatus,
    add_module_to_settings,
    find_compose_modules,
    is_gradle_project,
    update_gradle_properties,
    update_root_build_file,
    update_version_catalog,
)
from composables.patcher.project_files import ROOT_BUILD_FILE
from composables.prompts import (
    ask_app_name,
    ask_module_name,
    ask_namespace,
    ask_targets,
    ask_unique_module_name,
    confirm_add_module,
    select_module,
)
from composables.scaffolder import ProjectGenerator
from composables.scaffolder.fragments import plugin_aliases
from composables.updater import download_script, run_script
from composables.utils import (
    gradle_script,
    is_empty_dir,
    print_error,
    print_info,
    print_success,
    print_summary_table,
    print_warning,
)

HELP_FOOTER = (
    "If you have any problems or need help, do not hesitate to ask for help at:\n"
    "    https://github.com/composablehorizons/composables-cli"
)


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------


async def run_init(directory: Optional[str], cwd: Path, config: Config) -> int:
    """Create a project in *directory* (relative to *cwd*, ``.`` for *cwd* itself)."""
    if not directory or not directory.strip():
        print_info("Please specify the project directory:")
        print_info("    composables init <project-directory>")
        print_info("")
        print_info("For example:")
        print_info("    composables init composeApp")
        return 1

    project_dir = cwd if directory == "." else cwd / directory
    project_name = project_dir.resolve().name

    if project_dir.exists():
        if not project_dir.is_dir():
            print_error(f"{directory} exists and is not a directory.")
            return 1
        if not is_empty_dir(project_dir):
            if is_gradle_project(project_dir):
                return await _add_module(project_dir, config)
            label = "The current directory" if directory == "." else f"The directory {directory}"
            print_error(f"{label} is not empty and does not contain a Gradle project.")
            print_info(
                "Try a new directory path or delete the existing one before "
                "trying to initialize a new module."
            )
            return 1

    module_name = ask_module_name(project_name, config.default_module_name)
    app_name = ask_app_name(config.default_app_name)
    namespace = ask_namespace(config.default_namespace)
    targets = ask_targets()

    identity = ProjectIdentity(
        namespace=namespace,
        app_name=app_name,
        module_name=module_name,
        directory_name=project_name,
    )
    try:
        generator = ProjectGenerator(config)
        result = await generator.generate(project_dir, identity, targets)
    except (OSError, ComposablesError) as exc:
        print_error(f"Failed to create the project: {exc}")
        return 1

    _print_configuration(identity, targets)
    print_success(f"Success! Your new Compose app is ready at {result.root.resolve()}")
    print_info("Start by typing:")
    print_info("")
    if directory != ".":
        print_info(f"    cd {directory}")
    task = "run" if Target.JVM in targets else "build"
    print_info(f"    {gradle_script()} {task}")
    print_info("")
    print_info("Happy coding!")
    return 0


async def _add_module(project_root: Path, config: Config) -> int:
    """Add a new Compose module to the existing Gradle project at *project_root*."""
    if not confirm_add_module():
        print_info("Operation cancelled.")
        return 0

    module_name = ask_unique_module_name(project_root, config.default_module_name)
    app_name = ask_app_name(config.default_app_name)
    namespace = ask_namespace(config.default_namespace)
    targets = ask_targets()

    identity = ProjectIdentity(namespace=namespace, app_name=app_name, module_name=module_name)
    try:
        generator = ProjectGenerator(config)
        await generator.generate_module(project_root, identity, targets)

        add_module_to_settings(project_root, module_name)
        update_version_catalog(project_root, targets, config.versions)
        update_root_build_file(project_root, plugin_aliases(targets))
        if Target.ANDROID in targets:
            update_gradle_properties(project_root)
    except (OSError, ComposablesError) as exc:
        print_error(f"Failed to add module '{module_name}': {exc}")
        return 1

    _print_configuration(identity, targets)
    print_success(f"Module '{module_name}' added to {project_root.resolve()}")
    return 0


def _print_configuration(identity: ProjectIdentity, targets: frozenset[Target]) -> None:
    print_summary_table(
        {
            "App Name": identity.app_name,
            "Package": identity.namespace,
            "Compose Module": identity.module_name,
            "Targets": ", ".join(t.label for t in ordered_targets(targets)),
        },
        title="Project Configuration",
    )


# ---------------------------------------------------------------------------
# target
# ---------------------------------------------------------------------------


async def run_target(name: str, cwd: Path, config: Config) -> int:
    """Add the target called *name* to the project in *cwd*."""
    try:
        target = parse_target(name)
    except InvalidTargetError as exc:
        print_error(str(exc))
        print_info("Available targets: android, jvm, ios, web")
        print_info("Usage: composables target <target-name>")
        return 1

    if not (cwd / ROOT_BUILD_FILE).is_file():
        print_error("This is not a recognized Compose Multiplatform project.")
        print_info("To create a new Compose app, run:")
        print_info("    composables init composeApp")
        return 1
    modules = find_compose_modules(cwd)
    if not modules:
        print_error("Could not find a Compose Multiplatform module in this project.")
        return 1

    build_file = modules[0] if len(modules) == 1 else select_module(modules)

    try:
        result = await TargetAdder(config).add(target, cwd, build_file)
    except (OSError, ComposablesError) as exc:
        print_error(f"Failed to add {target.label} target: {exc}")
        return 1

    if result.status is TargetStatus.ALREADY_PRESENT:
        print_info(f"{target.label} target is already configured in this project.")
        return 0
    if result.status is not TargetStatus.ADDED:
        print_error(result.message)
        return 1

    if result.skipped:
        print_warning(
            f"No {', '.join(result.skipped)} block found in {build_file}; "
            "those parts were not added."
        )
    print_success(f"{target.label} target added successfully!")
    print_info(f"Run '{gradle_script()} build' to verify the configuration.")
    return 0


# ---------------------------------------------------------------------------
# update
# ---------------------------------------------------------------------------


async def run_update(config: Config) -> int:
    """Download and run the install script; returns the script's exit code."""
    try:
        script = await download_script(config.update_url)
    except UpdateError as exc:
        print_error(f"Update failed: {exc}")
        return 1

    try:
        returncode = await run_script(script)
    except OSError as exc:
        print_error(f"Update failed: could not start bash: {exc}")
        return 1
    if returncode != 0:
        print_error(f"Update failed with exit code: {returncode}")
    return returncode


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="composables",
        description="Create and extend Compose Multiplatform projects.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=HELP_FOOTER,
    )
    parser.add_argument(
        "-v", "--version",
        action="version",
        version=__version__,
    )
    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    init_parser = subparsers.add_parser(
        "init",
        help="Initializes a new Compose Multiplatform project",
    )
    init_parser.add_argument(
        "directory",
        nargs="?",
        default=None,
        help="Project directory to create ('.' for the current directory)",
    )

    target_parser = subparsers.add_parser(
        "target",
        help="Adds a new Kotlin target to the current Compose Multiplatform project "
        "(options: android, jvm, ios, web)",
    )
    target_parser.add_argument("target", help="One of android, jvm, ios, web")

    subparsers.add_parser(
        "update",
        help="Updates the CLI tool with the latest version",
    )
    return parser


def main(argv: Sequence[str] | None = None, cwd: str | Path | None = None) -> int:
    """CLI entry point for ``composables`` and ``python -m composables``.

    Args:
        argv: Arguments without the program name; ``sys.argv[1:]`` when omitted.
        cwd: Working directory the commands act on; the process working
            directory when omitted.

    Returns:
        The process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    working_dir = Path(cwd) if cwd is not None else Path.cwd()
    config = Config.from_env()

    if args.command == "init":
        return asyncio.run(run_init(args.directory, working_dir, config))
    if args.command == "target":
        return asyncio.run(run_target(args.target, working_dir, config))
    if args.command == "update":
        return asyncio.run(run_update(config))

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
