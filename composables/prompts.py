"""Interactive questions asked by ``composables init`` and ``composables target``.

Every question re-asks until the answer is valid, so callers always get a
usable value back.
"""

from __future__ import annotations

from pathlib import Path

from rich.prompt import Confirm, IntPrompt, Prompt

from composables.models import (
    TARGET_ORDER,
    Target,
    is_valid_app_name,
    is_valid_module_name,
    is_valid_namespace,
)
from composables.utils import console, print_error, print_info

INVALID_MODULE_NAME = (
    "Invalid module name. Must contain only letters, digits, hyphens, or underscores"
)


def ask_namespace(default: str = "com.example.app") -> str:
    while True:
        namespace = Prompt.ask("Enter package name", default=default, console=console).strip()
        if is_valid_namespace(namespace):
            return namespace
        print_error("Invalid package name. Must be a valid Java package name (e.g., com.example.app)")


def ask_app_name(default: str = "My App") -> str:
    while True:
        app_name = Prompt.ask("Enter app name", default=default, console=console).strip()
        if is_valid_app_name(app_name):
            return app_name
        print_error("Invalid app name. Must contain at least one letter or digit")


def ask_module_name(project_name: str, default: str = "composeApp") -> str:
    """Ask for the module of a new project; it may not share the project's name."""
    while True:
        module_name = Prompt.ask("Enter module name", default=default, console=console).strip()
        if module_name == project_name:
            print_error(
                f'Module name cannot be the same as the project name "{project_name}". '
                "Try specifying a different name."
            )
            continue
        if not is_valid_module_name(module_name):
            print_error(INVALID_MODULE_NAME)
            continue
        return module_name


def ask_unique_module_name(project_root: Path, default: str = "composeApp") -> str:
    """Ask for a module name that does not exist yet in *project_root*."""
    while True:
        module_name = Prompt.ask("Enter module name", default=default, console=console).strip()
        if not is_valid_module_name(module_name):
            print_error(INVALID_MODULE_NAME)
            continue
        if (project_root / module_name).exists():
            print_error(f"Module '{module_name}' already exists. Please choose a different name.")
            continue
        return module_name


def ask_targets() -> frozenset[Target]:
    """Ask yes/no for every platform; re-asks the lot when none is chosen."""
    while True:
        console.print("\nWhich platforms would you like your app to run on?")
        selected = {
            target
            for target in TARGET_ORDER
            if Confirm.ask(target.label, default=True, console=console)
        }
        if selected:
            return frozenset(selected)
        print_error("At least one platform is required...")


def confirm_add_module() -> bool:
    return Confirm.ask(
        "Gradle project detected. This will add a new module to your existing "
        "project. Is this what you want?",
        default=False,
        console=console,
    )


def select_module(build_files: list[Path]) -> Path:
    """Let the user pick one of several module build files."""
    modules = sorted(build_files, key=lambda p: p.parent.name)
    print_info("Multiple Compose modules detected:")
    for index, build_file in enumerate(modules, start=1):
        print_info(f"  {index}. {build_file.parent.name}")

    while True:
        choice = IntPrompt.ask(f"Select a module (1-{len(modules)})", console=console)
        if 1 <= choice <= len(modules):
            selected = modules[choice - 1]
            print_info(f"Selected module: {selected.parent.name}")
            return selected
        print_error(f"Invalid selection. Please enter a number between 1 and {len(modules)}")
