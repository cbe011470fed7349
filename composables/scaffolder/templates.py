"""Template rendering and placeholder substitution.

Two mechanisms live here:

* ``TemplateRenderer`` loads the Jinja2 *fragment* templates from
  ``composables/scaffolder/templates/fragments/``.  Fragments are the
  multi-line Gradle snippets (target declarations, dependency blocks,
  configuration blocks) that vary with the selected targets.
* ``substitute`` performs the literal ``{{token}}`` replacement applied to
  every text file of the copied project tree.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jinja2 import (
    BaseLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    TemplateNotFound,
    select_autoescape,
)

from composables.models import pascal_case


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates" / "fragments"

TOKEN_PATTERN = re.compile(r"\{\{([A-Za-z_][A-Za-z0-9_]*)\}\}")


# ---------------------------------------------------------------------------
# Literal substitution
# ---------------------------------------------------------------------------


def substitute(text: str, tokens: Mapping[str, str]) -> str:
    """Replace every ``{{name}}`` marker whose name is in *tokens*.

    The text is scanned once, so replacement values are never re-scanned for
    further markers.  Markers with unknown names are left as they are.
    """

    def _replace(match: re.Match[str]) -> str:
        return tokens.get(match.group(1), match.group(0))

    return TOKEN_PATTERN.sub(_replace, text)


def find_tokens(text: str) -> set[str]:
    """Return the names of all ``{{name}}`` markers in *text*."""
    return set(TOKEN_PATTERN.findall(text))


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 fragment templates.

    Fragment templates are ``.j2`` files under a configurable template
    directory, addressed by their relative path (e.g.
    ``"android/target.kts.j2"``).
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        loader: BaseLoader
        if template_dir is None:
            # PackageLoader also resolves templates inside a zip application.
            self.template_dir = _DEFAULT_TEMPLATE_DIR
            loader = PackageLoader("composables.scaffolder", "templates/fragments")
        else:
            self.template_dir = Path(template_dir)
            loader = FileSystemLoader(str(self.template_dir))
        self.env = Environment(
            loader=loader,
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["pascal_case"] = pascal_case

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context."""
        template = self.env.get_template(template_path)
        return template.render(**context)

    def render_optional(self, template_path: str, context: dict[str, Any]) -> str:
        """Render *template_path*, or return ``""`` when it does not exist."""
        try:
            template = self.env.get_template(template_path)
        except TemplateNotFound:
            return ""
        return template.render(**context)

    def render_lines(self, template_path: str, context: dict[str, Any]) -> list[str]:
        """Render an optional template and split it into lines.

        Trailing blank lines are dropped; a missing template yields ``[]``.
        """
        content = self.render_optional(template_path, context).rstrip("\n")
        return content.split("\n") if content else []
