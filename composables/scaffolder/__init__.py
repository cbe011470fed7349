"""composables scaffolder -- materializes Compose Multiplatform projects.

The bundled template tree is filtered by the selected platform targets, its
placeholder directories are relocated, and the ``{{token}}`` markers in every
text file are replaced with fragments assembled for the project.

Quick usage::

    from composables.models import ProjectIdentity, Target
    from composables.scaffolder import ProjectGenerator

    identity = ProjectIdentity(namespace="com.example.app", app_name="My App")
    generator = ProjectGenerator()
    result = await generator.generate("/tmp/myapp", identity, {Target.JVM})
"""

from composables.scaffolder.filters import PathFilter, contributed_by
from composables.scaffolder.fragments import assemble_fragments, target_fragments
from composables.scaffolder.generator import GenerationResult, ProjectGenerator
from composables.scaffolder.resources import (
    ArchiveTemplateSource,
    DirectoryTemplateSource,
    detect_template_source,
)
from composables.scaffolder.templates import TemplateRenderer, substitute

__all__ = [
    "ArchiveTemplateSource",
    "DirectoryTemplateSource",
    "GenerationResult",
    "PathFilter",
    "ProjectGenerator",
    "TemplateRenderer",
    "assemble_fragments",
    "contributed_by",
    "detect_template_source",
    "substitute",
    "target_fragments",
]
