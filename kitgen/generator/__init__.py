"""Resource generation orchestrator.

Quick usage::

    from kitgen.config import GeneratorConfig
    from kitgen.generator import ResourceGenerator

    generator = ResourceGenerator(GeneratorConfig(project_root=Path("myapp")))
    result = generator.generate_resource("post", ["title", "body:text", "published_at"])
    if not result.ok:
        for error in result.validation_errors:
            print(error)
"""

from kitgen.generator.generator import ResourceGenerator
from kitgen.generator.migrations import next_migration_path
from kitgen.generator.models import (
    FieldData,
    GenerationResult,
    MigrationFile,
    ResourceData,
    ViewData,
)
from kitgen.generator.templates import TemplateRenderer

__all__ = [
    "FieldData",
    "GenerationResult",
    "MigrationFile",
    "ResourceData",
    "ResourceGenerator",
    "TemplateRenderer",
    "ViewData",
    "next_migration_path",
]
