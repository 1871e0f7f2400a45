"""Pydantic v2 models for the generation pipeline.

Defines the data handed to scaffold templates (``ResourceData``,
``ViewData``), the migration artifact, and the result returned to callers.
"""

from __future__ import annotations

import keyword
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from kitgen.config import EditMode, GenerationOptions, PaginationMode
from kitgen.errors import FieldSpecError, InvalidNameError, TemplateValidationError
from kitgen.naming import (
    FieldSpec,
    display_field,
    pluralize,
    singularize,
    to_camel_case,
    to_identifier_case,
    to_snake_case,
    to_title,
)


MIGRATE_UP_MARKER = "-- migrate:up"
MIGRATE_DOWN_MARKER = "-- migrate:down"

# Every generated table has these columns; templates never emit them from fields.
BUILTIN_COLUMNS = frozenset({"id", "created_at"})


def package_identifier(name: str) -> str:
    """Lower-case package identifier for a resource or view name.

    Raises:
        InvalidNameError: If *name* cannot be turned into a Python identifier.
    """
    package = to_snake_case(name.strip())
    if not package.isidentifier() or keyword.iskeyword(package):
        raise InvalidNameError(name, "must produce a valid Python identifier")
    return package


# ---------------------------------------------------------------------------
# Fields
# ---------------------------------------------------------------------------


class FieldData(BaseModel):
    """A field as scaffold templates see it."""

    name: str
    type_name: str
    kind: str
    py_type: str
    sql_type: str
    is_reference: bool = False
    referenced_table: str = ""
    on_delete: str = ""
    is_textarea: bool = False
    identifier: str = Field(description="CamelCase form, acronyms upper-cased")
    camel: str
    title: str

    @classmethod
    def from_spec(cls, spec: FieldSpec) -> "FieldData":
        return cls(
            name=spec.name,
            type_name=spec.type_name,
            kind=spec.kind.value,
            py_type=spec.py_type,
            sql_type=spec.sql_type,
            is_reference=spec.is_reference,
            referenced_table=spec.referenced_table,
            on_delete=spec.on_delete.value if spec.on_delete else "",
            is_textarea=spec.is_textarea,
            identifier=to_identifier_case(spec.name),
            camel=to_camel_case(spec.name),
            title=to_title(spec.name),
        )


# ---------------------------------------------------------------------------
# Template data
# ---------------------------------------------------------------------------


class _TemplateData(BaseModel):
    def template_context(self) -> dict[str, Any]:
        """Top-level template variables; nested models stay objects."""
        return {name: getattr(self, name) for name in type(self).model_fields}


class ResourceData(_TemplateData):
    """The derived naming bundle and settings for one resource."""

    package_name: str
    module_name: str
    resource_name: str
    resource_name_lower: str
    resource_name_singular: str
    resource_name_plural: str
    table_name: str
    fields: list[FieldData]
    kit_name: str
    css_framework: str
    pagination_mode: PaginationMode = PaginationMode.INFINITE
    page_size: int = 20
    edit_mode: EditMode = EditMode.MODAL

    @model_validator(mode="after")
    def _check_table_round_trip(self) -> "ResourceData":
        if pluralize(singularize(self.table_name)) != self.table_name:
            raise ValueError(
                f"table name '{self.table_name}' does not survive a singular/plural round trip"
            )
        return self

    @classmethod
    def derive(
        cls,
        name: str,
        fields: list[FieldSpec],
        *,
        module_name: str,
        kit_name: str,
        css_framework: str,
        options: GenerationOptions | None = None,
    ) -> "ResourceData":
        """Derive every naming form from a raw resource name.

        ``"BlogPost"`` gives the package ``blog_post`` and ``"blog-posts"``
        gives ``blog_posts``; both map to the table ``blog_posts``.

        Raises:
            FieldSpecError: If no field besides ``id`` and ``created_at`` is given.
            InvalidNameError: If the name is not an identifier or its table
                name does not survive a singular/plural round trip.
        """
        if not any(spec.name.lower() not in BUILTIN_COLUMNS for spec in fields):
            raise FieldSpecError("", "at least one field other than id and created_at is required")
        options = options or GenerationOptions()
        package = package_identifier(name)
        singular = singularize(package)
        table = pluralize(singular)
        if pluralize(singularize(table)) != table:
            raise InvalidNameError(name, f"table name '{table}' does not survive a singular/plural round trip")
        return cls(
            package_name=package,
            module_name=module_name,
            resource_name=to_identifier_case(package),
            resource_name_lower=package,
            resource_name_singular=to_identifier_case(singular),
            resource_name_plural=to_identifier_case(table),
            table_name=table,
            fields=[FieldData.from_spec(spec) for spec in fields],
            kit_name=kit_name,
            css_framework=css_framework,
            pagination_mode=options.pagination_mode,
            page_size=options.page_size,
            edit_mode=options.edit_mode,
        )

    @property
    def singular_lower(self) -> str:
        return singularize(self.package_name)

    @property
    def display(self) -> FieldData | None:
        return display_field(self.fields)

    def template_context(self) -> dict[str, Any]:
        context = super().template_context()
        context["singular_lower"] = self.singular_lower
        context["display"] = self.display
        context["pagination_mode"] = self.pagination_mode.value
        context["edit_mode"] = self.edit_mode.value
        return context


class ViewData(_TemplateData):
    """Naming bundle for a view (a page with no backing table)."""

    package_name: str
    module_name: str
    view_name: str
    view_name_lower: str
    kit_name: str
    css_framework: str

    @classmethod
    def derive(cls, name: str, *, module_name: str, kit_name: str, css_framework: str) -> "ViewData":
        package = package_identifier(name)
        return cls(
            package_name=package,
            module_name=module_name,
            view_name=to_identifier_case(package),
            view_name_lower=package,
            kit_name=kit_name,
            css_framework=css_framework,
        )


# ---------------------------------------------------------------------------
# Artifacts
# ---------------------------------------------------------------------------


class MigrationFile(BaseModel):
    """A timestamped migration; never modified after it is written."""

    filename: str
    path: Path
    table: str
    up: str
    down: str = ""

    @classmethod
    def from_sql(cls, path: Path, table: str, sql: str) -> "MigrationFile":
        """Split *sql* into its ``-- migrate:up`` and ``-- migrate:down`` sections."""
        up, _, down = sql.partition(MIGRATE_DOWN_MARKER)
        up = up.replace(MIGRATE_UP_MARKER, "", 1)
        return cls(filename=path.name, path=path, table=table, up=up.strip(), down=down.strip())


class GenerationResult(BaseModel):
    """What one ``generate_*`` call produced."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: str
    name: str
    files: list[Path] = Field(default_factory=list)
    migration: MigrationFile | None = None
    routes: list[str] = Field(default_factory=list)
    wired: bool = False
    registered: bool = False
    warnings: list[str] = Field(default_factory=list)
    validation_errors: list[TemplateValidationError] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when every generated template passed validation."""
        return not self.validation_errors
