"""Resource, view and schema generation.

:class:`ResourceGenerator` turns a resource name plus field declarations into
a vertical slice of the generated app:

* ``<module>/<pkg>/<pkg>.py``      -- request handlers
* ``<module>/<pkg>/<pkg>.html``    -- the Jinja2 UI template
* ``<module>/<pkg>/test_<pkg>.py`` -- tests for the handlers
* ``database/migrations/<ts>_create_<table>.sql``
* fragments appended to ``database/schema.sql`` and ``database/queries.sql``

then wires the handler into the composition root, records it in the resource
registry and validates the generated UI template.

Generation is not transactional.  Artifacts are written one after another and
a failure part-way leaves the earlier ones on disk for the user to inspect;
re-running after fixing the cause is safe.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterable

from rich.markup import escape

from kitgen.config import EditMode, GenerationOptions, GeneratorConfig
from kitgen.errors import RouteInjectionError
from kitgen.generator.migrations import next_migration_path
from kitgen.generator.models import (
    GenerationResult,
    MigrationFile,
    ResourceData,
    ViewData,
)
from kitgen.generator.templates import TemplateRenderer
from kitgen.kits import KitInfo, KitResolver, ResolvedTemplate
from kitgen.mutator import (
    AnchorMutator,
    EntryKind,
    ResourceRegistry,
    RouteDescriptor,
    SourceMutator,
    manual_wiring_instructions,
)
from kitgen.naming import FieldSpec, parse_fields
from kitgen.naming.fields import FieldInput
from kitgen.utils import (
    console,
    ensure_dir,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)
from kitgen.validator import validate_template_file


# Scaffold templates per generator category, relative to ``templates/``.
RESOURCE_TEMPLATES = {
    "handler": "resource/handler.py.j2",
    "queries": "resource/queries.sql.j2",
    "schema": "resource/schema.sql.j2",
    "migration": "resource/migration.sql.j2",
    "test": "resource/test.py.j2",
}
RESOURCE_UI_TEMPLATE = "resource/template.html.j2"
RESOURCE_COMPONENT_UI_TEMPLATE = "resource/template_components.html.j2"

VIEW_TEMPLATES = {
    "handler": "view/handler.py.j2",
    "template": "view/template.html.j2",
    "test": "view/test.py.j2",
}

SCHEMA_TEMPLATES = {
    "migration": "resource/migration.sql.j2",
    "schema": "resource/schema.sql.j2",
    "queries": "resource/queries.sql.j2",
}


class ResourceGenerator:
    """Generates resources, views and schemas for one project.

    Every collaborator can be injected; by default they are built from
    *config*.  *clock* returns the current time and exists so migration
    timestamps can be pinned in tests.
    """

    def __init__(
        self,
        config: GeneratorConfig,
        resolver: KitResolver | None = None,
        mutator: SourceMutator | None = None,
        registry: ResourceRegistry | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config
        self.resolver = resolver or KitResolver.from_config(config)
        self.mutator = mutator or AnchorMutator()
        self.registry = registry or ResourceRegistry(config.registry_path)
        self.clock = clock or datetime.now

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def generate_resource(
        self,
        name: str,
        fields: Iterable[FieldInput | FieldSpec],
        *,
        kit: str | None = None,
        css_framework: str | None = None,
        options: GenerationOptions | None = None,
    ) -> GenerationResult:
        """Generate a full CRUD resource.

        Args:
            name: Resource name in any case (``"post"``, ``"BlogPosts"``).
            fields: ``"name[:type]"`` strings, ``(name, type)`` pairs whose
                type may be empty, or already parsed :class:`FieldSpec`.
            kit: Kit name; defaults to the configured kit.
            css_framework: Strategy for style-agnostic kits; defaults to the
                configured framework.
            options: Pagination and edit-mode options; defaults to the
                configured options.

        Raises:
            KitNotFoundError, InvalidManifestError, StrategyError: Kit problems.
            FieldSpecError, NamingConflictError: Bad field declarations.
            TemplateNotFoundError, ComponentNotFoundError: Missing templates.
            RenderError: A scaffold template failed to render.
        """
        kit_info = self._resolve_kit(kit, css_framework)
        specs = _coerce_fields(fields)
        data = ResourceData.derive(
            name,
            specs,
            module_name=self.config.module_name,
            kit_name=kit_info.name,
            css_framework=_strategy_name(kit_info),
            options=options or self.config.options,
        )
        result = GenerationResult(kind=EntryKind.RESOURCE.value, name=data.resource_name)

        # Resolve every template before anything is written.
        templates = {
            key: self.resolver.load_template(kit_info.name, path)
            for key, path in RESOURCE_TEMPLATES.items()
        }
        ui_body, ui_name = self._resource_ui_template(kit_info)

        renderer = TemplateRenderer(kit_info.require_strategy())
        context = data.template_context()
        resource_dir = self.config.app_path / data.package_name

        self._render(renderer, templates["handler"], resource_dir / f"{data.package_name}.py", context, result)
        ui_path = resource_dir / f"{data.package_name}.html"
        self._write(renderer.render_to_file(ui_body, ui_path, context, ui_name), result)

        result.migration = self._write_migration(renderer, templates["migration"], data.table_name, context, result)
        self._append(renderer, templates["schema"], self.config.schema_path, context, result)
        self._append(renderer, templates["queries"], self.config.queries_path, context, result)
        self._render(renderer, templates["test"], resource_dir / f"test_{data.package_name}.py", context, result)

        routes = [RouteDescriptor.for_resource(data.package_name, self.config.module_name)]
        if data.edit_mode is EditMode.PAGE:
            routes.append(
                RouteDescriptor.for_resource(
                    data.package_name,
                    self.config.module_name,
                    path=f"/{data.package_name}/{{id}}",
                    factory="detail_handler",
                )
            )
        self._wire(routes, result)
        result.registered = self._register(data.resource_name, f"/{data.package_name}", EntryKind.RESOURCE, result)
        self._validate(ui_path, result)
        self._report(result)
        return result

    def generate_view(
        self,
        name: str,
        *,
        kit: str | None = None,
        css_framework: str | None = None,
    ) -> GenerationResult:
        """Generate a view: a handler and page with no backing table."""
        kit_info = self._resolve_kit(kit, css_framework)
        data = ViewData.derive(
            name,
            module_name=self.config.module_name,
            kit_name=kit_info.name,
            css_framework=_strategy_name(kit_info),
        )
        result = GenerationResult(kind=EntryKind.VIEW.value, name=data.view_name)

        templates = {
            key: self.resolver.load_template(kit_info.name, path)
            for key, path in VIEW_TEMPLATES.items()
        }
        renderer = TemplateRenderer(kit_info.require_strategy())
        context = data.template_context()
        view_dir = self.config.app_path / data.package_name

        self._render(renderer, templates["handler"], view_dir / f"{data.package_name}.py", context, result)
        ui_path = view_dir / f"{data.package_name}.html"
        self._render(renderer, templates["template"], ui_path, context, result)
        self._render(renderer, templates["test"], view_dir / f"test_{data.package_name}.py", context, result)

        self._wire([RouteDescriptor.for_view(data.package_name, self.config.module_name)], result)
        result.registered = self._register(data.view_name, f"/{data.package_name}", EntryKind.VIEW, result)
        self._validate(ui_path, result)
        self._report(result)
        return result

    def generate_schema(
        self,
        table: str,
        fields: Iterable[FieldInput | FieldSpec],
        *,
        kit: str | None = None,
        css_framework: str | None = None,
    ) -> GenerationResult:
        """Generate only the database side of a resource.

        Writes the migration and appends the schema and query fragments; no
        handler, template or route is produced.
        """
        kit_info = self._resolve_kit(kit, css_framework)
        specs = _coerce_fields(fields)
        data = ResourceData.derive(
            table,
            specs,
            module_name=self.config.module_name,
            kit_name=kit_info.name,
            css_framework=_strategy_name(kit_info),
        )
        result = GenerationResult(kind=EntryKind.SCHEMA.value, name=data.table_name)

        templates = {
            key: self.resolver.load_template(kit_info.name, path)
            for key, path in SCHEMA_TEMPLATES.items()
        }
        renderer = TemplateRenderer(kit_info.require_strategy())
        context = data.template_context()

        result.migration = self._write_migration(renderer, templates["migration"], data.table_name, context, result)
        self._append(renderer, templates["schema"], self.config.schema_path, context, result)
        self._append(renderer, templates["queries"], self.config.queries_path, context, result)

        result.registered = self._register(data.resource_name, data.table_name, EntryKind.SCHEMA, result)
        self._report(result)
        return result

    # ------------------------------------------------------------------
    # Kit handling
    # ------------------------------------------------------------------

    def _resolve_kit(self, kit: str | None, css_framework: str | None) -> KitInfo:
        kit_info = self.resolver.load(kit or self.config.kit)
        if not kit_info.is_bound:
            kit_info = kit_info.bind(css_framework or self.config.css_framework)
        return kit_info

    def _resource_ui_template(self, kit: KitInfo) -> tuple[str, str]:
        """The UI scaffold body for a resource, and a name for error messages.

        Kits that declare components get the components concatenated ahead of
        ``resource/template_components.html.j2``; the components define the
        macros that template calls.  Other kits use
        ``resource/template.html.j2`` directly.
        """
        if not kit.manifest.components:
            resolved = self.resolver.load_template(kit.name, RESOURCE_UI_TEMPLATE)
            return resolved.body, str(resolved.path)

        parts = []
        for component in kit.manifest.components:
            body = self.resolver.load_component(kit.name, component).body
            parts.append(body if body.endswith("\n") else body + "\n")
        main = self.resolver.load_template(kit.name, RESOURCE_COMPONENT_UI_TEMPLATE)
        parts.append(main.body)
        return "".join(parts), str(main.path)

    # ------------------------------------------------------------------
    # Artifact output
    # ------------------------------------------------------------------

    def _write(self, path: Path, result: GenerationResult) -> None:
        result.files.append(path)
        if self.config.verbose:
            console.print(f"  [green]wrote[/green] {escape(str(path))}")

    def _render(
        self,
        renderer: TemplateRenderer,
        template: ResolvedTemplate,
        output: Path,
        context: dict[str, Any],
        result: GenerationResult,
    ) -> None:
        self._write(renderer.render_to_file(template.body, output, context, str(template.path)), result)

    def _append(
        self,
        renderer: TemplateRenderer,
        template: ResolvedTemplate,
        output: Path,
        context: dict[str, Any],
        result: GenerationResult,
    ) -> None:
        path = renderer.append_to_file(template.body, output, context, str(template.path))
        if path not in result.files:
            result.files.append(path)
        if self.config.verbose:
            console.print(f"  [green]appended[/green] {escape(str(path))}")

    def _write_migration(
        self,
        renderer: TemplateRenderer,
        template: ResolvedTemplate,
        table: str,
        context: dict[str, Any],
        result: GenerationResult,
    ) -> MigrationFile:
        migrations_dir = ensure_dir(self.config.migrations_path)
        path = next_migration_path(migrations_dir, table, self.clock())
        sql = renderer.render(template.body, context, str(template.path))
        path.write_text(sql, encoding="utf-8")
        self._write(path, result)
        return MigrationFile.from_sql(path, table, sql)

    # ------------------------------------------------------------------
    # Post-write steps (never raise)
    # ------------------------------------------------------------------

    def _wire(self, routes: list[RouteDescriptor], result: GenerationResult) -> None:
        root = self.config.composition_root_path
        result.routes.extend(route.path for route in routes)
        wired = True
        for route in routes:
            try:
                self.mutator.inject_route_file(root, route)
            except RouteInjectionError as exc:
                wired = False
                message = f"Could not wire route {route.path}: {exc.reason}"
                result.warnings.append(f"{message}\n{manual_wiring_instructions(route, root)}")
                print_warning(message)
                console.print(manual_wiring_instructions(route, root), markup=False)
        result.wired = wired

    def _register(self, name: str, path: str, kind: EntryKind, result: GenerationResult) -> bool:
        try:
            return self.registry.register(name, path, kind)
        except (OSError, ValueError) as exc:
            message = f"Could not update resource registry {self.registry.path}: {exc}"
            result.warnings.append(message)
            print_warning(message)
            return False

    def _validate(self, template_path: Path, result: GenerationResult) -> None:
        error = validate_template_file(template_path)
        if error is not None:
            result.validation_errors.append(error)
            print_error(str(error))

    def _report(self, result: GenerationResult) -> None:
        if not self.config.verbose:
            return
        summary = {
            "Files": str(len(result.files)),
            "Migration": result.migration.filename if result.migration else "-",
            "Routes": ", ".join(result.routes) or "-",
            "Wired": "yes" if result.wired else "no",
            "Registered": "yes" if result.registered else "no",
        }
        print_summary_table(summary, title=f"Generated {result.kind} {result.name}")
        if result.ok and not result.warnings:
            print_success(f"{result.kind.capitalize()} {result.name} generated")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _coerce_fields(fields: Iterable[FieldInput | FieldSpec]) -> list[FieldSpec]:
    """Parse raw field declarations; already parsed specs pass through."""
    return parse_fields(
        (item.name, item.type_name) if isinstance(item, FieldSpec) else item for item in fields
    )


def _strategy_name(kit: KitInfo) -> str:
    return kit.strategy.name if kit.strategy is not None else ""
