"""kitgen configuration.

Typed settings for a generation run.  Everything is a Pydantic v2 model so
values are validated at construction time; derived project paths are exposed
as read-only properties so the rest of the pipeline never builds them by hand.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


DEFAULT_KIT = "multi"
DEFAULT_CSS_FRAMEWORK = "tailwind"


class PaginationMode(str, Enum):
    """How generated list pages fetch further rows."""

    INFINITE = "infinite"
    LOAD_MORE = "load-more"
    PREV_NEXT = "prev-next"
    NUMBERS = "numbers"


class EditMode(str, Enum):
    """Where generated resources are edited."""

    MODAL = "modal"
    PAGE = "page"


def _default_user_kits_dir() -> Path:
    return Path.home() / ".config" / "kitgen" / "kits"


class GenerationOptions(BaseModel):
    """Per-resource generation options supplied by the caller."""

    pagination_mode: PaginationMode = Field(default=PaginationMode.INFINITE)
    page_size: int = Field(default=20, ge=1, le=1000)
    edit_mode: EditMode = Field(default=EditMode.MODAL)


class GeneratorConfig(BaseModel):
    """Global settings for one project.

    Instances are created by the caller (wizard, CLI, tests) and passed to
    :class:`kitgen.generator.ResourceGenerator`.  kitgen never writes this
    configuration back to disk.
    """

    project_root: Path = Field(default=Path("."))
    module_name: str = Field(default="app", description="Import root of the generated app")
    kit: str = Field(default=DEFAULT_KIT)
    css_framework: str = Field(default=DEFAULT_CSS_FRAMEWORK)
    options: GenerationOptions = Field(default_factory=GenerationOptions)

    project_kits_dir: str = Field(default=".kitgen/kits")
    user_kits_dir: Path | None = Field(default_factory=_default_user_kits_dir)
    kit_paths: list[Path] = Field(default_factory=list)

    registry_file: str = Field(default=".kitgen-resources.json")
    composition_root: str = Field(default="main.py")
    verbose: bool = Field(default=False)

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def project_kits_path(self) -> Path:
        """Project-local kit overrides (highest cascade priority)."""
        return self.project_root / self.project_kits_dir

    @property
    def app_path(self) -> Path:
        """Directory that receives one sub-package per generated resource."""
        return self.project_root / self.module_name

    @property
    def database_path(self) -> Path:
        return self.project_root / "database"

    @property
    def migrations_path(self) -> Path:
        return self.database_path / "migrations"

    @property
    def schema_path(self) -> Path:
        """Shared schema file that every generation appends to."""
        return self.database_path / "schema.sql"

    @property
    def queries_path(self) -> Path:
        """Shared query-definition file that every generation appends to."""
        return self.database_path / "queries.sql"

    @property
    def registry_path(self) -> Path:
        return self.project_root / self.registry_file

    @property
    def composition_root_path(self) -> Path:
        """The application entry point that generated routes are wired into."""
        return self.project_root / self.composition_root

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """Build a ``GeneratorConfig`` from environment variables.

        Recognised variables (all optional):
            KITGEN_PROJECT_ROOT, KITGEN_MODULE_NAME, KITGEN_KIT,
            KITGEN_CSS_FRAMEWORK, KITGEN_PAGINATION_MODE, KITGEN_PAGE_SIZE,
            KITGEN_EDIT_MODE, KITGEN_USER_KITS_DIR, KITGEN_KIT_PATHS.
        """
        kwargs: dict[str, object] = {}
        if os.environ.get("KITGEN_PROJECT_ROOT"):
            kwargs["project_root"] = Path(os.environ["KITGEN_PROJECT_ROOT"])
        if os.environ.get("KITGEN_MODULE_NAME"):
            kwargs["module_name"] = os.environ["KITGEN_MODULE_NAME"]
        if os.environ.get("KITGEN_KIT"):
            kwargs["kit"] = os.environ["KITGEN_KIT"]
        if os.environ.get("KITGEN_CSS_FRAMEWORK"):
            kwargs["css_framework"] = os.environ["KITGEN_CSS_FRAMEWORK"]
        if os.environ.get("KITGEN_USER_KITS_DIR"):
            kwargs["user_kits_dir"] = Path(os.environ["KITGEN_USER_KITS_DIR"])
        if os.environ.get("KITGEN_KIT_PATHS"):
            kwargs["kit_paths"] = [
                Path(p) for p in os.environ["KITGEN_KIT_PATHS"].split(os.pathsep) if p
            ]

        option_kwargs: dict[str, object] = {}
        if os.environ.get("KITGEN_PAGINATION_MODE"):
            option_kwargs["pagination_mode"] = os.environ["KITGEN_PAGINATION_MODE"]
        if os.environ.get("KITGEN_PAGE_SIZE"):
            option_kwargs["page_size"] = int(os.environ["KITGEN_PAGE_SIZE"])
        if os.environ.get("KITGEN_EDIT_MODE"):
            option_kwargs["edit_mode"] = os.environ["KITGEN_EDIT_MODE"]

        return cls(options=GenerationOptions(**option_kwargs), **kwargs)

    def kit_search_dirs(self) -> list[Path]:
        """Override directories in cascade order, before the built-in kits."""
        dirs = [self.project_kits_path]
        if self.user_kits_dir is not None:
            dirs.append(self.user_kits_dir)
        dirs.extend(self.kit_paths)
        return dirs
