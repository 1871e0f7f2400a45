"""Unit tests for GeneratorConfig and GenerationOptions (kitgen.config).

Tests cover:
- GenerationOptions defaults and validation
- GeneratorConfig defaults and derived paths
- from_env, including option variables and KITGEN_KIT_PATHS splitting
- kit_search_dirs ordering
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from kitgen.config import EditMode, GenerationOptions, GeneratorConfig, PaginationMode


pytestmark = pytest.mark.unit

_ENV_KEYS = (
    "KITGEN_PROJECT_ROOT",
    "KITGEN_MODULE_NAME",
    "KITGEN_KIT",
    "KITGEN_CSS_FRAMEWORK",
    "KITGEN_PAGINATION_MODE",
    "KITGEN_PAGE_SIZE",
    "KITGEN_EDIT_MODE",
    "KITGEN_USER_KITS_DIR",
    "KITGEN_KIT_PATHS",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


# ---------------------------------------------------------------------------
# GenerationOptions
# ---------------------------------------------------------------------------


class TestGenerationOptions:
    def test_defaults(self):
        options = GenerationOptions()
        assert options.pagination_mode is PaginationMode.INFINITE
        assert options.page_size == 20
        assert options.edit_mode is EditMode.MODAL

    def test_string_values_coerced_to_enums(self):
        options = GenerationOptions(pagination_mode="prev-next", edit_mode="page")
        assert options.pagination_mode is PaginationMode.PREV_NEXT
        assert options.edit_mode is EditMode.PAGE

    @pytest.mark.parametrize("size", [0, -5, 1001])
    def test_page_size_out_of_range(self, size):
        with pytest.raises(ValidationError):
            GenerationOptions(page_size=size)

    def test_unknown_pagination_mode(self):
        with pytest.raises(ValidationError):
            GenerationOptions(pagination_mode="endless")


# ---------------------------------------------------------------------------
# GeneratorConfig
# ---------------------------------------------------------------------------


class TestGeneratorConfig:
    def test_defaults(self):
        config = GeneratorConfig()
        assert config.module_name == "app"
        assert config.kit == "multi"
        assert config.css_framework == "tailwind"
        assert config.verbose is False
        assert config.user_kits_dir == Path.home() / ".config" / "kitgen" / "kits"

    def test_derived_paths(self, tmp_path):
        config = GeneratorConfig(project_root=tmp_path, module_name="shop")
        assert config.app_path == tmp_path / "shop"
        assert config.project_kits_path == tmp_path / ".kitgen" / "kits"
        assert config.migrations_path == tmp_path / "database" / "migrations"
        assert config.schema_path == tmp_path / "database" / "schema.sql"
        assert config.queries_path == tmp_path / "database" / "queries.sql"
        assert config.registry_path == tmp_path / ".kitgen-resources.json"
        assert config.composition_root_path == tmp_path / "main.py"

    def test_custom_composition_root(self, tmp_path):
        config = GeneratorConfig(project_root=tmp_path, composition_root="cmd/server.py")
        assert config.composition_root_path == tmp_path / "cmd" / "server.py"

    def test_kit_search_dirs_order(self, tmp_path):
        extra = [tmp_path / "a", tmp_path / "b"]
        config = GeneratorConfig(project_root=tmp_path, user_kits_dir=tmp_path / "user", kit_paths=extra)
        assert config.kit_search_dirs() == [
            tmp_path / ".kitgen" / "kits",
            tmp_path / "user",
            tmp_path / "a",
            tmp_path / "b",
        ]

    def test_kit_search_dirs_without_user_dir(self, tmp_path):
        config = GeneratorConfig(project_root=tmp_path, user_kits_dir=None)
        assert config.kit_search_dirs() == [tmp_path / ".kitgen" / "kits"]


class TestFromEnv:
    def test_no_variables_gives_defaults(self, clean_env):
        config = GeneratorConfig.from_env()
        assert config.kit == "multi"
        assert config.options == GenerationOptions()

    def test_reads_all_variables(self, clean_env, tmp_path):
        extra = os.pathsep.join([str(tmp_path / "one"), str(tmp_path / "two")])
        env = {
            "KITGEN_PROJECT_ROOT": str(tmp_path),
            "KITGEN_MODULE_NAME": "web",
            "KITGEN_KIT": "single",
            "KITGEN_CSS_FRAMEWORK": "bulma",
            "KITGEN_PAGINATION_MODE": "numbers",
            "KITGEN_PAGE_SIZE": "50",
            "KITGEN_EDIT_MODE": "page",
            "KITGEN_USER_KITS_DIR": str(tmp_path / "kits"),
            "KITGEN_KIT_PATHS": extra,
        }
        with patch.dict(os.environ, env):
            config = GeneratorConfig.from_env()

        assert config.project_root == tmp_path
        assert config.module_name == "web"
        assert config.kit == "single"
        assert config.css_framework == "bulma"
        assert config.options.pagination_mode is PaginationMode.NUMBERS
        assert config.options.page_size == 50
        assert config.options.edit_mode is EditMode.PAGE
        assert config.user_kits_dir == tmp_path / "kits"
        assert config.kit_paths == [tmp_path / "one", tmp_path / "two"]

    def test_invalid_page_size_rejected(self, clean_env):
        with patch.dict(os.environ, {"KITGEN_PAGE_SIZE": "0"}):
            with pytest.raises(ValidationError):
                GeneratorConfig.from_env()
