"""Shared pytest fixtures for the kitgen test suite.

Provides reusable fixtures for:
- Temporary generated-app projects with an anchored composition root
- GeneratorConfig instances isolated from the user's real kit directory
- A pinned clock for migration timestamps
- Writing throwaway kits into any cascade tier
"""

from __future__ import annotations

import textwrap
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

import pytest
import yaml

from kitgen.config import GeneratorConfig
from kitgen.generator import ResourceGenerator


COMPOSITION_ROOT = textwrap.dedent("""\
    from fastapi import FastAPI

    from app.database import queries
    # kitgen:imports

    app = FastAPI()

    # kitgen:routes
""")

FIXED_NOW = datetime(2024, 3, 15, 10, 30, 0)


# ---------------------------------------------------------------------------
# Projects & config
# ---------------------------------------------------------------------------


@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """A generated-app project root holding only its composition root."""
    project_dir = tmp_path / "test-project"
    project_dir.mkdir()
    (project_dir / "main.py").write_text(COMPOSITION_ROOT, encoding="utf-8")
    yield project_dir


@pytest.fixture
def user_kits_dir(tmp_path: Path) -> Path:
    """Stand-in for ``~/.config/kitgen/kits``."""
    path = tmp_path / "user-kits"
    path.mkdir()
    return path


@pytest.fixture
def config(tmp_project_dir: Path, user_kits_dir: Path) -> GeneratorConfig:
    return GeneratorConfig(project_root=tmp_project_dir, user_kits_dir=user_kits_dir)


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def generator(config: GeneratorConfig, fixed_clock: Callable[[], datetime]) -> ResourceGenerator:
    return ResourceGenerator(config, clock=fixed_clock)


# ---------------------------------------------------------------------------
# Kits
# ---------------------------------------------------------------------------


def write_kit(
    root: Path,
    name: str,
    *,
    manifest: dict[str, Any] | None = None,
    templates: dict[str, str] | None = None,
    components: dict[str, str] | None = None,
) -> Path:
    """Write a kit directory under *root*.

    ``manifest=None`` writes a valid tailwind manifest; pass ``{}`` or any
    other mapping to control ``kit.yaml`` exactly.  Template and component
    keys are paths relative to ``templates/`` and ``components/``.
    """
    kit_dir = root / name
    kit_dir.mkdir(parents=True, exist_ok=True)
    if manifest is None:
        manifest = {
            "name": name,
            "version": "1.0.0",
            "description": f"{name} test kit",
            "css_framework": "tailwind",
            "templates": {"resource": True, "view": True},
        }
    (kit_dir / "kit.yaml").write_text(yaml.safe_dump(manifest), encoding="utf-8")
    for rel, body in (templates or {}).items():
        path = kit_dir / "templates" / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(body, encoding="utf-8")
    for rel, body in (components or {}).items():
        path = kit_dir / "components" / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(body, encoding="utf-8")
    return kit_dir


@pytest.fixture
def make_kit() -> Callable[..., Path]:
    """The :func:`write_kit` helper as a fixture."""
    return write_kit


def write_override(root: Path, kit: str, rel: str, body: str, subdir: str = "templates") -> Path:
    """Write a single override file without a manifest (a partial override)."""
    path = root / kit / subdir / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body, encoding="utf-8")
    return path


@pytest.fixture
def make_override() -> Callable[..., Path]:
    return write_override
