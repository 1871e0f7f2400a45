"""Kit manifest (``kit.yaml``) model, loading and validation."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from kitgen.errors import InvalidManifestError, ManifestParseError
from kitgen.kits.strategies import STRATEGIES, known_strategies


MANIFEST_FILE_NAME = "kit.yaml"

_SEMVER_RE = re.compile(
    r"^v?(\d+)\.(\d+)\.(\d+)"
    r"(-[0-9A-Za-z-]+(\.[0-9A-Za-z-]+)*)?"
    r"(\+[0-9A-Za-z-]+(\.[0-9A-Za-z-]+)*)?$"
)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class KitTemplates(BaseModel):
    """Which generator categories a kit supplies templates for."""

    resource: bool = False
    view: bool = False
    app: bool = False


class KitManifest(BaseModel):
    """The parsed contents of a ``kit.yaml`` file."""

    name: str = ""
    version: str = ""
    css_framework: str | None = None
    description: str = ""
    framework: str | None = Field(default=None, description="Legacy alias of css_framework")
    author: str = ""
    license: str = ""
    cdn: str = ""
    custom_css: str = ""
    tags: list[Any] = Field(default_factory=list)
    components: list[Any] = Field(default_factory=list)
    templates: KitTemplates = Field(default_factory=KitTemplates)

    @property
    def strategy_name(self) -> str:
        """The declared styling strategy, or ``""`` for a style-agnostic kit."""
        return (self.css_framework or self.framework or "").strip()

    @property
    def style_agnostic(self) -> bool:
        return not self.strategy_name

    def matches_query(self, query: str) -> bool:
        """Case-insensitive search over name, description, framework and tags."""
        if not query:
            return True
        needle = query.lower()
        haystack = [self.name, self.description, self.strategy_name, *map(str, self.tags)]
        return any(needle in value.lower() for value in haystack)

    def to_yaml_dict(self) -> dict[str, Any]:
        data = self.model_dump(exclude_defaults=True)
        data.setdefault("css_framework", self.css_framework or "")
        return data


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_version(version: str) -> None:
    if not _SEMVER_RE.match(version):
        raise InvalidManifestError(
            "version",
            f"invalid version format: {version} (expected semantic version like 1.0.0)",
        )


def validate_manifest(manifest: KitManifest, raw: dict[str, Any] | None = None) -> None:
    """Check required fields, the strategy identifier and list entries.

    *raw* is the mapping the manifest was parsed from.  It is used to tell an
    absent ``css_framework`` key (an error) from a present but empty one (a
    style-agnostic kit).
    """
    if not manifest.name:
        raise InvalidManifestError("name", "name is required")
    if not manifest.version:
        raise InvalidManifestError("version", "version is required")
    validate_version(manifest.version)
    if not manifest.description:
        raise InvalidManifestError("description", "description is required")

    if raw is not None:
        declared = "css_framework" in raw or "framework" in raw
    else:
        declared = manifest.css_framework is not None or manifest.framework is not None
    if not declared:
        raise InvalidManifestError(
            "css_framework", "css_framework is required (leave it empty for a style-agnostic kit)"
        )
    strategy = manifest.strategy_name
    if strategy and strategy.lower() not in STRATEGIES:
        raise InvalidManifestError(
            "css_framework",
            f"unknown styling strategy '{strategy}' (known: {', '.join(known_strategies())})",
        )

    for field_name in ("tags", "components"):
        for index, entry in enumerate(getattr(manifest, field_name)):
            if not isinstance(entry, str) or not entry.strip():
                raise InvalidManifestError(field_name, "entries must be non-empty strings", index)


# ---------------------------------------------------------------------------
# Load / save
# ---------------------------------------------------------------------------


def manifest_exists(kit_dir: str | Path) -> bool:
    return (Path(kit_dir) / MANIFEST_FILE_NAME).is_file()


def load_manifest(kit_dir: str | Path) -> KitManifest:
    """Load and validate ``<kit_dir>/kit.yaml``.

    Raises:
        ManifestParseError: If the file is not readable YAML.
        InvalidManifestError: If any field fails validation, or the manifest
            name does not match the directory name.
    """
    kit_dir = Path(kit_dir)
    manifest_path = kit_dir / MANIFEST_FILE_NAME
    try:
        raw = yaml.safe_load(manifest_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ManifestParseError(manifest_path, exc) from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise InvalidManifestError("manifest", "top level must be a mapping")

    try:
        manifest = KitManifest.model_validate(raw)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "manifest"
        raise InvalidManifestError(location, first["msg"]) from exc

    validate_manifest(manifest, raw)

    if manifest.name != kit_dir.name:
        raise InvalidManifestError(
            "name",
            f"kit name '{manifest.name}' must match directory name '{kit_dir.name}'",
        )
    return manifest


def save_manifest(kit_dir: str | Path, manifest: KitManifest) -> Path:
    """Validate *manifest* and write it to ``<kit_dir>/kit.yaml``."""
    validate_manifest(manifest)
    kit_dir = Path(kit_dir)
    kit_dir.mkdir(parents=True, exist_ok=True)
    manifest_path = kit_dir / MANIFEST_FILE_NAME
    manifest_path.write_text(
        yaml.safe_dump(manifest.to_yaml_dict(), sort_keys=False),
        encoding="utf-8",
    )
    return manifest_path
