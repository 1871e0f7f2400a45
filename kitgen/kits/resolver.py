"""Kit and template cascade resolution.

A :class:`KitResolver` searches an ordered list of kit directories (project
overrides, user overrides, extra configured paths, then the kits bundled with
kitgen) and returns the first hit.  Kits, templates and components are each
resolved independently, so a project can override a single template file
while every other file of the kit still comes from a lower tier.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from kitgen.errors import (
    ComponentNotFoundError,
    KitgenError,
    KitNotFoundError,
    TemplateNotFoundError,
)
from kitgen.kits.manifest import load_manifest, manifest_exists
from kitgen.kits.models import KitInfo, KitTier, ResolvedTemplate
from kitgen.kits.strategies import load_strategy

if TYPE_CHECKING:
    from kitgen.config import GeneratorConfig


BUILTIN_KITS_DIR = Path(__file__).parent / "system"


# ---------------------------------------------------------------------------
# Search sources and cache
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KitSource:
    """One directory in the cascade; each sub-directory is a kit."""

    path: Path
    tier: KitTier


class KitCache:
    """Loaded kits keyed by name.

    Owned by a resolver (or shared between resolvers on purpose); there is no
    module-level cache.
    """

    def __init__(self) -> None:
        self._kits: dict[str, KitInfo] = {}

    def get(self, name: str) -> KitInfo | None:
        return self._kits.get(name)

    def put(self, kit: KitInfo) -> None:
        self._kits[kit.name] = kit

    def clear(self) -> None:
        self._kits.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._kits

    def __len__(self) -> int:
        return len(self._kits)


def _safe_relative(value: str, what: str) -> PurePosixPath:
    rel = PurePosixPath(value)
    if not value or rel.is_absolute() or ".." in rel.parts:
        raise KitgenError(f"invalid {what}: {value!r}")
    return rel


# ---------------------------------------------------------------------------
# KitResolver
# ---------------------------------------------------------------------------


class KitResolver:
    """Resolves kits, templates and components through the cascade."""

    def __init__(
        self,
        sources: list[KitSource] | None = None,
        *,
        cache: KitCache | None = None,
        builtin_dir: str | Path | None = BUILTIN_KITS_DIR,
    ) -> None:
        self._sources: list[KitSource] = list(sources or [])
        if builtin_dir is not None:
            self._sources.append(KitSource(Path(builtin_dir), KitTier.BUILTIN))
        self.cache = cache if cache is not None else KitCache()

    @classmethod
    def from_config(cls, config: "GeneratorConfig", *, cache: KitCache | None = None) -> "KitResolver":
        """Build the standard project > user > extra paths > built-in cascade."""
        project_dir, *user_dirs = config.kit_search_dirs()
        sources = [KitSource(project_dir, KitTier.PROJECT)]
        sources.extend(KitSource(Path(p), KitTier.USER) for p in user_dirs)
        return cls(sources, cache=cache)

    # -- Search paths -------------------------------------------------------

    @property
    def search_paths(self) -> list[Path]:
        """Every cascade directory in priority order, built-in last."""
        return [source.path for source in self._sources]

    def _existing_sources(self) -> list[KitSource]:
        return [source for source in self._sources if source.path.is_dir()]

    def add_search_path(self, path: str | Path, tier: KitTier = KitTier.USER) -> None:
        """Insert *path* just before the built-in tier and drop cached kits."""
        source = KitSource(Path(path), tier)
        index = len(self._sources)
        for i, existing in enumerate(self._sources):
            if existing.tier is KitTier.BUILTIN:
                index = i
                break
        self._sources.insert(index, source)
        self.cache.clear()

    # -- Kits ---------------------------------------------------------------

    def load(self, name: str) -> KitInfo:
        """Load kit *name* from the highest-priority tier that has it.

        A manifest that exists but fails validation raises immediately; it is
        never masked by a valid kit of the same name in a lower tier.

        Raises:
            KitNotFoundError: If no tier contains ``<name>/kit.yaml``.
            InvalidManifestError: If the first manifest found is invalid.
            ManifestParseError: If the first manifest found is not YAML.
        """
        cached = self.cache.get(name)
        if cached is not None:
            return cached

        _safe_relative(name, "kit name")
        for source in self._existing_sources():
            kit_dir = source.path / name
            if not manifest_exists(kit_dir):
                continue
            kit = self._load_from(kit_dir, source.tier)
            self.cache.put(kit)
            return kit

        raise KitNotFoundError(name)

    def _load_from(self, kit_dir: Path, tier: KitTier) -> KitInfo:
        manifest = load_manifest(kit_dir)
        strategy = None
        if not manifest.style_agnostic:
            strategy = load_strategy(manifest.strategy_name)
        return KitInfo(manifest=manifest, tier=tier, path=kit_dir, strategy=strategy)

    def list_kits(self, tier: KitTier | None = None, query: str = "") -> list[KitInfo]:
        """List available kits; a name shadowed by a higher tier appears once.

        Kits whose manifest fails to load are skipped.
        """
        kits: list[KitInfo] = []
        seen: set[str] = set()
        for source in self._existing_sources():
            for kit_dir in sorted(p for p in source.path.iterdir() if p.is_dir()):
                if kit_dir.name in seen or not manifest_exists(kit_dir):
                    continue
                try:
                    kit = self._load_from(kit_dir, source.tier)
                except KitgenError:
                    continue
                seen.add(kit.name)
                if tier is not None and kit.tier is not tier:
                    continue
                if kit.manifest.matches_query(query):
                    kits.append(kit)
        return kits

    # -- Templates and components ---------------------------------------------

    def _find_file(self, kit: str, subdir: str, rel: PurePosixPath) -> ResolvedTemplate | None:
        for source in self._existing_sources():
            candidate = source.path / kit / subdir / Path(*rel.parts)
            if candidate.is_file():
                return ResolvedTemplate(
                    body=candidate.read_text(encoding="utf-8"),
                    tier=source.tier,
                    path=candidate,
                )
        return None

    def load_template(self, kit: str, template_path: str) -> ResolvedTemplate:
        """Resolve ``templates/<template_path>`` of *kit*, first tier wins.

        Raises:
            TemplateNotFoundError: If no tier provides the file.
        """
        rel = _safe_relative(template_path, "template path")
        found = self._find_file(kit, "templates", rel)
        if found is None:
            raise TemplateNotFoundError(kit, template_path)
        return found

    def load_component(self, kit: str, component: str) -> ResolvedTemplate:
        """Resolve ``components/<component>`` of *kit*, first tier wins.

        Raises:
            ComponentNotFoundError: If no tier provides the file.
        """
        rel = _safe_relative(component, "component name")
        found = self._find_file(kit, "components", rel)
        if found is None:
            raise ComponentNotFoundError(kit, component)
        return found

    def list_components(self, kit: str) -> list[str]:
        """Union of component file names across tiers, in discovery order.

        Raises:
            ComponentNotFoundError: If the kit has no components anywhere.
        """
        names: list[str] = []
        for source in self._existing_sources():
            comp_dir = source.path / kit / "components"
            if not comp_dir.is_dir():
                continue
            for entry in sorted(comp_dir.iterdir()):
                if entry.is_file() and entry.name not in names:
                    names.append(entry.name)
        if not names:
            raise ComponentNotFoundError(kit, "*")
        return names

    # -- Customization ------------------------------------------------------

    def customize(self, name: str, tier: KitTier = KitTier.PROJECT, components_only: bool = False) -> Path:
        """Copy kit *name* into the first *tier* directory so it can be edited.

        The kit is copied from whichever tier it currently resolves in.  A full
        copy takes ``kit.yaml``, ``templates/`` and ``components/``; with
        *components_only* only ``components/`` is copied, which leaves a
        partial override.  Existing files in the destination are overwritten.

        Returns:
            The destination kit directory.

        Raises:
            KitNotFoundError: If no tier contains the kit.
            KitgenError: If *tier* is the built-in tier or has no directory.
        """
        if tier is KitTier.BUILTIN:
            raise KitgenError("kits cannot be customized into the built-in tier")
        kit = self.load(name)
        root = next((source.path for source in self._sources if source.tier is tier), None)
        if root is None:
            raise KitgenError(f"no {tier.value} kit directory is configured")

        dest = root / name
        if dest.exists() and dest.resolve() == kit.path.resolve():
            return dest
        dest.mkdir(parents=True, exist_ok=True)

        subdirs = ["components"] if components_only else ["templates", "components"]
        if not components_only:
            shutil.copy2(kit.path / "kit.yaml", dest / "kit.yaml")
        for subdir in subdirs:
            src = kit.path / subdir
            if src.is_dir():
                shutil.copytree(src, dest / subdir, dirs_exist_ok=True)

        self.cache.clear()
        return dest
