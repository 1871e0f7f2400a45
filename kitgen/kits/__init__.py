"""Kit and template cascade resolver.

Kits are directories holding a ``kit.yaml`` manifest, generator templates
under ``templates/`` and reusable UI fragments under ``components/``.  They
are looked up through project, user and built-in tiers.

Quick usage::

    from kitgen.kits import KitResolver

    resolver = KitResolver.from_config(config)
    kit = resolver.load("multi").bind("tailwind")
    handler = resolver.load_template("multi", "resource/handler.py.j2")
"""

from kitgen.kits.manifest import KitManifest, KitTemplates, load_manifest, save_manifest
from kitgen.kits.models import KitInfo, KitTier, ResolvedTemplate
from kitgen.kits.resolver import BUILTIN_KITS_DIR, KitCache, KitResolver, KitSource
from kitgen.kits.strategies import STRATEGIES, StylingStrategy, load_strategy

__all__ = [
    "BUILTIN_KITS_DIR",
    "KitCache",
    "KitInfo",
    "KitManifest",
    "KitResolver",
    "KitSource",
    "KitTemplates",
    "KitTier",
    "ResolvedTemplate",
    "STRATEGIES",
    "StylingStrategy",
    "load_manifest",
    "load_strategy",
    "save_manifest",
]
