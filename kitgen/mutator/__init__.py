"""Idempotent source mutation -- route wiring and the resource registry."""

from kitgen.mutator.registry import EntryKind, RegistryEntry, ResourceRegistry
from kitgen.mutator.routes import (
    IMPORTS_ANCHOR,
    ROUTES_ANCHOR,
    AnchorMutator,
    RouteDescriptor,
    SourceMutator,
    manual_wiring_instructions,
)

__all__ = [
    "AnchorMutator",
    "EntryKind",
    "IMPORTS_ANCHOR",
    "ROUTES_ANCHOR",
    "RegistryEntry",
    "ResourceRegistry",
    "RouteDescriptor",
    "SourceMutator",
    "manual_wiring_instructions",
]
