"""Runtime kit types: provenance tiers, loaded kits, resolved template bodies."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path

from kitgen.errors import StrategyError
from kitgen.kits.manifest import KitManifest
from kitgen.kits.strategies import StylingStrategy, load_strategy


class KitTier(str, Enum):
    """Where in the cascade a kit or template was found, highest priority first."""

    PROJECT = "project"
    USER = "user"
    BUILTIN = "builtin"


@dataclass(frozen=True)
class KitInfo:
    """A loaded kit manifest plus provenance and an optional bound strategy.

    Kits are built in two phases.  Loading attaches the strategy the manifest
    names; a style-agnostic kit loads unbound and is bound later with
    :meth:`bind` using the strategy the caller asked for.
    """

    manifest: KitManifest
    tier: KitTier
    path: Path
    strategy: StylingStrategy | None = None

    @property
    def name(self) -> str:
        return self.manifest.name

    @property
    def version(self) -> str:
        return self.manifest.version

    @property
    def is_bound(self) -> bool:
        return self.strategy is not None

    def bind(self, strategy_name: str) -> "KitInfo":
        """Return a copy with *strategy_name* attached.

        A kit that is already bound is returned unchanged.

        Raises:
            StrategyError: If *strategy_name* is empty or unknown.
        """
        if self.strategy is not None:
            return self
        if not strategy_name:
            raise StrategyError("", "a style-agnostic kit needs a strategy name", kit=self.name)
        try:
            strategy = load_strategy(strategy_name)
        except StrategyError as exc:
            raise StrategyError(strategy_name, exc.reason, kit=self.name) from None
        return replace(self, strategy=strategy)

    def require_strategy(self) -> StylingStrategy:
        if self.strategy is None:
            raise StrategyError("", "kit has no styling strategy bound", kit=self.name)
        return self.strategy


@dataclass(frozen=True)
class ResolvedTemplate:
    """A template or component body and the cascade tier that supplied it."""

    body: str
    tier: KitTier
    path: Path
