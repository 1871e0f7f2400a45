"""Exception hierarchy for the kitgen generation pipeline.

Every error raised by kitgen derives from :class:`KitgenError` so callers can
catch the whole family with one ``except`` clause.  The subclasses map onto
the pipeline's error taxonomy:

* not-found          -- :class:`KitNotFoundError`, :class:`TemplateNotFoundError`,
                        :class:`ComponentNotFoundError`
* invalid-manifest   -- :class:`InvalidManifestError`, :class:`ManifestParseError`,
                        :class:`StrategyError`
* naming-conflict    -- :class:`NamingConflictError`, :class:`InvalidNameError`
* render-failure     -- :class:`RenderError`, :class:`TemplateValidationError`
* mutation-warning   -- :class:`RouteInjectionError`
"""

from __future__ import annotations

from pathlib import Path


class KitgenError(Exception):
    """Base class for all kitgen errors."""


# ---------------------------------------------------------------------------
# Not found
# ---------------------------------------------------------------------------


class KitNotFoundError(KitgenError):
    """Raised when a kit is absent from every cascade tier."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"kit not found: {name}")


class TemplateNotFoundError(KitgenError):
    """Raised when a generator template is absent from every cascade tier."""

    def __init__(self, kit: str, template_path: str) -> None:
        self.kit = kit
        self.template_path = template_path
        super().__init__(f"template {template_path} not found in kit {kit}")


class ComponentNotFoundError(KitgenError):
    """Raised when a kit component is absent from every cascade tier."""

    def __init__(self, kit: str, component: str) -> None:
        self.kit = kit
        self.component = component
        super().__init__(f"component {component} not found in kit {kit}")


# ---------------------------------------------------------------------------
# Manifest problems
# ---------------------------------------------------------------------------


class InvalidManifestError(KitgenError):
    """Raised when a ``kit.yaml`` is structurally or semantically invalid."""

    def __init__(self, field: str, reason: str, index: int | None = None) -> None:
        self.field = field
        self.reason = reason
        self.index = index
        if index is not None:
            message = f"invalid kit manifest: {field}[{index}]: {reason}"
        else:
            message = f"invalid kit manifest: {field}: {reason}"
        super().__init__(message)


class ManifestParseError(KitgenError):
    """Raised when a ``kit.yaml`` cannot be parsed as YAML."""

    def __init__(self, path: str | Path, cause: Exception) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"failed to parse kit manifest at {self.path}: {cause}")


class StrategyError(KitgenError):
    """Raised when a styling strategy cannot be resolved or bound."""

    def __init__(self, strategy: str, reason: str, kit: str = "") -> None:
        self.strategy = strategy
        self.kit = kit
        self.reason = reason
        prefix = f"kit {kit}: " if kit else ""
        super().__init__(f"{prefix}styling strategy {strategy!r}: {reason}")


# ---------------------------------------------------------------------------
# Input problems
# ---------------------------------------------------------------------------


class FieldSpecError(KitgenError):
    """Raised when a field definition cannot be parsed."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"field '{field}': {reason}" if field else reason)


class InvalidNameError(KitgenError):
    """Raised when a resource or view name cannot be turned into consistent names."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"invalid name '{name}': {reason}")


class NamingConflictError(KitgenError):
    """Raised when a resource declares the same field name twice."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"duplicate field name '{field}'")


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class RenderError(KitgenError):
    """Raised when a scaffold template fails to render."""

    def __init__(self, template_path: str, cause: Exception) -> None:
        self.template_path = template_path
        self.cause = cause
        super().__init__(f"failed to render {template_path}: {cause}")


class TemplateValidationError(KitgenError):
    """A generated UI template that the runtime engine rejects.

    Attributes:
        path: The generated template file.
        line: 1-based line of the problem, or 0 when unknown.
        snippet: Numbered source window with the offending line marked.
        detail: The engine's own error message.
    """

    def __init__(self, path: str | Path, line: int, snippet: str, detail: str) -> None:
        self.path = Path(path)
        self.line = line
        self.snippet = snippet
        self.detail = detail
        if line > 0 and snippet:
            message = (
                f"template syntax error in {self.path} (line {line}):\n"
                f"{snippet}\n  error: {detail}"
            )
        else:
            message = f"template syntax error in {self.path}: {detail}"
        super().__init__(message)


# ---------------------------------------------------------------------------
# Source mutation
# ---------------------------------------------------------------------------


class RouteInjectionError(KitgenError):
    """Raised when the composition root lacks the textual anchors kitgen needs.

    The orchestrator downgrades this to a warning with manual-wiring
    instructions; generated artifacts stay valid without registration.
    """

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"cannot wire {self.path}: {reason}")
