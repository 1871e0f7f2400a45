"""Idempotent wiring of generated handlers into the composition root.

The composition root (``main.py`` of the generated app) carries two comment
anchors::

    from fastapi import FastAPI
    # kitgen:imports

    app = FastAPI()
    # kitgen:routes

Import lines are inserted directly above ``# kitgen:imports``; registration
lines are appended below ``# kitgen:routes`` after any registrations already
there, at the anchor's indentation.  A line is only inserted when
no non-comment line of the file already equals it, so re-running a generation
leaves the file byte-identical.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from pathlib import Path

from kitgen.errors import RouteInjectionError


IMPORTS_ANCHOR = "# kitgen:imports"
ROUTES_ANCHOR = "# kitgen:routes"
REGISTRATION_PREFIX = "app.include_router("


# ---------------------------------------------------------------------------
# RouteDescriptor
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RouteDescriptor:
    """What to import and how to register one generated handler.

    Attributes:
        path: URL prefix the handler is mounted at (``/posts``).
        package_name: Name the handler module is imported as (``posts``).
        handler_call: Expression building the router (``posts.handler(queries)``).
        import_path: Dotted module the package is imported from (``app.posts``).
    """

    path: str
    package_name: str
    handler_call: str
    import_path: str

    @property
    def import_line(self) -> str:
        return f"from {self.import_path} import {self.package_name}"

    @property
    def registration_line(self) -> str:
        return f'{REGISTRATION_PREFIX}{self.handler_call}, prefix="{self.path}")'

    @classmethod
    def for_resource(
        cls,
        package_name: str,
        module_name: str,
        path: str | None = None,
        factory: str = "handler",
    ) -> "RouteDescriptor":
        """A store-backed handler: the factory receives the shared ``queries``."""
        return cls(
            path=path or f"/{package_name}",
            package_name=package_name,
            handler_call=f"{package_name}.{factory}(queries)",
            import_path=f"{module_name}.{package_name}",
        )

    @classmethod
    def for_view(cls, package_name: str, module_name: str, path: str | None = None) -> "RouteDescriptor":
        """A view handler with no backing store."""
        return cls(
            path=path or f"/{package_name}",
            package_name=package_name,
            handler_call=f"{package_name}.handler()",
            import_path=f"{module_name}.{package_name}",
        )


def manual_wiring_instructions(route: RouteDescriptor, composition_root: str | Path = "main.py") -> str:
    """The lines a user has to add by hand when automatic wiring fails."""
    return (
        f"Add the following to {composition_root}:\n"
        f"  1. with the other imports:\n"
        f"       {route.import_line}\n"
        f"  2. where routes are registered:\n"
        f"       {route.registration_line}"
    )


# ---------------------------------------------------------------------------
# Mutators
# ---------------------------------------------------------------------------


class SourceMutator(abc.ABC):
    """Edits composition-root source so a generated handler is reachable."""

    @abc.abstractmethod
    def inject_route(self, source: str, route: RouteDescriptor, *, origin: str | Path = "<source>") -> str:
        """Return *source* with *route* wired in.

        Raises:
            RouteInjectionError: If the source cannot be wired safely.
        """

    def inject_route_file(self, path: str | Path, route: RouteDescriptor) -> bool:
        """Wire *route* into the file at *path*.

        Returns ``True`` if the file changed, ``False`` if it was already wired.

        Raises:
            RouteInjectionError: If the file is missing or lacks its anchors.
        """
        path = Path(path)
        try:
            source = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise RouteInjectionError(path, f"cannot read composition root: {exc}") from exc

        updated = self.inject_route(source, route, origin=path)
        if updated == source:
            return False
        path.write_text(updated, encoding="utf-8")
        return True


class AnchorMutator(SourceMutator):
    """Text-anchor implementation of :class:`SourceMutator`."""

    def __init__(self, imports_anchor: str = IMPORTS_ANCHOR, routes_anchor: str = ROUTES_ANCHOR) -> None:
        self.imports_anchor = imports_anchor
        self.routes_anchor = routes_anchor

    def inject_route(self, source: str, route: RouteDescriptor, *, origin: str | Path = "<source>") -> str:
        lines = source.splitlines()
        trailing_newline = source.endswith("\n")

        # Both anchors are checked before anything is changed.
        self._find_anchor(lines, self.imports_anchor, origin)
        self._find_anchor(lines, self.routes_anchor, origin)

        existing = _code_lines(lines)
        if route.import_line in existing and route.registration_line in existing:
            return source

        if route.import_line not in existing:
            index = self._find_anchor(lines, self.imports_anchor, origin)
            indent = _indent_of(lines[index])
            lines.insert(index, indent + route.import_line)

        if route.registration_line not in existing:
            index = self._find_anchor(lines, self.routes_anchor, origin)
            indent = _indent_of(lines[index])
            end = index + 1
            while end < len(lines) and lines[end].strip().startswith(REGISTRATION_PREFIX):
                end += 1
            lines.insert(end, indent + route.registration_line)

        result = "\n".join(lines)
        if trailing_newline:
            result += "\n"
        return result

    def _find_anchor(self, lines: list[str], anchor: str, origin: str | Path) -> int:
        matches = [i for i, line in enumerate(lines) if line.strip() == anchor]
        if not matches:
            raise RouteInjectionError(origin, f"anchor '{anchor}' not found")
        if len(matches) > 1:
            raise RouteInjectionError(
                origin, f"anchor '{anchor}' appears {len(matches)} times (expected exactly one)"
            )
        return matches[0]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _indent_of(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


def _code_lines(lines: list[str]) -> set[str]:
    """Stripped lines that are not blank and not comments."""
    code = set()
    for line in lines:
        stripped = line.strip()
        if stripped and not stripped.startswith("#"):
            code.add(stripped)
    return code
