"""Jinja2 rendering of kit scaffold templates.

Scaffold templates use bracket delimiters (``[[ var ]]``, ``[% tag %]``,
``[# comment #]``) so the ``{{ }}`` and ``{% %}`` of the Jinja2 UI templates
they produce pass through untouched.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

from jinja2 import Environment, StrictUndefined, TemplateError

from kitgen.errors import RenderError
from kitgen.kits.strategies import StylingStrategy
from kitgen.naming import (
    display_field,
    pluralize,
    singularize,
    to_camel_case,
    to_identifier_case,
    to_snake_case,
    to_title,
)
from kitgen.utils import append_fragment, write_file


PAGE_SIZE_CHOICES = (10, 20, 50, 100)


# ---------------------------------------------------------------------------
# Function table
# ---------------------------------------------------------------------------


def _page_sizes(current: int | None = None) -> list[int]:
    """Page-size choices offered by list pages, including *current*."""
    sizes = list(PAGE_SIZE_CHOICES)
    if current and current not in sizes:
        sizes.append(current)
    return sorted(sizes)


def base_functions() -> dict[str, Callable[..., Any]]:
    """Naming and pagination helpers available to every scaffold template."""
    return {
        "title": to_title,
        "lower": str.lower,
        "upper": str.upper,
        "camel_case": to_camel_case,
        "identifier": to_identifier_case,
        "snake_case": to_snake_case,
        "singularize": singularize,
        "pluralize": pluralize,
        "display_field": display_field,
        "until": StylingStrategy.until,
        "add": StylingStrategy.add,
        "dict": StylingStrategy.make_dict,
        "page_sizes": _page_sizes,
    }


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders scaffold template bodies resolved through the kit cascade.

    Bodies come from :class:`~kitgen.kits.KitResolver` rather than a loader,
    so every render goes through :meth:`render` with an explicit name used in
    error messages.
    """

    def __init__(self, strategy: StylingStrategy | None = None) -> None:
        self.strategy = strategy
        self.env = Environment(
            block_start_string="[%",
            block_end_string="%]",
            variable_start_string="[[",
            variable_end_string="]]",
            comment_start_string="[#",
            comment_end_string="#]",
            undefined=StrictUndefined,
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.globals.update(base_functions())
        if strategy is not None:
            self.env.globals.update(strategy.template_functions())

        # Same helpers as filters: [[ name | identifier ]]
        self.env.filters["title_case"] = to_title
        self.env.filters["identifier"] = to_identifier_case
        self.env.filters["snake_case"] = to_snake_case
        self.env.filters["camel_case"] = to_camel_case
        self.env.filters["singularize"] = singularize
        self.env.filters["pluralize"] = pluralize

    # -- Rendering -----------------------------------------------------------

    def render(self, body: str, context: dict[str, Any], name: str = "<template>") -> str:
        """Render a template body.

        Raises:
            RenderError: If the body does not parse or fails while rendering.
        """
        try:
            template = self.env.from_string(body)
            return template.render(**context)
        except TemplateError as exc:
            raise RenderError(name, exc) from exc

    # -- File output -----------------------------------------------------------

    def render_to_file(
        self,
        body: str,
        output_path: str | Path,
        context: dict[str, Any],
        name: str = "<template>",
    ) -> Path:
        """Render *body* and write it to *output_path*, replacing any file."""
        return write_file(output_path, self.render(body, context, name))

    def append_to_file(
        self,
        body: str,
        output_path: str | Path,
        context: dict[str, Any],
        name: str = "<template>",
        separator: str = "\n",
    ) -> Path:
        """Render *body* and append it to a shared file.

        *separator* is written first only when the file already has content.
        """
        return append_fragment(output_path, self.render(body, context, name), separator)
