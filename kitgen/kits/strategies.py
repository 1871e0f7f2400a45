"""Styling strategies: the CSS helper functions a kit exposes to its templates.

A strategy maps framework-neutral helper names (``input_class``,
``button_class("danger")`` ...) onto the class strings of one CSS framework.
Templates only ever call the helpers, so the same kit template renders for
Tailwind, Bulma, Pico or plain HTML depending on the bound strategy.
"""

from __future__ import annotations

from typing import Any, Callable, ClassVar

from kitgen.errors import StrategyError


# ---------------------------------------------------------------------------
# Helper names
# ---------------------------------------------------------------------------

# Helpers that take no argument and return a class string.
SIMPLE_HELPERS: tuple[str, ...] = (
    "container", "section", "box", "column", "columns",
    "field", "label", "input", "textarea", "select", "checkbox", "radio",
    "button_group", "form",
    "table", "thead", "tbody", "th", "td", "tr", "table_container",
    "navbar", "navbar_brand", "navbar_menu", "navbar_item", "navbar_start", "navbar_end",
    "subtitle", "text_muted", "text_primary", "text_danger", "text_success", "text_warning",
    "pagination", "pagination_list", "pagination_item",
    "card", "card_header", "card_body", "card_footer",
    "modal", "modal_background", "modal_content", "modal_close",
    "spinner", "loading", "grid", "grid_item", "flex", "flex_item",
    "hidden", "visible",
)

# Helpers that take one argument (variant, level, size or state).
VARIANT_HELPERS: tuple[str, ...] = (
    "button", "title", "text", "pagination_button", "alert", "badge", "margin", "padding",
)

# Aliases kept for kits written against older helper names.
_ALIASES: dict[str, str] = {"notification": "alert", "tag": "badge"}


# ---------------------------------------------------------------------------
# Base strategy
# ---------------------------------------------------------------------------


class StylingStrategy:
    """Base strategy; every helper returns an empty class string.

    Subclasses fill in ``classes`` for simple helpers and ``variants`` for
    helpers keyed by an argument.  A ``variants`` table must contain a
    ``"default"`` entry used for unknown arguments.
    """

    name: ClassVar[str] = ""
    cdn: ClassVar[str] = ""
    wrapper: ClassVar[bool] = False
    article: ClassVar[bool] = False
    classes: ClassVar[dict[str, str]] = {}
    variants: ClassVar[dict[str, dict[str, str]]] = {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    # -- Lookup --------------------------------------------------------------

    def css_class(self, helper: str) -> str:
        """Return the class string for a no-argument helper."""
        if helper not in SIMPLE_HELPERS:
            raise StrategyError(self.name, f"unknown helper '{helper}'")
        return self.classes.get(helper, "")

    def variant_class(self, helper: str, variant: Any = "") -> str:
        """Return the class string for a helper that takes an argument."""
        helper = _ALIASES.get(helper, helper)
        if helper not in VARIANT_HELPERS:
            raise StrategyError(self.name, f"unknown helper '{helper}'")
        table = self.variants.get(helper, {})
        return table.get(str(variant), table.get("default", ""))

    # -- Framework information ----------------------------------------------

    def css_cdn(self) -> str:
        return self.cdn

    def needs_wrapper(self) -> bool:
        """Whether page content must sit inside a semantic ``<main>``."""
        return self.wrapper

    def needs_article(self) -> bool:
        """Whether content boxes are rendered as ``<article>`` elements."""
        return self.article

    # -- Commonly called helpers -------------------------------------------

    def input_class(self) -> str:
        return self.css_class("input")

    def table_class(self) -> str:
        return self.css_class("table")

    def button_class(self, variant: str = "primary") -> str:
        return self.variant_class("button", variant)

    def title_class(self, level: int = 1) -> str:
        return self.variant_class("title", level)

    # -- Shared utilities ----------------------------------------------------

    @staticmethod
    def make_dict(*values: Any) -> dict[str, Any] | None:
        """Build a mapping from alternating key/value arguments.

        Returns ``None`` for an odd number of arguments or a non-string key.
        """
        if len(values) % 2:
            return None
        result: dict[str, Any] = {}
        for key, value in zip(values[::2], values[1::2]):
            if not isinstance(key, str):
                return None
            result[key] = value
        return result

    @staticmethod
    def until(count: int) -> list[int]:
        """``[0, 1, ..., count - 1]``."""
        return list(range(max(count, 0)))

    @staticmethod
    def add(a: int, b: int) -> int:
        return a + b

    # -- Template function table -------------------------------------------

    def template_functions(self) -> dict[str, Callable[..., Any]]:
        """Expose every helper as a named template function."""
        functions: dict[str, Callable[..., Any]] = {
            "css_cdn": self.css_cdn,
            "needs_wrapper": self.needs_wrapper,
            "needs_article": self.needs_article,
            "dict": self.make_dict,
            "until": self.until,
            "add": self.add,
        }
        for helper in SIMPLE_HELPERS:
            functions[f"{helper}_class"] = self._simple(helper)
        for helper in VARIANT_HELPERS:
            functions[f"{helper}_class"] = self._variant(helper)
        for alias, target in _ALIASES.items():
            functions[f"{alias}_class"] = self._variant(target)
        return functions

    def _simple(self, helper: str) -> Callable[[], str]:
        def _call() -> str:
            return self.css_class(helper)

        _call.__name__ = f"{helper}_class"
        return _call

    def _variant(self, helper: str) -> Callable[..., str]:
        def _call(variant: Any = "") -> str:
            return self.variant_class(helper, variant)

        _call.__name__ = f"{helper}_class"
        return _call


# ---------------------------------------------------------------------------
# Implementations
# ---------------------------------------------------------------------------

_TW_INPUT = (
    "w-full px-3 py-2 border border-gray-300 rounded-md "
    "focus:outline-none focus:ring-2 focus:ring-blue-500"
)
_TW_BADGE = "inline-flex items-center px-2.5 py-0.5 rounded-full text-xs font-medium"


class TailwindStrategy(StylingStrategy):
    name = "tailwind"
    cdn = '<script src="https://cdn.jsdelivr.net/npm/@tailwindcss/browser@4"></script>'
    classes = {
        "container": "max-w-7xl mx-auto px-4 py-8",
        "box": "bg-white shadow rounded-lg p-6 mb-6",
        "columns": "grid grid-cols-1 md:grid-cols-2 lg:grid-cols-3 gap-4",
        "field": "mb-4",
        "label": "block text-sm font-medium text-gray-700 mb-2",
        "input": _TW_INPUT,
        "textarea": _TW_INPUT,
        "select": _TW_INPUT,
        "checkbox": "flex items-center",
        "radio": "flex items-center",
        "button_group": "flex space-x-2",
        "form": "space-y-4",
        "table": "min-w-full divide-y divide-gray-200",
        "thead": "bg-gray-50",
        "tbody": "bg-white divide-y divide-gray-200",
        "th": "px-6 py-3 text-left text-xs font-medium text-gray-500 uppercase tracking-wider",
        "td": "px-6 py-4 whitespace-nowrap text-sm text-gray-900",
        "tr": "hover:bg-gray-50",
        "table_container": "overflow-x-auto",
        "navbar": "bg-white shadow",
        "navbar_brand": "font-bold text-xl",
        "navbar_menu": "flex space-x-4",
        "navbar_item": "text-gray-700 hover:text-gray-900",
        "navbar_start": "flex items-center",
        "navbar_end": "flex items-center ml-auto",
        "subtitle": "text-xl font-semibold text-gray-700 mb-4",
        "text_muted": "text-gray-500",
        "text_primary": "text-blue-600",
        "text_danger": "text-red-600",
        "text_success": "text-green-600",
        "text_warning": "text-yellow-600",
        "pagination": "flex justify-between items-center mt-4",
        "pagination_list": "flex items-center space-x-2",
        "card": "bg-white shadow rounded-lg overflow-hidden",
        "card_header": "px-6 py-4 bg-gray-50 border-b",
        "card_body": "p-6",
        "card_footer": "px-6 py-4 bg-gray-50 border-t",
        "modal": "fixed inset-0 z-50 overflow-y-auto",
        "modal_background": "fixed inset-0 bg-black opacity-50",
        "modal_content": "relative bg-white rounded-lg shadow-xl max-w-lg mx-auto my-8 p-6",
        "modal_close": "absolute top-4 right-4 text-gray-400 hover:text-gray-600",
        "spinner": "animate-spin h-5 w-5 border-2 border-blue-600 border-t-transparent rounded-full",
        "loading": "text-gray-600 animate-pulse",
        "grid": "grid gap-4",
        "flex": "flex",
        "hidden": "hidden",
        "visible": "block",
    }
    variants = {
        "button": {
            "primary": "bg-blue-600 text-white px-4 py-2 rounded-md hover:bg-blue-700 disabled:opacity-50",
            "secondary": "bg-gray-600 text-white px-2 py-1 text-sm rounded hover:bg-gray-700",
            "danger": "bg-red-600 text-white px-4 py-2 rounded-md hover:bg-red-700 disabled:opacity-50",
            "default": "bg-blue-600 text-white px-4 py-2 rounded-md hover:bg-blue-700 disabled:opacity-50",
        },
        "title": {
            "1": "text-3xl font-bold text-gray-900 mb-6",
            "2": "text-2xl font-bold text-gray-900 mb-4",
            "3": "text-xl font-bold text-gray-900 mb-3",
            "default": "text-3xl font-bold text-gray-900 mb-6",
        },
        "text": {
            "small": "text-sm text-gray-700",
            "large": "text-lg text-gray-700",
            "default": "text-gray-700",
        },
        "pagination_button": {
            "active": "bg-blue-600 text-white px-3 py-1 rounded",
            "default": (
                "px-4 py-2 border border-gray-300 rounded hover:bg-gray-50 "
                "disabled:opacity-50 disabled:cursor-not-allowed"
            ),
        },
        "alert": {
            "success": "bg-green-100 border border-green-400 text-green-700 px-4 py-3 rounded",
            "danger": "bg-red-100 border border-red-400 text-red-700 px-4 py-3 rounded",
            "warning": "bg-yellow-100 border border-yellow-400 text-yellow-700 px-4 py-3 rounded",
            "info": "bg-blue-100 border border-blue-400 text-blue-700 px-4 py-3 rounded",
            "default": "bg-gray-100 border border-gray-400 text-gray-700 px-4 py-3 rounded",
        },
        "badge": {
            "primary": f"{_TW_BADGE} bg-blue-100 text-blue-800",
            "success": f"{_TW_BADGE} bg-green-100 text-green-800",
            "danger": f"{_TW_BADGE} bg-red-100 text-red-800",
            "default": f"{_TW_BADGE} bg-gray-100 text-gray-800",
        },
        "margin": {"small": "m-2", "medium": "m-4", "large": "m-8", "default": "m-4"},
        "padding": {"small": "p-2", "medium": "p-4", "large": "p-8", "default": "p-4"},
    }


class BulmaStrategy(StylingStrategy):
    name = "bulma"
    cdn = '<link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/bulma@1.0.4/css/bulma.min.css">'
    classes = {
        "container": "container",
        "section": "section",
        "box": "box",
        "column": "column",
        "columns": "columns",
        "field": "field",
        "label": "label",
        "input": "input",
        "textarea": "textarea",
        "checkbox": "checkbox",
        "radio": "radio",
        "button_group": "buttons",
        "table": "table is-fullwidth is-striped",
        "table_container": "table-container",
        "navbar": "navbar",
        "navbar_brand": "navbar-brand",
        "navbar_menu": "navbar-menu",
        "navbar_item": "navbar-item",
        "navbar_start": "navbar-start",
        "navbar_end": "navbar-end",
        "subtitle": "subtitle",
        "text_muted": "has-text-grey",
        "text_primary": "has-text-primary",
        "text_danger": "has-text-danger",
        "text_success": "has-text-success",
        "text_warning": "has-text-warning",
        "pagination": "pagination",
        "pagination_list": "pagination-list",
        "card": "card",
        "card_header": "card-header",
        "card_body": "card-content",
        "card_footer": "card-footer",
        "modal": "modal is-active",
        "modal_background": "modal-background",
        "modal_content": "modal-content",
        "modal_close": "modal-close is-large",
        "spinner": "loader",
        "loading": "has-text-grey",
        "grid": "columns is-multiline",
        "grid_item": "column",
        "flex": "is-flex",
        "hidden": "is-hidden",
        "visible": "is-block",
    }
    variants = {
        "button": {
            "primary": "button is-primary",
            "secondary": "button is-small",
            "danger": "button is-danger",
            "default": "button is-primary",
        },
        "title": {"default": "title"},
        "pagination_button": {"active": "pagination-link is-current", "default": "button"},
        "alert": {
            "success": "notification is-success",
            "danger": "notification is-danger",
            "warning": "notification is-warning",
            "info": "notification is-info",
            "default": "notification",
        },
        "badge": {
            "primary": "tag is-primary",
            "success": "tag is-success",
            "danger": "tag is-danger",
            "default": "tag",
        },
        "margin": {"small": "m-2", "medium": "m-4", "large": "m-6", "default": "m-4"},
        "padding": {"small": "p-2", "medium": "p-4", "large": "p-6", "default": "p-4"},
    }


class PicoStrategy(StylingStrategy):
    """Pico styles semantic HTML directly, so almost every helper is empty."""

    name = "pico"
    cdn = '<link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/@picocss/pico@2/css/pico.min.css">'
    wrapper = True
    article = True
    classes = {"container": "container"}


class NoneStrategy(StylingStrategy):
    """Plain HTML with no framework."""

    name = "none"


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

STRATEGIES: dict[str, type[StylingStrategy]] = {
    "tailwind": TailwindStrategy,
    "bulma": BulmaStrategy,
    "pico": PicoStrategy,
    "none": NoneStrategy,
}


def known_strategies() -> list[str]:
    return sorted(STRATEGIES)


def load_strategy(name: str) -> StylingStrategy:
    """Instantiate the strategy registered under *name*.

    Raises:
        StrategyError: If *name* is empty or not a known strategy.
    """
    key = (name or "").strip().lower()
    if not key:
        raise StrategyError(name, "strategy name cannot be empty")
    try:
        return STRATEGIES[key]()
    except KeyError:
        raise StrategyError(
            name, f"unknown strategy (known: {', '.join(known_strategies())})"
        ) from None
