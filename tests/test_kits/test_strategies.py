"""Tests for styling strategies (kitgen.kits.strategies).

Covers:
- load_strategy lookup, normalisation and errors
- simple and variant helper lookup with default fallback
- the template function table and helper aliases
- make_dict / until / add utilities
"""

from __future__ import annotations

import pytest

from kitgen.errors import StrategyError
from kitgen.kits.strategies import (
    SIMPLE_HELPERS,
    VARIANT_HELPERS,
    BulmaStrategy,
    NoneStrategy,
    PicoStrategy,
    StylingStrategy,
    TailwindStrategy,
    known_strategies,
    load_strategy,
)


pytestmark = pytest.mark.unit


class TestLoadStrategy:
    def test_known_names(self):
        assert known_strategies() == ["bulma", "none", "pico", "tailwind"]

    @pytest.mark.parametrize(
        "name, cls",
        [
            ("tailwind", TailwindStrategy),
            (" Bulma ", BulmaStrategy),
            ("PICO", PicoStrategy),
            ("none", NoneStrategy),
        ],
    )
    def test_lookup_is_normalised(self, name, cls):
        assert isinstance(load_strategy(name), cls)

    def test_unknown(self):
        with pytest.raises(StrategyError, match="unknown strategy"):
            load_strategy("bootstrap")

    def test_empty(self):
        with pytest.raises(StrategyError, match="cannot be empty"):
            load_strategy("")


class TestHelperLookup:
    def test_simple_helper(self):
        assert "border" in TailwindStrategy().css_class("input")
        assert BulmaStrategy().css_class("input") == "input"

    def test_unknown_simple_helper(self):
        with pytest.raises(StrategyError, match="unknown helper"):
            TailwindStrategy().css_class("sparkle")

    def test_variant_falls_back_to_default(self):
        strategy = TailwindStrategy()
        assert strategy.button_class("weird") == strategy.variants["button"]["default"]

    def test_title_levels(self):
        assert TailwindStrategy().title_class(2).startswith("text-2xl")
        assert BulmaStrategy().title_class(1) == "title"

    def test_unknown_variant_helper(self):
        with pytest.raises(StrategyError):
            TailwindStrategy().variant_class("ribbon", "red")

    def test_none_strategy_is_empty(self):
        strategy = NoneStrategy()
        assert strategy.input_class() == ""
        assert strategy.button_class("danger") == ""
        assert strategy.css_cdn() == ""

    def test_pico_semantic_wrappers(self):
        strategy = PicoStrategy()
        assert strategy.needs_wrapper() is True
        assert strategy.needs_article() is True
        assert TailwindStrategy().needs_wrapper() is False


class TestTemplateFunctions:
    def test_every_helper_exposed(self):
        functions = TailwindStrategy().template_functions()
        for helper in SIMPLE_HELPERS + VARIANT_HELPERS:
            assert f"{helper}_class" in functions
        for name in ("css_cdn", "needs_wrapper", "needs_article", "dict", "until", "add"):
            assert name in functions

    def test_functions_are_bound_to_strategy(self):
        functions = BulmaStrategy().template_functions()
        assert functions["table_class"]() == "table is-fullwidth is-striped"
        assert functions["button_class"]("danger") == "button is-danger"

    def test_aliases(self):
        strategy = BulmaStrategy()
        functions = strategy.template_functions()
        assert functions["notification_class"]("success") == strategy.variant_class("alert", "success")
        assert functions["tag_class"]("primary") == "tag is-primary"


class TestUtilities:
    def test_make_dict(self):
        assert StylingStrategy.make_dict("a", 1, "b", 2) == {"a": 1, "b": 2}

    def test_make_dict_odd_arguments(self):
        assert StylingStrategy.make_dict("a", 1, "b") is None

    def test_make_dict_non_string_key(self):
        assert StylingStrategy.make_dict(1, "a") is None

    def test_until(self):
        assert StylingStrategy.until(3) == [0, 1, 2]
        assert StylingStrategy.until(-1) == []

    def test_add(self):
        assert StylingStrategy.add(2, 3) == 5
