"""English inflection and identifier case conversion.

All functions here are pure.  Irregular nouns are looked up before any suffix
rule is applied, and the suffix rules are checked from most to least specific.
"""

from __future__ import annotations

import re
from typing import Any, Sequence


# ---------------------------------------------------------------------------
# Irregular nouns
# ---------------------------------------------------------------------------

IRREGULAR_PLURALS: dict[str, str] = {
    "person": "people",
    "child": "children",
    "tooth": "teeth",
    "foot": "feet",
    "man": "men",
    "woman": "women",
    "mouse": "mice",
    "goose": "geese",
    "ox": "oxen",
}

IRREGULAR_SINGULARS: dict[str, str] = {plural: singular for singular, plural in IRREGULAR_PLURALS.items()}

ACRONYMS = frozenset(
    {"id", "url", "uri", "http", "https", "api", "sql", "json", "xml", "html", "css", "js", "uuid"}
)

_VOWELS = frozenset("aeiou")


def _match_case(source: str, replacement: str) -> str:
    """Carry the capitalisation of *source*'s first letter over to *replacement*."""
    if source[:1].isupper():
        return replacement[:1].upper() + replacement[1:]
    return replacement


# ---------------------------------------------------------------------------
# Singular / plural
# ---------------------------------------------------------------------------


def singularize(word: str) -> str:
    """Return the singular form of *word*.

    >>> singularize("categories")
    'category'
    >>> singularize("people")
    'person'
    """
    if not word:
        return word
    lower = word.lower()
    if lower in IRREGULAR_SINGULARS:
        return _match_case(word, IRREGULAR_SINGULARS[lower])
    if lower in IRREGULAR_PLURALS:
        return word

    if lower.endswith("ies") and len(word) > 3:
        return word[:-3] + "y"
    if lower.endswith("yses"):
        return word[:-2] + "is"
    if lower.endswith(("ses", "xes", "zes")):
        return word[:-2]
    if lower.endswith(("ches", "shes")):
        return word[:-2]
    if lower.endswith(("ss", "sis")):
        return word
    if lower.endswith("s") and len(word) > 1:
        return word[:-1]
    return word


def pluralize(word: str) -> str:
    """Return the plural form of *word*.

    Words that already look plural are returned unchanged, so the function is
    safe to apply to table names that were typed in plural form.
    """
    if not word:
        return word
    lower = word.lower()
    if lower in IRREGULAR_PLURALS:
        return _match_case(word, IRREGULAR_PLURALS[lower])
    if lower in IRREGULAR_SINGULARS:
        return word

    if lower.endswith("ss"):
        return word + "es"
    if lower.endswith("sis"):
        return word[:-2] + "es"
    if lower.endswith("s"):
        return word

    if len(word) >= 2 and lower.endswith("y") and lower[-2] not in _VOWELS:
        return word[:-1] + "ies"
    if lower.endswith(("x", "z", "ch", "sh")):
        return word + "es"
    return word + "s"


# ---------------------------------------------------------------------------
# Case conversion
# ---------------------------------------------------------------------------


def to_snake_case(value: str) -> str:
    """Convert ``SomeThing``, ``some-thing`` or ``Some Thing`` to ``some_thing``."""
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", value.strip())
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return re.sub(r"[-\s_]+", "_", s2).lower()


def to_identifier_case(value: str) -> str:
    """Convert ``snake_case`` to ``CamelCase``, upper-casing known acronyms.

    >>> to_identifier_case("user_id")
    'UserID'
    >>> to_identifier_case("api_key_url")
    'APIKeyURL'
    """
    parts = re.split(r"[-_\s]+", value)
    converted = []
    for part in parts:
        if not part:
            continue
        if part.lower() in ACRONYMS:
            converted.append(part.upper())
        else:
            converted.append(part[:1].upper() + part[1:])
    return "".join(converted)


def to_camel_case(value: str) -> str:
    """Like :func:`to_identifier_case` but with a lower-case first word."""
    parts = [p for p in re.split(r"[-_\s]+", value) if p]
    if not parts:
        return ""
    head = parts[0].lower()
    return head + to_identifier_case("_".join(parts[1:]))


def to_title(value: str) -> str:
    """``unit_price`` -> ``Unit Price``."""
    return " ".join(word.capitalize() for word in re.split(r"[-_\s]+", value) if word)


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

_DISPLAY_PRIORITY = ("title", "name", "id")


def display_field(fields: Sequence[Any]) -> Any | None:
    """Pick the field used to label a record in lists and headings.

    Priority is ``title`` > ``name`` > ``id`` > the first field.  Accepts any
    objects that expose a ``name`` attribute; returns ``None`` when *fields*
    is empty.
    """
    if not fields:
        return None
    for wanted in _DISPLAY_PRIORITY:
        for field in fields:
            if str(field.name).lower() == wanted:
                return field
    return fields[0]
