"""Naming and type engine -- pure helpers shared by every generator.

Quick usage::

    from kitgen.naming import pluralize, infer_type, parse_fields

    pluralize("category")          # "categories"
    infer_type("created_at")       # FieldKind.TIME
    parse_fields(["title", "author_id:references:users"])
"""

from kitgen.naming.fields import (
    DeletePolicy,
    FieldKind,
    FieldSpec,
    infer_type,
    map_type,
    parse_field,
    parse_field_input,
    parse_fields,
)
from kitgen.naming.inflection import (
    display_field,
    pluralize,
    singularize,
    to_camel_case,
    to_identifier_case,
    to_snake_case,
    to_title,
)

__all__ = [
    "DeletePolicy",
    "FieldKind",
    "FieldSpec",
    "display_field",
    "infer_type",
    "map_type",
    "parse_field",
    "parse_field_input",
    "parse_fields",
    "pluralize",
    "singularize",
    "to_camel_case",
    "to_identifier_case",
    "to_snake_case",
    "to_title",
]
