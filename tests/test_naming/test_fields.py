"""Tests for field type inference and parsing (kitgen.naming.fields).

Covers:
- infer_type rule order (exact, suffix, prefix, substring, default)
- parse_field_input explicit-type precedence
- map_type for every supported type and the error for unsupported ones
- parse_field reference handling, table validation and delete policies
- parse_fields ordering and duplicate detection
"""

from __future__ import annotations

import pytest

from kitgen.errors import FieldSpecError, NamingConflictError
from kitgen.naming import (
    DeletePolicy,
    FieldKind,
    infer_type,
    map_type,
    parse_field,
    parse_field_input,
    parse_fields,
)


pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# infer_type
# ---------------------------------------------------------------------------


class TestInferType:
    @pytest.mark.parametrize(
        "name, kind",
        [
            ("title", FieldKind.STRING),
            ("email", FieldKind.STRING),
            ("age", FieldKind.INT),
            ("price", FieldKind.FLOAT),
            ("published", FieldKind.BOOL),
            ("created_at", FieldKind.TIME),
        ],
    )
    def test_exact_matches(self, name, kind):
        assert infer_type(name) is kind

    @pytest.mark.parametrize(
        "name, kind",
        [
            ("shipped_at", FieldKind.TIME),
            ("birth_date", FieldKind.TIME),
            ("page_count", FieldKind.INT),
            ("order_number", FieldKind.INT),
            ("tax_rate", FieldKind.FLOAT),
            ("total_price", FieldKind.FLOAT),
        ],
    )
    def test_suffix_rules(self, name, kind):
        assert infer_type(name) is kind

    @pytest.mark.parametrize("name", ["is_admin", "has_avatar", "can_edit"])
    def test_boolean_prefixes(self, name):
        assert infer_type(name) is FieldKind.BOOL

    @pytest.mark.parametrize(
        "name, kind",
        [
            ("contact_email", FieldKind.STRING),
            ("homepage_url", FieldKind.STRING),
            ("pricetag", FieldKind.FLOAT),
            ("amount_due", FieldKind.FLOAT),
        ],
    )
    def test_substring_rules(self, name, kind):
        assert infer_type(name) is kind

    def test_suffix_checked_before_prefix(self):
        # "_at" wins over the "is_" prefix
        assert infer_type("is_deleted_at") is FieldKind.TIME

    def test_default_is_string(self):
        assert infer_type("nickname") is FieldKind.STRING

    def test_case_and_whitespace_insensitive(self):
        assert infer_type("  Created_At ") is FieldKind.TIME

    @pytest.mark.parametrize("name", ["title", "view_count", "is_public", "misc", "unit_price"])
    def test_deterministic(self, name):
        assert infer_type(name) is infer_type(name)


# ---------------------------------------------------------------------------
# parse_field_input / map_type
# ---------------------------------------------------------------------------


class TestParseFieldInput:
    def test_inferred(self):
        assert parse_field_input("age") == ("age", "int")

    def test_explicit_type_wins(self):
        assert parse_field_input("age:string") == ("age", "string")

    def test_empty_explicit_type_falls_back_to_inference(self):
        assert parse_field_input("published:") == ("published", "bool")

    def test_reference_type_kept_whole(self):
        assert parse_field_input("author_id:references:users") == ("author_id", "references:users")


class TestMapType:
    @pytest.mark.parametrize(
        "type_name, expected",
        [
            ("string", ("str", "TEXT", False)),
            ("text", ("str", "TEXT", True)),
            ("int", ("int", "INTEGER", False)),
            ("integer", ("int", "INTEGER", False)),
            ("bool", ("bool", "BOOLEAN", False)),
            ("float", ("float", "REAL", False)),
            ("time", ("datetime", "DATETIME", False)),
            ("TIMESTAMP", ("datetime", "DATETIME", False)),
            ("references:users", ("str", "TEXT", False)),
        ],
    )
    def test_supported(self, type_name, expected):
        assert map_type(type_name) == expected

    def test_unsupported(self):
        with pytest.raises(FieldSpecError, match="unsupported type 'blob'"):
            map_type("blob")


# ---------------------------------------------------------------------------
# parse_field
# ---------------------------------------------------------------------------


class TestParseField:
    def test_inferred_type(self):
        spec = parse_field("view_count")
        assert spec.type_name == "int"
        assert spec.py_type == "int"
        assert spec.sql_type == "INTEGER"
        assert spec.kind is FieldKind.INT

    def test_textarea(self):
        spec = parse_field("body", "text")
        assert spec.is_textarea is True
        assert spec.kind is FieldKind.TEXT

    def test_reference_defaults_to_cascade(self):
        spec = parse_field("author_id", "references:users")
        assert spec.is_reference is True
        assert spec.referenced_table == "users"
        assert spec.on_delete is DeletePolicy.CASCADE
        assert spec.kind is FieldKind.REFERENCES

    @pytest.mark.parametrize(
        "policy, expected",
        [
            ("set_null", DeletePolicy.SET_NULL),
            ("RESTRICT", DeletePolicy.RESTRICT),
            ("no_action", DeletePolicy.NO_ACTION),
        ],
    )
    def test_reference_delete_policy(self, policy, expected):
        spec = parse_field("author_id", f"references:users:{policy}")
        assert spec.on_delete is expected

    def test_reference_without_table(self):
        with pytest.raises(FieldSpecError, match="requires a table"):
            parse_field("author_id", "references:")

    @pytest.mark.parametrize("table", ["users);DROP", "user-accounts", "2fa", "users posts"])
    def test_reference_table_must_be_identifier(self, table):
        with pytest.raises(FieldSpecError, match="must be a valid identifier") as exc_info:
            parse_field("author_id", f"references:{table}")
        assert exc_info.value.field == "author_id"

    def test_reference_bad_policy(self):
        with pytest.raises(FieldSpecError, match="invalid on_delete"):
            parse_field("author_id", "references:users:explode")

    @pytest.mark.parametrize("name", ["", "   "])
    def test_empty_name(self, name):
        with pytest.raises(FieldSpecError):
            parse_field(name)

    def test_name_must_be_identifier(self):
        with pytest.raises(FieldSpecError) as exc_info:
            parse_field("first name")
        assert exc_info.value.field == "first name"

    def test_unsupported_type_names_field(self):
        with pytest.raises(FieldSpecError) as exc_info:
            parse_field("photo", "blob")
        assert exc_info.value.field == "photo"


# ---------------------------------------------------------------------------
# parse_fields
# ---------------------------------------------------------------------------


class TestParseFields:
    def test_order_preserved(self):
        specs = parse_fields(["title", "body:text", "published_at"])
        assert [s.name for s in specs] == ["title", "body", "published_at"]

    def test_tuples_with_empty_type_are_inferred(self):
        specs = parse_fields([("price", ""), ("notes", "text")])
        assert specs[0].py_type == "float"
        assert specs[1].is_textarea is True

    def test_duplicate_names_conflict(self):
        with pytest.raises(NamingConflictError) as exc_info:
            parse_fields(["title", "body", "title:text"])
        assert exc_info.value.field == "title"

    def test_duplicates_are_case_insensitive(self):
        with pytest.raises(NamingConflictError):
            parse_fields(["Title", "title"])

    def test_empty(self):
        assert parse_fields([]) == []

    def test_string_items_split_like_parse_field_input(self):
        specs = parse_fields(["view_count:", "author_id:references:users:set_null", "bio: text "])
        assert specs[0].type_name == parse_field_input("view_count:")[1]
        assert specs[1].referenced_table == "users"
        assert specs[1].on_delete is DeletePolicy.SET_NULL
        assert specs[2].is_textarea is True

    def test_unsafe_reference_rejected_in_list(self):
        with pytest.raises(FieldSpecError):
            parse_fields(["title", "author_id:references:users);DROP TABLE posts"])
