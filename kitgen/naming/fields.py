"""Field type inference and type mapping.

Turns raw ``name[:type]`` input into :class:`FieldSpec` objects carrying the
Python type, the SQL column type and optional foreign-key metadata.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Union

from pydantic import BaseModel, Field

from kitgen.errors import FieldSpecError, NamingConflictError


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class FieldKind(str, Enum):
    """Semantic type of a field, as inferred from its name or declared."""

    STRING = "string"
    TEXT = "text"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    TIME = "time"
    REFERENCES = "references"


class DeletePolicy(str, Enum):
    """Foreign-key ``ON DELETE`` behaviour."""

    CASCADE = "CASCADE"
    SET_NULL = "SET NULL"
    RESTRICT = "RESTRICT"
    NO_ACTION = "NO ACTION"


_DELETE_ALIASES: dict[str, DeletePolicy] = {
    "CASCADE": DeletePolicy.CASCADE,
    "SET_NULL": DeletePolicy.SET_NULL,
    "SET NULL": DeletePolicy.SET_NULL,
    "RESTRICT": DeletePolicy.RESTRICT,
    "NO_ACTION": DeletePolicy.NO_ACTION,
    "NO ACTION": DeletePolicy.NO_ACTION,
}


# ---------------------------------------------------------------------------
# Type inference
# ---------------------------------------------------------------------------

_EXACT_MATCHES: dict[str, FieldKind] = {
    # strings
    "name": FieldKind.STRING,
    "title": FieldKind.STRING,
    "description": FieldKind.STRING,
    "content": FieldKind.STRING,
    "email": FieldKind.STRING,
    "username": FieldKind.STRING,
    "password": FieldKind.STRING,
    "url": FieldKind.STRING,
    "slug": FieldKind.STRING,
    "code": FieldKind.STRING,
    "token": FieldKind.STRING,
    "key": FieldKind.STRING,
    "address": FieldKind.STRING,
    "city": FieldKind.STRING,
    "country": FieldKind.STRING,
    "phone": FieldKind.STRING,
    "status": FieldKind.STRING,
    "type": FieldKind.STRING,
    # integers
    "age": FieldKind.INT,
    "count": FieldKind.INT,
    "quantity": FieldKind.INT,
    "views": FieldKind.INT,
    "likes": FieldKind.INT,
    "score": FieldKind.INT,
    "rank": FieldKind.INT,
    "level": FieldKind.INT,
    "year": FieldKind.INT,
    "month": FieldKind.INT,
    "day": FieldKind.INT,
    # floats
    "price": FieldKind.FLOAT,
    "amount": FieldKind.FLOAT,
    "rating": FieldKind.FLOAT,
    "lat": FieldKind.FLOAT,
    "lng": FieldKind.FLOAT,
    "latitude": FieldKind.FLOAT,
    "longitude": FieldKind.FLOAT,
    # booleans
    "enabled": FieldKind.BOOL,
    "active": FieldKind.BOOL,
    "published": FieldKind.BOOL,
    "verified": FieldKind.BOOL,
    "approved": FieldKind.BOOL,
    "deleted": FieldKind.BOOL,
    "hidden": FieldKind.BOOL,
    "visible": FieldKind.BOOL,
    "public": FieldKind.BOOL,
    "private": FieldKind.BOOL,
    # timestamps
    "created_at": FieldKind.TIME,
    "updated_at": FieldKind.TIME,
    "deleted_at": FieldKind.TIME,
    "published_at": FieldKind.TIME,
    "started_at": FieldKind.TIME,
    "ended_at": FieldKind.TIME,
    "expires_at": FieldKind.TIME,
}

_SUFFIX_RULES: tuple[tuple[tuple[str, ...], FieldKind], ...] = (
    (("_at", "_date", "_time"), FieldKind.TIME),
    (("_count", "_number", "_index"), FieldKind.INT),
    (("_price", "_amount", "_rate"), FieldKind.FLOAT),
)

_PREFIX_RULES: tuple[tuple[tuple[str, ...], FieldKind], ...] = (
    (("is_", "has_", "can_"), FieldKind.BOOL),
)

_CONTAINS_RULES: tuple[tuple[tuple[str, ...], FieldKind], ...] = (
    (("email", "url"), FieldKind.STRING),
    (("price", "amount"), FieldKind.FLOAT),
)


def infer_type(field_name: str) -> FieldKind:
    """Guess a field's type from its name.

    Rules are applied in order: exact name, suffix, prefix, substring, and
    finally ``string`` as the default.
    """
    lower = field_name.strip().lower()

    if lower in _EXACT_MATCHES:
        return _EXACT_MATCHES[lower]
    for suffixes, kind in _SUFFIX_RULES:
        if lower.endswith(suffixes):
            return kind
    for prefixes, kind in _PREFIX_RULES:
        if lower.startswith(prefixes):
            return kind
    for needles, kind in _CONTAINS_RULES:
        if any(needle in lower for needle in needles):
            return kind
    return FieldKind.STRING


def parse_field_input(raw: str) -> tuple[str, str]:
    """Split ``"name"`` or ``"name:type"`` into ``(name, type)``.

    An explicit type always wins; otherwise the type is inferred.
    """
    name, sep, explicit = raw.partition(":")
    name = name.strip()
    explicit = explicit.strip()
    if sep and explicit:
        return name, explicit
    return name, infer_type(name).value


# ---------------------------------------------------------------------------
# Type mapping
# ---------------------------------------------------------------------------

_TYPE_MAP: dict[str, tuple[str, str, bool]] = {
    "string": ("str", "TEXT", False),
    "str": ("str", "TEXT", False),
    "text": ("str", "TEXT", True),
    "textarea": ("str", "TEXT", True),
    "longtext": ("str", "TEXT", True),
    "int": ("int", "INTEGER", False),
    "integer": ("int", "INTEGER", False),
    "bool": ("bool", "BOOLEAN", False),
    "boolean": ("bool", "BOOLEAN", False),
    "float": ("float", "REAL", False),
    "float64": ("float", "REAL", False),
    "decimal": ("float", "REAL", False),
    "time": ("datetime", "DATETIME", False),
    "datetime": ("datetime", "DATETIME", False),
    "timestamp": ("datetime", "DATETIME", False),
}


def map_type(type_name: str) -> tuple[str, str, bool]:
    """Map a declared type to ``(python_type, sql_type, is_textarea)``.

    Reference types (``references:<table>``) map to ``TEXT`` to match the
    text primary keys of generated tables.

    Raises:
        FieldSpecError: If *type_name* is not a supported type.
    """
    lower = type_name.strip().lower()
    if lower.startswith("references:"):
        return "str", "TEXT", False
    try:
        return _TYPE_MAP[lower]
    except KeyError:
        raise FieldSpecError(
            "",
            f"unsupported type '{type_name}' "
            "(supported: string, text, int, bool, float, time, references:table)",
        ) from None


# ---------------------------------------------------------------------------
# FieldSpec
# ---------------------------------------------------------------------------


class FieldSpec(BaseModel):
    """A parsed field declaration."""

    name: str
    type_name: str
    py_type: str
    sql_type: str
    is_textarea: bool = False
    is_reference: bool = False
    referenced_table: str = ""
    on_delete: DeletePolicy | None = None

    @property
    def kind(self) -> FieldKind:
        if self.is_reference:
            return FieldKind.REFERENCES
        if self.is_textarea:
            return FieldKind.TEXT
        lower = self.type_name.lower()
        for kind in FieldKind:
            if kind.value == lower:
                return kind
        return {
            "str": FieldKind.STRING,
            "integer": FieldKind.INT,
            "boolean": FieldKind.BOOL,
            "float64": FieldKind.FLOAT,
            "decimal": FieldKind.FLOAT,
            "datetime": FieldKind.TIME,
            "timestamp": FieldKind.TIME,
        }.get(lower, FieldKind.STRING)


FieldInput = Union[str, tuple[str, str]]


def parse_field(name: str, type_name: str = "") -> FieldSpec:
    """Build a :class:`FieldSpec` from a name and an optional explicit type."""
    name = name.strip()
    if not name:
        raise FieldSpecError("", "field name cannot be empty")
    if not name.isidentifier():
        raise FieldSpecError(name, "field name must be a valid identifier")
    type_name = type_name.strip() or infer_type(name).value

    try:
        py_type, sql_type, is_textarea = map_type(type_name)
    except FieldSpecError as exc:
        raise FieldSpecError(name, exc.reason) from None

    spec = FieldSpec(
        name=name,
        type_name=type_name,
        py_type=py_type,
        sql_type=sql_type,
        is_textarea=is_textarea,
    )

    if type_name.lower().startswith("references:"):
        parts = type_name.split(":")
        table = parts[1].strip() if len(parts) > 1 else ""
        if not table:
            raise FieldSpecError(name, "references type requires a table: references:<table>")
        if not table.isidentifier():
            raise FieldSpecError(name, f"referenced table '{table}' must be a valid identifier")
        policy = DeletePolicy.CASCADE
        if len(parts) > 2 and parts[2].strip():
            raw_policy = parts[2].strip().upper()
            if raw_policy not in _DELETE_ALIASES:
                raise FieldSpecError(
                    name,
                    f"invalid on_delete action '{parts[2]}' "
                    "(supported: CASCADE, SET_NULL, RESTRICT, NO_ACTION)",
                )
            policy = _DELETE_ALIASES[raw_policy]
        spec.is_reference = True
        spec.referenced_table = table
        spec.on_delete = policy

    return spec


def parse_fields(items: Iterable[FieldInput]) -> list[FieldSpec]:
    """Parse an ordered collection of field declarations.

    Each item is either a ``"name[:type]"`` string or a ``(name, type)`` pair
    whose type may be empty.  Field order is preserved.

    Raises:
        FieldSpecError: On an empty name or unsupported type.
        NamingConflictError: When two fields share a name.
    """
    fields: list[FieldSpec] = []
    seen: set[str] = set()
    for item in items:
        if isinstance(item, str):
            spec = parse_field(*parse_field_input(item))
        else:
            name, explicit = item
            spec = parse_field(name, explicit or "")
        key = spec.name.lower()
        if key in seen:
            raise NamingConflictError(spec.name)
        seen.add(key)
        fields.append(spec)
    return fields
