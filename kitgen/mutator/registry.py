"""Append-only registry of generated resources, views and schemas.

The registry is a JSON array of ``{"name", "path", "type"}`` records kept at
the project root.  Presentation code of the generated app (a landing page,
navigation) reads it to enumerate what exists.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from kitgen.utils import load_json_list, save_json


class EntryKind(str, Enum):
    RESOURCE = "resource"
    VIEW = "view"
    SCHEMA = "schema"


class RegistryEntry(BaseModel):
    """One registry record; ``kind`` is stored on disk under the key ``type``."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    path: str
    kind: EntryKind = Field(alias="type")

    def to_json(self) -> dict[str, str]:
        return self.model_dump(mode="json", by_alias=True)


class ResourceRegistry:
    """Reads and appends to the registry file at *path*."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def read(self) -> list[RegistryEntry]:
        """All entries in insertion order; an absent file is an empty registry."""
        return [RegistryEntry.model_validate(item) for item in load_json_list(self.path)]

    def write(self, entries: list[RegistryEntry]) -> None:
        save_json([entry.to_json() for entry in entries], self.path)

    def register(self, name: str, path: str, kind: EntryKind | str) -> bool:
        """Append an entry unless one with the same *path* already exists.

        Returns ``True`` when the entry was added.
        """
        entries = self.read()
        if any(entry.path == path for entry in entries):
            return False
        entries.append(RegistryEntry(name=name, path=path, kind=EntryKind(kind)))
        self.write(entries)
        return True

    def entries_of_kind(self, kind: EntryKind | str) -> list[RegistryEntry]:
        wanted = EntryKind(kind)
        return [entry for entry in self.read() if entry.kind is wanted]
