"""Tests for migration naming (kitgen.generator.migrations).

Covers:
- filename format and microsecond truncation
- collision avoidance by advancing one second per taken prefix
- prefixes taken by migrations for other tables
"""

from __future__ import annotations

from datetime import datetime

import pytest

from kitgen.generator.migrations import (
    migration_prefix_taken,
    migration_timestamp,
    next_migration_path,
)


pytestmark = pytest.mark.unit

NOW = datetime(2024, 3, 15, 10, 30, 59, 123456)


class TestNextMigrationPath:
    def test_format(self, tmp_path):
        path = next_migration_path(tmp_path, "posts", NOW)
        assert path == tmp_path / "20240315103059_create_posts.sql"
        assert not path.exists()

    def test_collision_advances_one_second(self, tmp_path):
        (tmp_path / "20240315103059_create_posts.sql").write_text("", encoding="utf-8")
        path = next_migration_path(tmp_path, "posts", NOW)
        assert path.name == "20240315103100_create_posts.sql"

    def test_any_table_takes_the_prefix(self, tmp_path):
        (tmp_path / "20240315103059_create_tags.sql").write_text("", encoding="utf-8")
        (tmp_path / "20240315103100_add_index.sql").write_text("", encoding="utf-8")
        path = next_migration_path(tmp_path, "posts", NOW)
        assert path.name == "20240315103101_create_posts.sql"

    def test_same_second_generations_strictly_ordered(self, tmp_path):
        names = []
        for table in ("posts", "tags", "comments"):
            path = next_migration_path(tmp_path, table, NOW)
            path.write_text("", encoding="utf-8")
            names.append(path.name)
        prefixes = [migration_timestamp(name) for name in names]
        assert prefixes == sorted(set(prefixes))
        assert len(set(prefixes)) == 3

    def test_missing_directory(self, tmp_path):
        path = next_migration_path(tmp_path / "missing", "posts", NOW)
        assert path.parent == tmp_path / "missing"


class TestHelpers:
    def test_prefix_taken(self, tmp_path):
        (tmp_path / "20240101000000_create_posts.sql").write_text("", encoding="utf-8")
        assert migration_prefix_taken(tmp_path, "20240101000000") is True
        assert migration_prefix_taken(tmp_path, "20240101000001") is False

    def test_timestamp(self):
        assert migration_timestamp("db/20240101000000_create_posts.sql") == "20240101000000"
