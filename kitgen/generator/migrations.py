"""Collision-free naming of timestamped migration files."""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path


TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


def migration_prefix_taken(migrations_dir: Path, prefix: str) -> bool:
    return any(migrations_dir.glob(f"{prefix}_*.sql"))


def next_migration_path(migrations_dir: str | Path, table: str, now: datetime) -> Path:
    """Return ``<dir>/<YYYYMMDDHHMMSS>_create_<table>.sql`` with an unused prefix.

    While any migration already uses the candidate timestamp prefix, the
    timestamp is advanced by one second, so migrations generated in the same
    second stay strictly ordered.  Only collisions visible in the directory
    listing are avoided.
    """
    migrations_dir = Path(migrations_dir)
    timestamp = now.replace(microsecond=0)
    while True:
        prefix = timestamp.strftime(TIMESTAMP_FORMAT)
        if not migration_prefix_taken(migrations_dir, prefix):
            return migrations_dir / f"{prefix}_create_{table}.sql"
        timestamp += timedelta(seconds=1)


def migration_timestamp(path: str | Path) -> str:
    """The ``YYYYMMDDHHMMSS`` prefix of a migration filename."""
    return Path(path).name.split("_", 1)[0]
