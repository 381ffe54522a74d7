"""Schema migration for the on-device SQLite store."""

from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy import inspect
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from skill_log.database import Base
from skill_log.errors import StoreInitializationError
from skill_log.models.skill import Skill

logger = logging.getLogger(__name__)

# On-disk layouts, tracked in PRAGMA user_version:
#   1    title/content/category/tags/timestamps
#   2-4  + boolean pinned
#   5    + numeric pinned, completed
#   6    + extra (unrecognized imported fields)
CURRENT_SCHEMA_VERSION = 6

# Columns added after the first layout. All nullable; rows that predate them
# are read with defaults instead of being rewritten.
OPTIONAL_COLUMNS: dict[str, str] = {
    "pinned": "INTEGER",
    "completed": "BOOLEAN",
    "extra": "JSON",
}


def get_schema_version(conn: Connection) -> int:
    """Return the schema version stored in PRAGMA user_version."""
    return int(conn.exec_driver_sql("PRAGMA user_version").scalar() or 0)


def _ensure_parent_dir(engine: Engine) -> None:
    database = engine.url.database
    if not database or database == ":memory:" or database.startswith("file:"):
        return
    Path(database).expanduser().parent.mkdir(parents=True, exist_ok=True)


def _add_missing_columns(conn: Connection) -> list[str]:
    existing = {column["name"] for column in inspect(conn).get_columns(Skill.__tablename__)}
    added: list[str] = []
    for name, ddl_type in OPTIONAL_COLUMNS.items():
        if name in existing:
            continue
        conn.exec_driver_sql(f"ALTER TABLE {Skill.__tablename__} ADD COLUMN {name} {ddl_type}")
        added.append(name)
    return added


def migrate(engine: Engine) -> int:
    """
    Bring the store behind ``engine`` up to the current schema version.

    A fresh store gets the ``skills`` table. An older store only gains the
    optional columns it is missing; no row is touched. A current store is
    left alone, so running this twice is harmless.

    Args:
        engine: Engine for the SQLite store

    Returns:
        The schema version after migration

    Raises:
        StoreInitializationError: If the store cannot be created or opened
    """
    try:
        _ensure_parent_dir(engine)
        with engine.begin() as conn:
            version = get_schema_version(conn)
            if not inspect(conn).has_table(Skill.__tablename__):
                Base.metadata.create_all(bind=conn, tables=[Skill.__table__])
                logger.info("Created skill store at schema version %d", CURRENT_SCHEMA_VERSION)
            elif version < CURRENT_SCHEMA_VERSION:
                added = _add_missing_columns(conn)
                logger.info(
                    "Upgraded skill store: %d => %d (added columns: %s)",
                    version,
                    CURRENT_SCHEMA_VERSION,
                    ", ".join(added) or "none",
                )
            else:
                if version > CURRENT_SCHEMA_VERSION:
                    logger.warning(
                        "Skill store schema version %d is newer than this build (%d)",
                        version,
                        CURRENT_SCHEMA_VERSION,
                    )
                return version
            conn.exec_driver_sql(f"PRAGMA user_version = {CURRENT_SCHEMA_VERSION}")
    except (SQLAlchemyError, OSError) as exc:
        raise StoreInitializationError(f"Could not open skill store: {exc}") from exc
    return CURRENT_SCHEMA_VERSION
