"""Tests for the schema migrator."""

from datetime import datetime

import pytest
from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import sessionmaker

from skill_log.errors import StoreInitializationError
from skill_log.services.migrator import CURRENT_SCHEMA_VERSION, get_schema_version, migrate
from skill_log.services.skill_store import SkillStore

LEGACY_V2_SCHEMA = """
CREATE TABLE skills (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title VARCHAR NOT NULL,
    content TEXT NOT NULL,
    category VARCHAR NOT NULL,
    tags VARCHAR NOT NULL,
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL
)
"""


@pytest.fixture
def engine(tmp_path):
    """File-backed SQLite engine in a not-yet-existing directory."""
    engine = create_engine(f"sqlite:///{tmp_path}/nested/skills.db")
    yield engine
    engine.dispose()


@pytest.fixture
def legacy_engine(tmp_path):
    """Engine over a store written by an old build (no pinned/completed columns)."""
    engine = create_engine(f"sqlite:///{tmp_path}/legacy.db")
    with engine.begin() as conn:
        conn.exec_driver_sql(LEGACY_V2_SCHEMA)
        conn.exec_driver_sql(
            "INSERT INTO skills (title, content, category, tags, created_at, updated_at) "
            "VALUES ('Old note', 'text', 'dev', 'go', '2024-03-01 10:00:00', '2024-03-01 10:00:00')"
        )
        conn.exec_driver_sql("PRAGMA user_version = 2")
    yield engine
    engine.dispose()


def _columns(engine) -> set[str]:
    return {column["name"] for column in inspect(engine).get_columns("skills")}


class TestMigrateFreshStore:
    """Tests for creating a store from scratch."""

    def test_creates_table_and_directory(self, engine, tmp_path):
        """A fresh store gets the table, the version and its directory."""
        assert migrate(engine) == CURRENT_SCHEMA_VERSION
        assert (tmp_path / "nested" / "skills.db").exists()
        assert {"id", "title", "pinned", "completed", "extra"} <= _columns(engine)
        with engine.connect() as conn:
            assert get_schema_version(conn) == CURRENT_SCHEMA_VERSION

    def test_idempotent(self, engine):
        """Running twice changes nothing and keeps data."""
        migrate(engine)
        store = SkillStore(sessionmaker(bind=engine))
        skill_id = store.create("Keep me")

        assert migrate(engine) == CURRENT_SCHEMA_VERSION
        assert store.get_by_id(skill_id).title == "Keep me"

    def test_in_memory_store(self):
        """In-memory databases migrate without touching the filesystem."""
        engine = create_engine("sqlite://")
        assert migrate(engine) == CURRENT_SCHEMA_VERSION


class TestMigrateLegacyStore:
    """Tests for upgrading stores written by older builds."""

    def test_adds_missing_columns(self, legacy_engine):
        """Optional columns are added and the version is stamped."""
        assert "pinned" not in _columns(legacy_engine)
        migrate(legacy_engine)
        assert {"pinned", "completed", "extra"} <= _columns(legacy_engine)
        with legacy_engine.connect() as conn:
            assert get_schema_version(conn) == CURRENT_SCHEMA_VERSION

    def test_rows_read_with_defaults_without_rewrite(self, legacy_engine):
        """Old rows read as unpinned/incomplete while storage keeps NULL."""
        migrate(legacy_engine)
        store = SkillStore(sessionmaker(bind=legacy_engine))

        skill = store.get_all()[0]
        assert skill.title == "Old note"
        assert skill.pinned == 0
        assert skill.completed is False
        assert skill.created_at.replace(tzinfo=None) == datetime(2024, 3, 1, 10, 0)

        with legacy_engine.connect() as conn:
            row = conn.exec_driver_sql("SELECT pinned, completed FROM skills").one()
        assert tuple(row) == (None, None)

    def test_update_normalizes_legacy_row(self, legacy_engine):
        """The first explicit update writes concrete values."""
        migrate(legacy_engine)
        store = SkillStore(sessionmaker(bind=legacy_engine))
        skill_id = store.get_all()[0].id

        store.update(skill_id, {"content": "edited"})

        with legacy_engine.connect() as conn:
            row = conn.exec_driver_sql("SELECT pinned, completed FROM skills").one()
        assert tuple(row) == (0, 0)

    def test_legacy_boolean_pin_reads_as_level_one(self, legacy_engine):
        """A boolean pinned=true from an old layout becomes level 1."""
        with legacy_engine.begin() as conn:
            conn.exec_driver_sql("ALTER TABLE skills ADD COLUMN pinned BOOLEAN")
            conn.exec_driver_sql("UPDATE skills SET pinned = 1")
        migrate(legacy_engine)
        store = SkillStore(sessionmaker(bind=legacy_engine))
        assert store.get_all()[0].pinned == 1


class TestMigrateFailure:
    """Tests for stores that cannot be opened."""

    def test_unopenable_store_raises(self, tmp_path):
        """A path that cannot hold a database is a fatal init error."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        engine = create_engine(f"sqlite:///{blocker}/skills.db")
        with pytest.raises(StoreInitializationError):
            migrate(engine)
