"""Tests for JSON import/export."""

import json
from unittest.mock import patch

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from skill_log.errors import ImportFormatError, SkillImportError
from skill_log.services.codec import (
    dumps_export,
    export_records,
    import_json,
    import_records,
    normalize_import_record,
    parse_import,
    write_export,
)
from skill_log.services.migrator import migrate
from skill_log.services.skill_store import SkillStore


@pytest.fixture
def store():
    """Record store over a migrated in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    migrate(engine)
    yield SkillStore(sessionmaker(autocommit=False, autoflush=False, bind=engine))
    engine.dispose()


def _without_updated_at(records):
    return [{k: v for k, v in record.items() if k != "updatedAt"} for record in records]


class TestExport:
    """Tests for exporting."""

    def test_export_empty(self, store):
        """An empty store exports an empty array."""
        assert json.loads(dumps_export(store)) == []

    def test_export_fields(self, store):
        """Records carry exactly the wire field names."""
        store.create("A", "body", "dev", "go,cli", 3)
        [record] = export_records(store)
        assert record["title"] == "A"
        assert record["pinned"] == 3
        assert record["completed"] is False
        assert {"id", "createdAt", "updatedAt"} <= set(record)
        assert "created_at" not in record

    def test_export_ignores_view(self, store):
        """Export is the full set, completed and pinned alike."""
        first = store.create("A")
        store.create("B", pinned_level=4)
        store.update(first, {"completed": True})
        assert [record["title"] for record in export_records(store)] == ["A", "B"]

    def test_write_export(self, store, tmp_path):
        """The export file is a UTF-8 JSON array."""
        store.create("日本語メモ")
        path = write_export(store, tmp_path / "skillData.json")
        data = json.loads((tmp_path / "skillData.json").read_text(encoding="utf-8"))
        assert path == str(tmp_path / "skillData.json")
        assert data[0]["title"] == "日本語メモ"


class TestParseImport:
    """Tests for import payload parsing."""

    def test_not_json(self):
        """Invalid JSON is a format error."""
        with pytest.raises(ImportFormatError):
            parse_import("{not json")

    @pytest.mark.parametrize("payload", ['{"id": 1}', '"text"', "42", "null"])
    def test_not_array(self, payload):
        """Any non-array top level is a format error."""
        with pytest.raises(ImportFormatError, match="not an array"):
            parse_import(payload)

    def test_format_error_leaves_store_untouched(self, store):
        """A rejected payload writes nothing."""
        store.create("A")
        with pytest.raises(ImportFormatError):
            import_json(store, '{"title": "B"}')
        assert [skill.title for skill in store.get_all()] == ["A"]


class TestNormalizeImportRecord:
    """Tests for per-element normalization."""

    def test_defaults(self):
        """Missing fields take their defaults."""
        record = normalize_import_record({"title": "X"})
        assert record["id"] is None
        assert record["category"] == ""
        assert record["tags"] == ""
        assert record["pinned"] == 0
        assert record["completed"] is False
        assert record["created_at"] == record["updated_at"]

    def test_coercions(self):
        """Pinned and completed are coerced."""
        record = normalize_import_record({"title": "X", "pinned": "4", "completed": 1})
        assert record["pinned"] == 4
        assert record["completed"] is True
        assert normalize_import_record({"pinned": "lots"})["pinned"] == 0
        assert normalize_import_record({"pinned": True})["pinned"] == 1

    def test_created_at_kept_updated_at_reset(self):
        """createdAt is parsed; updatedAt is always now."""
        record = normalize_import_record(
            {
                "title": "X",
                "createdAt": "2024-05-01T08:00:00Z",
                "updatedAt": "2024-05-02T08:00:00Z",
            }
        )
        assert record["created_at"].isoformat() == "2024-05-01T08:00:00"
        assert record["updated_at"].year >= 2025

    def test_string_id(self):
        """Numeric string ids are accepted; others mean "new"."""
        assert normalize_import_record({"id": "12"})["id"] == 12
        assert normalize_import_record({"id": "abc"})["id"] is None
        assert normalize_import_record({"id": True})["id"] is None

    def test_integral_float_id(self):
        """Whole-number floats address the same record as the int."""
        assert normalize_import_record({"id": 3.0})["id"] == 3
        assert normalize_import_record({"id": 3.5})["id"] is None

    @pytest.mark.parametrize("raw_id", [2**63, -(2**63) - 1, 2**70, 1e30, "99999999999999999999"])
    def test_out_of_range_id_means_new(self, raw_id):
        """Ids SQLite cannot store are dropped so the element is inserted fresh."""
        assert normalize_import_record({"id": raw_id})["id"] is None

    def test_extra_fields(self):
        """Unknown keys are kept, known ones are not duplicated."""
        record = normalize_import_record({"title": "X", "source": "web", "createdAt": None})
        assert record["extra"] == {"source": "web"}


class TestImport:
    """Tests for upserting imported data."""

    def test_import_into_empty_store(self, store):
        """[{id:1, title:"X"}] gets every default."""
        report = import_json(store, '[{"id": 1, "title": "X"}]')
        assert report.created == 1

        skill = store.get_by_id(1)
        assert skill.title == "X"
        assert skill.pinned == 0
        assert skill.completed is False
        assert skill.category == ""
        assert skill.tags == ""
        assert skill.created_at is not None
        assert skill.updated_at is not None

    def test_upsert_replaces_by_id(self, store):
        """An existing id is overwritten, a new one inserted."""
        existing = store.create("Old", pinned_level=2)
        report = import_json(
            store,
            json.dumps([{"id": existing, "title": "Replaced"}, {"title": "Brand new"}]),
        )
        assert (report.created, report.replaced) == (1, 1)
        assert store.get_by_id(existing).title == "Replaced"
        assert store.get_by_id(existing).pinned == 0
        assert len(store.get_all()) == 2

    def test_malformed_elements_skipped(self, store):
        """Non-object elements are skipped without failing the batch."""
        report = import_records(store, [{"title": "ok"}, "junk", 5, None, ["x"]])
        assert report.created == 1
        assert report.skipped == 4
        assert [skill.title for skill in store.get_all()] == ["ok"]

    @pytest.mark.parametrize(
        "bad",
        [
            {"title": "bad", "createdAt": "0001-01-01T00:00:00+05:00"},
            {"title": "bad", "createdAt": "9999-12-31T23:59:59-05:00"},
            {"title": "bad", "createdAt": "not a date"},
            {"title": "bad", "id": 2**70},
            {"title": "bad", "id": -(2**64)},
            {"title": "bad", "pinned": 10**400},
        ],
    )
    def test_bad_field_values_do_not_abort_batch(self, store, bad):
        """An element with an unusable field is normalized and the rest still import."""
        report = import_json(store, json.dumps([{"title": "good"}, bad]))
        assert report.created == 2
        assert report.skipped == 0

        skills = {skill.title: skill for skill in store.get_all()}
        assert set(skills) == {"good", "bad"}
        assert 0 <= skills["bad"].pinned <= 5
        assert skills["bad"].created_at <= skills["bad"].updated_at

    def test_float_id_upserts(self, store):
        """A whole-number float id replaces the existing record."""
        existing = store.create("Old")
        report = import_json(store, json.dumps([{"id": float(existing), "title": "New"}]))
        assert (report.created, report.replaced) == (0, 1)
        assert [skill.title for skill in store.get_all()] == ["New"]

    def test_unknown_fields_preserved(self, store):
        """Extra fields come back out on export."""
        import_json(store, '[{"id": 4, "title": "X", "source": "browser", "meta": {"a": 1}}]')
        [record] = export_records(store)
        assert record["source"] == "browser"
        assert record["meta"] == {"a": 1}

    def test_export_import_round_trip(self, store):
        """Re-importing an export leaves the set unchanged apart from updatedAt."""
        store.create("A", "body", "dev", "go, cli", 3)
        done = store.create("B", pinned_level=5)
        store.update(done, {"completed": True})
        store.create("C", category="life")

        before = export_records(store)
        report = import_json(store, dumps_export(store))
        after = export_records(store)

        assert report.replaced == 3
        assert report.created == 0
        assert _without_updated_at(after) == _without_updated_at(before)

    def test_storage_failure_raises_import_error(self, store):
        """A failing transaction surfaces as SkillImportError."""
        store.create("A")
        with patch.object(
            SkillStore,
            "upsert_many",
            side_effect=OperationalError("INSERT", {}, Exception("disk I/O error")),
        ):
            with pytest.raises(SkillImportError):
                import_json(store, '[{"title": "B"}]')
        assert [skill.title for skill in store.get_all()] == ["A"]
