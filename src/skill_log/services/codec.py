"""JSON import/export of the full skill set."""

from __future__ import annotations

import json
import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from skill_log.errors import ImportFormatError, SkillImportError
from skill_log.schemas.skill import RECORD_FIELDS, ImportReport
from skill_log.services.skill_store import SkillStore
from skill_log.utils.coerce import coerce_pin_level, parse_timestamp, utcnow
from skill_log.utils.file_storage import save_file

logger = logging.getLogger(__name__)


def export_records(store: SkillStore) -> list[dict[str, Any]]:
    """
    Snapshot every skill as a JSON-ready dict.

    Field names are the camelCase wire names, timestamps are ISO 8601 and
    extra imported fields are included. No view filter applies.

    Args:
        store: Record store

    Returns:
        One dict per skill, ordered by id
    """
    skills = sorted(store.get_all(), key=lambda skill: skill.id)
    return [skill.model_dump(mode="json", by_alias=True) for skill in skills]


def dumps_export(store: SkillStore) -> str:
    """Serialize the full skill set to a pretty-printed JSON array."""
    return json.dumps(export_records(store), ensure_ascii=False, indent=2)


def write_export(store: SkillStore, filepath: str) -> str:
    """
    Write the export to a file.

    Args:
        store: Record store
        filepath: Destination (absolute or relative to data_root)

    Returns:
        The absolute path written
    """
    return save_file(dumps_export(store), filepath)


def parse_import(text: str | bytes) -> list[Any]:
    """
    Parse an import payload.

    Raises:
        ImportFormatError: If the text is not JSON or not a JSON array
    """
    try:
        data = json.loads(text)
    except (ValueError, UnicodeDecodeError) as exc:
        raise ImportFormatError(f"Import data is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise ImportFormatError("Import data is not an array")
    return data


# SQLite INTEGER range; anything outside cannot be bound as a rowid
MIN_RECORD_ID = -(2**63)
MAX_RECORD_ID = 2**63 - 1


def _coerce_id(value: Any) -> int | None:
    """Imported id as an int, or None to insert the element as a new record."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        record_id = value
    elif isinstance(value, float) and value.is_integer():
        record_id = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        record_id = int(value)
    else:
        return None
    if not MIN_RECORD_ID <= record_id <= MAX_RECORD_ID:
        logger.warning("Ignoring out-of-range import id %d", record_id)
        return None
    return record_id


def normalize_import_record(raw: dict[str, Any]) -> dict[str, Any]:
    """
    Normalize one imported element into store column values.

    Missing category/tags/title/content become "", pinned is coerced into
    0..5 (non-numeric → 0), completed becomes a bool, a missing or
    unparseable createdAt becomes now and updatedAt is always now. Unknown
    keys are kept under ``extra``.

    Args:
        raw: One element of the imported array

    Returns:
        Mapping accepted by ``SkillStore.upsert_many``
    """
    now = utcnow()
    created_at = parse_timestamp(raw.get("createdAt")) or now
    return {
        "id": _coerce_id(raw.get("id")),
        "title": str(raw.get("title") or ""),
        "content": str(raw.get("content") or ""),
        "category": str(raw.get("category") or ""),
        "tags": str(raw.get("tags") or ""),
        "pinned": coerce_pin_level(raw.get("pinned")),
        "completed": bool(raw.get("completed")),
        "created_at": created_at,
        "updated_at": max(now, created_at),
        "extra": {key: value for key, value in raw.items() if key not in RECORD_FIELDS},
    }


def import_records(store: SkillStore, data: list[Any]) -> ImportReport:
    """
    Upsert a parsed array into the store.

    Elements that are not JSON objects are skipped and counted. All other
    elements are written in one transaction.

    Args:
        store: Record store
        data: Parsed import array

    Returns:
        Counts of created, replaced and skipped elements

    Raises:
        SkillImportError: If the storage transaction fails
    """
    records: list[dict[str, Any]] = []
    skipped = 0
    for index, element in enumerate(data):
        if not isinstance(element, dict):
            logger.warning("Skipping import element %d: not an object", index)
            skipped += 1
            continue
        records.append(normalize_import_record(element))

    try:
        created, replaced = store.upsert_many(records)
    except SQLAlchemyError as exc:
        raise SkillImportError(f"Import failed: {exc}") from exc

    report = ImportReport(created=created, replaced=replaced, skipped=skipped)
    logger.info(
        "Imported %d skills (%d new, %d replaced, %d skipped)",
        report.written,
        report.created,
        report.replaced,
        report.skipped,
    )
    return report


def import_json(store: SkillStore, text: str | bytes) -> ImportReport:
    """Parse ``text`` and upsert it. See ``parse_import`` and ``import_records``."""
    return import_records(store, parse_import(text))
