"""Record store: durable keyed storage of skills."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy.orm import Session, sessionmaker

from skill_log.errors import SkillNotFoundError
from skill_log.models.skill import Skill
from skill_log.schemas.skill import RECORD_FIELDS
from skill_log.schemas.skill import Skill as SkillSchema
from skill_log.utils.coerce import coerce_pin_level, from_storage_datetime, utcnow

logger = logging.getLogger(__name__)

# Top-level fields a partial update may change
UPDATABLE_FIELDS: tuple[str, ...] = ("title", "content", "category", "tags", "pinned", "completed")


def to_schema(row: Skill) -> SkillSchema:
    """
    Convert a stored row into a normalized Skill schema.

    Rows written before ``pinned``/``completed`` existed hold NULL there;
    they read as ``pinned=0`` and ``completed=False``. The row itself is not
    rewritten.

    Args:
        row: Skill ORM instance

    Returns:
        Skill schema with every recognized field present
    """
    extra = {key: value for key, value in (row.extra or {}).items() if key not in RECORD_FIELDS}
    return SkillSchema(
        id=row.id,
        title=row.title or "",
        content=row.content or "",
        category=row.category or "",
        tags=row.tags or "",
        pinned=coerce_pin_level(row.pinned),
        completed=bool(row.completed),
        created_at=from_storage_datetime(row.created_at),
        updated_at=from_storage_datetime(row.updated_at),
        **extra,
    )


class SkillStore:
    """
    Keyed skill storage over a SQLAlchemy session factory.

    Every public method runs in its own transaction: it commits when the
    method returns and rolls back if it raises. Storage errors are not
    retried; they propagate to the caller.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        """
        Initialize the store.

        Args:
            session_factory: Factory for sessions bound to a migrated engine
        """
        self._session_factory = session_factory

    def create(
        self,
        title: str,
        content: str = "",
        category: str = "",
        tags: str = "",
        pinned_level: Any = 0,
    ) -> int:
        """
        Persist a new skill.

        The title must be non-empty; callers validate it before calling, the
        store does not check again.

        Args:
            title: Record title
            content: Free text
            category: Category, empty for uncategorized
            tags: Comma-separated tags
            pinned_level: Raw pin level, coerced into 0..5

        Returns:
            The generated id
        """
        now = utcnow()
        with self._session_factory.begin() as db:
            row = Skill(
                title=title,
                content=content or "",
                category=category or "",
                tags=tags or "",
                pinned=coerce_pin_level(pinned_level),
                completed=False,
                created_at=now,
                updated_at=now,
            )
            db.add(row)
            db.flush()  # Obtain the id before the session closes
            skill_id = row.id
        logger.debug("Created skill %d", skill_id)
        return skill_id

    def get_all(self) -> list[SkillSchema]:
        """Return every skill, normalized. Order is unspecified."""
        with self._session_factory.begin() as db:
            return [to_schema(row) for row in db.query(Skill).all()]

    def get_by_id(self, skill_id: int) -> SkillSchema | None:
        """Return one normalized skill, or None if it does not exist."""
        with self._session_factory.begin() as db:
            row = db.get(Skill, skill_id)
            return to_schema(row) if row is not None else None

    def update(self, skill_id: int, fields: Mapping[str, Any]) -> SkillSchema:
        """
        Merge ``fields`` over an existing skill.

        Only the fields in ``UPDATABLE_FIELDS`` are recognized; ``None``
        values count as not provided. Setting ``completed`` to true forces
        ``pinned`` to 0 regardless of any pinned value in ``fields``.
        ``updatedAt`` is always refreshed.

        Args:
            skill_id: Id of the skill to update
            fields: Partial field values

        Returns:
            The updated skill

        Raises:
            SkillNotFoundError: If no skill has this id
        """
        changes = {
            key: value
            for key, value in fields.items()
            if key in UPDATABLE_FIELDS and value is not None
        }
        ignored = sorted(set(fields) - set(UPDATABLE_FIELDS))
        if ignored:
            logger.debug("Ignoring unrecognized update fields for skill %d: %s", skill_id, ignored)

        if "pinned" in changes:
            changes["pinned"] = coerce_pin_level(changes["pinned"])
        if "completed" in changes:
            changes["completed"] = bool(changes["completed"])
            if changes["completed"]:
                changes["pinned"] = 0

        with self._session_factory.begin() as db:
            row = db.get(Skill, skill_id)
            if row is None:
                raise SkillNotFoundError(skill_id)

            # Normalize legacy NULLs on the first write after an upgrade
            row.pinned = coerce_pin_level(row.pinned)
            row.completed = bool(row.completed)
            for key, value in changes.items():
                setattr(row, key, value)
            row.updated_at = max(utcnow(), row.created_at)
            db.flush()
            updated = to_schema(row)

        logger.debug("Updated skill %d: %s", skill_id, sorted(changes))
        return updated

    def delete(self, skill_id: int) -> None:
        """
        Hard-delete a skill. Its id is never handed out again.

        Raises:
            SkillNotFoundError: If no skill has this id
        """
        with self._session_factory.begin() as db:
            row = db.get(Skill, skill_id)
            if row is None:
                raise SkillNotFoundError(skill_id)
            db.delete(row)
        logger.debug("Deleted skill %d", skill_id)

    def upsert_many(self, records: Iterable[Mapping[str, Any]]) -> tuple[int, int]:
        """
        Write or replace records by id in a single transaction.

        Each record is a mapping of column names (``id``, ``title``,
        ``content``, ``category``, ``tags``, ``pinned``, ``completed``,
        ``created_at``, ``updated_at``, ``extra``), already normalized by the
        caller. A record whose id exists replaces the stored row entirely; a
        record without an id, or with an unknown id, is inserted.

        Args:
            records: Normalized record mappings

        Returns:
            Tuple of (created, replaced) counts
        """
        created = 0
        replaced = 0
        with self._session_factory.begin() as db:
            for record in records:
                skill_id = record.get("id")
                row = db.get(Skill, skill_id) if skill_id is not None else None
                if row is None:
                    row = Skill(id=skill_id)
                    db.add(row)
                    created += 1
                else:
                    replaced += 1
                row.title = record["title"]
                row.content = record["content"]
                row.category = record["category"]
                row.tags = record["tags"]
                row.pinned = coerce_pin_level(record["pinned"])
                row.completed = bool(record["completed"])
                row.created_at = record["created_at"]
                row.updated_at = record["updated_at"]
                row.extra = dict(record.get("extra") or {}) or None
                # Flush per record so a repeated id in the batch hits the row above
                db.flush()
        logger.debug("Upserted %d new and %d replaced skills", created, replaced)
        return created, replaced
