"""Exception hierarchy for the skill log core.

Every failure raised by the store, the codec or the migrator derives from
:class:`SkillLogError`, so callers can catch one base class while still
telling the categories apart. None of these are retried automatically.
"""

from __future__ import annotations


class SkillLogError(Exception):
    """Base exception for skill log failures."""


class StoreInitializationError(SkillLogError):
    """Raised when the backing store cannot be opened or created. Fatal."""


class SkillValidationError(SkillLogError):
    """Raised when a required field (e.g. the title) is missing."""


class SkillNotFoundError(SkillLogError):
    """Raised when an operation targets a record id that does not exist."""

    def __init__(self, skill_id: int) -> None:
        super().__init__(f"Skill {skill_id} not found")
        self.skill_id = skill_id


class ImportFormatError(SkillLogError):
    """Raised when an import payload is not a JSON array. The store is untouched."""


class SkillImportError(SkillLogError):
    """Raised when the import transaction fails; the batch is rolled back."""
