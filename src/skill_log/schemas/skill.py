"""Skill Pydantic schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

from skill_log.utils.coerce import coerce_pin_level

# Any raw input is accepted and coerced into 0..5
PinLevel = Annotated[int, BeforeValidator(coerce_pin_level)]


class SkillBase(BaseModel):
    """Base skill schema with common fields."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    content: str = ""
    category: str = ""
    tags: str = ""


class SkillCreate(SkillBase):
    """Schema for creating a new skill."""

    pinned: PinLevel = 0


class SkillUpdate(BaseModel):
    """Partial update; only the fields that are set get merged."""

    title: str | None = None
    content: str | None = None
    category: str | None = None
    tags: str | None = None
    pinned: PinLevel | None = None
    completed: bool | None = None


class MemoCreate(BaseModel):
    """Schema for the quick-capture input box."""

    content: str
    pinned: PinLevel = 0


class Skill(SkillBase):
    """
    Complete skill schema with database fields.

    Unknown fields carried in from an import are kept as pydantic extras so
    they survive a read/export round trip.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: int
    pinned: PinLevel = 0
    completed: bool = False
    created_at: datetime
    updated_at: datetime


class MonthGroup(BaseModel):
    """Records created in one local calendar month."""

    key: str  # "YYYY-MM"
    year: int
    month: int
    skills: list[Skill]


class FilterOptions(BaseModel):
    """Distinct values available to the category and tag pickers."""

    categories: list[str]
    tags: list[str]


class Draft(BaseModel):
    """Latest unsent quick-capture input."""

    content: str = ""
    pinned: PinLevel = 0


class ImportReport(BaseModel):
    """Outcome of an import batch."""

    created: int = 0
    replaced: int = 0
    skipped: int = 0

    @property
    def written(self) -> int:
        """Number of records inserted or replaced."""
        return self.created + self.replaced


# Wire names of the recognized record fields; anything else is an extra
RECORD_FIELDS: frozenset[str] = frozenset(
    name for field_name in Skill.model_fields for name in (field_name, to_camel(field_name))
)
