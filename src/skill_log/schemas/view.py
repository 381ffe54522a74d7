"""View state schemas: the selectors that parameterize a projection."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from skill_log.schemas.skill import MonthGroup, Skill


class Tab(str, Enum):
    """Active tab enumeration."""

    ALL = "all"
    PINNED = "pinned"
    MONTHLY = "monthly"


class SortOrder(str, Enum):
    """Sort direction on createdAt."""

    ASC = "asc"
    DESC = "desc"


class PinFilter(str, Enum):
    """Pin-level filter, only meaningful on the pinned tab."""

    ANY = "any"
    LEVEL_1 = "1"
    LEVEL_2 = "2"
    LEVEL_3 = "3"
    LEVEL_4 = "4"
    LEVEL_5 = "5"

    @property
    def level(self) -> int | None:
        """Exact pin level to match, or None for any."""
        return None if self is PinFilter.ANY else int(self.value)


def _pin_filter_from_int(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class ViewState(BaseModel):
    """
    Session-scoped selection values. Never persisted.

    Assignments are validated, so ``state.tab = "pinned"`` stores
    ``Tab.PINNED`` and an unknown tab raises.
    """

    model_config = ConfigDict(validate_assignment=True)

    tab: Tab = Tab.ALL
    category: str = ""
    tag: str = ""
    sort_order: SortOrder = SortOrder.ASC
    pin_filter: PinFilter = PinFilter.ANY

    @field_validator("pin_filter", mode="before")
    @classmethod
    def coerce_pin_filter(cls, value: Any) -> Any:
        """Accept a bare integer level as well as its string form."""
        return _pin_filter_from_int(value)


class ViewUpdate(BaseModel):
    """Partial change to the view state."""

    tab: Tab | None = None
    category: str | None = None
    tag: str | None = None
    sort_order: SortOrder | None = None
    pin_filter: PinFilter | None = None

    @field_validator("pin_filter", mode="before")
    @classmethod
    def coerce_pin_filter(cls, value: Any) -> Any:
        """Accept a bare integer level as well as its string form."""
        return _pin_filter_from_int(value)


class Projection(BaseModel):
    """
    What a renderer draws for the current view.

    ``skills`` holds the flat list on the all/pinned tabs; ``groups`` holds
    the month buckets on the monthly tab.
    """

    view: ViewState
    skills: list[Skill] = []
    groups: list[MonthGroup] | None = None
