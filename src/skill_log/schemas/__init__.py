"""Pydantic schemas package."""

from skill_log.schemas.skill import (
    Draft,
    FilterOptions,
    ImportReport,
    MemoCreate,
    MonthGroup,
    Skill,
    SkillBase,
    SkillCreate,
    SkillUpdate,
)
from skill_log.schemas.view import PinFilter, Projection, SortOrder, Tab, ViewState, ViewUpdate

__all__ = [
    "Draft",
    "FilterOptions",
    "ImportReport",
    "MemoCreate",
    "MonthGroup",
    "PinFilter",
    "Projection",
    "Skill",
    "SkillBase",
    "SkillCreate",
    "SkillUpdate",
    "SortOrder",
    "Tab",
    "ViewState",
    "ViewUpdate",
]
