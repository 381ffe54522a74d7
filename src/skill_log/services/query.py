"""Query engine: pure filter/sort/group functions over a skill snapshot.

``project`` applies the steps in a fixed order: category filter, tag
filter, tab filter, sort, then month grouping on the monthly tab. None of
these functions touch the store or mutate their input.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from skill_log.schemas.skill import MonthGroup, Skill
from skill_log.schemas.view import PinFilter, SortOrder, Tab, ViewState
from skill_log.utils.coerce import MAX_PIN_LEVEL


def split_tags(tags: str) -> list[str]:
    """
    Split a comma-separated tag string into trimmed tokens.

    Examples:
        >>> split_tags("go, cli ,web")
        ['go', 'cli', 'web']
        >>> split_tags("")
        ['']
    """
    return [token.strip() for token in (tags or "").split(",")]


def filter_by_category(skills: Iterable[Skill], category: str) -> list[Skill]:
    """Keep skills whose category equals ``category``; empty means all."""
    if not category:
        return list(skills)
    return [skill for skill in skills if skill.category == category]


def filter_by_tag(skills: Iterable[Skill], tag: str) -> list[Skill]:
    """Keep skills carrying ``tag`` as a whole token; empty means all."""
    if not tag:
        return list(skills)
    return [skill for skill in skills if tag in split_tags(skill.tags)]


def filter_for_tab(skills: Iterable[Skill], tab: Tab, pin_filter: PinFilter) -> list[Skill]:
    """
    Apply the tab-specific filter.

    Only the pinned tab filters: it keeps ``pinned > 0`` and, when a level
    is selected, exactly that level. The pin filter is inert elsewhere.
    """
    if tab is not Tab.PINNED:
        return list(skills)
    pinned = [skill for skill in skills if skill.pinned > 0]
    level = pin_filter.level
    if level is None:
        return pinned
    return [skill for skill in pinned if skill.pinned == level]


def sort_by_created(skills: Iterable[Skill], sort_order: SortOrder) -> list[Skill]:
    """Sort by createdAt in the given direction. Ties keep input order."""
    return sorted(
        skills,
        key=lambda skill: skill.created_at,
        reverse=sort_order is SortOrder.DESC,
    )


def month_key(skill: Skill) -> str:
    """Local calendar month of createdAt, formatted ``YYYY-MM``."""
    local = skill.created_at.astimezone()
    return f"{local.year:04d}-{local.month:02d}"


def group_by_month(skills: Sequence[Skill], sort_order: SortOrder) -> list[MonthGroup]:
    """
    Bucket already-sorted skills by local month of createdAt.

    Buckets are ordered by key in ``sort_order``; skills keep their order
    inside each bucket.
    """
    buckets: dict[str, list[Skill]] = {}
    for skill in skills:
        buckets.setdefault(month_key(skill), []).append(skill)

    keys = sorted(buckets, reverse=sort_order is SortOrder.DESC)
    groups: list[MonthGroup] = []
    for key in keys:
        year, month = key.split("-")
        groups.append(MonthGroup(key=key, year=int(year), month=int(month), skills=buckets[key]))
    return groups


def project(skills: Iterable[Skill], view: ViewState) -> list[Skill] | list[MonthGroup]:
    """
    Derive what a renderer shows for ``view``.

    Args:
        skills: Snapshot from the store, in any order
        view: Current view state

    Returns:
        Ordered skills for the all/pinned tabs, month groups for monthly
    """
    selected = filter_by_category(skills, view.category)
    selected = filter_by_tag(selected, view.tag)
    selected = filter_for_tab(selected, view.tab, view.pin_filter)
    selected = sort_by_created(selected, view.sort_order)
    if view.tab is Tab.MONTHLY:
        return group_by_month(selected, view.sort_order)
    return selected


def collect_categories(skills: Iterable[Skill]) -> list[str]:
    """Sorted distinct non-empty categories."""
    return sorted({skill.category for skill in skills if skill.category})


def collect_tags(skills: Iterable[Skill]) -> list[str]:
    """Sorted distinct non-empty tag tokens."""
    return sorted({tag for skill in skills for tag in split_tags(skill.tags) if tag})


def pin_stars(level: int) -> str:
    """
    Render a pin level as stars for text output.

    Examples:
        >>> pin_stars(0)
        '☆☆☆☆☆'
        >>> pin_stars(3)
        '★★★☆☆'
    """
    return "★" * level + "☆" * (MAX_PIN_LEVEL - level)
