"""Skill log service: view state plus the mutators a renderer calls."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from skill_log.errors import SkillNotFoundError, SkillValidationError
from skill_log.schemas.skill import Draft, FilterOptions, ImportReport, Skill
from skill_log.schemas.view import PinFilter, Projection, SortOrder, Tab, ViewState, ViewUpdate
from skill_log.services import codec
from skill_log.services.draft import DraftStore
from skill_log.services.query import collect_categories, collect_tags, project
from skill_log.services.skill_store import SkillStore
from skill_log.utils.coerce import MAX_PIN_LEVEL

logger = logging.getLogger(__name__)

Listener = Callable[[Projection], None]


class SkillLogService:
    """
    Facade the UI layer talks to.

    Holds one store handle and one session-scoped ``ViewState``. Every
    selector change and every mutation re-projects the store and hands the
    result to subscribed listeners, which do the actual rendering.

    Handles:
    - View selectors (tab, category, tag, sort order, pin filter)
    - Create/edit/delete with title validation
    - Pin cycling and completion toggling
    - Quick capture with draft clearing
    - Export/import and filter picker options
    """

    def __init__(
        self,
        store: SkillStore,
        view: ViewState | None = None,
        drafts: DraftStore | None = None,
        memo_title: str = "ChatMemo",
    ) -> None:
        """
        Initialize the service.

        Args:
            store: Record store over a migrated database
            view: View state to drive; a default one is created if omitted
            drafts: Draft store cleared after a quick capture
            memo_title: Title given to quick-capture records
        """
        self.store = store
        self.view = view if view is not None else ViewState()
        self.drafts = drafts
        self.memo_title = memo_title
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------ render

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a renderer callback.

        Returns:
            A function that unsubscribes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def projection(self) -> Projection:
        """Project a fresh store snapshot through the current view state."""
        view = self.view.model_copy()
        result = project(self.store.get_all(), view)
        if view.tab is Tab.MONTHLY:
            return Projection(view=view, groups=result)
        return Projection(view=view, skills=result)

    def _changed(self) -> Projection:
        # The mutation has already committed; a failing listener must not undo that
        projection = self.projection()
        for listener in list(self._listeners):
            try:
                listener(projection)
            except Exception:
                logger.exception("Skill log listener %r failed", listener)
        return projection

    # --------------------------------------------------------------- selectors

    def set_tab(self, tab: Tab | str) -> Projection:
        """Switch the active tab."""
        self.view.tab = tab
        return self._changed()

    def set_category(self, category: str) -> Projection:
        """Select a category; empty selects all."""
        self.view.category = category
        return self._changed()

    def set_tag(self, tag: str) -> Projection:
        """Select a tag; empty selects all."""
        self.view.tag = tag
        return self._changed()

    def clear_filters(self) -> Projection:
        """Reset the category and tag selections."""
        self.view.category = ""
        self.view.tag = ""
        return self._changed()

    def set_sort_order(self, sort_order: SortOrder | str) -> Projection:
        """Change the createdAt sort direction."""
        self.view.sort_order = sort_order
        return self._changed()

    def set_pin_filter(self, pin_filter: PinFilter | str | int) -> Projection:
        """Select a pin level for the pinned tab, or "any"."""
        self.view.pin_filter = pin_filter
        return self._changed()

    def update_view(self, update: ViewUpdate) -> Projection:
        """Apply several selector changes at once, then re-project once."""
        for name, value in update.model_dump(exclude_none=True).items():
            setattr(self.view, name, value)
        return self._changed()

    # ---------------------------------------------------------------- records

    def get_skill(self, skill_id: int) -> Skill:
        """
        Fetch one skill, e.g. to pre-fill an edit form.

        Raises:
            SkillNotFoundError: If no skill has this id
        """
        skill = self.store.get_by_id(skill_id)
        if skill is None:
            raise SkillNotFoundError(skill_id)
        return skill

    def add_skill(
        self,
        title: str,
        content: str = "",
        category: str = "",
        tags: str = "",
        pinned: Any = 0,
    ) -> Skill:
        """
        Create a skill from form input.

        Raises:
            SkillValidationError: If the title is blank
        """
        title = (title or "").strip()
        if not title:
            raise SkillValidationError("Title is required")
        skill_id = self.store.create(
            title,
            (content or "").strip(),
            (category or "").strip(),
            (tags or "").strip(),
            pinned,
        )
        self._changed()
        return self.get_skill(skill_id)

    def capture_memo(self, content: str, pinned: Any = 0) -> Skill:
        """
        Store quick-capture input as a memo and clear the saved draft.

        Raises:
            SkillValidationError: If the content is blank
        """
        content = (content or "").strip()
        if not content:
            raise SkillValidationError("Memo content is required")
        skill_id = self.store.create(self.memo_title, content, "", "", pinned)
        if self.drafts is not None:
            self.drafts.clear()
        self._changed()
        return self.get_skill(skill_id)

    def edit_skill(self, skill_id: int, fields: Mapping[str, Any]) -> Skill:
        """
        Commit an edit form.

        Raises:
            SkillValidationError: If the title is present but blank
            SkillNotFoundError: If no skill has this id
        """
        changes = {
            key: value.strip() if isinstance(value, str) else value
            for key, value in fields.items()
        }
        if "title" in changes and changes["title"] is not None and not changes["title"]:
            raise SkillValidationError("Title is required")
        skill = self.store.update(skill_id, changes)
        self._changed()
        return skill

    def cycle_pin(self, skill_id: int) -> Skill:
        """
        Advance the pin level by one, wrapping 5 back to 0.

        Raises:
            SkillNotFoundError: If no skill has this id
        """
        skill = self.get_skill(skill_id)
        updated = self.store.update(skill_id, {"pinned": (skill.pinned + 1) % (MAX_PIN_LEVEL + 1)})
        self._changed()
        return updated

    def toggle_completion(self, skill_id: int) -> Skill:
        """
        Flip the completion flag. Completing also unpins.

        Raises:
            SkillNotFoundError: If no skill has this id
        """
        skill = self.get_skill(skill_id)
        fields: dict[str, Any] = {"completed": not skill.completed}
        if fields["completed"]:
            fields["pinned"] = 0
        updated = self.store.update(skill_id, fields)
        self._changed()
        return updated

    def delete_skill(self, skill_id: int) -> None:
        """
        Delete a skill. Confirmation is the caller's job.

        Raises:
            SkillNotFoundError: If no skill has this id
        """
        self.store.delete(skill_id)
        self._changed()

    def filter_options(self) -> FilterOptions:
        """Distinct categories and tags for the filter pickers."""
        skills = self.store.get_all()
        return FilterOptions(categories=collect_categories(skills), tags=collect_tags(skills))

    # ------------------------------------------------------------ import/export

    def export_json(self) -> str:
        """Full skill set as a JSON array string."""
        return codec.dumps_export(self.store)

    def import_json(self, text: str | bytes) -> ImportReport:
        """
        Upsert a JSON array of skills.

        Raises:
            ImportFormatError: If the payload is not a JSON array
            SkillImportError: If the storage transaction fails
        """
        report = codec.import_json(self.store, text)
        self._changed()
        return report

    # ------------------------------------------------------------------ draft

    def load_draft(self) -> Draft | None:
        """Saved quick-capture draft, if any."""
        return self.drafts.load() if self.drafts is not None else None

    def save_draft(self, draft: Draft) -> None:
        """Persist the quick-capture draft."""
        if self.drafts is not None:
            self.drafts.save(draft)

    def clear_draft(self) -> None:
        """Drop the quick-capture draft."""
        if self.drafts is not None:
            self.drafts.clear()
