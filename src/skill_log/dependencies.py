"""FastAPI dependency providers."""

from fastapi import Depends

from skill_log.config import settings
from skill_log.database import SessionLocal
from skill_log.schemas.view import ViewState
from skill_log.services.draft import DraftStore
from skill_log.services.skill_log import SkillLogService
from skill_log.services.skill_store import SkillStore

# One selection set per server process; the app serves a single local user
_view_state = ViewState()


def get_store() -> SkillStore:
    """
    Dependency function to get the record store.

    Returns:
        SkillStore bound to the process-wide session factory
    """
    return SkillStore(SessionLocal)


def get_view_state() -> ViewState:
    """Dependency function returning the session view state."""
    return _view_state


def get_draft_store() -> DraftStore:
    """Dependency function returning the quick-capture draft store."""
    return DraftStore(settings.draft_path)


def get_service(
    store: SkillStore = Depends(get_store),
    view: ViewState = Depends(get_view_state),
    drafts: DraftStore = Depends(get_draft_store),
) -> SkillLogService:
    """Dependency function assembling the skill log service."""
    return SkillLogService(store, view=view, drafts=drafts, memo_title=settings.memo_title)
