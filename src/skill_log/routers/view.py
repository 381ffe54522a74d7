"""View API router - session selectors and the derived projection."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from skill_log.dependencies import get_service
from skill_log.schemas.view import Projection, ViewState, ViewUpdate
from skill_log.services.skill_log import SkillLogService

router = APIRouter()


@router.get("/view", response_model=ViewState)
def get_view(service: SkillLogService = Depends(get_service)) -> ViewState:
    """Current tab, filters and sort order."""
    return service.view


@router.patch("/view", response_model=Projection)
def update_view(
    update: ViewUpdate,
    service: SkillLogService = Depends(get_service),
) -> Projection:
    """
    Change one or more selectors.

    Returns:
        The projection under the new selection.
    """
    return service.update_view(update)


@router.get("/projection", response_model=Projection)
def get_projection(service: SkillLogService = Depends(get_service)) -> Projection:
    """Skills (or month groups) for the current view."""
    return service.projection()
