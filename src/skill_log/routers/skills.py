"""Skills API router - CRUD, pin/completion actions, import/export and draft."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from skill_log.config import settings
from skill_log.dependencies import get_service
from skill_log.errors import (
    ImportFormatError,
    SkillImportError,
    SkillNotFoundError,
    SkillValidationError,
)
from skill_log.schemas.skill import (
    Draft,
    FilterOptions,
    ImportReport,
    MemoCreate,
    Skill,
    SkillCreate,
    SkillUpdate,
)
from skill_log.services.skill_log import SkillLogService

router = APIRouter()


@router.get("/skills", response_model=list[Skill])
def list_skills(service: SkillLogService = Depends(get_service)) -> list[Skill]:
    """
    List every captured skill, unfiltered.

    Returns:
        All skills ordered by id. Use ``/projection`` for a filtered view.
    """
    return sorted(service.store.get_all(), key=lambda skill: skill.id)


@router.post("/skills", response_model=Skill, status_code=status.HTTP_201_CREATED)
def create_skill(
    payload: SkillCreate,
    service: SkillLogService = Depends(get_service),
) -> Skill:
    """
    Create a skill.

    Raises:
        HTTPException 422: If the title is blank.
    """
    try:
        return service.add_skill(
            payload.title,
            payload.content,
            payload.category,
            payload.tags,
            payload.pinned,
        )
    except SkillValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.post("/skills/memo", response_model=Skill, status_code=status.HTTP_201_CREATED)
def capture_memo(
    payload: MemoCreate,
    service: SkillLogService = Depends(get_service),
) -> Skill:
    """
    Store quick-capture input and clear the saved draft.

    Raises:
        HTTPException 422: If the content is blank.
    """
    try:
        return service.capture_memo(payload.content, payload.pinned)
    except SkillValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.get("/skills/options", response_model=FilterOptions)
def filter_options(service: SkillLogService = Depends(get_service)) -> FilterOptions:
    """Distinct categories and tags for the filter pickers."""
    return service.filter_options()


@router.get("/skills/{skill_id}", response_model=Skill)
def get_skill(skill_id: int, service: SkillLogService = Depends(get_service)) -> Skill:
    """
    Get one skill, e.g. to pre-fill the edit form.

    Raises:
        HTTPException 404: If the skill is not found.
    """
    try:
        return service.get_skill(skill_id)
    except SkillNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Skill not found") from exc


@router.patch("/skills/{skill_id}", response_model=Skill)
def update_skill(
    skill_id: int,
    payload: SkillUpdate,
    service: SkillLogService = Depends(get_service),
) -> Skill:
    """
    Merge the provided fields over a skill.

    Raises:
        HTTPException 404: If the skill is not found.
        HTTPException 422: If the title is blank.
    """
    try:
        return service.edit_skill(skill_id, payload.model_dump(exclude_unset=True))
    except SkillNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Skill not found") from exc
    except SkillValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.delete("/skills/{skill_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_skill(skill_id: int, service: SkillLogService = Depends(get_service)) -> Response:
    """
    Delete a skill permanently.

    Raises:
        HTTPException 404: If the skill is not found.
    """
    try:
        service.delete_skill(skill_id)
    except SkillNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Skill not found") from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/skills/{skill_id}/pin", response_model=Skill)
def cycle_pin(skill_id: int, service: SkillLogService = Depends(get_service)) -> Skill:
    """
    Advance the pin level by one (5 wraps to 0).

    Raises:
        HTTPException 404: If the skill is not found.
    """
    try:
        return service.cycle_pin(skill_id)
    except SkillNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Skill not found") from exc


@router.post("/skills/{skill_id}/completion", response_model=Skill)
def toggle_completion(skill_id: int, service: SkillLogService = Depends(get_service)) -> Skill:
    """
    Flip the completion flag; completing also unpins.

    Raises:
        HTTPException 404: If the skill is not found.
    """
    try:
        return service.toggle_completion(skill_id)
    except SkillNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Skill not found") from exc


@router.get("/export")
def export_skills(service: SkillLogService = Depends(get_service)) -> Response:
    """Download every skill as a JSON array."""
    return Response(
        content=service.export_json(),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{settings.export_filename}"'},
    )


@router.post("/import", response_model=ImportReport)
async def import_skills(
    request: Request,
    service: SkillLogService = Depends(get_service),
) -> ImportReport:
    """
    Upsert a JSON array of skills sent as the raw request body.

    Raises:
        HTTPException 400: If the body is not a JSON array.
        HTTPException 500: If the import transaction fails.
    """
    body = await request.body()
    try:
        return service.import_json(body)
    except ImportFormatError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except SkillImportError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.get("/draft", response_model=Draft)
def get_draft(service: SkillLogService = Depends(get_service)) -> Draft:
    """Saved quick-capture draft; empty when none is saved."""
    return service.load_draft() or Draft()


@router.put("/draft", response_model=Draft)
def save_draft(draft: Draft, service: SkillLogService = Depends(get_service)) -> Draft:
    """Persist the quick-capture draft."""
    service.save_draft(draft)
    return draft


@router.delete("/draft", status_code=status.HTTP_204_NO_CONTENT)
def clear_draft(service: SkillLogService = Depends(get_service)) -> Response:
    """Drop the quick-capture draft."""
    service.clear_draft()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
