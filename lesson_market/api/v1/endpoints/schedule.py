import logging

from fastapi import APIRouter

from lesson_market.core import logs
from lesson_market.schemas import DraftRequest, DraftResponse, ScheduleDraft
from lesson_market.schemas.schedule import (
    ApplyTemplateAction,
    EditSlotAction,
    RemoveSlotAction,
    ToggleDateAction,
    ToggleWeekdayAction,
    UpdateTemplateAction,
)
from lesson_market.services import slots

logger = logging.getLogger(__name__)

router = APIRouter()


def apply_action(draft: ScheduleDraft, action) -> slots.Transition:
    """Run one calendar action against a draft."""
    if isinstance(action, ToggleDateAction):
        return slots.toggle_date(draft, action.day)
    if isinstance(action, ToggleWeekdayAction):
        return slots.toggle_weekday(draft, action.weekday, action.month, action.year)
    if isinstance(action, ApplyTemplateAction):
        return slots.apply_template_to_all(draft)
    if isinstance(action, EditSlotAction):
        return slots.edit_slot(draft, action.day, **action.overrides.model_dump(exclude_none=True))
    if isinstance(action, RemoveSlotAction):
        return slots.remove_slot(draft, action.day)
    if isinstance(action, UpdateTemplateAction):
        return slots.update_template(draft, **action.changes.model_dump(exclude_none=True))
    raise ValueError(f"Unknown draft action {action!r}")


@router.post("/draft", response_model=DraftResponse)
async def update_draft(body: DraftRequest) -> DraftResponse:
    """
    Apply one calendar action to a schedule draft and return the new draft.

    The draft lives on the client; `applied` is false when the action changed
    nothing (past date, nothing selected to apply the template to).
    """
    draft, applied = apply_action(body.draft, body.action)
    logger.info(logs.DRAFT_ACTION, body.action.type, applied, len(draft.selected_dates))
    return DraftResponse(draft=draft, applied=applied)
