"""Date stories: list, visible subset, submit, reload."""
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from pydantic import BaseModel

from datespots.api.state import AppState, VisitorSession, check_filters, get_session, get_state
from datespots.config import NOTICE_SHARED
from datespots.core.errors import (
    RecordStoreError,
    SubmissionFailed,
    SubmissionInProgress,
    ValidationFailed,
)
from datespots.core.filters import list_view

router = APIRouter()


class SubmitStoryBody(BaseModel):
    """Form fields; any left out are taken from the saved form draft."""
    rating: Optional[str] = None
    type_of_date: Optional[str] = None
    location: Optional[str] = None
    story: Optional[str] = None


@router.get("/")
def list_stories(state: AppState = Depends(get_state)):
    """All stories, in record store order."""
    return [s.to_dict() for s in state.get_stories()]


@router.get("/visible")
def visible_stories(
    selected_type: Optional[str] = Query(None, alias="type"),
    selected_rating: Optional[str] = Query(None, alias="rating"),
    session: VisitorSession = Depends(get_session),
):
    """Stories passing the visitor's filters (or ?type=/?rating= for this call), plus the list view."""
    try:
        check_filters(selected_type, selected_rating)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    visible = session.get_visible(selected_type, selected_rating)
    return {
        "count": len(visible),
        "stories": [s.to_dict() for s in visible],
        "list": [s.to_dict() for s in list_view(visible)],
    }


@router.post("/", status_code=201)
def submit_story(
    body: SubmitStoryBody | None = Body(None),
    session: VisitorSession = Depends(get_session),
):
    """Validate the form, append the story to the record store, and add it locally."""
    values = body.model_dump(exclude_none=True) if body else {}
    try:
        story = session.submit(**values)
    except ValidationFailed as e:
        raise HTTPException(status_code=400, detail={"notice": e.notice, "missing": e.missing})
    except SubmissionInProgress as e:
        raise HTTPException(status_code=409, detail={"notice": str(e)})
    except SubmissionFailed as e:
        raise HTTPException(status_code=502, detail={"notice": e.notice})
    return {"ok": True, "notice": NOTICE_SHARED, "story": story.to_dict()}


@router.post("/reload")
def reload_stories(
    state: AppState = Depends(get_state),
    session: VisitorSession = Depends(get_session),
):
    """Fetch the collection again and replace the local story list."""
    try:
        count = state.reload()
    except RecordStoreError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"ok": True, "count": count, "visible": len(session.get_visible())}
