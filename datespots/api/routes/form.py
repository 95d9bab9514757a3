"""Submission form draft and open/closed toggle."""
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from datespots.api.state import VisitorSession, get_session

router = APIRouter()


class UpdateDraftBody(BaseModel):
    rating: Optional[str] = None
    type_of_date: Optional[str] = None
    location: Optional[str] = None
    story: Optional[str] = None


def _form_to_dict(session: VisitorSession) -> dict:
    draft = session.get_draft()
    return {
        "open": session.form_open,
        "submitting": session.submitting,
        "draft": {
            "rating": draft.rating,
            "type_of_date": draft.type_of_date,
            "location": draft.location,
            "story": draft.story,
        },
    }


@router.get("")
def get_form(session: VisitorSession = Depends(get_session)):
    return _form_to_dict(session)


@router.patch("")
def update_form(body: UpdateDraftBody, session: VisitorSession = Depends(get_session)):
    """Set the given draft fields; fields left out keep their value."""
    session.update_draft(**body.model_dump(exclude_none=True))
    return _form_to_dict(session)


@router.post("/open")
def open_form(session: VisitorSession = Depends(get_session)):
    session.open_form()
    return _form_to_dict(session)


@router.post("/close")
def close_form(session: VisitorSession = Depends(get_session)):
    """Hide the form. The draft is kept."""
    session.close_form()
    return _form_to_dict(session)
