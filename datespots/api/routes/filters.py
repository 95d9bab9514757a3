"""Category and rating filter selection."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from datespots.api.state import VisitorSession, get_session
from datespots.config import ALL_RATINGS, ALL_TYPES, DATE_TYPES, RATING_OPTIONS
from datespots.models.form import Filters

router = APIRouter()


class SetFiltersBody(BaseModel):
    selected_type: Optional[str] = None
    selected_rating: Optional[str] = None


def _filters_to_dict(f: Filters) -> dict:
    return {
        "selected_type": f.selected_type,
        "selected_rating": f.selected_rating,
        "type_options": [ALL_TYPES, *DATE_TYPES],
        "rating_options": [ALL_RATINGS, *RATING_OPTIONS],
    }


@router.get("/")
def get_filters(session: VisitorSession = Depends(get_session)):
    """Current selection and the values each filter accepts."""
    return _filters_to_dict(session.get_filters())


@router.put("/")
def set_filters(body: SetFiltersBody, session: VisitorSession = Depends(get_session)):
    """Change the type and/or rating filter; the visible set is recomputed."""
    try:
        f = session.set_filters(body.selected_type, body.selected_rating)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    out = _filters_to_dict(f)
    out["visible"] = len(session.get_visible())
    return out
