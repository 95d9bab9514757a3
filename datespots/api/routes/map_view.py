"""Map view model for the visible stories."""
from fastapi import APIRouter, Depends

from datespots.api.state import VisitorSession, get_session
from datespots.core.map_view import build_map_view

router = APIRouter()


@router.get("")
def get_map(session: VisitorSession = Depends(get_session)):
    """Viewport, tiles, overlay, and one marker per visible story with coordinates."""
    return build_map_view(session.get_visible())
