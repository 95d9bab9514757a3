"""Map view model: viewport, tile layer, overlay, and one marker per plottable story."""
import logging
import math
from dataclasses import asdict, dataclass
from typing import List, Optional, Sequence

from datespots.config import (
    CITY_BOUNDS,
    DEFAULT_ICON_URL,
    ICON_ANCHOR,
    ICON_SIZE,
    OVERLAY_COLOR,
    OVERLAY_OPACITY,
    POPUP_ANCHOR,
    STAR_COUNT,
    TILE_ATTRIBUTION,
    TILE_URL,
)
from datespots.core.filters import parse_int
from datespots.models.story import DateStory

logger = logging.getLogger(__name__)


@dataclass
class Marker:
    """One map pin with its popup content."""
    story_id: str
    lat: float
    lng: float
    icon_url: str
    location: str
    story: str
    type_of_date: str
    stars: List[bool]


def rating_stars(rating) -> List[bool]:
    """Five flags, star i filled iff i < rating. Bad ratings give no filled stars."""
    value = parse_int(rating)
    if value is None:
        value = 0
    return [i < value for i in range(STAR_COUNT)]


def parse_coord(value) -> Optional[float]:
    """Float for a finite coordinate, else None."""
    try:
        f = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    if not math.isfinite(f):
        return None
    return f


def icon_for(story: DateStory) -> str:
    return story.icon_url or DEFAULT_ICON_URL


def build_markers(visible: Sequence[DateStory]) -> List[Marker]:
    """One marker per visible story; stories without usable coordinates are skipped."""
    out = []
    for s in visible:
        lat = parse_coord(s.latitude)
        lng = parse_coord(s.longitude)
        if lat is None or lng is None:
            logger.debug("Skipping marker for story %s: bad coordinates (%r, %r)", s.id, s.latitude, s.longitude)
            continue
        out.append(
            Marker(
                story_id=s.id,
                lat=lat,
                lng=lng,
                icon_url=icon_for(s),
                location=s.location,
                story=s.story,
                type_of_date=s.type_of_date,
                stars=rating_stars(s.rating),
            )
        )
    return out


def build_map_view(visible: Sequence[DateStory]) -> dict:
    """Everything the page needs to draw the map, as plain JSON-ready data."""
    return {
        "bounds": [list(CITY_BOUNDS[0]), list(CITY_BOUNDS[1])],
        "scroll_wheel_zoom": True,
        "tile_layer": {"url": TILE_URL, "attribution": TILE_ATTRIBUTION},
        "overlay": {
            "color": OVERLAY_COLOR,
            "opacity": OVERLAY_OPACITY,
            "pointer_events": "none",
        },
        "icon": {
            "default_url": DEFAULT_ICON_URL,
            "size": list(ICON_SIZE),
            "anchor": list(ICON_ANCHOR),
            "popup_anchor": list(POPUP_ANCHOR),
        },
        "markers": [asdict(m) for m in build_markers(visible)],
    }
