"""Build a new DateStory from the submission form."""
import random
from datetime import datetime, timezone
from typing import Callable, Optional

from datespots.config import COORD_DIGITS, JITTER_CENTER, JITTER_SPAN, NOTICE_FILL_ALL_FIELDS
from datespots.core.errors import ValidationFailed
from datespots.models.form import FormDraft
from datespots.models.story import DateStory


def validate_draft(draft: FormDraft) -> None:
    """Raise ValidationFailed unless all four form fields are filled in."""
    missing = draft.missing_fields()
    if missing:
        raise ValidationFailed(missing, NOTICE_FILL_ALL_FIELDS)


def jitter(center: float, rand: Callable[[], float] = random.random) -> str:
    """center +/- JITTER_SPAN/2, as a fixed 6-decimal string."""
    value = round(center + (rand() - 0.5) * JITTER_SPAN, COORD_DIGITS)
    return f"{value:.{COORD_DIGITS}f}"


def story_id(now: datetime) -> str:
    """Milliseconds since the epoch; two submits in the same millisecond collide."""
    return str(int(now.timestamp() * 1000))


def iso_timestamp(now: datetime) -> str:
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_story(
    draft: FormDraft,
    now: Optional[datetime] = None,
    rand: Callable[[], float] = random.random,
) -> DateStory:
    """Validate the draft and turn it into a record placed near the city center."""
    validate_draft(draft)
    now = now or datetime.now(timezone.utc)
    lat_center, lng_center = JITTER_CENTER
    return DateStory(
        id=story_id(now),
        rating=draft.rating,
        type_of_date=draft.type_of_date,
        location=draft.location,
        story=draft.story,
        latitude=jitter(lat_center, rand),
        longitude=jitter(lng_center, rand),
        timestamp=iso_timestamp(now),
        icon_url="",
    )
