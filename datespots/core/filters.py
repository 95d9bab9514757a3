"""Visible-set derivation: category and rating filters, list-view truncation."""
import re
from typing import List, Optional, Sequence

from datespots.config import ALL_RATINGS, ALL_TYPES, LIST_LIMIT
from datespots.models.story import DateStory

_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")


def parse_int(value) -> Optional[int]:
    """Parse leading integer digits like the browser's parseInt; None if there are none.

    "4" -> 4, " 3 stars" -> 3, "4.9" -> 4, "five" -> None.
    """
    if value is None:
        return None
    match = _LEADING_INT.match(str(value))
    if not match:
        return None
    return int(match.group(1))


def matches(story: DateStory, selected_type: str = ALL_TYPES, selected_rating: str = ALL_RATINGS) -> bool:
    """True if story passes both filters. Unparsable ratings never equal a numeric filter."""
    if selected_type != ALL_TYPES and story.type_of_date != selected_type:
        return False
    if selected_rating != ALL_RATINGS:
        wanted = parse_int(selected_rating)
        got = parse_int(story.rating)
        if wanted is None or got is None or got != wanted:
            return False
    return True


def filter_stories(
    stories: Sequence[DateStory],
    selected_type: str = ALL_TYPES,
    selected_rating: str = ALL_RATINGS,
) -> List[DateStory]:
    """Return the stories passing all active filters, keeping store order."""
    return [s for s in stories if matches(s, selected_type, selected_rating)]


def list_view(visible: Sequence[DateStory], limit: int = LIST_LIMIT) -> List[DateStory]:
    return list(visible[:limit])
