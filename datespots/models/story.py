"""Date story records as stored in the spreadsheet API."""
from dataclasses import asdict, dataclass, fields
from typing import Any, Optional


@dataclass
class DateStory:
    """One date-spot report. All values are strings, as the record store keeps them."""
    id: str
    rating: str
    type_of_date: str
    location: str
    story: str
    latitude: str
    longitude: str
    timestamp: str
    icon_url: str = ""

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


_FIELD_NAMES = tuple(f.name for f in fields(DateStory))


def story_from_dict(item: Any) -> Optional[DateStory]:
    """Build a DateStory from one store row; None if the row is not an object.

    Missing keys become empty strings and scalars are stringified, so a sparse
    spreadsheet row still yields a record.
    """
    if not isinstance(item, dict):
        return None
    values = {}
    for name in _FIELD_NAMES:
        raw = item.get(name)
        values[name] = "" if raw is None else str(raw)
    return DateStory(**values)
