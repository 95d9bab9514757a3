"""Submission form draft and filter selection."""
from dataclasses import dataclass

from datespots.config import ALL_RATINGS, ALL_TYPES

FORM_FIELDS = ("rating", "type_of_date", "location", "story")


@dataclass
class FormDraft:
    """Values typed into the submission form so far."""
    rating: str = ""
    type_of_date: str = ""
    location: str = ""
    story: str = ""

    def missing_fields(self) -> list[str]:
        return [name for name in FORM_FIELDS if not getattr(self, name)]


@dataclass
class Filters:
    """Active filter selection; sentinels mean "no filter"."""
    selected_type: str = ALL_TYPES
    selected_rating: str = ALL_RATINGS
