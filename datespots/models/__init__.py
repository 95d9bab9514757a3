"""Data models for date stories, filters, and the submission form."""
from datespots.models.form import FORM_FIELDS, Filters, FormDraft
from datespots.models.story import DateStory, story_from_dict

__all__ = [
    "DateStory",
    "FORM_FIELDS",
    "Filters",
    "FormDraft",
    "story_from_dict",
]
