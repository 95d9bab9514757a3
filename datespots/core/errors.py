"""Errors raised by the record store client and submission handler."""


class RecordStoreError(Exception):
    """Record store unreachable, returned an error status, or sent an unusable body."""


class ValidationFailed(Exception):
    """Submission form has empty required fields."""

    def __init__(self, missing: list[str], notice: str) -> None:
        super().__init__(notice)
        self.missing = missing
        self.notice = notice


class SubmissionInProgress(Exception):
    """Another submission has not finished yet."""


class SubmissionFailed(Exception):
    """Record store rejected or never answered the POST; the draft is kept."""

    def __init__(self, notice: str) -> None:
        super().__init__(notice)
        self.notice = notice
