"""Shared application state (injected into routes).

AppState owns the story list every visitor sees. Each visitor (identified by
a cookie) gets a VisitorSession holding their own filter selection,
submission form, and in-flight flag; the visible set is derived per session
from the shared list.
"""
import logging
import threading
import uuid
from collections import OrderedDict
from dataclasses import replace
from typing import Callable, List, Optional

from fastapi import Depends, Request, Response

from datespots.config import (
    ALL_RATINGS,
    ALL_TYPES,
    DATE_TYPES,
    NOTICE_FAILED,
    RATING_OPTIONS,
    SESSION_COOKIE,
    SESSION_LIMIT,
)
from datespots.core.errors import RecordStoreError, SubmissionFailed, SubmissionInProgress
from datespots.core.filters import filter_stories, list_view
from datespots.core.record_store import append_story, load_stories
from datespots.core.submission import build_story
from datespots.models.form import FORM_FIELDS, Filters, FormDraft
from datespots.models.story import DateStory

logger = logging.getLogger(__name__)


def check_filters(selected_type: Optional[str], selected_rating: Optional[str]) -> None:
    """Raise ValueError for filter values that have no button."""
    if selected_type is not None and selected_type != ALL_TYPES and selected_type not in DATE_TYPES:
        raise ValueError(f"Unknown date type: {selected_type}")
    if selected_rating is not None and selected_rating != ALL_RATINGS and selected_rating not in RATING_OPTIONS:
        raise ValueError(f"Unknown rating: {selected_rating}")


class VisitorSession:
    """One visitor's filters, form draft, and submission state."""

    def __init__(self, session_id: str, app_state: "AppState") -> None:
        self.id = session_id
        self._app_state = app_state
        self._lock = threading.Lock()
        self._filters = Filters()
        self._draft = FormDraft()
        self._form_open = False
        self._submitting = False

    # Filters and visible set

    def get_filters(self) -> Filters:
        with self._lock:
            return replace(self._filters)

    def set_filters(
        self,
        selected_type: Optional[str] = None,
        selected_rating: Optional[str] = None,
    ) -> Filters:
        """Change one or both filters. Raises ValueError for values without a button."""
        check_filters(selected_type, selected_rating)
        with self._lock:
            if selected_type is not None:
                self._filters.selected_type = selected_type
            if selected_rating is not None:
                self._filters.selected_rating = selected_rating
            return replace(self._filters)

    def get_visible(
        self,
        selected_type: Optional[str] = None,
        selected_rating: Optional[str] = None,
    ) -> List[DateStory]:
        """Shared stories passing this visitor's filters; arguments override them for one call."""
        f = self.get_filters()
        return filter_stories(
            self._app_state.get_stories(),
            selected_type if selected_type is not None else f.selected_type,
            selected_rating if selected_rating is not None else f.selected_rating,
        )

    def get_list_view(self) -> List[DateStory]:
        return list_view(self.get_visible())

    def start_page(self, selected_type: Optional[str] = None, selected_rating: Optional[str] = None) -> Filters:
        """A fresh page load: filters from the query (else no filter), empty closed form."""
        selected_type = selected_type if selected_type is not None else ALL_TYPES
        selected_rating = selected_rating if selected_rating is not None else ALL_RATINGS
        check_filters(selected_type, selected_rating)
        with self._lock:
            self._filters = Filters(selected_type, selected_rating)
            self._draft = FormDraft()
            self._form_open = False
            return replace(self._filters)

    # Submission form

    def get_draft(self) -> FormDraft:
        with self._lock:
            return replace(self._draft)

    @property
    def form_open(self) -> bool:
        return self._form_open

    @property
    def submitting(self) -> bool:
        return self._submitting

    def _apply_draft_values(self, values: dict) -> None:
        # Caller holds self._lock
        for name in FORM_FIELDS:
            value = values.get(name)
            if value is not None:
                setattr(self._draft, name, value)

    def update_draft(self, **values: Optional[str]) -> FormDraft:
        with self._lock:
            self._apply_draft_values(values)
            return replace(self._draft)

    def open_form(self) -> None:
        with self._lock:
            self._form_open = True

    def close_form(self) -> None:
        with self._lock:
            self._form_open = False

    def submit(self, **values: Optional[str]) -> DateStory:
        """Submit the draft (after applying any given field values).

        Raises ValidationFailed before any network call, SubmissionInProgress
        while this visitor's earlier submit is pending, SubmissionFailed if the
        store POST fails (the draft is kept so the user can retry).
        """
        with self._lock:
            if self._submitting:
                raise SubmissionInProgress("A story is already being submitted")
            self._apply_draft_values(values)
            story = build_story(self._draft)
            self._submitting = True

        try:
            self._app_state.append_to_store(story)
        except RecordStoreError as e:
            logger.error("Error submitting story: %s", e)
            raise SubmissionFailed(NOTICE_FAILED) from e
        else:
            self._app_state.add_story(story)
            with self._lock:
                self._draft = FormDraft()
                self._form_open = False
        finally:
            with self._lock:
                self._submitting = False
        return story


class AppState:
    def __init__(
        self,
        load: Callable[[], List[DateStory]] = load_stories,
        append: Callable[[DateStory], None] = append_story,
        session_limit: int = SESSION_LIMIT,
    ) -> None:
        self._load = load
        self._append = append
        self._lock = threading.Lock()
        self._stories: List[DateStory] = []
        self._submitted_ids: set[str] = set()
        self._sessions: "OrderedDict[str, VisitorSession]" = OrderedDict()
        self._session_limit = session_limit
        self._closed = False

    # Stories

    def get_stories(self) -> List[DateStory]:
        with self._lock:
            return list(self._stories)

    def replace_stories(self, loaded: List[DateStory]) -> bool:
        """Apply a load result. Returns False if the state was already closed.

        Stories submitted from this instance that the load does not contain
        yet are kept at the end, so a fast submit is not lost to a slow load.
        """
        with self._lock:
            if self._closed:
                logger.info("Discarding load result (%d stories): state closed", len(loaded))
                return False
            loaded_ids = {s.id for s in loaded}
            pending = [
                s for s in self._stories if s.id in self._submitted_ids and s.id not in loaded_ids
            ]
            self._stories = list(loaded) + pending
            return True

    def fetch_stories(self) -> List[DateStory]:
        """GET from the record store without touching state. Raises RecordStoreError."""
        return self._load()

    def reload(self) -> int:
        """Fetch from the record store now and apply. Raises RecordStoreError; returns story count."""
        stories = self.fetch_stories()
        self.replace_stories(stories)
        with self._lock:
            return len(self._stories)

    def append_to_store(self, story: DateStory) -> None:
        self._append(story)

    def add_story(self, story: DateStory) -> None:
        """Merge a story the record store accepted."""
        with self._lock:
            self._stories.append(story)
            self._submitted_ids.add(story.id)

    # Visitor sessions

    def session(self, session_id: Optional[str] = None) -> VisitorSession:
        """Return the visitor's session, creating a new one for unknown ids.

        Least recently used sessions are dropped past the session limit.
        """
        with self._lock:
            if session_id and session_id in self._sessions:
                self._sessions.move_to_end(session_id)
                return self._sessions[session_id]
            session = VisitorSession(uuid.uuid4().hex, self)
            self._sessions[session.id] = session
            while len(self._sessions) > self._session_limit:
                self._sessions.popitem(last=False)
            return session

    # Lifecycle

    def close(self) -> None:
        """Teardown: late load results are dropped from now on."""
        with self._lock:
            self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed


_state = AppState()


def get_state() -> AppState:
    return _state


def set_session_cookie(response: Response, session: VisitorSession) -> None:
    response.set_cookie(SESSION_COOKIE, session.id, httponly=True, samesite="lax")


def get_session(
    request: Request,
    response: Response,
    state: AppState = Depends(get_state),
) -> VisitorSession:
    """Session for the visitor's cookie; a new visitor gets a new cookie."""
    cookie = request.cookies.get(SESSION_COOKIE)
    session = state.session(cookie)
    if session.id != cookie:
        set_session_cookie(response, session)
    return session
