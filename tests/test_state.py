import threading

import pytest

from datespots.api.state import AppState
from datespots.config import ALL_RATINGS, ALL_TYPES
from datespots.core.errors import (
    RecordStoreError,
    SubmissionFailed,
    SubmissionInProgress,
    ValidationFailed,
)
from datespots.models.form import Filters, FormDraft
from tests.helpers import FakeStore, make_story

FORM = {
    "rating": "4",
    "type_of_date": "walk and talk",
    "location": "Cubbon Park",
    "story": "Lovely evening",
}


def _ids(stories):
    return [s.id for s in stories]


def test_reload_populates_stories_and_visible(state, session):
    assert _ids(state.get_stories()) == ["1", "2", "3"]
    assert _ids(session.get_visible()) == ["1", "2", "3"]


def test_filters_recompute_visible(session):
    session.set_filters(selected_type="walk and talk")
    assert _ids(session.get_visible()) == ["1", "3"]
    session.set_filters(selected_rating="4")
    assert _ids(session.get_visible()) == ["3"]
    session.set_filters(ALL_TYPES, ALL_RATINGS)
    assert _ids(session.get_visible()) == ["1", "2", "3"]


def test_visible_overrides_do_not_change_filters(session):
    assert _ids(session.get_visible("Food centric")) == ["2"]
    assert session.get_filters().selected_type == ALL_TYPES


def test_unknown_filter_values_rejected(session):
    with pytest.raises(ValueError):
        session.set_filters(selected_type="rooftop picnic")
    with pytest.raises(ValueError):
        session.set_filters(selected_rating="7")
    assert session.get_filters().selected_type == ALL_TYPES


def test_list_view_capped_map_uses_all():
    store = FakeStore([make_story(str(i)) for i in range(9)])
    s = AppState(load=store.load, append=store.append)
    s.reload()
    visitor = s.session()
    assert len(visitor.get_list_view()) == 5
    assert len(visitor.get_visible()) == 9


def test_sessions_are_independent(state):
    a = state.session()
    b = state.session()
    assert a.id != b.id
    a.set_filters(selected_type="Food centric")
    a.update_draft(story="private words")
    assert b.get_filters().selected_type == ALL_TYPES
    assert _ids(b.get_visible()) == ["1", "2", "3"]
    assert b.get_draft() == FormDraft()


def test_session_lookup_by_id(state):
    a = state.session()
    assert state.session(a.id) is a
    assert state.session("unknown").id != "unknown"


def test_oldest_sessions_dropped_past_limit():
    s = AppState(load=list, append=lambda story: None, session_limit=2)
    first = s.session()
    s.session()
    s.session()
    assert s.session(first.id) is not first


def test_start_page_resets_to_query_or_all(session):
    session.set_filters(selected_type="Food centric", selected_rating="3")
    session.update_draft(location="Lalbagh")
    session.open_form()
    session.start_page()
    assert session.get_filters() == Filters(ALL_TYPES, ALL_RATINGS)
    assert session.get_draft() == FormDraft()
    assert session.form_open is False
    session.start_page("walk and talk")
    assert _ids(session.get_visible()) == ["1", "3"]


def test_submit_success_merges_and_resets(state, store, session):
    session.open_form()
    session.set_filters(selected_type="walk and talk")
    story = session.submit(**FORM)

    assert store.appended == [story]
    assert state.get_stories()[-1] == story
    assert session.get_visible()[-1] == story
    assert session.get_draft() == FormDraft()
    assert session.form_open is False
    assert session.submitting is False


def test_submitted_story_visible_to_other_visitors(state):
    story = state.session().submit(**FORM)
    assert story in state.session().get_visible()


def test_submitted_story_outside_filter_only_in_full_set(state, session):
    session.set_filters(selected_type="Food centric")
    story = session.submit(**FORM)
    assert story in state.get_stories()
    assert story not in session.get_visible()


@pytest.mark.parametrize("field", list(FORM))
def test_submit_with_empty_field_makes_no_call(state, store, session, field):
    values = dict(FORM, **{field: ""})
    with pytest.raises(ValidationFailed):
        session.submit(**values)
    assert store.appended == []
    assert _ids(state.get_stories()) == ["1", "2", "3"]


def test_submit_failure_keeps_draft_and_form(state, store, session):
    store.fail_append = RecordStoreError("boom")
    session.open_form()
    with pytest.raises(SubmissionFailed) as exc:
        session.submit(**FORM)
    assert exc.value.notice == "Something went wrong."
    assert session.get_draft() == FormDraft(**FORM)
    assert session.form_open is True
    assert session.submitting is False
    assert _ids(state.get_stories()) == ["1", "2", "3"]


def test_unexpected_store_error_clears_in_flight_flag(store, session):
    store.fail_append = RuntimeError("bug in client")
    with pytest.raises(RuntimeError):
        session.submit(**FORM)
    assert session.submitting is False

    store.fail_append = None
    story = session.submit(**FORM)
    assert store.appended == [story]


def test_second_submit_while_pending_is_rejected(state, session):
    started = threading.Event()
    release = threading.Event()
    appended = []

    def slow_append(story):
        started.set()
        release.wait(timeout=5)
        appended.append(story)

    state._append = slow_append
    worker = threading.Thread(target=session.submit, kwargs=FORM)
    worker.start()
    assert started.wait(timeout=5)

    with pytest.raises(SubmissionInProgress):
        session.submit(**FORM)

    release.set()
    worker.join(timeout=5)
    assert len(appended) == 1
    assert len(state.get_stories()) == 4


def test_pending_submit_does_not_block_other_visitors(state, session):
    started = threading.Event()
    release = threading.Event()
    appended = []

    def slow_append(story):
        if not started.is_set():
            started.set()
            release.wait(timeout=5)
        appended.append(story)

    state._append = slow_append
    worker = threading.Thread(target=session.submit, kwargs=FORM)
    worker.start()
    assert started.wait(timeout=5)

    state.session().submit(**dict(FORM, location="Lalbagh"))

    release.set()
    worker.join(timeout=5)
    assert sorted(s.location for s in appended) == ["Cubbon Park", "Lalbagh"]


def test_submit_uses_saved_draft_for_missing_values(store, session):
    session.update_draft(rating="5", location="Lalbagh")
    session.submit(type_of_date="Food centric", story="Dosa and a stroll")
    sent = store.appended[0]
    assert (sent.rating, sent.location, sent.type_of_date) == ("5", "Lalbagh", "Food centric")


def test_load_keeps_stories_submitted_before_it_finished():
    store = FakeStore([make_story("1")])
    s = AppState(load=store.load, append=store.append)
    story = s.session().submit(**FORM)
    s.reload()
    assert _ids(s.get_stories()) == ["1", story.id]


def test_load_does_not_duplicate_submitted_story_once_stored():
    store = FakeStore([make_story("1")])
    s = AppState(load=store.load, append=store.append)
    story = s.session().submit(**FORM)
    store.stories.append(story)
    s.reload()
    assert _ids(s.get_stories()) == ["1", story.id]


def test_closed_state_ignores_late_load(state):
    state.close()
    assert state.replace_stories([make_story("99")]) is False
    assert _ids(state.get_stories()) == ["1", "2", "3"]
