import json

import pytest

from theology_tracker.curriculum import get_week, load_weeks
from theology_tracker.store import (
    FEEDBACK_KEY, TASKS_KEY, WEEKLY_GOAL_KEY, MemoryBackend, ProgressStore, SqliteBackend,
    initial_state, load_or_init, reset_progress, toggle_task,
)


@pytest.fixture
def store():
    return ProgressStore(MemoryBackend())


def test_load_missing_returns_none(store):
    assert store.load() is None
    assert store.load_feedback() == ""
    assert store.load_weekly_goal() == ""


@pytest.mark.parametrize("raw", [
    "{not json", "[1, 2]", '{"x": []}', '{"1": [{"day": "no id"}]}', '{"1": ["text"]}',
    '{"1": [{"id": "w1-d1", "study": "false"}]}', '{"1": [{"id": "w1-d1", "test": 1}]}',
    pytest.param("[" * 100000, id="deep-nesting"),
])
def test_load_malformed_returns_none(raw):
    store = ProgressStore(MemoryBackend({TASKS_KEY: raw}))
    assert store.load() is None


def test_save_then_load_round_trip(store, small_weeks):
    state = initial_state(small_weeks)
    state[2][1].set_flag("practice", True)
    store.save(state)
    assert store.load() == state


def test_sqlite_round_trip(tmp_db, small_weeks):
    store = ProgressStore(SqliteBackend(tmp_db))
    state = initial_state(small_weeks)
    state[1][0].set_flag("study", True)
    store.save(state)
    store.save_feedback("Difícil hoje")
    store.save_weekly_goal("Dominar Cristologia")

    reopened = ProgressStore(SqliteBackend(tmp_db))
    assert reopened.load() == state
    assert reopened.load_feedback() == "Difícil hoje"
    assert reopened.load_weekly_goal() == "Dominar Cristologia"


def test_stored_tasks_are_json_keyed_by_week_string(store, small_weeks):
    store.save(initial_state(small_weeks))
    data = json.loads(store.backend.get(TASKS_KEY))
    assert set(data) == {"1", "2", "3"}
    assert data["2"][0]["id"] == "w2-d1"


def test_initial_state_is_a_deep_copy(small_weeks):
    state = initial_state(small_weeks)
    state[1][0].set_flag("study", True)
    assert small_weeks[0].tasks[0].study is False


def test_first_run_initialises_from_curriculum(store):
    weeks = load_weeks()
    state = load_or_init(store, weeks)
    template = get_week(weeks, 2).tasks
    assert [t.id for t in state[2]] == [t.id for t in template]
    assert state[2] == template
    assert state[2] is not template
    assert store.load() == state


def test_malformed_storage_falls_back_to_curriculum(small_weeks):
    store = ProgressStore(MemoryBackend({TASKS_KEY: "garbage"}))
    state = load_or_init(store, small_weeks)
    assert state == initial_state(small_weeks)
    assert store.load() == state


def test_load_or_init_keeps_saved_flags(store, small_weeks):
    state = initial_state(small_weeks)
    state[3][1].set_flag("devotional", True)
    store.save(state)
    assert load_or_init(store, small_weeks) == state


def test_load_or_init_repairs_mismatched_week(store, small_weeks):
    state = initial_state(small_weeks)
    state[1][0].set_flag("study", True)
    state[2] = state[2][:1]
    state[2][0].set_flag("test", True)
    del state[3]
    store.save(state)

    loaded = load_or_init(store, small_weeks)
    assert loaded[1][0].study is True
    assert loaded[2] == small_weeks[1].tasks
    assert loaded[3] == small_weeks[2].tasks
    assert store.load() == loaded


def test_load_or_init_takes_text_from_curriculum(store, small_weeks):
    state = initial_state(small_weeks)
    state[1][0].content = "edited"
    state[1][0].study = True
    store.save(state)
    loaded = load_or_init(store, small_weeks)
    assert loaded[1][0].content == small_weeks[0].tasks[0].content
    assert loaded[1][0].study is True


def test_toggle_task_persists_immediately(store, small_weeks):
    state = load_or_init(store, small_weeks)
    task = toggle_task(store, state, 2, "w2-d3", "review", True)
    assert task.review is True
    assert store.load()[2][2].review is True
    toggle_task(store, state, 2, "w2-d3", "review", False)
    assert store.load()[2][2].review is False


def test_toggle_task_unknown_task(store, small_weeks):
    state = load_or_init(store, small_weeks)
    with pytest.raises(KeyError):
        toggle_task(store, state, 2, "w9-d9", "study", True)
    with pytest.raises(KeyError):
        toggle_task(store, state, 42, "w2-d1", "study", True)


def test_toggle_task_unknown_flag_does_not_save(small_weeks):
    backend = MemoryBackend()
    store = ProgressStore(backend)
    state = load_or_init(store, small_weeks)
    before = backend.get(TASKS_KEY)
    with pytest.raises(ValueError):
        toggle_task(store, state, 1, "w1-d1", "sleep", True)
    assert backend.get(TASKS_KEY) == before


def test_weekly_goal_is_global(store):
    store.save_weekly_goal("Meta única")
    assert store.backend.get(WEEKLY_GOAL_KEY) == "Meta única"
    assert store.load_weekly_goal() == "Meta única"


def test_reset_progress(store, small_weeks):
    state = load_or_init(store, small_weeks)
    toggle_task(store, state, 1, "w1-d1", "study", True)
    store.save_feedback("notas")
    store.save_weekly_goal("meta")

    state = reset_progress(store, small_weeks)
    assert state == initial_state(small_weeks)
    assert store.load() == state
    assert store.backend.get(FEEDBACK_KEY) == ""
    assert store.load_weekly_goal() == ""


def test_deeply_nested_storage_falls_back_to_curriculum(small_weeks):
    store = ProgressStore(MemoryBackend({TASKS_KEY: "[" * 100000}))
    assert load_or_init(store, small_weeks) == initial_state(small_weeks)


def test_string_flags_are_not_read_as_ticked(small_weeks):
    stored = {"1": [{"id": t.id, "study": "false"} for t in small_weeks[0].tasks]}
    store = ProgressStore(MemoryBackend({TASKS_KEY: json.dumps(stored)}))
    state = load_or_init(store, small_weeks)
    assert all(not t.study for t in state[1])
