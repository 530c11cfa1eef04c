import itertools

import pytest

from theology_tracker.curriculum import load_weeks
from theology_tracker.models import DailyTask, TASK_FLAGS, WeekRecord
from theology_tracker.progress import (
    NOMINAL_WEEK_DAYS, checked_total, completed_days, day_complete, get_progress_color,
    overall_counts, overall_progress, phase_progress, task_score, week_progress,
    week_tasks, weeks_remaining,
)
from theology_tracker.store import initial_state


def _fill(state, value):
    for tasks in state.values():
        for task in tasks:
            for flag in TASK_FLAGS:
                task.set_flag(flag, value)


def test_task_score_counts_flags():
    t = DailyTask(id="a", day="Seg", content="x", study=True, test=True)
    assert task_score(t) == 2
    assert not day_complete(t)


def test_task_score_is_monotonic():
    for bits in itertools.product([False, True], repeat=5):
        t = DailyTask(id="a", day="Seg", content="x", **dict(zip(TASK_FLAGS, bits)))
        base = task_score(t)
        for flag in TASK_FLAGS:
            before = getattr(t, flag)
            t.set_flag(flag, True)
            assert task_score(t) >= base
            t.set_flag(flag, False)
            assert task_score(t) <= base
            t.set_flag(flag, before)


def test_completed_days_needs_all_five():
    tasks = [
        DailyTask(id="a", day="Seg", content="x", **{f: True for f in TASK_FLAGS}),
        DailyTask(id="b", day="Ter", content="y", study=True, practice=True, test=True, review=True),
    ]
    assert completed_days(tasks) == 1
    assert NOMINAL_WEEK_DAYS == 7


def test_half_done_week_is_fifty_percent():
    week = WeekRecord(week=1, macro_area="M", sub_area="S", phase=1, objective="O", tasks=[
        DailyTask(id="a", day="Seg", content="x", **{f: True for f in TASK_FLAGS}),
        DailyTask(id="b", day="Ter", content="y"),
    ])
    state = initial_state([week])
    assert week_progress(state, [week], 1) == 50


def test_any_flag_counts_the_whole_task(small_weeks):
    state = initial_state(small_weeks)
    state[1][0].set_flag("devotional", True)
    assert checked_total(state[1]) == (5, 10)
    assert week_progress(state, small_weeks, 1) == 50


def test_all_flags_set_is_100(small_weeks):
    state = initial_state(small_weeks)
    _fill(state, True)
    assert week_progress(state, small_weeks, 2) == 100
    assert phase_progress(state, small_weeks, 1) == 100
    assert phase_progress(state, small_weeks, 2) == 100
    assert overall_progress(state) == 100


def test_no_flags_set_is_0(small_weeks):
    state = initial_state(small_weeks)
    assert week_progress(state, small_weeks, 1) == 0
    assert phase_progress(state, small_weeks, 1) == 0
    assert overall_progress(state) == 0


def test_full_curriculum_extremes():
    weeks = load_weeks()
    state = initial_state(weeks)
    assert overall_progress(state) == 0
    _fill(state, True)
    assert overall_progress(state) == 100
    assert all(phase_progress(state, weeks, p) == 100 for p in (1, 2, 3, 4))


def test_phase_progress_aggregates_tasks_not_weeks(small_weeks):
    state = initial_state(small_weeks)
    # Phase 1 has 2 + 3 tasks; start one task in week 2.
    state[2][0].set_flag("study", True)
    assert phase_progress(state, small_weeks, 1) == pytest.approx(20.0)
    assert phase_progress(state, small_weeks, 2) == 0


def test_overall_counts(small_weeks):
    state = initial_state(small_weeks)
    state[3][1].set_flag("test", True)
    assert overall_counts(state) == (5, 35)
    assert overall_progress(state) == pytest.approx(5 / 35 * 100)


def test_empty_denominator_is_zero():
    empty = WeekRecord(week=1, macro_area="M", sub_area="S", phase=1, objective="O", tasks=[])
    assert week_progress({1: []}, [empty], 1) == 0.0
    assert phase_progress({1: []}, [empty], 1) == 0.0
    assert phase_progress({}, [], 3) == 0.0
    assert overall_progress({}) == 0.0


def test_week_tasks_falls_back_to_template(small_weeks):
    assert week_tasks({}, small_weeks, 2) is small_weeks[1].tasks
    assert week_tasks({}, small_weeks, 99) == []


def test_weeks_remaining():
    assert weeks_remaining(1) == 23
    assert weeks_remaining(24) == 0


def test_progress_color():
    assert get_progress_color(100) == "green"
    assert get_progress_color(40) == "yellow"
    assert get_progress_color(0) == "dim"
