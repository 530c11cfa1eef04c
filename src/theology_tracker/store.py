"""Local persistence of task flags, personal feedback and the weekly goal.

The store mirrors a browser's per-origin local storage: a synchronous,
string-keyed dictionary. ``ProgressStore`` wraps any backend that offers
``get(key)`` and ``set(key, value)``, so tests can swap the SQLite file for
``MemoryBackend``.

Reads never raise. A missing or unreadable ``tasks`` entry means "first run"
and the caller rebuilds the state from the curriculum.
"""
import copy
import json
import logging
from datetime import datetime

from theology_tracker.db import DEFAULT_DB_PATH, get_connection, init_db
from theology_tracker.models import DailyTask, ProgressState, TASK_FLAGS, WeekRecord

logger = logging.getLogger(__name__)

TASKS_KEY = "tasks"
FEEDBACK_KEY = "feedback"
WEEKLY_GOAL_KEY = "weekly_goal"


class SqliteBackend:
    """Key/value rows in the ``storage`` table of a SQLite file."""

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        self.db_path = db_path
        init_db(db_path)

    def get(self, key: str) -> str | None:
        conn = get_connection(self.db_path)
        row = conn.execute("SELECT value FROM storage WHERE key = ?", (key,)).fetchone()
        conn.close()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        now = datetime.now().isoformat()
        conn = get_connection(self.db_path)
        conn.execute(
            "INSERT INTO storage (key, value, updated_at) VALUES (?, ?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at",
            (key, value, now),
        )
        conn.commit()
        conn.close()


class MemoryBackend:
    """In-memory backend with the same contract as ``SqliteBackend``."""

    def __init__(self, data: dict[str, str] | None = None):
        self.data = dict(data or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class ProgressStore:
    def __init__(self, backend):
        self.backend = backend

    def load(self) -> ProgressState | None:
        """Return the persisted task state, or None if absent or unreadable."""
        raw = self.backend.get(TASKS_KEY)
        if raw is None:
            return None
        try:
            data = json.loads(raw)
            return {
                int(week): [DailyTask.from_dict(t) for t in tasks]
                for week, tasks in data.items()
            }
        except (ValueError, TypeError, KeyError, AttributeError, RecursionError) as e:
            logger.warning("Ignoring unreadable stored tasks: %s", e)
            return None

    def save(self, state: ProgressState) -> None:
        payload = {str(week): [t.to_dict() for t in tasks] for week, tasks in state.items()}
        self.backend.set(TASKS_KEY, json.dumps(payload, ensure_ascii=False))
        logger.debug("Saved task state for %d weeks", len(state))

    def load_feedback(self) -> str:
        return self.backend.get(FEEDBACK_KEY) or ""

    def save_feedback(self, text: str) -> None:
        self.backend.set(FEEDBACK_KEY, text)

    def load_weekly_goal(self) -> str:
        # One global goal, whatever week is on screen.
        return self.backend.get(WEEKLY_GOAL_KEY) or ""

    def save_weekly_goal(self, text: str) -> None:
        self.backend.set(WEEKLY_GOAL_KEY, text)


def initial_state(weeks: list[WeekRecord]) -> ProgressState:
    """Deep copy of every week's task templates."""
    return {week.week: copy.deepcopy(week.tasks) for week in weeks}


def _reconcile_week(week: WeekRecord, stored: list[DailyTask] | None) -> list[DailyTask]:
    tasks = copy.deepcopy(week.tasks)
    if stored is None or [t.id for t in stored] != [t.id for t in tasks]:
        return tasks
    for task, saved in zip(tasks, stored):
        for flag in TASK_FLAGS:
            task.set_flag(flag, getattr(saved, flag))
    return tasks


def load_or_init(store: ProgressStore, weeks: list[WeekRecord]) -> ProgressState:
    """Load the saved state, falling back to the curriculum for anything missing or malformed.

    Flags are the only thing taken from storage; day labels, content and
    descriptions always come from the curriculum.
    """
    persisted = store.load()
    if persisted is None:
        logger.info("No saved progress, starting from the curriculum")
        state = initial_state(weeks)
        store.save(state)
        return state

    state = {week.week: _reconcile_week(week, persisted.get(week.week)) for week in weeks}
    if state != persisted:
        logger.info("Saved progress did not match the curriculum, repaired it")
        store.save(state)
    return state


def toggle_task(
    store: ProgressStore,
    state: ProgressState,
    week_number: int,
    task_id: str,
    flag: str,
    value: bool,
) -> DailyTask:
    """Set one flag on one task and persist the whole state before returning."""
    tasks = state[week_number]
    for task in tasks:
        if task.id == task_id:
            task.set_flag(flag, value)
            store.save(state)
            return task
    raise KeyError(f"No task {task_id!r} in week {week_number}")


def reset_progress(store: ProgressStore, weeks: list[WeekRecord]) -> ProgressState:
    """Clear every flag, the feedback note and the weekly goal."""
    state = initial_state(weeks)
    store.save(state)
    store.save_feedback("")
    store.save_weekly_goal("")
    logger.info("Progress reset")
    return state
