"""Progress percentages at task, week, phase and overall level.

A week's percentage is ``5 * (tasks with at least one flag) / (5 * tasks)``:
one ticked box counts the whole day as done for the percentage, while
"Dias Completos" needs all five boxes. Weeks without tasks count as 0%.
"""
from theology_tracker.curriculum import CORE_WEEKS, get_week, phase_weeks
from theology_tracker.models import DailyTask, ProgressState, WeekRecord

FLAGS_PER_TASK = 5
NOMINAL_WEEK_DAYS = 7


def task_score(task: DailyTask) -> int:
    return sum(1 for flag in task.flags() if flag)


def day_complete(task: DailyTask) -> bool:
    return task_score(task) == FLAGS_PER_TASK


def completed_days(tasks: list[DailyTask]) -> int:
    return sum(1 for t in tasks if day_complete(t))


def checked_total(tasks: list[DailyTask]) -> tuple[int, int]:
    started = sum(1 for t in tasks if task_score(t) > 0)
    return started * FLAGS_PER_TASK, len(tasks) * FLAGS_PER_TASK


def _percentage(checked: int, total: int) -> float:
    if total == 0:
        return 0.0
    return (checked / total) * 100


def week_tasks(state: ProgressState, weeks: list[WeekRecord], week_number: int) -> list[DailyTask]:
    """Live tasks for a week, or the curriculum template if the state has none."""
    if week_number in state:
        return state[week_number]
    week = get_week(weeks, week_number)
    return week.tasks if week else []


def week_progress(state: ProgressState, weeks: list[WeekRecord], week_number: int) -> float:
    return _percentage(*checked_total(week_tasks(state, weeks, week_number)))


def phase_progress(state: ProgressState, weeks: list[WeekRecord], phase: int) -> float:
    checked = total = 0
    for week in phase_weeks(weeks, phase):
        c, t = checked_total(week_tasks(state, weeks, week.week))
        checked += c
        total += t
    return _percentage(checked, total)


def overall_counts(state: ProgressState) -> tuple[int, int]:
    checked = total = 0
    for tasks in state.values():
        c, t = checked_total(tasks)
        checked += c
        total += t
    return checked, total


def overall_progress(state: ProgressState) -> float:
    return _percentage(*overall_counts(state))


def weeks_remaining(current_week: int) -> int:
    return CORE_WEEKS - current_week


def get_progress_color(pct: float) -> str:
    if pct >= 100:
        return "green"
    elif pct > 0:
        return "yellow"
    return "dim"
