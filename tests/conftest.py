import pytest

from theology_tracker.models import DailyTask, WeekRecord


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_tracker.db")
    return db_path


@pytest.fixture
def small_weeks():
    """Three short weeks across two phases."""
    def tasks(week, count):
        return [DailyTask(id=f"w{week}-d{i}", day=f"Dia {i}", content=f"Tema {week}.{i}") for i in range(1, count + 1)]
    return [
        WeekRecord(week=1, macro_area="Sistemática", sub_area="Bibliologia", phase=1, objective="A", tasks=tasks(1, 2)),
        WeekRecord(week=2, macro_area="Sistemática", sub_area="Cristologia", phase=1, objective="B", tasks=tasks(2, 3)),
        WeekRecord(week=3, macro_area="Histórica", sub_area="Reforma", phase=2, objective="C", tasks=tasks(3, 2)),
    ]
