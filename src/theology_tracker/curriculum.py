"""Load the 32-week curriculum and the bibliography from the bundled content files."""
import json
from pathlib import Path

from theology_tracker.models import (
    AdditionalResource, Category, CategoryIcon, DailyTask, Material,
    ResourceType, SubCategory, WeekRecord,
)

CONTENT_DIR = Path(__file__).parent / "content"

FIRST_WEEK = 1
LAST_WEEK = 32
CORE_WEEKS = 24
PHASES = (1, 2, 3, 4)

PHASE_TITLES = {
    1: "Teologia Sistemática - Fundamentos",
    2: "Teologia Sistemática - Conclusão + Bíblica",
    3: "Teologia Histórica",
    4: "Teologia Prática e Revisão",
}

# (module, focus, minutes) for a Monday-Friday study day.
DAILY_SCHEDULE = [
    ("Devocional", "Oração e Leitura Bíblica (Não-Estudo)", 30),
    ("Estudo (Leitura/Pesquisa)", "Absorção de novo conteúdo e anotações", 45),
    ("Prática (Exercício/Resumo)", "Aplicação, síntese e produção de conteúdo", 30),
    ("Teste (Avaliação/Questionário)", "Verificação rápida de aprendizado e identificação de lacunas", 15),
    ("Revisão (Notas)", "Fixação e retenção do conteúdo do dia", 15),
]

DAILY_STUDY_HOURS = 2
STUDY_WEEKDAYS = 5
SATURDAY_STUDY_HOURS = 2

WEEKEND_NOTES = [
    ("Sábado", "2 horas para Revisão Semanal, Teste Semanal ou recuperação de tarefas pendentes."),
    ("Domingo", "Dia de Descanso e Contemplação (0 horas de estudo formal)."),
]


def _parse_resource(data: dict) -> AdditionalResource:
    return AdditionalResource(title=data["title"], url=data["url"], type=ResourceType(data["type"]))


def _parse_week(data: dict) -> WeekRecord:
    resources = data.get("resources")
    return WeekRecord(
        week=int(data["week"]),
        macro_area=data["macro_area"],
        sub_area=data["sub_area"],
        phase=int(data["phase"]),
        objective=data["objective"],
        tasks=[DailyTask.from_dict(t) for t in data["tasks"]],
        resources=[_parse_resource(r) for r in resources] if resources is not None else None,
    )


def load_weeks(path: Path | None = None) -> list[WeekRecord]:
    """Read the week records from weeks.json, ordered by week number."""
    data = json.loads((path or CONTENT_DIR / "weeks.json").read_text(encoding="utf-8"))
    weeks = sorted((_parse_week(w) for w in data["weeks"]), key=lambda w: w.week)
    numbers = [w.week for w in weeks]
    if len(set(numbers)) != len(numbers):
        raise ValueError("Duplicate week numbers in curriculum")
    for week in weeks:
        ids = [t.id for t in week.tasks]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate task ids in week {week.week}")
    return weeks


def load_catalog(path: Path | None = None) -> list[Category]:
    """Read the bibliography tree from materials.json."""
    data = json.loads((path or CONTENT_DIR / "materials.json").read_text(encoding="utf-8"))
    categories = []
    for c in data["categories"]:
        try:
            icon = CategoryIcon(c["icon"])
        except ValueError:
            raise ValueError(f"Unknown icon {c['icon']!r} for category {c['name']!r}") from None
        categories.append(Category(
            id=int(c["id"]),
            name=c["name"],
            icon=icon,
            description=c.get("description", ""),
            subcategories=[
                SubCategory(
                    name=s["name"],
                    materials=[Material(name=m["name"], details=m["details"]) for m in s["materials"]],
                )
                for s in c["subcategories"]
            ],
        ))
    return categories


def get_week(weeks: list[WeekRecord], week_number: int) -> WeekRecord | None:
    for week in weeks:
        if week.week == week_number:
            return week
    return None


def phase_weeks(weeks: list[WeekRecord], phase: int) -> list[WeekRecord]:
    return [w for w in weeks if w.phase == phase]


def phase_range(weeks: list[WeekRecord], phase: int) -> tuple[int, int] | None:
    """First and last week number of a phase, or None if the phase has no weeks."""
    numbers = [w.week for w in phase_weeks(weeks, phase)]
    if not numbers:
        return None
    return min(numbers), max(numbers)


def weekly_study_hours() -> int:
    """Monday-Friday blocks plus the Saturday review block."""
    return STUDY_WEEKDAYS * DAILY_STUDY_HOURS + SATURDAY_STUDY_HOURS
