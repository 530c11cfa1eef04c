"""Data classes for the curriculum, progress and bibliography model."""
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional

TASK_FLAGS = ("study", "practice", "test", "review", "devotional")


class ResourceType(str, Enum):
    READING = "Leitura"
    VIDEO = "Vídeo"


class CategoryIcon(str, Enum):
    BOOK = "book"
    HISTORY = "history"
    SHIELD = "shield"
    SCALE = "scale"


@dataclass
class AdditionalResource:
    title: str
    url: str
    type: ResourceType


def _stored_flag(data: dict, name: str) -> bool:
    value = data.get(name, False)
    if not isinstance(value, bool):
        raise TypeError(f"Flag {name!r} must be a boolean, got {value!r}")
    return value


@dataclass
class DailyTask:
    id: str
    day: str
    content: str
    study: bool = False
    practice: bool = False
    test: bool = False
    review: bool = False
    devotional: bool = False
    study_desc: str = ""
    practice_desc: str = ""
    test_desc: str = ""
    review_desc: str = ""
    devotional_desc: str = ""

    def flags(self) -> tuple[bool, ...]:
        return tuple(getattr(self, name) for name in TASK_FLAGS)

    def set_flag(self, flag: str, value: bool) -> None:
        if flag not in TASK_FLAGS:
            raise ValueError(f"Unknown task flag: {flag}")
        setattr(self, flag, bool(value))

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "DailyTask":
        return cls(
            id=str(data["id"]),
            day=data.get("day", ""),
            content=data.get("content", ""),
            **{name: _stored_flag(data, name) for name in TASK_FLAGS},
            **{f"{name}_desc": data.get(f"{name}_desc", "") for name in TASK_FLAGS},
        )


@dataclass
class WeekRecord:
    week: int
    macro_area: str
    sub_area: str
    phase: int
    objective: str
    tasks: list[DailyTask] = field(default_factory=list)
    resources: Optional[list[AdditionalResource]] = None


@dataclass
class Material:
    name: str
    details: str


@dataclass
class SubCategory:
    name: str
    materials: list[Material] = field(default_factory=list)


@dataclass
class Category:
    id: int
    name: str
    icon: CategoryIcon
    description: str
    subcategories: list[SubCategory] = field(default_factory=list)


# Live, user-editable task lists keyed by week number.
ProgressState = dict[int, list[DailyTask]]
