"""Search and type filter over a week's additional resources."""
from theology_tracker.models import AdditionalResource, ResourceType

ALL_TYPES = "Todos"


def _type_value(type_filter: ResourceType | str) -> str:
    return type_filter.value if isinstance(type_filter, ResourceType) else type_filter


def filter_resources(
    resources: list[AdditionalResource] | None,
    query: str = "",
    type_filter: ResourceType | str = ALL_TYPES,
) -> list[AdditionalResource]:
    """Resources of the selected type whose title contains the query, case-insensitively."""
    if not resources:
        return []
    wanted = _type_value(type_filter)
    needle = query.lower()
    return [
        r for r in resources
        if (wanted == ALL_TYPES or r.type.value == wanted)
        and (not needle or needle in r.title.lower())
    ]


def filters_active(query: str, type_filter: ResourceType | str) -> bool:
    return query != "" or _type_value(type_filter) != ALL_TYPES
