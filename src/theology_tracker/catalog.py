"""Bibliography search."""
from theology_tracker.models import Category, CategoryIcon, Material, SubCategory

ICON_GLYPHS = {
    CategoryIcon.BOOK: "📖",
    CategoryIcon.HISTORY: "📜",
    CategoryIcon.SHIELD: "🛡",
    CategoryIcon.SCALE: "⚖",
}


def icon_glyph(icon: CategoryIcon) -> str:
    return ICON_GLYPHS.get(icon, ICON_GLYPHS[CategoryIcon.BOOK])


def _material_matches(material: Material, needle: str) -> bool:
    return needle in material.name.lower() or needle in material.details.lower()


def filter_catalog(categories: list[Category], query: str) -> list[Category]:
    """Prune the tree to materials whose name or details contain the query.

    An empty query returns ``categories`` itself. Otherwise a new tree is
    built: subcategories without matches and categories without surviving
    subcategories are dropped. The input is never modified.
    """
    if not query:
        return categories
    needle = query.lower()
    result = []
    for category in categories:
        subcategories = []
        for sub in category.subcategories:
            materials = [m for m in sub.materials if _material_matches(m, needle)]
            if materials:
                subcategories.append(SubCategory(name=sub.name, materials=materials))
        if subcategories:
            result.append(Category(
                id=category.id,
                name=category.name,
                icon=category.icon,
                description=category.description,
                subcategories=subcategories,
            ))
    return result


def count_materials(categories: list[Category]) -> int:
    return sum(len(sub.materials) for c in categories for sub in c.subcategories)
