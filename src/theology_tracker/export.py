"""PDF export of the (filtered) bibliography."""
import logging
from io import BytesIO
from pathlib import Path
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from theology_tracker.models import Category

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_NAME = "materiais_estudo_teologia.pdf"
DOCUMENT_TITLE = "Materiais de Estudo de Teologia"
DOCUMENT_SUBTITLE = "Lista organizada de recursos essenciais para aprofundar seus conhecimentos."
TABLE_HEADER = ("Tópico", "Material (Título, Autor, Fonte)")
TOPIC_COLUMN_WIDTH = 30 * mm
MARGIN = 14 * mm


def _styles() -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()
    return {
        "title": ParagraphStyle("CatalogTitle", parent=base["Title"], fontSize=18, leading=22, alignment=0),
        "subtitle": ParagraphStyle("CatalogSubtitle", parent=base["Normal"], fontSize=10,
                                   textColor=colors.Color(100 / 255, 100 / 255, 100 / 255)),
        "category": ParagraphStyle("CatalogCategory", parent=base["Heading2"], fontSize=14, leading=18,
                                   textColor=colors.black, spaceBefore=8, spaceAfter=4),
        "subcategory": ParagraphStyle("CatalogSubcategory", parent=base["Heading3"], fontSize=12, leading=15,
                                      textColor=colors.Color(50 / 255, 50 / 255, 50 / 255),
                                      spaceBefore=2, spaceAfter=3),
        "cell": ParagraphStyle("CatalogCell", parent=base["Normal"], fontSize=8, leading=10),
        "header": ParagraphStyle("CatalogHeader", parent=base["Normal"], fontName="Helvetica-Bold",
                                 fontSize=8, leading=10),
    }


TABLE_STYLE = TableStyle([
    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ("BACKGROUND", (0, 0), (-1, 0), colors.Color(230 / 255, 230 / 255, 230 / 255)),
    ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ("LEFTPADDING", (0, 0), (-1, -1), 3),
    ("RIGHTPADDING", (0, 0), (-1, -1), 3),
    ("TOPPADDING", (0, 0), (-1, -1), 2),
    ("BOTTOMPADDING", (0, 0), (-1, -1), 2),
])


def _build_story(categories: list[Category], width: float) -> list:
    styles = _styles()
    story = [
        Paragraph(escape(DOCUMENT_TITLE), styles["title"]),
        Paragraph(escape(DOCUMENT_SUBTITLE), styles["subtitle"]),
        Spacer(1, 4 * mm),
    ]
    for category in categories:
        story.append(Paragraph(escape(category.name), styles["category"]))
        for sub in category.subcategories:
            story.append(Paragraph(escape(f"- {sub.name}"), styles["subcategory"]))
            rows = [[Paragraph(escape(h), styles["header"]) for h in TABLE_HEADER]]
            rows.extend(
                [Paragraph(escape(m.name), styles["cell"]), Paragraph(escape(m.details), styles["cell"])]
                for m in sub.materials
            )
            table = Table(rows, colWidths=[TOPIC_COLUMN_WIDTH, width - TOPIC_COLUMN_WIDTH], repeatRows=1)
            table.setStyle(TABLE_STYLE)
            story.append(table)
            story.append(Spacer(1, 5 * mm))
    return story


def render_document(categories: list[Category]) -> bytes:
    """Render the catalog as an A4 PDF; the same input always gives the same bytes."""
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=MARGIN,
        rightMargin=MARGIN,
        topMargin=MARGIN,
        bottomMargin=MARGIN,
        title=DOCUMENT_TITLE,
        invariant=1,
    )
    doc.build(_build_story(categories, doc.width))
    return buffer.getvalue()


def export_catalog(categories: list[Category], path: str | Path = DEFAULT_EXPORT_NAME) -> Path:
    """Write the rendered PDF to ``path`` and return it."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(render_document(categories))
    logger.info("Exported %d categories to %s", len(categories), path)
    return path
