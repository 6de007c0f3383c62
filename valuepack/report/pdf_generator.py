"""
PDF report generator using ReportLab.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import (
    Image,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from valuepack.core.result import PackingResult
from valuepack.models.container import Container
from valuepack.models.item import Item

# Layer grids wider than this are left out of the report; they would not fit the page.
MAX_LAYER_COLUMNS = 40


def _build_table(data: Sequence[Sequence[str]], column_widths: Optional[Sequence[float]] = None) -> Table:
    table = Table(data, colWidths=column_widths)
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#F1F1F1")),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.HexColor("#333333")),
                ("ALIGN", (0, 0), (-1, -1), "LEFT"),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 10),
                ("BOTTOMPADDING", (0, 0), (-1, 0), 6),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#DDDDDD")),
            ]
        )
    )
    return table


def _input_table(container: Container, items: Sequence[Item], result: PackingResult) -> Table:
    headers = ["Parameter", "Value"]
    rows = [
        ("Container", container.name),
        ("Container Extents (x, y, z)", f"{container.size_x} x {container.size_y} x {container.size_z}"),
        ("Container Cells", f"{container.capacity:,}"),
        ("Objects Submitted", len(items)),
        ("Objects Too Large", ", ".join(result.excluded) or "None"),
        ("Total Submitted Value", f"{sum(item.value for item in items):,}"),
    ]
    data = [headers] + [[str(left), str(right)] for left, right in rows]
    return _build_table(data, column_widths=[70 * mm, 110 * mm])


def _metrics_table(result: PackingResult, cpsat_status: Optional[str]) -> Table:
    headers = ["Metric", "Value"]
    rows = [
        ("Best Value", f"{result.best:,}"),
        ("Objects Placed", len(result.selected)),
        ("Volume Utilisation (%)", f"{result.volume_utilisation_pct:.2f}"),
        ("Footprint Utilisation (%)", f"{result.footprint_utilisation_pct:.2f}"),
        ("Search Nodes", f"{result.stats.nodes:,}"),
        ("Bound Prunes", f"{result.stats.bound_prunes:,}"),
        ("Best-Value Improvements", result.stats.improvements),
    ]
    if cpsat_status is not None:
        rows.append(("CP-SAT Cross-check", cpsat_status))
    data = [headers] + [[str(left), str(right)] for left, right in rows]
    return _build_table(data, column_widths=[80 * mm, 100 * mm])


def _selected_table(result: PackingResult) -> Table:
    headers = ["Label", "Size (x, y, z)", "Value", "Origin (x, y, z)"]
    data: List[List[str]] = [headers]
    for item, placement in zip(result.selected, result.placements):
        data.append(
            [
                item.label,
                f"{item.size_x} x {item.size_y} x {item.size_z}",
                str(item.value),
                f"({placement.x}, {placement.y}, {placement.z})",
            ]
        )
    return _build_table(data, column_widths=[60 * mm, 50 * mm, 30 * mm, 50 * mm])


def _layer_table(layer: Sequence[Sequence[int]]) -> Table:
    """Rows are x, columns are y; cells show the name index or '.' when empty."""
    size_y = len(layer[0]) if layer else 0
    data: List[List[str]] = [["x \\ y"] + [str(y) for y in range(size_y)]]
    for x, row in enumerate(layer):
        data.append([str(x)] + ["." if cell < 0 else str(cell) for cell in row])
    return _build_table(data)


def generate_pdf_report(
    output_path: str | Path,
    container: Container,
    items: Sequence[Item],
    result: PackingResult,
    layout_images: Iterable[str | Path] = (),
    cpsat_status: Optional[str] = None,
) -> Path:
    """
    Generate a packing PDF report and return the output path.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    doc = SimpleDocTemplate(
        str(output_path),
        pagesize=landscape(A4),
        leftMargin=20 * mm,
        rightMargin=20 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
        title="Value Packing Report",
    )

    styles = getSampleStyleSheet()
    title_style = styles["Title"]
    subtitle_style = ParagraphStyle(
        "Subtitle",
        parent=styles["Heading2"],
        textColor=colors.HexColor("#2D5B88"),
    )

    story: list = [
        Paragraph("Value Packing Report", title_style),
        Spacer(1, 8 * mm),
        Paragraph("Input Summary", subtitle_style),
        Spacer(1, 4 * mm),
        _input_table(container, items, result),
        Spacer(1, 6 * mm),
        Paragraph("Search Performance", subtitle_style),
        Spacer(1, 4 * mm),
        _metrics_table(result, cpsat_status),
    ]

    if result.selected:
        story.extend(
            [
                Spacer(1, 6 * mm),
                Paragraph("Selected Objects", subtitle_style),
                Spacer(1, 4 * mm),
                _selected_table(result),
            ]
        )

    if result.names:
        legend = ", ".join(f"{index} = {name}" for index, name in enumerate(result.names))
        story.extend([Spacer(1, 6 * mm), Paragraph(f"Grid legend: {escape(legend)}", styles["Normal"])])

    if container.size_y <= MAX_LAYER_COLUMNS:
        for z, layer in enumerate(result.grid):
            story.extend(
                [
                    Spacer(1, 6 * mm),
                    Paragraph(f"Layer z = {z}", subtitle_style),
                    Spacer(1, 4 * mm),
                    _layer_table(layer),
                ]
            )

    for image_path in layout_images:
        image_path = Path(image_path)
        if image_path.exists():
            story.extend(
                [
                    Spacer(1, 6 * mm),
                    Paragraph(image_path.stem.replace("_", " ").title(), subtitle_style),
                    Spacer(1, 4 * mm),
                    Image(str(image_path), width=180 * mm, height=110 * mm),
                ]
            )

    doc.build(story)
    return output_path
