"""Tests for the figure, the PDF report and the Streamlit input helpers."""
import pytest

from valuepack.core.solver_branch_bound import solve
from valuepack.core.utils_geometry import Placement, footprint_coverage
from valuepack.main import objects_from_rows
from valuepack.models.container import Container
from valuepack.report.pdf_generator import generate_pdf_report
from valuepack.visualization.layout_plot import packing_figure


class TestPackingFigure:
    def test_trace_count(self, demo_items, demo_container):
        result = solve(demo_items, demo_container)
        fig = packing_figure(result, demo_container)
        # wireframe + (mesh, outline) per placed object
        assert len(fig.data) == 1 + 2 * len(result.selected)
        assert "21" in fig.layout.title.text

    def test_mesh_covers_placement(self, demo_items, demo_container):
        result = solve(demo_items, demo_container)
        fig = packing_figure(result, demo_container)
        mesh = fig.data[1]
        assert mesh.name == "C"
        assert (min(mesh.x), max(mesh.x)) == (0, 1)
        assert (min(mesh.y), max(mesh.y)) == (0, 2)
        assert (min(mesh.z), max(mesh.z)) == (0, 2)

    def test_empty_result(self):
        container = Container(2, 2, 2)
        fig = packing_figure(solve([], container), container)
        assert len(fig.data) == 1


class TestPdfReport:
    def test_writes_pdf(self, tmp_path, demo_items, demo_container):
        result = solve(demo_items, demo_container)
        path = generate_pdf_report(
            tmp_path / "out" / "report.pdf",
            container=demo_container,
            items=demo_items,
            result=result,
            layout_images=[tmp_path / "missing.png"],
            cpsat_status="OPTIMAL (value 21)",
        )
        assert path.exists()
        assert path.read_bytes().startswith(b"%PDF")

    def test_empty_solution(self, tmp_path):
        container = Container(1, 1, 1)
        path = generate_pdf_report(tmp_path / "empty.pdf", container=container, items=[], result=solve([], container))
        assert path.stat().st_size > 0


class TestFootprintCoverage:
    def test_overlapping_columns_counted_once(self):
        placements = [
            Placement(0, 0, 0, (1, 2, 1), 0),
            Placement(0, 0, 1, (1, 2, 1), 1),
            Placement(1, 0, 0, (1, 1, 1), 2),
        ]
        assert footprint_coverage(placements, 2, 2) == pytest.approx(75.0)

    def test_empty(self):
        assert footprint_coverage([], 2, 2) == 0.0


class TestObjectsFromRows:
    def test_editor_floats_become_ints(self):
        rows = [{"label": "A", "size_x": 2.0, "size_y": 1, "size_z": 1.0, "value": 4.0}]
        items = objects_from_rows(rows)
        assert items[0].dimensions == (2, 1, 1)
        assert items[0].value == 4

    def test_blank_rows_skipped_and_labels_defaulted(self):
        rows = [
            {"label": None, "size_x": None, "size_y": None, "size_z": None, "value": None},
            {"label": "", "size_x": 1, "size_y": 1, "size_z": 1, "value": 2},
        ]
        items = objects_from_rows(rows)
        assert [item.label for item in items] == ["Object 2"]

    def test_fractional_size_rejected(self):
        rows = [{"label": "A", "size_x": 1.5, "size_y": 1, "size_z": 1, "value": 1}]
        with pytest.raises(ValueError, match="row 1: size_x must be an integer"):
            objects_from_rows(rows)

    def test_missing_cell_rejected(self):
        rows = [{"label": "A", "size_x": float("nan"), "size_y": 1, "size_z": 1, "value": 1}]
        with pytest.raises(ValueError, match="row 1: size_x is empty"):
            objects_from_rows(rows)
