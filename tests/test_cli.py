"""End-to-end tests for the valuepack-solve command."""
import json
from pathlib import Path

import pytest

from valuepack.cli import format_layers, main
from valuepack.core.solver_branch_bound import solve
from valuepack.models.container import Container
from valuepack.models.item import Item

DEMO_REQUEST = Path(__file__).resolve().parent.parent / "valuepack" / "config" / "demo_request.json"


def test_solves_demo_request(tmp_path, capsys):
    out = tmp_path / "response.json"
    assert main([str(DEMO_REQUEST), "--output", str(out)]) == 0

    captured = capsys.readouterr().out
    assert "Best Value: 21" in captured
    response = json.loads(out.read_text(encoding="utf-8"))
    assert response["best"] == 21
    assert response["names"] == ["A", "B", "C", "D"]
    assert len(response["grid"]) == 3


def test_layers_flag(capsys):
    assert main([str(DEMO_REQUEST), "--layers"]) == 0
    captured = capsys.readouterr().out
    assert "z = 0\n2 2 .\n1 1 1\n. . .\n. . ." in captured


def test_invalid_request_exit_code(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"limit": {"size_x": 0, "size_y": 1, "size_z": 1}, "objects": []}), encoding="utf-8")
    assert main([str(bad)]) == 2


def test_max_cells_flag(tmp_path):
    assert main([str(DEMO_REQUEST), "--max-cells", "10"]) == 2


def test_verify_and_pdf(tmp_path, capsys):
    pdf = tmp_path / "report.pdf"
    assert main([str(DEMO_REQUEST), "--verify", "--pdf", str(pdf)]) == 0
    assert "CP-SAT Cross-check: OPTIMAL (value 21)" in capsys.readouterr().out
    assert pdf.read_bytes().startswith(b"%PDF")


def test_format_layers_pads_wide_indices():
    items = [Item(f"i{index}", 1, 1, 1, 1) for index in range(11)]
    result = solve(items, Container(11, 1, 1))
    rendered = format_layers(result)
    assert rendered.splitlines()[1] == " 0"
    assert rendered.splitlines()[-1] == "10"


def test_format_layers_empty():
    result = solve([], Container(1, 2, 1))
    assert format_layers(result) == "z = 0\n. ."


@pytest.mark.parametrize("argv", [[], ["--log-level", "LOUD", "x.json"]])
def test_bad_arguments(argv):
    with pytest.raises(SystemExit):
        main(argv)
