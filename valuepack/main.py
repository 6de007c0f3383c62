"""
Streamlit entrypoint for the value packing demo.
"""

from __future__ import annotations

import json
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

import streamlit as st

# Add parent directory to path to allow imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from valuepack.cli import format_layers
from valuepack.core.result import PackingResult
from valuepack.core.solver_branch_bound import SolverSettings, solve
from valuepack.core.solver_cpsat import max_value_cpsat
from valuepack.models.container import Container
from valuepack.models.item import ITEM_FIELDS, Item
from valuepack.report.pdf_generator import generate_pdf_report
from valuepack.visualization import layout_plot

BASE_DIR = Path(__file__).resolve().parent
CONFIG_DIR = BASE_DIR / "config"


@st.cache_data
def load_json_config(filename: str) -> Dict[str, Any]:
    with open(CONFIG_DIR / filename, "r", encoding="utf-8") as file:
        return json.load(file)


def _cell_to_int(name: str, row_number: int, value: Any) -> Any:
    # the editor hands back floats (and NaN for blanks) for numeric columns
    if isinstance(value, float):
        if value != value:
            raise ValueError(f"row {row_number}: {name} is empty")
        if value.is_integer():
            return int(value)
    return value


def objects_from_rows(rows: Sequence[Mapping[str, Any]]) -> List[Item]:
    """Turn edited table rows into items, skipping fully blank rows."""
    items: List[Item] = []
    for row_number, row in enumerate(rows, start=1):
        if all(row.get(key) in (None, "") for key in ITEM_FIELDS):
            continue
        record = {key: row.get(key) for key in ITEM_FIELDS}
        for key in ITEM_FIELDS[1:]:
            record[key] = _cell_to_int(key, row_number, record[key])
        if record["label"] in (None, ""):
            record["label"] = f"Object {row_number}"
        try:
            items.append(Item.from_dict(record))
        except ValueError as exc:
            raise ValueError(f"row {row_number}: {exc}") from exc
    return items


def build_container_inputs(container_templates: Dict[str, Any]) -> Container:
    with st.expander("Container", expanded=True):
        template_options = {value["name"]: value for value in container_templates.values()}
        template_names = list(template_options.keys())
        selected_template = st.selectbox(
            "Container Template",
            template_names,
            index=0,
            help="Select a predefined container or customise its extents below",
        )
        template = template_options[selected_template]

        st.markdown("**Extents (grid units)**")
        col1, col2, col3 = st.columns(3)
        size_x = col1.number_input("X", min_value=1, value=int(template["size_x"]), step=1, key=f"cx_{selected_template}")
        size_y = col2.number_input("Y", min_value=1, value=int(template["size_y"]), step=1, key=f"cy_{selected_template}")
        size_z = col3.number_input("Z", min_value=1, value=int(template["size_z"]), step=1, key=f"cz_{selected_template}")
        st.caption(f"Container Cells: {int(size_x) * int(size_y) * int(size_z):,}")

    return Container(size_x=int(size_x), size_y=int(size_y), size_z=int(size_z), name=selected_template)


def build_object_inputs(default_objects: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    with st.expander("Objects", expanded=True):
        st.caption("Each object keeps its orientation; extents are in grid units.")
        rows = st.data_editor(
            default_objects,
            num_rows="dynamic",
            use_container_width=True,
            key="objects_editor",
        )
    return list(rows)


def _render_results(results: Dict[str, Any]) -> None:
    container: Container = results["container"]
    result: PackingResult = results["result"]

    st.divider()
    st.markdown("## Optimisation Results")

    summary_cols = st.columns(4)
    summary_cols[0].metric("Best Value", result.best, help="Total value of the selected objects")
    summary_cols[1].metric("Objects Placed", len(result.selected))
    summary_cols[2].metric("Search Nodes", f"{result.stats.nodes:,}")
    summary_cols[3].metric("Bound Prunes", f"{result.stats.bound_prunes:,}")

    with st.expander("Utilisation", expanded=True):
        st.progress(result.volume_utilisation_pct / 100, text=f"Volume: {result.volume_utilisation_pct:.2f}%")
        st.progress(result.footprint_utilisation_pct / 100, text=f"Footprint: {result.footprint_utilisation_pct:.2f}%")
        if result.excluded:
            st.caption(f"**Too large for the container:** {', '.join(result.excluded)}")
        if results["cpsat_status"]:
            st.caption(f"**CP-SAT cross-check:** {results['cpsat_status']}")

    st.markdown("### Selected Objects")
    st.dataframe(
        [
            {**item.to_dict(), "x": placement.x, "y": placement.y, "z": placement.z}
            for item, placement in zip(result.selected, result.placements)
        ],
        use_container_width=True,
    )

    st.divider()
    st.markdown("## Visualizations")
    st.plotly_chart(results["figure"], use_container_width=True)
    with st.expander("Layer slices (rows x, columns y)"):
        st.code(format_layers(result) or "(empty)")

    st.divider()
    st.markdown("## Downloads")
    col1, col2 = st.columns(2)
    col1.download_button(
        label="Download Response JSON",
        data=json.dumps(result.to_dict(), indent=2),
        file_name="packing_response.json",
        mime="application/json",
        use_container_width=True,
    )
    col2.download_button(
        label="Download PDF Report",
        data=results["pdf_bytes"],
        file_name=f"packing_{container.size_x}x{container.size_y}x{container.size_z}.pdf",
        mime="application/pdf",
        use_container_width=True,
    )


def main() -> None:
    st.set_page_config(page_title="Value Packing Optimiser", layout="wide")
    st.title("Value Packing Optimisation")

    st.divider()

    container_templates = load_json_config("containers.json")
    demo_request = load_json_config("demo_request.json")

    with st.form("input_form"):
        container = build_container_inputs(container_templates)
        st.divider()
        rows = build_object_inputs(demo_request["objects"])
        st.divider()

        verify = st.checkbox(
            "Cross-check optimum with CP-SAT",
            value=False,
            help="Solve the same model with OR-Tools and compare the optimal value",
        )

        col1, col2, col3 = st.columns([1, 2, 1])
        with col2:
            submitted = st.form_submit_button("Run Optimisation", type="primary", use_container_width=True)

    if submitted:
        try:
            st.session_state.pop("results", None)
            items = objects_from_rows(rows)
            result = solve(items, container, SolverSettings())

            cpsat_status = None
            if verify:
                check = max_value_cpsat(items, container)
                cpsat_status = f"{check.status} (value {check.value})"
                if check.proven_optimal and check.value != result.best:
                    st.error(f"CP-SAT optimum {check.value} differs from search optimum {result.best}.")

            figure = layout_plot.packing_figure(result, container)

            with tempfile.TemporaryDirectory() as tmpdir:
                tmpdir_path = Path(tmpdir)
                layout_image = tmpdir_path / "packing_layout.png"
                layout_plot.save_figure_image(figure, layout_image)
                pdf_path = tmpdir_path / "packing_report.pdf"
                generate_pdf_report(
                    pdf_path,
                    container=container,
                    items=items,
                    result=result,
                    layout_images=[layout_image],
                    cpsat_status=cpsat_status,
                )
                pdf_bytes = pdf_path.read_bytes()

            st.session_state["results"] = {
                "container": container,
                "result": result,
                "figure": figure,
                "cpsat_status": cpsat_status,
                "pdf_bytes": pdf_bytes,
            }
            st.success("Optimisation completed.")
        except ValueError as exc:
            st.error(f"Invalid input: {exc}")

    results = st.session_state.get("results")
    if results:
        _render_results(results)


if __name__ == "__main__":
    main()
