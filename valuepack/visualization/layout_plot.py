"""
Plotly-based 3D visualisation of a solved container packing.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence, Tuple

import plotly.graph_objects as go
import plotly.io as pio
from plotly.colors import qualitative

from valuepack.core.result import PackingResult
from valuepack.core.utils_geometry import Placement
from valuepack.models.container import Container

DEFAULT_COLOR_SEQUENCE = qualitative.Light24

# (0..7 vertex indices) two triangles per face, six faces
_PRISM_TRIANGLES_I = [0, 0, 4, 4, 0, 0, 3, 3, 0, 0, 1, 1]
_PRISM_TRIANGLES_J = [1, 2, 5, 6, 1, 5, 2, 6, 3, 7, 2, 6]
_PRISM_TRIANGLES_K = [2, 3, 6, 7, 5, 4, 6, 7, 7, 4, 6, 5]

_BOX_EDGES = [
    (0, 1),
    (1, 2),
    (2, 3),
    (3, 0),
    (4, 5),
    (5, 6),
    (6, 7),
    (7, 4),
    (0, 4),
    (1, 5),
    (2, 6),
    (3, 7),
]


def _prism_vertices(x: int, y: int, z: int, dx: int, dy: int, dz: int) -> Tuple[List[int], List[int], List[int]]:
    xs = [x, x + dx, x + dx, x, x, x + dx, x + dx, x]
    ys = [y, y, y + dy, y + dy, y, y, y + dy, y + dy]
    zs = [z, z, z, z, z + dz, z + dz, z + dz, z + dz]
    return xs, ys, zs


def _mesh_from_prism(placement: Placement, color: str, name: str, opacity: float = 0.85) -> go.Mesh3d:
    dx, dy, dz = placement.dims
    xs, ys, zs = _prism_vertices(placement.x, placement.y, placement.z, dx, dy, dz)
    return go.Mesh3d(
        x=xs,
        y=ys,
        z=zs,
        i=_PRISM_TRIANGLES_I,
        j=_PRISM_TRIANGLES_J,
        k=_PRISM_TRIANGLES_K,
        color=color,
        opacity=opacity,
        name=name,
        showlegend=True,
        flatshading=True,
        lighting=dict(ambient=0.7, diffuse=0.9, specular=0.1),
        hovertext=f"{name} @ ({placement.x}, {placement.y}, {placement.z}) size {dx}x{dy}x{dz}",
        hoverinfo="text",
    )


def _line_coords(vertices: Sequence[Tuple[int, int, int]]) -> Tuple[list, list, list]:
    x_coords: list = []
    y_coords: list = []
    z_coords: list = []
    for start, end in _BOX_EDGES:
        x_coords.extend([vertices[start][0], vertices[end][0], None])
        y_coords.extend([vertices[start][1], vertices[end][1], None])
        z_coords.extend([vertices[start][2], vertices[end][2], None])
    return x_coords, y_coords, z_coords


def _edge_trace(placement: Placement, color: str, name: str) -> go.Scatter3d:
    dx, dy, dz = placement.dims
    xs, ys, zs = _prism_vertices(placement.x, placement.y, placement.z, dx, dy, dz)
    x_coords, y_coords, z_coords = _line_coords(list(zip(xs, ys, zs)))
    return go.Scatter3d(
        x=x_coords,
        y=y_coords,
        z=z_coords,
        mode="lines",
        line=dict(color=color, width=2.5),
        name=name,
        showlegend=False,
        hoverinfo="skip",
    )


def _color_for_index(index: int) -> str:
    return DEFAULT_COLOR_SEQUENCE[index % len(DEFAULT_COLOR_SEQUENCE)]


def _container_wireframe(
    dx: int,
    dy: int,
    dz: int,
    name: str,
    color: str = "#4a5568",
) -> go.Scatter3d:
    vertices = [
        (0, 0, 0),
        (dx, 0, 0),
        (dx, dy, 0),
        (0, dy, 0),
        (0, 0, dz),
        (dx, 0, dz),
        (dx, dy, dz),
        (0, dy, dz),
    ]
    x_coords, y_coords, z_coords = _line_coords(vertices)
    return go.Scatter3d(
        x=x_coords,
        y=y_coords,
        z=z_coords,
        mode="lines",
        name=name,
        line=dict(color=color, width=4),
        showlegend=True,
        hoverinfo="skip",
    )


def _pack_geometry_traces(result: PackingResult) -> List[go.BaseTraceType]:
    """One filled prism and one black outline per placed item, coloured by name index."""
    traces: List[go.BaseTraceType] = []
    # names are ordered by item id, so this matches the grid's name indices
    name_order = sorted(placement.item_index for placement in result.placements)
    for placement, item in zip(result.placements, result.selected):
        name_index = name_order.index(placement.item_index)
        traces.append(_mesh_from_prism(placement, color=_color_for_index(name_index), name=item.label))
        traces.append(_edge_trace(placement, color="#000000", name=item.label))
    return traces


def packing_figure(result: PackingResult, container: Container) -> go.Figure:
    fig = go.Figure()
    fig.add_trace(
        _container_wireframe(
            container.size_x,
            container.size_y,
            container.size_z,
            name=container.name,
            color="#2d3748",
        )
    )
    for trace in _pack_geometry_traces(result):
        fig.add_trace(trace)

    axis_style = dict(
        backgroundcolor="#f2f5fb",
        gridcolor="#cbd5e0",
        zerolinecolor="#a0aec0",
    )
    fig.update_layout(
        title=f"Best packing (value {result.best})",
        scene=dict(
            xaxis_title="X",
            yaxis_title="Y",
            zaxis_title="Z",
            aspectmode="data",
            xaxis=dict(range=[0, container.size_x], **axis_style),
            yaxis=dict(range=[0, container.size_y], **axis_style),
            zaxis=dict(range=[0, container.size_z], **axis_style),
        ),
        paper_bgcolor="#f7f9fc",
        plot_bgcolor="#f7f9fc",
        legend=dict(
            bgcolor="rgba(255,255,255,0.8)",
            bordercolor="#cbd5e0",
            borderwidth=1,
        ),
        margin=dict(l=0, r=0, t=40, b=0),
    )
    return fig


def save_figure_image(fig: go.Figure, output_path: str | Path, width: int = 900, height: int = 650) -> None:
    """
    Persist a figure to disk as a static PNG using Kaleido.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    pio.write_image(fig, str(output_path), format="png", width=width, height=height, scale=2)
