# trackball_forge/models/top_case.py
# Upper shell: closed top plate, open bottom, ball opening, three button
# openings and four counterbored screw holes.
from __future__ import annotations

from typing import Any, List, Mapping

import shapely.geometry as sg
import trimesh
from shapely.ops import unary_union

from ..params import CaseParams, as_params
from .geom import Box, Cylinder, Difference, Solid

NAME = "top_case"
SLUGS = ["top-case", "top", "lid"]

# extra height so cutters pass cleanly through the faces they open
MARGIN = 1.0


def shell(p: CaseParams) -> Difference:
    """Outer box minus the inner box; the top plate is `wall_thickness` thick."""
    outer = Box((p.case_width, p.case_length, p.case_height), label="outer")
    # top of the cavity sits one wall below the top face, bottom runs out past the open side
    inner_h = p.internal_height + MARGIN
    inner_top = p.case_height / 2.0 - p.wall_thickness
    inner = Box((p.internal_width, p.internal_length, inner_h), label="cavity").translated(
        (0.0, 0.0, inner_top - inner_h / 2.0)
    )
    return Difference(outer, [inner])


def ball_opening(p: CaseParams) -> Cylinder:
    # 1 mm under the ball diameter on purpose: the ball must not fall through
    return Cylinder(
        p.ball_diameter - 1.0,
        p.case_height + 2 * MARGIN,
        label="ball_opening",
        sections=p.segments,
    )


def button_openings(p: CaseParams) -> List[Box]:
    s = p.button_hole_size
    return [
        Box((s, s, p.case_height + 2 * MARGIN), label=f"button_{name}").translated(pos)
        for name, pos in p.button_positions.items()
    ]


def screw_holes(p: CaseParams) -> List[Cylinder]:
    """Shaft plus counterbore at every pillar; the screw head ends flush with the top."""
    top = p.case_height / 2.0
    bore_h = p.screw_head_height + MARGIN
    out: List[Cylinder] = []
    for x, y in p.pillar_positions:
        out.append(
            Cylinder(p.screw_diameter, p.case_height + 2 * MARGIN,
                     label="screw_shaft", sections=p.segments).translated((x, y, 0.0))
        )
        out.append(
            Cylinder(p.screw_head_diameter, bore_h,
                     label="counterbore", sections=p.segments).translated(
                (x, y, top - p.screw_head_height + bore_h / 2.0)
            )
        )
    return out


def build(params: CaseParams | Mapping[str, Any] | None = None) -> Solid:
    p = as_params(params)
    cutters: List[Solid] = [ball_opening(p)]
    cutters += button_openings(p)
    cutters += screw_holes(p)
    return Difference(shell(p), cutters)


def make_model(params: CaseParams | Mapping[str, Any] | None = None) -> trimesh.Trimesh:
    mesh = build(params).to_mesh()
    mesh.metadata["name"] = NAME
    mesh.metadata["unit"] = "mm"
    return mesh


# ---------------------- SVG (top-view drill template) ----------------------

def _circle(x: float, y: float, d: float, resolution: int = 32) -> sg.Polygon:
    return sg.Point(x, y).buffer(d / 2.0, resolution=resolution)


def make_svg(params: CaseParams | Mapping[str, Any] | None = None, stroke: float = 0.2) -> str:
    """
    Plan view of the top plate in mm, origin on the ball axis.

    Through cuts are subtracted from the outline; counterbores are drawn
    dashed since they do not go through the plate. Meant for checking hole
    positions against a printed part or a PCB.
    """
    p = as_params(params)
    L, W = p.case_width, p.case_length

    through: List[sg.Polygon] = [_circle(0.0, 0.0, p.ball_diameter - 1.0)]
    s = p.button_hole_size / 2.0
    for x, y, _ in p.button_positions.values():
        through.append(sg.box(x - s, y - s, x + s, y + s))
    for x, y in p.pillar_positions:
        through.append(_circle(x, y, p.screw_diameter))

    plate = sg.box(-L / 2.0, -W / 2.0, L / 2.0, W / 2.0).difference(unary_union(through))

    def path_from_polygon(poly: sg.Polygon) -> str:
        # SVG Y grows downwards
        rings = [poly.exterior] + list(poly.interiors)
        return " ".join(
            "M " + " L ".join(f"{x:.3f},{-y:.3f}" for x, y in ring.coords) + " Z"
            for ring in rings
        )

    if isinstance(plate, sg.MultiPolygon):
        d = " ".join(path_from_polygon(g) for g in plate.geoms)
    else:
        d = path_from_polygon(plate)

    bores = "".join(
        f'<circle cx="{x:.3f}" cy="{-y:.3f}" r="{p.screw_head_diameter / 2.0:.3f}" '
        f'stroke-dasharray="1,1" />'
        for x, y in p.pillar_positions
    )
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" '
        f'width="{L:.3f}mm" height="{W:.3f}mm" viewBox="{-L/2:.3f} {-W/2:.3f} {L:.3f} {W:.3f}">'
        f'<g fill="none" stroke="black" stroke-width="{stroke}">'
        f'<path d="{d}" fill-rule="evenodd"/>{bores}</g>'
        f"</svg>"
    )


BUILD = {"make": make_model, "build": build, "svg": make_svg}
__all__ = ["NAME", "SLUGS", "build", "make_model", "make_svg", "BUILD"]
