# trackball_forge/models/bottom_case.py
# Lower shell: box and four screw pillars hollowed together, ball seat, three
# bearing sockets, sensor / MCU pockets, screw holes and the USB opening.
from __future__ import annotations

from typing import Any, List, Mapping

import trimesh

from ..params import CaseParams, as_params
from .geom import Box, Cylinder, Difference, Solid, Sphere, Union

NAME = "bottom_case"
SLUGS = ["bottom-case", "bottom", "base"]

BEARING_COUNT = 3
MARGIN = 1.0


def shell(p: CaseParams) -> Union:
    """Outer box from `case_floor_z` up by `internal_height`, joined with the four pillars."""
    zc = p.case_floor_z + p.internal_height / 2.0
    outer = Box((p.case_width, p.case_length, p.internal_height), label="outer").translated(
        (0.0, 0.0, zc)
    )
    pillars = [
        Cylinder(p.pillar_diameter, p.internal_height, label="pillar", sections=p.segments).translated(
            (x, y, zc)
        )
        for x, y in p.pillar_positions
    ]
    return Union([outer] + pillars)


def interior(p: CaseParams) -> Box:
    """Inner box raised one wall off the floor; open at the top."""
    zc = p.case_floor_z + p.internal_height / 2.0
    return Box((p.internal_width, p.internal_length, p.internal_height), label="cavity").translated(
        (0.0, 0.0, zc + p.wall_thickness)
    )


def ball_cavity(p: CaseParams) -> Sphere:
    return Sphere(p.ball_diameter, label="ball_cavity", sections=p.segments)


def bearing_cavities(p: CaseParams) -> List[Sphere]:
    """Three sockets 120° apart, 45° below the ball's equator."""
    seed = Sphere(p.bearing_diameter, label="bearing", sections=max(p.segments // 2, 16)).translated(
        (p.bearing_holder_offset, 0.0, p.bearing_height)
    )
    return [seed.rotated_z(i * 360.0 / BEARING_COUNT) for i in range(BEARING_COUNT)]


def component_pockets(p: CaseParams) -> List[Box]:
    sensor = Box(
        (p.sensor_width, p.sensor_length, p.sensor_thickness + p.clearance), label="sensor_pocket"
    ).translated(p.sensor_position)
    mcu = Box(
        (p.mcu_width, p.mcu_length, p.mcu_thickness + p.clearance), label="mcu_pocket"
    ).translated(p.mcu_position)
    return [sensor, mcu]


def screw_holes(p: CaseParams) -> List[Cylinder]:
    h = p.internal_height + 2 * MARGIN
    z = p.case_floor_z - MARGIN + h / 2.0
    return [
        Cylinder(p.screw_diameter, h, label="screw_shaft", sections=p.segments).translated((x, y, z))
        for x, y in p.pillar_positions
    ]


def usb_opening(p: CaseParams) -> Box:
    mx, _, mz = p.mcu_position
    y = p.internal_length / 2.0 + p.wall_thickness / 2.0  # rear wall mid-plane
    return Box(
        (p.usb_width, p.wall_thickness + p.clearance, p.usb_height), label="usb_opening"
    ).translated((mx, y, mz))


def build(params: CaseParams | Mapping[str, Any] | None = None) -> Solid:
    p = as_params(params)
    cutters: List[Solid] = [interior(p), ball_cavity(p)]
    cutters += bearing_cavities(p)
    cutters += component_pockets(p)
    cutters += screw_holes(p)
    cutters.append(usb_opening(p))
    return Difference(shell(p), cutters)


def make_model(params: CaseParams | Mapping[str, Any] | None = None) -> trimesh.Trimesh:
    mesh = build(params).to_mesh()
    mesh.metadata["name"] = NAME
    mesh.metadata["unit"] = "mm"
    return mesh


BUILD = {"make": make_model, "build": build}
__all__ = ["NAME", "SLUGS", "build", "make_model", "BUILD"]
