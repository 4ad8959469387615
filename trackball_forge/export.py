# trackball_forge/export.py
"""Part -> file bytes (STL for printing, GLB preview, SVG template)."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, NamedTuple, Optional

import trimesh
from trimesh.visual import ColorVisuals

from .models import get_builder, get_svg_builder, resolve
from .params import CaseParams, as_params

logger = logging.getLogger(__name__)

FORMATS = ("stl", "glb", "svg")

PART_COLORS: Dict[str, List[int]] = {
    "top_case": [230, 230, 235, 255],     # light grey
    "bottom_case": [45, 45, 50, 255],     # dark grey
}
DEFAULT_COLOR = [210, 210, 210, 255]


class UnsupportedFormat(ValueError):
    pass


class Export(NamedTuple):
    slug: str
    data: bytes
    filename: str


def as_stl_bytes(mesh: trimesh.Trimesh) -> bytes:
    """Binary STL."""
    return mesh.export(file_type="stl")


def as_glb_bytes(mesh: trimesh.Trimesh, color: Optional[List[int]] = None) -> bytes:
    base = mesh.copy()
    base.visual = ColorVisuals(base, face_colors=color or DEFAULT_COLOR)
    scene = trimesh.Scene()
    scene.add_geometry(base, node_name=mesh.metadata.get("name", "part"))
    return scene.export(file_type="glb")


def render(
    part: Optional[str],
    params: CaseParams | Mapping[str, Any] | None = None,
    fmt: str = "stl",
) -> Optional[Export]:
    """
    Build `part` and encode it as `fmt`.

    Returns None when `part` is not a registered slug. Raises
    `UnsupportedFormat` for an unknown format or a part without a plan view
    (`svg`), `ParameterError` for bad dimensions and `GeometryError` when no
    boolean engine could evaluate the solid.
    """
    fmt = (fmt or "stl").strip().lower()
    if fmt not in FORMATS:
        raise UnsupportedFormat(f"format '{fmt}' not supported (use one of {', '.join(FORMATS)})")

    slug = resolve(part)
    if slug is None:
        return None
    p = as_params(params)

    if fmt == "svg":
        svg = get_svg_builder(slug)
        if svg is None:
            raise UnsupportedFormat(f"part '{slug}' has no SVG template")
        data = svg(p).encode("utf-8")
    else:
        logger.info("building %s (%s)", slug, fmt)
        mesh = get_builder(slug)(p)
        logger.info("%s: %d faces, watertight=%s", slug, len(mesh.faces), mesh.is_watertight)
        if fmt == "glb":
            data = as_glb_bytes(mesh, PART_COLORS.get(slug))
        else:
            data = as_stl_bytes(mesh)

    return Export(slug, data, f"{slug}.{fmt}")


__all__ = ["FORMATS", "PART_COLORS", "UnsupportedFormat", "Export", "as_stl_bytes", "as_glb_bytes", "render"]
