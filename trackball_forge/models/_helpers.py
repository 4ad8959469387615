from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

import numpy as np
import trimesh

logger = logging.getLogger(__name__)

# ---------------------------------------------------------
# Manifold3D: robust booleans; trimesh.boolean as fallback
# ---------------------------------------------------------
try:
    import manifold3d as m3d
    _HAS_MF = True
except ImportError:
    m3d = None  # type: ignore
    _HAS_MF = False


class GeometryError(RuntimeError):
    """No boolean engine could evaluate the solid."""


# ---------------------- Primitives ----------------------

def box(extents: Sequence[float]) -> trimesh.Trimesh:
    """Box centred on the origin. `extents=(x, y, z)` in mm."""
    return trimesh.creation.box(extents=np.asarray(extents, dtype=float))


def cylinder(radius: float, height: float, sections: int = 64) -> trimesh.Trimesh:
    """Cylinder centred on the origin, Z axis."""
    s = int(sections) if sections and sections > 3 else 32
    return trimesh.creation.cylinder(radius=float(radius), height=float(height), sections=s)


def sphere(radius: float, sections: int = 64) -> trimesh.Trimesh:
    """UV sphere centred on the origin; `sections` facets around the equator."""
    s = int(sections) if sections and sections > 3 else 32
    return trimesh.creation.uv_sphere(radius=float(radius), count=[max(s // 2, 4), s])


# ---------------------- Repair ----------------------

def repair(mesh: trimesh.Trimesh) -> trimesh.Trimesh:
    """Merge coincident vertices and drop unreferenced ones."""
    m = mesh.copy()
    m.merge_vertices()
    m.remove_unreferenced_vertices()
    return m


# ---------------------- Manifold3D bridges ----------------------

def _to_mf(mesh: trimesh.Trimesh):
    v = np.asarray(mesh.vertices, dtype=np.float32)
    f = np.asarray(mesh.faces, dtype=np.uint32)
    return m3d.Manifold(mesh=m3d.Mesh(vert_properties=v, tri_verts=f))


def _from_mf(manifold_obj) -> trimesh.Trimesh:
    mmesh = manifold_obj.to_mesh()
    v = np.asarray(mmesh.vert_properties, dtype=float)[:, :3]
    f = np.asarray(mmesh.tri_verts, dtype=np.int64)
    return repair(trimesh.Trimesh(vertices=v, faces=f, process=False))


# ---------------------- Booleans ----------------------

def _meshes(items: Iterable[trimesh.Trimesh] | trimesh.Trimesh) -> List[trimesh.Trimesh]:
    if isinstance(items, trimesh.Trimesh):
        items = [items]
    return [m for m in items if isinstance(m, trimesh.Trimesh) and len(m.vertices)]


def union(meshes: Iterable[trimesh.Trimesh]) -> trimesh.Trimesh:
    mlist = _meshes(meshes)
    if not mlist:
        return trimesh.Trimesh()
    if len(mlist) == 1:
        return mlist[0].copy()

    # A) Manifold3D
    if _HAS_MF:
        try:
            acc = None
            for msh in mlist:
                mm = _to_mf(msh)
                acc = mm if acc is None else (acc + mm)
            return _from_mf(acc)
        except Exception as e:
            logger.warning("manifold3d union failed (%s), falling back to trimesh.boolean", e)

    # B) trimesh.boolean
    try:
        res = trimesh.boolean.union(mlist)
    except Exception as e:
        raise GeometryError(f"union of {len(mlist)} solids failed: {e}") from e
    if not isinstance(res, trimesh.Trimesh) or not len(res.faces):
        raise GeometryError("union returned no geometry")
    return repair(res)


def difference(a: trimesh.Trimesh, cutters: Iterable[trimesh.Trimesh] | trimesh.Trimesh) -> trimesh.Trimesh:
    """`a` minus every cutter, as one aggregate subtraction."""
    blist = _meshes(cutters)
    if not blist:
        return a.copy()

    # A) Manifold3D: merge cutters, subtract once
    if _HAS_MF:
        try:
            mb = None
            for c in blist:
                mm = _to_mf(c)
                mb = mm if mb is None else (mb + mm)
            return _from_mf(_to_mf(a) - mb)
        except Exception as e:
            logger.warning("manifold3d difference failed (%s), falling back to trimesh.boolean", e)

    # B) trimesh.boolean
    try:
        res = trimesh.boolean.difference([a] + blist)
    except Exception as e:
        raise GeometryError(f"difference with {len(blist)} cutters failed: {e}") from e
    if not isinstance(res, trimesh.Trimesh) or not len(res.faces):
        raise GeometryError("difference returned no geometry")
    return repair(res)


__all__ = [
    "GeometryError",
    "box",
    "cylinder",
    "sphere",
    "repair",
    "union",
    "difference",
]
