# trackball_forge/models/geom.py
"""
Immutable CSG tree.

Leaves are primitives centred on their own origin and placed by a 4x4
transform; inner nodes are `Union` and `Difference`. Nothing is meshed
until `to_mesh()` is called, so layouts can be inspected (and tested)
without a boolean engine.
"""
from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Tuple

import numpy as np
import trimesh

from . import _helpers as h


@dataclass(frozen=True)
class Vec:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    def as_tuple(self): return (self.x, self.y, self.z)


def vec3(obj: Any) -> Vec:
    """Vec from a Vec or a 3-sequence."""
    if isinstance(obj, Vec):
        return obj
    tup = tuple(obj)
    if len(tup) != 3:
        raise ValueError(f"expected 3 coordinates, got {len(tup)}")
    return Vec(float(tup[0]), float(tup[1]), float(tup[2]))


def _identity() -> np.ndarray:
    return np.eye(4)


# ---------------------- Nodes ----------------------

class Solid:
    def leaves(self) -> Iterator["Primitive"]:
        raise NotImplementedError

    def to_mesh(self) -> trimesh.Trimesh:
        raise NotImplementedError

    def find(self, label: str) -> List["Primitive"]:
        """Every leaf carrying `label`, in build order."""
        return [p for p in self.leaves() if p.label == label]


class Primitive(Solid):
    label: str
    transform: np.ndarray

    def leaves(self) -> Iterator["Primitive"]:
        yield self

    def translated(self, v: Any) -> "Primitive":
        t = trimesh.transformations.translation_matrix(vec3(v).as_tuple())
        return dataclasses.replace(self, transform=t @ self.transform)

    def rotated_z(self, degrees: float) -> "Primitive":
        """Rotate about the global Z axis."""
        r = trimesh.transformations.rotation_matrix(math.radians(degrees), [0, 0, 1])
        return dataclasses.replace(self, transform=r @ self.transform)

    @property
    def center(self) -> Vec:
        return vec3(self.transform[:3, 3])

    def _base_mesh(self) -> trimesh.Trimesh:
        raise NotImplementedError

    def to_mesh(self) -> trimesh.Trimesh:
        m = self._base_mesh()
        m.apply_transform(self.transform)
        return m


@dataclass(frozen=True, eq=False)
class Box(Primitive):
    extents: Tuple[float, float, float]
    label: str = ""
    transform: np.ndarray = field(default_factory=_identity, repr=False)

    def _base_mesh(self) -> trimesh.Trimesh:
        return h.box(self.extents)


@dataclass(frozen=True, eq=False)
class Cylinder(Primitive):
    diameter: float
    height: float
    label: str = ""
    transform: np.ndarray = field(default_factory=_identity, repr=False)
    sections: int = 64

    @property
    def radius(self) -> float:
        return self.diameter / 2.0

    def _base_mesh(self) -> trimesh.Trimesh:
        return h.cylinder(self.radius, self.height, sections=self.sections)


@dataclass(frozen=True, eq=False)
class Sphere(Primitive):
    diameter: float
    label: str = ""
    transform: np.ndarray = field(default_factory=_identity, repr=False)
    sections: int = 64

    @property
    def radius(self) -> float:
        return self.diameter / 2.0

    def _base_mesh(self) -> trimesh.Trimesh:
        return h.sphere(self.radius, sections=self.sections)


@dataclass(frozen=True, eq=False)
class Union(Solid):
    children: Tuple[Solid, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))

    def leaves(self) -> Iterator[Primitive]:
        for c in self.children:
            yield from c.leaves()

    def to_mesh(self) -> trimesh.Trimesh:
        return h.union([c.to_mesh() for c in self.children])


@dataclass(frozen=True, eq=False)
class Difference(Solid):
    """`base` minus all `cutters` in one aggregate subtraction."""
    base: Solid
    cutters: Tuple[Solid, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "cutters", tuple(self.cutters))

    def leaves(self) -> Iterator[Primitive]:
        yield from self.base.leaves()
        for c in self.cutters:
            yield from c.leaves()

    def to_mesh(self) -> trimesh.Trimesh:
        return h.difference(self.base.to_mesh(), [c.to_mesh() for c in self.cutters])


__all__ = ["Vec", "vec3", "Solid", "Primitive", "Box", "Cylinder", "Sphere", "Union", "Difference"]
