# trackball_forge/params.py
"""
Case dimensions for the trackball enclosure.

Every length is in mm. The origin is the centre of the trackball: the
bottom case is modelled in that frame, the top case in its own print
frame centred on z = 0 (XY still on the ball axis).
"""
from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Tuple

Vec3 = Tuple[float, float, float]


class ParameterError(ValueError):
    """A case dimension is missing, non-numeric or out of range."""


def _num(x: Any) -> float:
    if isinstance(x, bool):
        raise ParameterError(f"expected a number, got {x!r}")
    if isinstance(x, (int, float)):
        return float(x)
    try:
        return float(str(x).strip().replace(",", "."))
    except ValueError:
        raise ParameterError(f"expected a number, got {x!r}") from None


@dataclass(frozen=True)
class CaseParams:
    # shell
    wall_thickness: float = 3.0
    padding: float = 3.0
    clearance: float = 0.5

    # M3 screws
    screw_diameter: float = 3.2
    screw_head_diameter: float = 6.0
    screw_head_height: float = 2.0
    pillar_diameter: float = 8.0

    # ball + static bearings
    ball_diameter: float = 25.0
    bearing_diameter: float = 3.0
    bearing_holder_offset: float = 8.85  # ~ ball_radius * sin(45°)

    # optical sensor board
    sensor_width: float = 21.0
    sensor_length: float = 32.0
    sensor_thickness: float = 7.0

    # microcontroller board
    mcu_width: float = 18.0
    mcu_length: float = 33.0
    mcu_thickness: float = 4.0

    # 6x6 tactile switches
    button_body_size: float = 6.0

    usb_width: float = 10.0
    usb_height: float = 5.0

    segments: int = 64

    def __post_init__(self) -> None:
        for f in fields(self):
            v = getattr(self, f.name)
            if f.name == "segments":
                if int(v) != v or v < 8:
                    raise ParameterError(f"segments must be an integer >= 8, got {v!r}")
                continue
            if not math.isfinite(v) or v <= 0:
                raise ParameterError(f"{f.name} must be > 0, got {v!r}")
        if self.screw_head_diameter <= self.screw_diameter:
            raise ParameterError("screw_head_diameter must be larger than screw_diameter")
        if self.screw_head_height >= self.wall_thickness + self.internal_height:
            raise ParameterError("screw_head_height must be smaller than the case height")

    # ------------------------------------------------------------------
    # construction

    @classmethod
    def from_params(cls, params: Mapping[str, Any] | None) -> "CaseParams":
        """Build from a loosely typed mapping (JSON body, CLI defines). Unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for k, v in (params or {}).items():
            key = str(k).strip().lower().replace("-", "_")
            if key not in known or v is None:
                continue
            val = _num(v)
            if key == "segments":
                if not val.is_integer():
                    raise ParameterError(f"segments must be an integer, got {v!r}")
                kwargs[key] = int(val)
            else:
                kwargs[key] = val
        return cls(**kwargs)

    def replace(self, **changes: Any) -> "CaseParams":
        return dataclasses.replace(self, **changes)

    # ------------------------------------------------------------------
    # derived layout

    @property
    def ball_radius(self) -> float:
        return self.ball_diameter / 2.0

    @property
    def case_floor_z(self) -> float:
        return -self.ball_radius - self.sensor_thickness - self.clearance

    @property
    def internal_width(self) -> float:
        return self.mcu_width + 2 * self.button_body_size + 4 * self.padding

    @property
    def internal_length(self) -> float:
        return self.sensor_length / 2.0 + self.mcu_length + 2 * self.padding

    @property
    def internal_height(self) -> float:
        return -self.case_floor_z + self.wall_thickness

    @property
    def case_width(self) -> float:
        return self.internal_width + 2 * self.wall_thickness

    @property
    def case_length(self) -> float:
        return self.internal_length + 2 * self.wall_thickness

    @property
    def case_height(self) -> float:
        return self.internal_height + self.wall_thickness

    @property
    def pillar_x(self) -> float:
        return self.internal_width / 2.0 - self.padding

    @property
    def pillar_y(self) -> float:
        return self.internal_length / 2.0 - self.padding

    @property
    def pillar_positions(self) -> Tuple[Tuple[float, float], ...]:
        return tuple(
            (sx * self.pillar_x, sy * self.pillar_y)
            for sx in (-1, 1)
            for sy in (-1, 1)
        )

    @property
    def sensor_position(self) -> Vec3:
        # sensor right under the ball, `clearance` below it
        return (0.0, 0.0, -self.ball_radius - self.clearance - self.sensor_thickness / 2.0)

    @property
    def mcu_position(self) -> Vec3:
        y = self.internal_length / 2.0 - self.padding - self.mcu_length / 2.0
        return (0.0, y, self.case_floor_z + self.wall_thickness)

    @property
    def button_hole_size(self) -> float:
        return self.button_body_size + self.clearance

    @property
    def button_positions(self) -> Dict[str, Vec3]:
        # centred on the sensor axis, a quarter MCU length behind the MCU centre
        sx, _, _ = self.sensor_position
        _, my, _ = self.mcu_position
        y = my + self.mcu_length / 4.0
        dx = self.mcu_width / 2.0 + self.padding + self.button_body_size / 2.0
        return {
            "left": (sx - dx, y, 0.0),
            "center": (sx, y, 0.0),
            "right": (sx + dx, y, 0.0),
        }

    @property
    def bearing_height(self) -> float:
        return -self.ball_radius * math.cos(math.radians(45.0))

    def as_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = dataclasses.asdict(self)
        for name in DERIVED:
            out[name] = getattr(self, name)
        return out


def as_params(params: "CaseParams | Mapping[str, Any] | None") -> CaseParams:
    return params if isinstance(params, CaseParams) else CaseParams.from_params(params)


DEFAULTS: Dict[str, Any] = {f.name: f.default for f in fields(CaseParams)}

TYPES: Dict[str, str] = {
    f.name: ("int" if f.name == "segments" else "float") for f in fields(CaseParams)
}

DERIVED = (
    "ball_radius",
    "case_floor_z",
    "internal_width",
    "internal_length",
    "internal_height",
    "case_width",
    "case_length",
    "case_height",
    "pillar_x",
    "pillar_y",
    "sensor_position",
    "mcu_position",
    "button_hole_size",
    "button_positions",
    "bearing_height",
)

__all__ = ["CaseParams", "ParameterError", "as_params", "DEFAULTS", "TYPES", "DERIVED", "Vec3"]
