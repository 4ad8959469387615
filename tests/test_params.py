import dataclasses
import math

import pytest

from trackball_forge.params import DEFAULTS, DERIVED, CaseParams, ParameterError, as_params


def test_default_layout(params):
    assert params.ball_radius == 12.5
    assert params.case_floor_z == -20.0
    assert params.internal_width == 42.0
    assert params.internal_length == 55.0
    assert params.internal_height == 23.0
    assert params.case_width == 48.0
    assert params.case_length == 61.0
    assert params.case_height == 26.0
    assert params.pillar_x == 18.0
    assert params.pillar_y == 24.5


@pytest.mark.parametrize("wall", [1.5, 2.0, 3.0, 4.5])
@pytest.mark.parametrize("ball", [25.0, 34.0, 44.0])
def test_derivations_hold(wall, ball):
    p = CaseParams(wall_thickness=wall, ball_diameter=ball, bearing_holder_offset=ball * 0.35)
    assert p.case_floor_z == -(ball / 2) - p.sensor_thickness - p.clearance
    assert p.internal_width == p.mcu_width + 2 * p.button_body_size + 4 * p.padding
    assert p.internal_length == p.sensor_length / 2 + p.mcu_length + 2 * p.padding
    assert p.internal_height == -p.case_floor_z + wall
    assert p.case_height == p.internal_height + wall
    assert p.case_width == p.internal_width + 2 * wall
    assert p.case_length == p.internal_length + 2 * wall


def test_wall_thickness_shifts_heights_linearly(params):
    delta = 0.75
    thicker = params.replace(wall_thickness=params.wall_thickness + delta)
    assert thicker.internal_height - params.internal_height == pytest.approx(delta)
    assert thicker.case_height - params.case_height == pytest.approx(2 * delta)
    # floor does not depend on the wall
    assert thicker.case_floor_z == params.case_floor_z
    # re-deriving is idempotent
    assert thicker.replace(wall_thickness=params.wall_thickness) == params


def test_pillar_positions_cover_all_quadrants(params):
    signs = {(math.copysign(1, x), math.copysign(1, y)) for x, y in params.pillar_positions}
    assert signs == {(-1, -1), (-1, 1), (1, -1), (1, 1)}
    for x, y in params.pillar_positions:
        assert abs(x) == params.pillar_x
        assert abs(y) == params.pillar_y


def test_component_positions(params):
    assert params.sensor_position == (0.0, 0.0, -16.5)
    # sensor top sits `clearance` under the ball
    top = params.sensor_position[2] + params.sensor_thickness / 2
    assert top == pytest.approx(-params.ball_radius - params.clearance)

    mx, my, mz = params.mcu_position
    assert mx == 0.0
    assert my + params.mcu_length / 2 == params.internal_length / 2 - params.padding
    assert mz == params.case_floor_z + params.wall_thickness


def test_button_positions(params):
    b = params.button_positions
    assert set(b) == {"left", "center", "right"}
    sx, _, _ = params.sensor_position
    _, my, _ = params.mcu_position
    for x, y, z in b.values():
        assert y == my + params.mcu_length / 4
        assert z == 0.0
    assert b["center"][0] == sx
    assert b["left"][0] == -b["right"][0]
    assert b["right"][0] == params.mcu_width / 2 + params.padding + params.button_body_size / 2
    assert params.button_hole_size == params.button_body_size + params.clearance


def test_bearing_height(params):
    assert params.bearing_height == pytest.approx(-params.ball_radius * math.sqrt(2) / 2)


def test_is_immutable(params):
    with pytest.raises(dataclasses.FrozenInstanceError):
        params.wall_thickness = 5.0


def test_from_params_coerces_loose_input():
    p = CaseParams.from_params({
        "wall_thickness": "2,5",
        "ball-diameter": 34,
        "Padding": "4",
        "segments": "32",
        "not_a_dimension": "ignored",
        "clearance": None,
    })
    assert p.wall_thickness == 2.5
    assert p.ball_diameter == 34.0
    assert p.padding == 4.0
    assert p.segments == 32
    assert p.clearance == DEFAULTS["clearance"]


def test_from_params_empty_is_defaults():
    assert CaseParams.from_params(None) == CaseParams()
    assert CaseParams.from_params({}) == CaseParams()


@pytest.mark.parametrize("bad", [
    {"wall_thickness": "thick"},
    {"wall_thickness": -1},
    {"ball_diameter": 0},
    {"padding": float("nan")},
    {"segments": 4},
    {"segments": "12.5"},
    {"clearance": True},
    {"screw_head_diameter": 3.0},
])
def test_from_params_rejects(bad):
    with pytest.raises(ParameterError):
        CaseParams.from_params(bad)


def test_parameter_error_is_value_error():
    with pytest.raises(ValueError):
        CaseParams(wall_thickness=-2)


def test_as_params_passes_instances_through(params):
    assert as_params(params) is params
    assert as_params({"padding": 2}).padding == 2.0


def test_as_dict_includes_derived(params):
    d = params.as_dict()
    for name in DERIVED:
        assert name in d
    assert d["case_height"] == params.case_height
    assert d["wall_thickness"] == params.wall_thickness


def test_buttons_follow_the_sensor_and_mcu(params):
    # sensor board never moves off the ball axis, so shift the MCU instead
    longer = params.replace(mcu_length=params.mcu_length + 4.0)
    for name in ("left", "center", "right"):
        x0, y0, _ = params.button_positions[name]
        x1, y1, _ = longer.button_positions[name]
        assert x1 == x0
        mcu_shift = longer.mcu_position[1] - params.mcu_position[1]
        assert y1 - y0 == pytest.approx(mcu_shift + 1.0)
    assert longer.button_positions["center"][0] == longer.sensor_position[0]
