import pytest

from trackball_forge import models
from trackball_forge.models import bottom_case, top_case


def test_both_halves_registered():
    assert set(models.REGISTRY) == {"top_case", "bottom_case"}
    assert models.REGISTRY["top_case"] is top_case.make_model
    assert models.REGISTRY["bottom_case"] is bottom_case.make_model


def test_private_and_csg_modules_are_skipped():
    assert "geom" not in models.REGISTRY
    assert "_helpers" not in models.REGISTRY


@pytest.mark.parametrize("slug,expected", [
    ("top_case", "top_case"),
    ("top-case", "top_case"),
    ("Top-Case", "top_case"),
    (" lid ", "top_case"),
    ("bottom_case", "bottom_case"),
    ("bottom-case", "bottom_case"),
    ("base", "bottom_case"),
])
def test_resolve(slug, expected):
    assert models.resolve(slug) == expected


@pytest.mark.parametrize("slug", [None, "", "middle_case", "assembly"])
def test_resolve_unknown(slug):
    assert models.resolve(slug) is None
    assert models.get_builder(slug) is None
    assert models.get_svg_builder(slug) is None


def test_svg_builders():
    assert models.get_svg_builder("lid") is top_case.make_svg
    # no plan view for the lower half
    assert models.get_svg_builder("bottom_case") is None
