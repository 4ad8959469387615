import pytest

from trackball_forge.params import CaseParams


@pytest.fixture
def params():
    return CaseParams()


@pytest.fixture
def coarse():
    """Low facet count for tests that actually run the boolean engine."""
    pytest.importorskip("manifold3d")
    return CaseParams(segments=24)
