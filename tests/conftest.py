import pytest
from spatial.algebra.vector import Vector3


@pytest.fixture
def origin():
    return Vector3.zero()


@pytest.fixture
def unit_cube_points():
    """The eight corners of the unit cube."""
    return [
        Vector3(x=x, y=y, z=z)
        for x in (0.0, 1.0) for y in (0.0, 1.0) for z in (0.0, 1.0)
    ]


@pytest.fixture
def sample_vectors():
    """Deterministic vectors covering all octants, the axes and the origin."""
    return [
        Vector3(x=0.0, y=0.0, z=0.0),
        Vector3(x=1.0, y=0.0, z=0.0),
        Vector3(x=0.0, y=-2.0, z=0.0),
        Vector3(x=0.0, y=0.0, z=-2.0),
        Vector3(x=1.0, y=2.0, z=3.0),
        Vector3(x=-4.5, y=0.25, z=1.75),
        Vector3(x=3.0, y=-7.0, z=-0.5),
        Vector3(x=-0.001, y=-0.002, z=5.0),
    ]


@pytest.fixture
def sample_rotations():
    """(axis, angle) pairs, including non-unit axes and angles beyond 2π."""
    return [
        (Vector3(x=1.0, y=0.0, z=0.0), 0.3),
        (Vector3(x=0.0, y=2.0, z=0.0), -1.2),
        (Vector3(x=0.0, y=0.0, z=0.5), 3.14159),
        (Vector3(x=1.0, y=1.0, z=1.0), 2.0),
        (Vector3(x=-3.0, y=0.5, z=2.0), 7.5),
        (Vector3(x=0.2, y=-0.9, z=0.1), 0.0),
    ]
