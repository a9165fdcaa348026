import math
import pytest
from spatial.algebra.coordinates import (
    CoordinateSystem,
    CylindricalCoord,
    SphericalCoord,
    cartesian_to_cylindrical,
    cartesian_to_spherical,
    convert_coordinates,
    cylindrical_to_cartesian,
    spherical_to_cartesian,
)
from spatial.algebra.vector import Vector3
from spatial.errors import UnsupportedVariantError


def assert_close(a, b, tolerance=1e-12):
    assert abs(a.x - b.x) <= tolerance
    assert abs(a.y - b.y) <= tolerance
    assert abs(a.z - b.z) <= tolerance


class TestSpherical:
    def test_round_trip(self, sample_vectors):
        for v in sample_vectors:
            assert_close(spherical_to_cartesian(cartesian_to_spherical(v)), v)

    def test_known_values(self):
        coord = cartesian_to_spherical(Vector3(x=0.0, y=2.0, z=0.0))
        assert coord.radius == pytest.approx(2.0)
        assert coord.theta == pytest.approx(math.pi / 2)
        assert coord.phi == pytest.approx(math.pi / 2)

    def test_large_radius(self):
        coord = cartesian_to_spherical(Vector3(x=0.0, y=0.0, z=1e200))
        assert coord.radius == 1e200
        assert coord.phi == 0.0

    def test_poles(self):
        assert cartesian_to_spherical(Vector3(x=0.0, y=0.0, z=3.0)).phi == 0.0
        assert cartesian_to_spherical(Vector3(x=0.0, y=0.0, z=-3.0)).phi == pytest.approx(math.pi)

    def test_negative_radius(self):
        with pytest.raises(ValueError):
            SphericalCoord(radius=-1.0, theta=0.0, phi=0.0)

    def test_non_finite(self):
        with pytest.raises(ValueError):
            SphericalCoord(radius=1.0, theta=float('nan'), phi=0.0)


class TestCylindrical:
    def test_round_trip(self, sample_vectors):
        for v in sample_vectors:
            assert_close(cylindrical_to_cartesian(cartesian_to_cylindrical(v)), v)

    def test_known_values(self):
        coord = cartesian_to_cylindrical(Vector3(x=-1.0, y=0.0, z=5.0))
        assert coord.radius == 1.0
        assert coord.theta == pytest.approx(math.pi)
        assert coord.z == 5.0

    def test_negative_radius(self):
        with pytest.raises(ValueError):
            CylindricalCoord(radius=-0.5, theta=0.0, z=0.0)


class TestConvertCoordinates:
    def test_identity_conversion(self):
        triple = Vector3(x=1.0, y=2.0, z=3.0)
        result = convert_coordinates(triple, "cartesian", "cartesian")
        assert result.converted == triple
        assert result.original == triple
        assert result.from_system is CoordinateSystem.CARTESIAN

    def test_cartesian_to_spherical(self):
        result = convert_coordinates(Vector3(x=0.0, y=0.0, z=2.0), CoordinateSystem.CARTESIAN, "spherical")
        assert result.converted == Vector3(x=2.0, y=0.0, z=0.0)
        assert result.to_system is CoordinateSystem.SPHERICAL

    def test_spherical_to_cylindrical(self):
        # On the equator the cylindrical radius equals the spherical radius
        result = convert_coordinates(Vector3(x=2.0, y=math.pi / 4, z=math.pi / 2), "spherical", "cylindrical")
        assert result.converted.x == pytest.approx(2.0)
        assert result.converted.y == pytest.approx(math.pi / 4)
        assert result.converted.z == pytest.approx(0.0, abs=1e-12)

    def test_cylindrical_to_spherical_round_trip(self):
        original = Vector3(x=3.0, y=-1.0, z=4.0)
        there = convert_coordinates(original, "cylindrical", "spherical").converted
        back = convert_coordinates(there, "spherical", "cylindrical").converted
        assert_close(back, original)

    def test_case_insensitive_tags(self):
        result = convert_coordinates(Vector3(x=1.0, y=0.0, z=0.0), "Cartesian", "CYLINDRICAL")
        assert result.converted == Vector3(x=1.0, y=0.0, z=0.0)

    def test_unknown_system(self):
        with pytest.raises(UnsupportedVariantError):
            convert_coordinates(Vector3(x=1.0, y=0.0, z=0.0), "polar", "cartesian")

    def test_negative_source_radius(self):
        with pytest.raises(ValueError):
            convert_coordinates(Vector3(x=-1.0, y=0.0, z=0.0), "spherical", "cartesian")
