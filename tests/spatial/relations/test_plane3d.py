import math
import pytest
from spatial.algebra.vector import Vector3
from spatial.errors import DegenerateGeometryError
from spatial.relations.plane import Plane3D, PlaneSide


def vec(x, y, z):
    return Vector3(x=x, y=y, z=z)


class TestPlane3D:
    def test_create_plane(self):
        plane = Plane3D(point=vec(0.0, 0.0, 2.0), normal=vec(0.0, 0.0, 5.0))
        assert plane.unit_normal == vec(0.0, 0.0, 1.0)
        assert plane.offset == 2.0

    def test_zero_normal(self):
        with pytest.raises(ValueError, match="Plane normal vector cannot be zero"):
            Plane3D(point=Vector3.zero(), normal=Vector3.zero())

    def test_from_three_points(self):
        plane = Plane3D.from_three_points(vec(0.0, 0.0, 1.0), vec(1.0, 0.0, 1.0), vec(0.0, 1.0, 1.0))
        assert plane.unit_normal == vec(0.0, 0.0, 1.0)
        assert plane.contains_point(vec(5.0, -3.0, 1.0))

    def test_from_collinear_points(self):
        with pytest.raises(DegenerateGeometryError, match="collinear"):
            Plane3D.from_three_points(vec(0.0, 0.0, 0.0), vec(1.0, 1.0, 1.0), vec(2.0, 2.0, 2.0))

    def test_distances(self):
        plane = Plane3D(point=Vector3.zero(), normal=vec(0.0, 0.0, 2.0))
        assert plane.signed_distance_to(vec(1.0, 1.0, 3.0)) == 3.0
        assert plane.signed_distance_to(vec(1.0, 1.0, -3.0)) == -3.0
        assert plane.distance_to(vec(1.0, 1.0, -3.0)) == 3.0
        assert plane.project_point(vec(1.0, 2.0, -3.0)) == vec(1.0, 2.0, 0.0)

    def test_side_of(self):
        plane = Plane3D(point=Vector3.zero(), normal=vec(1.0, 0.0, 0.0))
        assert plane.side_of(vec(1.0, 0.0, 0.0)) is PlaneSide.POSITIVE
        assert plane.side_of(vec(-1.0, 0.0, 0.0)) is PlaneSide.NEGATIVE
        assert plane.side_of(vec(0.0, 7.0, 0.0)) is PlaneSide.ON_PLANE
        assert plane.side_of(vec(0.01, 0.0, 0.0), tolerance=0.1) is PlaneSide.ON_PLANE

    def test_parallel_and_angle(self):
        xy = Plane3D(point=Vector3.zero(), normal=vec(0.0, 0.0, 1.0))
        assert xy.is_parallel(Plane3D(point=vec(0.0, 0.0, 4.0), normal=vec(0.0, 0.0, -3.0)))
        tilted = Plane3D(point=Vector3.zero(), normal=vec(0.0, 1.0, 1.0))
        assert xy.angle_to(tilted) == pytest.approx(math.pi / 4)
