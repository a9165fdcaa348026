import pytest
from spatial.algebra.vector import Vector3
from spatial.relations.line import Line3D, Segment3D


def vec(x, y, z):
    return Vector3(x=x, y=y, z=z)


class TestLine3D:
    def test_create_line(self):
        line = Line3D(point=vec(1.0, 2.0, 3.0), direction=vec(0.0, 0.0, 2.0))
        assert line.point == vec(1.0, 2.0, 3.0)
        assert line.unit_direction == vec(0.0, 0.0, 1.0)

    def test_zero_direction(self):
        with pytest.raises(ValueError, match="Line direction vector cannot be zero"):
            Line3D(point=Vector3.zero(), direction=Vector3.zero())

    def test_point_at_and_projection(self):
        line = Line3D(point=vec(1.0, 0.0, 0.0), direction=vec(2.0, 0.0, 0.0))
        assert line.point_at(1.5) == vec(4.0, 0.0, 0.0)
        assert line.project_point(vec(5.0, 3.0, 0.0)) == 2.0
        assert line.closest_point_to(vec(5.0, 3.0, 0.0)) == vec(5.0, 0.0, 0.0)

    def test_distance_to_point(self):
        line = Line3D(point=Vector3.zero(), direction=vec(1.0, 0.0, 0.0))
        assert line.distance_to_point(vec(7.0, 3.0, 4.0)) == 5.0
        assert line.contains_point(vec(-2.0, 0.0, 0.0))
        assert not line.contains_point(vec(0.0, 0.1, 0.0))

    def test_is_parallel(self):
        line = Line3D(point=Vector3.zero(), direction=vec(1.0, 1.0, 0.0))
        assert line.is_parallel(Line3D(point=vec(0.0, 0.0, 5.0), direction=vec(-2.0, -2.0, 0.0)))
        assert not line.is_parallel(Line3D(point=Vector3.zero(), direction=vec(1.0, 0.0, 0.0)))


class TestSegment3D:
    def test_create_segment(self):
        segment = Segment3D(start=vec(0.0, 0.0, 0.0), end=vec(2.0, 3.0, 6.0))
        assert segment.length == 7.0
        assert segment.midpoint == vec(1.0, 1.5, 3.0)
        assert segment.direction_vector == vec(2.0, 3.0, 6.0)

    def test_zero_length(self):
        point = vec(1.0, 1.0, 1.0)
        with pytest.raises(ValueError):
            Segment3D(start=point, end=point)

    def test_to_line(self):
        segment = Segment3D(start=vec(1.0, 0.0, 0.0), end=vec(3.0, 0.0, 0.0))
        line = segment.to_line()
        assert line.point_at(0.0) == segment.start
        assert line.point_at(1.0) == segment.end

    def test_closest_parameter_is_clamped(self):
        segment = Segment3D(start=vec(0.0, 0.0, 0.0), end=vec(4.0, 0.0, 0.0))
        assert segment.closest_parameter(vec(1.0, 5.0, 0.0)) == 0.25
        assert segment.closest_parameter(vec(-3.0, 0.0, 0.0)) == 0.0
        assert segment.closest_parameter(vec(9.0, 1.0, 0.0)) == 1.0
        assert segment.closest_point_to(vec(9.0, 1.0, 0.0)) == vec(4.0, 0.0, 0.0)
