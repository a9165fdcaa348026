import math
import pytest
from spatial.algebra.vector import Vector3
from spatial.constants import Tolerances
from spatial.errors import InvalidValueError
from spatial.shapes.intersections import aabb_aabb, ray_aabb, ray_cylinder, ray_sphere, sphere_sphere
from spatial.shapes.primitives import AABB, Cylinder, Ray, Sphere
from spatial.shapes.results import SphereRelation


def vec(x, y, z):
    return Vector3(x=x, y=y, z=z)


def ray(origin, direction):
    return Ray(origin=vec(*origin), direction=vec(*direction))


def box(low, high):
    return AABB(min_point=vec(*low), max_point=vec(*high))


UNIT_BOX = box((-1.0, -1.0, -1.0), (1.0, 1.0, 1.0))


class TestRaySphere:
    sphere = Sphere(center=vec(0.0, 0.0, 5.0), radius=1.0)

    def test_through_center(self):
        result = ray_sphere(ray((0, 0, 0), (0, 0, 1)), self.sphere)
        assert result.intersects
        assert result.distances == [4.0, 6.0]
        assert result.closest_distance == 4.0
        assert result.intersection_points == [vec(0.0, 0.0, 4.0), vec(0.0, 0.0, 6.0)]
        assert result.normals == [vec(0.0, 0.0, -1.0), vec(0.0, 0.0, 1.0)]

    def test_direction_length_does_not_change_distances(self):
        result = ray_sphere(ray((0, 0, 0), (0, 0, 10)), self.sphere)
        assert result.distances == [4.0, 6.0]

    def test_origin_inside(self):
        result = ray_sphere(ray((0, 0, 5), (0, 0, 1)), self.sphere)
        assert result.distances == [1.0]
        assert result.intersection_points == [vec(0.0, 0.0, 6.0)]

    def test_miss(self):
        result = ray_sphere(ray((0, 2, 0), (0, 0, 1)), self.sphere)
        assert not result.intersects
        assert result.hits == []
        assert result.closest_distance is None

    def test_sphere_behind_ray(self):
        assert not ray_sphere(ray((0, 0, 10), (0, 0, 1)), self.sphere).intersects

    def test_long_direction_vector(self):
        result = ray_sphere(ray((0, 0, 0), (0, 0, 1e200)), self.sphere)
        assert result.distances == [4.0, 6.0]

    def test_huge_radius(self):
        result = ray_sphere(ray((0, 0, 0), (0, 0, 1)), Sphere(center=Vector3.zero(), radius=1e200))
        assert result.distances == pytest.approx([1e200])
        assert result.normals == [vec(0.0, 0.0, 1.0)]

    def test_tangent_ray_has_single_hit(self):
        result = ray_sphere(ray((1, 0, 0), (0, 0, 1)), self.sphere)
        assert result.distances == [5.0]
        assert result.intersection_points == [vec(1.0, 0.0, 5.0)]
        assert result.normals == [vec(1.0, 0.0, 0.0)]


class TestRayCylinder:
    cylinder = Cylinder(center=Vector3.zero(), axis=vec(0.0, 0.0, 1.0), radius=1.0, height=2.0)

    def test_through_lateral_surface(self):
        result = ray_cylinder(ray((-5, 0, 0), (1, 0, 0)), self.cylinder)
        assert result.distances == pytest.approx([4.0, 6.0])
        assert result.normals == [vec(-1.0, 0.0, 0.0), vec(1.0, 0.0, 0.0)]

    def test_outside_height(self):
        assert not ray_cylinder(ray((-5, 0, 3), (1, 0, 0)), self.cylinder).intersects

    def test_parallel_to_axis(self):
        assert not ray_cylinder(ray((0.5, 0, -5), (0, 0, 1)), self.cylinder).intersects

    def test_miss(self):
        assert not ray_cylinder(ray((-5, 2, 0), (1, 0, 0)), self.cylinder).intersects

    def test_overflowing_radius(self):
        huge = Cylinder(center=Vector3.zero(), axis=vec(0.0, 0.0, 1.0), radius=1e200, height=1.0)
        with pytest.raises(InvalidValueError, match="not finite"):
            ray_cylinder(ray((0, 0, 0), (1, 0, 0)), huge)

    def test_hits_stay_within_height(self):
        result = ray_cylinder(ray((-5, 0, -1), (5, 0, 1)), self.cylinder)
        for point in result.intersection_points:
            assert abs(point.z) <= 1.0
            assert math.hypot(point.x, point.y) == pytest.approx(1.0)


class TestRayAABB:
    def test_through_box(self):
        result = ray_aabb(ray((-5, 0, 0), (1, 0, 0)), UNIT_BOX)
        assert result.distances == [4.0, 6.0]
        assert result.intersection_points == [vec(-1.0, 0.0, 0.0), vec(1.0, 0.0, 0.0)]
        assert result.normals == [vec(-1.0, 0.0, 0.0), vec(1.0, 0.0, 0.0)]

    def test_miss(self):
        assert not ray_aabb(ray((-5, 3, 0), (1, 0, 0)), UNIT_BOX).intersects

    def test_box_behind_ray(self):
        assert not ray_aabb(ray((5, 0, 0), (1, 0, 0)), UNIT_BOX).intersects

    def test_origin_inside(self):
        result = ray_aabb(ray((0, 0, 0), (1, 0, 0)), UNIT_BOX)
        assert result.distances == [1.0]
        assert result.normals == [vec(1.0, 0.0, 0.0)]

    def test_diagonal_entry_through_top_face(self):
        result = ray_aabb(ray((0, 0, 5), (0, 0, -1)), UNIT_BOX)
        assert result.distances == [4.0, 6.0]
        assert result.normals == [vec(0.0, 0.0, 1.0), vec(0.0, 0.0, -1.0)]


class TestAABBOverlap:
    def test_overlap(self):
        result = aabb_aabb(box((0, 0, 0), (2, 2, 2)), box((1, 1, 1), (3, 3, 3)))
        assert result.intersects
        assert result.overlap_min == vec(1.0, 1.0, 1.0)
        assert result.overlap_max == vec(2.0, 2.0, 2.0)
        assert result.overlap_center == vec(1.5, 1.5, 1.5)

    def test_disjoint(self):
        result = aabb_aabb(box((0, 0, 0), (2, 2, 2)), box((3, 3, 3), (4, 4, 4)))
        assert not result.intersects
        assert result.overlap_min is None
        assert result.overlap_center is None

    def test_touching_faces_overlap(self):
        result = aabb_aabb(box((0, 0, 0), (2, 2, 2)), box((2, 0, 0), (3, 2, 2)))
        assert result.intersects
        assert result.overlap_center == vec(2.0, 1.0, 1.0)

    def test_symmetric(self):
        first, second = box((0, 0, 0), (2, 2, 2)), box((1, -1, 1), (5, 1, 3))
        assert aabb_aabb(first, second) == aabb_aabb(second, first)


class TestSphereSphere:
    def sphere(self, center, radius):
        return Sphere(center=vec(*center), radius=radius)

    def test_intersecting(self):
        result = sphere_sphere(self.sphere((0, 0, 0), 1.0), self.sphere((1.5, 0, 0), 1.0))
        assert result.relation is SphereRelation.INTERSECTING
        assert result.intersects
        assert result.distance_between_centers == 1.5
        circle = result.intersection_circle
        assert circle.center.as_tuple() == pytest.approx((0.75, 0.0, 0.0))
        assert circle.radius == pytest.approx(math.sqrt(0.4375))
        assert circle.normal.as_tuple() == pytest.approx((1.0, 0.0, 0.0))

    @pytest.mark.parametrize("first, second, relation", [
        (((0, 0, 0), 1.0), ((3, 0, 0), 1.0), SphereRelation.SEPARATE),
        (((0, 0, 0), 1.0), ((2, 0, 0), 1.0), SphereRelation.EXTERNAL_TANGENT),
        (((0, 0, 0), 1.0), ((1.5, 0, 0), 1.0), SphereRelation.INTERSECTING),
        (((0, 0, 0), 2.0), ((1, 0, 0), 1.0), SphereRelation.INTERNAL_TANGENT),
        (((0, 0, 0), 3.0), ((0.5, 0, 0), 1.0), SphereRelation.ONE_INSIDE_OTHER),
    ])
    def test_argument_order_does_not_change_relation(self, first, second, relation):
        a, b = self.sphere(*first), self.sphere(*second)
        forward, backward = sphere_sphere(a, b), sphere_sphere(b, a)
        assert forward.relation is backward.relation is relation
        assert forward.intersects == backward.intersects
        assert forward.distance_between_centers == backward.distance_between_centers

    def test_intersection_circle_is_symmetric(self):
        forward = sphere_sphere(self.sphere((0, 0, 0), 1.0), self.sphere((1.5, 0, 0), 1.0))
        backward = sphere_sphere(self.sphere((1.5, 0, 0), 1.0), self.sphere((0, 0, 0), 1.0))
        assert backward.intersection_circle.center.as_tuple() == pytest.approx(forward.intersection_circle.center.as_tuple())
        assert backward.intersection_circle.radius == pytest.approx(forward.intersection_circle.radius)

    def test_separate(self):
        result = sphere_sphere(self.sphere((0, 0, 0), 1.0), self.sphere((3, 0, 0), 1.0))
        assert result.relation is SphereRelation.SEPARATE
        assert not result.intersects
        assert result.intersection_circle is None

    def test_external_tangent(self):
        result = sphere_sphere(self.sphere((0, 0, 0), 1.0), self.sphere((2, 0, 0), 1.0))
        assert result.relation is SphereRelation.EXTERNAL_TANGENT
        assert result.intersects
        assert result.intersection_circle is None

    def test_internal_tangent(self):
        result = sphere_sphere(self.sphere((0, 0, 0), 2.0), self.sphere((1, 0, 0), 1.0))
        assert result.relation is SphereRelation.INTERNAL_TANGENT
        assert result.intersects

    def test_one_inside_other(self):
        result = sphere_sphere(self.sphere((0, 0, 0), 3.0), self.sphere((0.5, 0, 0), 1.0))
        assert result.relation is SphereRelation.ONE_INSIDE_OTHER
        assert not result.intersects

    def test_tangency_band(self):
        first, second = self.sphere((0, 0, 0), 1.0), self.sphere((2.000001, 0, 0), 1.0)
        assert sphere_sphere(first, second).relation is SphereRelation.SEPARATE
        loose = Tolerances(tangency=1e-3)
        assert sphere_sphere(first, second, loose).relation is SphereRelation.EXTERNAL_TANGENT

    def test_huge_radii(self):
        result = sphere_sphere(self.sphere((0, 0, 0), 1e200), self.sphere((1.5e200, 0, 0), 1e200))
        assert result.relation is SphereRelation.INTERSECTING
        circle = result.intersection_circle
        assert circle.center.x == pytest.approx(0.75e200)
        assert circle.radius == pytest.approx(math.sqrt(0.4375) * 1e200)
