# spatial/measures/volumes.py
import logging
import math
from typing import Optional, Sequence
from spatial.algebra.vector import Vector3
from spatial.constants import Tolerances, resolve_tolerances
from spatial.errors import (
    DegenerateGeometryError,
    OutOfRangeError,
    UnsupportedVariantError,
    ensure_finite,
    ensure_finite_result,
    parse_variant,
)
from spatial.measures.area import point_to_plane_distance, polygon_area_3d
from spatial.measures.hull import fan_volume, incremental_hull, signed_tetrahedron_volume
from spatial.measures.results import (
    BoundingBoxResult,
    BoxType,
    ConvexHullResult,
    HullMethod,
    TetrahedronVolumeResult,
    VolumeResult,
)
from spatial.shapes.primitives import AABB

logger = logging.getLogger(__name__)


def _non_negative(value: float, name: str) -> float:
    ensure_finite(value, name)
    if value < 0:
        raise OutOfRangeError(f"{name} cannot be negative, got {value}")
    return value


def tetrahedron_volume(a: Vector3, b: Vector3, c: Vector3, d: Vector3) -> TetrahedronVolumeResult:
    """Volume |AB · (AC × AD)| / 6 of the tetrahedron abcd."""
    signed = ensure_finite_result(signed_tetrahedron_volume(a, b, c, d), "Tetrahedron volume")
    return TetrahedronVolumeResult(
        volume=abs(signed),
        signed_volume=signed,
        calculation_method="Scalar triple product",
        points=[a, b, c, d],
    )


def pyramid_volume(base_points: Sequence[Vector3], apex: Vector3,
                   tolerances: Optional[Tolerances] = None) -> VolumeResult:
    """
    Volume (1/3) × base area × height of a pyramid over a planar polygon.

    Raises:
        DegenerateGeometryError: If the base has fewer than 3 points or is collinear
    """
    base_points = list(base_points)
    if len(base_points) < 3:
        raise DegenerateGeometryError("At least 3 points are required for the base")

    base_area = polygon_area_3d(base_points, tolerances).area
    height = point_to_plane_distance(apex, base_points, tolerances).distance
    return VolumeResult(
        volume=ensure_finite_result(base_area * height / 3.0, "Pyramid volume"),
        calculation_method="Pyramid formula: (1/3) × base_area × height",
    )


def sphere_volume(radius: float) -> VolumeResult:
    radius = _non_negative(radius, "Radius")
    return VolumeResult(
        volume=ensure_finite_result(4.0 / 3.0 * math.pi * radius * radius * radius, "Sphere volume"),
        calculation_method="Sphere formula: (4/3)πr³",
    )


def cylinder_volume(radius: float, height: float) -> VolumeResult:
    radius = _non_negative(radius, "Radius")
    height = _non_negative(height, "Height")
    return VolumeResult(
        volume=ensure_finite_result(math.pi * radius * radius * height, "Cylinder volume"),
        calculation_method="Cylinder formula: πr²h",
    )


def aabb_volume(aabb: AABB) -> VolumeResult:
    volume = ensure_finite_result(aabb.volume, "Box volume")
    return VolumeResult(volume=volume, calculation_method="Box formula: product of extents")


def bounding_box_volume(points: Sequence[Vector3], box_type: BoxType = BoxType.AABB) -> BoundingBoxResult:
    """
    Volume of the axis-aligned box enclosing a point cloud.

    A flat or single-point cloud gives a zero-extent box of volume 0.

    Raises:
        DegenerateGeometryError: If no points are given
        UnsupportedVariantError: For box types other than "aabb"
    """
    box_type = parse_variant(BoxType, box_type)
    if box_type is not BoxType.AABB:
        raise UnsupportedVariantError(f"Box type {box_type.value!r} is not supported; use 'aabb'")

    points = list(points)
    if not points:
        raise DegenerateGeometryError("At least one point is required")

    low = Vector3(x=min(p.x for p in points), y=min(p.y for p in points), z=min(p.z for p in points))
    high = Vector3(x=max(p.x for p in points), y=max(p.y for p in points), z=max(p.z for p in points))
    size = high - low
    return BoundingBoxResult(
        volume=ensure_finite_result(size.x * size.y * size.z, "Box volume"),
        box_type=box_type,
        min_point=low,
        max_point=high,
        dimensions=size,
        calculation_method="Axis-aligned extents of the point set",
    )


def convex_hull_volume(points: Sequence[Vector3], method: HullMethod = HullMethod.FAN,
                       tolerances: Optional[Tolerances] = None) -> ConvexHullResult:
    """
    Volume enclosed by a point cloud.

    Args:
        points: At least 4 points
        method: ``fan`` sums tetrahedra fanned from the first point over
            consecutive point pairs. This is only the hull volume when the
            points are already a convex fan around the first point, and the
            result is flagged as an approximation. ``incremental`` builds the
            true convex hull.

    Raises:
        DegenerateGeometryError: For fewer than 4 points, or (incremental)
            when the points do not span 3D space
    """
    tol = resolve_tolerances(tolerances)
    method = parse_variant(HullMethod, method)
    points = list(points)
    if len(points) < 4:
        raise DegenerateGeometryError("At least 4 points are required to form a 3D convex hull")

    if method is HullMethod.FAN:
        volume, count = fan_volume(points)
        logger.debug(f"Fan triangulation of {len(points)} points: {count} tetrahedra, volume {volume}")
        return ConvexHullResult(
            volume=ensure_finite_result(volume, "Hull volume"),
            method=method,
            calculation_method="Simplified tetrahedron triangulation",
            is_approximation=True,
            hull_points=points,
            num_tetrahedra=count,
        )

    hull = incremental_hull(points, tol)
    return ConvexHullResult(
        volume=ensure_finite_result(hull.volume, "Hull volume"),
        method=method,
        calculation_method="Incremental convex hull",
        is_approximation=False,
        hull_points=[points[i] for i in hull.vertex_indices],
        num_tetrahedra=len(hull.faces),
        num_faces=len(hull.faces),
    )
