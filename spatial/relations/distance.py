# spatial/relations/distance.py
"""Point/line/plane distances and orthogonal projections."""
import logging
from typing import Optional
from spatial.algebra.vector import Vector3
from spatial.constants import Tolerances, resolve_tolerances
from spatial.relations.line import Line3D
from spatial.relations.plane import Plane3D, PlaneSide
from spatial.relations.results import (
    LinePlaneDistanceResult,
    PlaneProjectionResult,
    PointLineDistanceResult,
    PointPlaneDistanceResult,
    PointProjectionResult,
)
from spatial.relations.solver import line_plane

logger = logging.getLogger(__name__)


def point_line_distance(point: Vector3, line: Line3D,
                        tolerances: Optional[Tolerances] = None) -> PointLineDistanceResult:
    """
    Perpendicular distance from a point to an infinite line.

    The perpendicular vector runs from the closest point on the line to the
    point itself.
    """
    tol = resolve_tolerances(tolerances)
    t = line.project_point(point)
    closest = line.point_at(t)
    perpendicular = point - closest
    distance = perpendicular.magnitude
    return PointLineDistanceResult(
        distance=distance,
        closest_point_on_line=closest,
        parameter_on_line=t,
        perpendicular_vector=perpendicular,
        point_is_on_line=distance < tol.coincidence,
    )


def point_plane_distance(point: Vector3, plane: Plane3D,
                         tolerances: Optional[Tolerances] = None) -> PointPlaneDistanceResult:
    tol = resolve_tolerances(tolerances)
    signed = plane.signed_distance_to(point)
    side = plane.side_of(point, tol.coincidence)
    return PointPlaneDistanceResult(
        distance=abs(signed),
        signed_distance=signed,
        closest_point_on_plane=plane.project_point(point),
        point_is_on_plane=side is PlaneSide.ON_PLANE,
        side_of_plane=side,
    )


def line_plane_distance(line: Line3D, plane: Plane3D,
                        tolerances: Optional[Tolerances] = None) -> LinePlaneDistanceResult:
    """
    Distance between an infinite line and a plane.

    A line that is not parallel to the plane always meets it, so the
    distance is zero and both closest points are the intersection point.
    A parallel line keeps a constant separation; its base point and that
    point's projection are reported as the closest pair.
    """
    crossing = line_plane(line, plane, tolerances)

    if not crossing.line_is_parallel:
        point = crossing.intersection_point
        return LinePlaneDistanceResult(
            distance=0.0,
            line_is_parallel=False,
            line_intersects_plane=True,
            intersection_point=point,
            closest_point_on_line=point,
            closest_point_on_plane=point,
        )

    logger.debug(f"Line parallel to plane at distance {crossing.distance_to_plane}")
    return LinePlaneDistanceResult(
        distance=crossing.distance_to_plane,
        line_is_parallel=True,
        line_intersects_plane=crossing.intersects,
        intersection_point=crossing.intersection_point,
        closest_point_on_line=line.point,
        closest_point_on_plane=plane.project_point(line.point),
    )


def project_point_onto_line(point: Vector3, line: Line3D,
                            tolerances: Optional[Tolerances] = None) -> PointProjectionResult:
    tol = resolve_tolerances(tolerances)
    t = line.project_point(point)
    projected = line.point_at(t)
    distance = point.distance_to(projected)
    return PointProjectionResult(
        projected_point=projected,
        parameter_on_line=t,
        distance_to_projection=distance,
        is_on_line=distance < tol.coincidence,
    )


def project_point_onto_plane(point: Vector3, plane: Plane3D,
                             tolerances: Optional[Tolerances] = None) -> PlaneProjectionResult:
    """
    Orthogonal projection of a point onto a plane.

    ``projection_direction`` is the unit vector from the point towards the
    plane, or the zero vector when the point already lies on it.
    """
    tol = resolve_tolerances(tolerances)
    projected = plane.project_point(point)
    offset = projected - point
    distance = offset.magnitude
    on_plane = distance < tol.coincidence
    return PlaneProjectionResult(
        projected_point=projected,
        distance_to_projection=distance,
        is_on_plane=on_plane,
        projection_direction=Vector3.zero() if on_plane else offset.normalize(tol.zero_vector),
    )
