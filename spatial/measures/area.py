# spatial/measures/area.py
"""Planar polygon area in 3D and the distance of a point from a polygon's plane."""
import logging
from typing import List, Optional, Sequence, Tuple
from spatial.algebra.vector import Vector3
from spatial.constants import Tolerances, resolve_tolerances
from spatial.errors import DegenerateGeometryError, ensure_finite_result
from spatial.measures.results import PointToPlaneResult, PolygonAreaResult, ProjectionPlane

logger = logging.getLogger(__name__)


def plane_normal(points: Sequence[Vector3], tolerance: float) -> Vector3:
    """
    Normal (not normalized) of the plane through a point list.

    Uses the edge p1 − p0 and the first later point pk whose edge pk − p0 is
    not parallel to it, so leading collinear vertices do not make a valid
    polygon look degenerate.

    Raises:
        DegenerateGeometryError: With fewer than 3 points, or if all points are collinear
    """
    if len(points) < 3:
        raise DegenerateGeometryError("At least 3 points are required to define a plane")

    origin = points[0]
    first_edge = points[1] - origin
    for point in points[2:]:
        normal = first_edge.cross(point - origin)
        if not normal.is_zero(tolerance):
            return normal
    raise DegenerateGeometryError("Points are collinear, cannot define a plane")


def _projection_axes(normal: Vector3) -> Tuple[ProjectionPlane, float]:
    """Pick the coordinate plane the polygon covers best, with the matching normal component."""
    ax, ay, az = abs(normal.x), abs(normal.y), abs(normal.z)
    if az >= ax and az >= ay:
        return ProjectionPlane.XY, az
    if ay >= ax:
        return ProjectionPlane.XZ, ay
    return ProjectionPlane.YZ, ax


def _projected(point: Vector3, plane: ProjectionPlane) -> Tuple[float, float]:
    if plane is ProjectionPlane.XY:
        return point.x, point.y
    if plane is ProjectionPlane.XZ:
        return point.x, point.z
    return point.y, point.z


def polygon_area_3d(points: Sequence[Vector3], tolerances: Optional[Tolerances] = None) -> PolygonAreaResult:
    """
    Area of a planar polygon given by its vertices in order.

    The polygon is projected onto the coordinate plane with the largest
    normal component, its shoelace area computed there, and the result
    scaled back by |n| / |n_k| to undo the projection.

    Args:
        points: Polygon vertices in boundary order (not repeated at the end)

    Returns:
        PolygonAreaResult with the area, unit normal and projection plane

    Raises:
        DegenerateGeometryError: For fewer than 3 points or collinear points
    """
    tol = resolve_tolerances(tolerances)
    points = list(points)
    normal = plane_normal(points, tol.zero_vector)
    plane, component = _projection_axes(normal)

    # Coordinates relative to the first vertex keep the shoelace sum well conditioned
    origin = points[0]
    coords: List[Tuple[float, float]] = [_projected(point - origin, plane) for point in points]
    twice_area = 0.0
    for i in range(len(coords)):
        u1, v1 = coords[i]
        u2, v2 = coords[(i + 1) % len(coords)]
        twice_area += u1 * v2 - u2 * v1

    area = ensure_finite_result(abs(twice_area) * normal.magnitude / (2.0 * component), "Polygon area")
    logger.debug(f"Polygon of {len(points)} vertices projected on {plane.value}: area {area}")
    return PolygonAreaResult(area=area, normal=normal.normalize(tol.zero_vector), projection_plane=plane)


def point_to_plane_distance(point: Vector3, plane_points: Sequence[Vector3],
                            tolerances: Optional[Tolerances] = None) -> PointToPlaneResult:
    """
    Distance of a point from the plane through ``plane_points``.

    Raises:
        DegenerateGeometryError: For fewer than 3 plane points or collinear plane points
    """
    tol = resolve_tolerances(tolerances)
    plane_points = list(plane_points)
    unit_normal = plane_normal(plane_points, tol.zero_vector).normalize(tol.zero_vector)
    distance = abs((point - plane_points[0]).dot(unit_normal))
    return PointToPlaneResult(distance=distance, normal=unit_normal)
