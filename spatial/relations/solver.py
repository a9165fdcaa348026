# spatial/relations/solver.py
"""
Line/plane relationship solver.

Each function classifies the configuration first (parallel, coincident,
...) and only then solves the small linear system that the generic case
needs, so no solve is attempted on a singular system.
"""
import logging
import math
from typing import List, Optional, Sequence, Tuple
from spatial.algebra.matrix import Matrix3x3
from spatial.algebra.vector import Vector3
from spatial.constants import Tolerances, resolve_tolerances
from spatial.errors import DegenerateGeometryError
from spatial.relations.line import Line3D, Segment3D
from spatial.relations.plane import Plane3D
from spatial.relations.results import (
    BestFitResult,
    LineLineRelation,
    LineLineResult,
    LinePlaneRelation,
    LinePlaneResult,
    PlanePlaneRelation,
    PlanePlaneResult,
    SegmentIntersectionResult,
)

logger = logging.getLogger(__name__)


def _closest_parameters(line1: Line3D, line2: Line3D) -> Tuple[float, float]:
    """
    Parameters (t1, t2) of the mutually closest points of two non-parallel lines.

    Minimising |p1 + t1·d1 − p2 − t2·d2|² gives the 2x2 normal equations
        a·t1 − b·t2 = −d
        b·t1 − c·t2 = −e
    with a = d1·d1, b = d1·d2, c = d2·d2, d = d1·w, e = d2·w, w = p1 − p2.
    """
    d1, d2 = line1.direction, line2.direction
    w = line1.point - line2.point
    a = d1.dot(d1)
    b = d1.dot(d2)
    c = d2.dot(d2)
    d = d1.dot(w)
    e = d2.dot(w)
    denominator = a * c - b * b
    t1 = (b * e - c * d) / denominator
    t2 = (a * e - b * d) / denominator
    return t1, t2


def line_line(line1: Line3D, line2: Line3D, tolerances: Optional[Tolerances] = None) -> LineLineResult:
    """
    Classify two infinite lines and find their closest points.

    Returns:
        LineLineResult with relation intersecting, skew, parallel or
        coincident, both closest points and parameters, and the minimum
        distance between the lines
    """
    tol = resolve_tolerances(tolerances)

    if line1.is_parallel(line2, tol.parallel):
        # Distance of line2's base point from line1 is the separation of the lines
        separation = line1.distance_to_point(line2.point)

        if separation < tol.coincidence:
            t2 = line2.project_point(line1.point)
            logger.debug(f"Lines are coincident: {line1}, {line2}")
            return LineLineResult(
                relation=LineLineRelation.COINCIDENT,
                intersects=True,
                intersection_point=line1.point,
                closest_point_line1=line1.point,
                closest_point_line2=line2.point_at(t2),
                parameter_line1=0.0,
                parameter_line2=t2,
                minimum_distance=0.0,
            )

        t1 = line1.project_point(line2.point)
        logger.debug(f"Lines are parallel, separation {separation}")
        return LineLineResult(
            relation=LineLineRelation.PARALLEL,
            intersects=False,
            closest_point_line1=line1.point_at(t1),
            closest_point_line2=line2.point,
            parameter_line1=t1,
            parameter_line2=0.0,
            minimum_distance=separation,
        )

    t1, t2 = _closest_parameters(line1, line2)
    closest1 = line1.point_at(t1)
    closest2 = line2.point_at(t2)
    distance = closest1.distance_to(closest2)
    intersects = distance < tol.intersection

    relation = LineLineRelation.INTERSECTING if intersects else LineLineRelation.SKEW
    logger.debug(f"Lines are {relation.value}, minimum distance {distance}")
    return LineLineResult(
        relation=relation,
        intersects=intersects,
        intersection_point=closest1 if intersects else None,
        closest_point_line1=closest1,
        closest_point_line2=closest2,
        parameter_line1=t1,
        parameter_line2=t2,
        minimum_distance=distance,
    )


def line_plane(line: Line3D, plane: Plane3D, tolerances: Optional[Tolerances] = None) -> LinePlaneResult:
    """
    Intersect an infinite line with a plane.

    A line parallel to the plane either lies in it (every point is an
    intersection; the line's base point is reported) or misses it.
    """
    tol = resolve_tolerances(tolerances)
    normal = plane.unit_normal

    if abs(line.unit_direction.dot(normal)) < tol.parallel:
        distance = plane.distance_to(line.point)
        in_plane = distance < tol.coincidence
        relation = LinePlaneRelation.LINE_IN_PLANE if in_plane else LinePlaneRelation.NO_INTERSECTION
        logger.debug(f"Line is parallel to plane ({relation.value}), distance {distance}")
        return LinePlaneResult(
            relation=relation,
            intersects=in_plane,
            intersection_point=line.point if in_plane else None,
            parameter=0.0 if in_plane else None,
            line_is_parallel=True,
            distance_to_plane=distance,
        )

    t = (plane.point - line.point).dot(normal) / line.direction.dot(normal)
    point = line.point_at(t)
    logger.debug(f"Line meets plane at {point} (t={t})")
    return LinePlaneResult(
        relation=LinePlaneRelation.INTERSECTING,
        intersects=True,
        intersection_point=point,
        parameter=t,
        line_is_parallel=False,
        distance_to_plane=0.0,
    )


def _point_on_both_planes(n1: Vector3, d1: float, n2: Vector3, d2: float,
                          direction: Vector3, tolerance: float) -> Vector3:
    """
    Solve n1·p = d1, n2·p = d2 with the coordinate along the dominant
    component of ``direction`` fixed at 0; that pair of axes gives the
    best-conditioned 2x2 system.
    """
    ax, ay, az = abs(direction.x), abs(direction.y), abs(direction.z)

    if az >= ax and az >= ay:
        det = n1.x * n2.y - n1.y * n2.x
        if abs(det) < tolerance:
            raise DegenerateGeometryError("Cannot find intersection point of the planes")
        return Vector3(x=(d1 * n2.y - d2 * n1.y) / det, y=(d2 * n1.x - d1 * n2.x) / det, z=0.0)

    if ay >= ax:
        det = n1.x * n2.z - n1.z * n2.x
        if abs(det) < tolerance:
            raise DegenerateGeometryError("Cannot find intersection point of the planes")
        return Vector3(x=(d1 * n2.z - d2 * n1.z) / det, y=0.0, z=(d2 * n1.x - d1 * n2.x) / det)

    det = n1.y * n2.z - n1.z * n2.y
    if abs(det) < tolerance:
        raise DegenerateGeometryError("Cannot find intersection point of the planes")
    return Vector3(x=0.0, y=(d1 * n2.z - d2 * n1.z) / det, z=(d2 * n1.y - d1 * n2.y) / det)


def plane_plane(plane1: Plane3D, plane2: Plane3D, tolerances: Optional[Tolerances] = None) -> PlanePlaneResult:
    """
    Classify two planes and, when they cross, return their line of intersection.

    The dihedral angle is reported in every case.
    """
    tol = resolve_tolerances(tolerances)
    n1, n2 = plane1.unit_normal, plane2.unit_normal
    angle = plane1.angle_to(plane2)

    if plane1.is_parallel(plane2, tol.parallel):
        coincident = plane1.distance_to(plane2.point) < tol.coincidence
        relation = PlanePlaneRelation.COINCIDENT if coincident else PlanePlaneRelation.PARALLEL
        logger.debug(f"Planes are {relation.value}")
        return PlanePlaneResult(
            relation=relation,
            intersects=coincident,
            angle_radians=angle,
            angle_degrees=math.degrees(angle),
        )

    direction = n1.cross(n2)
    point = _point_on_both_planes(
        n1, n1.dot(plane1.point), n2, n2.dot(plane2.point), direction, tol.singular
    )
    line = Line3D(point=point, direction=direction.normalize(tol.zero_vector))
    logger.debug(f"Planes intersect along {line}")
    return PlanePlaneResult(
        relation=PlanePlaneRelation.INTERSECTING,
        intersects=True,
        intersection_line=line,
        angle_radians=angle,
        angle_degrees=math.degrees(angle),
    )


def _clamp(t: float) -> float:
    return max(0.0, min(1.0, t))


def _parallel_segment_closest(seg1: Segment3D, seg2: Segment3D) -> Tuple[float, float]:
    """Closest clamped parameters of two parallel segments, from endpoint projections."""
    candidates = [
        (0.0, seg2.closest_parameter(seg1.start)),
        (1.0, seg2.closest_parameter(seg1.end)),
        (seg1.closest_parameter(seg2.start), 0.0),
        (seg1.closest_parameter(seg2.end), 1.0),
    ]
    return min(candidates, key=lambda pair: seg1.point_at(pair[0]).distance_to(seg2.point_at(pair[1])))


def line_segment(seg1: Segment3D, seg2: Segment3D, tolerances: Optional[Tolerances] = None) -> SegmentIntersectionResult:
    """
    Intersect two bounded segments.

    The carrier lines are solved first; the segments intersect only when the
    lines' closest points already lie within both segments and are within
    the intersection tolerance of each other. The reported closest points are
    the true closest points of the bounded segments.
    """
    tol = resolve_tolerances(tolerances)
    line1, line2 = seg1.to_line(), seg2.to_line()

    if line1.is_parallel(line2, tol.parallel):
        t1, t2 = _parallel_segment_closest(seg1, seg2)
        closest1, closest2 = seg1.point_at(t1), seg2.point_at(t2)
        distance = closest1.distance_to(closest2)
        # Collinear overlapping segments touch along a stretch; report one point of it
        intersects = distance < tol.intersection
        logger.debug(f"Parallel segments, distance {distance}")
        return SegmentIntersectionResult(
            intersects=intersects,
            intersection_point=closest1 if intersects else None,
            closest_point_seg1=closest1,
            closest_point_seg2=closest2,
            parameter_seg1=t1,
            parameter_seg2=t2,
            minimum_distance=distance,
            intersection_on_both_segments=intersects,
        )

    t1, t2 = _closest_parameters(line1, line2)
    line_distance = line1.point_at(t1).distance_to(line2.point_at(t2))
    within_both = _clamp(t1) == t1 and _clamp(t2) == t2

    # Clamp one parameter, re-project onto the other segment, then settle the first again
    s1 = _clamp(t1)
    s2 = seg2.closest_parameter(seg1.point_at(s1))
    s1 = seg1.closest_parameter(seg2.point_at(s2))
    closest1, closest2 = seg1.point_at(s1), seg2.point_at(s2)
    distance = closest1.distance_to(closest2)

    intersects = within_both and line_distance < tol.intersection
    logger.debug(f"Segments: unclamped t=({t1}, {t2}), distance {distance}, intersects={intersects}")
    return SegmentIntersectionResult(
        intersects=intersects,
        intersection_point=closest1 if intersects else None,
        closest_point_seg1=closest1,
        closest_point_seg2=closest2,
        parameter_seg1=s1,
        parameter_seg2=s2,
        minimum_distance=distance,
        intersection_on_both_segments=within_both,
    )


def multiple_line_best_fit(lines: Sequence[Line3D], tolerances: Optional[Tolerances] = None) -> BestFitResult:
    """
    Least-squares point closest to a bundle of lines.

    For each line, P = I − d dᵀ/|d|² maps a displacement to its component
    perpendicular to the line, so |P (x − p)|² is the squared distance of x
    from the line. Summing gives the normal equations (Σ P) x = Σ P p,
    solved by Cramer's rule.

    Raises:
        DegenerateGeometryError: With fewer than two lines, or when the
            accumulated system is singular (all lines parallel)
    """
    tol = resolve_tolerances(tolerances)
    lines = list(lines)
    if len(lines) < 2:
        raise DegenerateGeometryError("At least 2 lines are required")

    identity = Matrix3x3.identity()
    normal_matrix = Matrix3x3.zeros()
    rhs = Vector3.zero()
    for line in lines:
        d = line.direction
        projection = identity - Matrix3x3.outer(d, d).scale(1.0 / d.magnitude_squared)
        normal_matrix = normal_matrix + projection
        rhs = rhs + projection.transform(line.point)

    if abs(normal_matrix.determinant) < tol.singular:
        raise DegenerateGeometryError("System is singular - lines may be parallel or coplanar")
    best = normal_matrix.solve(rhs, tol.singular)

    distances: List[float] = [line.distance_to_point(best) for line in lines]
    total = sum(distance * distance for distance in distances)
    logger.debug(f"Best fit of {len(lines)} lines at {best}, total squared distance {total}")
    return BestFitResult(
        best_intersection_point=best,
        individual_distances=distances,
        total_squared_distance=total,
        lines_processed=len(lines),
    )
