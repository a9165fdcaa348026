# spatial/shapes/intersections.py
"""
Intersection tests between rays and primitive shapes, and between shapes.

Ray hits are reported only in front of the origin (distance > 0), nearest
first, each with an outward surface normal. Invalid shapes never reach
these functions: the primitive models reject them at construction.
"""
import logging
import math
from typing import List, Optional
from spatial.algebra.vector import Axis, Vector3
from spatial.constants import Tolerances, resolve_tolerances
from spatial.errors import ensure_finite_result
from spatial.shapes.primitives import AABB, Cylinder, Ray, Sphere
from spatial.shapes.results import (
    AABBOverlapResult,
    IntersectionCircle,
    RayHit,
    RayIntersectionResult,
    SphereRelation,
    SphereSphereResult,
)

logger = logging.getLogger(__name__)

# Outward face normals in the order faces are tested
_FACE_NORMALS = (
    (Axis.X, False, Vector3(x=-1.0, y=0.0, z=0.0)),
    (Axis.X, True, Vector3(x=1.0, y=0.0, z=0.0)),
    (Axis.Y, False, Vector3(x=0.0, y=-1.0, z=0.0)),
    (Axis.Y, True, Vector3(x=0.0, y=1.0, z=0.0)),
    (Axis.Z, False, Vector3(x=0.0, y=0.0, z=-1.0)),
    (Axis.Z, True, Vector3(x=0.0, y=0.0, z=1.0)),
)


def _collect(hits: List[RayHit]) -> RayIntersectionResult:
    hits = sorted(hits, key=lambda hit: hit.distance)
    return RayIntersectionResult(
        intersects=bool(hits),
        hits=hits,
        closest_distance=hits[0].distance if hits else None,
    )


def ray_sphere(ray: Ray, sphere: Sphere, tolerances: Optional[Tolerances] = None) -> RayIntersectionResult:
    """
    Intersect a ray with a sphere surface.

    The sphere center is projected onto the ray; if the perpendicular
    distance exceeds the radius the ray misses. Otherwise the half chord
    length follows from Pythagoras and the entry/exit distances are
    projection ∓ half chord. A tangent ray yields a single hit.
    """
    tol = resolve_tolerances(tolerances)
    direction = ray.direction.normalize(tol.zero_vector)
    projection = (sphere.center - ray.origin).dot(direction)
    closest_approach = ray.origin + direction.scale(projection)
    perpendicular = sphere.center.distance_to(closest_approach)

    if perpendicular > sphere.radius:
        logger.debug(f"Ray misses sphere, closest approach {perpendicular} > radius {sphere.radius}")
        return _collect([])

    # r² − p² = (r − p)(r + p), taken as two roots so no square can overflow
    half_chord = math.sqrt(max(0.0, sphere.radius - perpendicular)) * math.sqrt(sphere.radius + perpendicular)
    distances = sorted({projection - half_chord, projection + half_chord})

    hits = []
    for t in distances:
        if t > 0:
            ensure_finite_result(t, "Ray hit distance")
            point = ray.origin + direction.scale(t)
            hits.append(RayHit(point=point, distance=t, normal=(point - sphere.center).normalize(tol.zero_vector)))
    return _collect(hits)


def ray_cylinder(ray: Ray, cylinder: Cylinder, tolerances: Optional[Tolerances] = None) -> RayIntersectionResult:
    """
    Intersect a ray with the lateral surface of a finite cylinder.

    The infinite cylinder gives a quadratic a·t² + b·t + c = 0 in the
    components of the ray perpendicular to the axis; each positive root is
    kept only if its point lies within ±height/2 of the center along the
    axis. End caps are not tested, and a ray parallel to the axis never hits
    the lateral surface.
    """
    tol = resolve_tolerances(tolerances)
    direction = ray.direction.normalize(tol.zero_vector)
    axis = cylinder.axis.normalize(tol.zero_vector)
    offset = ray.origin - cylinder.center

    axis_dot_dir = axis.dot(direction)
    axis_dot_offset = axis.dot(offset)
    a = 1.0 - axis_dot_dir * axis_dot_dir
    b = 2.0 * (offset.dot(direction) - axis_dot_dir * axis_dot_offset)
    c = offset.dot(offset) - axis_dot_offset * axis_dot_offset - cylinder.radius * cylinder.radius

    if a < tol.parallel:
        logger.debug("Ray is parallel to the cylinder axis; lateral surface not hit")
        return _collect([])

    discriminant = ensure_finite_result(b * b - 4.0 * a * c, "Ray-cylinder discriminant")
    if discriminant < 0:
        return _collect([])

    root = math.sqrt(discriminant)
    hits = []
    for t in sorted({(-b - root) / (2.0 * a), (-b + root) / (2.0 * a)}):
        if t <= 0:
            continue
        ensure_finite_result(t, "Ray hit distance")
        point = ray.origin + direction.scale(t)
        along_axis = axis.dot(point - cylinder.center)
        if abs(along_axis) <= cylinder.height / 2.0:
            on_axis = cylinder.center + axis.scale(along_axis)
            hits.append(RayHit(point=point, distance=t, normal=(point - on_axis).normalize(tol.zero_vector)))
    return _collect(hits)


def _aabb_face_normal(aabb: AABB, point: Vector3, snap: float) -> Vector3:
    for axis, upper, normal in _FACE_NORMALS:
        face = aabb.max_point.component(axis) if upper else aabb.min_point.component(axis)
        if abs(point.component(axis) - face) < snap:
            return normal
    return Vector3.zero()


def ray_aabb(ray: Ray, aabb: AABB, tolerances: Optional[Tolerances] = None) -> RayIntersectionResult:
    """
    Intersect a ray with an axis-aligned box using the slab method.

    Each axis contributes the interval of distances during which the ray is
    between that axis' two faces; the box is hit where all three intervals
    overlap. A near-zero direction component uses a large sentinel in place
    of its reciprocal, which turns that slab into an all-or-nothing interval.
    """
    tol = resolve_tolerances(tolerances)
    direction = ray.direction.normalize(tol.zero_vector)

    t_entry, t_exit = -math.inf, math.inf
    for axis in Axis:
        d = direction.component(axis)
        inverse = tol.reciprocal_sentinel if abs(d) < tol.zero_vector else 1.0 / d
        origin = ray.origin.component(axis)
        t1 = (aabb.min_point.component(axis) - origin) * inverse
        t2 = (aabb.max_point.component(axis) - origin) * inverse
        t_entry = max(t_entry, min(t1, t2))
        t_exit = min(t_exit, max(t1, t2))

    if t_exit < 0 or t_entry > t_exit:
        logger.debug(f"Ray misses box (entry {t_entry}, exit {t_exit})")
        return _collect([])

    distances = [t_entry] if t_entry > 0 else []
    if t_exit > 0 and t_exit != t_entry:
        distances.append(t_exit)

    hits = []
    for t in distances:
        point = ray.origin + direction.scale(t)
        hits.append(RayHit(point=point, distance=t, normal=_aabb_face_normal(aabb, point, tol.face_snap)))
    return _collect(hits)


def aabb_aabb(aabb1: AABB, aabb2: AABB) -> AABBOverlapResult:
    """
    Overlap test of two axis-aligned boxes.

    Boxes that only touch on a face, edge or corner count as overlapping;
    the overlap region is then flat and its centroid lies on the contact.
    """
    low = Vector3(
        x=max(aabb1.min_point.x, aabb2.min_point.x),
        y=max(aabb1.min_point.y, aabb2.min_point.y),
        z=max(aabb1.min_point.z, aabb2.min_point.z),
    )
    high = Vector3(
        x=min(aabb1.max_point.x, aabb2.max_point.x),
        y=min(aabb1.max_point.y, aabb2.max_point.y),
        z=min(aabb1.max_point.z, aabb2.max_point.z),
    )
    if low.x > high.x or low.y > high.y or low.z > high.z:
        return AABBOverlapResult(intersects=False)

    return AABBOverlapResult(
        intersects=True,
        overlap_min=low,
        overlap_max=high,
        overlap_center=low.midpoint(high),
    )


def sphere_sphere(sphere1: Sphere, sphere2: Sphere, tolerances: Optional[Tolerances] = None) -> SphereSphereResult:
    """
    Classify two spheres by comparing the center distance with the sum and
    the difference of the radii, within the tangency band.

    Only properly intersecting spheres get an intersection circle. Its
    center sits ``a`` along the center-to-center axis from the first
    sphere's center, with a = (r1² − r2² + d²) / 2d.
    """
    tol = resolve_tolerances(tolerances)
    band = tol.tangency
    distance = sphere1.center.distance_to(sphere2.center)
    radius_sum = ensure_finite_result(sphere1.radius + sphere2.radius, "Sum of the radii")
    radius_difference = abs(sphere1.radius - sphere2.radius)

    if distance > radius_sum + band:
        relation = SphereRelation.SEPARATE
    elif distance < radius_difference - band:
        relation = SphereRelation.ONE_INSIDE_OTHER
    elif abs(distance - radius_sum) <= band:
        relation = SphereRelation.EXTERNAL_TANGENT
    elif abs(distance - radius_difference) <= band:
        relation = SphereRelation.INTERNAL_TANGENT
    else:
        relation = SphereRelation.INTERSECTING
    logger.debug(f"Spheres are {relation.value} (center distance {distance})")

    circle = None
    if relation is SphereRelation.INTERSECTING:
        r1, r2 = sphere1.radius, sphere2.radius
        # Rearranged so that no square of a radius or distance can overflow
        a = ((r1 - r2) / distance * (r1 + r2) + distance) / 2.0
        normal = (sphere2.center - sphere1.center).normalize(tol.zero_vector)
        circle = IntersectionCircle(
            center=sphere1.center + normal.scale(a),
            radius=math.sqrt(max(0.0, r1 - a)) * math.sqrt(max(0.0, r1 + a)),
            normal=normal,
        )

    return SphereSphereResult(
        relation=relation,
        intersects=relation not in (SphereRelation.SEPARATE, SphereRelation.ONE_INSIDE_OTHER),
        distance_between_centers=distance,
        intersection_circle=circle,
    )
