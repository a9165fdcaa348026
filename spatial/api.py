# spatial/api.py
"""
Request-level facade over the kernel.

Request handlers pass an operation name and a raw payload (usually decoded
JSON) to ``execute`` and get back an ``OperationOutcome``: either a
JSON-ready result or a human-readable error with its kind. Kernel functions
raise GeometryError subclasses; this is the only place where they are turned
into values.
"""
import logging
import math
from typing import Any, Dict, List, Optional, Tuple
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from spatial.algebra import coordinates, products, rotation
from spatial.algebra.coordinates import CoordinateSystem, CylindricalCoord, SphericalCoord
from spatial.algebra.matrix import Matrix3x3, Matrix4x4
from spatial.algebra.quaternion import Quaternion
from spatial.algebra.vector import Axis, Vector3
from spatial.constants import Tolerances, resolve_tolerances
from spatial.errors import DegenerateGeometryError, ErrorKind, GeometryError, parse_variant
from spatial.measures import area, volumes
from spatial.measures.results import BoxType, HullMethod
from spatial.relations import distance, solver
from spatial.relations.line import Line3D, Segment3D
from spatial.relations.plane import Plane3D
from spatial.shapes import intersections
from spatial.shapes.primitives import AABB, Cylinder, Ray, Sphere
from utils.base_model import ImmutableModel
from utils.registry import OperationRegistry

# Configure logging
logger = logging.getLogger(__name__)

ALGEBRA = "algebra"
RELATIONS = "relations"
SHAPES = "shapes"
MEASURES = "measures"

OPERATIONS = OperationRegistry()


class OperationOutcome(ImmutableModel):
    """What a request handler gets back from ``execute``."""
    operation: str
    ok: bool
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    @classmethod
    def failure(cls, operation: str, kind: ErrorKind, message: str) -> "OperationOutcome":
        return cls(operation=operation, ok=False, error=message, error_kind=kind)


class MatrixDeterminantResult(ImmutableModel):
    determinant: float
    is_invertible: bool


# Input records

# Defining vector of each shape that carries one, checked against the
# request's zero_vector tolerance when the request overrides it.
_DEFINING_VECTORS = (
    (Line3D, "Line direction", lambda line: line.direction),
    (Segment3D, "Segment", lambda segment: segment.end - segment.start),
    (Plane3D, "Plane normal", lambda plane: plane.normal),
    (Ray, "Ray direction", lambda ray: ray.direction),
    (Cylinder, "Cylinder axis", lambda cylinder: cylinder.axis),
)


class OperationInput(ImmutableModel):
    """
    Common base of every input record; ``tolerances`` overrides the defaults for one call.

    Shapes validate their defining vectors against the default tolerance when
    they are built. A request with its own ``zero_vector`` tolerance has those
    vectors checked again against it.
    """
    tolerances: Optional[Tolerances] = None

    @model_validator(mode="after")
    def validate_against_tolerances(self):
        if self.tolerances is None:
            return self
        threshold = self.tolerances.zero_vector
        for name in type(self).model_fields:
            value = getattr(self, name)
            for item in value if isinstance(value, list) else [value]:
                for shape_type, label, defining_vector in _DEFINING_VECTORS:
                    if isinstance(item, shape_type) and defining_vector(item).is_zero(threshold):
                        raise DegenerateGeometryError(
                            f"{label} is shorter than the zero-vector tolerance {threshold}"
                        )
        return self


class VectorInput(OperationInput):
    vector: Vector3


class VectorPairInput(OperationInput):
    v1: Vector3
    v2: Vector3


class VectorProjectionInput(OperationInput):
    vector: Vector3
    onto: Vector3


class AxisAngleInput(OperationInput):
    axis: Vector3
    angle: float = Field(description="Radians")


class AxisRotationInput(OperationInput):
    axis: Axis
    angle: float = Field(description="Radians")

    @field_validator("axis", mode="before")
    @classmethod
    def parse_axis(cls, value):
        return parse_variant(Axis, value)


class QuaternionInput(OperationInput):
    quaternion: Quaternion


class QuaternionPairInput(OperationInput):
    q1: Quaternion
    q2: Quaternion


class SlerpInput(QuaternionPairInput):
    t: float


class QuaternionRotateInput(OperationInput):
    quaternion: Quaternion
    vector: Vector3


class MatrixInput(OperationInput):
    matrix: Matrix3x3


class MatrixPairInput(OperationInput):
    m1: Matrix3x3
    m2: Matrix3x3


class TransformVectorInput(OperationInput):
    matrix: Matrix3x3
    vector: Vector3


class TransformPointInput(OperationInput):
    matrix: Matrix4x4
    point: Vector3


class CoordinateConversionInput(OperationInput):
    coordinates: Vector3 = Field(description="(x, y, z), (radius, theta, phi) or (radius, theta, z)")
    from_system: CoordinateSystem
    to_system: CoordinateSystem

    @field_validator("from_system", "to_system", mode="before")
    @classmethod
    def parse_system(cls, value):
        return parse_variant(CoordinateSystem, value)


class SphericalInput(OperationInput):
    coordinates: SphericalCoord


class CylindricalInput(OperationInput):
    coordinates: CylindricalCoord


class LinePairInput(OperationInput):
    line1: Line3D
    line2: Line3D


class LinePlaneInput(OperationInput):
    line: Line3D
    plane: Plane3D


class PlanePairInput(OperationInput):
    plane1: Plane3D
    plane2: Plane3D


class SegmentPairInput(OperationInput):
    segment1: Segment3D
    segment2: Segment3D


class LinesInput(OperationInput):
    lines: List[Line3D]


class PointLineInput(OperationInput):
    point: Vector3
    line: Line3D


class PointPlaneInput(OperationInput):
    point: Vector3
    plane: Plane3D


class ThreePointsInput(OperationInput):
    p1: Vector3
    p2: Vector3
    p3: Vector3


class RaySphereInput(OperationInput):
    ray: Ray
    sphere: Sphere


class RayCylinderInput(OperationInput):
    ray: Ray
    cylinder: Cylinder


class RayAABBInput(OperationInput):
    ray: Ray
    aabb: AABB


class AABBPairInput(OperationInput):
    aabb1: AABB
    aabb2: AABB


class SpherePairInput(OperationInput):
    sphere1: Sphere
    sphere2: Sphere


class TetrahedronInput(OperationInput):
    point_a: Vector3
    point_b: Vector3
    point_c: Vector3
    point_d: Vector3


class PointsInput(OperationInput):
    points: List[Vector3]


class PointToPlaneInput(OperationInput):
    point: Vector3
    plane_points: List[Vector3]


class PyramidInput(OperationInput):
    base_points: List[Vector3]
    apex: Vector3


class SphereVolumeInput(OperationInput):
    radius: float


class CylinderVolumeInput(OperationInput):
    radius: float
    height: float


class AABBInput(OperationInput):
    aabb: AABB


class BoundingBoxInput(OperationInput):
    points: List[Vector3]
    box_type: BoxType = BoxType.AABB

    @field_validator("box_type", mode="before")
    @classmethod
    def parse_box_type(cls, value):
        return parse_variant(BoxType, value)


class ConvexHullInput(OperationInput):
    points: List[Vector3]
    method: HullMethod = HullMethod.FAN

    @field_validator("method", mode="before")
    @classmethod
    def parse_method(cls, value):
        return parse_variant(HullMethod, value)


# Algebra

@OPERATIONS.register("rotation_matrix", AxisAngleInput, ALGEBRA)
def _rotation_matrix(request: AxisAngleInput):
    return rotation.rotation_matrix(request.axis, request.angle, request.tolerances)


@OPERATIONS.register("axis_rotation_matrix", AxisRotationInput, ALGEBRA)
def _axis_rotation_matrix(request: AxisRotationInput):
    return rotation.axis_rotation_matrix(request.axis, request.angle)


@OPERATIONS.register("quaternion_from_axis_angle", AxisAngleInput, ALGEBRA)
def _quaternion_from_axis_angle(request: AxisAngleInput):
    return rotation.quaternion_from_axis_angle(request.axis, request.angle, request.tolerances)


@OPERATIONS.register("quaternion_multiply", QuaternionPairInput, ALGEBRA)
def _quaternion_multiply(request: QuaternionPairInput):
    return rotation.quaternion_multiply(request.q1, request.q2)


@OPERATIONS.register("quaternion_slerp", SlerpInput, ALGEBRA)
def _quaternion_slerp(request: SlerpInput):
    return rotation.quaternion_slerp(request.q1, request.q2, request.t, request.tolerances)


@OPERATIONS.register("quaternion_to_matrix", QuaternionInput, ALGEBRA)
def _quaternion_to_matrix(request: QuaternionInput):
    return rotation.quaternion_to_matrix(request.quaternion)


@OPERATIONS.register("rotate_vector_by_quaternion", QuaternionRotateInput, ALGEBRA)
def _rotate_vector_by_quaternion(request: QuaternionRotateInput):
    return rotation.rotate_vector_by_quaternion(request.quaternion, request.vector)


@OPERATIONS.register("transform_vector", TransformVectorInput, ALGEBRA)
def _transform_vector(request: TransformVectorInput):
    return rotation.transform_vector(request.matrix, request.vector)


@OPERATIONS.register("transform_point", TransformPointInput, ALGEBRA)
def _transform_point(request: TransformPointInput):
    return rotation.transform_point(request.matrix, request.point)


@OPERATIONS.register("matrix_multiply", MatrixPairInput, ALGEBRA)
def _matrix_multiply(request: MatrixPairInput):
    return request.m1 @ request.m2


@OPERATIONS.register("matrix_determinant", MatrixInput, ALGEBRA)
def _matrix_determinant(request: MatrixInput):
    det = request.matrix.determinant
    return MatrixDeterminantResult(
        determinant=det,
        is_invertible=abs(det) >= resolve_tolerances(request.tolerances).singular,
    )


@OPERATIONS.register("matrix_inverse", MatrixInput, ALGEBRA)
def _matrix_inverse(request: MatrixInput):
    return request.matrix.inverse(resolve_tolerances(request.tolerances).singular)


@OPERATIONS.register("convert_coordinates", CoordinateConversionInput, ALGEBRA)
def _convert_coordinates(request: CoordinateConversionInput):
    return coordinates.convert_coordinates(request.coordinates, request.from_system, request.to_system)


@OPERATIONS.register("cartesian_to_spherical", VectorInput, ALGEBRA)
def _cartesian_to_spherical(request: VectorInput):
    return coordinates.cartesian_to_spherical(request.vector)


@OPERATIONS.register("spherical_to_cartesian", SphericalInput, ALGEBRA)
def _spherical_to_cartesian(request: SphericalInput):
    return coordinates.spherical_to_cartesian(request.coordinates)


@OPERATIONS.register("cartesian_to_cylindrical", VectorInput, ALGEBRA)
def _cartesian_to_cylindrical(request: VectorInput):
    return coordinates.cartesian_to_cylindrical(request.vector)


@OPERATIONS.register("cylindrical_to_cartesian", CylindricalInput, ALGEBRA)
def _cylindrical_to_cartesian(request: CylindricalInput):
    return coordinates.cylindrical_to_cartesian(request.coordinates)


@OPERATIONS.register("dot_product", VectorPairInput, ALGEBRA)
def _dot_product(request: VectorPairInput):
    return products.dot_product(request.v1, request.v2, request.tolerances)


@OPERATIONS.register("cross_product", VectorPairInput, ALGEBRA)
def _cross_product(request: VectorPairInput):
    return products.cross_product(request.v1, request.v2, request.tolerances)


@OPERATIONS.register("vector_magnitude", VectorInput, ALGEBRA)
def _vector_magnitude(request: VectorInput):
    return products.vector_magnitude(request.vector, request.tolerances)


@OPERATIONS.register("vector_angle", VectorPairInput, ALGEBRA)
def _vector_angle(request: VectorPairInput):
    return products.vector_angle(request.v1, request.v2, request.tolerances)


@OPERATIONS.register("vector_projection", VectorProjectionInput, ALGEBRA)
def _vector_projection(request: VectorProjectionInput):
    return products.vector_projection(request.vector, request.onto, request.tolerances)


# Relations

@OPERATIONS.register("line_line", LinePairInput, RELATIONS)
def _line_line(request: LinePairInput):
    return solver.line_line(request.line1, request.line2, request.tolerances)


@OPERATIONS.register("line_plane", LinePlaneInput, RELATIONS)
def _line_plane(request: LinePlaneInput):
    return solver.line_plane(request.line, request.plane, request.tolerances)


@OPERATIONS.register("plane_plane", PlanePairInput, RELATIONS)
def _plane_plane(request: PlanePairInput):
    return solver.plane_plane(request.plane1, request.plane2, request.tolerances)


@OPERATIONS.register("line_segment", SegmentPairInput, RELATIONS)
def _line_segment(request: SegmentPairInput):
    return solver.line_segment(request.segment1, request.segment2, request.tolerances)


@OPERATIONS.register("multiple_line_best_fit", LinesInput, RELATIONS)
def _multiple_line_best_fit(request: LinesInput):
    return solver.multiple_line_best_fit(request.lines, request.tolerances)


@OPERATIONS.register("point_line_distance", PointLineInput, RELATIONS)
def _point_line_distance(request: PointLineInput):
    return distance.point_line_distance(request.point, request.line, request.tolerances)


@OPERATIONS.register("point_plane_distance", PointPlaneInput, RELATIONS)
def _point_plane_distance(request: PointPlaneInput):
    return distance.point_plane_distance(request.point, request.plane, request.tolerances)


@OPERATIONS.register("line_plane_distance", LinePlaneInput, RELATIONS)
def _line_plane_distance(request: LinePlaneInput):
    return distance.line_plane_distance(request.line, request.plane, request.tolerances)


@OPERATIONS.register("project_point_onto_line", PointLineInput, RELATIONS)
def _project_point_onto_line(request: PointLineInput):
    return distance.project_point_onto_line(request.point, request.line, request.tolerances)


@OPERATIONS.register("project_point_onto_plane", PointPlaneInput, RELATIONS)
def _project_point_onto_plane(request: PointPlaneInput):
    return distance.project_point_onto_plane(request.point, request.plane, request.tolerances)


@OPERATIONS.register("plane_from_three_points", ThreePointsInput, RELATIONS)
def _plane_from_three_points(request: ThreePointsInput):
    tol = resolve_tolerances(request.tolerances)
    return Plane3D.from_three_points(request.p1, request.p2, request.p3, tol.zero_vector)


# Shapes

@OPERATIONS.register("ray_sphere", RaySphereInput, SHAPES)
def _ray_sphere(request: RaySphereInput):
    return intersections.ray_sphere(request.ray, request.sphere, request.tolerances)


@OPERATIONS.register("ray_cylinder", RayCylinderInput, SHAPES)
def _ray_cylinder(request: RayCylinderInput):
    return intersections.ray_cylinder(request.ray, request.cylinder, request.tolerances)


@OPERATIONS.register("ray_aabb", RayAABBInput, SHAPES)
def _ray_aabb(request: RayAABBInput):
    return intersections.ray_aabb(request.ray, request.aabb, request.tolerances)


@OPERATIONS.register("aabb_aabb", AABBPairInput, SHAPES)
def _aabb_aabb(request: AABBPairInput):
    return intersections.aabb_aabb(request.aabb1, request.aabb2)


@OPERATIONS.register("sphere_sphere", SpherePairInput, SHAPES)
def _sphere_sphere(request: SpherePairInput):
    return intersections.sphere_sphere(request.sphere1, request.sphere2, request.tolerances)


# Measures

@OPERATIONS.register("tetrahedron_volume", TetrahedronInput, MEASURES)
def _tetrahedron_volume(request: TetrahedronInput):
    return volumes.tetrahedron_volume(request.point_a, request.point_b, request.point_c, request.point_d)


@OPERATIONS.register("polygon_area_3d", PointsInput, MEASURES)
def _polygon_area_3d(request: PointsInput):
    return area.polygon_area_3d(request.points, request.tolerances)


@OPERATIONS.register("point_to_plane_distance", PointToPlaneInput, MEASURES)
def _point_to_plane_distance(request: PointToPlaneInput):
    return area.point_to_plane_distance(request.point, request.plane_points, request.tolerances)


@OPERATIONS.register("pyramid_volume", PyramidInput, MEASURES)
def _pyramid_volume(request: PyramidInput):
    return volumes.pyramid_volume(request.base_points, request.apex, request.tolerances)


@OPERATIONS.register("sphere_volume", SphereVolumeInput, MEASURES)
def _sphere_volume(request: SphereVolumeInput):
    return volumes.sphere_volume(request.radius)


@OPERATIONS.register("cylinder_volume", CylinderVolumeInput, MEASURES)
def _cylinder_volume(request: CylinderVolumeInput):
    return volumes.cylinder_volume(request.radius, request.height)


@OPERATIONS.register("aabb_volume", AABBInput, MEASURES)
def _aabb_volume(request: AABBInput):
    return volumes.aabb_volume(request.aabb)


@OPERATIONS.register("bounding_box_volume", BoundingBoxInput, MEASURES)
def _bounding_box_volume(request: BoundingBoxInput):
    return volumes.bounding_box_volume(request.points, request.box_type)


@OPERATIONS.register("convex_hull_volume", ConvexHullInput, MEASURES)
def _convex_hull_volume(request: ConvexHullInput):
    return volumes.convex_hull_volume(request.points, request.method, request.tolerances)


def describe_validation_error(exc: ValidationError) -> Tuple[ErrorKind, str]:
    """
    Reduce a pydantic ValidationError to an error kind and a message.

    A GeometryError raised by a model validator keeps its own kind and
    message; an unknown enum tag is an unsupported variant; anything else
    (missing field, wrong type) is an invalid value.
    """
    details = exc.errors()
    for detail in details:
        cause = detail.get("ctx", {}).get("error")
        if isinstance(cause, GeometryError):
            return cause.kind, cause.message

    first = details[0]
    location = ".".join(str(part) for part in first["loc"])
    message = f"{location}: {first['msg']}" if location else first["msg"]
    if first["type"] == "enum":
        return ErrorKind.UNSUPPORTED_VARIANT, message
    return ErrorKind.INVALID_VALUE, message


def _contains_non_finite(value: Any) -> bool:
    if isinstance(value, float):
        return not math.isfinite(value)
    if isinstance(value, dict):
        return any(_contains_non_finite(item) for item in value.values())
    if isinstance(value, (list, tuple)):
        return any(_contains_non_finite(item) for item in value)
    return False


def execute(operation: str, payload: Any) -> OperationOutcome:
    """
    Run one kernel operation on a raw payload.

    A result holding an infinite or NaN number (a computation that overflowed)
    is reported as an invalid_value failure rather than returned.

    Args:
        operation: Registered operation name, e.g. "ray_sphere"
        payload: Mapping (or input record) matching the operation's input record

    Returns:
        OperationOutcome; never raises for bad input
    """
    registered = OPERATIONS.get(operation)
    if registered is None:
        logger.warning(f"Rejected request for unknown operation {operation!r}")
        return OperationOutcome.failure(
            operation, ErrorKind.UNSUPPORTED_VARIANT, f"Unknown operation: {operation}"
        )

    try:
        request = registered.parse(payload)
        result: BaseModel = registered.run(request)
    except ValidationError as exc:
        kind, message = describe_validation_error(exc)
        logger.warning(f"Rejected {operation} request ({kind.value}): {message}")
        return OperationOutcome.failure(operation, kind, message)
    except GeometryError as exc:
        logger.warning(f"Rejected {operation} request ({exc.kind.value}): {exc.message}")
        return OperationOutcome.failure(operation, exc.kind, exc.message)
    except OverflowError as exc:
        logger.warning(f"Rejected {operation} request (overflow): {exc}")
        return OperationOutcome.failure(
            operation, ErrorKind.INVALID_VALUE, "Result is not finite; input magnitudes are too large"
        )

    if _contains_non_finite(result.model_dump()):
        logger.warning(f"Rejected {operation} request: result is not finite")
        return OperationOutcome.failure(
            operation, ErrorKind.INVALID_VALUE, "Result is not finite; input magnitudes are too large"
        )

    logger.debug(f"{operation} succeeded")
    return OperationOutcome(operation=operation, ok=True, result=result.model_dump(mode="json"))


def available_operations(component: Optional[str] = None) -> List[str]:
    """Names accepted by ``execute``, optionally only those of one component."""
    return OPERATIONS.names(component)
