# spatial/algebra/products.py
"""Two-vector analyses: dot, cross, magnitude, angle and projection summaries."""
import math
from typing import Optional
from pydantic import Field
from spatial.algebra.vector import Vector3
from spatial.constants import Tolerances, resolve_tolerances
from spatial.errors import DegenerateGeometryError
from utils.base_model import ImmutableModel


class DotProductResult(ImmutableModel):
    dot_product: float
    angle_radians: float = Field(description="0 when either vector is zero")
    angle_degrees: float
    are_perpendicular: bool
    are_parallel: bool


class CrossProductResult(ImmutableModel):
    cross_product: Vector3
    magnitude: float
    area_parallelogram: float
    are_parallel: bool


class VectorMagnitudeResult(ImmutableModel):
    magnitude: float
    unit_vector: Vector3 = Field(description="Zero vector when the input is zero")
    is_zero_vector: bool


class VectorAngleResult(ImmutableModel):
    angle_radians: float
    angle_degrees: float
    cos_angle: float


class VectorProjectionResult(ImmutableModel):
    scalar_projection: float
    vector_projection: Vector3
    rejection_vector: Vector3
    angle_radians: float
    angle_degrees: float
    vectors_are_parallel: bool
    vectors_are_perpendicular: bool


def dot_product(v1: Vector3, v2: Vector3, tolerances: Optional[Tolerances] = None) -> DotProductResult:
    tol = resolve_tolerances(tolerances)
    if v1.is_zero(tol.zero_vector) or v2.is_zero(tol.zero_vector):
        angle = 0.0
    else:
        angle = v1.angle_to(v2)
    return DotProductResult(
        dot_product=v1.dot(v2),
        angle_radians=angle,
        angle_degrees=math.degrees(angle),
        are_perpendicular=v1.is_perpendicular_to(v2, tol.parallel),
        are_parallel=v1.is_parallel_to(v2, tol.parallel),
    )


def cross_product(v1: Vector3, v2: Vector3, tolerances: Optional[Tolerances] = None) -> CrossProductResult:
    tol = resolve_tolerances(tolerances)
    cross = v1.cross(v2)
    return CrossProductResult(
        cross_product=cross,
        magnitude=cross.magnitude,
        area_parallelogram=cross.magnitude,
        are_parallel=v1.is_parallel_to(v2, tol.parallel),
    )


def vector_magnitude(vector: Vector3, tolerances: Optional[Tolerances] = None) -> VectorMagnitudeResult:
    tol = resolve_tolerances(tolerances)
    is_zero = vector.is_zero(tol.zero_vector)
    return VectorMagnitudeResult(
        magnitude=vector.magnitude,
        unit_vector=Vector3.zero() if is_zero else vector.normalize(tol.zero_vector),
        is_zero_vector=is_zero,
    )


def vector_angle(v1: Vector3, v2: Vector3, tolerances: Optional[Tolerances] = None) -> VectorAngleResult:
    """
    Angle between two vectors.

    Raises:
        DegenerateGeometryError: If either vector is zero
    """
    tol = resolve_tolerances(tolerances)
    if v1.is_zero(tol.zero_vector) or v2.is_zero(tol.zero_vector):
        raise DegenerateGeometryError("Cannot compute angle with zero vector")
    angle = v1.angle_to(v2)
    return VectorAngleResult(
        angle_radians=angle,
        angle_degrees=math.degrees(angle),
        cos_angle=v1.dot(v2) / (v1.magnitude * v2.magnitude),
    )


def vector_projection(vector: Vector3, onto: Vector3,
                      tolerances: Optional[Tolerances] = None) -> VectorProjectionResult:
    """
    Decompose ``vector`` into components along and across ``onto``.

    Raises:
        DegenerateGeometryError: If ``onto`` is a zero vector
    """
    tol = resolve_tolerances(tolerances)
    if onto.is_zero(tol.zero_vector):
        raise DegenerateGeometryError("Cannot project onto zero vector")

    projection = onto.scale(vector.dot(onto) / onto.magnitude_squared)
    angle = 0.0 if vector.is_zero(tol.zero_vector) else vector.angle_to(onto)
    return VectorProjectionResult(
        scalar_projection=vector.dot(onto) / onto.magnitude,
        vector_projection=projection,
        rejection_vector=vector - projection,
        angle_radians=angle,
        angle_degrees=math.degrees(angle),
        vectors_are_parallel=vector.is_parallel_to(onto, tol.parallel),
        vectors_are_perpendicular=vector.is_perpendicular_to(onto, tol.parallel),
    )
