# spatial/algebra/rotation.py
"""Rotation operations: Rodrigues matrices, quaternion construction and blending."""
import logging
import math
from typing import Optional
from spatial.algebra.matrix import Matrix3x3, Matrix4x4
from spatial.algebra.quaternion import Quaternion
from spatial.algebra.vector import Axis, Vector3
from spatial.constants import Tolerances, resolve_tolerances
from spatial.errors import DegenerateGeometryError, ensure_finite, parse_variant

logger = logging.getLogger(__name__)


def rotation_matrix(axis: Vector3, angle: float, tolerances: Optional[Tolerances] = None) -> Matrix3x3:
    """
    Rotation by ``angle`` radians about an arbitrary axis (Rodrigues' formula).

    R = cosθ·I + sinθ·[û]ₓ + (1 − cosθ)·û ûᵀ

    Raises:
        InvalidValueError: If the angle (or a resulting element) is not finite
        DegenerateGeometryError: If the axis is a zero vector, or the result
            is not a proper rotation within the orthonormality tolerance
    """
    tol = resolve_tolerances(tolerances)
    ensure_finite(angle, "Angle")
    if axis.is_zero(tol.zero_vector):
        raise DegenerateGeometryError("Axis vector cannot be zero")
    u = axis.normalize(tol.zero_vector)

    c = math.cos(angle)
    s = math.sin(angle)
    t = 1.0 - c

    matrix = Matrix3x3(rows=(
        (c + u.x * u.x * t, u.x * u.y * t - u.z * s, u.x * u.z * t + u.y * s),
        (u.y * u.x * t + u.z * s, c + u.y * u.y * t, u.y * u.z * t - u.x * s),
        (u.z * u.x * t - u.y * s, u.z * u.y * t + u.x * s, c + u.z * u.z * t),
    ))

    det = matrix.determinant
    if abs(det - 1.0) > tol.orthonormality:
        raise DegenerateGeometryError(f"Rotation matrix determinant deviates from 1: {det}")
    logger.debug(f"Rotation matrix about {u} by {angle} rad")
    return matrix


def axis_rotation_matrix(axis: Axis, angle: float) -> Matrix3x3:
    """
    Elementary rotation about the x, y or z axis.

    Raises:
        UnsupportedVariantError: If the axis tag is not x, y or z
        InvalidValueError: If the angle is not finite
    """
    axis = parse_variant(Axis, axis)
    ensure_finite(angle, "Angle")
    return Matrix3x3.rotation_about(axis, angle)


def quaternion_from_axis_angle(axis: Vector3, angle: float,
                               tolerances: Optional[Tolerances] = None) -> Quaternion:
    """Unit quaternion for a rotation of ``angle`` radians about ``axis``."""
    tol = resolve_tolerances(tolerances)
    return Quaternion.from_axis_angle(axis, angle, tol.zero_vector)


def quaternion_multiply(q1: Quaternion, q2: Quaternion) -> Quaternion:
    """Hamilton product q1 ⊗ q2; not commutative, not renormalized."""
    return q1.multiply(q2)


def quaternion_slerp(q1: Quaternion, q2: Quaternion, t: float,
                     tolerances: Optional[Tolerances] = None) -> Quaternion:
    """Spherical linear interpolation from q1 (t = 0) to q2 (t = 1)."""
    return q1.slerp(q2, t, tolerances)


def quaternion_to_matrix(q: Quaternion) -> Matrix3x3:
    return q.to_rotation_matrix()


def rotate_vector_by_quaternion(q: Quaternion, vector: Vector3) -> Vector3:
    return q.rotate_vector(vector)


def transform_vector(matrix: Matrix3x3, vector: Vector3) -> Vector3:
    """3x3 matrix-vector product."""
    return matrix.transform(vector)


def transform_point(matrix: Matrix4x4, point: Vector3) -> Vector3:
    """Affine 4x4 transform of a point (w = 1)."""
    return matrix.transform_point(point)
