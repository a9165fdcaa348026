# spatial/algebra/quaternion.py
from typing import Optional
from pydantic import Field, field_validator
import math
from spatial.algebra.matrix import Matrix3x3
from spatial.algebra.vector import Vector3
from spatial.constants import EPSILON, Tolerances, resolve_tolerances
from spatial.errors import DegenerateGeometryError, InvalidValueError, OutOfRangeError, ensure_finite
from utils.base_model import ImmutableModel


class Quaternion(ImmutableModel):
    """
    Rotation quaternion (x, y, z, w) with w the scalar part.

    Unit norm is guaranteed right after from_axis_angle(); products and
    interpolations are not re-normalized.
    """
    x: float = Field(description="i component")
    y: float = Field(description="j component")
    z: float = Field(description="k component")
    w: float = Field(description="Scalar component")

    @field_validator("x", "y", "z", "w")
    @classmethod
    def validate_components(cls, value: float) -> float:
        """Validate that components are finite numbers."""
        if not math.isfinite(value):
            raise InvalidValueError(f"Quaternion component must be a finite number, got {value}")
        return value

    @classmethod
    def identity(cls) -> "Quaternion":
        return cls(x=0.0, y=0.0, z=0.0, w=1.0)

    @classmethod
    def from_axis_angle(cls, axis: Vector3, angle: float, tolerance: Optional[float] = None) -> "Quaternion":
        """
        Half-angle construction: (sin(θ/2)·û, cos(θ/2)).

        Raises:
            InvalidValueError: If the angle is not finite
            DegenerateGeometryError: If the axis is a zero vector
        """
        ensure_finite(angle, "Angle")
        if axis.is_zero(tolerance):
            raise DegenerateGeometryError("Axis vector cannot be zero")
        unit_axis = axis.normalize(tolerance)
        half_angle = angle * 0.5
        sin_half = math.sin(half_angle)
        return cls(
            x=unit_axis.x * sin_half,
            y=unit_axis.y * sin_half,
            z=unit_axis.z * sin_half,
            w=math.cos(half_angle),
        )

    @property
    def vector_part(self) -> Vector3:
        return Vector3(x=self.x, y=self.y, z=self.z)

    @property
    def norm(self) -> float:
        return math.hypot(self.x, self.y, self.z, self.w)

    def dot(self, other: "Quaternion") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z + self.w * other.w

    def __neg__(self) -> "Quaternion":
        return Quaternion(x=-self.x, y=-self.y, z=-self.z, w=-self.w)

    def conjugate(self) -> "Quaternion":
        return Quaternion(x=-self.x, y=-self.y, z=-self.z, w=self.w)

    def normalize(self, tolerance: Optional[float] = None) -> "Quaternion":
        """
        Scale to unit norm.

        Raises:
            DegenerateGeometryError: If the quaternion is (nearly) zero
        """
        if tolerance is None:
            tolerance = EPSILON
        norm = self.norm
        if norm < tolerance:
            raise DegenerateGeometryError("Quaternion cannot be zero")
        return Quaternion(x=self.x / norm, y=self.y / norm, z=self.z / norm, w=self.w / norm)

    def multiply(self, other: "Quaternion") -> "Quaternion":
        """Hamilton product self ⊗ other (apply ``other`` first when rotating)."""
        return Quaternion(
            x=self.w * other.x + self.x * other.w + self.y * other.z - self.z * other.y,
            y=self.w * other.y - self.x * other.z + self.y * other.w + self.z * other.x,
            z=self.w * other.z + self.x * other.y - self.y * other.x + self.z * other.w,
            w=self.w * other.w - self.x * other.x - self.y * other.y - self.z * other.z,
        )

    def __mul__(self, other: "Quaternion") -> "Quaternion":
        return self.multiply(other)

    def to_rotation_matrix(self) -> Matrix3x3:
        """Rotation matrix of a unit quaternion."""
        x2, y2, z2 = self.x * self.x, self.y * self.y, self.z * self.z
        xy, xz, yz = self.x * self.y, self.x * self.z, self.y * self.z
        wx, wy, wz = self.w * self.x, self.w * self.y, self.w * self.z
        return Matrix3x3(rows=(
            (1.0 - 2.0 * (y2 + z2), 2.0 * (xy - wz), 2.0 * (xz + wy)),
            (2.0 * (xy + wz), 1.0 - 2.0 * (x2 + z2), 2.0 * (yz - wx)),
            (2.0 * (xz - wy), 2.0 * (yz + wx), 1.0 - 2.0 * (x2 + y2)),
        ))

    def rotate_vector(self, vector: Vector3) -> Vector3:
        return self.to_rotation_matrix().transform(vector)

    def slerp(self, other: "Quaternion", t: float, tolerances: Optional[Tolerances] = None) -> "Quaternion":
        """
        Spherical linear interpolation along the short arc.

        Args:
            other: Target rotation (reached at t = 1)
            t: Interpolation factor in [0, 1]
            tolerances: Supplies the near-parallel threshold above which the
                        result is a renormalized linear blend

        Raises:
            OutOfRangeError: If t is outside [0, 1]
        """
        tol = resolve_tolerances(tolerances)
        ensure_finite(t, "Interpolation parameter t")
        if t < 0.0 or t > 1.0:
            raise OutOfRangeError(f"Interpolation parameter t must be between 0 and 1, got {t}")

        dot = self.dot(other)
        target = -other if dot < 0.0 else other
        dot = abs(dot)

        if dot > tol.slerp_linear_threshold:
            blended = Quaternion(
                x=self.x + t * (target.x - self.x),
                y=self.y + t * (target.y - self.y),
                z=self.z + t * (target.z - self.z),
                w=self.w + t * (target.w - self.w),
            )
            return blended.normalize(tol.zero_vector)

        theta_0 = math.acos(min(dot, 1.0))
        sin_theta_0 = math.sin(theta_0)
        theta = theta_0 * t
        s0 = math.cos(theta) - dot * math.sin(theta) / sin_theta_0
        s1 = math.sin(theta) / sin_theta_0
        return Quaternion(
            x=s0 * self.x + s1 * target.x,
            y=s0 * self.y + s1 * target.y,
            z=s0 * self.z + s1 * target.z,
            w=s0 * self.w + s1 * target.w,
        )

    def __str__(self) -> str:
        return f"Quaternion(x={self.x}, y={self.y}, z={self.z}, w={self.w})"
