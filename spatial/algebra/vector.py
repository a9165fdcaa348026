# spatial/algebra/vector.py
from enum import Enum
from typing import Iterable, Optional, Tuple
from pydantic import Field, field_validator
import math
from spatial.constants import EPSILON
from spatial.errors import DegenerateGeometryError, InvalidValueError, parse_variant
from utils.base_model import ImmutableModel


class Axis(str, Enum):
    """Coordinate axis tag."""
    X = "x"
    Y = "y"
    Z = "z"


class Vector3(ImmutableModel):
    """
    Represents a 3D vector (or point) in Cartesian coordinates.

    This class provides the vector algebra needed by the solvers, with
    appropriate handling of floating-point precision. Arithmetic never
    mutates; every operation returns a new value.
    """
    x: float = Field(description="X component")
    y: float = Field(description="Y component")
    z: float = Field(description="Z component")

    @field_validator("x", "y", "z")
    @classmethod
    def validate_components(cls, value: float) -> float:
        """Validate that components are finite numbers."""
        if not math.isfinite(value):
            raise InvalidValueError(f"Vector component must be a finite number, got {value}")
        return value

    @classmethod
    def zero(cls) -> "Vector3":
        return cls(x=0.0, y=0.0, z=0.0)

    @classmethod
    def from_tuple(cls, values: Iterable[float]) -> "Vector3":
        """Build a vector from any (x, y, z) iterable."""
        x, y, z = values
        return cls(x=x, y=y, z=z)

    @classmethod
    def unit(cls, axis: Axis) -> "Vector3":
        """Unit vector along a coordinate axis."""
        axis = parse_variant(Axis, axis)
        return cls(
            x=1.0 if axis is Axis.X else 0.0,
            y=1.0 if axis is Axis.Y else 0.0,
            z=1.0 if axis is Axis.Z else 0.0,
        )

    def as_tuple(self) -> Tuple[float, float, float]:
        return self.x, self.y, self.z

    def component(self, axis: Axis) -> float:
        """Get the component along one axis."""
        return getattr(self, parse_variant(Axis, axis).value)

    def __add__(self, other: "Vector3") -> "Vector3":
        """Vector addition."""
        return Vector3(x=self.x + other.x, y=self.y + other.y, z=self.z + other.z)

    def __sub__(self, other: "Vector3") -> "Vector3":
        """Vector subtraction."""
        return Vector3(x=self.x - other.x, y=self.y - other.y, z=self.z - other.z)

    def __neg__(self) -> "Vector3":
        return Vector3(x=-self.x, y=-self.y, z=-self.z)

    def scale(self, factor: float) -> "Vector3":
        """Scale the vector components by a factor."""
        return Vector3(x=self.x * factor, y=self.y * factor, z=self.z * factor)

    def dot(self, other: "Vector3") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "Vector3") -> "Vector3":
        return Vector3(
            x=self.y * other.z - self.z * other.y,
            y=self.z * other.x - self.x * other.z,
            z=self.x * other.y - self.y * other.x,
        )

    @property
    def magnitude(self) -> float:
        """Euclidean length of the vector, without overflow for large components."""
        return math.hypot(self.x, self.y, self.z)

    @property
    def magnitude_squared(self) -> float:
        return self.x * self.x + self.y * self.y + self.z * self.z

    def is_zero(self, tolerance: Optional[float] = None) -> bool:
        """Check whether the magnitude is below the tolerance (default EPSILON)."""
        if tolerance is None:
            tolerance = EPSILON
        return self.magnitude < tolerance

    def normalize(self, tolerance: Optional[float] = None) -> "Vector3":
        """
        Get the unit vector pointing in the same direction.

        Args:
            tolerance: Magnitude below which the vector counts as zero.
                       If None, uses the default EPSILON value.

        Raises:
            DegenerateGeometryError: If the vector is (nearly) zero
        """
        if self.is_zero(tolerance):
            raise DegenerateGeometryError("Cannot normalize zero vector")
        length = self.magnitude
        return Vector3(x=self.x / length, y=self.y / length, z=self.z / length)

    def distance_to(self, other: "Vector3") -> float:
        """Calculate the Euclidean distance to another point."""
        return (self - other).magnitude

    def is_close_to(self, other: "Vector3", tolerance: Optional[float] = None) -> bool:
        """
        Check if this point is close to another point within the specified tolerance.

        Args:
            other: The point to compare with
            tolerance: Maximum distance between points to be considered equal.
                      If None, uses the default EPSILON value.

        Returns:
            True if points are within the tolerance distance of each other
        """
        if tolerance is None:
            tolerance = EPSILON
        return self.distance_to(other) <= tolerance

    def midpoint(self, other: "Vector3") -> "Vector3":
        """Calculate the midpoint between this point and another point."""
        return Vector3(
            x=(self.x + other.x) / 2,
            y=(self.y + other.y) / 2,
            z=(self.z + other.z) / 2,
        )

    def is_parallel_to(self, other: "Vector3", tolerance: Optional[float] = None) -> bool:
        """
        Check whether two vectors are parallel or anti-parallel.

        Compares the sine of the angle between the directions, so the result
        does not depend on the vectors' lengths. A zero vector is parallel to
        everything.
        """
        if tolerance is None:
            tolerance = EPSILON
        if self.is_zero() or other.is_zero():
            return True
        sine = self.normalize().cross(other.normalize()).magnitude
        return sine < tolerance

    def is_perpendicular_to(self, other: "Vector3", tolerance: Optional[float] = None) -> bool:
        """Check whether the dot product vanishes within the tolerance."""
        if tolerance is None:
            tolerance = EPSILON
        return abs(self.dot(other)) < tolerance

    def angle_to(self, other: "Vector3") -> float:
        """
        Angle between two vectors in radians, in range [0, π].

        Raises:
            DegenerateGeometryError: If either vector is zero
        """
        if self.is_zero() or other.is_zero():
            raise DegenerateGeometryError("Cannot compute angle with zero vector")
        cos_angle = self.normalize().dot(other.normalize())
        # Clamp against rounding just outside [-1, 1]
        return math.acos(max(-1.0, min(1.0, cos_angle)))

    def format_as_tuple(self) -> str:
        """Format the vector as a tuple string."""
        return f"({self.x}, {self.y}, {self.z})"

    def __str__(self) -> str:
        """String representation of the vector."""
        return self.format_as_tuple()
