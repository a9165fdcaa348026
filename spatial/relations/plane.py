# spatial/relations/plane.py
import math
from enum import Enum
from typing import Optional
from pydantic import Field, model_validator
from spatial.algebra.vector import Vector3
from spatial.constants import EPSILON
from spatial.errors import DegenerateGeometryError
from utils.base_model import ImmutableModel


class PlaneSide(str, Enum):
    """Which half-space a point is in, relative to the plane normal."""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    ON_PLANE = "on_plane"


class Plane3D(ImmutableModel):
    """
    Represents a plane through a point with a (not necessarily unit) normal.

    Distances are always measured with the unit normal, so scaling the normal
    does not change any result.
    """
    point: Vector3 = Field(description="A point on the plane")
    normal: Vector3 = Field(description="Normal vector of the plane")

    @model_validator(mode="after")
    def validate_normal(self):
        """Validate that the plane has a non-zero normal."""
        if self.normal.is_zero():
            raise DegenerateGeometryError("Plane normal vector cannot be zero")
        return self

    @classmethod
    def from_three_points(cls, p1: Vector3, p2: Vector3, p3: Vector3,
                          tolerance: Optional[float] = None) -> "Plane3D":
        """
        Plane through three points, normal (p2 − p1) × (p3 − p1).

        Raises:
            DegenerateGeometryError: If the points are collinear
        """
        normal = (p2 - p1).cross(p3 - p1)
        if normal.is_zero(tolerance):
            raise DegenerateGeometryError("Points are collinear - cannot define a plane")
        return cls(point=p1, normal=normal)

    @property
    def unit_normal(self) -> Vector3:
        return self.normal.normalize()

    @property
    def offset(self) -> float:
        """Constant d of the plane equation n̂ · p = d."""
        return self.unit_normal.dot(self.point)

    def signed_distance_to(self, point: Vector3) -> float:
        """Positive on the side the normal points to."""
        return (point - self.point).dot(self.unit_normal)

    def distance_to(self, point: Vector3) -> float:
        return abs(self.signed_distance_to(point))

    def project_point(self, point: Vector3) -> Vector3:
        """Foot of the perpendicular from ``point`` onto the plane."""
        return point - self.unit_normal.scale(self.signed_distance_to(point))

    def side_of(self, point: Vector3, tolerance: Optional[float] = None) -> PlaneSide:
        if tolerance is None:
            tolerance = EPSILON
        signed = self.signed_distance_to(point)
        if abs(signed) < tolerance:
            return PlaneSide.ON_PLANE
        return PlaneSide.POSITIVE if signed > 0 else PlaneSide.NEGATIVE

    def contains_point(self, point: Vector3, tolerance: Optional[float] = None) -> bool:
        return self.side_of(point, tolerance) is PlaneSide.ON_PLANE

    def is_parallel(self, other: "Plane3D", tolerance: Optional[float] = None) -> bool:
        return self.normal.is_parallel_to(other.normal, tolerance)

    def angle_to(self, other: "Plane3D") -> float:
        """Dihedral angle between the normals, acos(clamp(n̂₁ · n̂₂)), in [0, π]."""
        cos_angle = self.unit_normal.dot(other.unit_normal)
        return math.acos(max(-1.0, min(1.0, cos_angle)))

    def __str__(self) -> str:
        return f"Plane3D(point={self.point}, normal={self.normal})"
