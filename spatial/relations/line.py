# spatial/relations/line.py
from typing import Optional
from pydantic import Field, model_validator
from spatial.algebra.vector import Vector3
from spatial.constants import EPSILON
from spatial.errors import DegenerateGeometryError
from utils.base_model import ImmutableModel


class Line3D(ImmutableModel):
    """
    Represents an infinite line through a point along a direction.

    The direction need not be unit length; parameters returned by the
    solvers are expressed in multiples of this direction vector.
    """
    point: Vector3 = Field(description="A point on the line")
    direction: Vector3 = Field(description="Direction vector of the line")

    @model_validator(mode="after")
    def validate_direction(self):
        """Validate that the line has a non-zero direction."""
        if self.direction.is_zero():
            raise DegenerateGeometryError("Line direction vector cannot be zero")
        return self

    @property
    def unit_direction(self) -> Vector3:
        return self.direction.normalize()

    def point_at(self, t: float) -> Vector3:
        """Point reached after ``t`` direction vectors from the base point."""
        return self.point + self.direction.scale(t)

    def project_point(self, point: Vector3) -> float:
        """
        Project a point onto the line and return the parameter t.

        Returns:
            The parameter t of the foot of the perpendicular
        """
        return (point - self.point).dot(self.direction) / self.direction.magnitude_squared

    def closest_point_to(self, point: Vector3) -> Vector3:
        return self.point_at(self.project_point(point))

    def distance_to_point(self, point: Vector3) -> float:
        """Perpendicular distance |w × d| / |d|."""
        return (point - self.point).cross(self.direction).magnitude / self.direction.magnitude

    def contains_point(self, point: Vector3, tolerance: Optional[float] = None) -> bool:
        if tolerance is None:
            tolerance = EPSILON
        return self.distance_to_point(point) < tolerance

    def is_parallel(self, other: "Line3D", tolerance: Optional[float] = None) -> bool:
        """Check if this line is parallel (or anti-parallel) to another line."""
        return self.direction.is_parallel_to(other.direction, tolerance)

    def __str__(self) -> str:
        """String representation of the line."""
        return f"Line3D({self.point} + t{self.direction})"


class Segment3D(ImmutableModel):
    """
    Represents a line segment defined by two points.

    Parameter t = 0 is the start point and t = 1 the end point.
    """
    start: Vector3 = Field(description="Starting point of the segment")
    end: Vector3 = Field(description="Ending point of the segment")

    @model_validator(mode="after")
    def validate_segment_length(self):
        """Validate that the segment has non-zero length."""
        if self.start.is_close_to(self.end):
            raise DegenerateGeometryError("Segment cannot have zero length (start and end points are the same)")
        return self

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)

    @property
    def midpoint(self) -> Vector3:
        return self.start.midpoint(self.end)

    @property
    def direction_vector(self) -> Vector3:
        """Vector from start to end."""
        return self.end - self.start

    def to_line(self) -> Line3D:
        """The infinite line carrying the segment, parametrised so t ∈ [0, 1] spans it."""
        return Line3D(point=self.start, direction=self.direction_vector)

    def point_at(self, t: float) -> Vector3:
        return self.start + self.direction_vector.scale(t)

    def closest_parameter(self, point: Vector3) -> float:
        """Parameter of the closest point on the segment, clamped to [0, 1]."""
        t = self.to_line().project_point(point)
        return max(0.0, min(1.0, t))

    def closest_point_to(self, point: Vector3) -> Vector3:
        return self.point_at(self.closest_parameter(point))

    def __str__(self) -> str:
        return f"Segment3D({self.start} -> {self.end})"
