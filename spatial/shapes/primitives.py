# spatial/shapes/primitives.py
from pydantic import Field, field_validator, model_validator
from spatial.algebra.vector import Axis, Vector3
from spatial.errors import DegenerateGeometryError, OutOfRangeError, ensure_finite
from utils.base_model import ImmutableModel


def _positive(value: float, name: str) -> float:
    ensure_finite(value, name)
    if value <= 0:
        raise DegenerateGeometryError(f"{name} must be positive, got {value}")
    return value


class Ray(ImmutableModel):
    """
    Half-line starting at ``origin``.

    Hit distances reported by the intersection tests are measured along the
    unit direction, so they are true Euclidean distances from the origin.
    """
    origin: Vector3 = Field(description="Start point of the ray")
    direction: Vector3 = Field(description="Direction of travel")

    @model_validator(mode="after")
    def validate_direction(self):
        if self.direction.is_zero():
            raise DegenerateGeometryError("Ray direction vector cannot be zero")
        return self

    @property
    def unit_direction(self) -> Vector3:
        return self.direction.normalize()

    def point_at(self, distance: float) -> Vector3:
        """Point ``distance`` units from the origin along the unit direction."""
        return self.origin + self.unit_direction.scale(distance)


class Sphere(ImmutableModel):
    center: Vector3
    radius: float

    @field_validator("radius")
    @classmethod
    def validate_radius(cls, value: float) -> float:
        return _positive(value, "Sphere radius")

    def contains_point(self, point: Vector3) -> bool:
        return self.center.distance_to(point) <= self.radius


class Cylinder(ImmutableModel):
    """
    Finite right circular cylinder.

    ``center`` is the midpoint of the axis segment; the cylinder extends
    height/2 to either side of it along ``axis``.
    """
    center: Vector3 = Field(description="Midpoint of the cylinder axis")
    axis: Vector3 = Field(description="Axis direction (any non-zero length)")
    radius: float
    height: float

    @field_validator("radius")
    @classmethod
    def validate_radius(cls, value: float) -> float:
        return _positive(value, "Cylinder radius")

    @field_validator("height")
    @classmethod
    def validate_height(cls, value: float) -> float:
        return _positive(value, "Cylinder height")

    @model_validator(mode="after")
    def validate_axis(self):
        if self.axis.is_zero():
            raise DegenerateGeometryError("Cylinder axis vector cannot be zero")
        return self

    @property
    def unit_axis(self) -> Vector3:
        return self.axis.normalize()


class AABB(ImmutableModel):
    """Axis-aligned bounding box, ``min_point`` strictly below ``max_point`` on every axis."""
    min_point: Vector3
    max_point: Vector3

    @model_validator(mode="after")
    def validate_ordering(self):
        for axis in Axis:
            low, high = self.min_point.component(axis), self.max_point.component(axis)
            if low >= high:
                raise OutOfRangeError(
                    f"AABB min must be less than max on every axis ({axis.value}: {low} >= {high})"
                )
        return self

    @property
    def center(self) -> Vector3:
        return self.min_point.midpoint(self.max_point)

    @property
    def dimensions(self) -> Vector3:
        return self.max_point - self.min_point

    @property
    def volume(self) -> float:
        size = self.dimensions
        return size.x * size.y * size.z

    def contains_point(self, point: Vector3) -> bool:
        """Inclusive containment test (points on a face are inside)."""
        return all(
            self.min_point.component(axis) <= point.component(axis) <= self.max_point.component(axis)
            for axis in Axis
        )
