# spatial/shapes/results.py
"""Result records of the ray/shape and shape/shape intersection tests."""
from enum import Enum
from typing import List, Optional
from pydantic import Field
from spatial.algebra.vector import Vector3
from utils.base_model import ImmutableModel


class RayHit(ImmutableModel):
    """One point where a ray crosses a surface."""
    point: Vector3
    distance: float = Field(description="Distance from the ray origin")
    normal: Vector3 = Field(description="Outward unit surface normal (zero if undetermined)")


class RayIntersectionResult(ImmutableModel):
    """Forward hits of a ray, nearest first."""
    intersects: bool
    hits: List[RayHit] = Field(default_factory=list)
    closest_distance: Optional[float] = None

    @property
    def intersection_points(self) -> List[Vector3]:
        return [hit.point for hit in self.hits]

    @property
    def normals(self) -> List[Vector3]:
        return [hit.normal for hit in self.hits]

    @property
    def distances(self) -> List[float]:
        return [hit.distance for hit in self.hits]


class AABBOverlapResult(ImmutableModel):
    intersects: bool
    overlap_min: Optional[Vector3] = None
    overlap_max: Optional[Vector3] = None
    overlap_center: Optional[Vector3] = Field(default=None, description="Centroid of the overlap box")


class SphereRelation(str, Enum):
    SEPARATE = "separate"
    EXTERNAL_TANGENT = "external_tangent"
    INTERSECTING = "intersecting"
    INTERNAL_TANGENT = "internal_tangent"
    ONE_INSIDE_OTHER = "one_inside_other"


class IntersectionCircle(ImmutableModel):
    center: Vector3
    radius: float
    normal: Vector3 = Field(description="Unit vector from the first sphere's center to the second's")


class SphereSphereResult(ImmutableModel):
    relation: SphereRelation
    intersects: bool
    distance_between_centers: float
    intersection_circle: Optional[IntersectionCircle] = None
