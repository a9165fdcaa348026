# spatial/measures/results.py
"""Result records of the area and volume calculators."""
from enum import Enum
from typing import List, Optional
from pydantic import Field
from spatial.algebra.vector import Vector3
from utils.base_model import ImmutableModel


class ProjectionPlane(str, Enum):
    """Coordinate plane a 3D polygon is projected onto for the shoelace sum."""
    XY = "xy"
    XZ = "xz"
    YZ = "yz"


class BoxType(str, Enum):
    AABB = "aabb"
    OBB = "obb"


class HullMethod(str, Enum):
    """How convex_hull_volume builds its tetrahedra."""
    FAN = "fan"
    INCREMENTAL = "incremental"


class VolumeResult(ImmutableModel):
    volume: float
    calculation_method: str


class TetrahedronVolumeResult(ImmutableModel):
    volume: float
    signed_volume: float = Field(description="Positive when d lies on the side (b - a) × (c - a) points to")
    calculation_method: str
    points: List[Vector3]


class PolygonAreaResult(ImmutableModel):
    area: float
    normal: Vector3 = Field(description="Unit normal, right-handed with respect to the vertex order")
    projection_plane: ProjectionPlane


class PointToPlaneResult(ImmutableModel):
    distance: float
    normal: Vector3 = Field(description="Unit normal of the plane through the reference points")


class BoundingBoxResult(ImmutableModel):
    volume: float
    box_type: BoxType
    min_point: Vector3
    max_point: Vector3
    dimensions: Vector3
    calculation_method: str


class ConvexHullResult(ImmutableModel):
    volume: float
    method: HullMethod
    calculation_method: str
    is_approximation: bool = Field(description="True when the volume is not that of the true convex hull")
    hull_points: List[Vector3]
    num_tetrahedra: int
    num_faces: Optional[int] = Field(default=None, description="Triangles of the hull surface (incremental only)")
