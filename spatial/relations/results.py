# spatial/relations/results.py
"""Result records of the line/plane relationship solver."""
from enum import Enum
from typing import List, Optional
from pydantic import Field
from spatial.algebra.vector import Vector3
from spatial.relations.line import Line3D
from spatial.relations.plane import PlaneSide
from utils.base_model import ImmutableModel


class LineLineRelation(str, Enum):
    INTERSECTING = "intersecting"
    SKEW = "skew"
    PARALLEL = "parallel"
    COINCIDENT = "coincident"


class LinePlaneRelation(str, Enum):
    INTERSECTING = "intersecting"
    LINE_IN_PLANE = "line_in_plane"
    NO_INTERSECTION = "no_intersection"


class PlanePlaneRelation(str, Enum):
    INTERSECTING = "intersecting"
    PARALLEL = "parallel"
    COINCIDENT = "coincident"


class LineLineResult(ImmutableModel):
    relation: LineLineRelation
    intersects: bool
    intersection_point: Optional[Vector3] = None
    closest_point_line1: Vector3
    closest_point_line2: Vector3
    parameter_line1: float
    parameter_line2: float
    minimum_distance: float

    @property
    def are_parallel(self) -> bool:
        return self.relation in (LineLineRelation.PARALLEL, LineLineRelation.COINCIDENT)

    @property
    def are_skew(self) -> bool:
        return self.relation is LineLineRelation.SKEW

    @property
    def are_coincident(self) -> bool:
        return self.relation is LineLineRelation.COINCIDENT


class LinePlaneResult(ImmutableModel):
    relation: LinePlaneRelation
    intersects: bool
    intersection_point: Optional[Vector3] = None
    parameter: Optional[float] = Field(default=None, description="Line parameter of the intersection")
    line_is_parallel: bool
    distance_to_plane: float


class PlanePlaneResult(ImmutableModel):
    relation: PlanePlaneRelation
    intersects: bool
    intersection_line: Optional[Line3D] = Field(default=None, description="Unit direction n1 × n2")
    angle_radians: float
    angle_degrees: float

    @property
    def are_parallel(self) -> bool:
        return self.relation is not PlanePlaneRelation.INTERSECTING

    @property
    def are_coincident(self) -> bool:
        return self.relation is PlanePlaneRelation.COINCIDENT


class SegmentIntersectionResult(ImmutableModel):
    intersects: bool
    intersection_point: Optional[Vector3] = None
    closest_point_seg1: Vector3
    closest_point_seg2: Vector3
    parameter_seg1: float = Field(description="Clamped parameter on segment 1, in [0, 1]")
    parameter_seg2: float = Field(description="Clamped parameter on segment 2, in [0, 1]")
    minimum_distance: float
    intersection_on_both_segments: bool = Field(
        description="Closest points of the carrier lines already lie within both segments"
    )


class BestFitResult(ImmutableModel):
    best_intersection_point: Vector3
    individual_distances: List[float]
    total_squared_distance: float
    lines_processed: int


class PointLineDistanceResult(ImmutableModel):
    distance: float
    closest_point_on_line: Vector3
    parameter_on_line: float
    perpendicular_vector: Vector3
    point_is_on_line: bool


class PointPlaneDistanceResult(ImmutableModel):
    distance: float
    signed_distance: float
    closest_point_on_plane: Vector3
    point_is_on_plane: bool
    side_of_plane: PlaneSide


class LinePlaneDistanceResult(ImmutableModel):
    distance: float
    line_is_parallel: bool
    line_intersects_plane: bool
    intersection_point: Optional[Vector3] = None
    closest_point_on_line: Vector3
    closest_point_on_plane: Vector3


class PointProjectionResult(ImmutableModel):
    projected_point: Vector3
    parameter_on_line: float
    distance_to_projection: float
    is_on_line: bool


class PlaneProjectionResult(ImmutableModel):
    projected_point: Vector3
    distance_to_projection: float
    is_on_plane: bool
    projection_direction: Vector3 = Field(description="Zero when the point is already on the plane")
