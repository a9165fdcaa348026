# spatial/measures/hull.py
"""
Convex hull volume.

Two strategies are offered. The fan triangulation sums tetrahedra anchored
at the first point over consecutive point pairs; it is exact only when the
points already form a convex fan around that point, and is kept for
compatibility. The incremental hull builds the true hull surface and
measures the enclosed volume.
"""
import logging
from typing import List, Sequence, Set, Tuple
from spatial.algebra.vector import Vector3
from spatial.constants import Tolerances
from spatial.errors import DegenerateGeometryError

logger = logging.getLogger(__name__)

Face = Tuple[int, int, int]


def signed_tetrahedron_volume(a: Vector3, b: Vector3, c: Vector3, d: Vector3) -> float:
    """(b − a) · ((c − a) × (d − a)) / 6."""
    return (b - a).dot((c - a).cross(d - a)) / 6.0


def fan_volume(points: Sequence[Vector3]) -> Tuple[float, int]:
    """
    Sum of |tetrahedron(p0, pi, pj, pj+1)| for 1 <= i < j, j + 1 < n.

    Returns:
        (volume, number of tetrahedra)
    """
    reference = points[0]
    total = 0.0
    count = 0
    n = len(points)
    for i in range(1, n - 1):
        for j in range(i + 1, n - 1):
            total += abs(signed_tetrahedron_volume(reference, points[i], points[j], points[j + 1]))
            count += 1
    return total, count


class IncrementalHull:
    """
    Incremental 3D convex hull.

    Faces are index triples ordered counter-clockwise seen from outside, so
    each face normal (b − a) × (c − a) points out of the hull. Adding a point
    removes every face that can see it and closes the hole with a fan of
    new faces from the horizon edges to the point.
    """

    def __init__(self, points: Sequence[Vector3], tolerances: Tolerances):
        self.points = list(points)
        self.tolerance = tolerances.coincidence
        self.faces: List[Face] = []
        self.interior = Vector3.zero()

    def build(self) -> "IncrementalHull":
        seed = self._initial_tetrahedron()
        self.interior = Vector3(
            x=sum(self.points[i].x for i in seed) / 4.0,
            y=sum(self.points[i].y for i in seed) / 4.0,
            z=sum(self.points[i].z for i in seed) / 4.0,
        )
        a, b, c, d = seed
        for face in ((a, b, c), (a, c, d), (a, d, b), (b, d, c)):
            self.faces.append(self._outward(face))

        for index in range(len(self.points)):
            if index not in seed:
                self._add_point(index)
        logger.debug(f"Convex hull of {len(self.points)} points has {len(self.faces)} faces")
        return self

    def _initial_tetrahedron(self) -> Tuple[int, int, int, int]:
        """Four affinely independent points, each chosen as far as possible from the previous ones."""
        points = self.points
        a = 0
        b = max(range(len(points)), key=lambda i: points[i].distance_to(points[a]))
        if points[b].distance_to(points[a]) < self.tolerance:
            raise DegenerateGeometryError("All points coincide - convex hull has no volume")

        axis = points[b] - points[a]
        c = max(range(len(points)), key=lambda i: (points[i] - points[a]).cross(axis).magnitude)
        normal = axis.cross(points[c] - points[a])
        if normal.magnitude / axis.magnitude < self.tolerance:
            raise DegenerateGeometryError("All points are collinear - convex hull has no volume")

        unit_normal = normal.normalize()
        d = max(range(len(points)), key=lambda i: abs((points[i] - points[a]).dot(unit_normal)))
        if abs((points[d] - points[a]).dot(unit_normal)) < self.tolerance:
            raise DegenerateGeometryError("All points are coplanar - convex hull has no volume")
        return a, b, c, d

    def _normal(self, face: Face) -> Vector3:
        a, b, c = (self.points[i] for i in face)
        return (b - a).cross(c - a)

    def _outward(self, face: Face) -> Face:
        """Reorder a face so its normal points away from the interior point."""
        if self._normal(face).dot(self.interior - self.points[face[0]]) > 0:
            return face[0], face[2], face[1]
        return face

    def _sees(self, face: Face, point: Vector3) -> bool:
        normal = self._normal(face)
        return normal.dot(point - self.points[face[0]]) > self.tolerance * normal.magnitude

    def _add_point(self, index: int) -> None:
        point = self.points[index]
        visible = [face for face in self.faces if self._sees(face, point)]
        if not visible:
            return

        # Directed edges of visible faces whose twin is not visible form the horizon
        edges: Set[Tuple[int, int]] = set()
        for a, b, c in visible:
            edges.update(((a, b), (b, c), (c, a)))
        horizon = [(u, v) for u, v in edges if (v, u) not in edges]

        visible_set = set(visible)
        self.faces = [face for face in self.faces if face not in visible_set]
        self.faces.extend((u, v, index) for u, v in horizon)

    @property
    def vertex_indices(self) -> List[int]:
        return sorted({i for face in self.faces for i in face})

    @property
    def volume(self) -> float:
        """Sum of the tetrahedra joining the interior point to every face."""
        return sum(
            abs(signed_tetrahedron_volume(self.interior, *(self.points[i] for i in face)))
            for face in self.faces
        )


def incremental_hull(points: Sequence[Vector3], tolerances: Tolerances) -> IncrementalHull:
    """
    Build the convex hull of a point cloud.

    Raises:
        DegenerateGeometryError: If the points are coincident, collinear or coplanar
    """
    return IncrementalHull(points, tolerances).build()
