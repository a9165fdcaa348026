# spatial/algebra/matrix.py
from typing import List, Optional, Tuple
from pydantic import Field, field_validator
import math
from spatial.algebra.vector import Axis, Vector3
from spatial.constants import EPSILON
from spatial.errors import DegenerateGeometryError, InvalidValueError, parse_variant
from utils.base_model import ImmutableModel

Row3 = Tuple[float, float, float]
Row4 = Tuple[float, float, float, float]


def _validate_rows(rows):
    for i, row in enumerate(rows):
        for j, value in enumerate(row):
            if not math.isfinite(value):
                raise InvalidValueError(f"Matrix element ({i}, {j}) must be a finite number, got {value}")
    return rows


def determinant_3x3(m) -> float:
    """Determinant of a row-major 3x3 nested sequence (cofactor expansion)."""
    return (m[0][0] * (m[1][1] * m[2][2] - m[1][2] * m[2][1])
            - m[0][1] * (m[1][0] * m[2][2] - m[1][2] * m[2][0])
            + m[0][2] * (m[1][0] * m[2][1] - m[1][1] * m[2][0]))


class Matrix3x3(ImmutableModel):
    """
    Row-major 3x3 matrix of finite doubles.

    Used for rotations, for the least-squares normal equations of the
    multi-line solver, and as the kernel's linear-solve primitive.
    """
    rows: Tuple[Row3, Row3, Row3] = Field(description="Three rows of three elements")

    @field_validator("rows")
    @classmethod
    def validate_elements(cls, rows):
        """Validate that all elements are finite."""
        return _validate_rows(rows)

    @classmethod
    def identity(cls) -> "Matrix3x3":
        return cls(rows=((1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0)))

    @classmethod
    def zeros(cls) -> "Matrix3x3":
        return cls(rows=((0.0, 0.0, 0.0), (0.0, 0.0, 0.0), (0.0, 0.0, 0.0)))

    @classmethod
    def outer(cls, u: Vector3, v: Vector3) -> "Matrix3x3":
        """Outer product u vᵀ."""
        a, b = u.as_tuple(), v.as_tuple()
        return cls(rows=tuple(tuple(a[i] * b[j] for j in range(3)) for i in range(3)))

    @classmethod
    def from_columns(cls, c0: Vector3, c1: Vector3, c2: Vector3) -> "Matrix3x3":
        return cls(rows=(
            (c0.x, c1.x, c2.x),
            (c0.y, c1.y, c2.y),
            (c0.z, c1.z, c2.z),
        ))

    @classmethod
    def rotation_about(cls, axis: Axis, angle: float) -> "Matrix3x3":
        """Elementary right-handed rotation about a coordinate axis."""
        c = math.cos(angle)
        s = math.sin(angle)
        axis = parse_variant(Axis, axis)
        if axis is Axis.X:
            rows = ((1.0, 0.0, 0.0), (0.0, c, -s), (0.0, s, c))
        elif axis is Axis.Y:
            rows = ((c, 0.0, s), (0.0, 1.0, 0.0), (-s, 0.0, c))
        else:
            rows = ((c, -s, 0.0), (s, c, 0.0), (0.0, 0.0, 1.0))
        return cls(rows=rows)

    def element(self, i: int, j: int) -> float:
        return self.rows[i][j]

    def row(self, i: int) -> Vector3:
        return Vector3.from_tuple(self.rows[i])

    def column(self, j: int) -> Vector3:
        return Vector3(x=self.rows[0][j], y=self.rows[1][j], z=self.rows[2][j])

    def __add__(self, other: "Matrix3x3") -> "Matrix3x3":
        return Matrix3x3(rows=tuple(
            tuple(self.rows[i][j] + other.rows[i][j] for j in range(3)) for i in range(3)
        ))

    def __sub__(self, other: "Matrix3x3") -> "Matrix3x3":
        return Matrix3x3(rows=tuple(
            tuple(self.rows[i][j] - other.rows[i][j] for j in range(3)) for i in range(3)
        ))

    def scale(self, factor: float) -> "Matrix3x3":
        return Matrix3x3(rows=tuple(tuple(value * factor for value in row) for row in self.rows))

    def multiply(self, other: "Matrix3x3") -> "Matrix3x3":
        """Matrix product self · other."""
        a, b = self.rows, other.rows
        return Matrix3x3(rows=tuple(
            tuple(sum(a[i][k] * b[k][j] for k in range(3)) for j in range(3)) for i in range(3)
        ))

    def __matmul__(self, other: "Matrix3x3") -> "Matrix3x3":
        return self.multiply(other)

    def transform(self, vector: Vector3) -> Vector3:
        """Matrix-vector product M · v."""
        v = vector.as_tuple()
        return Vector3.from_tuple(sum(row[k] * v[k] for k in range(3)) for row in self.rows)

    def transpose(self) -> "Matrix3x3":
        return Matrix3x3(rows=tuple(tuple(self.rows[j][i] for j in range(3)) for i in range(3)))

    @property
    def determinant(self) -> float:
        return determinant_3x3(self.rows)

    def inverse(self, tolerance: Optional[float] = None) -> "Matrix3x3":
        """
        Inverse via the adjugate.

        Raises:
            DegenerateGeometryError: If |det| is below the tolerance (default EPSILON)
        """
        if tolerance is None:
            tolerance = EPSILON
        det = self.determinant
        if abs(det) < tolerance:
            raise DegenerateGeometryError("Matrix is not invertible (determinant is zero)")

        m = self.rows
        inv_det = 1.0 / det
        return Matrix3x3(rows=(
            ((m[1][1] * m[2][2] - m[1][2] * m[2][1]) * inv_det,
             (m[0][2] * m[2][1] - m[0][1] * m[2][2]) * inv_det,
             (m[0][1] * m[1][2] - m[0][2] * m[1][1]) * inv_det),
            ((m[1][2] * m[2][0] - m[1][0] * m[2][2]) * inv_det,
             (m[0][0] * m[2][2] - m[0][2] * m[2][0]) * inv_det,
             (m[0][2] * m[1][0] - m[0][0] * m[1][2]) * inv_det),
            ((m[1][0] * m[2][1] - m[1][1] * m[2][0]) * inv_det,
             (m[0][1] * m[2][0] - m[0][0] * m[2][1]) * inv_det,
             (m[0][0] * m[1][1] - m[0][1] * m[1][0]) * inv_det),
        ))

    def solve(self, rhs: Vector3, tolerance: Optional[float] = None) -> Vector3:
        """
        Solve M · x = rhs by Cramer's rule.

        Raises:
            DegenerateGeometryError: If the system is singular
        """
        if tolerance is None:
            tolerance = EPSILON
        det = self.determinant
        if abs(det) < tolerance:
            raise DegenerateGeometryError("Matrix is singular")

        b = rhs.as_tuple()
        solution: List[float] = []
        for col in range(3):
            replaced = [list(row) for row in self.rows]
            for i in range(3):
                replaced[i][col] = b[i]
            solution.append(determinant_3x3(replaced) / det)
        return Vector3.from_tuple(solution)

    def is_close_to(self, other: "Matrix3x3", tolerance: Optional[float] = None) -> bool:
        if tolerance is None:
            tolerance = EPSILON
        return all(
            abs(self.rows[i][j] - other.rows[i][j]) <= tolerance
            for i in range(3) for j in range(3)
        )

    def __str__(self) -> str:
        return "Matrix3x3(" + ", ".join(str(list(row)) for row in self.rows) + ")"


class Matrix4x4(ImmutableModel):
    """Row-major 4x4 matrix for affine transforms of points."""
    rows: Tuple[Row4, Row4, Row4, Row4] = Field(description="Four rows of four elements")

    @field_validator("rows")
    @classmethod
    def validate_elements(cls, rows):
        """Validate that all elements are finite."""
        return _validate_rows(rows)

    @classmethod
    def identity(cls) -> "Matrix4x4":
        return cls(rows=tuple(tuple(1.0 if i == j else 0.0 for j in range(4)) for i in range(4)))

    @classmethod
    def from_matrix3x3(cls, matrix: Matrix3x3) -> "Matrix4x4":
        """Embed a linear 3x3 transform (no translation)."""
        m = matrix.rows
        return cls(rows=(
            (m[0][0], m[0][1], m[0][2], 0.0),
            (m[1][0], m[1][1], m[1][2], 0.0),
            (m[2][0], m[2][1], m[2][2], 0.0),
            (0.0, 0.0, 0.0, 1.0),
        ))

    @classmethod
    def translation(cls, offset: Vector3) -> "Matrix4x4":
        return cls(rows=(
            (1.0, 0.0, 0.0, offset.x),
            (0.0, 1.0, 0.0, offset.y),
            (0.0, 0.0, 1.0, offset.z),
            (0.0, 0.0, 0.0, 1.0),
        ))

    @classmethod
    def scaling(cls, factors: Vector3) -> "Matrix4x4":
        return cls(rows=(
            (factors.x, 0.0, 0.0, 0.0),
            (0.0, factors.y, 0.0, 0.0),
            (0.0, 0.0, factors.z, 0.0),
            (0.0, 0.0, 0.0, 1.0),
        ))

    def element(self, i: int, j: int) -> float:
        return self.rows[i][j]

    def multiply(self, other: "Matrix4x4") -> "Matrix4x4":
        """Matrix product self · other (apply ``other`` first)."""
        a, b = self.rows, other.rows
        return Matrix4x4(rows=tuple(
            tuple(sum(a[i][k] * b[k][j] for k in range(4)) for j in range(4)) for i in range(4)
        ))

    def __matmul__(self, other: "Matrix4x4") -> "Matrix4x4":
        return self.multiply(other)

    def transform_point(self, point: Vector3) -> Vector3:
        """Apply the affine part (linear block plus translation column) to a point."""
        p = point.as_tuple() + (1.0,)
        return Vector3.from_tuple(sum(self.rows[i][k] * p[k] for k in range(4)) for i in range(3))

    def transform_direction(self, direction: Vector3) -> Vector3:
        """Apply only the linear block; translation does not move directions."""
        return self.linear_part().transform(direction)

    def linear_part(self) -> Matrix3x3:
        return Matrix3x3(rows=tuple(tuple(self.rows[i][j] for j in range(3)) for i in range(3)))

    @property
    def determinant(self) -> float:
        """Laplace expansion along the first row."""
        m = self.rows
        total = 0.0
        for col in range(4):
            minor = [[m[i][j] for j in range(4) if j != col] for i in range(1, 4)]
            sign = -1.0 if col % 2 else 1.0
            total += sign * m[0][col] * determinant_3x3(minor)
        return total

    def __str__(self) -> str:
        return "Matrix4x4(" + ", ".join(str(list(row)) for row in self.rows) + ")"
