# spatial/constants.py
"""Constants and tolerance configuration for geometric calculations."""
import math
from typing import Optional
from pydantic import Field, field_validator
from utils.base_model import ImmutableModel

# Default tolerance for floating-point comparisons
EPSILON = 1e-10


class Tolerances(ImmutableModel):
    """
    Named tolerances used by the classifiers and solvers.

    All of them default to EPSILON except where a different scale is
    inherent to the check. Derive a tuned set with ``with_changes``:

        loose = DEFAULT_TOLERANCES.with_changes(tangency=1e-6)
    """
    zero_vector: float = Field(default=EPSILON, description="Magnitude below which a vector is zero")
    parallel: float = Field(default=EPSILON, description="Sine of the angle below which directions are parallel")
    intersection: float = Field(default=EPSILON, description="Distance below which two objects meet")
    coincidence: float = Field(default=EPSILON, description="Distance below which parallel objects coincide")
    singular: float = Field(default=EPSILON, description="Determinant magnitude below which a system is singular")
    tangency: float = Field(default=EPSILON, description="Width of the tangency band for sphere classification")
    orthonormality: float = Field(default=1e-12, description="Allowed deviation of a rotation determinant from 1")
    slerp_linear_threshold: float = Field(default=0.9995, description="|q1.q2| above which slerp interpolates linearly")
    face_snap: float = Field(default=1e-6, description="Distance within which a point lies on a box face")
    reciprocal_sentinel: float = Field(default=1e10, description="Stand-in for 1/d when a ray component is ~0")

    @field_validator("*")
    @classmethod
    def validate_positive(cls, value: float) -> float:
        """Every tolerance must be a positive finite number."""
        if not (math.isfinite(value) and value > 0):
            raise ValueError(f"Tolerance must be positive and finite, got {value}")
        return value


DEFAULT_TOLERANCES = Tolerances()


def resolve_tolerances(tolerances: Optional[Tolerances]) -> Tolerances:
    """Return the caller's tolerances, falling back to the defaults."""
    return DEFAULT_TOLERANCES if tolerances is None else tolerances
