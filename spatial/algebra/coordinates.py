# spatial/algebra/coordinates.py
"""
Alternate coordinate representations of a Vector3.

Angles are radians. Spherical coordinates use the physics convention:
theta is the azimuth in the XY plane measured from +X, phi the polar angle
measured from +Z.
"""
import logging
import math
from enum import Enum
from typing import Union
from pydantic import Field, field_validator
from spatial.algebra.vector import Vector3
from spatial.errors import InvalidValueError, OutOfRangeError, parse_variant
from utils.base_model import ImmutableModel

logger = logging.getLogger(__name__)


class CoordinateSystem(str, Enum):
    CARTESIAN = "cartesian"
    SPHERICAL = "spherical"
    CYLINDRICAL = "cylindrical"


def _finite(value: float) -> float:
    if not math.isfinite(value):
        raise InvalidValueError(f"Coordinate must be a finite number, got {value}")
    return value


class SphericalCoord(ImmutableModel):
    """Spherical coordinates (radius, azimuth theta, polar angle phi)."""
    radius: float = Field(description="Distance from the origin, >= 0")
    theta: float = Field(description="Azimuth in radians")
    phi: float = Field(description="Polar angle from +Z in radians")

    @field_validator("radius", "theta", "phi")
    @classmethod
    def validate_finite(cls, value: float) -> float:
        return _finite(value)

    @field_validator("radius")
    @classmethod
    def validate_radius(cls, value: float) -> float:
        """A negative radius has no geometric meaning."""
        if value < 0:
            raise OutOfRangeError(f"Spherical radius cannot be negative, got {value}")
        return value


class CylindricalCoord(ImmutableModel):
    """Cylindrical coordinates (radial distance, azimuth theta, height z)."""
    radius: float = Field(description="Distance from the Z axis, >= 0")
    theta: float = Field(description="Azimuth in radians")
    z: float = Field(description="Height along Z")

    @field_validator("radius", "theta", "z")
    @classmethod
    def validate_finite(cls, value: float) -> float:
        return _finite(value)

    @field_validator("radius")
    @classmethod
    def validate_radius(cls, value: float) -> float:
        if value < 0:
            raise OutOfRangeError(f"Cylindrical radius cannot be negative, got {value}")
        return value


def cartesian_to_spherical(vector: Vector3) -> SphericalCoord:
    radius = math.hypot(vector.x, vector.y, vector.z)
    theta = math.atan2(vector.y, vector.x)
    # atan2 keeps full precision near the poles, where acos(z/r) does not
    phi = math.atan2(math.hypot(vector.x, vector.y), vector.z)
    return SphericalCoord(radius=radius, theta=theta, phi=phi)


def spherical_to_cartesian(coord: SphericalCoord) -> Vector3:
    sin_phi = math.sin(coord.phi)
    return Vector3(
        x=coord.radius * sin_phi * math.cos(coord.theta),
        y=coord.radius * sin_phi * math.sin(coord.theta),
        z=coord.radius * math.cos(coord.phi),
    )


def cartesian_to_cylindrical(vector: Vector3) -> CylindricalCoord:
    return CylindricalCoord(
        radius=math.hypot(vector.x, vector.y),
        theta=math.atan2(vector.y, vector.x),
        z=vector.z,
    )


def cylindrical_to_cartesian(coord: CylindricalCoord) -> Vector3:
    return Vector3(
        x=coord.radius * math.cos(coord.theta),
        y=coord.radius * math.sin(coord.theta),
        z=coord.z,
    )


class CoordinateConversion(ImmutableModel):
    """Result of convert_coordinates; triples are packed as (x, y, z) slots."""
    original: Vector3
    converted: Vector3
    from_system: CoordinateSystem
    to_system: CoordinateSystem


def _to_cartesian(triple: Vector3, system: CoordinateSystem) -> Vector3:
    if system is CoordinateSystem.SPHERICAL:
        return spherical_to_cartesian(SphericalCoord(radius=triple.x, theta=triple.y, phi=triple.z))
    if system is CoordinateSystem.CYLINDRICAL:
        return cylindrical_to_cartesian(CylindricalCoord(radius=triple.x, theta=triple.y, z=triple.z))
    return triple


def _from_cartesian(vector: Vector3, system: CoordinateSystem) -> Vector3:
    coord: Union[SphericalCoord, CylindricalCoord]
    if system is CoordinateSystem.SPHERICAL:
        coord = cartesian_to_spherical(vector)
        return Vector3(x=coord.radius, y=coord.theta, z=coord.phi)
    if system is CoordinateSystem.CYLINDRICAL:
        coord = cartesian_to_cylindrical(vector)
        return Vector3(x=coord.radius, y=coord.theta, z=coord.z)
    return vector


def convert_coordinates(coordinates: Vector3, from_system: CoordinateSystem,
                        to_system: CoordinateSystem) -> CoordinateConversion:
    """
    Convert a coordinate triple between any two supported systems.

    Spherical triples are (radius, theta, phi) and cylindrical triples
    (radius, theta, z). Conversions between two non-cartesian systems go
    through cartesian; converting a system to itself returns the input.

    Raises:
        UnsupportedVariantError: If a tag is not a CoordinateSystem member
        OutOfRangeError: If a source radius is negative
    """
    from_system = parse_variant(CoordinateSystem, from_system)
    to_system = parse_variant(CoordinateSystem, to_system)

    if from_system is to_system:
        converted = coordinates
    else:
        converted = _from_cartesian(_to_cartesian(coordinates, from_system), to_system)

    logger.debug(f"Converted {coordinates} from {from_system.value} to {to_system.value}: {converted}")
    return CoordinateConversion(
        original=coordinates,
        converted=converted,
        from_system=from_system,
        to_system=to_system,
    )
