# spatial/errors.py
"""Typed failures raised by kernel operations."""
import math
from enum import Enum


class ErrorKind(str, Enum):
    """Failure categories surfaced to callers."""
    INVALID_VALUE = "invalid_value"
    DEGENERATE_GEOMETRY = "degenerate_geometry"
    OUT_OF_RANGE = "out_of_range"
    UNSUPPORTED_VARIANT = "unsupported_variant"


class GeometryError(ValueError):
    """Base class for every input-dependent kernel failure."""
    kind: ErrorKind = ErrorKind.INVALID_VALUE

    @property
    def message(self) -> str:
        return str(self)


class InvalidValueError(GeometryError):
    """NaN or infinity somewhere in the input (or produced from it)."""
    kind = ErrorKind.INVALID_VALUE


class DegenerateGeometryError(GeometryError):
    """Zero-length vector, zero radius, collinear points, singular system."""
    kind = ErrorKind.DEGENERATE_GEOMETRY


class OutOfRangeError(GeometryError):
    """Parameter outside its domain (interpolation factor, box ordering, ...)."""
    kind = ErrorKind.OUT_OF_RANGE


class UnsupportedVariantError(GeometryError):
    """Tag naming an axis, coordinate system, box type or operation we do not know."""
    kind = ErrorKind.UNSUPPORTED_VARIANT


def ensure_finite(value: float, name: str = "value") -> float:
    """Return ``value`` unchanged, raising InvalidValueError for NaN/infinity."""
    if not math.isfinite(value):
        raise InvalidValueError(f"{name} must be a finite number, got {value}")
    return value


def ensure_finite_result(value: float, name: str = "Result") -> float:
    """Return a computed ``value`` unchanged, raising InvalidValueError if it overflowed."""
    if not math.isfinite(value):
        raise InvalidValueError(f"{name} is not finite; input magnitudes are too large")
    return value


def parse_variant(variant_type, value):
    """
    Coerce a tag into a member of the enum ``variant_type``.

    Raises:
        UnsupportedVariantError: If the tag names no member
    """
    if isinstance(value, variant_type):
        return value
    try:
        return variant_type(value.lower() if isinstance(value, str) else value)
    except ValueError:
        supported = ", ".join(repr(member.value) for member in variant_type)
        raise UnsupportedVariantError(
            f"Unsupported {variant_type.__name__} {value!r}; expected one of {supported}"
        ) from None
