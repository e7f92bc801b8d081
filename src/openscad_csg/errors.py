"""Diagnostics and result values for CSG tree conversion.

Conversion never raises for expected failures. Converters return a
:class:`Result`, and every problem found along the way is described by a
:class:`CSGError` carrying one of the string codes defined here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Literal, Optional, TypeVar, TYPE_CHECKING

if TYPE_CHECKING:
    from .tree.nodes import SourceLocation


Severity = Literal["error", "warning", "info"]

ERROR: Severity = "error"
WARNING: Severity = "warning"
INFO: Severity = "info"


# --- Conversion errors ---

CUBE_CONVERSION_ERROR = "CUBE_CONVERSION_ERROR"
SPHERE_CONVERSION_ERROR = "SPHERE_CONVERSION_ERROR"
CYLINDER_CONVERSION_ERROR = "CYLINDER_CONVERSION_ERROR"
CSG_OPERATION_ERROR = "CSG_OPERATION_ERROR"
TRANSFORM_CONVERSION_ERROR = "TRANSFORM_CONVERSION_ERROR"
CONVERSION_ERROR = "CONVERSION_ERROR"
PROCESSING_ERROR = "PROCESSING_ERROR"

# --- Structural errors ---

EMPTY_CSG_OPERATION = "EMPTY_CSG_OPERATION"
INVALID_TRANSFORM = "INVALID_TRANSFORM"
TRANSFORM_NO_CHILD = "TRANSFORM_NO_CHILD"
MAX_DEPTH_EXCEEDED = "MAX_DEPTH_EXCEEDED"

# --- Validation errors ---

MISSING_NODE_ID = "MISSING_NODE_ID"
MISSING_NODE_TYPE = "MISSING_NODE_TYPE"
INVALID_CUBE_SIZE = "INVALID_CUBE_SIZE"
INVALID_SPHERE_RADIUS = "INVALID_SPHERE_RADIUS"
INVALID_CYLINDER_HEIGHT = "INVALID_CYLINDER_HEIGHT"
INVALID_CYLINDER_RADIUS = "INVALID_CYLINDER_RADIUS"

# --- Warnings ---

UNSUPPORTED_NODE_TYPE = "UNSUPPORTED_NODE_TYPE"


@dataclass(frozen=True)
class CSGError:
    """A single diagnostic produced while converting or validating a CSG tree.

    Attributes:
        message: Human readable description.
        code: One of the string codes defined in this module.
        severity: "error", "warning" or "info". Only errors fail a run.
        source_location: Where in the OpenSCAD source the problem originates.
        node_id: The id of the CSG node concerned, when one exists.
    """
    message: str
    code: str
    severity: Severity = ERROR
    source_location: Optional["SourceLocation"] = None
    node_id: Optional[str] = None

    def __str__(self):
        where = f" at {self.source_location}" if self.source_location else ""
        return f"{self.severity.upper()} {self.code}{where}: {self.message}"


def create_csg_error(
    message: str,
    code: str,
    severity: Severity = ERROR,
    source_location: Optional["SourceLocation"] = None,
    node_id: Optional[str] = None,
) -> CSGError:
    return CSGError(
        message=message,
        code=code,
        severity=severity,
        source_location=source_location,
        node_id=node_id,
    )


T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a conversion or validation step.

    Exactly one of ``data`` (on success) or ``error`` (on failure) is set.

    Example:
        result = convert_cube(node, config)
        if result.success:
            cube = result.data
        else:
            print(result.error.code)
    """
    success: bool
    data: Optional[T] = None
    error: Any = None

    @classmethod
    def ok(cls, data: T) -> "Result[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: Any) -> "Result[T]":
        return cls(success=False, error=error)
