"""
Conversion error hierarchy.

Every failure of a single conversion call raises one of these.  All of
them derive from ``ConversionError``, itself a ``ValueError``, and carry
a stable error code for callers that report failures in bulk.

Error Codes:
- FS_UNSUPPORTED_VERSION: no schema generation for the requested version
- FS_MISSING_RESOURCE_TYPE: document has no ``resourceType``
- FS_UNSUPPORTED_RESOURCE_TYPE: no top-level definition for the kind
- FS_PATH_NOT_FOUND: field matches no element (nor choice substitution)
- FS_UNSUPPORTED_CARDINALITY: element max is 0
- FS_CARDINALITY_VIOLATION: single-valued element given a sequence
- FS_UNSUPPORTED_TYPE: leaf type has no converter
- FS_PARSE_ERROR: malformed shorthand literal
"""

from __future__ import annotations

from typing import Any, Optional

__all__ = [
    "ConversionError",
    "UnsupportedVersionError",
    "MissingResourceTypeError",
    "UnsupportedResourceTypeError",
    "PathNotFoundError",
    "UnsupportedCardinalityError",
    "CardinalityViolationError",
    "UnsupportedTypeError",
    "ParseError",
]


class ConversionError(ValueError):
    """Base exception for all conversion errors.

    Attributes:
        code: Deterministic error code (``FS_*``).
        message: Human-readable description.
        details: Additional context (path, type code, literal, ...).
    """

    code: str = "FS_CONVERSION_ERROR"

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details if details is not None else {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for batch reports."""
        return {
            "code": self.code,
            "message": self.message,
            "details": dict(self.details),
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class UnsupportedVersionError(ConversionError):
    code = "FS_UNSUPPORTED_VERSION"

    def __init__(self, fhir_version: str) -> None:
        super().__init__(
            f"Unsupported version of FHIR: {fhir_version}",
            {"fhir_version": fhir_version},
        )


class MissingResourceTypeError(ConversionError):
    code = "FS_MISSING_RESOURCE_TYPE"

    def __init__(self) -> None:
        super().__init__('Each data object must specify its "resourceType"')


class UnsupportedResourceTypeError(ConversionError):
    code = "FS_UNSUPPORTED_RESOURCE_TYPE"

    def __init__(self, resource_type: str) -> None:
        super().__init__(
            f"Unsupported resourceType: {resource_type}",
            {"resource_type": resource_type},
        )
        self.resource_type = resource_type


class PathNotFoundError(ConversionError):
    code = "FS_PATH_NOT_FOUND"

    def __init__(self, path: str) -> None:
        super().__init__(f"Path not found: {path}", {"path": path})
        self.path = path


class UnsupportedCardinalityError(ConversionError):
    code = "FS_UNSUPPORTED_CARDINALITY"

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Cannot set {path} because its max is 0", {"path": path},
        )
        self.path = path


class CardinalityViolationError(ConversionError):
    code = "FS_CARDINALITY_VIOLATION"

    def __init__(self, path: str) -> None:
        super().__init__(
            f"{path} does not allow multiple values", {"path": path},
        )
        self.path = path


class UnsupportedTypeError(ConversionError):
    code = "FS_UNSUPPORTED_TYPE"

    def __init__(self, type_code: Optional[str], path: Optional[str] = None) -> None:
        super().__init__(
            f"Unsupported type: {type_code}",
            {"type_code": type_code, "path": path},
        )
        self.type_code = type_code


class ParseError(ConversionError):
    code = "FS_PARSE_ERROR"

    def __init__(self, kind: str, literal: Any) -> None:
        super().__init__(
            f"Couldn't parse {kind}: {literal}",
            {"kind": kind, "literal": literal},
        )
        self.kind = kind
        self.literal = literal
