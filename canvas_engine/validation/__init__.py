"""Schema reference checks and full schema validation."""

from .lib import (
    SchemaReferenceError,
    ValidationIssue,
    ValidationResult,
    format_validation_result,
    validate_references,
    validate_schema,
)

__all__ = [
    "SchemaReferenceError",
    "ValidationIssue",
    "ValidationResult",
    "validate_references",
    "validate_schema",
    "format_validation_result",
]
