"""JSON-Schema style object constraints for mappings and named-field records.

This package provides:
- ObjectConstraint: fluent builder + validator for object rules
  (properties, patternProperties, additionalProperties, required,
  min/maxProperties, property and schema dependencies)
- Record accessors that read mappings, dataclasses and named tuples uniformly
- First-failure ValidationResult values with a typed error hierarchy
- Settings for record field naming, loadable from files and environment
"""

from .accessor import (
    MISSING,
    FieldRecordAccessor,
    MappingAccessor,
    RecordAccessor,
    case_insensitive_field_name,
    declared_field_names,
    exact_field_name,
    metadata_field_name,
    metadata_field_names,
    resolve_accessor,
)
from .config import JsvalSettings
from .constraints import Accept, All, Constraint, Custom, TypeOf
from .exceptions import (
    AdditionalPropertiesError,
    BoundsError,
    ConfigurationError,
    ConstraintError,
    DependencyError,
    JsvalError,
    PropertyValidationError,
    RequiredPropertyError,
    ShapeError,
)
from .object_constraint import ObjectConstraint, object_constraint
from .result import ValidationResult

__version__ = "0.1.0"

__all__ = [
    # Result types
    "ValidationResult",
    # Constraints
    "Constraint",
    "Accept",
    "All",
    "Custom",
    "TypeOf",
    "ObjectConstraint",
    "object_constraint",
    # Record access
    "MISSING",
    "RecordAccessor",
    "MappingAccessor",
    "FieldRecordAccessor",
    "resolve_accessor",
    "declared_field_names",
    "exact_field_name",
    "case_insensitive_field_name",
    "metadata_field_names",
    "metadata_field_name",
    # Settings
    "JsvalSettings",
    # Errors
    "JsvalError",
    "ConfigurationError",
    "ConstraintError",
    "ShapeError",
    "BoundsError",
    "RequiredPropertyError",
    "PropertyValidationError",
    "AdditionalPropertiesError",
    "DependencyError",
]
