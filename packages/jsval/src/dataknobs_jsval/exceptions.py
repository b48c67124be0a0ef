"""Exception hierarchy for object constraint validation.

Two families of errors live here:

- ``ConstraintError`` and its subclasses describe *validation failures*.
  They are returned as values inside a ``ValidationResult`` and are never
  raised by ``validate``. Callers that prefer exceptions can use
  ``ValidationResult.raise_for_error()``.
- ``ConfigurationError`` is *raised* when a constraint or settings object is
  configured with invalid arguments.

Example:
    ```python
    result = constraint.validate({"age": 30})
    if not result:
        err = result.error
        if isinstance(err, PropertyValidationError):
            logger.error(f"{err.property_name}: {err.cause}")
    ```
"""

from __future__ import annotations

from typing import Any, Dict


class JsvalError(Exception):
    """Base exception for the jsval package.

    Attributes:
        context: Dictionary containing contextual information about the error
        details: Alias for context

    Args:
        message: Human-readable error message
        context: Optional dictionary with error context (property names, etc.)
        details: Alternative to context (takes precedence if both are given)
    """

    def __init__(
        self,
        message: str,
        context: Dict[str, Any] | None = None,
        details: Dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.context = details or context or {}
        self.details = self.context


class ConfigurationError(JsvalError, ValueError):
    """Raised when a constraint or settings object is misconfigured.

    Example:
        ```python
        raise ConfigurationError(
            "minProperties must be non-negative",
            context={"value": -1}
        )
        ```
    """

    pass


class ConstraintError(JsvalError):
    """Base class for every validation failure."""

    pass


class ShapeError(ConstraintError):
    """The value is neither a string-keyed mapping nor a named-field record."""

    pass


class BoundsError(ConstraintError):
    """The number of properties violates minProperties or maxProperties."""

    def __init__(self, message: str, count: int, limit: int):
        super().__init__(message, context={"count": count, "limit": limit})
        self.count = count
        self.limit = limit


class RequiredPropertyError(ConstraintError):
    """A required property is absent."""

    def __init__(self, property_name: str):
        super().__init__(
            f"object property '{property_name}' is required",
            context={"property": property_name},
        )
        self.property_name = property_name


class PropertyValidationError(ConstraintError):
    """A present property failed its own constraint.

    The nested failure is kept in ``cause`` and chained as ``__cause__``.
    """

    def __init__(self, property_name: str, cause: ConstraintError | None):
        super().__init__(
            f"object property '{property_name}' validation failed: {cause}",
            context={"property": property_name},
        )
        self.property_name = property_name
        self.cause = cause
        self.__cause__ = cause


class AdditionalPropertiesError(ConstraintError):
    """Properties matched by no exact-name or pattern rule were rejected.

    ``property_name`` and ``cause`` are set when an additional property failed
    the fallback constraint. When additional properties are forbidden outright
    ``property_names`` lists the offenders and ``cause`` is None.
    """

    def __init__(
        self,
        message: str,
        property_name: str | None = None,
        cause: ConstraintError | None = None,
        property_names: list[str] | None = None,
    ):
        context: Dict[str, Any] = {}
        if property_name is not None:
            context["property"] = property_name
        if property_names:
            context["properties"] = property_names
        super().__init__(message, context=context)
        self.property_name = property_name
        self.property_names = property_names or []
        self.cause = cause
        self.__cause__ = cause


class DependencyError(ConstraintError):
    """A present property requires another property that is absent."""

    def __init__(self, property_name: str, dependency: str):
        super().__init__(
            f"required dependency '{dependency}' is missing",
            context={"property": property_name, "dependency": dependency},
        )
        self.property_name = property_name
        self.dependency = dependency


__all__ = [
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
