"""Constraint capability and generic building blocks.

Constraints for specific value kinds (strings, numbers, arrays) are supplied
by callers; this module defines the capability they implement plus a few
kind-agnostic constraints that are handy for composing object constraints.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, TYPE_CHECKING

from .exceptions import ConfigurationError, ConstraintError
from .result import ValidationResult

if TYPE_CHECKING:
    from collections.abc import Callable


class Constraint(ABC):
    """Base class for all constraints.

    A constraint validates one value and may declare a default value, which
    an enclosing object constraint reports when the property is absent.
    """

    _has_default: bool = False
    _default: Any = None

    @abstractmethod
    def validate(self, value: Any) -> ValidationResult:
        """Validate a value against this constraint.

        Args:
            value: Value to validate

        Returns:
            ValidationResult with validation outcome
        """
        pass

    def has_default(self) -> bool:
        """Return True if a default value was declared."""
        return self._has_default

    def default_value(self) -> Any:
        """Return the declared default value (None when undeclared)."""
        return self._default

    def with_default(self, value: Any) -> Constraint:
        """Declare a default value (fluent API).

        Args:
            value: Default for an absent property validated by this constraint

        Returns:
            Self for chaining
        """
        self._default = value
        self._has_default = True
        return self

    def __and__(self, other: Constraint) -> All:
        """Combine with AND: both constraints must pass."""
        if isinstance(self, All):
            return All(self.constraints + [other])
        elif isinstance(other, All):
            return All([self] + other.constraints)
        return All([self, other])


class Accept(Constraint):
    """Accepts any value."""

    def validate(self, value: Any) -> ValidationResult:
        return ValidationResult.success(value)


class All(Constraint):
    """All constraints must pass; the first failure is returned."""

    def __init__(self, constraints: list[Constraint]):
        """Initialize with list of constraints.

        Args:
            constraints: List of constraints that must all pass
        """
        self.constraints = constraints

    def validate(self, value: Any) -> ValidationResult:
        for constraint in self.constraints:
            result = constraint.validate(value)
            if not result.valid:
                return result
        return ValidationResult.success(value)


class TypeOf(Constraint):
    """Value must be an instance of the given type(s)."""

    def __init__(self, *types: type):
        if not types:
            raise ConfigurationError("TypeOf requires at least one type")
        self.types = types

    def validate(self, value: Any) -> ValidationResult:
        # bool is an int subclass but is never accepted as a number
        if isinstance(value, bool) and bool not in self.types:
            ok = False
        else:
            ok = isinstance(value, self.types)
        if not ok:
            expected = " or ".join(t.__name__ for t in self.types)
            return ValidationResult.failure(
                value,
                ConstraintError(
                    f"expected {expected}, got {type(value).__name__}",
                    context={"expected": expected},
                ),
            )
        return ValidationResult.success(value)


class Custom(Constraint):
    """Custom constraint using a callable."""

    def __init__(
        self,
        validator: Callable[[Any], bool | ValidationResult],
        error_message: str = "Custom validation failed"
    ):
        """Initialize custom constraint.

        Args:
            validator: Callable that returns bool or ValidationResult
            error_message: Error message if validation fails
        """
        self.validator = validator
        self.error_message = error_message

    def validate(self, value: Any) -> ValidationResult:
        try:
            result = self.validator(value)

            if isinstance(result, ValidationResult):
                return result
            elif isinstance(result, bool):
                if result:
                    return ValidationResult.success(value)
                return ValidationResult.failure(value, ConstraintError(self.error_message))
            else:
                return ValidationResult.failure(
                    value,
                    ConstraintError(
                        f"Custom validator returned unexpected type: {type(result).__name__}"
                    ),
                )
        except Exception as e:
            return ValidationResult.failure(
                value,
                ConstraintError(f"Custom validation error: {e!s}"),
            )
