"""Validation result type returned by every constraint.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .exceptions import ConstraintError


@dataclass
class ValidationResult:
    """Outcome of a single ``validate`` call.

    Validation stops at the first failure, so a failed result carries exactly
    one ``error``. ``defaults`` records the default values of optional
    properties that were absent from the input; the input itself is never
    modified.
    """

    valid: bool
    value: Any
    error: ConstraintError | None = None
    defaults: dict[str, Any] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        """Allow 'if result:' usage to check validity."""
        return self.valid

    @property
    def errors(self) -> list[str]:
        """Error messages as strings (empty on success)."""
        return [str(self.error)] if self.error is not None else []

    def add_warning(self, warning: str) -> ValidationResult:
        """Add a warning without affecting validity (fluent API).

        Args:
            warning: Warning message to add

        Returns:
            Self for chaining
        """
        self.warnings.append(warning)
        return self

    def raise_for_error(self) -> ValidationResult:
        """Raise the contained error if validation failed.

        Returns:
            Self, when the result is valid

        Raises:
            ConstraintError: The first failure encountered during validation
        """
        if not self.valid:
            raise self.error if self.error is not None else ConstraintError("validation failed")
        return self

    @classmethod
    def success(
        cls,
        value: Any,
        defaults: dict[str, Any] | None = None,
        warnings: list[str] | None = None,
    ) -> ValidationResult:
        """Create a successful validation result.

        Args:
            value: The validated value
            defaults: Defaults noted for absent optional properties
            warnings: Optional list of warnings

        Returns:
            Successful ValidationResult
        """
        return cls(
            valid=True,
            value=value,
            error=None,
            defaults=defaults or {},
            warnings=warnings or [],
        )

    @classmethod
    def failure(
        cls,
        value: Any,
        error: ConstraintError,
        warnings: list[str] | None = None,
    ) -> ValidationResult:
        """Create a failed validation result.

        Args:
            value: The value that failed validation
            error: The failure that stopped validation

        Returns:
            Failed ValidationResult
        """
        return cls(
            valid=False,
            value=value,
            error=error,
            warnings=warnings or [],
        )
