"""Object constraint with a fluent builder API.

An ``ObjectConstraint`` validates mappings and named-field records against
JSON-Schema style object rules: named properties, pattern properties, an
additional-properties policy, property count bounds, required names, and
property/schema dependencies.

Example:
    ```python
    user = (
        ObjectConstraint()
        .add_prop("name", TypeOf(str))
        .add_prop("age", TypeOf(int).with_default(0))
        .pattern_properties(r"^x-", Accept())
        .required("name")
        .prop_dependency("credit_card", "billing_address")
    )

    result = user.validate({"name": "alice", "x-trace": "abc"})
    result.valid      # True
    result.defaults   # {'age': 0}
    ```

Builder methods may be called from other threads while ``validate`` runs.
The named-property map (together with the pattern map), the required set,
and the two dependency maps each have their own lock. ``validate`` copies
the property and pattern maps under the lock and releases it before calling
any nested constraint, so a schema dependency that refers back to the same
constraint does not deadlock.
"""

from __future__ import annotations

import logging
import re
import threading
from typing import Any, TYPE_CHECKING

from .accessor import MISSING, RecordAccessor, resolve_accessor
from .constraints import Constraint
from .exceptions import (
    AdditionalPropertiesError,
    BoundsError,
    ConfigurationError,
    ConstraintError,
    DependencyError,
    PropertyValidationError,
    RequiredPropertyError,
    ShapeError,
)
from .result import ValidationResult

if TYPE_CHECKING:
    from .accessor import FieldLookup, FieldNames
    from .config import JsvalSettings

logger = logging.getLogger(__name__)


class ObjectConstraint(Constraint):
    """Constraint for key-value and named-field records.

    A freshly created constraint has no property rules and forbids additional
    properties, so it only accepts empty objects until configured.
    """

    def __init__(
        self,
        settings: JsvalSettings | None = None,
        field_names: FieldNames | None = None,
        field_lookup: FieldLookup | None = None,
    ):
        """Initialize an empty object constraint.

        Args:
            settings: Settings selecting the field naming strategy for records
            field_names: Strategy listing a record's property names
            field_lookup: Strategy resolving a property name to a record field

        Giving either strategy replaces both settings strategies; the one left
        out falls back to the default exact-name strategy.
        """
        self._additional_properties: Constraint | None = None
        self._min_properties: int | None = None
        self._max_properties: int | None = None
        self._pattern_properties: dict[re.Pattern[str], Constraint] = {}
        self._properties: dict[str, Constraint] = {}
        self._required: set[str] = set()
        self._prop_dependencies: dict[str, list[str]] = {}
        self._schema_dependencies: dict[str, Constraint] = {}

        self._prop_lock = threading.Lock()
        self._req_lock = threading.Lock()
        self._dep_lock = threading.Lock()

        if settings is not None and field_names is None and field_lookup is None:
            field_names, field_lookup = settings.field_strategies()
        self.field_names = field_names
        self.field_lookup = field_lookup

    def __repr__(self) -> str:
        with self._prop_lock:
            props = list(self._properties)
            patterns = [p.pattern for p in self._pattern_properties]
        return f"ObjectConstraint(properties={props!r}, patterns={patterns!r})"

    # -- builder -----------------------------------------------------------

    def required(self, *names: str) -> ObjectConstraint:
        """Add names to the set of required properties (fluent API)."""
        with self._req_lock:
            self._required.update(names)
        return self

    def min_properties(self, n: int | None) -> ObjectConstraint:
        """Set the minimum number of properties (inclusive).

        Args:
            n: Minimum property count, or None to disable the check

        Returns:
            Self for chaining
        """
        self._min_properties = _check_count("minProperties", n)
        return self

    def max_properties(self, n: int | None) -> ObjectConstraint:
        """Set the maximum number of properties (inclusive).

        Args:
            n: Maximum property count, or None to disable the check

        Returns:
            Self for chaining
        """
        self._max_properties = _check_count("maxProperties", n)
        return self

    def additional_properties(self, constraint: Constraint | None) -> ObjectConstraint:
        """Set the constraint for properties matched by no other rule.

        Args:
            constraint: Fallback constraint, or None to forbid additional properties

        Returns:
            Self for chaining
        """
        if constraint is not None:
            _check_constraint(constraint)
        self._additional_properties = constraint
        return self

    def add_prop(self, name: str, constraint: Constraint) -> ObjectConstraint:
        """Register (or replace) the constraint for a named property."""
        _check_constraint(constraint)
        with self._prop_lock:
            self._properties[name] = constraint
        return self

    def pattern_properties(
        self, pattern: str | re.Pattern[str], constraint: Constraint
    ) -> ObjectConstraint:
        """Register (or replace) the constraint for names matching a pattern.

        Named properties registered with ``add_prop`` take precedence. Patterns
        are searched (not anchored) and are tried in registration order; a
        property matched by an earlier pattern is not offered to later ones.

        Args:
            pattern: Regular expression (string or compiled)
            constraint: Constraint for matching properties

        Returns:
            Self for chaining

        Raises:
            ConfigurationError: If the pattern does not compile
        """
        _check_constraint(constraint)
        if isinstance(pattern, str):
            try:
                pattern = re.compile(pattern)
            except re.error as e:
                raise ConfigurationError(
                    f"Invalid property pattern: {pattern}",
                    context={"pattern": pattern},
                ) from e
        with self._prop_lock:
            self._pattern_properties[pattern] = constraint
        return self

    def prop_dependency(self, src: str, *names: str) -> ObjectConstraint:
        """Require properties ``names`` whenever ``src`` is present.

        Repeated calls for the same ``src`` append to its list.
        """
        with self._dep_lock:
            self._prop_dependencies.setdefault(src, []).extend(names)
        return self

    def schema_dependency(self, src: str, constraint: Constraint) -> ObjectConstraint:
        """Require the whole value to satisfy ``constraint`` whenever ``src`` is present.

        Note that the constraint is applied to the object being validated, not
        to the value of ``src``. A later call for the same ``src`` replaces the
        earlier constraint.
        """
        _check_constraint(constraint)
        with self._dep_lock:
            self._schema_dependencies[src] = constraint
        return self

    # -- introspection -----------------------------------------------------

    def is_prop_required(self, name: str) -> bool:
        """Return True if the name is listed as a required property."""
        with self._req_lock:
            return name in self._required

    def get_prop_dependencies(self, src: str) -> list[str]:
        """Return the property names that must be present when ``src`` is."""
        with self._dep_lock:
            return list(self._prop_dependencies.get(src, ()))

    def get_schema_dependency(self, src: str) -> Constraint | None:
        """Return the constraint applied when ``src`` is present, if any."""
        with self._dep_lock:
            return self._schema_dependencies.get(src)

    # -- validation --------------------------------------------------------

    def validate(self, value: Any) -> ValidationResult:
        """Validate a value against this object constraint.

        Validation stops at the first failure.

        Args:
            value: Mapping or named-field record to validate

        Returns:
            ValidationResult; ``defaults`` lists defaults of absent optional properties
        """
        logger.debug("START ObjectConstraint.validate")
        result = self._validate(value)
        if result.valid:
            logger.debug("END ObjectConstraint.validate (PASS)")
        else:
            logger.debug(f"END ObjectConstraint.validate (FAIL): {result.error}")
        return result

    def _validate(self, value: Any) -> ValidationResult:
        try:
            accessor = resolve_accessor(value, self.field_names, self.field_lookup)
            names = accessor.names()
        except ShapeError as e:
            return ValidationResult.failure(value, e)

        count = len(names)
        min_properties = self._min_properties
        max_properties = self._max_properties
        if min_properties is not None and count < min_properties:
            return ValidationResult.failure(
                value,
                BoundsError("fewer properties than minProperties", count, min_properties),
            )
        if max_properties is not None and count > max_properties:
            return ValidationResult.failure(
                value,
                BoundsError("more properties than maxProperties", count, max_properties),
            )

        # "remaining" holds properties not matched by any rule yet,
        # "seen" holds properties that were present and validated
        remaining = dict.fromkeys(names)
        seen: dict[str, None] = {}
        defaults: dict[str, Any] = {}

        with self._prop_lock:
            properties = dict(self._properties)
            patterns = list(self._pattern_properties.items())

        for name, constraint in properties.items():
            logger.debug(f"Validating property '{name}'")
            pval = accessor.get(name)
            if pval is MISSING:
                logger.debug(f"Property '{name}' does not exist")
                if self.is_prop_required(name):
                    return ValidationResult.failure(value, RequiredPropertyError(name))
                if constraint.has_default():
                    defaults[name] = constraint.default_value()
                continue

            remaining.pop(name, None)
            seen[name] = None
            result = constraint.validate(pval)
            if not result.valid:
                return ValidationResult.failure(
                    value, PropertyValidationError(name, _error_of(result))
                )

        with self._req_lock:
            unregistered = sorted(self._required.difference(properties))
        for name in unregistered:
            if accessor.get(name) is MISSING:
                return ValidationResult.failure(value, RequiredPropertyError(name))

        for pattern, constraint in patterns:
            for name in list(remaining):
                if not pattern.search(name):
                    continue
                logger.debug(f"Property '{name}' matches pattern '{pattern.pattern}'")
                del remaining[name]
                seen[name] = None
                result = constraint.validate(accessor.get(name))
                if not result.valid:
                    return ValidationResult.failure(
                        value, PropertyValidationError(name, _error_of(result))
                    )

        if remaining:
            failure = self._validate_additional(accessor, remaining, seen)
            if failure is not None:
                return ValidationResult.failure(value, failure)

        for name in seen:
            deps = self.get_prop_dependencies(name)
            if deps:
                logger.debug(f"Property '{name}' has dependencies")
                for dep in deps:
                    if dep not in seen:
                        return ValidationResult.failure(value, DependencyError(name, dep))
                # property dependencies take precedence over a schema dependency
                continue

            schema = self.get_schema_dependency(name)
            if schema is not None:
                logger.debug(f"Property '{name}' has a schema dependency")
                result = schema.validate(value)
                if not result.valid:
                    return ValidationResult.failure(value, _error_of(result))

        return ValidationResult.success(value, defaults=defaults)

    def _validate_additional(
        self,
        accessor: RecordAccessor,
        remaining: dict[str, None],
        seen: dict[str, None],
    ) -> AdditionalPropertiesError | None:
        constraint = self._additional_properties
        if constraint is None:
            return AdditionalPropertiesError(
                "additional properties are not allowed",
                property_names=list(remaining),
            )

        for name in remaining:
            seen[name] = None
            result = constraint.validate(accessor.get(name))
            if not result.valid:
                cause = _error_of(result)
                return AdditionalPropertiesError(
                    f"object property '{name}' validation failed: {cause}",
                    property_name=name,
                    cause=cause,
                )
        return None


def object_constraint(**kwargs: Any) -> ObjectConstraint:
    """Create a new, empty ObjectConstraint."""
    return ObjectConstraint(**kwargs)


def _error_of(result: ValidationResult) -> ConstraintError:
    if result.error is not None:
        return result.error
    return ConstraintError("validation failed")


def _check_count(label: str, n: int | None) -> int | None:
    if n is None:
        return None
    if isinstance(n, bool) or not isinstance(n, int) or n < 0:
        raise ConfigurationError(
            f"{label} must be a non-negative integer or None",
            context={"value": n},
        )
    return n


def _check_constraint(constraint: Any) -> None:
    if not isinstance(constraint, Constraint):
        raise ConfigurationError(
            f"Expected a Constraint, got {type(constraint).__name__}",
            context={"type": type(constraint).__name__},
        )
