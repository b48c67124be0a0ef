"""Uniform property access over mappings and named-field records.

An object constraint needs two things from the value it validates: the list
of property names, and the value of a named property (or the knowledge that
it is absent). ``resolve_accessor`` inspects the value once and returns a
``RecordAccessor`` that answers both questions.

Supported shapes:

- any ``collections.abc.Mapping`` whose keys are all strings
- named-field records: dataclass instances and ``NamedTuple`` instances

How a named-field record maps property names to attributes is pluggable.
``field_names`` lists the property names of a record and ``field_lookup``
resolves a property name to the attribute holding it (``None`` if the record
has no such property). The defaults use the declared field names with an
exact, case-sensitive match; alternatives for case-insensitive and
metadata-tag naming are provided below.

Example:
    ```python
    @dataclass
    class User:
        user_name: str = field(metadata={"json": "userName"})

    accessor = resolve_accessor(
        User("alice"),
        field_names=metadata_field_names("json"),
        field_lookup=metadata_field_name("json"),
    )
    accessor.names()           # ['userName']
    accessor.get("userName")   # 'alice'
    accessor.get("user_name")  # MISSING
    ```
"""

from __future__ import annotations

import dataclasses
import weakref
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any

from .exceptions import ShapeError

FieldNames = Callable[[Any], list[str]]
FieldLookup = Callable[[Any, str], "str | None"]


class _Missing:
    """Marker for a property that is not present in a record."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "MISSING"


MISSING = _Missing()


def is_field_record(value: Any) -> bool:
    """Return True if value is a dataclass instance or a named tuple."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return True
    return isinstance(value, tuple) and hasattr(type(value), "_fields")


def declared_field_names(record: Any) -> list[str]:
    """List the declared field names of a record, in declaration order."""
    if dataclasses.is_dataclass(record):
        return [f.name for f in dataclasses.fields(record)]
    return list(getattr(record, "_fields", ()))


def exact_field_name(record: Any, name: str) -> str | None:
    """Resolve a property name to the field with exactly that name."""
    if name in declared_field_names(record):
        return name
    return None


def case_insensitive_field_name(record: Any, name: str) -> str | None:
    """Resolve a property name ignoring case; an exact match wins."""
    declared = declared_field_names(record)
    if name in declared:
        return name
    folded = name.casefold()
    for field_name in declared:
        if field_name.casefold() == folded:
            return field_name
    return None


def _metadata_names(record: Any, key: str) -> dict[str, str]:
    """Map exposed property names to attribute names using field metadata.

    A field whose metadata value is ``"-"`` is hidden. Fields without the
    metadata key keep their declared name. Named tuples carry no metadata.
    """
    if not dataclasses.is_dataclass(record):
        return {name: name for name in declared_field_names(record)}

    mapping: dict[str, str] = {}
    for f in dataclasses.fields(record):
        alias = f.metadata.get(key, f.name)
        if alias == "-":
            continue
        mapping[alias] = f.name
    return mapping


def metadata_field_names(key: str = "json") -> FieldNames:
    """Build a ``field_names`` strategy exposing metadata-tag names."""

    def field_names(record: Any) -> list[str]:
        return list(_metadata_names(record, key))

    return field_names


def metadata_field_name(key: str = "json") -> FieldLookup:
    """Build a ``field_lookup`` strategy resolving metadata-tag names."""

    def field_lookup(record: Any, name: str) -> str | None:
        return _metadata_names(record, key).get(name)

    return field_lookup


class RecordAccessor(ABC):
    """Read-only view of the properties of a value."""

    @abstractmethod
    def names(self) -> list[str]:
        """List all property names.

        Raises:
            ShapeError: If the property names cannot be enumerated
        """
        pass

    @abstractmethod
    def get(self, name: str) -> Any:
        """Return the value of a property, or ``MISSING`` if absent."""
        pass


class MappingAccessor(RecordAccessor):
    """Accessor for string-keyed mappings."""

    def __init__(self, mapping: Mapping[Any, Any]):
        self.mapping = mapping

    def names(self) -> list[str]:
        keys = list(self.mapping.keys())
        for key in keys:
            if not isinstance(key, str):
                raise ShapeError(
                    "can only handle mappings with string keys",
                    context={"key_type": type(key).__name__},
                )
        return keys

    def get(self, name: str) -> Any:
        return self.mapping.get(name, MISSING)


class FieldRecordAccessor(RecordAccessor):
    """Accessor for dataclass and named tuple records."""

    def __init__(
        self,
        record: Any,
        field_names: FieldNames | None = None,
        field_lookup: FieldLookup | None = None,
    ):
        self.record = record
        self.field_names = field_names or declared_field_names
        self.field_lookup = field_lookup or exact_field_name

    def names(self) -> list[str]:
        # only names that resolve to an assigned field count as properties
        return [name for name in self.field_names(self.record) if self.get(name) is not MISSING]

    def get(self, name: str) -> Any:
        attr = self.field_lookup(self.record, name)
        if attr is None:
            return MISSING
        return getattr(self.record, attr, MISSING)


def resolve_accessor(
    value: Any,
    field_names: FieldNames | None = None,
    field_lookup: FieldLookup | None = None,
) -> RecordAccessor:
    """Pick the accessor matching the shape of a value.

    One level of ``weakref.ref`` indirection is dereferenced first.

    Args:
        value: Value whose properties will be read
        field_names: Optional strategy listing a record's property names
        field_lookup: Optional strategy resolving a property name to a field

    Returns:
        A RecordAccessor for the value

    Raises:
        ShapeError: If the value is neither a mapping nor a named-field record
    """
    if isinstance(value, weakref.ref):
        value = value()
        if value is None:
            raise ShapeError("cannot get property names from a dead reference")

    if isinstance(value, Mapping):
        return MappingAccessor(value)
    if is_field_record(value):
        return FieldRecordAccessor(value, field_names, field_lookup)

    raise ShapeError(
        "cannot get property names from this value",
        context={"type": type(value).__name__},
    )
