"""What the engine needs from a record, and the objects that provide it."""

import inspect
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass
class FieldError:
    """A single failed predicate on a field."""
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field} {self.message}"


@dataclass
class Errors:
    """Error sink collecting validation failures in the order they occur."""
    items: list[FieldError] = field(default_factory=list)

    def add(self, field: str, message: str) -> None:
        """Record a failure message against a field."""
        self.items.append(FieldError(field, message))

    def on(self, field: str) -> list[str]:
        """Messages recorded for one field."""
        return [error.message for error in self.items if error.field == field]

    def fields(self) -> list[str]:
        """Fields with at least one error, in order of first failure."""
        return list(dict.fromkeys(error.field for error in self.items))

    def full_messages(self) -> list[str]:
        return [str(error) for error in self.items]

    def clear(self) -> None:
        self.items.clear()

    def to_dict(self) -> dict[str, list[str]]:
        """Convert to dictionary for JSON output."""
        return {name: self.on(name) for name in self.fields()}

    def __contains__(self, field: object) -> bool:
        return any(error.field == field for error in self.items)

    def __iter__(self) -> Iterator[FieldError]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __bool__(self) -> bool:
        return bool(self.items)


@runtime_checkable
class HostRecord(Protocol):
    """Capabilities a record must offer to be validated.

    Named ``validate_if`` conditions are resolved with plain ``getattr`` on
    the record, so they need no method here.
    """

    errors: Any
    new_record: bool

    def read_attribute(self, name: str) -> Any:
        ...


_MISSING = object()


class ValidationContext:
    """Lightweight stand-in for a record of ``record_type``.

    Carries a plain field-value map instead of a constructed domain object.
    Used by out-of-context queries, where predicates such as ``same_as``
    still need to look at sibling values. Attribute access falls back to the
    values, then to members of ``record_type``: methods and properties are
    bound to the context and plain class attributes are returned as is, so
    named conditions keep working.
    """

    def __init__(self, record_type: type, values: Mapping[str, Any] | None = None, new_record: bool = True):
        self.record_type = record_type
        self.values = dict(values or {})
        self.new_record = new_record
        self.errors = Errors()

    def read_attribute(self, name: str) -> Any:
        return self.values.get(name)

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails.
        if name.startswith("__"):
            raise AttributeError(name)
        values = self.__dict__.get("values", {})
        if name in values:
            return values[name]

        record_type = self.__dict__.get("record_type")
        member = inspect.getattr_static(record_type, name, _MISSING) if record_type is not None else _MISSING
        if member is _MISSING:
            raise AttributeError(f"{type(self).__name__} for {getattr(record_type, '__name__', record_type)} has no attribute '{name}'")
        if isinstance(member, classmethod):
            return member.__get__(None, record_type)
        if hasattr(member, "__get__"):
            # functions, properties and staticmethods, bound to the context
            return member.__get__(self, record_type)
        return member

    def __repr__(self) -> str:
        return f"ValidationContext({self.record_type.__name__}, {self.values!r})"
