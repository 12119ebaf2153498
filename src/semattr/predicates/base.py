"""Predicate contract shared by every validation rule.

A predicate is a named check bound to one field. Besides the check itself it
carries the message to report on failure and the conditions deciding whether
it runs at all for a given record.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar

from ..errors import ConfigurationError

Condition = str | Callable[[Any], Any]


class ValidateOn(str, Enum):
    """Record lifecycle stages a predicate can be restricted to."""
    ALWAYS = "always"
    CREATE = "create"
    UPDATE = "update"


def is_empty(value: Any, blank_whitespace: bool = False) -> bool:
    """Return True for None and for zero-length values.

    Scalars without a length (numbers, booleans, dates) are never empty.
    With ``blank_whitespace`` a whitespace-only string counts as empty too.
    """
    if value is None:
        return True
    if blank_whitespace and isinstance(value, str):
        return not value.strip()
    try:
        return len(value) == 0
    except TypeError:
        return False


@dataclass(frozen=True, kw_only=True)
class Predicate(ABC):
    """Base class for validation predicates.

    Subclasses set ``kind`` (the catalog name), may override
    ``default_error_message`` and ``default_allow_empty``, and implement
    ``validate``. The default message is formatted with the predicate's own
    fields, so ``"must be the same as {other}."`` works for a predicate with
    an ``other`` field.
    """

    kind: ClassVar[str] = ""
    default_error_message: ClassVar[str] = "is invalid."
    default_allow_empty: ClassVar[bool] = True

    name: str = ""
    error_message: str | None = None
    validate_if: Condition | None = None
    validate_on: ValidateOn = ValidateOn.ALWAYS
    allow_empty: bool | None = None

    def __post_init__(self):
        if not self.name:
            object.__setattr__(self, "name", self.kind or type(self).__name__.lower())

        try:
            object.__setattr__(self, "validate_on", ValidateOn(self.validate_on))
        except ValueError:
            allowed = ", ".join(stage.value for stage in ValidateOn)
            raise ConfigurationError(
                f"Invalid validate_on '{self.validate_on}' for predicate '{self.name}'. Allowed: {allowed}"
            ) from None

        if self.validate_if is not None and not (isinstance(self.validate_if, str) or callable(self.validate_if)):
            raise ConfigurationError(
                f"validate_if for predicate '{self.name}' must be a method name or a callable, "
                f"got {type(self.validate_if).__name__}"
            )

        if self.allow_empty is None:
            object.__setattr__(self, "allow_empty", self.default_allow_empty)

        if self.error_message is None:
            values = {f.name: getattr(self, f.name) for f in fields(self)}
            object.__setattr__(self, "error_message", self.default_error_message.format(**values))

    @property
    def conditional(self) -> bool:
        """Whether applicability depends on the record at all."""
        return self.validate_if is not None or self.validate_on != ValidateOn.ALWAYS

    @abstractmethod
    def validate(self, value: Any, record: Any) -> bool:
        """Check a non-empty field value in the context of its record."""
