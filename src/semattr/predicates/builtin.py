"""Stock predicates shipped alongside ``required``."""

import re
from collections.abc import Sized
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar

from ..errors import ConfigurationError
from .base import Predicate


@dataclass(frozen=True, kw_only=True)
class SameAs(Predicate):
    """Value must equal another attribute of the same record.

    The usual use is a confirmation field:
        User.attribute("password_confirmation").requires("same_as", other="password")
    """

    kind: ClassVar[str] = "same_as"
    default_error_message: ClassVar[str] = "must be the same as {other}."

    other: str

    def validate(self, value: Any, record: Any) -> bool:
        return value == record.read_attribute(self.other)


@dataclass(frozen=True, kw_only=True)
class Length(Predicate):
    """Bounds the length of a sized value (strings, lists)."""

    kind: ClassVar[str] = "length"
    default_error_message: ClassVar[str] = "has the wrong length."

    minimum: int | None = None
    maximum: int | None = None
    exactly: int | None = None

    def __post_init__(self):
        if self.minimum is None and self.maximum is None and self.exactly is None:
            raise ConfigurationError("length predicate needs one of: minimum, maximum, exactly")
        super().__post_init__()

    def validate(self, value: Any, record: Any) -> bool:
        size = len(value) if isinstance(value, Sized) else len(str(value))
        if self.exactly is not None and size != self.exactly:
            return False
        if self.minimum is not None and size < self.minimum:
            return False
        if self.maximum is not None and size > self.maximum:
            return False
        return True


@dataclass(frozen=True, kw_only=True)
class Pattern(Predicate):
    """The whole string form of the value must match a regular expression."""

    kind: ClassVar[str] = "pattern"
    default_error_message: ClassVar[str] = "is not in the right format."

    regex: str
    _compiled: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        try:
            object.__setattr__(self, "_compiled", re.compile(self.regex))
        except re.error as e:
            raise ConfigurationError(f"Invalid regex for pattern predicate: {e}") from e
        super().__post_init__()

    def validate(self, value: Any, record: Any) -> bool:
        return self._compiled.fullmatch(str(value)) is not None


@dataclass(frozen=True, kw_only=True)
class OneOf(Predicate):
    """Value must be one of a fixed set of choices."""

    kind: ClassVar[str] = "one_of"
    default_error_message: ClassVar[str] = "is not an allowed value."

    choices: tuple = ()

    def __post_init__(self):
        if not self.choices:
            raise ConfigurationError("one_of predicate needs at least one choice")
        object.__setattr__(self, "choices", tuple(self.choices))
        super().__post_init__()

    def validate(self, value: Any, record: Any) -> bool:
        return value in self.choices


@dataclass(frozen=True, kw_only=True)
class Number(Predicate):
    """Value must be numeric, optionally integral and within bounds.

    Strings are parsed, so form input like ``"42"`` passes.
    """

    kind: ClassVar[str] = "number"
    default_error_message: ClassVar[str] = "is not a valid number."

    integer: bool = False
    minimum: float | None = None
    maximum: float | None = None

    def validate(self, value: Any, record: Any) -> bool:
        number = self._coerce(value)
        if number is None:
            return False
        if self.integer and number != number.to_integral_value():
            return False
        if self.minimum is not None and number < Decimal(str(self.minimum)):
            return False
        if self.maximum is not None and number > Decimal(str(self.maximum)):
            return False
        return True

    @staticmethod
    def _coerce(value: Any) -> Decimal | None:
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float, Decimal, str)):
            try:
                number = Decimal(str(value).strip())
            except InvalidOperation:
                return None
            return number if number.is_finite() else None
        return None
