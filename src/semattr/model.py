"""Base class tying a record type into the validation engine."""

from collections.abc import Mapping
from typing import Any

from .attributes import AttributeSet, attributes_for
from .dsl import AttributeBuilder, declare
from .engine import ValidationEngine, default_engine
from .predicates.base import Predicate
from .record import Errors


class SemanticRecord:
    """Record whose fields are validated by declared predicates.

    Values passed to the constructor become plain attributes. A record is new
    until ``mark_persisted`` is called, which is what ``validate_on`` checks.

    Example:
        class User(SemanticRecord):
            pass

        User.attribute("username").requires("required")
        User.declare("password_confirmation_is_same_as", other="password")

        user = User(username="")
        user.valid()          # False
        user.errors.on("username")   # ["is required."]
    """

    validation_engine: ValidationEngine | None = None

    def __init__(self, **values: Any):
        self.new_record = True
        self.errors = Errors()
        for name, value in values.items():
            setattr(self, name, value)

    def read_attribute(self, name: str) -> Any:
        return getattr(self, name, None)

    def mark_persisted(self) -> None:
        self.new_record = False

    @classmethod
    def engine(cls) -> ValidationEngine:
        return cls.validation_engine or default_engine()

    def validate(self) -> Errors:
        """Clear previous errors and run full validation."""
        self.errors.clear()
        return self.engine().validate_all(self)

    def valid(self) -> bool:
        return not self.validate()

    def attribute_valid(self, name: str) -> bool:
        """True if this attribute would pass validation during the next save."""
        return self.engine().is_attribute_valid(self, name)

    @classmethod
    def semantic_attributes(cls) -> AttributeSet:
        return attributes_for(cls)

    @classmethod
    def attribute(cls, field: str) -> AttributeBuilder:
        return AttributeBuilder(cls, field)

    @classmethod
    def declare(cls, phrase: str, *fields: str, **options: Any) -> list[Predicate] | bool:
        return declare(cls, phrase, *fields, **options)

    @classmethod
    def expected_error_for(
        cls, field: str, value: Any, extra_values: Mapping[str, Any] | None = None
    ) -> str | None:
        """Message the value would fail with on ``field``, or None.

        Example:
            User.expected_error_for("password_confirmation", "mismatched", {"password": "opensesame"})
            => "must be the same as password."
        """
        return cls.engine().expected_error_for(cls, field, value, extra_values)

    def __repr__(self) -> str:
        state = "new" if self.new_record else "persisted"
        return f"<{type(self).__name__} {state}>"
