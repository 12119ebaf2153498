"""The ``required`` predicate."""

from dataclasses import dataclass
from typing import Any, ClassVar

from .base import Predicate, is_empty


@dataclass(frozen=True, kw_only=True)
class Required(Predicate):
    """Marks an attribute as required.

    Associated records can be required too. A nested record that has not
    been persisted yet only counts as present when it is valid itself.

    Example:
        Comment.attribute("subject").requires("required")
        Comment.declare("owner_is_required")
    """

    kind: ClassVar[str] = "required"
    default_error_message: ClassVar[str] = "is required."
    default_allow_empty: ClassVar[bool] = False

    def validate(self, value: Any, record: Any) -> bool:
        if getattr(value, "new_record", False) and callable(getattr(value, "valid", None)):
            return bool(value.valid())
        return not is_empty(value)
