"""Configuration errors raised for a broken predicate schema.

Validation failures are data, and end up in a record's error sink. The
exceptions here are reserved for programmer mistakes: unknown predicate
names, duplicate registrations, bad options and conditions that point at
methods the record does not have.
"""


class ConfigurationError(ValueError):
    """Base class for predicate schema errors."""


class UnknownPredicateError(ConfigurationError):
    """A predicate name does not resolve to a registered predicate class."""

    def __init__(self, name: str, known: list[str] | None = None):
        self.name = name
        self.known = sorted(known or [])
        message = f"Unknown predicate '{name}'"
        if self.known:
            message += f". Known predicates: {', '.join(self.known)}"
        super().__init__(message)


class DuplicatePredicateError(ConfigurationError):
    """A field already carries a predicate with the same name."""

    def __init__(self, field: str, name: str):
        self.field = field
        self.name = name
        super().__init__(f"Predicate '{name}' is already registered on field '{field}'")


class ConditionError(ConfigurationError):
    """A validate_if condition names something the record does not have."""

    def __init__(self, condition: str, record_type: str):
        self.condition = condition
        self.record_type = record_type
        super().__init__(f"validate_if references unknown method '{condition}' on {record_type}")
