"""Validation engine: decides which predicates apply and runs them.

Three operations are offered:

* ``validate_all`` - full validation of a record, recording every failure
  into the record's error sink.
* ``is_attribute_valid`` - would full validation record an error on this one
  field right now? Leaves the error sink alone.
* ``expected_error_for`` - out-of-context check of a single value, returning
  the first failing predicate's message.

``expected_error_for`` calls every predicate of the field directly. It skips
the ``validate_if``/``validate_on`` filtering and the empty-value
short-circuit that the other two operations apply. That asymmetry is kept
for compatibility; set ``validation.unify_expected_error`` in the
configuration to apply the full rules there too.
"""

import logging
from collections.abc import Mapping
from typing import Any

from .attributes import attributes_for
from .config import SemattrConfig, create_default_config
from .errors import ConditionError
from .predicates.base import Predicate, ValidateOn, is_empty
from .record import ValidationContext
from .registry import PredicateRegistry

logger = logging.getLogger(__name__)

_MISSING = object()


class ValidationEngine:
    """Evaluates the predicates of a record type against record instances."""

    def __init__(self, config: SemattrConfig | None = None):
        self.config = config or create_default_config()

    def validate_all(self, record: Any) -> Any:
        """Run every applicable predicate on every field of ``record``.

        Failures go to ``record.errors``; nothing is raised for bad data.
        Fields without applicable predicates are not read at all.

        Returns:
            The record's error sink
        """
        checked = 0
        failures = 0

        for registry in attributes_for(type(record)).fields():
            applicable = self.applicable_predicates(registry, record)
            if not applicable:
                continue

            checked += 1
            value = record.read_attribute(registry.field)
            empty = self.is_empty(value)

            for predicate in applicable:
                if empty:
                    if predicate.allow_empty:
                        continue
                elif predicate.validate(value, record):
                    continue

                record.errors.add(registry.field, predicate.error_message)
                failures += 1
                logger.debug(f"{type(record).__name__}.{registry.field} failed '{predicate.name}'")

        logger.debug(f"Validated {type(record).__name__}: {checked} fields checked, {failures} errors")
        return record.errors

    def is_attribute_valid(self, record: Any, field: str) -> bool:
        """Whether full validation would record no error on ``field``."""
        registry = attributes_for(type(record)).lookup(field)
        if registry is None:
            return True

        applicable = self.applicable_predicates(registry, record)
        if not applicable:
            return True

        value = record.read_attribute(field)
        if self.is_empty(value):
            return all(predicate.allow_empty for predicate in applicable)
        return all(predicate.validate(value, record) for predicate in applicable)

    def expected_error_for(
        self,
        record_type: type,
        field: str,
        value: Any,
        extra_values: Mapping[str, Any] | None = None,
        unify: bool | None = None,
    ) -> str | None:
        """Pre-validate a single value out of the context of a full record.

        Helpful for checking parts of a form before it is submitted. Values
        that are only (in)valid in context, like a password confirmation,
        can be given their context through ``extra_values``.

        Args:
            record_type: Record type whose predicates apply
            field: Field the value belongs to
            value: Candidate value
            extra_values: Other field values visible to the predicates
            unify: Override ``validation.unify_expected_error`` for this call

        Returns:
            First failing predicate's message, or None if the value would pass

        Example:
            engine.expected_error_for(User, "password_confirmation", "mismatched",
                                      {"password": "opensesame"})
            => "must be the same as password."
        """
        registry = attributes_for(record_type).lookup(field)
        if registry is None:
            return None

        if unify is None:
            unify = self.config.validation.unify_expected_error
        context = ValidationContext(record_type, extra_values)

        if not unify:
            for predicate in registry:
                if not predicate.validate(value, context):
                    return predicate.error_message
            return None

        empty = self.is_empty(value)
        for predicate in self.applicable_predicates(registry, context):
            if empty:
                if not predicate.allow_empty:
                    return predicate.error_message
            elif not predicate.validate(value, context):
                return predicate.error_message
        return None

    def applicable_predicates(self, registry: PredicateRegistry, record: Any) -> list[Predicate]:
        return [predicate for predicate in registry if self.is_applicable(predicate, record)]

    def is_applicable(self, predicate: Predicate, record: Any) -> bool:
        """Whether ``predicate`` should run for ``record`` at all."""
        condition = predicate.validate_if
        if isinstance(condition, str):
            if not self._named_condition(condition, record):
                return False
        elif condition is not None:
            if not condition(record):
                return False

        if predicate.validate_on == ValidateOn.CREATE:
            return bool(record.new_record)
        if predicate.validate_on == ValidateOn.UPDATE:
            return not record.new_record
        return True

    def is_empty(self, value: Any) -> bool:
        return is_empty(value, self.config.validation.blank_whitespace)

    @staticmethod
    def _named_condition(name: str, record: Any) -> Any:
        member = getattr(record, name, _MISSING)
        if member is _MISSING:
            raise ConditionError(name, type(record).__name__)
        return member() if callable(member) else member


_default_engine: ValidationEngine | None = None


def default_engine() -> ValidationEngine:
    """Engine built from the default configuration, shared by records."""
    global _default_engine
    if _default_engine is None:
        _default_engine = ValidationEngine()
    return _default_engine
