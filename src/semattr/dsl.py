"""Registration sugar on top of attribute sets.

Two ways to declare predicates, both producing the same attribute-set data:

* the explicit builder::

      User.attribute("username").requires("required").requires("length", maximum=32)

* the naming-convention adapter, which parses phrases such as::

      declare(User, "username_is_required")
      declare(User, "email_is_a_pattern", regex=r".+@.+")
      declare(User, "role_is_a_required_one_of", choices=["owner", "staff"])
      declare(User, "fields_are_required", "username", "email")
      declare(User, "username_is_required?")   # query, returns bool

  The forms are ``<field>_is_<predicate>``, ``_is_a_``, ``_is_an_``,
  ``_has_``, ``_has_a_``, ``_has_an_`` and ``fields_are_<predicate>`` with
  the field list passed positionally. A ``required_`` infix makes the
  predicate reject empty values. A trailing ``?`` asks whether the first
  field already has the predicate instead of adding it.
"""

import logging
import re
from typing import Any

from .attributes import AttributeSet, attributes_for
from .errors import ConfigurationError
from .predicates.base import Predicate

logger = logging.getLogger(__name__)

SUGAR_PATTERN = re.compile(r"^(.*)_(is|has|are)_(an?_)?(required_)?([^?]*)(\?)?$")


def _attribute_set(target: type | AttributeSet) -> AttributeSet:
    return target if isinstance(target, AttributeSet) else attributes_for(target)


class AttributeBuilder:
    """Fluent declaration of the predicates of one field."""

    def __init__(self, target: type | AttributeSet, field: str):
        self.attribute_set = _attribute_set(target)
        self.field = field

    def requires(self, predicate: Predicate | str, **options: Any) -> "AttributeBuilder":
        """Attach a predicate to the field and return the builder for chaining."""
        self.attribute_set.get(self.field).add(predicate, **options)
        return self

    is_ = requires

    def has(self, name: str) -> bool:
        return self.attribute_set.has(self.field, name)

    @property
    def predicates(self) -> tuple[Predicate, ...]:
        return self.attribute_set.get(self.field).all()


def parse_sugar(phrase: str) -> tuple[str, str, bool, bool]:
    """Split a declaration phrase into its parts.

    Returns:
        (subject, predicate name, required, query) where subject is the field
        name, or ``"fields"`` for the multi-field form

    Raises:
        ConfigurationError: If the phrase does not follow the convention
    """
    match = SUGAR_PATTERN.match(phrase)
    if not match or not match.group(1) or not match.group(5):
        raise ConfigurationError(f"Cannot parse predicate declaration '{phrase}'")

    subject, verb, _article, required, predicate, query = match.groups()
    if (verb == "are") != (subject == "fields"):
        raise ConfigurationError(f"Use 'fields_are_<predicate>' for multiple fields, got '{phrase}'")
    return subject, predicate, required is not None, query is not None


def declare(target: type | AttributeSet, phrase: str, *fields: str, **options: Any) -> list[Predicate] | bool:
    """Declare (or query) predicates using the naming convention.

    Args:
        target: Record type or attribute set
        phrase: Declaration such as ``"username_is_required"``
        *fields: Field names, only for the ``fields_are_<predicate>`` form
        **options: Predicate options

    Returns:
        The attached predicates, or a bool for ``?`` queries
    """
    subject, predicate, required, query = parse_sugar(phrase)
    attribute_set = _attribute_set(target)

    if subject == "fields":
        if not fields:
            raise ConfigurationError(f"'{phrase}' needs at least one field name")
        names = [str(f) for f in fields]
    else:
        if fields:
            raise ConfigurationError(f"'{phrase}' names its field already; got extra fields {fields!r}")
        names = [subject]

    if query:
        return attribute_set.has(names[0], predicate)

    if required:
        options.pop("or_empty", None)
        options["allow_empty"] = False

    attached = [attribute_set.get(name).add(predicate, **dict(options)) for name in names]
    logger.debug(f"Declared '{phrase}' on {len(attached)} field(s)")
    return attached
