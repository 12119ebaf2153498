"""Predicate catalog: maps predicate names to predicate classes.

Registration APIs refer to predicates by name ("required", "same_as"). The
catalog resolves those names and builds configured instances, so an unknown
name fails at declaration time instead of at validation time.
"""

import logging
import threading
from typing import Any

from ..errors import ConfigurationError, UnknownPredicateError
from .base import Predicate

logger = logging.getLogger(__name__)

OPTION_ALIASES = {
    "or_empty": "allow_empty",
}


class PredicateCatalog:
    """Registry of predicate classes by catalog name.

    Usage:
    ```python
    catalog = PredicateCatalog()
    catalog.register(Required)
    predicate = catalog.build("required", error_message="can't be blank.")
    ```
    """

    def __init__(self):
        self._predicates: dict[str, type[Predicate]] = {}
        self._lock = threading.Lock()

    def register(self, predicate_class: type[Predicate], name: str | None = None) -> type[Predicate]:
        """Register a predicate class under its ``kind`` (or an explicit name).

        Returns the class, so this doubles as a class decorator.

        Raises:
            ConfigurationError: If the name is empty or already registered
        """
        name = name or predicate_class.kind
        if not name:
            raise ConfigurationError(f"Predicate class {predicate_class.__name__} has no kind")

        with self._lock:
            if name in self._predicates:
                raise ConfigurationError(
                    f"Predicate '{name}' is already registered. "
                    f"Existing: {self._predicates[name].__name__}, "
                    f"New: {predicate_class.__name__}"
                )
            self._predicates[name] = predicate_class

        logger.debug(f"Registered predicate '{name}' -> {predicate_class.__name__}")
        return predicate_class

    def register_multiple(self, predicate_classes: list[type[Predicate]]) -> None:
        for predicate_class in predicate_classes:
            self.register(predicate_class)

    def unregister(self, name: str) -> None:
        with self._lock:
            self._predicates.pop(name, None)

    def get(self, name: str) -> type[Predicate] | None:
        return self._predicates.get(name)

    def has(self, name: str) -> bool:
        return name in self._predicates

    def resolve(self, name: str) -> type[Predicate]:
        """Get a predicate class by name or raise UnknownPredicateError."""
        predicate_class = self._predicates.get(name)
        if predicate_class is None:
            raise UnknownPredicateError(name, list(self._predicates))
        return predicate_class

    def names(self) -> list[str]:
        return sorted(self._predicates)

    def count(self) -> int:
        return len(self._predicates)

    def build(self, kind: str, /, **options: Any) -> Predicate:
        """Instantiate the predicate registered as ``kind`` with ``options``.

        ``options`` may carry its own ``name`` to register the predicate under.
        ``or_empty`` is accepted as an alias of ``allow_empty``. Options the
        predicate does not understand raise ConfigurationError.
        """
        predicate_class = self.resolve(kind)
        for alias, option in OPTION_ALIASES.items():
            if alias in options:
                options[option] = options.pop(alias)

        try:
            return predicate_class(**options)
        except TypeError as e:
            raise ConfigurationError(f"Invalid options for predicate '{kind}': {e}") from e


_default_catalog: PredicateCatalog | None = None
_default_lock = threading.Lock()


def default_catalog() -> PredicateCatalog:
    """Catalog pre-loaded with the stock predicates."""
    global _default_catalog
    if _default_catalog is None:
        with _default_lock:
            if _default_catalog is None:
                from .builtin import Length, Number, OneOf, Pattern, SameAs
                from .required import Required

                catalog = PredicateCatalog()
                catalog.register_multiple([Required, SameAs, Length, Pattern, OneOf, Number])
                _default_catalog = catalog
    return _default_catalog


def register_predicate(predicate_class: type[Predicate]) -> type[Predicate]:
    """Class decorator adding a custom predicate to the default catalog."""
    return default_catalog().register(predicate_class)
