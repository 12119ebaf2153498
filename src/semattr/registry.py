"""Ordered predicate registry for a single field."""

import logging
from collections.abc import Iterator
from typing import Any

from .errors import ConfigurationError, DuplicatePredicateError
from .predicates.base import Predicate
from .predicates.catalog import PredicateCatalog, default_catalog

logger = logging.getLogger(__name__)


class PredicateRegistry:
    """The predicates attached to one field, in registration order.

    Registration order is evaluation order, and therefore the order errors
    are reported in. Names are unique within a registry.
    """

    def __init__(self, field: str, catalog: PredicateCatalog | None = None):
        self.field = field
        self.catalog = catalog or default_catalog()
        self._predicates: list[Predicate] = []

    def add(self, predicate: Predicate | str, **options: Any) -> Predicate:
        """Attach a predicate, given as an instance or as a catalog name.

        Args:
            predicate: Predicate instance, or name resolved through the catalog
            **options: Predicate options, only valid when adding by name

        Returns:
            The attached predicate

        Raises:
            UnknownPredicateError: If a name is not in the catalog
            DuplicatePredicateError: If the field already has a predicate of that name
        """
        if isinstance(predicate, str):
            predicate = self.catalog.build(predicate, **options)
        elif options:
            raise ConfigurationError(
                f"Options are only accepted when adding a predicate by name (field '{self.field}')"
            )

        if self.has(predicate.name):
            raise DuplicatePredicateError(self.field, predicate.name)

        self._predicates.append(predicate)
        logger.debug(f"Attached predicate '{predicate.name}' to field '{self.field}'")
        return predicate

    def has(self, name: str) -> bool:
        return any(p.name == name for p in self._predicates)

    def get(self, name: str) -> Predicate | None:
        for predicate in self._predicates:
            if predicate.name == name:
                return predicate
        return None

    def all(self) -> tuple[Predicate, ...]:
        return tuple(self._predicates)

    def copy(self) -> "PredicateRegistry":
        """Registry for the same field holding the same predicates.

        Predicates are immutable, so sharing them between copies is safe.
        """
        clone = PredicateRegistry(self.field, self.catalog)
        clone._predicates = list(self._predicates)
        return clone

    def __iter__(self) -> Iterator[Predicate]:
        return iter(tuple(self._predicates))

    def __len__(self) -> int:
        return len(self._predicates)

    def __bool__(self) -> bool:
        return bool(self._predicates)

    def __repr__(self) -> str:
        names = ", ".join(p.name for p in self._predicates)
        return f"PredicateRegistry({self.field!r}: [{names}])"
