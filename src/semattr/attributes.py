"""Per-type attribute sets: which predicates apply to which fields.

An attribute set belongs to a record *type*. It is built lazily the first
time a type is asked for it and starts out as a copy of the sets of its
already-resolved ancestors, so predicates declared on a base class apply to
every subclass. The copy is taken once; predicates added to a base class
after a subclass resolved its set do not propagate.

Predicate registration is expected to happen during single-threaded setup
(class bodies, import time). Once that is done, attribute sets are only read
and can be shared by concurrent validation runs. Building a set is guarded by
a lock so that two threads resolving the same type at once get the same set.
"""

import logging
import threading
from collections.abc import Iterator
from typing import Any

from .predicates.base import Predicate
from .predicates.catalog import PredicateCatalog, default_catalog
from .registry import PredicateRegistry

logger = logging.getLogger(__name__)

_ATTRIBUTE_SET = "__semantic_attributes__"
_resolve_lock = threading.RLock()


class AttributeSet:
    """Mapping of field name to that field's PredicateRegistry."""

    def __init__(self, catalog: PredicateCatalog | None = None):
        self.catalog = catalog or default_catalog()
        self._registries: dict[str, PredicateRegistry] = {}

    def get(self, field: str) -> PredicateRegistry:
        """Registry for ``field``, created empty on first access."""
        registry = self._registries.get(field)
        if registry is None:
            registry = PredicateRegistry(field, self.catalog)
            self._registries[field] = registry
        return registry

    __getitem__ = get

    def lookup(self, field: str) -> PredicateRegistry | None:
        """Registry for ``field`` if it has predicates, without creating one."""
        registry = self._registries.get(field)
        return registry if registry else None

    def add(self, field: str, predicate: Predicate | str, **options: Any) -> Predicate:
        return self.get(field).add(predicate, **options)

    def has(self, field: str, name: str) -> bool:
        registry = self._registries.get(field)
        return registry is not None and registry.has(name)

    def fields(self) -> list[PredicateRegistry]:
        """Registries holding at least one predicate, in declaration order."""
        return [registry for registry in self._registries.values() if registry]

    def field_names(self) -> list[str]:
        return [registry.field for registry in self.fields()]

    def inherit(self, parent: "AttributeSet") -> None:
        """Copy in the parent's predicates that are not already present.

        Used when building a subtype's set; a name already on a field wins
        over the parent's predicate of the same name.
        """
        for parent_registry in parent.fields():
            registry = self._registries.get(parent_registry.field)
            if registry is None:
                self._registries[parent_registry.field] = parent_registry.copy()
                continue
            for predicate in parent_registry:
                if not registry.has(predicate.name):
                    registry.add(predicate)

    def __contains__(self, field: object) -> bool:
        registry = self._registries.get(field) if isinstance(field, str) else None
        return bool(registry)

    def __iter__(self) -> Iterator[PredicateRegistry]:
        return iter(self.fields())

    def __len__(self) -> int:
        return len(self.fields())

    def __repr__(self) -> str:
        return f"AttributeSet({self.field_names()!r})"


def attributes_for(cls: type) -> AttributeSet:
    """Resolve the attribute set of a record type, building it on first use.

    The new set inherits from every ancestor that already has one, nearest
    first in method resolution order.
    """
    attribute_set = cls.__dict__.get(_ATTRIBUTE_SET)
    if attribute_set is not None:
        return attribute_set

    with _resolve_lock:
        attribute_set = cls.__dict__.get(_ATTRIBUTE_SET)
        if attribute_set is not None:
            return attribute_set

        ancestors = [base.__dict__[_ATTRIBUTE_SET] for base in cls.__mro__[1:] if _ATTRIBUTE_SET in base.__dict__]
        catalog = ancestors[0].catalog if ancestors else None
        attribute_set = AttributeSet(catalog)
        for ancestor in ancestors:
            attribute_set.inherit(ancestor)

        setattr(cls, _ATTRIBUTE_SET, attribute_set)
        logger.debug(
            f"Resolved attribute set for {cls.__name__} "
            f"({len(ancestors)} ancestor sets, {len(attribute_set)} fields)"
        )
        return attribute_set


def has_attributes(cls: type) -> bool:
    """Whether ``cls`` itself has resolved an attribute set."""
    return _ATTRIBUTE_SET in cls.__dict__
