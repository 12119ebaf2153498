"""Validation predicates and the catalog that names them."""

from .base import Predicate, ValidateOn, is_empty
from .builtin import Length, Number, OneOf, Pattern, SameAs
from .catalog import PredicateCatalog, default_catalog, register_predicate
from .required import Required

__all__ = [
    "Predicate",
    "ValidateOn",
    "is_empty",
    "Required",
    "SameAs",
    "Length",
    "Pattern",
    "OneOf",
    "Number",
    "PredicateCatalog",
    "default_catalog",
    "register_predicate",
]
