"""semattr - Declarative predicate-based validation for record fields.

Named, reusable predicates are attached to the fields of a record type and
evaluated during validation. Failures are collected as human-readable
messages.
"""

__version__ = "0.1.0"
__author__ = "semattr contributors"
__description__ = "Declarative predicate-based validation for record fields"

from semattr.attributes import AttributeSet, attributes_for
from semattr.config import SemattrConfig, load_config
from semattr.dsl import AttributeBuilder, declare
from semattr.engine import ValidationEngine, default_engine
from semattr.errors import (
    ConditionError,
    ConfigurationError,
    DuplicatePredicateError,
    UnknownPredicateError,
)
from semattr.model import SemanticRecord
from semattr.predicates import Predicate, PredicateCatalog, Required, ValidateOn, register_predicate
from semattr.record import Errors, FieldError, HostRecord, ValidationContext
from semattr.registry import PredicateRegistry

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    "AttributeBuilder",
    "AttributeSet",
    "ConditionError",
    "ConfigurationError",
    "DuplicatePredicateError",
    "Errors",
    "FieldError",
    "HostRecord",
    "Predicate",
    "PredicateCatalog",
    "PredicateRegistry",
    "Required",
    "SemanticRecord",
    "SemattrConfig",
    "UnknownPredicateError",
    "ValidateOn",
    "ValidationContext",
    "ValidationEngine",
    "attributes_for",
    "declare",
    "default_engine",
    "load_config",
    "register_predicate",
]
