"""simplerules - declarative relational validation for Python objects.

Rules are declared on metadata-definition classes with ``typing.Annotated``,
compiled once per entity type, and applied to batches of entities.
"""

__version__ = "0.1.0"
__description__ = "Declarative relational validation rules for Python objects"

from simplerules.annotations import (
    EntityKey,
    EqualTo,
    GreaterThan,
    GreaterThanOrEqual,
    LessThan,
    LessThanOrEqual,
    NotEqualTo,
    RelationalOperator,
    RuleAnnotation,
    Severity,
)
from simplerules.engine import SimpleRulesEngine
from simplerules.exceptions import (
    ConfigurationError,
    DuplicateBindingError,
    HandlerNotFoundError,
    IncompatibleConstantError,
    InvalidAnnotationError,
    MissingBindingError,
    SimpleRulesError,
    UnknownPropertyError,
)
from simplerules.handlers import Handler, RuleTarget
from simplerules.results import RuleFailure, ValidationReport, ValidationResult, ValidationStatus

__all__ = [
    "__version__",
    "__description__",
    "ConfigurationError",
    "DuplicateBindingError",
    "EntityKey",
    "EqualTo",
    "GreaterThan",
    "GreaterThanOrEqual",
    "Handler",
    "HandlerNotFoundError",
    "IncompatibleConstantError",
    "InvalidAnnotationError",
    "LessThan",
    "LessThanOrEqual",
    "MissingBindingError",
    "NotEqualTo",
    "RelationalOperator",
    "RuleAnnotation",
    "RuleFailure",
    "RuleTarget",
    "Severity",
    "SimpleRulesEngine",
    "SimpleRulesError",
    "UnknownPropertyError",
    "ValidationReport",
    "ValidationResult",
    "ValidationStatus",
]
