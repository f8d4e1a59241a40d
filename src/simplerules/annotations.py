"""Declarative rule vocabulary attached to metadata-definition attributes.

Rules are attached through ``typing.Annotated``::

    class PersonMetadata:
        id: Annotated[int, EntityKey()]
        age: Annotated[int, GreaterThanOrEqual("min_age", message="Age must be at least MinAge")]

Annotations are inert records. The ``operator_kind`` of each variant is an
opaque key that the handler registry resolves to a handler.
"""

from collections.abc import Hashable
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

from .exceptions import InvalidAnnotationError


class Severity(str, Enum):
    """Severity recorded with a failed rule."""
    ERROR = "error"
    WARNING = "warning"


class RelationalOperator(str, Enum):
    """Operator kinds handled by the built-in relational handler."""
    GREATER_THAN = "greater_than"
    GREATER_THAN_OR_EQUAL = "greater_than_or_equal"
    LESS_THAN = "less_than"
    LESS_THAN_OR_EQUAL = "less_than_or_equal"
    EQUAL = "equal"
    NOT_EQUAL = "not_equal"


@dataclass(frozen=True)
class EntityKey:
    """Marks the metadata attribute that identifies an entity instance."""


@dataclass(frozen=True)
class RuleAnnotation:
    """Base record for all rule annotations.

    Subclasses declare ``operator_kind``; the base class itself cannot be
    instantiated as a rule.

    Args:
        other_property: Name of a sibling attribute on the entity to compare against
        constant_value: Literal to compare against
        can_be_null: When True a ``None`` operand makes the rule pass
        severity: Severity recorded when the rule fails
        message: Text returned verbatim when the rule fails
    """
    operator_kind: ClassVar[Hashable | None] = None

    other_property: str | None = None
    constant_value: Any = None
    can_be_null: bool = False
    severity: Severity = Severity.ERROR
    message: str | None = None

    def __post_init__(self) -> None:
        if self.operator_kind is None:
            raise InvalidAnnotationError(
                f"{type(self).__name__} does not declare an operator kind"
            )
        if self.other_property is None and self.constant_value is None:
            raise InvalidAnnotationError(
                f"{type(self).__name__} needs either other_property or constant_value",
                operator_kind=self.operator_kind,
            )
        if not isinstance(self.severity, Severity):
            # Accept plain strings such as "warning"
            object.__setattr__(self, "severity", Severity(self.severity))


@dataclass(frozen=True)
class GreaterThan(RuleAnnotation):
    operator_kind: ClassVar[Hashable] = RelationalOperator.GREATER_THAN


@dataclass(frozen=True)
class GreaterThanOrEqual(RuleAnnotation):
    operator_kind: ClassVar[Hashable] = RelationalOperator.GREATER_THAN_OR_EQUAL


@dataclass(frozen=True)
class LessThan(RuleAnnotation):
    operator_kind: ClassVar[Hashable] = RelationalOperator.LESS_THAN


@dataclass(frozen=True)
class LessThanOrEqual(RuleAnnotation):
    operator_kind: ClassVar[Hashable] = RelationalOperator.LESS_THAN_OR_EQUAL


@dataclass(frozen=True)
class EqualTo(RuleAnnotation):
    operator_kind: ClassVar[Hashable] = RelationalOperator.EQUAL


@dataclass(frozen=True)
class NotEqualTo(RuleAnnotation):
    operator_kind: ClassVar[Hashable] = RelationalOperator.NOT_EQUAL
