"""Built-in handler for the relational comparison family."""

import logging
import numbers
import operator
import types
from decimal import Decimal
from typing import Any, Union, get_args, get_origin

from ..annotations import RelationalOperator, RuleAnnotation
from ..exceptions import IncompatibleConstantError
from .base import Handler, Predicate, RuleTarget

logger = logging.getLogger(__name__)

_COMPARATORS = {
    RelationalOperator.GREATER_THAN: operator.gt,
    RelationalOperator.GREATER_THAN_OR_EQUAL: operator.ge,
    RelationalOperator.LESS_THAN: operator.lt,
    RelationalOperator.LESS_THAN_OR_EQUAL: operator.le,
    RelationalOperator.EQUAL: operator.eq,
    RelationalOperator.NOT_EQUAL: operator.ne,
}

_PHRASES = {
    RelationalOperator.GREATER_THAN: "greater than",
    RelationalOperator.GREATER_THAN_OR_EQUAL: "greater than or equal to",
    RelationalOperator.LESS_THAN: "less than",
    RelationalOperator.LESS_THAN_OR_EQUAL: "less than or equal to",
    RelationalOperator.EQUAL: "equal to",
    RelationalOperator.NOT_EQUAL: "not equal to",
}

_EQUALITY = {RelationalOperator.EQUAL, RelationalOperator.NOT_EQUAL}


class RelationalHandler(Handler):
    """Compares a property against a sibling property or a constant."""

    supported_kinds = frozenset(RelationalOperator)

    def build(self, annotation: RuleAnnotation, target: RuleTarget) -> Predicate:
        kind = RelationalOperator(annotation.operator_kind)
        compare = _COMPARATORS[kind]
        left = target.prop.get
        can_be_null = annotation.can_be_null
        # Ordering against None would raise; treat it as a failed comparison
        null_result = kind in _EQUALITY

        if annotation.other_property is not None:
            if annotation.constant_value is not None:
                logger.warning(
                    f"{target.entity_type.__name__}.{target.name}: both other_property and "
                    f"constant_value given for {kind.value}; comparing against {annotation.other_property}"
                )
            right = target.sibling(annotation.other_property).get
        else:
            constant = annotation.constant_value
            if not is_compatible(constant, target.prop.type_hint):
                raise IncompatibleConstantError(
                    f"Constant {constant!r} ({type(constant).__name__}) cannot be compared with "
                    f"{target.entity_type.__name__}.{target.name} ({_hint_name(target.prop.type_hint)})",
                    entity_type=target.entity_type,
                    property_name=target.name,
                    operator_kind=kind,
                )

            def right(entity: Any) -> Any:
                return constant

        def predicate(entity: Any) -> bool:
            lhs = left(entity)
            rhs = right(entity)
            if lhs is None or rhs is None:
                if can_be_null:
                    return True
                if not null_result:
                    return False
            return bool(compare(lhs, rhs))

        return predicate

    def default_message(self, annotation: RuleAnnotation, target: RuleTarget) -> str:
        phrase = _PHRASES[RelationalOperator(annotation.operator_kind)]
        if annotation.other_property is not None:
            operand = annotation.other_property
        else:
            operand = repr(annotation.constant_value)
        return f"{target.name} must be {phrase} {operand}"


def is_compatible(value: Any, hint: Any) -> bool:
    """Whether a constant can be compared with values of the hinted type.

    Unknown hints accept anything; ``int`` widens to float, complex and
    Decimal; ``bool`` only matches bool hints.
    """
    origin = get_origin(hint)
    if origin is Union or origin is types.UnionType:
        return any(is_compatible(value, arm) for arm in get_args(hint) if arm is not type(None))
    if origin is not None:
        hint = origin
    if hint is Any or not isinstance(hint, type) or hint is object:
        return True

    if isinstance(value, bool) and hint is not bool:
        return not issubclass(hint, numbers.Number) and isinstance(value, hint)
    if isinstance(value, int) and hint in (float, complex, Decimal):
        return True
    if isinstance(value, numbers.Real) and hint is complex:
        return True
    return isinstance(value, hint)


def _hint_name(hint: Any) -> str:
    return getattr(hint, "__name__", None) or str(hint)
