"""Tests for the built-in relational handler."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

import pytest

from simplerules.annotations import (
    EqualTo,
    GreaterThan,
    GreaterThanOrEqual,
    LessThan,
    LessThanOrEqual,
    NotEqualTo,
    RelationalOperator,
)
from simplerules.exceptions import IncompatibleConstantError, UnknownPropertyError
from simplerules.handlers import RelationalHandler, RuleTarget
from simplerules.handlers.relational import is_compatible
from simplerules.introspection import entity_properties


@dataclass
class Pair:
    left: Any
    right: Any
    count: int = 0


def _target(prop: str = "left") -> RuleTarget:
    properties = entity_properties(Pair)
    return RuleTarget(Pair, properties[prop], properties)


@pytest.fixture
def handler():
    return RelationalHandler()


class TestSiblingComparison:

    @pytest.mark.parametrize("annotation_cls, left, right, expected", [
        (GreaterThan, 5, 4, True),
        (GreaterThan, 5, 5, False),
        (GreaterThanOrEqual, 5, 5, True),
        (GreaterThanOrEqual, 4, 5, False),
        (LessThan, 4, 5, True),
        (LessThan, 5, 5, False),
        (LessThanOrEqual, 5, 5, True),
        (LessThanOrEqual, 6, 5, False),
        (EqualTo, "a", "a", True),
        (EqualTo, "a", "b", False),
        (NotEqualTo, "a", "b", True),
        (NotEqualTo, "a", "a", False),
    ])
    def test_operators(self, handler, annotation_cls, left, right, expected):
        predicate = handler.build(annotation_cls("right"), _target())

        assert predicate(Pair(left, right)) is expected

    def test_unknown_sibling(self, handler):
        with pytest.raises(UnknownPropertyError, match="'other'"):
            handler.build(GreaterThan("other"), _target())

    def test_sibling_wins_over_constant(self, handler, caplog):
        predicate = handler.build(GreaterThan("right", constant_value=100), _target())

        assert predicate(Pair(5, 4)) is True
        assert "both other_property and constant_value" in caplog.text


class TestNullOperands:

    @pytest.mark.parametrize("annotation_cls", [
        GreaterThan, GreaterThanOrEqual, LessThan, LessThanOrEqual, EqualTo, NotEqualTo
    ])
    @pytest.mark.parametrize("left, right", [(None, 1), (1, None), (None, None)])
    def test_can_be_null_always_passes(self, handler, annotation_cls, left, right):
        predicate = handler.build(annotation_cls("right", can_be_null=True), _target())

        assert predicate(Pair(left, right)) is True

    @pytest.mark.parametrize("annotation_cls", [GreaterThan, GreaterThanOrEqual, LessThan, LessThanOrEqual])
    def test_ordering_with_null_fails(self, handler, annotation_cls):
        predicate = handler.build(annotation_cls("right"), _target())

        assert predicate(Pair(None, 1)) is False
        assert predicate(Pair(1, None)) is False

    def test_equality_with_null_compares(self, handler):
        equal = handler.build(EqualTo("right"), _target())
        not_equal = handler.build(NotEqualTo("right"), _target())

        assert equal(Pair(None, None)) is True
        assert equal(Pair(None, 1)) is False
        assert not_equal(Pair(None, 1)) is True


class TestConstantComparison:

    def test_constant_boundary(self, handler):
        at_least = handler.build(GreaterThanOrEqual(constant_value=0), _target("count"))
        above = handler.build(GreaterThan(constant_value=0), _target("count"))

        assert at_least(Pair(None, None, count=0)) is True
        assert above(Pair(None, None, count=0)) is False

    def test_incompatible_constant(self, handler):
        with pytest.raises(IncompatibleConstantError) as exc_info:
            handler.build(LessThan(constant_value="ten"), _target("count"))

        assert exc_info.value.property_name == "count"
        assert exc_info.value.operator_kind == RelationalOperator.LESS_THAN


class TestDefaultMessage:

    def test_sibling_message(self, handler):
        message = handler.default_message(GreaterThanOrEqual("right"), _target())

        assert message == "left must be greater than or equal to right"

    def test_constant_message(self, handler):
        message = handler.default_message(NotEqualTo(constant_value=3), _target("count"))

        assert message == "count must be not equal to 3"


class TestIsCompatible:

    @pytest.mark.parametrize("value, hint, expected", [
        (1, int, True),
        (1, float, True),
        (1, Decimal, True),
        (1.5, int, False),
        (True, int, False),
        (True, bool, True),
        ("x", str, True),
        ("x", int, False),
        (1, Optional[int], True),
        ("x", int | None, False),
        (1, int | str, True),
        (object(), Any, True),
        ([1], list[int], True),
        (1.0, complex, True),
    ])
    def test_compatibility(self, value, hint, expected):
        assert is_compatible(value, hint) is expected
