"""Tests for entity and metadata introspection helpers."""

from dataclasses import dataclass
from typing import Annotated, Any, ClassVar

import pytest
from pydantic import BaseModel

from simplerules.annotations import EntityKey, GreaterThan, LessThan
from simplerules.exceptions import InvalidAnnotationError
from simplerules.introspection import (
    PropertyDescriptor,
    declared_rules,
    entity_properties,
    find_entity_key,
    import_string,
)


@dataclass
class Base:
    id: int
    name: str


@dataclass
class Child(Base):
    score: float = 0.0
    limit: ClassVar[int] = 10

    @property
    def doubled(self) -> float:
        return self.score * 2


class Account(BaseModel):
    number: str
    balance: float


class BaseMetadata:
    id: Annotated[int, EntityKey]
    score: Annotated[float, GreaterThan(constant_value=0.0), LessThan(constant_value=100.0)]


class ChildMetadata(BaseMetadata):
    name: Annotated[str, GreaterThan(constant_value="")]
    plain: int


class TestEntityProperties:

    def test_dataclass_fields_in_declaration_order(self):
        properties = entity_properties(Child)

        assert list(properties) == ["id", "name", "score", "doubled"]
        assert properties["score"] == PropertyDescriptor("score", float)

    def test_property_type_from_return_annotation(self):
        assert entity_properties(Child)["doubled"].type_hint is float

    def test_pydantic_model_fields(self):
        properties = entity_properties(Account)

        assert properties["number"].type_hint is str
        assert properties["balance"].type_hint is float

    def test_unannotated_property(self):
        class Plain:
            @property
            def value(self):
                return 1

        assert entity_properties(Plain)["value"].type_hint is Any

    def test_descriptor_reads_attribute(self):
        assert PropertyDescriptor("name").get(Base(id=1, name="x")) == "x"


class TestDeclaredRules:

    def test_rules_in_declaration_order(self):
        rules = declared_rules(ChildMetadata)

        assert [(r.property_name, type(r.annotation).__name__) for r in rules] == [
            ("score", "GreaterThan"),
            ("score", "LessThan"),
            ("name", "GreaterThan"),
        ]

    def test_metadata_without_rules(self):
        class Empty:
            value: int

        assert declared_rules(Empty) == []


class TestEntityKey:

    def test_key_marker_class_or_instance(self):
        class InstanceKey:
            code: Annotated[str, EntityKey()]

        assert find_entity_key(BaseMetadata) == PropertyDescriptor("id", int)
        assert find_entity_key(InstanceKey) == PropertyDescriptor("code", str)

    def test_key_inherited(self):
        assert find_entity_key(ChildMetadata).name == "id"

    def test_no_key(self):
        class NoKey:
            value: int

        assert find_entity_key(NoKey) is None

    def test_multiple_keys_rejected(self):
        class TwoKeys:
            a: Annotated[int, EntityKey()]
            b: Annotated[int, EntityKey()]

        with pytest.raises(InvalidAnnotationError, match="more than one entity key"):
            find_entity_key(TwoKeys)


class TestImportString:

    def test_import_attribute(self):
        assert import_string("simplerules.annotations:GreaterThan") is GreaterThan

    def test_nested_attribute(self):
        assert import_string("simplerules.annotations:Severity.ERROR").value == "error"

    @pytest.mark.parametrize("path", ["simplerules.annotations", ":GreaterThan", "simplerules:"])
    def test_malformed_path(self, path):
        with pytest.raises(ValueError):
            import_string(path)

    def test_missing_attribute(self):
        with pytest.raises(ImportError):
            import_string("simplerules.annotations:Nope")


class TestPlainClasses:

    def test_init_parameters(self):
        class Ticket:
            def __init__(self, code, price: float, *args, seats=1, **extra):
                self.code = code
                self.price = price
                self.seats = seats

        properties = entity_properties(Ticket)

        assert list(properties) == ["code", "price", "seats"]
        assert properties["price"].type_hint is float
        assert properties["code"].type_hint is Any

    def test_slots(self):
        class Point:
            __slots__ = ("x", "y")

        assert list(entity_properties(Point)) == ["x", "y"]


class TestUnresolvableMetadata:

    def test_forward_reference_is_configuration_error(self):
        class BrokenMetadata:
            total: "MissingType"  # noqa: F821

        with pytest.raises(InvalidAnnotationError, match="BrokenMetadata"):
            declared_rules(BrokenMetadata)
        with pytest.raises(InvalidAnnotationError, match="BrokenMetadata"):
            find_entity_key(BrokenMetadata)
