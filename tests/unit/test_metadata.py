"""Tests for the metadata registry."""

from typing import Annotated
from unittest.mock import patch

import pytest

from simplerules.annotations import EntityKey
from simplerules.exceptions import DuplicateBindingError, MissingBindingError
from simplerules.introspection import PropertyDescriptor
from simplerules.metadata import MetadataRegistry


class Product:
    sku: str


class ProductMetadata:
    sku: Annotated[str, EntityKey()]


class OtherMetadata:
    pass


@pytest.fixture
def registry():
    return MetadataRegistry()


class TestBind:

    def test_bind_and_lookup(self, registry):
        registry.bind(Product, ProductMetadata)

        assert registry.lookup(Product) is ProductMetadata
        assert registry.is_bound(Product)
        assert registry.bindings == {Product: ProductMetadata}

    def test_duplicate_binding(self, registry):
        registry.bind(Product, ProductMetadata)

        with pytest.raises(DuplicateBindingError) as exc_info:
            registry.bind(Product, OtherMetadata)

        assert exc_info.value.existing is ProductMetadata
        assert exc_info.value.attempted is OtherMetadata
        assert registry.lookup(Product) is ProductMetadata

    def test_rebinding_same_pair_is_still_duplicate(self, registry):
        registry.bind(Product, ProductMetadata)

        with pytest.raises(DuplicateBindingError):
            registry.bind(Product, ProductMetadata)

    def test_bind_requires_classes(self, registry):
        with pytest.raises(TypeError):
            registry.bind(Product(), ProductMetadata)

    def test_missing_binding(self, registry):
        with pytest.raises(MissingBindingError, match="Product"):
            registry.lookup(Product)

    def test_bindings_is_a_copy(self, registry):
        registry.bind(Product, ProductMetadata)

        registry.bindings.clear()

        assert registry.is_bound(Product)


class TestEntityKey:

    def test_resolve_key(self, registry):
        assert registry.resolve_entity_key(ProductMetadata) == PropertyDescriptor("sku", str)

    def test_absent_key(self, registry):
        assert registry.resolve_entity_key(OtherMetadata) is None

    def test_key_scanned_once(self, registry):
        with patch("simplerules.metadata.find_entity_key", return_value=None) as finder:
            registry.resolve_entity_key(OtherMetadata)
            registry.resolve_entity_key(OtherMetadata)

        finder.assert_called_once_with(OtherMetadata)
