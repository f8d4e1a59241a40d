"""Entity-to-metadata bindings and entity key lookup."""

import inspect
import logging
import threading

from .exceptions import DuplicateBindingError, MissingBindingError
from .introspection import PropertyDescriptor, find_entity_key

logger = logging.getLogger(__name__)


class MetadataRegistry:
    """Write-once mapping from entity types to metadata-definition types."""

    def __init__(self):
        self._lock = threading.RLock()
        self._bindings: dict[type, type] = {}
        self._entity_keys: dict[type, PropertyDescriptor | None] = {}

    @property
    def bindings(self) -> dict[type, type]:
        with self._lock:
            return dict(self._bindings)

    def bind(self, entity_type: type, metadata_type: type) -> None:
        """Bind an entity type to its metadata type.

        Raises:
            DuplicateBindingError: If the entity type is already bound
        """
        for value in (entity_type, metadata_type):
            if not inspect.isclass(value):
                raise TypeError(f"Expected a class, got: {value!r}")

        with self._lock:
            existing = self._bindings.get(entity_type)
            if existing is not None:
                raise DuplicateBindingError(entity_type, existing, metadata_type)
            self._bindings[entity_type] = metadata_type

        logger.debug(f"Bound entity {entity_type.__qualname__} to metadata {metadata_type.__qualname__}")

    def lookup(self, entity_type: type) -> type:
        """Return the metadata type bound to an entity type.

        Raises:
            MissingBindingError: If the entity type was never bound
        """
        with self._lock:
            metadata_type = self._bindings.get(entity_type)
        if metadata_type is None:
            raise MissingBindingError(entity_type)
        return metadata_type

    def is_bound(self, entity_type: type) -> bool:
        with self._lock:
            return entity_type in self._bindings

    def resolve_entity_key(self, metadata_type: type) -> PropertyDescriptor | None:
        """Return the metadata attribute marked as entity key, scanning each type once."""
        with self._lock:
            if metadata_type not in self._entity_keys:
                self._entity_keys[metadata_type] = find_entity_key(metadata_type)
            return self._entity_keys[metadata_type]
