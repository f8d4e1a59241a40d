"""Compilation of declared rules into cached, ordered predicate lists."""

import logging
import threading
from collections.abc import Hashable
from dataclasses import dataclass
from typing import Any

from .annotations import Severity
from .exceptions import HandlerNotFoundError, UnknownPropertyError
from .handlers.base import Predicate, RuleTarget
from .handlers.registry import HandlerRegistry
from .introspection import PropertyDescriptor, declared_rules, entity_properties
from .metadata import MetadataRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledRule:
    """An executable rule derived from one annotation."""
    property_name: str
    operator_kind: Hashable
    predicate: Predicate
    message: str
    severity: Severity

    def __call__(self, entity: Any) -> bool:
        return self.predicate(entity)


@dataclass(frozen=True)
class CompiledRuleSet:
    """All compiled rules of one entity type, in declaration order."""
    entity_type: type
    metadata_type: type
    key: PropertyDescriptor | None
    rules: tuple[CompiledRule, ...]

    def key_of(self, entity: Any) -> Any:
        """Value of the entity key, or None when no key is declared."""
        if self.key is None:
            return None
        return self.key.get(entity)

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self):
        return iter(self.rules)


class RuleCompiler:
    """Builds rule sets on first use and caches them per entity type.

    Cached rule sets are never invalidated. Compilation is serialised so that
    concurrent first uses of a type compile it exactly once.
    """

    def __init__(self, metadata: MetadataRegistry, handlers: HandlerRegistry):
        self.metadata = metadata
        self.handlers = handlers
        self._cache: dict[type, CompiledRuleSet] = {}
        self._lock = threading.Lock()

    @property
    def compiled_types(self) -> list[type]:
        return list(self._cache)

    def is_compiled(self, entity_type: type) -> bool:
        return entity_type in self._cache

    def get(self, entity_type: type) -> CompiledRuleSet:
        """Return the rule set for an entity type, compiling it on first use."""
        rule_set = self._cache.get(entity_type)
        if rule_set is not None:
            return rule_set

        with self._lock:
            rule_set = self._cache.get(entity_type)
            if rule_set is None:
                rule_set = self._compile(entity_type)
                self._cache[entity_type] = rule_set
        return rule_set

    def _compile(self, entity_type: type) -> CompiledRuleSet:
        metadata_type = self.metadata.lookup(entity_type)
        properties = entity_properties(entity_type)

        key = None
        meta_key = self.metadata.resolve_entity_key(metadata_type)
        if meta_key is not None:
            key = self._entity_property(entity_type, properties, meta_key.name)

        rules = []
        for declared in declared_rules(metadata_type):
            annotation = declared.annotation
            target = RuleTarget(
                entity_type=entity_type,
                prop=self._entity_property(entity_type, properties, declared.property_name),
                properties=properties,
            )
            try:
                handler = self.handlers.resolve(annotation.operator_kind)
            except HandlerNotFoundError:
                raise HandlerNotFoundError(
                    annotation.operator_kind, entity_type=entity_type, property_name=declared.property_name
                ) from None

            rule = CompiledRule(
                property_name=declared.property_name,
                operator_kind=annotation.operator_kind,
                predicate=handler.build(annotation, target),
                message=annotation.message or handler.default_message(annotation, target),
                severity=annotation.severity,
            )
            logger.debug(f"Compiled {entity_type.__name__}.{rule.property_name} {rule.operator_kind!s} with {type(handler).__name__}")
            rules.append(rule)

        logger.info(
            f"Compiled {len(rules)} rules for {entity_type.__qualname__} from {metadata_type.__qualname__}"
        )
        return CompiledRuleSet(entity_type, metadata_type, key, tuple(rules))

    @staticmethod
    def _entity_property(
        entity_type: type, properties: dict[str, PropertyDescriptor], name: str
    ) -> PropertyDescriptor:
        try:
            return properties[name]
        except KeyError:
            raise UnknownPropertyError(
                f"Metadata attribute {name!r} has no matching property on {entity_type.__qualname__}",
                entity_type=entity_type,
                property_name=name,
            ) from None
