"""Applies compiled rule sets to batches of entities."""

import logging
from collections.abc import Iterable, Iterator
from typing import Any

from .compiler import CompiledRuleSet, RuleCompiler
from .results import ValidationResult

logger = logging.getLogger(__name__)


class ValidationExecutor:
    """Evaluates every compiled rule against every entity of a batch."""

    def __init__(self, compiler: RuleCompiler):
        self.compiler = compiler

    def validate(self, entities: Iterable[Any], entity_type: type | None = None) -> Iterator[ValidationResult]:
        """Lazily yield one result per entity, in input order.

        Args:
            entities: Entities to validate
            entity_type: Bound type to validate every entity as; defaults to
                each entity's own type

        Yields:
            ValidationResult for each entity, including valid ones
        """
        if entity_type is not None:
            # Surface configuration errors even for an empty batch
            self.compiler.get(entity_type)

        count = 0
        for entity in entities:
            rule_set = self.compiler.get(entity_type or type(entity))
            count += 1
            yield evaluate(rule_set, entity)
        logger.debug(f"Validated {count} entities")


def evaluate(rule_set: CompiledRuleSet, entity: Any) -> ValidationResult:
    """Run all rules of a rule set against one entity."""
    result = ValidationResult(key=rule_set.key_of(entity))
    for rule in rule_set.rules:
        if not rule.predicate(entity):
            result.add(rule.message, rule.severity)
    return result
