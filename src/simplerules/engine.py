"""Engine facade tying registries, compiler and executor together."""

import logging
from collections.abc import Iterable, Iterator
from types import ModuleType
from typing import Any

from .compiler import CompiledRuleSet, RuleCompiler
from .config import SimpleRulesConfig
from .executor import ValidationExecutor
from .handlers import Handler, HandlerRegistry
from .introspection import import_string
from .metadata import MetadataRegistry
from .results import ValidationReport, ValidationResult

logger = logging.getLogger(__name__)

DEFAULT_HANDLER_PACKAGE = "simplerules.handlers"


class SimpleRulesEngine:
    """Declarative validation engine.

    Every cache (bindings, handlers, compiled rule sets, entity keys) is owned
    by the engine instance; separate engines share nothing.

    Example::

        engine = SimpleRulesEngine().bind_metadata(Person, PersonMetadata)
        for result in engine.validate(people):
            print(result.key, result.failures)
    """

    def __init__(self, include_default_handlers: bool = True):
        self.handlers = HandlerRegistry()
        self.metadata = MetadataRegistry()
        self.compiler = RuleCompiler(self.metadata, self.handlers)
        self.executor = ValidationExecutor(self.compiler)
        if include_default_handlers:
            self.discover_handlers(DEFAULT_HANDLER_PACKAGE)

    @classmethod
    def from_config(cls, config: SimpleRulesConfig) -> "SimpleRulesEngine":
        """Create an engine with the handlers and bindings a configuration declares."""
        engine = cls(include_default_handlers=config.handlers.include_defaults)
        if config.handlers.discover:
            engine.discover_handlers(*config.handlers.discover)
        for binding in config.bindings:
            engine.bind_metadata(import_string(binding.entity), import_string(binding.metadata))
        logger.info(
            f"Engine configured with {len(engine.handlers)} handlers and {len(config.bindings)} bindings"
        )
        return engine

    def bind_metadata(self, entity_type: type, metadata_type: type) -> "SimpleRulesEngine":
        """Bind an entity type to the metadata type describing its rules."""
        self.metadata.bind(entity_type, metadata_type)
        return self

    def register_handler(self, handler: Handler | type[Handler]) -> "SimpleRulesEngine":
        """Register a custom handler; registering the same handler class twice is a no-op."""
        self.handlers.register(handler)
        return self

    def discover_handlers(self, *markers: ModuleType | str | type) -> "SimpleRulesEngine":
        """Register every handler implementation found in the given modules."""
        self.handlers.discover(*markers)
        return self

    def rules_for(self, entity_type: type) -> CompiledRuleSet:
        """Compiled rules of an entity type, compiling on first use."""
        return self.compiler.get(entity_type)

    def validate(self, entities: Iterable[Any], entity_type: type | None = None) -> Iterator[ValidationResult]:
        """Lazily validate a batch, one result per entity in input order."""
        return self.executor.validate(entities, entity_type)

    def report(self, entities: Iterable[Any], entity_type: type | None = None) -> ValidationReport:
        """Validate a batch eagerly and aggregate the results."""
        report = ValidationReport(list(self.validate(entities, entity_type)))
        logger.info(
            f"Validation completed with status: {report.status.value} "
            f"({report.counters['valid']}/{report.counters['entities']} valid)"
        )
        return report
