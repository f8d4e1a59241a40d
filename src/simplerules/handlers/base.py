"""Handler contract: turns a rule annotation into an executable predicate."""

from abc import ABC, abstractmethod
from collections.abc import Callable, Hashable, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

from ..annotations import RuleAnnotation
from ..exceptions import UnknownPropertyError
from ..introspection import PropertyDescriptor

Predicate = Callable[[Any], bool]


@dataclass(frozen=True)
class RuleTarget:
    """The entity property a rule is bound to, plus its siblings."""
    entity_type: type
    prop: PropertyDescriptor
    properties: Mapping[str, PropertyDescriptor]

    @property
    def name(self) -> str:
        return self.prop.name

    def sibling(self, name: str) -> PropertyDescriptor:
        """Resolve a sibling property by name or raise UnknownPropertyError."""
        try:
            return self.properties[name]
        except KeyError:
            raise UnknownPropertyError(
                f"{self.entity_type.__name__}.{self.prop.name} refers to unknown property {name!r}",
                entity_type=self.entity_type,
                property_name=self.prop.name,
            ) from None


class Handler(ABC):
    """Base class for rule handlers.

    A handler declares the operator kinds it supports and builds one
    predicate per (entity type, annotation) pair. Handlers are stateless and
    instantiated once per registry.
    """

    supported_kinds: ClassVar[frozenset[Hashable]] = frozenset()

    def supports(self, operator_kind: Hashable) -> bool:
        return operator_kind in self.supported_kinds

    @abstractmethod
    def build(self, annotation: RuleAnnotation, target: RuleTarget) -> Predicate:
        """Build a predicate for the annotation bound to the target property.

        Args:
            annotation: Declared rule annotation
            target: Annotated entity property and its siblings

        Returns:
            Callable taking an entity and returning True when the rule passes

        Raises:
            ConfigurationError: If the annotation cannot be bound to the target
        """
        pass

    def default_message(self, annotation: RuleAnnotation, target: RuleTarget) -> str:
        """Message used when the annotation does not carry one."""
        kind = getattr(annotation.operator_kind, "value", annotation.operator_kind)
        return f"{target.name} failed rule {kind}"
