"""Exception hierarchy for simplerules.

Configuration errors are raised at registration or first-compilation time
and carry enough context (entity type, property, operator kind) to point
at the offending declaration.
"""

from typing import Any


class SimpleRulesError(Exception):
    """Base class for all simplerules errors."""


class ConfigurationError(SimpleRulesError):
    """Raised when bindings, handlers or annotations are misconfigured."""

    def __init__(
        self,
        message: str,
        entity_type: type | None = None,
        property_name: str | None = None,
        operator_kind: Any = None,
    ):
        self.entity_type = entity_type
        self.property_name = property_name
        self.operator_kind = operator_kind
        super().__init__(message)


class DuplicateBindingError(ConfigurationError):
    """Raised when an entity type is bound to metadata a second time."""

    def __init__(self, entity_type: type, existing: type, attempted: type):
        self.existing = existing
        self.attempted = attempted
        super().__init__(
            f"Entity {entity_type.__name__} is already bound to metadata {existing.__name__}; "
            f"cannot rebind it to {attempted.__name__}",
            entity_type=entity_type,
        )


class MissingBindingError(ConfigurationError):
    """Raised when an entity type has no metadata binding."""

    def __init__(self, entity_type: type):
        super().__init__(
            f"Unable to identify rule metadata for the entity: {entity_type.__qualname__} "
            f"(register it with bind_metadata)",
            entity_type=entity_type,
        )


class HandlerNotFoundError(ConfigurationError):
    """Raised when no registered handler supports an operator kind."""

    def __init__(self, operator_kind: Any, entity_type: type | None = None, property_name: str | None = None):
        location = ""
        if entity_type is not None:
            location = f" declared on {entity_type.__name__}.{property_name}"
        super().__init__(
            f"No handler registered for operator kind {_kind_name(operator_kind)!r}{location}",
            entity_type=entity_type,
            property_name=property_name,
            operator_kind=operator_kind,
        )


class UnknownPropertyError(ConfigurationError):
    """Raised when a rule refers to a property the entity type does not have."""


class IncompatibleConstantError(ConfigurationError):
    """Raised when a constant operand cannot be compared with its property."""


class InvalidAnnotationError(ConfigurationError):
    """Raised when a rule annotation is declared inconsistently."""


def _kind_name(operator_kind: Any) -> str:
    return str(getattr(operator_kind, "value", operator_kind))
