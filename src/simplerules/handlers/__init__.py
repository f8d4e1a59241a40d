"""Rule handlers and the handler registry.

Handlers defined in this package are discovered by every engine created
with default handlers enabled.
"""

from .base import Handler, Predicate, RuleTarget
from .registry import HandlerRegistry
from .relational import RelationalHandler

__all__ = [
    "Handler",
    "HandlerRegistry",
    "Predicate",
    "RelationalHandler",
    "RuleTarget",
]
