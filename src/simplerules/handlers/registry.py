"""Registry mapping operator kinds to handler instances."""

import importlib
import inspect
import logging
import pkgutil
import threading
from collections.abc import Hashable
from types import ModuleType
from typing import Any

from ..exceptions import HandlerNotFoundError
from .base import Handler

logger = logging.getLogger(__name__)


class HandlerRegistry:
    """Holds one handler instance per handler class.

    When several handlers support the same operator kind the most recently
    registered one is resolved, so custom handlers can replace built-ins.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._handlers: dict[type[Handler], Handler] = {}
        self._by_kind: dict[Hashable, Handler] = {}

    @property
    def handlers(self) -> list[Handler]:
        """Registered handler instances in registration order."""
        with self._lock:
            return list(self._handlers.values())

    def register(self, handler: Handler | type[Handler]) -> Handler:
        """Register a handler instance (or class); no-op if its class is already registered.

        Returns:
            The registered instance for the handler's class
        """
        if inspect.isclass(handler) and issubclass(handler, Handler):
            handler_type = handler
            instance = None
        elif isinstance(handler, Handler):
            handler_type = type(handler)
            instance = handler
        else:
            raise TypeError(f"Expected a Handler instance or subclass, got: {handler!r}")

        with self._lock:
            existing = self._handlers.get(handler_type)
            if existing is not None:
                return existing

            if instance is None:
                instance = handler_type()
            self._handlers[handler_type] = instance
            for kind in handler_type.supported_kinds:
                self._by_kind[kind] = instance

        logger.debug(f"Registered handler {handler_type.__qualname__} for {len(handler_type.supported_kinds)} operator kinds")
        return instance

    def discover(self, *markers: ModuleType | str | type) -> list[type[Handler]]:
        """Scan modules for concrete Handler subclasses and register each once.

        Args:
            markers: Module objects, dotted module names, or classes whose
                defining module should be scanned. Packages are scanned
                recursively.

        Returns:
            Handler classes found, in discovery order
        """
        found: list[type[Handler]] = []
        for module in _expand_modules(markers):
            for _, obj in inspect.getmembers(module, inspect.isclass):
                if (
                    issubclass(obj, Handler)
                    and obj.__module__ == module.__name__
                    and not inspect.isabstract(obj)
                    and obj not in found
                ):
                    found.append(obj)

        with self._lock:
            for handler_type in found:
                self.register(handler_type)

        logger.debug(f"Discovered {len(found)} handlers in {len(markers)} modules")
        return found

    def resolve(self, operator_kind: Hashable) -> Handler:
        """Return the handler for an operator kind.

        Raises:
            HandlerNotFoundError: If no registered handler supports the kind
        """
        with self._lock:
            handler = self._by_kind.get(operator_kind)
        if handler is None:
            raise HandlerNotFoundError(operator_kind)
        return handler

    def supports(self, operator_kind: Hashable) -> bool:
        with self._lock:
            return operator_kind in self._by_kind

    def __len__(self) -> int:
        return len(self._handlers)


def _expand_modules(markers: tuple[Any, ...]) -> list[ModuleType]:
    modules: list[ModuleType] = []
    for marker in markers:
        if isinstance(marker, ModuleType):
            root = marker
        elif isinstance(marker, str):
            root = importlib.import_module(marker)
        elif inspect.isclass(marker):
            root = importlib.import_module(marker.__module__)
        else:
            raise TypeError(f"Expected a module, module name or class, got: {marker!r}")

        modules.append(root)
        if hasattr(root, "__path__"):
            for info in pkgutil.walk_packages(root.__path__, prefix=f"{root.__name__}."):
                modules.append(importlib.import_module(info.name))
    return modules
