"""Reflection helpers: entity properties, declared rules and import paths."""

import importlib
import inspect
import logging
import typing
from dataclasses import dataclass
from typing import Annotated, Any, ClassVar, get_args, get_origin

from .annotations import EntityKey, RuleAnnotation
from .exceptions import InvalidAnnotationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PropertyDescriptor:
    """A named, readable attribute of an entity type."""
    name: str
    type_hint: Any = Any

    def get(self, entity: Any) -> Any:
        return getattr(entity, self.name)


@dataclass(frozen=True)
class DeclaredRule:
    """A rule annotation together with the metadata attribute carrying it."""
    property_name: str
    annotation: RuleAnnotation


def entity_properties(entity_type: type) -> dict[str, PropertyDescriptor]:
    """Collect the readable properties of an entity type in declaration order.

    Annotated attributes (dataclass fields, pydantic fields, plain class
    annotations) come first, base classes before subclasses. Plain classes
    contribute their ``__init__`` parameter names and ``__slots__``, assuming
    each parameter is stored under its own name. ``property`` objects come
    last, typed by the getter's return annotation.
    """
    properties: dict[str, PropertyDescriptor] = {}

    model_fields = getattr(entity_type, "model_fields", None)
    if isinstance(model_fields, dict):
        # pydantic models: field annotations are already resolved
        hints = {name: info.annotation for name, info in model_fields.items()}
    else:
        hints = _type_hints(entity_type)

    for name, hint in hints.items():
        if name.startswith("__") or get_origin(hint) is ClassVar or hint is ClassVar:
            continue
        properties[name] = PropertyDescriptor(name, hint)

    # Plain classes that only assign attributes in __init__ or declare __slots__
    for name, hint in _init_parameters(entity_type).items():
        properties.setdefault(name, PropertyDescriptor(name, hint))
    for klass in reversed(entity_type.__mro__):
        slots = getattr(klass, "__slots__", ())
        for name in (slots,) if isinstance(slots, str) else slots:
            if not name.startswith("__"):
                properties.setdefault(name, PropertyDescriptor(name))

    for klass in reversed(entity_type.__mro__):
        for name, attr in vars(klass).items():
            if isinstance(attr, property) and not name.startswith("__") and name not in properties:
                hint = _type_hints(attr.fget).get("return", Any) if attr.fget else Any
                properties[name] = PropertyDescriptor(name, hint)

    return properties


def declared_rules(metadata_type: type) -> list[DeclaredRule]:
    """Rule annotations of a metadata type, attributes and annotations in declaration order."""
    rules = []
    for name, hint in _metadata_hints(metadata_type).items():
        for marker in _annotated_metadata(hint):
            if isinstance(marker, RuleAnnotation):
                rules.append(DeclaredRule(name, marker))
    return rules


def find_entity_key(metadata_type: type) -> PropertyDescriptor | None:
    """Find the attribute marked with :class:`EntityKey`, if any."""
    keys = []
    for name, hint in _metadata_hints(metadata_type).items():
        if any(marker is EntityKey or isinstance(marker, EntityKey) for marker in _annotated_metadata(hint)):
            keys.append(PropertyDescriptor(name, get_args(hint)[0]))

    if len(keys) > 1:
        names = ", ".join(key.name for key in keys)
        raise InvalidAnnotationError(
            f"Metadata {metadata_type.__name__} declares more than one entity key: {names}"
        )
    return keys[0] if keys else None


def import_string(path: str) -> Any:
    """Import an object from a ``package.module:attribute`` path."""
    module_name, sep, attribute = path.partition(":")
    if not sep or not module_name or not attribute:
        raise ValueError(f"Import path must look like 'package.module:Name', got: {path!r}")

    target = importlib.import_module(module_name)
    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError:
            raise ImportError(f"Module {module_name!r} has no attribute {attribute!r}") from None
    return target


def _metadata_hints(metadata_type: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(metadata_type, include_extras=True)
    except NameError as e:
        raise InvalidAnnotationError(
            f"Cannot resolve annotations of metadata {metadata_type.__name__}: {e}"
        ) from e


def _init_parameters(entity_type: type) -> dict[str, Any]:
    """Named __init__ parameters of a plain class, with their annotations if any."""
    if entity_type.__init__ is object.__init__:
        return {}
    try:
        signature = inspect.signature(entity_type.__init__)
    except (TypeError, ValueError):
        return {}

    named = (inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY)
    parameters = list(signature.parameters.values())[1:]
    return {
        p.name: Any if p.annotation is inspect.Parameter.empty else p.annotation
        for p in parameters
        if p.kind in named
    }


def _annotated_metadata(hint: Any) -> tuple:
    if get_origin(hint) is Annotated:
        return hint.__metadata__
    return ()


def _type_hints(obj: Any) -> dict[str, Any]:
    try:
        return typing.get_type_hints(obj)
    except (NameError, TypeError) as e:
        # Unresolvable forward references: keep the names, drop the types
        logger.debug(f"Could not resolve type hints of {obj!r}: {e}")
        hints: dict[str, Any] = {}
        for klass in reversed(getattr(obj, "__mro__", (obj,))):
            for name in getattr(klass, "__annotations__", {}):
                hints[name] = Any
        return hints
