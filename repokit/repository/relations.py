"""
Include paths: resolution of relation paths into eager-load options.

A path is either a dotted string of relationship names, a relationship
attribute, or a tuple of relationship attributes forming a chain. Every
path is checked against the mapper before a statement is built, so a typo
fails with InvalidRelationPath instead of at query time.
"""

from typing import List, Tuple
from sqlalchemy import inspect
from sqlalchemy.orm import InstrumentedAttribute, RelationshipProperty, selectinload
from repokit.exceptions.errors import InvalidRelationPath
from .base import Include, IncludePath


def _relationship(entity: type, name: str):
    relationships = inspect(entity).relationships
    return relationships[name] if name in relationships else None


def _names_from_string(model: type, path: str) -> Tuple[str, ...]:
    names = tuple(path.split("."))
    current = model
    for name in names:
        rel = _relationship(current, name)
        if rel is None:
            raise InvalidRelationPath(model, path, f"{current.__name__} has no relationship '{name}'")
        current = rel.mapper.class_
    return names


def _label(attr) -> str:
    key = getattr(attr, "key", None)
    owner = getattr(attr, "class_", None)
    if isinstance(key, str) and isinstance(owner, type):
        return f"{owner.__name__}.{key}"
    return repr(attr)


def _names_from_attributes(model: type, chain: Tuple) -> Tuple[str, ...]:
    path = ".".join(str(getattr(attr, "key", attr)) for attr in chain)
    if not chain:
        raise InvalidRelationPath(model, path, "empty attribute chain")

    names = []
    current = model
    for attr in chain:
        if not isinstance(attr, InstrumentedAttribute) or not isinstance(attr.property, RelationshipProperty):
            raise InvalidRelationPath(model, path, f"{_label(attr)} is not a relationship attribute")
        if not issubclass(current, attr.class_):
            reason = f"{_label(attr)} does not belong to {current.__name__}"
            if len(chain) == 1:
                # A bare tuple passed as include is a list of paths, not one chain
                reason += "; wrap an attribute chain in a list, e.g. include=[(Category.products, Product.reviews)]"
            raise InvalidRelationPath(model, path, reason)
        names.append(attr.key)
        current = attr.property.mapper.class_
    return tuple(names)


def _names(model: type, item: IncludePath) -> Tuple[str, ...]:
    if isinstance(item, str):
        return _names_from_string(model, item)
    if isinstance(item, InstrumentedAttribute):
        return _names_from_attributes(model, (item,))
    if isinstance(item, (tuple, list)):
        return _names_from_attributes(model, tuple(item))
    raise InvalidRelationPath(model, repr(item), f"unsupported include path type {type(item).__name__}")


def normalize_include(model: type, include: Include) -> List[Tuple[str, ...]]:
    """Validate include paths and return them as name tuples, deduplicated, in the given order."""
    if include is None:
        return []
    if isinstance(include, (str, InstrumentedAttribute)):
        include = [include]
    return list(dict.fromkeys(_names(model, item) for item in include))


def build_load_options(model: type, include: Include) -> list:
    """One chained selectinload per normalized include path."""
    options = []
    for names in normalize_include(model, include):
        current = model
        loader = None
        for name in names:
            attr = getattr(current, name)
            loader = selectinload(attr) if loader is None else loader.selectinload(attr)
            current = _relationship(current, name).mapper.class_
        options.append(loader)
    return options
