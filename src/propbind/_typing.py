"""Declared-type helpers: optional unwrapping, arrays and mapped values."""

from __future__ import annotations

import enum
import types
from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from dataclasses import dataclass
from typing import Any, Union, get_args, get_origin

_ARRAY_ORIGINS: tuple[Any, ...] = (list, tuple, Sequence, MutableSequence)
_MAPPING_ORIGINS: tuple[Any, ...] = (dict, Mapping, MutableMapping)


class PropertyKind(enum.StrEnum):
    PLAIN = "plain"
    INDEXED = "indexed"
    MAPPED = "mapped"


@dataclass(frozen=True)
class PropertyType:
    """Declared type of a property as reported by an accessor.

    ``element_type`` holds the component type of an indexed property or the
    value type of a mapped one.
    """

    type: Any
    kind: PropertyKind = PropertyKind.PLAIN
    element_type: Any = None

    @property
    def resolved_type(self) -> Any:
        """The type a single assigned value must be converted to."""
        if self.kind is PropertyKind.PLAIN:
            return self.type
        return self.element_type


def unwrap_optional(tp: Any) -> Any:
    """Strip ``None`` from ``X | None`` / ``Optional[X]``."""
    if get_origin(tp) in (Union, types.UnionType):
        args = [a for a in get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return tp


def array_component_type(tp: Any) -> Any | None:
    """Return the component type if ``tp`` declares an array, else None.

    ``list[int]``, ``tuple[int, ...]`` and ``Sequence[int]`` are arrays of
    ``int``; bare ``list`` and ``tuple`` are arrays of ``Any``. ``str`` is
    not an array.
    """
    tp = unwrap_optional(tp)
    if tp in _ARRAY_ORIGINS:
        return Any
    if get_origin(tp) in _ARRAY_ORIGINS:
        args = [a for a in get_args(tp) if a is not Ellipsis]
        return args[0] if args else Any
    return None


def array_factory(tp: Any) -> type:
    """Return the container class used to build values of array type ``tp``."""
    tp = unwrap_optional(tp)
    return tuple if tp is tuple or get_origin(tp) is tuple else list


def mapped_value_type(tp: Any) -> Any | None:
    """Return the value type if ``tp`` declares a mapping, else None."""
    tp = unwrap_optional(tp)
    if tp in _MAPPING_ORIGINS:
        return Any
    if get_origin(tp) in _MAPPING_ORIGINS:
        args = get_args(tp)
        return args[1] if len(args) == 2 else Any
    return None


def classify(annotation: Any) -> PropertyType:
    """Describe a property from its annotation; mappings become mapped properties."""
    tp = unwrap_optional(annotation)
    value_type = mapped_value_type(tp)
    if value_type is not None:
        return PropertyType(tp, PropertyKind.MAPPED, value_type)
    return PropertyType(tp)
