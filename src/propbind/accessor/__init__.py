"""Property accessors: the contract and the default reflective implementation."""

from propbind._typing import PropertyKind, PropertyType
from propbind.accessor._base import PropertyAccessor
from propbind.accessor._grammar import PathSegment, Selector, parse_path
from propbind.accessor.reflective import ReflectiveAccessor

__all__ = [
    "PathSegment",
    "PropertyAccessor",
    "PropertyKind",
    "PropertyType",
    "ReflectiveAccessor",
    "Selector",
    "parse_path",
]
