"""propbind - Locale-aware property binding for Python object graphs."""

from __future__ import annotations

__version__ = "0.1.0"

from typing import Any

from babel import Locale

from propbind._errors import (
    ConversionError,
    InvalidPatternError,
    InvalidPropertyPathError,
    NoSuchPropertyError,
    NullNestedPropertyError,
    PropertyAccessError,
    PropertyBindingError,
)
from propbind.accessor import PropertyAccessor, ReflectiveAccessor
from propbind.converters import LocaleConverter
from propbind.dynamic import DynamicObject, DynamicProperty, DynamicRecord, DynamicSchema
from propbind.facade import ConversionFacade
from propbind.path import PathDescriptor, PathResolver, Skip
from propbind.registry import ConverterRegistry

__all__ = [
    "get_property",
    "set_property",
    "ConversionFacade",
    "ConverterRegistry",
    "LocaleConverter",
    "PathDescriptor",
    "PathResolver",
    "Skip",
    "PropertyAccessor",
    "ReflectiveAccessor",
    "DynamicObject",
    "DynamicProperty",
    "DynamicRecord",
    "DynamicSchema",
    "PropertyBindingError",
    "ConversionError",
    "InvalidPatternError",
    "NoSuchPropertyError",
    "InvalidPropertyPathError",
    "PropertyAccessError",
    "NullNestedPropertyError",
]


def get_property(
    target: Any,
    path: str,
    pattern: str | None = None,
    *,
    locale: Locale | str | None = None,
    registry: ConverterRegistry | None = None,
    accessor: PropertyAccessor | None = None,
) -> str | None:
    """Read the property at ``path`` of ``target`` as a locale string.

    Args:
        target: Root object.
        path: Property path, e.g. ``"order.lines[0].amount"``.
        pattern: Optional format pattern for the value.
        locale: Locale to format in. Defaults to the registry's default.
        registry: Converter registry to use. A fresh one is created if omitted.
        accessor: Property accessor to use. Defaults to reflective access.

    Returns:
        The formatted value, or None if the property value is None.

    Raises:
        NoSuchPropertyError: If the path does not resolve.
        ConversionError: If the value cannot be formatted.
    """
    facade = ConversionFacade(registry, accessor)
    return facade.get_property(target, path, pattern, locale=locale)


def set_property(
    target: Any,
    path: str,
    value: Any,
    pattern: str | None = None,
    *,
    locale: Locale | str | None = None,
    registry: ConverterRegistry | None = None,
    accessor: PropertyAccessor | None = None,
) -> bool:
    """Parse ``value`` into the declared type at ``path`` and assign it.

    Returns:
        True if assigned, False if the path does not resolve.

    Raises:
        ConversionError: If the value cannot be parsed.
        PropertyAccessError: If the property cannot be written.
    """
    facade = ConversionFacade(registry, accessor)
    return facade.set_property(target, path, value, pattern, locale=locale)
