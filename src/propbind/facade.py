"""Locale-aware property getters and setters over arbitrary object graphs."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from babel import Locale

from propbind._errors import ERR_MSG_NO_SUCH_PROPERTY, NoSuchPropertyError
from propbind.accessor import PropertyAccessor, ReflectiveAccessor
from propbind.path import PathDescriptor, PathResolver, Skip, coerce_value
from propbind.registry import ConverterRegistry

logger = logging.getLogger(__name__)

_LocaleArg = Locale | str | None


class ConversionFacade:
    """Reads properties as locale strings and sets them from locale strings.

    Each facade owns (or is handed) one :class:`ConverterRegistry`, so
    tenants that need isolated converters and settings use separate
    facades instead of sharing global state.

    Writes skip paths that cannot be resolved: ``set_property`` returns
    False and ``populate`` reports the skipped paths. Reads have no value
    to fall back on, so ``get_property`` and the other getters raise
    :class:`NoSuchPropertyError` for the same paths.

    Example:
        >>> facade = ConversionFacade(ConverterRegistry(default_locale="en_US"))
        >>> facade.set_property(invoice, "amount", "1,234.50")
        True
        >>> facade.get_property(invoice, "amount")
        '1,234.5'
    """

    def __init__(
        self,
        registry: ConverterRegistry | None = None,
        accessor: PropertyAccessor | None = None,
    ) -> None:
        self._registry = registry if registry is not None else ConverterRegistry()
        self._accessor = accessor if accessor is not None else ReflectiveAccessor()
        self._resolver = PathResolver(self._accessor)

    @property
    def registry(self) -> ConverterRegistry:
        return self._registry

    @property
    def accessor(self) -> PropertyAccessor:
        return self._accessor

    @property
    def resolver(self) -> PathResolver:
        return self._resolver

    # --- Reading ---

    def get_property(
        self,
        target: Any,
        path: str,
        pattern: str | None = None,
        *,
        locale: _LocaleArg = None,
    ) -> str | None:
        """Return the value at ``path`` formatted as a locale string.

        Args:
            target: Root object.
            path: Property path, e.g. ``"customer.address.city"``,
                ``"lines[0]"`` or ``"attributes(color)"``.
            pattern: Optional format pattern.
            locale: Locale to format in; defaults to the registry's.

        Returns:
            The formatted value, or None if the value is None.

        Raises:
            NoSuchPropertyError: If the path does not resolve.
            PropertyAccessError: If reading the property fails.
            ConversionError: If the value cannot be formatted.
        """
        resolved = self._resolver.resolve(target, path)
        if isinstance(resolved, Skip):
            raise NoSuchPropertyError(ERR_MSG_NO_SUCH_PROPERTY, resolved.reason)
        value = self._read(resolved)
        return self._registry.to_string(value, pattern, locale)

    def get_simple_property(
        self, target: Any, name: str, pattern: str | None = None, *, locale: _LocaleArg = None
    ) -> str | None:
        """Format a plain property of ``target`` itself (no nesting)."""
        value = self._accessor.get(target, name)
        return self._registry.to_string(value, pattern, locale)

    def get_indexed_property(
        self,
        target: Any,
        name: str,
        index: int,
        pattern: str | None = None,
        *,
        locale: _LocaleArg = None,
    ) -> str | None:
        """Format element ``index`` of property ``name`` of ``target``."""
        value = self._accessor.get(target, name, index=index)
        return self._registry.to_string(value, pattern, locale)

    def get_mapped_property(
        self,
        target: Any,
        name: str,
        key: str,
        pattern: str | None = None,
        *,
        locale: _LocaleArg = None,
    ) -> str | None:
        """Format the ``key`` entry of mapped property ``name`` of ``target``."""
        value = self._accessor.get(target, name, key=key)
        return self._registry.to_string(value, pattern, locale)

    def _read(self, descriptor: PathDescriptor) -> Any:
        if descriptor.index >= 0:
            return self._accessor.get(
                descriptor.target, descriptor.property_name, index=descriptor.index
            )
        if descriptor.key is not None:
            return self._accessor.get(
                descriptor.target, descriptor.property_name, key=descriptor.key
            )
        return self._accessor.get(descriptor.target, descriptor.property_name)

    # --- Writing ---

    def set_property(
        self,
        target: Any,
        path: str,
        value: Any,
        pattern: str | None = None,
        *,
        locale: _LocaleArg = None,
    ) -> bool:
        """Convert ``value`` to the declared type at ``path`` and assign it.

        Strings and sequences of strings are parsed with the converter for
        the declared type (the string converter when none is registered).
        Other values are assigned unchanged.

        Returns:
            True if the value was assigned, False if the path was skipped
            because a property along it does not exist.

        Raises:
            ConversionError: If the value cannot be parsed.
            PropertyAccessError: If the property cannot be written.
        """
        resolved = self._resolver.resolve(target, path)
        if isinstance(resolved, Skip):
            logger.debug("Skipping %r: %s", path, resolved.reason)
            return False
        declared = self._resolver.declared_type(resolved)
        if isinstance(declared, Skip):
            logger.debug("Skipping %r: %s", path, declared.reason)
            return False

        def convert(text: str | None, target_type: Any) -> Any:
            return self._registry.from_string(text, target_type, pattern, locale)

        new_value = coerce_value(declared, value, resolved.index, convert)
        self._write(resolved, new_value)
        return True

    def populate(
        self,
        target: Any,
        properties: Mapping[str, Any],
        pattern: str | None = None,
        *,
        locale: _LocaleArg = None,
    ) -> list[str]:
        """Set every ``path -> value`` pair of ``properties`` on ``target``.

        Paths that do not resolve are skipped and the batch continues.

        Returns:
            The skipped paths, in input order.

        Raises:
            ConversionError: On the first value that cannot be parsed.
        """
        skipped: list[str] = []
        for path, value in properties.items():
            if not self.set_property(target, path, value, pattern, locale=locale):
                skipped.append(path)
        return skipped

    def _write(self, descriptor: PathDescriptor, value: Any) -> None:
        if descriptor.index >= 0:
            self._accessor.set(
                descriptor.target, descriptor.property_name, value, index=descriptor.index
            )
        elif descriptor.key is not None:
            self._accessor.set(
                descriptor.target, descriptor.property_name, value, key=descriptor.key
            )
        else:
            self._accessor.set(descriptor.target, descriptor.property_name, value)
