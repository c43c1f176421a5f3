"""Per-locale cache of type-to-converter mappings."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from typing import Any

from babel import Locale

from propbind._cow import CopyOnWriteMap
from propbind._locales import to_locale
from propbind._typing import array_component_type
from propbind.converters import (
    LocaleConverter,
    StringLocaleConverter,
    build_default_converters,
)

logger = logging.getLogger(__name__)

_LocaleArg = Locale | str | None


class ConverterRegistry:
    """Caches one converter map per locale.

    The default locale's map is built eagerly; maps for other locales are
    built on first lookup and kept until deregistered. Lookups read
    immutable snapshots and never take a lock once a locale's map exists.
    Registration and deregistration serialize with each other and become
    visible to readers in a single snapshot swap.

    Each registry is an independent handle: separate registries never
    share converters, defaults or settings.
    """

    def __init__(
        self,
        *,
        default_locale: _LocaleArg = None,
        apply_localized: bool = False,
    ) -> None:
        self._default_locale = to_locale(default_locale)
        self._apply_localized = apply_localized
        self._maps: CopyOnWriteMap[Locale, CopyOnWriteMap[Any, LocaleConverter]] = (
            CopyOnWriteMap()
        )
        self._write_lock = threading.Lock()
        self.deregister()

    # --- Settings ---

    @property
    def default_locale(self) -> Locale:
        return self._default_locale

    @default_locale.setter
    def default_locale(self, locale: _LocaleArg) -> None:
        """Set the default locale; None restores the process default."""
        self._default_locale = to_locale(locale)

    @property
    def apply_localized(self) -> bool:
        return self._apply_localized

    @apply_localized.setter
    def apply_localized(self, value: bool) -> None:
        """Affects converter maps built after the change."""
        self._apply_localized = value

    # --- Lookup ---

    def lookup(self, target_type: Any, locale: _LocaleArg = None) -> LocaleConverter | None:
        """Return the converter registered for ``target_type`` in ``locale``.

        Args:
            target_type: Declared type to convert to.
            locale: Locale to look in; None means the default locale.

        Returns:
            The converter, or None when nothing is registered for the type.
        """
        return self._converters(locale).get(target_type)

    def locales(self) -> list[Locale]:
        """Return the locales that currently have a converter map."""
        return list(self._maps)

    def converters(self, locale: _LocaleArg = None) -> dict[Any, LocaleConverter]:
        """Return a copy of the converter map for ``locale``."""
        return dict(self._converters(locale).snapshot())

    def _converters(self, locale: _LocaleArg) -> CopyOnWriteMap[Any, LocaleConverter]:
        resolved = self._resolve(locale)
        converters = self._maps.get(resolved)
        if converters is None:
            logger.debug("Creating converters for locale %s", resolved)
            converters = self._maps.setdefault(resolved, self._create(resolved))
        return converters

    def _resolve(self, locale: _LocaleArg) -> Locale:
        return self._default_locale if locale is None else to_locale(locale)

    def _create(self, locale: Locale) -> CopyOnWriteMap[Any, LocaleConverter]:
        converters: CopyOnWriteMap[Any, LocaleConverter] = CopyOnWriteMap()
        with converters.batch() as pending:
            pending.update(self.build_defaults(locale))
        return converters

    def build_defaults(self, locale: _LocaleArg) -> dict[Any, LocaleConverter]:
        """Build the default converter set for ``locale`` with current settings."""
        return build_default_converters(
            self._resolve(locale),
            apply_localized=self._apply_localized,
        )

    # --- Registration ---

    def register(
        self, converter: LocaleConverter, target_type: Any, locale: _LocaleArg = None
    ) -> None:
        """Register ``converter`` for ``target_type`` in ``locale``, replacing any existing one."""
        with self._write_lock:
            self._converters(locale).put(target_type, converter)

    def deregister(self, target_type: Any = None, locale: _LocaleArg = None) -> None:
        """Remove converters.

        - ``deregister()`` resets the registry to the default locale's
          freshly built default set.
        - ``deregister(locale=L)`` drops every converter of ``L``.
        - ``deregister(T, L)`` drops the converter for ``T`` in ``L``
          (``L`` defaults to the default locale).
        """
        if target_type is not None:
            resolved = self._resolve(locale)
            with self._write_lock:
                converters = self._maps.get(resolved)
                if converters is not None:
                    converters.remove(target_type)
            return
        if locale is not None:
            resolved = to_locale(locale)
            with self._write_lock:
                self._maps.remove(resolved)
            return

        default_locale = self._default_locale
        logger.debug("Resetting converters to defaults for %s", default_locale)
        fresh = self._create(default_locale)
        with self._write_lock:
            self._maps.replace({default_locale: fresh})

    # --- Conversion ---

    def to_string(
        self, value: Any, pattern: str | None = None, locale: _LocaleArg = None
    ) -> str | None:
        """Format ``value`` with the string converter of ``locale``.

        Raises:
            ConversionError: If the value cannot be formatted.
        """
        converter = self.lookup(str, locale)
        if converter is None:
            converter = StringLocaleConverter(
                self._resolve(locale), localized_pattern=self._apply_localized
            )
        return converter.convert(value, pattern, str)

    def from_string(
        self,
        value: str | None,
        target_type: Any,
        pattern: str | None = None,
        locale: _LocaleArg = None,
    ) -> Any:
        """Convert ``value`` to ``target_type``.

        Falls back to the string converter when nothing is registered for
        the type.

        Raises:
            ConversionError: If the value cannot be converted.
        """
        converter = self.lookup(target_type, locale) or self.lookup(str, locale)
        if converter is None:
            return value
        return converter.convert(value, pattern, target_type)

    def from_strings(
        self,
        values: Iterable[str | None],
        target_type: Any,
        pattern: str | None = None,
        locale: _LocaleArg = None,
    ) -> list[Any]:
        """Convert each value to ``target_type`` (or its component type for arrays)."""
        component = array_component_type(target_type)
        element_type = target_type if component is None else component
        return [self.from_string(v, element_type, pattern, locale) for v in values]
