"""Abstract base class for locale-sensitive converters."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from babel import Locale

from propbind._errors import ERR_MSG_CONVERSION_FAILED, ConversionError
from propbind._locales import to_locale

logger = logging.getLogger(__name__)

_MISSING: Any = object()


class LocaleConverter(ABC):
    """Converts values to and from their string form for one locale.

    A converter is bound at construction to a locale, an optional default
    pattern and a fallback policy. When ``default`` is given, absent values
    and failed conversions return it instead of raising.

    Subclasses implement :meth:`parse` (string to typed value) and may
    override :meth:`format` (typed value to string).
    """

    def __init__(
        self,
        locale: Locale | str | None = None,
        pattern: str | None = None,
        *,
        localized_pattern: bool = False,
        default: Any = _MISSING,
    ) -> None:
        self._locale = to_locale(locale)
        self._pattern = pattern
        self._localized_pattern = localized_pattern
        self._use_default = default is not _MISSING
        self._default = None if default is _MISSING else default

    @property
    def locale(self) -> Locale:
        return self._locale

    @property
    def pattern(self) -> str | None:
        return self._pattern

    @property
    def localized_pattern(self) -> bool:
        return self._localized_pattern

    @property
    def use_default(self) -> bool:
        return self._use_default

    @property
    def default_value(self) -> Any:
        return self._default

    @abstractmethod
    def parse(self, value: Any, pattern: str | None) -> Any:
        """Convert ``value`` using ``pattern``; raise on failure."""

    def convert(
        self, value: Any, pattern: str | None = None, target_type: Any = None
    ) -> Any:
        """Convert ``value``, applying the default-value fallback policy.

        Args:
            value: The value to convert, usually a string.
            pattern: Pattern overriding the converter's default pattern.
            target_type: The type the caller expects. Informational; the
                converter's own type decides the result.

        Returns:
            The converted value, the configured default, or None for an
            absent value without a default.

        Raises:
            ConversionError: If conversion fails and no default is configured.
        """
        if value is None:
            if self._use_default:
                return self._default
            logger.debug("Null value specified for conversion, returning None")
            return None

        effective = pattern if pattern is not None else self._pattern
        try:
            return self.parse(value, effective)
        except (ValueError, TypeError, ArithmeticError, ConversionError) as exc:
            if self._use_default:
                return self._default
            if isinstance(exc, ConversionError):
                raise
            raise ConversionError(
                ERR_MSG_CONVERSION_FAILED,
                f"{type(self).__name__} could not convert {value!r} "
                f"(pattern={effective!r}, locale={self._locale}): {exc}",
                wrapped=exc,
            ) from exc

    def format(self, value: Any, pattern: str | None = None) -> str | None:
        """Return the locale-aware string form of ``value``.

        Raises:
            ConversionError: If the value cannot be formatted with the pattern.
        """
        from propbind.converters.string import format_value

        if value is None:
            return None
        effective = pattern if pattern is not None else self._pattern
        try:
            return format_value(
                value, self._locale, effective, localized=self._localized_pattern
            )
        except (ValueError, TypeError, ArithmeticError) as exc:
            raise ConversionError(
                ERR_MSG_CONVERSION_FAILED,
                f"{type(self).__name__} could not format {value!r} "
                f"(pattern={effective!r}, locale={self._locale}): {exc}",
                wrapped=exc,
            ) from exc

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(locale={str(self._locale)!r}, "
            f"pattern={self._pattern!r})"
        )
