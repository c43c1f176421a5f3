"""Locale-sensitive converter family."""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from babel import Locale

from propbind._constants import DATE_PATTERN, TIME_PATTERN, TIMESTAMP_PATTERN
from propbind.converters._base import LocaleConverter
from propbind.converters.dates import (
    DateLocaleConverter,
    DateTimeLocaleConverter,
    TimeLocaleConverter,
    TimestampLocaleConverter,
)
from propbind.converters.numbers import (
    BigIntegerLocaleConverter,
    ByteLocaleConverter,
    DecimalLocaleConverter,
    DoubleLocaleConverter,
    FloatLocaleConverter,
    IntegerLocaleConverter,
    LongLocaleConverter,
    ShortLocaleConverter,
)
from propbind.converters.string import StringLocaleConverter, format_value
from propbind.types import Byte, Float32, Integer, Long, Short

__all__ = [
    "LocaleConverter",
    "BigIntegerLocaleConverter",
    "ByteLocaleConverter",
    "DateLocaleConverter",
    "DateTimeLocaleConverter",
    "DecimalLocaleConverter",
    "DoubleLocaleConverter",
    "FloatLocaleConverter",
    "IntegerLocaleConverter",
    "LongLocaleConverter",
    "ShortLocaleConverter",
    "StringLocaleConverter",
    "TimeLocaleConverter",
    "TimestampLocaleConverter",
    "build_default_converters",
    "format_value",
]

_NUMBER_CONVERTERS: dict[Any, type[LocaleConverter]] = {
    Decimal: DecimalLocaleConverter,
    int: BigIntegerLocaleConverter,
    Byte: ByteLocaleConverter,
    float: DoubleLocaleConverter,
    Float32: FloatLocaleConverter,
    Integer: IntegerLocaleConverter,
    Long: LongLocaleConverter,
    Short: ShortLocaleConverter,
    str: StringLocaleConverter,
}

# Formatting and parsing with the same canonical pattern must round-trip.
_TEMPORAL_CONVERTERS: dict[Any, tuple[type[LocaleConverter], str]] = {
    date: (DateLocaleConverter, DATE_PATTERN),
    time: (TimeLocaleConverter, TIME_PATTERN),
    datetime: (TimestampLocaleConverter, TIMESTAMP_PATTERN),
}


def build_default_converters(
    locale: Locale, *, apply_localized: bool = False
) -> dict[Any, LocaleConverter]:
    """Build one converter per built-in type for ``locale``.

    Args:
        locale: Locale the converters are bound to.
        apply_localized: Whether patterns are written with the locale's
            symbols rather than the fixed LDML ones.

    Returns:
        Mapping of declared type to converter.
    """
    converters: dict[Any, LocaleConverter] = {
        tp: cls(locale, localized_pattern=apply_localized)
        for tp, cls in _NUMBER_CONVERTERS.items()
    }
    for tp, (cls, pattern) in _TEMPORAL_CONVERTERS.items():
        converters[tp] = cls(locale, pattern, localized_pattern=apply_localized)
    return converters
