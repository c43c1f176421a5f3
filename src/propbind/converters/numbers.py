"""Locale-sensitive number converters backed by Babel's CLDR data."""

from __future__ import annotations

import logging
import math
import struct
from decimal import Decimal
from typing import Any

from babel.numbers import parse_decimal, parse_pattern

from propbind._constants import FLOAT32_TOLERANCE
from propbind._errors import (
    ERR_MSG_INVALID_PATTERN,
    ERR_MSG_OUT_OF_RANGE,
    ConversionError,
    InvalidPatternError,
)
from propbind._patterns import (
    delocalize_number_pattern,
    number_scale,
    strip_scale_symbols,
)
from propbind.converters._base import LocaleConverter
from propbind.types import INTEGER_RANGES, Byte, Float32, Integer, Long, Short

logger = logging.getLogger(__name__)


class DecimalLocaleConverter(LocaleConverter):
    """Parses locale-formatted numbers into ``Decimal``.

    Grouping and decimal symbols come from the locale (``1,234.5`` in
    ``en_US``, ``1.234,5`` in ``de_DE``). A pattern containing ``%`` or
    ``‰`` divides the parsed value by 100 or 1000.
    """

    value_type: Any = Decimal

    def parse(self, value: Any, pattern: str | None) -> Any:
        return self._from_decimal(self._parse_decimal(value, pattern))

    def _from_decimal(self, number: Decimal) -> Any:
        return number

    def _parse_decimal(self, value: Any, pattern: str | None) -> Decimal:
        if isinstance(value, bool):
            raise TypeError("booleans are not numbers")
        if isinstance(value, Decimal):
            return value
        if isinstance(value, (int, float)):
            return Decimal(str(value))
        if not isinstance(value, str):
            raise TypeError(f"cannot parse {type(value).__name__} as a number")

        scale = Decimal(1)
        if pattern is not None:
            scale = number_scale(self._canonical_pattern(pattern))
        else:
            logger.debug("No pattern provided, using locale %s defaults", self.locale)

        text = value.strip()
        if scale != 1:
            text = strip_scale_symbols(text, self.locale)
        number = parse_decimal(text, locale=self.locale)
        return number / scale if scale != 1 else number

    def _canonical_pattern(self, pattern: str) -> str:
        if self.localized_pattern:
            pattern = delocalize_number_pattern(pattern, self.locale)
        try:
            parse_pattern(pattern)
        except ValueError as exc:
            raise InvalidPatternError(
                ERR_MSG_INVALID_PATTERN,
                f"invalid number pattern {pattern!r}: {exc}",
                wrapped=exc,
            ) from exc
        return pattern


class _IntegralLocaleConverter(DecimalLocaleConverter):
    """Truncates parsed numbers toward zero and enforces the type's range."""

    value_type: Any = int

    def _from_decimal(self, number: Decimal) -> Any:
        if not number.is_finite():
            raise ValueError(f"{number} is not a finite number")
        result = int(number)
        bounds = INTEGER_RANGES.get(self.value_type)
        if bounds is not None and not bounds[0] <= result <= bounds[1]:
            raise ConversionError(
                ERR_MSG_OUT_OF_RANGE,
                f"Supplied number is not of type {self.value_type.__name__}: {result}",
            )
        return result


class BigIntegerLocaleConverter(_IntegralLocaleConverter):
    value_type = int


class ByteLocaleConverter(_IntegralLocaleConverter):
    value_type = Byte


class ShortLocaleConverter(_IntegralLocaleConverter):
    value_type = Short


class IntegerLocaleConverter(_IntegralLocaleConverter):
    value_type = Integer


class LongLocaleConverter(_IntegralLocaleConverter):
    value_type = Long


class DoubleLocaleConverter(DecimalLocaleConverter):
    value_type = float

    def _from_decimal(self, number: Decimal) -> Any:
        return float(number)


class FloatLocaleConverter(DecimalLocaleConverter):
    """Parses numbers that must survive a round trip through 32-bit floats."""

    value_type = Float32

    def _from_decimal(self, number: Decimal) -> Any:
        double = float(number)
        try:
            single = struct.unpack("f", struct.pack("f", double))[0]
        except OverflowError:
            single = math.inf
        if math.isinf(single) or abs(double - single) > abs(single) * FLOAT32_TOLERANCE:
            raise ConversionError(
                ERR_MSG_OUT_OF_RANGE,
                f"Supplied number is not of type Float32: {number}",
            )
        return double
