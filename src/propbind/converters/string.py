"""String converter: formats typed values for a locale."""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from babel import Locale
from babel.dates import format_date, format_datetime, format_time
from babel.numbers import format_decimal

from propbind._constants import DATE_PATTERN, TIME_PATTERN, TIMESTAMP_PATTERN
from propbind._patterns import delocalize_number_pattern, tokenize
from propbind.converters._base import LocaleConverter


def _fraction_as_text(pattern: str, value: datetime | time) -> str:
    """Replace ``S`` runs with the quoted fraction digits of ``value``.

    Babel rounds the fraction to the run length, so ``S`` turns .96 into "10".
    A single ``S`` writes every significant digit; longer runs truncate.
    """
    tokens = tokenize(pattern)
    if not any(token[0] == "S" for token in tokens):
        return pattern
    digits = f"{value.microsecond:06d}"
    for i, token in enumerate(tokens):
        if token[0] != "S":
            continue
        if len(token) == 1:
            fraction = digits.rstrip("0") or "0"
        else:
            fraction = digits[: len(token)].ljust(len(token), "0")
        tokens[i] = f"'{fraction}'"
    return "".join(tokens)


def format_value(
    value: Any, locale: Locale, pattern: str | None = None, *, localized: bool = False
) -> str:
    """Format ``value`` as a string in ``locale``.

    Numbers use the pattern or the locale's decimal format. Dates, times and
    timestamps use the pattern or their canonical pattern, so the result
    parses back with the default converters. Other values use ``str``.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, (Decimal, int, float)) and not isinstance(value, bool):
        if pattern is not None and localized:
            pattern = delocalize_number_pattern(pattern, locale)
        return format_decimal(value, format=pattern, locale=locale)
    if isinstance(value, datetime):
        pattern = _fraction_as_text(pattern or TIMESTAMP_PATTERN, value)
        return format_datetime(value, pattern, locale=locale)
    if isinstance(value, date):
        return format_date(value, pattern or DATE_PATTERN, locale=locale)
    if isinstance(value, time):
        pattern = _fraction_as_text(pattern or TIME_PATTERN, value)
        return format_time(value, pattern, locale=locale)
    return str(value)


class StringLocaleConverter(LocaleConverter):
    """Converts any value to its locale-aware string form."""

    value_type: Any = str

    def parse(self, value: Any, pattern: str | None) -> Any:
        return format_value(value, self.locale, pattern, localized=self.localized_pattern)
