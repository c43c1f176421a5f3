"""Locale-sensitive date, time and timestamp converters."""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Any

from babel import Locale

from propbind._patterns import default_datetime_pattern, parse_datetime
from propbind.converters._base import _MISSING, LocaleConverter

logger = logging.getLogger(__name__)


class DateTimeLocaleConverter(LocaleConverter):
    """Parses strings into ``datetime`` values with an LDML pattern.

    Month, weekday and AM/PM names are matched in the converter's locale.
    Without a pattern the locale's short date-and-time pattern is used.
    A lenient converter lets out-of-range fields roll over
    (``2024-02-30`` becomes March 1st) instead of failing.
    """

    value_type: Any = datetime

    def __init__(
        self,
        locale: Locale | str | None = None,
        pattern: str | None = None,
        *,
        localized_pattern: bool = False,
        default: Any = _MISSING,
        lenient: bool = False,
    ) -> None:
        super().__init__(
            locale, pattern, localized_pattern=localized_pattern, default=default
        )
        self._lenient = lenient

    @property
    def lenient(self) -> bool:
        return self._lenient

    def parse(self, value: Any, pattern: str | None) -> Any:
        if not isinstance(value, str):
            return self._from_temporal(value)
        if pattern is None:
            pattern = default_datetime_pattern(self.locale)
            logger.warning("Null pattern was provided, defaulting to: %s", pattern)
        parsed = parse_datetime(value, pattern, self.locale, lenient=self._lenient)
        return self._from_datetime(parsed)

    def _from_datetime(self, value: datetime) -> Any:
        return value

    def _from_temporal(self, value: Any) -> Any:
        if isinstance(value, datetime):
            return self._from_datetime(value)
        if isinstance(value, date):
            return self._from_datetime(datetime.combine(value, time()))
        raise TypeError(f"cannot convert {type(value).__name__} to {self.value_type.__name__}")


class DateLocaleConverter(DateTimeLocaleConverter):
    """Calendar dates; the time of day is discarded."""

    value_type = date

    def _from_datetime(self, value: datetime) -> Any:
        return value.date()


class TimeLocaleConverter(DateTimeLocaleConverter):
    """Times of day; the date part is discarded."""

    value_type = time

    def _from_datetime(self, value: datetime) -> Any:
        return value.timetz()

    def _from_temporal(self, value: Any) -> Any:
        if isinstance(value, time):
            return value
        return super()._from_temporal(value)


class TimestampLocaleConverter(DateTimeLocaleConverter):
    """Date and time with fractional seconds."""
