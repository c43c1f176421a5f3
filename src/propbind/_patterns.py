"""LDML pattern helpers: date pattern parsing and number pattern handling.

Babel formats values from LDML patterns (``yyyy-MM-dd``, ``#,##0.00``) but
only parses dates in a few fixed orders. This module compiles a date pattern
into a regular expression built from the locale's month, weekday, period and
era names, and turns a match back into a ``datetime``.
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from babel import Locale
from babel.numbers import get_decimal_symbol, get_group_symbol

from propbind._constants import TWO_DIGIT_YEAR_SPAN
from propbind._errors import ERR_MSG_INVALID_PATTERN, InvalidPatternError

_TOKEN_RE = re.compile(r"'(?:[^']|'')*'|([A-Za-z])\1*|[^A-Za-z']+")

_NUMERIC_LETTERS = frozenset("yYuMLdHkKhmsSec")
_ZONE_LETTERS = frozenset("ZXx")
_IGNORED_LETTERS = frozenset("EecG")

_ZONE_RE = r"Z|[+-][0-9]{2}(?::?[0-9]{2})?"


@dataclass(frozen=True)
class _Field:
    letter: str
    count: int
    group: str


@dataclass(frozen=True)
class CompiledDatePattern:
    """A date pattern compiled against one locale."""

    pattern: str
    regex: re.Pattern[str]
    fields: tuple[_Field, ...]
    month_names: dict[str, int]
    pm_names: frozenset[str]

    def parse(self, text: str, *, lenient: bool = False) -> datetime:
        """Parse ``text`` into a naive or aware ``datetime``.

        Fields absent from the pattern default to 1970-01-01 00:00:00.

        Raises:
            ValueError: If the text does not match or a field is out of range.
        """
        match = self.regex.fullmatch(text.strip())
        if match is None:
            raise ValueError(f"{text!r} does not match pattern {self.pattern!r}")

        year, month, day = 1970, 1, 1
        hour = minute = second = micro = 0
        pm: bool | None = None
        clock12 = False
        tzinfo = None
        for f in self.fields:
            raw = match.group(f.group)
            if f.letter in "yYu":
                year = int(raw)
                if f.count == 2 and len(raw) == 2:
                    year = _resolve_two_digit_year(year)
            elif f.letter in "ML":
                month = int(raw) if f.count <= 2 else self.month_names[raw.casefold()]
            elif f.letter == "d":
                day = int(raw)
            elif f.letter == "H":
                hour = int(raw)
            elif f.letter == "k":
                hour = int(raw) % 24
            elif f.letter in "hK":
                hour = int(raw)
                clock12 = True
                if f.letter == "h" and hour == 12:
                    hour = 0
            elif f.letter == "m":
                minute = int(raw)
            elif f.letter == "s":
                second = int(raw)
            elif f.letter == "S":
                micro = int(raw[:6].ljust(6, "0"))
            elif f.letter == "a":
                pm = raw.casefold() in self.pm_names
            elif f.letter in _ZONE_LETTERS:
                tzinfo = _parse_zone(raw)
        if clock12 and pm:
            hour += 12

        if lenient:
            base = datetime(year + (month - 1) // 12, (month - 1) % 12 + 1, 1)
            value = base + timedelta(
                days=day - 1,
                hours=hour,
                minutes=minute,
                seconds=second,
                microseconds=micro,
            )
        else:
            value = datetime(year, month, day, hour, minute, second, micro)
        return value.replace(tzinfo=tzinfo) if tzinfo is not None else value


def _resolve_two_digit_year(year: int) -> int:
    now = datetime.now().year
    candidate = (now // 100) * 100 + year
    if candidate > now + TWO_DIGIT_YEAR_SPAN:
        candidate -= 100
    elif candidate <= now + TWO_DIGIT_YEAR_SPAN - 100:
        candidate += 100
    return candidate


def _parse_zone(raw: str) -> timezone:
    if raw in ("Z", "z"):
        return timezone.utc
    sign = -1 if raw[0] == "-" else 1
    digits = raw[1:].replace(":", "")
    hours = int(digits[:2])
    minutes = int(digits[2:4]) if len(digits) > 2 else 0
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def tokenize(pattern: str) -> list[str]:
    """Split an LDML pattern into letter runs, quoted text and literals.

    Raises:
        InvalidPatternError: If a quote is left unterminated.
    """
    tokens: list[str] = []
    pos = 0
    while pos < len(pattern):
        match = _TOKEN_RE.match(pattern, pos)
        if match is None:
            raise InvalidPatternError(
                ERR_MSG_INVALID_PATTERN,
                f"unterminated quote at offset {pos} in pattern {pattern!r}",
            )
        tokens.append(match.group(0))
        pos = match.end()
    return tokens


def _alternation(names: list[str]) -> str:
    unique = sorted({n for n in names if n}, key=len, reverse=True)
    return "|".join(re.escape(n) for n in unique)


def _literal(token: str) -> str:
    if token.startswith("'"):
        text = "'" if token == "''" else token[1:-1].replace("''", "'")
    else:
        text = token
    parts = re.split(r"(\s+)", text)
    return "".join(r"\s+" if part.isspace() else re.escape(part) for part in parts if part)


def _month_names(locale: Locale) -> dict[str, int]:
    names: dict[str, int] = {}
    for context in ("format", "stand-alone"):
        for width in ("abbreviated", "wide"):
            for number, name in locale.months.get(context, {}).get(width, {}).items():
                names.setdefault(name.casefold(), number)
    return names


def _day_names(locale: Locale) -> list[str]:
    names: list[str] = []
    for context in ("format", "stand-alone"):
        for width in ("abbreviated", "wide"):
            names.extend(locale.days.get(context, {}).get(width, {}).values())
    return names


def _period_names(locale: Locale) -> tuple[list[str], frozenset[str]]:
    periods = locale.periods
    am = [periods.get("am", "AM"), "AM"]
    pm = [periods.get("pm", "PM"), "PM"]
    return am + pm, frozenset(p.casefold() for p in pm)


def _era_names(locale: Locale) -> list[str]:
    names: list[str] = []
    for width in ("abbreviated", "wide", "narrow"):
        names.extend(locale.eras.get(width, {}).values())
    return names


@functools.lru_cache(maxsize=256)
def compile_date_pattern(pattern: str, locale: Locale) -> CompiledDatePattern:
    """Compile an LDML date pattern for parsing in ``locale``.

    Raises:
        InvalidPatternError: If the pattern is malformed or uses a letter
            that cannot be parsed back (time zone names, week numbers, ...).
    """
    tokens = tokenize(pattern)
    month_names = _month_names(locale)
    period_alternation, pm_names = _period_names(locale)

    parts: list[str] = []
    fields: list[_Field] = []
    for i, token in enumerate(tokens):
        letter = token[0]
        if not letter.isascii() or not letter.isalpha():
            parts.append(_literal(token))
            continue

        count = len(token)
        group = f"f{i}"
        is_text = letter in "EaG" or (letter in "MLec" and count >= 3)
        if not is_text and letter not in _NUMERIC_LETTERS and letter not in _ZONE_LETTERS:
            raise InvalidPatternError(
                ERR_MSG_INVALID_PATTERN,
                f"unsupported pattern letter {letter!r} in {pattern!r}",
            )

        if letter in _ZONE_LETTERS:
            body = _ZONE_RE
        elif letter in "ML" and count >= 3:
            body = _alternation(list(month_names))
        elif letter in "Eec" and is_text:
            body = _alternation(_day_names(locale))
        elif letter == "a":
            body = _alternation(period_alternation)
        elif letter == "G":
            body = _alternation(_era_names(locale))
        else:
            nxt = tokens[i + 1] if i + 1 < len(tokens) else ""
            adjacent = bool(nxt) and nxt[0] in _NUMERIC_LETTERS and not (
                nxt[0] in "ML" and len(nxt) >= 3
            )
            body = f"[0-9]{{{count}}}" if adjacent else "[0-9]+"

        parts.append(f"(?P<{group}>{body})")
        if letter not in _IGNORED_LETTERS:
            fields.append(_Field(letter, count, group))

    return CompiledDatePattern(
        pattern=pattern,
        regex=re.compile("".join(parts), re.IGNORECASE),
        fields=tuple(fields),
        month_names=month_names,
        pm_names=pm_names,
    )


def parse_datetime(
    text: str, pattern: str, locale: Locale, *, lenient: bool = False
) -> datetime:
    """Parse ``text`` with an LDML ``pattern`` in ``locale``."""
    return compile_date_pattern(pattern, locale).parse(text, lenient=lenient)


def default_datetime_pattern(locale: Locale) -> str:
    """Return the locale's short date-and-time pattern."""
    date_pattern = locale.date_formats["short"].pattern
    time_pattern = locale.time_formats["short"].pattern
    glue = str(locale.datetime_formats["short"])
    return glue.replace("{1}", date_pattern).replace("{0}", time_pattern)


# --- Number patterns ---


def _unquoted(pattern: str) -> str:
    return re.sub(r"'[^']*'", "", pattern)


def delocalize_number_pattern(pattern: str, locale: Locale) -> str:
    """Map a pattern written with the locale's symbols back to ``,`` and ``.``."""
    decimal = get_decimal_symbol(locale)
    group = get_group_symbol(locale)
    if decimal == "." and group == ",":
        return pattern
    swapped = pattern.replace(group, "\x00").replace(decimal, "\x01")
    return swapped.replace("\x00", ",").replace("\x01", ".")


def number_scale(pattern: str | None) -> Decimal:
    """Return the multiplier a pattern applies to a value (percent, per-mille)."""
    if not pattern:
        return Decimal(1)
    bare = _unquoted(pattern)
    if "%" in bare:
        return Decimal(100)
    if "‰" in bare:
        return Decimal(1000)
    return Decimal(1)


def _scale_symbols(locale: Locale) -> set[str]:
    symbols = locale.number_symbols
    # Babel 2.14+ keys the symbol tables by numbering system.
    symbols = symbols.get("latn", symbols)
    return {symbols.get("percentSign", "%"), symbols.get("perMille", "‰"), "%", "‰"}


def strip_scale_symbols(text: str, locale: Locale) -> str:
    """Remove percent and per-mille signs from a number string."""
    for symbol in _scale_symbols(locale):
        text = text.replace(symbol, "")
    return text.strip()
