"""Locale normalization on top of Babel."""

from __future__ import annotations

from babel import Locale, UnknownLocaleError, default_locale

from propbind._constants import FALLBACK_LOCALE


def process_default_locale() -> Locale:
    """Return the process default locale, falling back to ``en_US``."""
    identifier = default_locale() or FALLBACK_LOCALE
    try:
        return Locale.parse(identifier)
    except (UnknownLocaleError, ValueError):
        return Locale.parse(FALLBACK_LOCALE)


def to_locale(locale: Locale | str | None) -> Locale:
    """Coerce a locale identifier (``en_US`` or ``en-US``) to a Babel Locale.

    ``None`` yields the process default locale.

    Raises:
        ValueError: If the identifier is malformed.
        babel.UnknownLocaleError: If no CLDR data exists for it.
    """
    if locale is None:
        return process_default_locale()
    if isinstance(locale, Locale):
        return locale
    return Locale.parse(locale.replace("-", "_"))
