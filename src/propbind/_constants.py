"""Delimiters, canonical patterns and defaults for property binding."""

NESTED_DELIM = "."
"""Separates the segments of a nested property path."""

INDEXED_DELIM = "["
INDEXED_DELIM2 = "]"
"""Brackets around the subscript of an indexed property."""

MAPPED_DELIM = "("
MAPPED_DELIM2 = ")"
"""Parentheses around the key of a mapped property."""

NO_INDEX = -1
"""Index value meaning the path carries no subscript."""

FALLBACK_LOCALE = "en_US"
"""Locale used when the process default locale cannot be determined."""

DATE_PATTERN = "yyyy-MM-dd"
"""Canonical pattern of ``datetime.date`` values (matches ``date.isoformat()``)."""

TIME_PATTERN = "HH:mm:ss"
"""Canonical pattern of ``datetime.time`` values without fractional seconds."""

TIMESTAMP_PATTERN = "yyyy-MM-dd HH:mm:ss.S"
"""Canonical pattern of ``datetime.datetime`` timestamp values."""

FLOAT32_TOLERANCE = 0.00001
"""Relative error above which a number is rejected as not representable in 32 bits."""

TWO_DIGIT_YEAR_SPAN = 20
"""Two-digit years resolve to within this many years after the current year."""
