"""Sized numeric types for property annotations.

Python has a single unbounded ``int`` and a single double-precision
``float``. Properties that must hold fixed-width values annotate them with
these types; the registry keys its range-checked converters on them.

    >>> from dataclasses import dataclass
    >>> from propbind.types import Short
    >>> @dataclass
    ... class Line:
    ...     quantity: Short = 0
"""

from __future__ import annotations

from typing import Any, NewType, get_origin

__all__ = [
    "Byte",
    "Short",
    "Integer",
    "Long",
    "Float32",
    "INTEGER_RANGES",
    "runtime_class",
]

Byte = NewType("Byte", int)
Short = NewType("Short", int)
Integer = NewType("Integer", int)
Long = NewType("Long", int)
Float32 = NewType("Float32", float)

INTEGER_RANGES: dict[object, tuple[int, int]] = {
    Byte: (-(2**7), 2**7 - 1),
    Short: (-(2**15), 2**15 - 1),
    Integer: (-(2**31), 2**31 - 1),
    Long: (-(2**63), 2**63 - 1),
}
"""Inclusive bounds of each sized integer type."""


def runtime_class(tp: object) -> type | None:
    """Return the class a value of ``tp`` is an instance of, if any.

    NewTypes are unwrapped to their supertype; generic aliases and typing
    constructs yield ``None``.
    """
    while hasattr(tp, "__supertype__"):
        tp = tp.__supertype__
    if tp is Any:
        return None
    origin = get_origin(tp)
    if origin is not None:
        return origin if isinstance(origin, type) else None
    return tp if isinstance(tp, type) else None
