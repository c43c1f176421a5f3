"""Lark grammar for nested property paths such as ``order.lines[2].attrs(color)``."""

from __future__ import annotations

import functools
from dataclasses import dataclass

from lark import Lark, Transformer
from lark.exceptions import LarkError

from propbind._errors import ERR_MSG_INVALID_PATH, InvalidPropertyPathError

_GRAMMAR = r"""
    path: segment ("." segment)*
    segment: NAME (index | key)*
    index: "[" INDEX "]"
    key: "(" KEY? ")"

    NAME: /[^.\[\]()]+/
    INDEX: /[0-9]+/
    KEY: /[^()]+/
"""


@dataclass(frozen=True)
class Selector:
    """One ``[n]`` or ``(k)`` applied to a segment's value."""

    index: int = -1
    key: str | None = None


@dataclass(frozen=True)
class PathSegment:
    name: str
    selectors: tuple[Selector, ...] = ()


class _PathTransformer(Transformer):
    def path(self, children: list[PathSegment]) -> tuple[PathSegment, ...]:
        return tuple(children)

    def segment(self, children: list) -> PathSegment:
        name, *selectors = children
        return PathSegment(str(name), tuple(selectors))

    def index(self, children: list) -> Selector:
        return Selector(index=int(children[0]))

    def key(self, children: list) -> Selector:
        return Selector(key=str(children[0]) if children else "")


_parser = Lark(_GRAMMAR, start="path", parser="lalr", transformer=_PathTransformer())


@functools.lru_cache(maxsize=1024)
def parse_path(path: str) -> tuple[PathSegment, ...]:
    """Parse a nested property path into segments.

    Raises:
        InvalidPropertyPathError: If the path is empty or malformed.
    """
    try:
        return _parser.parse(path)
    except LarkError as exc:
        raise InvalidPropertyPathError(
            ERR_MSG_INVALID_PATH,
            f"cannot parse property path {path!r}: {exc}",
            wrapped=exc,
        ) from exc
