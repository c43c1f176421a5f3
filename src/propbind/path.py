"""Property path resolution and value coercion."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from propbind._constants import (
    INDEXED_DELIM,
    INDEXED_DELIM2,
    MAPPED_DELIM,
    MAPPED_DELIM2,
    NESTED_DELIM,
    NO_INDEX,
)
from propbind._errors import (
    ERR_MSG_NULL_NESTED,
    NoSuchPropertyError,
    NullNestedPropertyError,
)
from propbind._typing import (
    PropertyType,
    array_component_type,
    array_factory,
    classify,
)
from propbind.accessor import PropertyAccessor, ReflectiveAccessor
from propbind.dynamic import DynamicObject

logger = logging.getLogger(__name__)

_INDEX_RE = re.compile(r"[+-]?[0-9]+")

ConvertFunc = Callable[[Any, Any], Any]
"""Callback converting one string (or None) to a declared type."""


@dataclass(frozen=True)
class PathDescriptor:
    """Result of parsing one property path against a root object."""

    target: Any
    segment: str
    property_name: str
    index: int = NO_INDEX
    key: str | None = None

    @property
    def is_indexed(self) -> bool:
        return self.index >= 0

    @property
    def is_mapped(self) -> bool:
        return self.index < 0 and self.key is not None


@dataclass(frozen=True)
class Skip:
    """A path that cannot be bound; callers move on to the next one."""

    path: str
    reason: str


def parse_segment(segment: str) -> tuple[str, int, str | None]:
    """Split a simple segment into ``(name, index, key)``.

    ``items[2]`` gives ``("items", 2, None)``; ``attrs(color)`` gives
    ``("attrs", -1, "color")``. Non-numeric or negative subscripts leave the
    index at -1 and an unterminated key leaves the key at None; the markers
    are stripped from the name either way.
    """
    name = segment
    index = NO_INDEX
    key = None

    i = name.find(INDEXED_DELIM)
    if i >= 0:
        k = name.find(INDEXED_DELIM2, i + 1)
        if k >= 0:
            subscript = name[i + 1 : k].strip()
            if _INDEX_RE.fullmatch(subscript):
                index = max(int(subscript), NO_INDEX)
        name = name[:i]

    j = name.find(MAPPED_DELIM)
    if j >= 0:
        k = name.find(MAPPED_DELIM2, j + 1)
        if k >= 0:
            key = name[j + 1 : k]
        name = name[:j]

    return name, index, key


class PathResolver:
    """Turns property paths into :class:`PathDescriptor` values.

    Only the prefix before the last ``.`` is handed to the accessor for
    navigation; the final segment is parsed here, leniently.
    """

    def __init__(self, accessor: PropertyAccessor | None = None) -> None:
        self._accessor = accessor if accessor is not None else ReflectiveAccessor()

    @property
    def accessor(self) -> PropertyAccessor:
        return self._accessor

    def resolve(self, root: Any, path: str) -> PathDescriptor | Skip:
        """Resolve ``path`` against ``root``.

        Returns:
            The descriptor, or :class:`Skip` when an intermediate property
            does not exist.

        Raises:
            NullNestedPropertyError: If the nested prefix resolves to None.
            PropertyAccessError: If reading an intermediate property fails.
        """
        target = root
        segment = path
        delim = path.rfind(NESTED_DELIM)
        if delim >= 0:
            prefix = path[:delim]
            try:
                target = self._accessor.resolve_nested(root, prefix)
            except NoSuchPropertyError as exc:
                logger.debug("Skipping %r: %s", path, exc.internal())
                return Skip(path, exc.internal())
            if target is None:
                raise NullNestedPropertyError(
                    ERR_MSG_NULL_NESTED, f"Null property value for {prefix!r}"
                )
            segment = path[delim + 1 :]

        name, index, key = parse_segment(segment)
        return PathDescriptor(target, segment, name, index, key)

    def declared_type(self, descriptor: PathDescriptor) -> PropertyType | Skip:
        """Discover the declared type of the property a descriptor addresses.

        Dynamic objects are asked for their catalog entry; anything else is
        introspected through the accessor.
        """
        target = descriptor.target
        name = descriptor.property_name
        if isinstance(target, DynamicObject):
            tp = target.get_dynamic_schema().property_type(name)
            if tp is None:
                return Skip(descriptor.segment, f"no dynamic property {name!r}")
            return classify(tp)

        try:
            declared = self._accessor.declared_type(target, name)
        except NoSuchPropertyError as exc:
            return Skip(descriptor.segment, exc.internal())
        if declared is None:
            return Skip(
                descriptor.segment,
                f"no property {name!r} on {type(target).__name__}",
            )
        return declared


def _is_string_array(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and all(
        isinstance(v, str) or v is None for v in value
    )


def coerce_value(
    declared: PropertyType | Any,
    value: Any,
    index: int,
    convert: ConvertFunc,
) -> Any:
    """Convert a raw string (or sequence of strings) for assignment.

    Array types without an index receive every string converted to the
    component type; array types with an index, and scalar types, receive
    the (first) string converted to the component or scalar type. Values
    that are neither strings nor string sequences pass through unchanged.

    Args:
        declared: Declared property type, or a bare type.
        value: Raw value to assign.
        index: Subscript of the path, -1 when absent.
        convert: ``convert(text, type)`` for a single string.
    """
    tp = declared.resolved_type if isinstance(declared, PropertyType) else declared

    is_text = isinstance(value, str)
    is_text_array = not is_text and _is_string_array(value)
    if not is_text and not is_text_array:
        return value

    component = array_component_type(tp)
    if component is not None and index < 0:
        values = [value] if is_text else value
        return array_factory(tp)(convert(v, component) for v in values)

    scalar_type = component if component is not None else tp
    if is_text:
        return convert(value, scalar_type)
    return convert(value[0] if value else None, scalar_type)
