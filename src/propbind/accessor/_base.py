"""Contract between the path resolver and the object graph it navigates."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from propbind._typing import PropertyType


@runtime_checkable
class PropertyAccessor(Protocol):
    """Reads, writes and describes properties of arbitrary objects.

    Implementations raise :class:`~propbind.NoSuchPropertyError` when a
    property does not exist and :class:`~propbind.PropertyAccessError` when
    an existing property cannot be read or written.
    """

    def resolve_nested(self, root: Any, path: str) -> Any:
        """Return the object addressed by a (possibly nested) path."""
        ...

    def declared_type(self, target: Any, name: str) -> PropertyType | None:
        """Return the declared type of property ``name``, or None if unknown."""
        ...

    def get(self, target: Any, name: str, index: int = -1, key: str | None = None) -> Any:
        """Read a plain, indexed (``index >= 0``) or mapped (``key``) value."""
        ...

    def set(
        self,
        target: Any,
        name: str,
        value: Any,
        index: int = -1,
        key: str | None = None,
    ) -> None:
        """Write a value; ``index >= 0`` wins over ``key``, else a plain write."""
        ...
