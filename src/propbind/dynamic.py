"""Objects that publish their own property catalog instead of relying on annotations."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from propbind._errors import (
    ERR_MSG_NO_SUCH_PROPERTY,
    ERR_MSG_NOT_ASSIGNABLE,
    ERR_MSG_PROPERTY_ACCESS,
    ConversionError,
    NoSuchPropertyError,
    PropertyAccessError,
)
from propbind._typing import (
    array_component_type,
    array_factory,
    mapped_value_type,
    unwrap_optional,
)
from propbind.types import runtime_class


@runtime_checkable
class SchemaCatalog(Protocol):
    """Minimal catalog protocol: declared type by property name."""

    def property_type(self, name: str) -> Any | None: ...


@runtime_checkable
class DynamicObject(Protocol):
    """An object whose properties are described by its own catalog."""

    def get_dynamic_schema(self) -> SchemaCatalog: ...

    def get(self, name: str, index: int = -1, key: str | None = None) -> Any: ...

    def set(
        self, name: str, value: Any, index: int = -1, key: str | None = None
    ) -> None: ...


@dataclass(frozen=True)
class DynamicProperty:
    """Schema for a single dynamic property."""

    name: str
    type: Any = str

    @property
    def is_indexed(self) -> bool:
        return array_component_type(self.type) is not None

    @property
    def is_mapped(self) -> bool:
        return mapped_value_type(self.type) is not None


class DynamicSchema:
    """Named property catalog with O(1) lookup."""

    def __init__(self, name: str, properties: Iterable[DynamicProperty]) -> None:
        self.name = name
        self._properties = list(properties)
        self._index: dict[str, DynamicProperty] = {p.name: p for p in self._properties}

    @property
    def properties(self) -> list[DynamicProperty]:
        return list(self._properties)

    def get_property(self, name: str) -> DynamicProperty | None:
        return self._index.get(name)

    def property_type(self, name: str) -> Any | None:
        prop = self._index.get(name)
        return None if prop is None else prop.type

    def new_record(self, **values: Any) -> DynamicRecord:
        return DynamicRecord(self, **values)

    def __len__(self) -> int:
        return len(self._properties)

    def __repr__(self) -> str:
        return f"DynamicSchema({self.name!r}, {[p.name for p in self._properties]!r})"


def _check_assignable(prop: DynamicProperty, tp: Any, value: Any) -> None:
    if value is None:
        return
    cls = runtime_class(unwrap_optional(tp))
    if cls is None or cls is object:
        return
    # ints are acceptable where floats are declared, as in arithmetic promotion
    if cls is float and isinstance(value, int) and not isinstance(value, bool):
        return
    if not isinstance(value, cls):
        raise ConversionError(
            ERR_MSG_NOT_ASSIGNABLE,
            f"cannot assign value of type {type(value).__name__} "
            f"to property {prop.name!r} of type {getattr(tp, '__name__', tp)}",
        )


class DynamicRecord:
    """A record holding values for the properties of a :class:`DynamicSchema`.

    Array and mapping properties are created empty on first access.
    Assignments are checked against the declared type.
    """

    def __init__(self, schema: DynamicSchema, **values: Any) -> None:
        self._schema = schema
        self._values: dict[str, Any] = {}
        for name, value in values.items():
            self.set(name, value)

    def get_dynamic_schema(self) -> DynamicSchema:
        return self._schema

    def _property(self, name: str) -> DynamicProperty:
        prop = self._schema.get_property(name)
        if prop is None:
            raise NoSuchPropertyError(
                ERR_MSG_NO_SUCH_PROPERTY,
                f"no property {name!r} in dynamic schema {self._schema.name!r}",
            )
        return prop

    def _container(self, prop: DynamicProperty) -> Any:
        value = self._values.get(prop.name)
        if value is None:
            if prop.is_mapped:
                value = self._values[prop.name] = {}
            elif prop.is_indexed:
                value = self._values[prop.name] = array_factory(prop.type)()
        return value

    def get(self, name: str, index: int = -1, key: str | None = None) -> Any:
        prop = self._property(name)
        if index < 0 and key is None:
            if prop.is_mapped or prop.is_indexed:
                return self._container(prop)
            return self._values.get(name)
        container = self._container(prop)
        try:
            if index >= 0:
                return container[index]
            return container.get(key)
        except (IndexError, TypeError, AttributeError) as exc:
            raise PropertyAccessError(
                ERR_MSG_PROPERTY_ACCESS,
                f"no value for {name!r} at index={index} key={key!r}",
                wrapped=exc,
            ) from exc

    def set(
        self, name: str, value: Any, index: int = -1, key: str | None = None
    ) -> None:
        prop = self._property(name)
        if index < 0 and key is None:
            _check_assignable(prop, prop.type, value)
            self._values[name] = value
            return

        element_type = (
            array_component_type(prop.type) if index >= 0 else mapped_value_type(prop.type)
        )
        if element_type is not None:
            _check_assignable(prop, element_type, value)
        container = self._container(prop)
        try:
            if index >= 0:
                container[index] = value
            else:
                container[key] = value
        except (IndexError, TypeError) as exc:
            raise PropertyAccessError(
                ERR_MSG_PROPERTY_ACCESS,
                f"cannot set {name!r} at index={index} key={key!r}",
                wrapped=exc,
            ) from exc

    def contains(self, name: str, key: str) -> bool:
        """Whether mapped property ``name`` has a value for ``key``."""
        container = self._container(self._property(name))
        return container is not None and key in container

    def remove(self, name: str, key: str) -> None:
        """Remove ``key`` from mapped property ``name``."""
        container = self._container(self._property(name))
        if container is not None:
            container.pop(key, None)

    def __repr__(self) -> str:
        return f"DynamicRecord({self._schema.name!r}, {self._values!r})"
