"""Default accessor: annotations and attributes of plain Python objects."""

from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Mapping, MutableMapping
from typing import Any, ClassVar, get_origin, get_type_hints

from propbind._errors import (
    ERR_MSG_NO_SUCH_PROPERTY,
    ERR_MSG_NULL_NESTED,
    ERR_MSG_PROPERTY_ACCESS,
    NoSuchPropertyError,
    NullNestedPropertyError,
    PropertyAccessError,
)
from propbind._typing import PropertyType, classify
from propbind.accessor._grammar import Selector, parse_path
from propbind.dynamic import DynamicObject

logger = logging.getLogger(__name__)

_MISSING = object()


@functools.lru_cache(maxsize=512)
def _class_hints(cls: type) -> dict[str, Any]:
    try:
        hints = get_type_hints(cls)
    except (NameError, TypeError) as exc:
        logger.debug("Cannot evaluate annotations of %s: %s", cls.__qualname__, exc)
        return {}
    return {
        name: hint
        for name, hint in hints.items()
        if not name.startswith("_") and get_origin(hint) is not ClassVar
    }


def _return_hint(func: Any) -> Any:
    try:
        return get_type_hints(func).get("return")
    except (NameError, TypeError) as exc:
        logger.debug("Cannot evaluate return annotation of %r: %s", func, exc)
        return None


def _no_such_property(target: Any, name: str) -> NoSuchPropertyError:
    return NoSuchPropertyError(
        ERR_MSG_NO_SUCH_PROPERTY,
        f"unknown property {name!r} on {type(target).__name__}",
    )


class ReflectiveAccessor:
    """Accesses properties through attributes, annotations and mappings.

    - Declared types come from the class annotations (dataclass fields,
      class-level annotations, property return annotations). ``X | None``
      is unwrapped; ``dict[K, V]`` is reported as a mapped property of
      ``V``. Unannotated attributes report the type of their current value.
    - Names starting with an underscore and bound methods are not properties.
    - Mappings expose their keys as properties.
    - :class:`~propbind.dynamic.DynamicObject` targets delegate to their
      own ``get``/``set`` and schema catalog.
    """

    # --- Navigation ---

    def resolve_nested(self, root: Any, path: str) -> Any:
        """Walk ``path`` (``a.b[2].c(k)``) from ``root`` and return the value.

        Raises:
            InvalidPropertyPathError: If the path is malformed.
            NoSuchPropertyError: If a segment names an unknown property.
            NullNestedPropertyError: If an intermediate value is None.
        """
        value = root
        walked: list[str] = []
        for segment in parse_path(path):
            if value is None:
                raise NullNestedPropertyError(
                    ERR_MSG_NULL_NESTED,
                    f"Null property value for {'.'.join(walked)!r}",
                )
            value = self._read(value, segment.name)
            walked.append(segment.name)
            for selector in segment.selectors:
                if value is None:
                    raise NullNestedPropertyError(
                        ERR_MSG_NULL_NESTED,
                        f"Null property value for {'.'.join(walked)!r}",
                    )
                value = self._select(value, segment.name, selector)
        return value

    # --- Introspection ---

    def declared_type(self, target: Any, name: str) -> PropertyType | None:
        if isinstance(target, DynamicObject):
            tp = target.get_dynamic_schema().property_type(name)
            return None if tp is None else classify(tp)
        if not name or name.startswith("_"):
            return None

        hints = _class_hints(type(target))
        if name in hints:
            return classify(hints[name])
        static = inspect.getattr_static(type(target), name, _MISSING)
        if isinstance(static, property) and static.fget is not None:
            hint = _return_hint(static.fget)
            if hint is not None:
                return classify(hint)

        if isinstance(target, Mapping):
            value = target.get(name)
        else:
            try:
                value = getattr(target, name)
            except AttributeError:
                return None
        if value is None or inspect.ismethod(value):
            return None
        return classify(type(value))

    # --- Reading and writing ---

    def get(self, target: Any, name: str, index: int = -1, key: str | None = None) -> Any:
        if isinstance(target, DynamicObject):
            return target.get(name, index, key)
        value = self._read(target, name)
        if index >= 0:
            return self._select(value, name, Selector(index=index))
        if key is not None:
            return self._select(value, name, Selector(key=key))
        return value

    def set(
        self,
        target: Any,
        name: str,
        value: Any,
        index: int = -1,
        key: str | None = None,
    ) -> None:
        if isinstance(target, DynamicObject):
            target.set(name, value, index, key)
            return

        if index >= 0 or key is not None:
            container = self._read(target, name)
            if container is None:
                raise PropertyAccessError(
                    ERR_MSG_PROPERTY_ACCESS,
                    f"cannot set {name!r} at index={index} key={key!r}: value is None",
                )
            try:
                if index >= 0:
                    container[index] = value
                else:
                    container[key] = value
            except (IndexError, KeyError, TypeError) as exc:
                raise PropertyAccessError(
                    ERR_MSG_PROPERTY_ACCESS,
                    f"cannot set {name!r} at index={index} key={key!r}: {exc}",
                    wrapped=exc,
                ) from exc
            return

        if isinstance(target, MutableMapping):
            target[name] = value
            return
        if not self._exists(target, name):
            raise _no_such_property(target, name)
        try:
            setattr(target, name, value)
        except AttributeError as exc:
            raise PropertyAccessError(
                ERR_MSG_PROPERTY_ACCESS,
                f"property {name!r} of {type(target).__name__} is not writable: {exc}",
                wrapped=exc,
            ) from exc

    # --- Helpers ---

    def _exists(self, target: Any, name: str) -> bool:
        if not name or name.startswith("_"):
            return False
        if name in _class_hints(type(target)):
            return True
        return inspect.getattr_static(target, name, _MISSING) is not _MISSING

    def _read(self, target: Any, name: str) -> Any:
        if isinstance(target, DynamicObject):
            return target.get(name)
        if isinstance(target, Mapping):
            if name not in target:
                raise _no_such_property(target, name)
            return target[name]
        if not name or name.startswith("_"):
            raise _no_such_property(target, name)
        try:
            value = getattr(target, name)
        except AttributeError as exc:
            if inspect.getattr_static(target, name, _MISSING) is _MISSING:
                raise _no_such_property(target, name) from exc
            raise PropertyAccessError(
                ERR_MSG_PROPERTY_ACCESS,
                f"reading {name!r} of {type(target).__name__} failed: {exc}",
                wrapped=exc,
            ) from exc
        if inspect.ismethod(value) and value.__self__ is target:
            raise _no_such_property(target, name)
        return value

    def _select(self, value: Any, name: str, selector: Selector) -> Any:
        try:
            if selector.index >= 0:
                return value[selector.index]
            if isinstance(value, Mapping):
                return value.get(selector.key)
            raise TypeError(f"{type(value).__name__} is not a mapping")
        except (IndexError, KeyError, TypeError) as exc:
            raise PropertyAccessError(
                ERR_MSG_PROPERTY_ACCESS,
                f"cannot read {name!r} at index={selector.index} key={selector.key!r}: {exc}",
                wrapped=exc,
            ) from exc
