"""Copy-on-write map with lock-free reads.

Readers always see an immutable snapshot. Writers serialize on a lock,
mutate a private copy and publish it with a single reference assignment,
so a reader observes either the old map or the new one, never a mix.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator, Mapping, MutableMapping
from contextlib import contextmanager
from types import MappingProxyType
from typing import Generic, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class CopyOnWriteMap(Generic[K, V]):
    """Map with a fast (snapshot) read mode and a slow (serialized) write mode."""

    def __init__(self, initial: Mapping[K, V] | None = None) -> None:
        self._lock = threading.Lock()
        self._snapshot: Mapping[K, V] = MappingProxyType(dict(initial or {}))

    # --- Fast mode: unsynchronized reads ---

    def get(self, key: K, default: V | None = None) -> V | None:
        return self._snapshot.get(key, default)

    def snapshot(self) -> Mapping[K, V]:
        """Return the current immutable snapshot."""
        return self._snapshot

    def __contains__(self, key: object) -> bool:
        return key in self._snapshot

    def __iter__(self) -> Iterator[K]:
        return iter(self._snapshot)

    def __len__(self) -> int:
        return len(self._snapshot)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self._snapshot)!r})"

    # --- Slow mode: serialized writes ---

    @contextmanager
    def batch(self) -> Iterator[MutableMapping[K, V]]:
        """Hold the write lock and yield a working copy of the map.

        The copy replaces the snapshot when the block exits normally and is
        discarded if it raises.
        """
        with self._lock:
            working = dict(self._snapshot)
            yield working
            self._snapshot = MappingProxyType(working)

    def put(self, key: K, value: V) -> None:
        with self.batch() as working:
            working[key] = value

    def setdefault(self, key: K, value: V) -> V:
        """Publish ``value`` under ``key`` unless a value is already there.

        Returns whichever value ends up in the map.
        """
        existing = self._snapshot.get(key)
        if existing is not None:
            return existing
        with self._lock:
            existing = self._snapshot.get(key)
            if existing is not None:
                return existing
            working = dict(self._snapshot)
            working[key] = value
            self._snapshot = MappingProxyType(working)
            return value

    def remove(self, key: K) -> V | None:
        with self.batch() as working:
            return working.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._snapshot = MappingProxyType({})

    def replace(self, mapping: Mapping[K, V]) -> None:
        """Swap in a copy of ``mapping`` as the whole content."""
        fresh = MappingProxyType(dict(mapping))
        with self._lock:
            self._snapshot = fresh
