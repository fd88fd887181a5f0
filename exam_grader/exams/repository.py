"""
In-memory repositories for exams, submissions and results.

Collaborators receive a repository instead of sharing module-level
collections; any storage that offers the same methods can be swapped in.
"""

import threading
from typing import Callable, Generic, Hashable, Protocol, TypeVar

T = TypeVar("T")


class Repository(Protocol[T]):
    """Minimal storage interface used by the exam service."""

    def get(self, entity_id: Hashable) -> T | None: ...

    def list(self) -> list[T]: ...

    def save(self, entity: T) -> T: ...

    def save_if_absent(self, entity: T) -> bool: ...

    def delete(self, entity_id: Hashable) -> bool: ...


class InMemoryRepository(Generic[T]):
    """
    Dict-backed repository keyed by a function of the entity.

    Insertion order is preserved; saving an entity with an existing key
    replaces it in place.
    """

    def __init__(self, key: Callable[[T], Hashable]) -> None:
        self._key = key
        self._items: dict[Hashable, T] = {}
        self._lock = threading.Lock()

    def get(self, entity_id: Hashable) -> T | None:
        with self._lock:
            return self._items.get(entity_id)

    def list(self) -> list[T]:
        """Return a copy of all stored entities."""
        with self._lock:
            return list(self._items.values())

    def save(self, entity: T) -> T:
        with self._lock:
            self._items[self._key(entity)] = entity
        return entity

    def save_if_absent(self, entity: T) -> bool:
        """Store an entity unless its key is taken; returns whether it was stored."""
        key = self._key(entity)
        with self._lock:
            if key in self._items:
                return False
            self._items[key] = entity
        return True

    def delete(self, entity_id: Hashable) -> bool:
        """Remove an entity; returns False when it was not stored."""
        with self._lock:
            return self._items.pop(entity_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, entity_id: Hashable) -> bool:
        with self._lock:
            return entity_id in self._items
