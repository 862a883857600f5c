"""StoreStack — a keyed registry of stores.

Stores of any state type share one pointer namespace. Lookups are not type
checked: narrowing the result of get() to the right state type is the
caller's job.

Each pointer is either empty or holds exactly one store, and an entry is
never left half-written.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Iterable, TypeVar, Union

from storestack.errors import MemoryAllocationError, NullPointerError
from storestack.pointer import Pointer, new_pointer
from storestack.store import Observer, Store, Transform

logger = logging.getLogger("storestack.stack")

T = TypeVar("T")

Getter = Callable[[], T]
Setter = Callable[[Union[T, Transform[T]]], None]


class StoreStack:
    """Pointer-addressed container of stores, plus optional global observers.

    Global observers are attached to every store reached through
    use_state() (unless the call opts out). They are never attached by
    add/insert/upsert.
    """

    def __init__(self, global_observers: Iterable[Observer[Any]] | None = None) -> None:
        self._stores: dict[Pointer, Store[Any]] = {}
        self._global_observers: list[Observer[Any]] = list(global_observers or ())
        self._lock = threading.RLock()

    @property
    def global_observers(self) -> tuple[Observer[Any], ...]:
        return tuple(self._global_observers)

    def add(self, store: Store[Any]) -> Pointer:
        """Insert store at a freshly generated pointer and return it."""
        pointer = new_pointer()
        with self._lock:
            self._stores[pointer] = store
        return pointer

    def insert(
        self,
        store: Store[Any],
        pointer: Pointer,
        *,
        override: bool = False,
        verbose: bool = False,
    ) -> None:
        """Insert store at pointer.

        Raises MemoryAllocationError if pointer is taken and override is not
        set. With verbose, the collision is also logged before raising.
        """
        with self._lock:
            if pointer in self._stores and not override:
                if verbose:
                    logger.error(
                        "Cannot add store at pointer %s, address is already allocated",
                        pointer,
                    )
                raise MemoryAllocationError()
            self._stores[pointer] = store

    def upsert(self, default: T, pointer: Pointer, *observers: Observer[T]) -> Store[T]:
        """Make sure a store lives at pointer, then attach observers to it.

        A new store holding default is created only if pointer is empty; an
        existing store is never replaced. Observers are attached strictly, in
        order: the first DuplicateObserverError propagates, and observers
        attached before it (and a store created by this call) stay in place.
        """
        with self._lock:
            store = self._stores.get(pointer)
            if store is None:
                store = Store(default)
                self._stores[pointer] = store
        for obs in observers:
            store.attach(obs)
        return store

    def remove(self, pointer: Pointer, *, verbose: bool = False) -> None:
        """Delete the store at pointer. Raises NullPointerError if empty."""
        with self._lock:
            if pointer not in self._stores:
                if verbose:
                    logger.error("Pointer %s points to unallocated memory", pointer)
                raise NullPointerError()
            del self._stores[pointer]

    def get(self, pointer: Pointer) -> Store[Any] | None:
        """Return the store at pointer, or None. Never raises."""
        with self._lock:
            return self._stores.get(pointer)

    def pointers(self) -> list[Pointer]:
        with self._lock:
            return list(self._stores)

    def use_state(
        self,
        pointer: Pointer,
        default: T,
        observers: Iterable[Observer[T]] | None = None,
        *,
        use_global_observers: bool = True,
    ) -> tuple[Getter[T], Setter[T]]:
        """Hook-style access to the store at pointer: returns (getter, setter).

        Creates the store with default if pointer is empty, never replaces an
        existing one. The given observers, then the stack's global observers,
        are attached with skip-on-duplicate, so calling this repeatedly with
        the same observers is harmless.

        The getter returns a fresh copy of the state; the setter takes a value
        or a transform, exactly like Store.set(). Both look the store up on
        every call and raise NullPointerError once it has been removed.

        Usage:
            stack = StoreStack()
            count, set_count = stack.use_state("counter", 0)
            set_count(5)
            set_count(lambda n: n + 1)
            count()  # 6
        """
        to_attach = list(observers or ())
        if use_global_observers:
            to_attach.extend(self._global_observers)

        with self._lock:
            store = self._stores.get(pointer)
            if store is None:
                store = Store(default)
                self._stores[pointer] = store
        # Stack lock released before any store lock is taken.
        for obs in to_attach:
            store.attach(obs, skip_on_duplicate=True)

        def getter() -> T:
            return self._require(pointer).get()

        def setter(value: Union[T, Transform[T]]) -> None:
            self._require(pointer).set(value)

        return getter, setter

    def _require(self, pointer: Pointer) -> Store[Any]:
        store = self.get(pointer)
        if store is None:
            raise NullPointerError()
        return store

    def __contains__(self, pointer: object) -> bool:
        with self._lock:
            return pointer in self._stores

    def __len__(self) -> int:
        with self._lock:
            return len(self._stores)

    def __repr__(self) -> str:
        return f"StoreStack(stores={len(self)}, global_observers={len(self._global_observers)})"
