"""Store — one piece of mutable state plus the observers watching it.

State never leaves the store by reference: every read hands out a deep copy
and every write stores a deep copy. The only way to change what a store
holds is set(), which notifies every attached observer synchronously, in
attachment order, after the new state is fully in place.

Thread safety: a re-entrant lock guards the (state, observers) pair.
Observers run outside the lock, on a snapshot of the observer list taken
when notify() starts; any of them detached since then is skipped.
"""

from __future__ import annotations

import copy
import threading
from typing import Callable, Generic, Protocol, TypeVar, Union

from storestack.errors import DuplicateObserverError, UnknownObserverError
from storestack.pointer import Pointer, new_pointer

T = TypeVar("T")
T_contra = TypeVar("T_contra", contravariant=True)

Transform = Callable[[T], T]


class Observer(Protocol[T_contra]):
    """Anything with an update(store) method can observe a Store."""

    def update(self, store: "Store") -> None: ...


class Store(Generic[T]):
    """A single observable state value with deep-copy isolation."""

    __slots__ = ("_state", "_observers", "_lock")

    def __init__(self, state: T) -> None:
        self._state: T = copy.deepcopy(state)
        self._observers: list[Observer[T]] = []
        self._lock = threading.RLock()

    @staticmethod
    def new_pointer() -> Pointer:
        """Convenience alias for storestack.pointer.new_pointer()."""
        return new_pointer()

    @property
    def state(self) -> T:
        """A deep copy of the current state. Same as get()."""
        return self.get()

    @property
    def observers(self) -> tuple[Observer[T], ...]:
        with self._lock:
            return tuple(self._observers)

    def get(self) -> T:
        """Return a deep copy of the current state."""
        with self._lock:
            return copy.deepcopy(self._state)

    def set(self, value: Union[T, Transform[T]]) -> None:
        """Replace the state, then notify.

        A callable is treated as a transform: it is called exactly once with
        a copy of the previous state and its result becomes the new state.
        Anything the transform raises propagates and the state is unchanged.

        The transform runs while this store's lock is held. StoreStack never
        holds its own lock while waiting on a store lock, so a transform may
        read other stores (or use_state getters) from any thread.

        Usage:
            store = Store(0)
            store.set(5)                 # literal value
            store.set(lambda n: n + 1)   # transform -> 6
        """
        with self._lock:
            if callable(value):
                new_state = value(copy.deepcopy(self._state))
            else:
                new_state = value
            self._state = copy.deepcopy(new_state)
        self.notify()

    def attach(self, observer: Observer[T], skip_on_duplicate: bool = False) -> None:
        """Subscribe observer. Raises DuplicateObserverError if already attached,
        unless skip_on_duplicate is set, in which case this is a no-op."""
        with self._lock:
            if self._index_of(observer) != -1:
                if skip_on_duplicate:
                    return
                raise DuplicateObserverError()
            self._observers.append(observer)

    def detach(self, observer: Observer[T]) -> None:
        """Unsubscribe observer. Raises UnknownObserverError if not attached."""
        with self._lock:
            index = self._index_of(observer)
            if index == -1:
                raise UnknownObserverError()
            del self._observers[index]

    def notify(self) -> None:
        """Call update(self) on every observer, in attachment order.

        Runs automatically after set(). Observers attached during the loop
        wait for the next notify(); observers detached during it are skipped.
        An exception from an observer is not caught: it stops the loop and
        reaches the caller.
        """
        for observer in self.observers:
            with self._lock:
                if self._index_of(observer) == -1:
                    continue
            observer.update(self)

    def _index_of(self, observer: Observer[T]) -> int:
        # Identity, not equality: two equal observers are still two observers.
        for i, existing in enumerate(self._observers):
            if existing is observer:
                return i
        return -1

    def __repr__(self) -> str:
        return f"Store({self._state!r}, observers={len(self._observers)})"
