"""Callback observers — adapt a plain function to the Observer interface."""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

from storestack.store import Store

T = TypeVar("T")


class CallbackObserver(Generic[T]):
    """Observer that calls callback(state) with a fresh copy of the new state."""

    __slots__ = ("_callback",)

    def __init__(self, callback: Callable[[T], None]) -> None:
        self._callback = callback

    @property
    def callback(self) -> Callable[[T], None]:
        return self._callback

    def update(self, store: Store[T]) -> None:
        self._callback(store.get())

    def __repr__(self) -> str:
        name = getattr(self._callback, "__name__", repr(self._callback))
        return f"CallbackObserver({name})"


def observer(callback: Callable[[T], None]) -> CallbackObserver[T]:
    """Decorator/factory to create an Observer from a function.

    Each call returns a new observer, so wrapping the same function twice
    gives two observers that can both be attached to one store.

    Usage:
        counter = Store(0)

        @observer
        def log_count(value):
            print("count is", value)

        counter.attach(log_count)
        counter.set(1)  # prints "count is 1"
    """
    return CallbackObserver(callback)
