"""Process-wide StoreStack and the use_store() convenience entry point.

The global stack is created lazily on first access and lives for the rest
of the process. Code that needs isolation (tests, components with their own
global observers) should build its own StoreStack instead.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Iterable, TypeVar

from storestack.errors import StoreStackError
from storestack.observer import observer
from storestack.pointer import Pointer, new_pointer
from storestack.stack import StoreStack
from storestack.store import Observer, Store

logger = logging.getLogger("storestack.registry")

T = TypeVar("T")

_stores: StoreStack | None = None
_stores_lock = threading.Lock()


def get_stores() -> StoreStack:
    """Return the process-wide StoreStack, creating it on first call."""
    global _stores
    if _stores is None:
        with _stores_lock:
            if _stores is None:
                _stores = StoreStack()
    return _stores


@dataclass(frozen=True)
class ErrorHandling:
    """How use_store() reacts to a StoreStackError.

    verbose: log the error.
    stop_on_error: re-raise it. Otherwise it is swallowed.
    """

    verbose: bool = False
    stop_on_error: bool = False

    def handle(self, error: StoreStackError, pointer: Pointer) -> None:
        if self.verbose:
            logger.error("use_store(%s) failed: %s", pointer, error)
        if self.stop_on_error:
            raise error


def use_store(
    state: T,
    *,
    pointer: Pointer | None = None,
    on_change: Callable[[T], None] | None = None,
    observers: Iterable[Observer[T]] = (),
    override: bool = False,
    error_handling: ErrorHandling | None = None,
    stack: StoreStack | None = None,
) -> Pointer:
    """Declare a store and return its pointer.

    Without override this never replaces an existing store, so several
    components can safely declare the same pointer: the first call creates
    the store with state, later calls only attach their observers. With
    override a new store holding state replaces whatever was there.

    on_change, if given, is wrapped in an observer and attached after the
    explicit observers. Storestack errors (e.g. a duplicate observer) are
    swallowed unless error_handling says otherwise; they are never swallowed
    silently when error_handling.verbose is set.

    Usage:
        ptr = use_store(0, on_change=print)
        get_stores().get(ptr).set(1)  # prints 1
    """
    stack = stack if stack is not None else get_stores()
    pointer = pointer if pointer is not None else new_pointer()
    policy = error_handling or ErrorHandling()

    to_attach = list(observers)
    if on_change is not None:
        to_attach.append(observer(on_change))

    if override:
        store = Store(state)
        for obs in to_attach:
            try:
                store.attach(obs)
            except StoreStackError as e:
                policy.handle(e, pointer)
        stack.insert(store, pointer, override=True)
    else:
        try:
            stack.upsert(state, pointer, *to_attach)
        except StoreStackError as e:
            policy.handle(e, pointer)

    return pointer
