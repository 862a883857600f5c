"""storestack: a registry of observable, pointer-addressed state stores."""

from importlib.metadata import version as _version

__version__ = _version("storestack")

from storestack.errors import (
    StoreStackError,
    DuplicateObserverError,
    UnknownObserverError,
    MemoryAllocationError,
    NullPointerError,
)
from storestack.pointer import Pointer, new_pointer
from storestack.store import Observer, Store
from storestack.observer import CallbackObserver, observer
from storestack.stack import StoreStack
from storestack.registry import ErrorHandling, get_stores, use_store
# textual NOT auto-imported — opt-in only

__all__ = [
    "StoreStackError",
    "DuplicateObserverError",
    "UnknownObserverError",
    "MemoryAllocationError",
    "NullPointerError",
    "Pointer",
    "new_pointer",
    "Observer",
    "Store",
    "CallbackObserver",
    "observer",
    "StoreStack",
    "ErrorHandling",
    "get_stores",
    "use_store",
]
