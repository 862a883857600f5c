"""Errors raised by stores and stacks.

Store and StoreStack never catch these themselves; they are signaled to the
direct caller. Only use_store() can downgrade them, and only when asked to.
"""

__all__ = [
    "StoreStackError",
    "DuplicateObserverError",
    "UnknownObserverError",
    "MemoryAllocationError",
    "NullPointerError",
]


class StoreStackError(Exception):
    """Base class for all storestack errors."""

    default_message = "storestack error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class DuplicateObserverError(StoreStackError):
    """An observer was attached to a store it is already attached to."""

    default_message = "This observer is already attached to the store."


class UnknownObserverError(StoreStackError):
    """An observer was detached from a store it was never attached to."""

    default_message = "Attempted removal of unattached observer."


class MemoryAllocationError(StoreStackError):
    """A store was inserted at an occupied pointer without override."""

    default_message = (
        "Attempted to insert store at already allocated memory address "
        "without explicit override."
    )


class NullPointerError(StoreStackError):
    """A pointer-required operation hit an unallocated pointer."""

    default_message = "Attempted to access unallocated memory address."
