"""Pointers — opaque string handles addressing stores in a StoreStack.

Nothing is assumed about a pointer beyond equality. Generated pointers are
never reused; a caller may still supply the same string twice on purpose.
"""

from uuid import uuid4

Pointer = str


def new_pointer() -> Pointer:
    # uuid4 draws from os.urandom, so this is safe from any thread.
    return uuid4().hex
