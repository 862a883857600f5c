"""Textual integration for storestack. Opt-in — requires textual.

Store notifications arrive on whatever thread called set(). Observers built
here only touch widgets when the app can take it: they skip while the app is
not running or inside hold(), hop onto the UI thread via call_from_thread,
and ignore NoMatches from widget queries that race a screen change.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterable

from textual.css.query import NoMatches

from storestack.pointer import Pointer
from storestack.stack import Getter, Setter, StoreStack
from storestack.store import Observer, Store

# Nesting depth of hold() per id(app); absent means notifications flow.
_held: dict[int, int] = {}


@contextmanager
def hold(app):
    """Drop store notifications bound for app while the block runs.

    Dropped notifications are not replayed: read the store again after the
    block if the widgets need the latest state. Blocks may nest.
    """
    key = id(app)
    _held[key] = _held.get(key, 0) + 1
    try:
        yield
    finally:
        if _held[key] == 1:
            del _held[key]
        else:
            _held[key] -= 1


def accepts_updates(app) -> bool:
    return app.is_running and id(app) not in _held


class AppObserver:
    """Observer that forwards the new state to callback on the app's thread."""

    __slots__ = ("_app", "_callback", "_main")

    def __init__(self, app, callback: Callable[[Any], None]) -> None:
        self._app = app
        self._callback = callback
        self._main = threading.get_ident()

    def update(self, store: Store) -> None:
        if not accepts_updates(self._app):
            return
        state = store.get()
        if threading.get_ident() != self._main:
            self._app.call_from_thread(self._safe, state)
        else:
            self._safe(state)

    def _safe(self, state) -> None:
        try:
            self._callback(state)
        except NoMatches:
            pass


def observer(app, callback: Callable[[Any], None]) -> AppObserver:
    """Build an observer bound to app. Create it on the UI thread."""
    return AppObserver(app, callback)


def use_state(
    app,
    stack: StoreStack,
    pointer: Pointer,
    default,
    callback: Callable[[Any], None],
    observers: Iterable[Observer] | None = None,
) -> tuple[Getter, Setter]:
    """StoreStack.use_state() with a guarded callback observer attached.

    Each call attaches a new AppObserver, so call it once per widget (e.g. in
    on_mount) rather than on every render.

    Usage (inside a Textual App or Widget):
        count, set_count = stx.use_state(
            self.app, stack, "counter", 0,
            lambda n: self.query_one("#count", Label).update(str(n)),
        )
    """
    extra = list(observers or ())
    extra.append(observer(app, callback))
    return stack.use_state(pointer, default, extra)
