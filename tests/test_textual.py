"""Tests for storestack.textual — store observers bound to a Textual app."""

import threading

import pytest
from textual.css.query import NoMatches

from storestack import Store, StoreStack
from storestack import textual as stx


class _FakeApp:
    """Stands in for textual.app.App: is_running plus call_from_thread."""

    def __init__(self, running=True):
        self.is_running = running
        self.marshalled = []

    def call_from_thread(self, fn, *args):
        self.marshalled.append(args)
        fn(*args)


def _watched_store(app, initial=0):
    labels = []
    store = Store(initial)
    store.attach(stx.observer(app, labels.append))
    return store, labels


class TestAppObserver:
    def test_forwards_state(self):
        app = _FakeApp()
        store, labels = _watched_store(app)
        store.set(1)
        store.set(lambda n: n + 1)
        assert labels == [1, 2]
        assert app.marshalled == []

    def test_ignores_app_not_running(self):
        app = _FakeApp(running=False)
        store, labels = _watched_store(app)
        store.set(1)
        assert labels == []
        app.is_running = True
        store.set(2)
        assert labels == [2]

    def test_missing_widget_ignored(self):
        app = _FakeApp()
        store = Store("ready")

        def update_label(state):
            raise NoMatches("#status")

        store.attach(stx.observer(app, update_label))
        store.set("loading")
        assert store.get() == "loading"

    def test_other_errors_reach_set_caller(self):
        app = _FakeApp()
        store = Store(0)

        def broken(state):
            raise KeyError(state)

        store.attach(stx.observer(app, broken))
        with pytest.raises(KeyError):
            store.set(1)

    def test_worker_thread_set_goes_through_call_from_thread(self):
        app = _FakeApp()
        store, labels = _watched_store(app)

        worker = threading.Thread(target=lambda: store.set({"rows": 3}))
        worker.start()
        worker.join()

        assert labels == [{"rows": 3}]
        assert app.marshalled == [({"rows": 3},)]


class TestHold:
    def test_notifications_dropped_not_replayed(self):
        app = _FakeApp()
        store, labels = _watched_store(app)
        with stx.hold(app):
            store.set(1)
            store.set(2)
        assert labels == []
        assert store.get() == 2
        store.set(3)
        assert labels == [3]

    def test_nested_hold(self):
        app = _FakeApp()
        store, labels = _watched_store(app)
        with stx.hold(app):
            with stx.hold(app):
                pass
            store.set(1)  # outer block still holding
        assert labels == []
        assert stx.accepts_updates(app)

    def test_released_after_exception(self):
        app = _FakeApp()
        with pytest.raises(RuntimeError):
            with stx.hold(app):
                raise RuntimeError("screen swap failed")
        assert stx.accepts_updates(app)

    def test_only_held_app_is_muted(self):
        held, other = _FakeApp(), _FakeApp()
        store = Store(0)
        held_labels, other_labels = [], []
        store.attach(stx.observer(held, held_labels.append))
        store.attach(stx.observer(other, other_labels.append))
        with stx.hold(held):
            store.set(1)
        assert held_labels == []
        assert other_labels == [1]


class TestUseState:
    def test_getter_setter_and_callback(self):
        app = _FakeApp()
        stack = StoreStack()
        labels = []
        count, set_count = stx.use_state(app, stack, "counter", 0, labels.append)
        set_count(5)
        set_count(lambda n: n + 1)
        assert count() == 6
        assert labels == [5, 6]

    def test_includes_global_observers(self):
        app = _FakeApp()
        seen = []
        stack = StoreStack([stx.observer(app, seen.append)])
        _, set_ = stx.use_state(app, stack, "p", "a", lambda v: None)
        set_("b")
        assert seen == ["b"]
