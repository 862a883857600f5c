"""Tests for CallbackObserver and observer()."""

from storestack import CallbackObserver, Store, observer


class TestObserver:
    def test_factory_returns_callback_observer(self):
        obs = observer(lambda v: None)
        assert isinstance(obs, CallbackObserver)

    def test_callback_receives_state(self):
        counter = []
        obs = observer(counter.append)
        store = Store(0)
        store.attach(obs)
        store.set(1)
        assert counter == [1]
        store.detach(obs)
        store.set(2)
        assert counter == [1]

    def test_callback_receives_copy(self):
        received = []
        store = Store({"a": [1]})
        store.attach(observer(received.append))
        store.set({"a": [2]})
        received[0]["a"].append(3)
        assert store.get() == {"a": [2]}

    def test_decorator(self):
        log = []

        @observer
        def on_change(value):
            log.append(value)

        store = Store("x")
        store.attach(on_change)
        store.set("y")
        assert log == ["y"]
        assert "on_change" in repr(on_change)

    def test_same_function_twice_gives_two_observers(self):
        log = []
        store = Store(0)
        store.attach(observer(log.append))
        store.attach(observer(log.append))
        store.set(1)
        assert log == [1, 1]
