from layer_status.core.observable import Observable


def test_watch_immediate_fires_on_registration():
    calls = []
    obs = Observable("a", "page")
    obs.watch(lambda new, old: calls.append((new, old)), immediate=True)
    assert calls == [("a", None)]


def test_set_notifies_only_on_change():
    calls = []
    obs = Observable(1)
    obs.watch(lambda new, old: calls.append((new, old)))
    obs.set(1)
    obs.set(2)
    obs.set(2)
    assert calls == [(2, 1)]


def test_force_notifies_even_when_equal():
    calls = []
    obs = Observable(1)
    obs.watch(lambda new, old: calls.append(new))
    obs.set(1, force=True)
    assert calls == [1]


def test_unsubscribe_handle_stops_notifications_and_is_idempotent():
    calls = []
    obs = Observable(0)
    unsubscribe = obs.watch(lambda new, old: calls.append(new))
    obs.set(1)
    unsubscribe()
    unsubscribe()
    obs.set(2)
    assert calls == [1]
    assert obs.watcher_count == 0


def test_watchers_run_in_registration_order():
    order = []
    obs = Observable(0)
    obs.watch(lambda new, old: order.append("first"))
    obs.watch(lambda new, old: order.append("second"))
    obs.set(1)
    assert order == ["first", "second"]


def test_watcher_removed_during_notification_is_not_called():
    order = []
    obs = Observable(0)

    def second(new, old):
        order.append("second")

    def first(new, old):
        order.append("first")
        obs.unwatch(second)

    obs.watch(first)
    obs.watch(second)
    obs.set(1)
    assert order == ["first"]
