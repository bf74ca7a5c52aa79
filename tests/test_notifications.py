import pytest

from tramp.services.notifications import CREDITS_CHANGED, FUEL_CHANGED, ChangeNotifier


def test_subscribers_run_in_registration_order() -> None:
    notifier = ChangeNotifier()
    seen = []
    notifier.subscribe(CREDITS_CHANGED, lambda value: seen.append(("first", value)))
    notifier.subscribe(CREDITS_CHANGED, lambda value: seen.append(("second", value)))

    notifier.emit(CREDITS_CHANGED, 300)

    assert seen == [("first", 300), ("second", 300)]


def test_failing_subscriber_does_not_block_others() -> None:
    notifier = ChangeNotifier()
    seen = []

    def broken(_value) -> None:
        raise RuntimeError("boom")

    notifier.subscribe(FUEL_CHANGED, broken)
    notifier.subscribe(FUEL_CHANGED, seen.append)

    notifier.emit(FUEL_CHANGED, 42.0)

    assert seen == [42.0]


def test_unknown_event_name_is_rejected() -> None:
    with pytest.raises(ValueError):
        ChangeNotifier().subscribe("gold_changed", print)


def test_unsubscribe_is_idempotent() -> None:
    notifier = ChangeNotifier()
    seen = []
    notifier.subscribe(CREDITS_CHANGED, seen.append)
    notifier.unsubscribe(CREDITS_CHANGED, seen.append)
    notifier.unsubscribe(CREDITS_CHANGED, seen.append)
    notifier.unsubscribe("not_an_event", seen.append)

    notifier.emit(CREDITS_CHANGED, 1)

    assert seen == []
    assert notifier.subscriber_count(CREDITS_CHANGED) == 0


def test_subscriber_may_unsubscribe_during_dispatch() -> None:
    notifier = ChangeNotifier()
    seen = []

    def once(value) -> None:
        seen.append(value)
        notifier.unsubscribe(CREDITS_CHANGED, once)

    notifier.subscribe(CREDITS_CHANGED, once)
    notifier.subscribe(CREDITS_CHANGED, seen.append)
    notifier.emit(CREDITS_CHANGED, 1)
    notifier.emit(CREDITS_CHANGED, 2)

    assert seen == [1, 1, 2]
