from __future__ import annotations

from pyexposure.observable import MutableObservable


def test_get_returns_last_set_value() -> None:
    cell = MutableObservable(1)

    cell.set(2)

    assert cell.get() == 2


def test_observers_notified_in_subscription_order() -> None:
    cell = MutableObservable("a")
    seen: list[str] = []
    cell.observe(lambda v: seen.append(f"first:{v}"))
    cell.observe(lambda v: seen.append(f"second:{v}"))

    cell.set("b")

    assert seen == ["first:b", "second:b"]


def test_late_subscriber_does_not_see_earlier_values() -> None:
    cell = MutableObservable(0)
    cell.set(1)
    seen: list[int] = []

    cell.observe(seen.append)

    assert seen == []
    cell.set(2)
    assert seen == [2]


def test_unsubscribe_stops_notifications() -> None:
    cell = MutableObservable(0)
    seen: list[int] = []
    unsubscribe = cell.observe(seen.append)

    cell.set(1)
    unsubscribe()
    cell.set(2)
    unsubscribe()

    assert seen == [1]


def test_reentrant_set_from_observer() -> None:
    cell = MutableObservable(0)
    seen: list[int] = []

    def _bump(value: int) -> None:
        if value < 3:
            cell.set(value + 1)

    cell.observe(_bump)
    cell.observe(seen.append)

    cell.set(1)

    assert cell.get() == 3
    assert 3 in seen


def test_subscribing_during_notification_uses_snapshot() -> None:
    cell = MutableObservable(0)
    late: list[int] = []
    cell.observe(lambda _v: cell.observe(late.append))

    cell.set(1)

    assert late == []


def test_failing_observer_does_not_block_others() -> None:
    cell = MutableObservable(0)
    seen: list[int] = []

    def _boom(_value: int) -> None:
        raise RuntimeError("observer bug")

    cell.observe(_boom)
    cell.observe(seen.append)

    cell.set(5)

    assert seen == [5]
