import pytest

from tramp.domain.market_conditions import apply_trade, decay, pressure


def test_buys_push_negative_and_sells_push_positive() -> None:
    conditions = apply_trade({}, 0, "grain", -20)
    conditions = apply_trade(conditions, 0, "grain", 5)
    conditions = apply_trade(conditions, 2, "ore", 7)
    assert pressure(conditions, 0, "grain") == -15.0
    assert pressure(conditions, 2, "ore") == 7.0
    assert pressure(conditions, 1, "grain") == 0.0


def test_apply_trade_leaves_input_untouched() -> None:
    original = {0: {"grain": -10.0}}
    updated = apply_trade(original, 0, "grain", -10)
    assert original == {0: {"grain": -10.0}}
    assert updated == {0: {"grain": -20.0}}


def test_decay_is_geometric_in_days() -> None:
    conditions = {0: {"grain": -100.0, "ore": 50.0}}
    one_day = decay(conditions, 1)
    three_days = decay(conditions, 3)
    assert one_day[0]["grain"] == pytest.approx(-90.0)
    assert three_days[0]["grain"] == pytest.approx(-100.0 * 0.9**3)
    assert three_days[0]["ore"] == pytest.approx(50.0 * 0.729)


def test_decay_prunes_small_entries_and_empty_systems() -> None:
    conditions = {0: {"grain": -1.05, "ore": 40.0}, 1: {"grain": 1.05}}
    updated = decay(conditions, 1)
    assert "grain" not in updated[0]
    assert 1 not in updated


def test_decay_with_no_days_returns_copy() -> None:
    conditions = {0: {"grain": 0.5}}
    updated = decay(conditions, 0)
    assert updated == conditions
    assert updated is not conditions
    assert updated[0] is not conditions[0]


def test_repeated_decay_eventually_clears_all_pressure() -> None:
    conditions = {0: {"grain": -500.0}}
    for _ in range(100):
        conditions = decay(conditions, 1)
    assert conditions == {}
