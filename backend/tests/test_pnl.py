from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from app.models.trades import Trade, TradeDirection
from app.services.pnl import apply_pnl, compute_pnl


def test_long_trade_with_leverage():
    pnl, pnl_percent = compute_pnl(TradeDirection.LONG, Decimal("100"), Decimal("110"), 2, Decimal("1000"))
    assert pnl_percent == Decimal("20")
    assert pnl == Decimal("200")


def test_short_trade_profits_from_price_drop():
    pnl, pnl_percent = compute_pnl(TradeDirection.SHORT, Decimal("100"), Decimal("90"), 1, Decimal("500"))
    assert pnl_percent == Decimal("10")
    assert pnl == Decimal("50")


def test_losing_long_is_negative():
    pnl, pnl_percent = compute_pnl("Long", 200, 150, 1, 400)
    assert pnl_percent == Decimal("-25")
    assert pnl == Decimal("-100")


def test_open_trade_has_no_result():
    assert compute_pnl(TradeDirection.LONG, Decimal("100"), None, 5, Decimal("1000")) == (None, None)


def test_float_inputs_are_converted_exactly():
    pnl, pnl_percent = compute_pnl(TradeDirection.LONG, 0.1, 0.2, 1, 10)
    assert pnl_percent == Decimal("100")
    assert pnl == Decimal("10")


def _trade(**overrides) -> Trade:
    values = dict(
        user_id="u1",
        coin="ETH",
        entry_price=Decimal("2000"),
        exit_price=Decimal("2100"),
        position_size=Decimal("1000"),
        leverage=3,
        direction=TradeDirection.LONG,
        entry_time=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    values.update(overrides)
    return Trade(**values)


def test_apply_pnl_is_idempotent():
    trade = apply_pnl(_trade())
    first = (trade.pnl, trade.pnl_percent)
    apply_pnl(trade)
    assert (trade.pnl, trade.pnl_percent) == first
    assert first == (Decimal("150"), Decimal("15"))


def test_apply_pnl_clears_result_when_exit_removed():
    trade = apply_pnl(_trade())
    trade.exit_price = None
    apply_pnl(trade)
    assert trade.pnl is None
    assert trade.pnl_percent is None


def test_pnl_equals_size_times_percent():
    trade = apply_pnl(_trade(direction=TradeDirection.SHORT, exit_price=Decimal("1950"), leverage=10))
    assert trade.pnl == trade.position_size * trade.pnl_percent / 100
    assert trade.pnl_percent == Decimal("25")
