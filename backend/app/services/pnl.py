from __future__ import annotations

from decimal import Decimal
from typing import Optional, Tuple, Union

from app.models.trades import Trade, TradeDirection

Number = Union[Decimal, int, float, str]

HUNDRED = Decimal(100)


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # floats go through str() so 0.1 stays Decimal("0.1")
    return Decimal(str(value))


def compute_pnl(
    direction: TradeDirection | str,
    entry_price: Number,
    exit_price: Optional[Number],
    leverage: int,
    position_size: Number,
) -> Tuple[Optional[Decimal], Optional[Decimal]]:
    """Return ``(pnl, pnl_percent)`` for a trade, or ``(None, None)`` while it is open.

    ``pnl_percent`` is the direction-adjusted price move relative to the entry,
    multiplied by the leverage; ``pnl`` is that percentage of the position
    size. Nothing is rounded here.
    """
    if exit_price is None:
        return None, None

    entry = _to_decimal(entry_price)
    exit_ = _to_decimal(exit_price)

    if TradeDirection(direction) is TradeDirection.LONG:
        differential = exit_ - entry
    else:
        differential = entry - exit_

    pnl_percent = differential / entry * HUNDRED * int(leverage)
    pnl = _to_decimal(position_size) * (pnl_percent / HUNDRED)
    return pnl, pnl_percent


def apply_pnl(trade: Trade) -> Trade:
    """Recompute and reassign both derived fields of ``trade`` in one step."""
    trade.pnl, trade.pnl_percent = compute_pnl(
        trade.direction,
        trade.entry_price,
        trade.exit_price,
        trade.leverage,
        trade.position_size,
    )
    return trade


__all__ = ["apply_pnl", "compute_pnl"]
