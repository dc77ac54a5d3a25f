"""Descriptive statistics over a user's closed trades.

Every function here is pure: it takes an already-fetched sequence of closed
trades (ORM rows or any object exposing ``pnl``, ``coin``, ``strategy``,
``emotion`` and ``entry_time``) and returns plain dataclasses. A trade whose
PnL is zero counts as losing everywhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Dict, Hashable, Iterable, List, Optional, Sequence

from app.utils.time import local_hour

ZERO = Decimal(0)
HUNDRED = Decimal(100)


@dataclass(frozen=True)
class GroupPerformance:
    key: Hashable
    trade_count: int
    win_rate: Decimal
    total_pnl: Decimal
    average_pnl: Decimal


@dataclass(frozen=True)
class Summary:
    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    win_rate: Decimal = ZERO
    total_pnl: Decimal = ZERO
    average_pnl: Decimal = ZERO
    best_trade: Decimal = ZERO
    worst_trade: Decimal = ZERO
    average_win: Decimal = ZERO
    average_loss: Decimal = ZERO


def trade_pnl(trade) -> Decimal:
    value = trade.pnl
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def is_win(trade) -> bool:
    return trade_pnl(trade) > ZERO


def win_rate(trades: Sequence) -> Decimal:
    """Percentage of ``trades`` with a strictly positive PnL; 0 for an empty set."""
    if not trades:
        return ZERO
    wins = sum(1 for trade in trades if is_win(trade))
    return Decimal(wins) / Decimal(len(trades)) * HUNDRED


def loss_rate(trades: Sequence) -> Decimal:
    if not trades:
        return ZERO
    losses = sum(1 for trade in trades if not is_win(trade))
    return Decimal(losses) / Decimal(len(trades)) * HUNDRED


def _mean(values: Sequence[Decimal]) -> Decimal:
    if not values:
        return ZERO
    return sum(values, ZERO) / Decimal(len(values))


def group_trades(trades: Iterable, key: Callable[[object], Optional[Hashable]]) -> Dict[Hashable, List]:
    """Partition ``trades`` by ``key`` in first-seen order, skipping ``None`` keys."""
    groups: Dict[Hashable, List] = {}
    for trade in trades:
        value = key(trade)
        if value is None:
            continue
        groups.setdefault(value, []).append(trade)
    return groups


def aggregate(trades: Iterable, key: Callable[[object], Optional[Hashable]]) -> List[GroupPerformance]:
    result: List[GroupPerformance] = []
    for value, members in group_trades(trades, key).items():
        pnls = [trade_pnl(trade) for trade in members]
        result.append(
            GroupPerformance(
                key=value,
                trade_count=len(members),
                win_rate=win_rate(members),
                total_pnl=sum(pnls, ZERO),
                average_pnl=_mean(pnls),
            )
        )
    return result


def emotion_key(trade):
    return trade.emotion


def strategy_key(trade):
    # blank strategies are treated as missing
    return trade.strategy or None


def coin_key(trade):
    return trade.coin


def hour_key(trade) -> int:
    return local_hour(trade.entry_time)


def performance_by_emotion(trades: Iterable) -> List[GroupPerformance]:
    return sorted(aggregate(trades, emotion_key), key=lambda group: group.trade_count, reverse=True)


def performance_by_strategy(trades: Iterable) -> List[GroupPerformance]:
    return sorted(aggregate(trades, strategy_key), key=lambda group: group.total_pnl, reverse=True)


def performance_by_coin(trades: Iterable) -> List[GroupPerformance]:
    return sorted(aggregate(trades, coin_key), key=lambda group: group.trade_count, reverse=True)


def performance_by_hour(trades: Iterable) -> List[GroupPerformance]:
    return sorted(aggregate(trades, hour_key), key=lambda group: group.key)


def summarize(trades: Sequence) -> Summary:
    """Whole-set statistics; an empty sequence yields an all-zero ``Summary``."""
    if not trades:
        return Summary()

    pnls = [trade_pnl(trade) for trade in trades]
    wins = [pnl for pnl in pnls if pnl > ZERO]
    losses = [pnl for pnl in pnls if pnl <= ZERO]

    return Summary(
        total_trades=len(pnls),
        winning_trades=len(wins),
        losing_trades=len(losses),
        win_rate=Decimal(len(wins)) / Decimal(len(pnls)) * HUNDRED,
        total_pnl=sum(pnls, ZERO),
        average_pnl=_mean(pnls),
        best_trade=max(pnls),
        worst_trade=min(pnls),
        average_win=_mean(wins),
        average_loss=_mean(losses),
    )


__all__ = [
    "GroupPerformance",
    "Summary",
    "aggregate",
    "group_trades",
    "loss_rate",
    "performance_by_coin",
    "performance_by_emotion",
    "performance_by_hour",
    "performance_by_strategy",
    "summarize",
    "trade_pnl",
    "win_rate",
]
