"""Rule-based behavioural insights.

``generate_insights`` runs ``RULES`` in order against the most recent closed
trades of a user. Each rule looks at the read-only sample and returns one
``Insight`` or ``None``. An empty sample short-circuits to the cold-start tip;
when no rule fires a "need more data" tip is returned instead.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, List, Optional, Sequence

from app.models.trades import TradeEmotion
from app.services.analytics import (
    ZERO,
    coin_key,
    group_trades,
    is_win,
    loss_rate,
    strategy_key,
    trade_pnl,
    win_rate,
)
from app.utils.time import local_hour

INSIGHT_SAMPLE_SIZE = 100

MIN_GROUP_TRADES = 5
FOMO_LOSS_RATE = Decimal(60)
NIGHT_HOURS = range(0, 7)
NIGHT_LOSS_RATE = Decimal(65)
BEST_COIN_WIN_RATE = Decimal(60)
WORST_COIN_WIN_RATE = Decimal(40)
WIN_STREAK = 5
CALM_WIN_RATE = Decimal(55)
MIN_SOURCE_TRADES = 10
SOURCE_WIN_RATE_GAP = Decimal(10)


class InsightType(str, enum.Enum):
    WARNING = "Warning"
    TIP = "Tip"
    ACHIEVEMENT = "Achievement"


@dataclass(frozen=True)
class Insight:
    type: InsightType
    title: str
    message: str
    emoji: Optional[str] = None


Rule = Callable[[Sequence], Optional[Insight]]


def format_percent(value: Decimal) -> str:
    return str(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_money(value: Decimal) -> str:
    return str(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _tagged(trades: Sequence, emotion: TradeEmotion) -> list:
    return [trade for trade in trades if trade.emotion == emotion]


def fomo_warning(trades: Sequence) -> Optional[Insight]:
    fomo = _tagged(trades, TradeEmotion.FOMO)
    if len(fomo) < MIN_GROUP_TRADES:
        return None
    rate = loss_rate(fomo)
    if rate < FOMO_LOSS_RATE:
        return None
    return Insight(
        InsightType.WARNING,
        "FOMO Warning",
        f"{format_percent(rate)}% of the trades you opened on FOMO ended in a loss. "
        "Don't rush, opportunities always come back!",
        "😰",
    )


def revenge_warning(trades: Sequence) -> Optional[Insight]:
    revenge = _tagged(trades, TradeEmotion.REVENGE)
    if not revenge:
        return None
    total = sum((trade_pnl(trade) for trade in revenge), ZERO)
    if total >= ZERO:
        return None
    return Insight(
        InsightType.WARNING,
        "Revenge Trading",
        f"Revenge trades cost you ${format_money(abs(total))} in total. Take a break after a loss!",
        "😤",
    )


def night_trading_warning(trades: Sequence) -> Optional[Insight]:
    night = [trade for trade in trades if local_hour(trade.entry_time) in NIGHT_HOURS]
    if len(night) < MIN_GROUP_TRADES:
        return None
    rate = loss_rate(night)
    if rate < NIGHT_LOSS_RATE:
        return None
    return Insight(
        InsightType.WARNING,
        "Night Trading",
        f"{format_percent(rate)}% of your trades opened between 00:00 and 06:00 ended in a loss. "
        "Avoid trading while sleepy!",
        "🌙",
    )


def best_strategy_achievement(trades: Sequence) -> Optional[Insight]:
    groups = group_trades(trades, strategy_key)
    if not groups:
        return None
    totals = {name: sum((trade_pnl(trade) for trade in members), ZERO) for name, members in groups.items()}
    best = max(totals, key=totals.__getitem__)
    if totals[best] <= ZERO or len(groups[best]) < MIN_GROUP_TRADES:
        return None
    return Insight(
        InsightType.ACHIEVEMENT,
        "Best Strategy",
        f"The '{best}' strategy earned you ${format_money(totals[best])}. Keep it up!",
        "🏆",
    )


def _qualified_coin_rates(trades: Sequence) -> dict:
    return {
        coin: win_rate(members)
        for coin, members in group_trades(trades, coin_key).items()
        if len(members) >= MIN_GROUP_TRADES
    }


def best_coin_tip(trades: Sequence) -> Optional[Insight]:
    rates = _qualified_coin_rates(trades)
    if not rates:
        return None
    coin = max(rates, key=rates.__getitem__)
    if rates[coin] < BEST_COIN_WIN_RATE:
        return None
    return Insight(
        InsightType.TIP,
        f"{coin} Performance",
        f"{format_percent(rates[coin])}% win rate on {coin}! This coin works well for you.",
        "💰",
    )


def worst_coin_warning(trades: Sequence) -> Optional[Insight]:
    rates = _qualified_coin_rates(trades)
    if not rates:
        return None
    coin = min(rates, key=rates.__getitem__)
    if rates[coin] >= WORST_COIN_WIN_RATE:
        return None
    return Insight(
        InsightType.WARNING,
        f"{coin} Caution",
        f"Only {format_percent(rates[coin])}% win rate on {coin}. Reconsider trading this coin!",
        "⚠️",
    )


def longest_win_streak(trades: Sequence) -> int:
    """Longest run of winning trades, in entry-time order."""
    longest = current = 0
    for trade in sorted(trades, key=lambda t: t.entry_time):
        if is_win(trade):
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def win_streak_achievement(trades: Sequence) -> Optional[Insight]:
    streak = longest_win_streak(trades)
    if streak < WIN_STREAK:
        return None
    return Insight(
        InsightType.ACHIEVEMENT,
        "Winning Streak",
        f"Your longest winning streak: {streak} trades! Great performance!",
        "🔥",
    )


def calm_trading_tip(trades: Sequence) -> Optional[Insight]:
    calm = _tagged(trades, TradeEmotion.CALM)
    if len(calm) < MIN_GROUP_TRADES:
        return None
    rate = win_rate(calm)
    if rate < CALM_WIN_RATE:
        return None
    return Insight(
        InsightType.TIP,
        "Stay Calm, Win More",
        f"Your win rate while calm: {format_percent(rate)}%. Keep your emotions in check!",
        "😎",
    )


def bot_vs_manual_tip(trades: Sequence) -> Optional[Insight]:
    bot = [trade for trade in trades if trade.is_from_bot]
    manual = [trade for trade in trades if not trade.is_from_bot]
    if len(bot) < MIN_SOURCE_TRADES or len(manual) < MIN_SOURCE_TRADES:
        return None
    bot_rate = win_rate(bot)
    manual_rate = win_rate(manual)
    if abs(bot_rate - manual_rate) < SOURCE_WIN_RATE_GAP:
        return None
    better = "Bot" if bot_rate > manual_rate else "Manual"
    return Insight(
        InsightType.TIP,
        "Bot vs Manual",
        f"{better} trades perform better ({format_percent(max(bot_rate, manual_rate))}% win rate). "
        "Adjust your strategy accordingly!",
        "🤖",
    )


RULES: tuple[Rule, ...] = (
    fomo_warning,
    revenge_warning,
    night_trading_warning,
    best_strategy_achievement,
    best_coin_tip,
    worst_coin_warning,
    win_streak_achievement,
    calm_trading_tip,
    bot_vs_manual_tip,
)

COLD_START = Insight(
    InsightType.TIP,
    "First Step",
    "No trades recorded yet. Add your first trade and start analysing!",
    "🚀",
)

NEED_MORE_DATA = Insight(
    InsightType.TIP,
    "More Data Needed",
    "Log more trades and add emotion/strategy details for a deeper analysis!",
    "📊",
)


def generate_insights(trades: Sequence) -> List[Insight]:
    if not trades:
        return [COLD_START]

    insights = [insight for insight in (rule(trades) for rule in RULES) if insight is not None]
    return insights or [NEED_MORE_DATA]


__all__ = [
    "INSIGHT_SAMPLE_SIZE",
    "Insight",
    "InsightType",
    "RULES",
    "generate_insights",
    "longest_win_streak",
]
