from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.models.trades import TradeEmotion
from app.services import insights
from app.services.insights import InsightType, generate_insights, longest_win_streak

BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
_counter = itertools.count()


def _trade(pnl, *, coin="BTC", emotion=None, strategy=None, hour=None, is_from_bot=False, entry_time=None):
    if entry_time is None:
        entry_time = BASE_TIME + timedelta(days=next(_counter))
        if hour is not None:
            entry_time = entry_time.replace(hour=hour)
    return SimpleNamespace(
        pnl=Decimal(str(pnl)),
        coin=coin,
        emotion=emotion,
        strategy=strategy,
        entry_time=entry_time,
        is_from_bot=is_from_bot,
    )


def _titles(result):
    return [insight.title for insight in result]


def test_cold_start_returns_single_tip():
    result = generate_insights([])
    assert len(result) == 1
    assert result[0].type is InsightType.TIP
    assert result[0].title == "First Step"


def test_fallback_when_no_rule_fires():
    result = generate_insights([_trade(10), _trade(-5)])
    assert _titles(result) == ["More Data Needed"]


def test_fomo_warning_fires_at_sixty_percent_losses():
    trades = [_trade(p, emotion=TradeEmotion.FOMO) for p in (-1, -2, -3, 4, 5)]
    [warning] = [i for i in generate_insights(trades) if i.title == "FOMO Warning"]
    assert warning.type is InsightType.WARNING
    assert warning.message.startswith("60%")


def test_fomo_warning_silent_at_forty_percent_losses():
    trades = [_trade(p, emotion=TradeEmotion.FOMO) for p in (-1, -2, 3, 4, 5)]
    assert "FOMO Warning" not in _titles(generate_insights(trades))


def test_fomo_warning_needs_five_trades():
    trades = [_trade(-1, emotion=TradeEmotion.FOMO) for _ in range(4)]
    assert insights.fomo_warning(trades) is None


def test_fomo_break_even_trade_counts_as_loss():
    trades = [_trade(p, emotion=TradeEmotion.FOMO) for p in (0, 0, -1, 4, 5)]
    assert insights.fomo_warning(trades) is not None


def test_revenge_warning_reports_total_loss():
    trades = [_trade(-100.5, emotion=TradeEmotion.REVENGE), _trade(20.25, emotion=TradeEmotion.REVENGE)]
    warning = insights.revenge_warning(trades)
    assert warning is not None
    assert "$80.25" in warning.message


def test_revenge_warning_silent_when_profitable():
    trades = [_trade(-10, emotion=TradeEmotion.REVENGE), _trade(10, emotion=TradeEmotion.REVENGE)]
    assert insights.revenge_warning(trades) is None


def test_night_trading_warning():
    trades = [_trade(-1, hour=h) for h in (0, 2, 4, 6)] + [_trade(1, hour=5)]
    warning = insights.night_trading_warning(trades)
    assert warning is not None
    assert warning.message.startswith("80%")


def test_night_trading_ignores_hour_seven():
    trades = [_trade(-1, hour=h) for h in (0, 2, 4, 6, 7)]
    assert insights.night_trading_warning(trades) is None


def test_night_trading_below_threshold():
    trades = [_trade(-1, hour=1) for _ in range(3)] + [_trade(1, hour=2) for _ in range(2)]
    assert insights.night_trading_warning(trades) is None


def test_best_strategy_achievement():
    trades = [_trade(10, strategy="Breakout") for _ in range(5)] + [_trade(5, strategy="Scalp")]
    achievement = insights.best_strategy_achievement(trades)
    assert achievement is not None
    assert achievement.type is InsightType.ACHIEVEMENT
    assert "'Breakout'" in achievement.message
    assert "$50.00" in achievement.message


def test_best_strategy_requires_five_trades_on_the_best_group():
    trades = [_trade(100, strategy="Lucky")] + [_trade(1, strategy="Steady") for _ in range(5)]
    assert insights.best_strategy_achievement(trades) is None


def test_best_coin_tip_and_worst_coin_warning():
    trades = (
        [_trade(1, coin="ETH") for _ in range(4)]
        + [_trade(-1, coin="ETH")]
        + [_trade(-1, coin="DOGE") for _ in range(4)]
        + [_trade(1, coin="DOGE")]
        + [_trade(1, coin="SOL") for _ in range(3)]
    )
    tip = insights.best_coin_tip(trades)
    warning = insights.worst_coin_warning(trades)
    assert tip is not None and tip.title == "ETH Performance"
    assert "80%" in tip.message
    assert warning is not None and warning.title == "DOGE Caution"
    assert "20%" in warning.message


def test_coin_rules_ignore_small_groups():
    trades = [_trade(1, coin="ETH") for _ in range(4)] + [_trade(-1, coin="DOGE") for _ in range(4)]
    assert insights.best_coin_tip(trades) is None
    assert insights.worst_coin_warning(trades) is None


def test_win_streak_uses_entry_time_order():
    pnls = [1, 1, -1, 1, 1, 1, 1, -1]
    trades = [_trade(p) for p in pnls]
    assert longest_win_streak(list(reversed(trades))) == 4
    assert insights.win_streak_achievement(trades) is None


def test_win_streak_achievement():
    trades = [_trade(1) for _ in range(6)] + [_trade(-2)]
    achievement = insights.win_streak_achievement(trades)
    assert achievement is not None
    assert "6 trades" in achievement.message


def test_calm_trading_tip():
    trades = [_trade(p, emotion=TradeEmotion.CALM) for p in (1, 1, 1, -1, -1)]
    tip = insights.calm_trading_tip(trades)
    assert tip is not None
    assert "60%" in tip.message


def test_calm_trading_below_threshold():
    trades = [_trade(p, emotion=TradeEmotion.CALM) for p in (1, 1, -1, -1, -1)]
    assert insights.calm_trading_tip(trades) is None


def test_bot_vs_manual_tip():
    bots = [_trade(1, is_from_bot=True) for _ in range(8)] + [_trade(-1, is_from_bot=True) for _ in range(2)]
    manual = [_trade(1) for _ in range(5)] + [_trade(-1) for _ in range(5)]
    tip = insights.bot_vs_manual_tip(bots + manual)
    assert tip is not None
    assert tip.message.startswith("Bot trades perform better (80% win rate)")


def test_bot_vs_manual_requires_ten_of_each():
    bots = [_trade(1, is_from_bot=True) for _ in range(9)]
    manual = [_trade(-1) for _ in range(10)]
    assert insights.bot_vs_manual_tip(bots + manual) is None


def test_bot_vs_manual_needs_ten_point_gap():
    bots = [_trade(1, is_from_bot=True) for _ in range(6)] + [_trade(-1, is_from_bot=True) for _ in range(4)]
    manual = [_trade(1) for _ in range(6)] + [_trade(-1) for _ in range(5)]
    assert insights.bot_vs_manual_tip(bots + manual) is None


def test_rules_keep_fixed_order():
    trades = (
        [_trade(-5, emotion=TradeEmotion.FOMO, hour=3) for _ in range(5)]
        + [_trade(-5, emotion=TradeEmotion.REVENGE)]
        + [_trade(20, strategy="Trend", coin="ETH") for _ in range(6)]
    )
    titles = _titles(generate_insights(trades))
    assert titles == [
        "FOMO Warning",
        "Revenge Trading",
        "Night Trading",
        "Best Strategy",
        "ETH Performance",
        "BTC Caution",
        "Winning Streak",
    ]


def test_percentages_round_half_up():
    assert insights.format_percent(Decimal("62.5")) == "63"
    assert insights.format_percent(Decimal("66.6666")) == "67"
    assert insights.format_money(Decimal("10.005")) == "10.01"


@pytest.mark.parametrize("size", [1, 2, 4, 5, 9, 10, 11])
def test_no_rule_fails_on_small_or_uniform_samples(size):
    for pnl in (-1, 0, 1):
        for emotion in (None, TradeEmotion.FOMO, TradeEmotion.CALM, TradeEmotion.REVENGE):
            trades = [
                _trade(pnl, emotion=emotion, strategy="S", hour=2, is_from_bot=i % 2 == 0)
                for i in range(size)
            ]
            result = generate_insights(trades)
            assert result
            for rule in insights.RULES:
                rule(trades)
