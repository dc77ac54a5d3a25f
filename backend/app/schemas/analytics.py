from __future__ import annotations

from dataclasses import asdict
from typing import List, Optional

from pydantic import Field

from app.models.trades import TradeEmotion
from app.schemas.trades import CamelModel
from app.services.analytics import GroupPerformance, Summary
from app.services.insights import Insight, InsightType


class SummaryResponse(CamelModel):
    total_trades: int
    winning_trades: int
    losing_trades: int
    win_rate: float
    total_pnl: float = Field(alias="totalPnL")
    average_pnl: float = Field(alias="averagePnL")
    best_trade: float
    worst_trade: float
    average_win: float
    average_loss: float

    @classmethod
    def from_summary(cls, summary: Summary) -> "SummaryResponse":
        return cls(**asdict(summary))


class _GroupResponse(CamelModel):
    trade_count: int
    win_rate: float
    total_pnl: float = Field(alias="totalPnL")


class EmotionPerformanceResponse(_GroupResponse):
    emotion: TradeEmotion
    average_pnl: float = Field(alias="averagePnL")

    @classmethod
    def from_group(cls, group: GroupPerformance) -> "EmotionPerformanceResponse":
        return cls(
            emotion=group.key,
            trade_count=group.trade_count,
            win_rate=group.win_rate,
            total_pnl=group.total_pnl,
            average_pnl=group.average_pnl,
        )


class StrategyPerformanceResponse(_GroupResponse):
    strategy: str
    average_pnl: float = Field(alias="averagePnL")

    @classmethod
    def from_group(cls, group: GroupPerformance) -> "StrategyPerformanceResponse":
        return cls(
            strategy=group.key,
            trade_count=group.trade_count,
            win_rate=group.win_rate,
            total_pnl=group.total_pnl,
            average_pnl=group.average_pnl,
        )


class CoinPerformanceResponse(_GroupResponse):
    coin: str
    average_pnl: float = Field(alias="averagePnL")

    @classmethod
    def from_group(cls, group: GroupPerformance) -> "CoinPerformanceResponse":
        return cls(
            coin=group.key,
            trade_count=group.trade_count,
            win_rate=group.win_rate,
            total_pnl=group.total_pnl,
            average_pnl=group.average_pnl,
        )


class HourPerformanceResponse(_GroupResponse):
    hour: int = Field(ge=0, le=23)

    @classmethod
    def from_group(cls, group: GroupPerformance) -> "HourPerformanceResponse":
        return cls(
            hour=group.key,
            trade_count=group.trade_count,
            win_rate=group.win_rate,
            total_pnl=group.total_pnl,
        )


class InsightResponse(CamelModel):
    type: InsightType
    title: str
    message: str
    emoji: Optional[str] = None

    @classmethod
    def from_insight(cls, insight: Insight) -> "InsightResponse":
        return cls(type=insight.type, title=insight.title, message=insight.message, emoji=insight.emoji)


class InsightsResponse(CamelModel):
    insights: List[InsightResponse]
