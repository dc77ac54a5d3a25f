from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api import deps
from app.schemas.analytics import (
    CoinPerformanceResponse,
    EmotionPerformanceResponse,
    HourPerformanceResponse,
    InsightResponse,
    InsightsResponse,
    StrategyPerformanceResponse,
    SummaryResponse,
)
from app.services import analytics
from app.services.insights import INSIGHT_SAMPLE_SIZE, generate_insights
from app.services.trades import fetch_closed_trades, fetch_recent_closed_trades
from app.utils.time import to_utc

router = APIRouter(prefix="/analytics", tags=["analytics"])

logger = logging.getLogger(__name__)


@router.get("/summary", response_model=SummaryResponse)
def get_summary(
    start_date: Optional[datetime] = Query(default=None, alias="startDate"),
    end_date: Optional[datetime] = Query(default=None, alias="endDate"),
    db: Session = Depends(deps.get_db),
    user_id: str = Depends(deps.get_current_user_id),
) -> SummaryResponse:
    if start_date is not None and end_date is not None and to_utc(start_date) > to_utc(end_date):
        raise HTTPException(status_code=400, detail="startDate must not be after endDate")

    trades = fetch_closed_trades(db, user_id, start_date, end_date)
    summary = analytics.summarize(trades)
    logger.debug("Summary for user %s over %d trades", user_id, summary.total_trades)
    return SummaryResponse.from_summary(summary)


@router.get("/by-emotion", response_model=list[EmotionPerformanceResponse])
def get_by_emotion(
    db: Session = Depends(deps.get_db),
    user_id: str = Depends(deps.get_current_user_id),
) -> list[EmotionPerformanceResponse]:
    groups = analytics.performance_by_emotion(fetch_closed_trades(db, user_id))
    return [EmotionPerformanceResponse.from_group(group) for group in groups]


@router.get("/by-strategy", response_model=list[StrategyPerformanceResponse])
def get_by_strategy(
    db: Session = Depends(deps.get_db),
    user_id: str = Depends(deps.get_current_user_id),
) -> list[StrategyPerformanceResponse]:
    groups = analytics.performance_by_strategy(fetch_closed_trades(db, user_id))
    return [StrategyPerformanceResponse.from_group(group) for group in groups]


@router.get("/by-coin", response_model=list[CoinPerformanceResponse])
def get_by_coin(
    db: Session = Depends(deps.get_db),
    user_id: str = Depends(deps.get_current_user_id),
) -> list[CoinPerformanceResponse]:
    groups = analytics.performance_by_coin(fetch_closed_trades(db, user_id))
    return [CoinPerformanceResponse.from_group(group) for group in groups]


@router.get("/by-time", response_model=list[HourPerformanceResponse])
def get_by_time(
    db: Session = Depends(deps.get_db),
    user_id: str = Depends(deps.get_current_user_id),
) -> list[HourPerformanceResponse]:
    groups = analytics.performance_by_hour(fetch_closed_trades(db, user_id))
    return [HourPerformanceResponse.from_group(group) for group in groups]


@router.get("/insights", response_model=InsightsResponse)
def get_insights(
    db: Session = Depends(deps.get_db),
    user_id: str = Depends(deps.get_current_user_id),
) -> InsightsResponse:
    trades = fetch_recent_closed_trades(db, user_id, INSIGHT_SAMPLE_SIZE)
    insights = generate_insights(trades)
    logger.debug("Generated %d insights for user %s from %d trades", len(insights), user_id, len(trades))
    return InsightsResponse(insights=[InsightResponse.from_insight(insight) for insight in insights])
