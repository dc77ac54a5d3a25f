"""Per-user trade store.

Every query here is scoped by ``user_id``; a trade that belongs to another
user behaves exactly like a missing one. Writes go through ``apply_pnl`` in
the same unit of work as the field changes they accompany.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from app.models.trades import Trade
from app.schemas.trades import BotTradeImport, TradeCreate, TradeFilter, TradeUpdate
from app.services.pnl import apply_pnl
from app.services.system_logs import record_log
from app.utils.time import to_utc, utc_now

logger = logging.getLogger(__name__)

DATETIME_FIELDS = ("entry_time", "exit_time")


def _normalise_datetimes(values: dict) -> dict:
    for name in DATETIME_FIELDS:
        if values.get(name) is not None:
            values[name] = to_utc(values[name])
    return values


def _user_trades(db: Session, user_id: str) -> Query:
    return db.query(Trade).filter(Trade.user_id == user_id)


def _closed_trades(db: Session, user_id: str) -> Query:
    return _user_trades(db, user_id).filter(Trade.exit_price.isnot(None))


def fetch_closed_trades(
    db: Session,
    user_id: str,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[Trade]:
    """Closed trades of ``user_id`` whose entry time falls in ``[start, end]``."""
    query = _closed_trades(db, user_id)
    if start is not None:
        query = query.filter(Trade.entry_time >= to_utc(start))
    if end is not None:
        query = query.filter(Trade.entry_time <= to_utc(end))
    return query.all()


def fetch_recent_closed_trades(db: Session, user_id: str, limit: int) -> List[Trade]:
    return _closed_trades(db, user_id).order_by(Trade.entry_time.desc()).limit(limit).all()


def list_trades(db: Session, user_id: str, filters: TradeFilter) -> List[Trade]:
    query = _user_trades(db, user_id)

    if filters.coin:
        query = query.filter(func.lower(Trade.coin).contains(filters.coin.lower()))
    if filters.direction is not None:
        query = query.filter(Trade.direction == filters.direction)
    if filters.emotion is not None:
        query = query.filter(Trade.emotion == filters.emotion)
    if filters.strategy:
        query = query.filter(
            Trade.strategy.isnot(None),
            func.lower(Trade.strategy).contains(filters.strategy.lower()),
        )
    if filters.is_from_bot is not None:
        query = query.filter(Trade.is_from_bot == filters.is_from_bot)
    if filters.start_date is not None:
        query = query.filter(Trade.entry_time >= to_utc(filters.start_date))
    if filters.end_date is not None:
        query = query.filter(Trade.entry_time <= to_utc(filters.end_date))

    return (
        query.order_by(Trade.entry_time.desc())
        .offset((filters.page - 1) * filters.page_size)
        .limit(filters.page_size)
        .all()
    )


def get_trade(db: Session, user_id: str, trade_id: str) -> Optional[Trade]:
    return _user_trades(db, user_id).filter(Trade.id == trade_id).first()


def create_trade(db: Session, user_id: str, payload: TradeCreate) -> Trade:
    trade = Trade(user_id=user_id, created_at=utc_now(), **_normalise_datetimes(payload.model_dump()))
    apply_pnl(trade)
    db.add(trade)
    db.commit()
    db.refresh(trade)
    logger.info("Trade %s created for user %s (coin=%s, pnl=%s)", trade.id, user_id, trade.coin, trade.pnl)
    return trade


def update_trade(db: Session, user_id: str, trade_id: str, payload: TradeUpdate) -> Optional[Trade]:
    trade = get_trade(db, user_id, trade_id)
    if trade is None:
        return None

    for field, value in _normalise_datetimes(payload.to_orm_updates()).items():
        setattr(trade, field, value)
    trade.updated_at = utc_now()
    apply_pnl(trade)

    db.add(trade)
    db.commit()
    db.refresh(trade)
    logger.info("Trade %s updated for user %s (pnl=%s)", trade.id, user_id, trade.pnl)
    return trade


def delete_trade(db: Session, user_id: str, trade_id: str) -> bool:
    trade = get_trade(db, user_id, trade_id)
    if trade is None:
        return False
    db.delete(trade)
    db.commit()
    logger.info("Trade %s deleted for user %s", trade_id, user_id)
    return True


def build_bot_trades(user_id: str, rows: Iterable[BotTradeImport]) -> List[Trade]:
    now = utc_now()
    trades: List[Trade] = []
    for row in rows:
        values = _normalise_datetimes(row.model_dump())
        trade = Trade(user_id=user_id, is_from_bot=True, timeframe="1h", created_at=now, **values)
        trades.append(apply_pnl(trade))
    return trades


def import_bot_trades(db: Session, user_id: str, rows: Iterable[BotTradeImport]) -> List[Trade]:
    """Insert pre-closed bot trades and their audit entry in a single commit."""
    trades = build_bot_trades(user_id, rows)
    db.add_all(trades)
    record_log(
        db,
        "INFO",
        "trades.import",
        f"Imported {len(trades)} bot trades",
        {"count": len(trades), "bots": sorted({trade.bot_name for trade in trades})},
        user_id=user_id,
        commit=False,
    )
    db.commit()
    for trade in trades:
        db.refresh(trade)
    return trades


__all__ = [
    "create_trade",
    "delete_trade",
    "fetch_closed_trades",
    "fetch_recent_closed_trades",
    "get_trade",
    "import_bot_trades",
    "list_trades",
    "update_trade",
]
