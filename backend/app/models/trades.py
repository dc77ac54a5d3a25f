from __future__ import annotations

import enum
from uuid import uuid4

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Enum, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from app.utils.time import utc_now

from .base import Base

PRICE = Numeric(20, 8)


class TradeDirection(str, enum.Enum):
    LONG = "Long"
    SHORT = "Short"


class TradeEmotion(str, enum.Enum):
    FOMO = "FOMO"
    FEAR = "Fear"
    GREED = "Greed"
    REVENGE = "Revenge"
    CONFIDENT = "Confident"
    UNCERTAIN = "Uncertain"
    CALM = "Calm"
    EXCITED = "Excited"
    ANXIOUS = "Anxious"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Trade(Base):
    __tablename__ = "trades"
    __table_args__ = (CheckConstraint("leverage >= 1", name="ck_trades_leverage_positive"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    coin = Column(String(32), nullable=False)
    timeframe = Column(String(16), nullable=False, default="1h")

    entry_price = Column(PRICE, nullable=False)
    exit_price = Column(PRICE, nullable=True)
    position_size = Column(PRICE, nullable=False)
    leverage = Column(Integer, nullable=False, default=1)
    direction = Column(
        Enum(TradeDirection, native_enum=False, length=16, values_callable=_enum_values),
        nullable=False,
    )

    entry_time = Column(DateTime(timezone=True), nullable=False, index=True)
    exit_time = Column(DateTime(timezone=True), nullable=True)

    pnl = Column(PRICE, nullable=True)
    pnl_percent = Column(PRICE, nullable=True)

    strategy = Column(String(128), nullable=True)
    emotion = Column(
        Enum(TradeEmotion, native_enum=False, length=16, values_callable=_enum_values),
        nullable=True,
    )
    notes = Column(Text, nullable=True)

    is_from_bot = Column(Boolean, nullable=False, default=False)
    bot_name = Column(String(128), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="trades")