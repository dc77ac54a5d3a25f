from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from types import MappingProxyType
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.models.trades import TradeDirection, TradeEmotion
from app.utils.time import to_utc

# Display metadata for the emotion picker; the analytics never read it.
EMOTION_DISPLAY = MappingProxyType(
    {
        TradeEmotion.FOMO: ("FOMO", "😰"),
        TradeEmotion.FEAR: ("Fear", "😨"),
        TradeEmotion.GREED: ("Greed", "🤑"),
        TradeEmotion.REVENGE: ("Revenge", "😤"),
        TradeEmotion.CONFIDENT: ("Confident", "😎"),
        TradeEmotion.UNCERTAIN: ("Uncertain", "🤔"),
        TradeEmotion.CALM: ("Calm", "😌"),
        TradeEmotion.EXCITED: ("Excited", "🤩"),
        TradeEmotion.ANXIOUS: ("Anxious", "😟"),
    }
)

PositiveDecimal = Annotated[Decimal, Field(gt=0)]
Leverage = Annotated[int, Field(ge=1)]
Coin = Annotated[str, Field(min_length=1, max_length=32)]
Timeframe = Annotated[str, Field(min_length=1, max_length=16)]
Label = Annotated[str, Field(max_length=128)]

NON_NULLABLE_FIELDS = frozenset(
    {
        "coin",
        "entry_price",
        "position_size",
        "leverage",
        "direction",
        "entry_time",
        "timeframe",
        "is_from_bot",
    }
)


def _clean_optional_text(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _parse_direction(value: Any) -> Any:
    if isinstance(value, str):
        for member in TradeDirection:
            if member.value.lower() == value.strip().lower():
                return member
    return value


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class TradeBase(CamelModel):
    coin: Coin
    entry_price: PositiveDecimal
    position_size: PositiveDecimal
    direction: TradeDirection
    entry_time: datetime
    exit_price: Optional[PositiveDecimal] = None
    leverage: Leverage = 1
    exit_time: Optional[datetime] = None
    timeframe: Timeframe = "1h"
    strategy: Optional[Label] = None
    emotion: Optional[TradeEmotion] = None
    notes: Optional[str] = None
    is_from_bot: bool = False
    bot_name: Optional[Label] = None

    @field_validator("coin")
    @classmethod
    def _upper_coin(cls, value: str) -> str:
        return value.strip().upper()

    @field_validator("direction", mode="before")
    @classmethod
    def _direction(cls, value: Any) -> Any:
        return _parse_direction(value)

    @field_validator("strategy", "notes", "bot_name", mode="before")
    @classmethod
    def _strip_optional(cls, value: Any) -> Any:
        return _clean_optional_text(value)


class TradeCreate(TradeBase):
    pass


class TradeUpdate(CamelModel):
    coin: Optional[Coin] = None
    entry_price: Optional[PositiveDecimal] = None
    exit_price: Optional[PositiveDecimal] = None
    leverage: Optional[Leverage] = None
    position_size: Optional[PositiveDecimal] = None
    direction: Optional[TradeDirection] = None
    entry_time: Optional[datetime] = None
    exit_time: Optional[datetime] = None
    timeframe: Optional[Timeframe] = None
    strategy: Optional[Label] = None
    emotion: Optional[TradeEmotion] = None
    notes: Optional[str] = None
    is_from_bot: Optional[bool] = None
    bot_name: Optional[Label] = None

    @field_validator("coin")
    @classmethod
    def _upper_coin(cls, value: Optional[str]) -> Optional[str]:
        return value.strip().upper() if value is not None else None

    @field_validator("direction", mode="before")
    @classmethod
    def _direction(cls, value: Any) -> Any:
        return _parse_direction(value)

    @field_validator("strategy", "notes", "bot_name", mode="before")
    @classmethod
    def _strip_optional(cls, value: Any) -> Any:
        return _clean_optional_text(value)

    @model_validator(mode="after")
    def _reject_null_required(self) -> "TradeUpdate":
        nulls = sorted(name for name in self.model_fields_set & NON_NULLABLE_FIELDS if getattr(self, name) is None)
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
        return self

    def to_orm_updates(self) -> dict[str, object]:
        return self.model_dump(exclude_unset=True)


class TradeResponse(CamelModel):
    id: str
    coin: str
    entry_price: float
    exit_price: Optional[float]
    leverage: int
    position_size: float
    direction: TradeDirection
    entry_time: datetime
    exit_time: Optional[datetime]
    pnl: Optional[float] = Field(alias="pnL")
    pnl_percent: Optional[float] = Field(alias="pnLPercent")
    timeframe: str
    strategy: Optional[str]
    emotion: Optional[TradeEmotion]
    notes: Optional[str]
    is_from_bot: bool
    bot_name: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime] = None

    # SQLite hands timestamps back naive; they are stored in UTC
    @field_validator("entry_time", "exit_time", "created_at", "updated_at")
    @classmethod
    def _as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_utc(value) if value is not None else None


class BotTradeImport(CamelModel):
    """A closed trade coming from a bot export; always flagged as bot-sourced."""

    coin: Coin
    entry_price: PositiveDecimal
    exit_price: PositiveDecimal
    position_size: PositiveDecimal
    direction: TradeDirection
    entry_time: datetime
    exit_time: datetime
    leverage: Leverage = 1
    bot_name: Label = "Unknown Bot"

    @field_validator("coin")
    @classmethod
    def _upper_coin(cls, value: str) -> str:
        return value.strip().upper()

    @field_validator("direction", mode="before")
    @classmethod
    def _direction(cls, value: Any) -> Any:
        return _parse_direction(value)

    @field_validator("bot_name", mode="before")
    @classmethod
    def _default_bot_name(cls, value: Any) -> Any:
        return _clean_optional_text(value) or "Unknown Bot"


class TradeImportResponse(BaseModel):
    message: str
    trades: List[TradeResponse]


class TradeFilter(BaseModel):
    coin: Optional[str] = None
    direction: Optional[TradeDirection] = None
    emotion: Optional[TradeEmotion] = None
    strategy: Optional[str] = None
    is_from_bot: Optional[bool] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)


class EmotionLabel(BaseModel):
    value: TradeEmotion
    label: str
    emoji: str


def emotion_labels() -> list[EmotionLabel]:
    return [
        EmotionLabel(value=emotion, label=label, emoji=emoji)
        for emotion, (label, emoji) in EMOTION_DISPLAY.items()
    ]
