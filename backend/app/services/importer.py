from __future__ import annotations

import csv
import io
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Dict, List

from dateutil import parser as date_parser
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.models.trades import Trade, TradeDirection
from app.schemas.trades import BotTradeImport
from app.services.trades import import_bot_trades

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = [
    "coin",
    "entryprice",
    "exitprice",
    "positionsize",
    "direction",
    "entrytime",
    "exittime",
]


def _clean_text(value: str | None) -> str:
    return value.strip() if value is not None else ""


def _parse_required_text(value: str | None, field: str) -> str:
    text = _clean_text(value)
    if not text:
        raise ValueError(f"Missing value for {field}")
    return text


def _parse_decimal_field(value: str | None, *, field: str) -> Decimal:
    text = _parse_required_text(value, field)
    try:
        return Decimal(text)
    except InvalidOperation as exc:
        raise ValueError(f"Invalid decimal value for {field}: {value!r}") from exc


def _parse_leverage(value: str | None) -> int:
    text = _clean_text(value)
    if not text:
        return 1
    try:
        return int(text)
    except ValueError as exc:
        raise ValueError(f"Invalid leverage: {value!r}") from exc


def _parse_direction(value: str | None) -> TradeDirection:
    text = _parse_required_text(value, "direction").lower()
    for member in TradeDirection:
        if member.value.lower() == text:
            return member
    raise ValueError(f"Invalid direction: {value!r} (expected Long or Short)")


def _parse_timestamp(value: str | None, *, field: str) -> datetime:
    text = _parse_required_text(value, field)
    try:
        return date_parser.isoparse(text)
    except ValueError:
        try:
            return date_parser.parse(text)
        except (ValueError, OverflowError) as exc:
            raise ValueError(f"Invalid timestamp for {field}: {value!r}") from exc


def parse_row(row: Dict[str, str]) -> BotTradeImport:
    """Turn one CSV row (lower-cased headers) into a validated bot trade."""
    try:
        return BotTradeImport(
            coin=_parse_required_text(row.get("coin"), "coin"),
            entry_price=_parse_decimal_field(row.get("entryprice"), field="entryPrice"),
            exit_price=_parse_decimal_field(row.get("exitprice"), field="exitPrice"),
            position_size=_parse_decimal_field(row.get("positionsize"), field="positionSize"),
            direction=_parse_direction(row.get("direction")),
            entry_time=_parse_timestamp(row.get("entrytime"), field="entryTime"),
            exit_time=_parse_timestamp(row.get("exittime"), field="exitTime"),
            leverage=_parse_leverage(row.get("leverage")),
            bot_name=_clean_text(row.get("botname")) or "Unknown Bot",
        )
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise ValueError(f"{location}: {first.get('msg')}") from exc


class ImportErrorDetail(Exception):
    def __init__(self, message: str, row_number: int | None = None) -> None:
        super().__init__(message)
        self.row_number = row_number
        self._message = message

    @property
    def message(self) -> str:
        return self._message

    @property
    def detailed_message(self) -> str:
        """Return an error message including the line number when available."""

        if self.row_number is None:
            return self._message
        return f"{self._message} (line {self.row_number})"

    def __str__(self) -> str:  # pragma: no cover - delegated to detailed_message
        return self.detailed_message


class TradeImporter:
    """Bulk import of closed bot trades from a CSV export.

    Line numbers in errors count the header as line 1. Nothing is written
    unless every row parses.
    """

    def __init__(self, db: Session, user_id: str) -> None:
        self.db = db
        self.user_id = user_id

    def import_csv(self, content: bytes | str | io.IOBase) -> List[Trade]:
        if isinstance(content, io.IOBase):
            raw_content = content.read()
        else:
            raw_content = content

        if isinstance(raw_content, (bytes, bytearray)):
            try:
                text = bytes(raw_content).decode("utf-8-sig")
            except UnicodeDecodeError as exc:
                raise ImportErrorDetail("CSV must be UTF-8 encoded") from exc
        elif isinstance(raw_content, str):
            text = raw_content.lstrip("\ufeff")
        else:
            raise ImportErrorDetail("Invalid CSV stream")

        rows = self._parse(text)
        trades = import_bot_trades(self.db, self.user_id, rows)
        logger.info("Imported %d trades from CSV for user %s", len(trades), self.user_id)
        return trades

    def _parse(self, text: str) -> List[BotTradeImport]:
        reader = csv.DictReader(io.StringIO(text.strip()))
        if not reader.fieldnames:
            raise ImportErrorDetail("CSV must contain a header and at least one data row")
        reader.fieldnames = [_clean_text(name).lower() for name in reader.fieldnames]

        missing = [c for c in REQUIRED_COLUMNS if c not in reader.fieldnames]
        if missing:
            raise ImportErrorDetail(f"Missing columns: {', '.join(missing)}")

        rows: List[BotTradeImport] = []
        for row in reader:
            if not any(_clean_text(value) for value in row.values() if isinstance(value, str)):
                continue
            try:
                rows.append(parse_row(row))
            except ValueError as exc:
                raise ImportErrorDetail(str(exc), row_number=reader.line_num) from exc

        if not rows:
            raise ImportErrorDetail("CSV must contain a header and at least one data row")
        return rows
