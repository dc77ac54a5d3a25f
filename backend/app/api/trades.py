from __future__ import annotations

from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile, status
from sqlalchemy.orm import Session

from app.api import deps
from app.models.trades import Trade, TradeDirection, TradeEmotion
from app.schemas.trades import (
    BotTradeImport,
    EmotionLabel,
    TradeCreate,
    TradeFilter,
    TradeImportResponse,
    TradeResponse,
    TradeUpdate,
    emotion_labels,
)
from app.services import trades as trade_service
from app.services.importer import ImportErrorDetail, TradeImporter

router = APIRouter(prefix="/trades", tags=["trades"])

NOT_FOUND = "Trade not found"


def _import_response(trades: List[Trade]) -> TradeImportResponse:
    return TradeImportResponse(
        message=f"{len(trades)} trades imported successfully.",
        trades=[TradeResponse.model_validate(trade) for trade in trades],
    )


@router.get("/", response_model=list[TradeResponse])
def list_trades(
    coin: str | None = Query(None),
    direction: TradeDirection | None = Query(None),
    emotion: TradeEmotion | None = Query(None),
    strategy: str | None = Query(None),
    is_from_bot: bool | None = Query(None, alias="isFromBot"),
    start_date: datetime | None = Query(None, alias="startDate"),
    end_date: datetime | None = Query(None, alias="endDate"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100, alias="pageSize"),
    db: Session = Depends(deps.get_db),
    user_id: str = Depends(deps.get_current_user_id),
) -> list[Trade]:
    filters = TradeFilter(
        coin=coin,
        direction=direction,
        emotion=emotion,
        strategy=strategy,
        is_from_bot=is_from_bot,
        start_date=start_date,
        end_date=end_date,
        page=page,
        page_size=page_size,
    )
    return trade_service.list_trades(db, user_id, filters)


@router.get("/emotions", response_model=list[EmotionLabel])
def list_emotions() -> list[EmotionLabel]:
    return emotion_labels()


@router.get("/{trade_id}", response_model=TradeResponse)
def get_trade(
    trade_id: str,
    db: Session = Depends(deps.get_db),
    user_id: str = Depends(deps.get_current_user_id),
) -> Trade:
    trade = trade_service.get_trade(db, user_id, trade_id)
    if trade is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return trade


@router.post("/", response_model=TradeResponse, status_code=201)
def create_trade(
    payload: TradeCreate,
    db: Session = Depends(deps.get_db),
    user_id: str = Depends(deps.get_current_user_id),
) -> Trade:
    return trade_service.create_trade(db, user_id, payload)


@router.api_route("/{trade_id}", methods=["PUT", "PATCH"], response_model=TradeResponse)
def update_trade(
    trade_id: str,
    payload: TradeUpdate,
    db: Session = Depends(deps.get_db),
    user_id: str = Depends(deps.get_current_user_id),
) -> Trade:
    trade = trade_service.update_trade(db, user_id, trade_id, payload)
    if trade is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return trade


@router.delete("/{trade_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_trade(
    trade_id: str,
    db: Session = Depends(deps.get_db),
    user_id: str = Depends(deps.get_current_user_id),
) -> Response:
    if not trade_service.delete_trade(db, user_id, trade_id):
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/import", response_model=TradeImportResponse)
def import_bot_trades(
    payload: list[BotTradeImport],
    db: Session = Depends(deps.get_db),
    user_id: str = Depends(deps.get_current_user_id),
) -> TradeImportResponse:
    trades = trade_service.import_bot_trades(db, user_id, payload)
    return _import_response(trades)


@router.post("/import/csv", response_model=TradeImportResponse)
def import_csv(
    file: UploadFile = File(...),
    db: Session = Depends(deps.get_db),
    user_id: str = Depends(deps.get_current_user_id),
) -> TradeImportResponse:
    filename = (file.filename or "").lower()
    if not filename.endswith(".csv"):
        raise HTTPException(status_code=400, detail="Expected a CSV file")

    importer = TradeImporter(db, user_id)
    try:
        trades = importer.import_csv(file.file.read())
    except ImportErrorDetail as exc:
        detail: dict[str, object] = {"message": exc.detailed_message}
        if exc.row_number is not None:
            detail["row_number"] = exc.row_number
        raise HTTPException(status_code=400, detail=detail) from exc
    return _import_response(trades)
