from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from schemas.swipe import SwipeRead, SwipeRequest, SwipeResponse
from services.match_engine import MatchEngine
from services.push_notifier import schedule_match_notification
from services.swipe_store import SwipeStore

router = APIRouter(prefix="/swipes", tags=["swipes"])


@router.post(
    "/",
    response_model=SwipeResponse,
    summary="Свайп (like / pass) и проверка взаимности",
)
async def swipe(
    payload: SwipeRequest,
    db: AsyncSession = Depends(get_db),
) -> SwipeResponse:
    outcome = await MatchEngine(db).record_swipe(payload.swiper_id, payload.target_id, payload.action)

    if outcome.matched:
        # уведомление вне транзакции, его сбой не отменяет матч
        schedule_match_notification(payload.swiper_id, payload.target_id, outcome.match_key)

    return SwipeResponse(matched=outcome.matched, match_key=outcome.match_key)


@router.get(
    "/history",
    response_model=List[SwipeRead],
    summary="Все свайпы по паре в порядке записи (аудит)",
)
async def swipe_history(
    swiper_id: int = Query(..., ge=1),
    target_id: int = Query(..., ge=1),
    db: AsyncSession = Depends(get_db),
) -> List[SwipeRead]:
    actions = await SwipeStore(db).history(swiper_id, target_id)
    return [SwipeRead.model_validate(action) for action in actions]
