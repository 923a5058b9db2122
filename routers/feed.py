from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.database import get_db
from schemas.user import CandidateRead
from services.feed_service import FeedService
from utils.user_helpers import to_candidate_reads

router = APIRouter(prefix="/feed", tags=["feed"])


@router.get(
    "/",
    response_model=List[CandidateRead],
    summary="Получить ленту кандидатов"
)
async def get_feed(
    user_id: int = Query(..., ge=1, description="Кто смотрит ленту"),
    game_id: Optional[int] = Query(None, ge=0, description="Фильтр по игре, 0 = все игры"),
    limit: Optional[int] = Query(None, ge=1, le=settings.FEED_MAX_LIMIT),
    db: AsyncSession = Depends(get_db),
) -> List[CandidateRead]:
    # Пустой список: "кандидатов больше нет", а не ошибка
    users = await FeedService(db).get_feed(user_id, game_id=game_id, limit=limit)
    return to_candidate_reads(users)
