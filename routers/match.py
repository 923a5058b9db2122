# routers/match.py

from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from schemas.match import MatchRead
from services.match_engine import MatchEngine
from utils.user_helpers import to_match_read

router = APIRouter(prefix="/matches", tags=["matches"])


@router.get(
    "/",
    response_model=List[MatchRead],
    summary="Список пользователей, с которыми у вас совпадения"
)
async def get_my_matches(
    user_id: int = Query(..., ge=1),
    db: AsyncSession = Depends(get_db),
) -> List[MatchRead]:
    pairs = await MatchEngine(db).list_matches(user_id)
    return [to_match_read(match, other) for match, other in pairs]
