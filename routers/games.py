from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from models.game import Game
from schemas.game import GameRead

router = APIRouter(prefix="/games", tags=["games"])


@router.get(
    "/",
    response_model=List[GameRead],
    summary="Список игр для фильтра ленты",
)
async def list_games(db: AsyncSession = Depends(get_db)) -> List[GameRead]:
    result = await db.execute(select(Game).order_by(Game.name))
    return [GameRead.model_validate(game) for game in result.scalars().all()]
