from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy import and_, not_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.exceptions import ValidationError
from models.game import Game
from models.match import Match
from models.swipe import LIKE, SwipeAction
from models.user import User
from services.swipe_store import SwipeStore


class FeedService:
    """
    Лента кандидатов. Курсора на сервере нет: каждый запрос заново
    строит фильтр исключений по текущему состоянию журнала свайпов.
    """

    def __init__(self, session: AsyncSession, resurface_after_seconds: Optional[int] = None):
        self.session = session
        self.swipes = SwipeStore(session)
        if resurface_after_seconds is None:
            resurface_after_seconds = settings.PASS_RESURFACE_AFTER_SECONDS
        self.resurface_after_seconds = resurface_after_seconds

    def _swiped_ids(self, user_id: int):
        effective = SwipeAction.id.in_(self.swipes.effective_ids_subquery(user_id))
        stmt = select(SwipeAction.target_id).where(effective)
        if self.resurface_after_seconds is None:
            return stmt

        # pass старше окна снова попадает в ленту, like не возвращается никогда
        cutoff = datetime.now(timezone.utc) - timedelta(seconds=self.resurface_after_seconds)
        return stmt.where(
            or_(
                SwipeAction.decision == LIKE,
                SwipeAction.created_at >= cutoff,
            )
        )

    async def get_feed(
        self,
        user_id: int,
        game_id: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[User]:
        if await self.session.get(User, user_id) is None:
            raise ValidationError(f"Unknown user: {user_id}")
        if game_id and await self.session.get(Game, game_id) is None:
            raise ValidationError(f"Unknown game: {game_id}")

        sub_swiped = self._swiped_ids(user_id)
        sub_matched1 = select(Match.user1_id).where(Match.user2_id == user_id)
        sub_matched2 = select(Match.user2_id).where(Match.user1_id == user_id)
        stmt = select(User).where(
            and_(
                User.id != user_id,
                not_(User.id.in_(sub_swiped)),
                not_(User.id.in_(sub_matched1)),
                not_(User.id.in_(sub_matched2)),
            )
        )

        # 0 или None: все игры
        if game_id:
            stmt = stmt.where(User.game_id == game_id)

        stmt = stmt.order_by(User.id).limit(limit or settings.FEED_DEFAULT_LIMIT)
        result = await self.session.execute(stmt)
        return list(result.unique().scalars().all())
