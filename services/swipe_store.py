from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ValidationError
from models.swipe import DECISIONS, SwipeAction


class SwipeStore:
    """
    Журнал свайпов. Пишет только добавлением, ничего не удаляет.

    Все чтения идут через ту же сессию, что и запись, поэтому проверка
    "есть ли встречный лайк прямо сейчас" видит собственные незакоммиченные
    записи и всё, что закоммичено до неё.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(
        self,
        swiper_id: int,
        target_id: int,
        decision: str,
        created_at: Optional[datetime] = None,
    ) -> SwipeAction:
        if decision not in DECISIONS:
            raise ValidationError(f"Unknown swipe decision: {decision!r}")
        if swiper_id == target_id:
            raise ValidationError("You cannot swipe yourself")

        action = SwipeAction(
            swiper_id=swiper_id,
            target_id=target_id,
            decision=decision,
            created_at=created_at or datetime.now(timezone.utc),
        )
        self.session.add(action)
        await self.session.flush()
        return action

    async def find(self, swiper_id: int, target_id: int, created_at: datetime) -> Optional[SwipeAction]:
        """Свайп по естественному ключу (swiper, target, время записи)."""
        result = await self.session.execute(
            select(SwipeAction)
            .where(
                SwipeAction.swiper_id == swiper_id,
                SwipeAction.target_id == target_id,
                SwipeAction.created_at == created_at,
            )
            .order_by(SwipeAction.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def effective(self, swiper_id: int, target_id: int) -> Optional[SwipeAction]:
        result = await self.session.execute(
            select(SwipeAction)
            .where(
                SwipeAction.swiper_id == swiper_id,
                SwipeAction.target_id == target_id,
            )
            .order_by(SwipeAction.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def effective_decision(self, swiper_id: int, target_id: int) -> Optional[str]:
        action = await self.effective(swiper_id, target_id)
        return action.decision if action else None

    async def reverse_decision(self, swiper_id: int, target_id: int) -> Optional[str]:
        """Действующее решение target → swiper."""
        return await self.effective_decision(target_id, swiper_id)

    async def history(self, swiper_id: int, target_id: int) -> List[SwipeAction]:
        result = await self.session.execute(
            select(SwipeAction)
            .where(
                SwipeAction.swiper_id == swiper_id,
                SwipeAction.target_id == target_id,
            )
            .order_by(SwipeAction.id)
        )
        return list(result.scalars().all())

    def effective_ids_subquery(self, swiper_id: int):
        # id последнего свайпа по каждой цели
        return (
            select(func.max(SwipeAction.id))
            .where(SwipeAction.swiper_id == swiper_id)
            .group_by(SwipeAction.target_id)
            .correlate(None)
        )

    async def swiped_targets(self, swiper_id: int) -> Dict[int, SwipeAction]:
        result = await self.session.execute(
            select(SwipeAction).where(SwipeAction.id.in_(self.effective_ids_subquery(swiper_id)))
        )
        return {action.target_id: action for action in result.scalars().all()}
