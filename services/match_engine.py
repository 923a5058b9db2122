import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import AuthorizationError, ConflictError, ValidationError
from core.locks import KeyedLock, acquire_pair_advisory_lock
from core.retry import run_with_retry
from models.match import Match
from models.swipe import DECISIONS, LIKE
from models.user import User
from services.swipe_store import SwipeStore
from utils.pairs import canonical_pair, parse_conversation_key

logger = logging.getLogger(__name__)


@dataclass
class SwipeOutcome:
    matched: bool
    match_key: Optional[str] = None
    match_id: Optional[int] = None


class MatchEngine:
    """
    Записывает свайпы и создаёт матч ровно один раз на пару.

    Проверка взаимности и создание матча выполняются в одной транзакции
    под блокировкой канонической пары: asyncio-лок внутри процесса и
    advisory-лок PostgreSQL между процессами. Уникальный индекс на пару
    остаётся последней линией: нарушение превращается в ConflictError,
    и проигравший вызов получает matched=False.
    """

    # общий для всех запросов процесса
    pair_locks = KeyedLock()

    def __init__(self, session: AsyncSession):
        self.session = session
        self.swipes = SwipeStore(session)

    async def record_swipe(self, swiper_id: int, target_id: int, decision: str) -> SwipeOutcome:
        if decision not in DECISIONS:
            raise ValidationError(f"Unknown swipe decision: {decision!r}")
        if swiper_id == target_id:
            raise ValidationError("You cannot swipe yourself")

        pair = canonical_pair(swiper_id, target_id)
        async with self.pair_locks.hold(pair):
            # одно время на весь вызов: по нему свайп и созданный им матч
            # находятся после сбоя во время commit
            at = datetime.now(timezone.utc)

            def record():
                return self._record(swiper_id, target_id, decision, at)

            def recover():
                return self._stored_outcome(swiper_id, target_id, decision, at)

            try:
                return await run_with_retry(self.session, record, recover=recover)
            except ConflictError:
                # матч уже создан параллельным вызовом; повторяем свайп,
                # теперь он увидит существующий матч
                logger.info("Match %s:%s created concurrently, re-recording swipe", *pair)
                return await run_with_retry(self.session, record, recover=recover)

    async def _record(
        self, swiper_id: int, target_id: int, decision: str, at: datetime
    ) -> SwipeOutcome:
        await self._ensure_users_exist(swiper_id, target_id)

        u1, u2 = canonical_pair(swiper_id, target_id)
        await acquire_pair_advisory_lock(self.session, u1, u2)

        await self.swipes.append(swiper_id, target_id, decision, created_at=at)
        logger.debug("Swipe %s→%s %s", swiper_id, target_id, decision)

        # матч неизменяем: после него свайпы только пишутся в журнал
        if await self._find_match(u1, u2) is not None:
            return SwipeOutcome(matched=False)

        if decision != LIKE:
            return SwipeOutcome(matched=False)

        if await self.swipes.reverse_decision(swiper_id, target_id) != LIKE:
            return SwipeOutcome(matched=False)

        match = await self._create_match(u1, u2, created_at=at)
        logger.info("Match created: %s (id=%s)", match.key, match.id)
        return SwipeOutcome(matched=True, match_key=match.key, match_id=match.id)

    async def _stored_outcome(
        self, swiper_id: int, target_id: int, decision: str, at: datetime
    ) -> Optional[SwipeOutcome]:
        """Итог уже зафиксированного вызова или None, если свайп не записан."""
        if await self.swipes.find(swiper_id, target_id, at) is None:
            return None

        u1, u2 = canonical_pair(swiper_id, target_id)
        result = await self.session.execute(
            select(Match).where(
                Match.user1_id == u1,
                Match.user2_id == u2,
                Match.created_at == at,
            )
        )
        match = result.scalar_one_or_none()
        if decision != LIKE or match is None:
            return SwipeOutcome(matched=False)
        return SwipeOutcome(matched=True, match_key=match.key, match_id=match.id)

    async def _ensure_users_exist(self, *user_ids: int) -> None:
        result = await self.session.execute(
            select(func.count(User.id)).where(User.id.in_(user_ids))
        )
        if result.scalar_one() != len(set(user_ids)):
            raise ValidationError("Unknown swiper or target user")

    async def _find_match(self, u1: int, u2: int) -> Optional[Match]:
        result = await self.session.execute(
            select(Match).where(Match.user1_id == u1, Match.user2_id == u2)
        )
        return result.scalar_one_or_none()

    async def _create_match(self, u1: int, u2: int, created_at: Optional[datetime] = None) -> Match:
        match = Match(
            user1_id=u1,
            user2_id=u2,
            last_sequence=0,
            created_at=created_at or datetime.now(timezone.utc),
        )
        self.session.add(match)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise ConflictError(f"Match {u1}:{u2} already exists") from exc
        return match

    async def get_match(self, user_a: int, user_b: int) -> Optional[Match]:
        u1, u2 = canonical_pair(user_a, user_b)
        return await self._find_match(u1, u2)

    async def require_match(self, conversation_key: str) -> Match:
        """Матч по ключу переписки или AuthorizationError."""
        u1, u2 = parse_conversation_key(conversation_key)
        match = await self._find_match(u1, u2)
        if match is None:
            raise AuthorizationError(f"No conversation {u1}:{u2}")
        return match

    async def list_matches(self, user_id: int) -> List[Tuple[Match, User]]:
        """Матчи пользователя вместе с собеседником, новые первыми."""
        if await self.session.get(User, user_id) is None:
            raise ValidationError(f"Unknown user: {user_id}")

        result = await self.session.execute(
            select(Match)
            .where(
                or_(
                    Match.user1_id == user_id,
                    Match.user2_id == user_id,
                )
            )
            .order_by(Match.created_at.desc(), Match.id)
        )
        matches = result.scalars().all()
        if not matches:
            return []

        other_ids = [match.other_user_id(user_id) for match in matches]
        users = await self.session.execute(select(User).where(User.id.in_(other_ids)))
        by_id = {user.id: user for user in users.unique().scalars().all()}

        return [
            (match, by_id[match.other_user_id(user_id)])
            for match in matches
            if match.other_user_id(user_id) in by_id
        ]
