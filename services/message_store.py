import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.exceptions import AuthorizationError, ValidationError
from core.locks import KeyedLock
from core.retry import run_with_retry
from models.match import Match
from models.message import Message
from services.match_engine import MatchEngine
from utils.pairs import parse_conversation_key

logger = logging.getLogger(__name__)


class MessageStore:
    """
    Упорядоченный журнал сообщений переписки.

    Номер сообщения выдаёт хранилище атомарным инкрементом
    matches.last_sequence в той же транзакции, что и вставка сообщения:
    неудачная запись откатывает и инкремент, поэтому видимые номера идут
    без пропусков и строго по возрастанию.
    """

    conversation_locks = KeyedLock()

    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def clean_body(body: Optional[str]) -> str:
        text = (body or "").strip()
        if not text:
            raise ValidationError("Message body is empty")
        if len(text) > settings.MESSAGE_MAX_LENGTH:
            raise ValidationError(
                f"Message body is longer than {settings.MESSAGE_MAX_LENGTH} characters"
            )
        return text

    async def append(self, conversation_key: str, sender_id: int, body: str) -> Message:
        u1, u2 = parse_conversation_key(conversation_key)
        text = self.clean_body(body)
        if sender_id not in (u1, u2):
            raise AuthorizationError(f"User {sender_id} is not part of conversation {u1}:{u2}")

        async with self.conversation_locks.hold((u1, u2)):
            sent_at = datetime.now(timezone.utc)
            message = await run_with_retry(
                self.session,
                lambda: self._append(u1, u2, sender_id, text, sent_at),
                recover=lambda: self._find_sent(u1, u2, sender_id, sent_at),
            )
        logger.debug("Message %s:%s #%s from %s", u1, u2, message.sequence, sender_id)
        return message

    async def _append(self, u1: int, u2: int, sender_id: int, text: str, sent_at: datetime) -> Message:
        # compare-and-increment: строка матча блокируется до конца транзакции
        result = await self.session.execute(
            update(Match)
            .where(Match.user1_id == u1, Match.user2_id == u2)
            .values(last_sequence=Match.last_sequence + 1)
            .returning(Match.id, Match.last_sequence)
            .execution_options(synchronize_session=False)
        )
        row = result.one_or_none()
        if row is None:
            raise AuthorizationError(f"No conversation {u1}:{u2}")
        match_id, sequence = row

        message = Message(
            match_id=match_id,
            sender_id=sender_id,
            body=text,
            sequence=sequence,
            created_at=sent_at,
        )
        self.session.add(message)
        await self.session.flush()
        return message

    async def _find_sent(self, u1: int, u2: int, sender_id: int, sent_at: datetime) -> Optional[Message]:
        result = await self.session.execute(
            select(Message)
            .join(Match, Match.id == Message.match_id)
            .where(
                Match.user1_id == u1,
                Match.user2_id == u2,
                Message.sender_id == sender_id,
                Message.created_at == sent_at,
            )
        )
        return result.scalar_one_or_none()

    async def read_since(
        self,
        conversation_key: str,
        last_seen_sequence: int = 0,
        limit: Optional[int] = None,
    ) -> List[Message]:
        """Сообщения с sequence > last_seen_sequence по возрастанию."""
        if last_seen_sequence < 0:
            raise ValidationError("Cursor must not be negative")
        match = await MatchEngine(self.session).require_match(conversation_key)

        stmt = (
            select(Message)
            .where(
                Message.match_id == match.id,
                Message.sequence > last_seen_sequence,
            )
            .order_by(Message.sequence)
        )
        if limit:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
