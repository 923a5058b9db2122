from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.exceptions import AuthorizationError
from models.message import Message
from services.message_store import MessageStore
from utils.pairs import conversation_key, parse_conversation_key


@dataclass
class PollResult:
    conversation_key: str
    messages: List[Message] = field(default_factory=list)
    cursor: int = 0


class ChatSync:
    """
    Фасад чата для клиентов, которые опрашивают сервер по таймеру.
    Между опросами ничего не хранит, всё состояние хранится в курсоре клиента.
    """

    def __init__(self, session: AsyncSession, batch_limit: Optional[int] = None):
        self.store = MessageStore(session)
        self.batch_limit = batch_limit or settings.POLL_BATCH_LIMIT

    async def poll(self, key: str, cursor: int = 0, viewer_id: Optional[int] = None) -> PollResult:
        u1, u2 = parse_conversation_key(key)
        if viewer_id is not None and viewer_id not in (u1, u2):
            raise AuthorizationError(f"User {viewer_id} is not part of conversation {u1}:{u2}")

        canonical = conversation_key(u1, u2)
        messages = await self.store.read_since(canonical, cursor, limit=self.batch_limit)
        # пустой ответ оставляет курсор на месте
        new_cursor = messages[-1].sequence if messages else cursor
        return PollResult(conversation_key=canonical, messages=messages, cursor=new_cursor)

    async def poll_between(self, user_id: int, other_user_id: int, cursor: int = 0) -> PollResult:
        return await self.poll(conversation_key(user_id, other_user_id), cursor, viewer_id=user_id)

    async def send(self, sender_id: int, receiver_id: int, body: str) -> Message:
        return await self.store.append(conversation_key(sender_id, receiver_id), sender_id, body)

    async def send_to_conversation(self, key: str, sender_id: int, body: str) -> Message:
        return await self.store.append(key, sender_id, body)
