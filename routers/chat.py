from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from schemas.message import MessageCreate, MessageRead, PollResponse
from services.chat_sync import ChatSync, PollResult
from utils.pairs import conversation_key, parse_conversation_key
from utils.user_helpers import to_message_read

router = APIRouter(tags=["chat"])


def to_poll_response(result: PollResult) -> PollResponse:
    return PollResponse(
        conversation_key=result.conversation_key,
        messages=[to_message_read(m, result.conversation_key) for m in result.messages],
        cursor=result.cursor,
    )


@router.post(
    "/messages/",
    response_model=MessageRead,
    status_code=status.HTTP_201_CREATED,
    summary="Отправить сообщение собеседнику по матчу",
)
async def send_message(
    payload: MessageCreate,
    db: AsyncSession = Depends(get_db),
) -> MessageRead:
    chat = ChatSync(db)
    if payload.conversation_key is not None:
        key = conversation_key(*parse_conversation_key(payload.conversation_key))
        message = await chat.send_to_conversation(key, payload.sender_id, payload.message)
    else:
        key = conversation_key(payload.sender_id, payload.receiver_id)
        message = await chat.send(payload.sender_id, payload.receiver_id, payload.message)
    return to_message_read(message, key)


@router.get(
    "/messages/",
    response_model=PollResponse,
    summary="Новые сообщения между двумя пользователями после курсора",
)
async def poll_messages(
    user_1: int = Query(..., ge=1, description="Кто опрашивает"),
    user_2: int = Query(..., ge=1, description="Собеседник"),
    cursor: int = Query(0, ge=0, description="Последний увиденный номер сообщения"),
    db: AsyncSession = Depends(get_db),
) -> PollResponse:
    result = await ChatSync(db).poll_between(user_1, user_2, cursor)
    return to_poll_response(result)


@router.get(
    "/conversations/{key}/messages",
    response_model=PollResponse,
    summary="Новые сообщения переписки после курсора",
)
async def poll_conversation(
    key: str,
    cursor: int = Query(0, ge=0),
    viewer_id: Optional[int] = Query(None, ge=1),
    db: AsyncSession = Depends(get_db),
) -> PollResponse:
    result = await ChatSync(db).poll(key, cursor, viewer_id=viewer_id)
    return to_poll_response(result)
