from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


class MessageCreate(BaseModel):
    sender_id: int = Field(..., ge=1, description="Отправитель")
    receiver_id: Optional[int] = Field(None, ge=1, description="Получатель (переписка выводится по паре)")
    conversation_key: Optional[str] = Field(None, description="Ключ переписки вида '12:34'")
    message: str = Field(..., min_length=1, description="Текст сообщения")

    @model_validator(mode="after")
    def check_target(self):
        if (self.receiver_id is None) == (self.conversation_key is None):
            raise ValueError("Provide exactly one of receiver_id or conversation_key")
        return self


class MessageRead(BaseModel):
    id: int
    conversation_key: str
    sender_id: int
    body: str
    sequence: int = Field(..., description="Номер сообщения в переписке, выдаётся сервером")
    created_at: datetime

    class Config:
        from_attributes = True


class PollResponse(BaseModel):
    conversation_key: str
    messages: List[MessageRead]
    cursor: int = Field(..., description="Курсор для следующего опроса")
