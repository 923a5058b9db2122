from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


class SwipeRequest(BaseModel):
    swiper_id: int = Field(..., ge=1, description="Кто свайпает")
    target_id: int = Field(..., ge=1, description="Кого свайпают")
    action: Literal["like", "pass"] = Field(..., description="Решение: like или pass")


class SwipeResponse(BaseModel):
    matched: bool
    match_key: Optional[str] = Field(None, description="Ключ переписки, только для того, кто создал матч")


class SwipeRead(BaseModel):
    id: int
    swiper_id: int
    target_id: int
    decision: str
    created_at: datetime

    class Config:
        from_attributes = True
