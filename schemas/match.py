from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class MatchRead(BaseModel):
    match_id: int = Field(..., description="ID матча")
    match_key: str = Field(..., description="Ключ переписки")
    other_user_id: int = Field(..., description="ID собеседника")
    username: str
    game_name: Optional[str] = None
    rank_tier: Optional[str] = None
    role: Optional[str] = None
    avatar_ref: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
        validate_by_name = True
