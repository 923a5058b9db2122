from typing import Optional

from pydantic import BaseModel, Field


class CandidateRead(BaseModel):
    id: int = Field(..., description="ID игрока")
    username: str = Field(..., description="Никнейм")
    rank_tier: Optional[str] = Field(None, description="Ранг")
    role: Optional[str] = Field(None, description="Роль в команде")
    game_name: Optional[str] = Field(None, description="Основная игра")
    bio: Optional[str] = Field(None, description="О себе")
    avatar_ref: Optional[str] = Field(None, description="Ссылка на аватар во внешнем хранилище")

    class Config:
        from_attributes = True
        validate_by_name = True
