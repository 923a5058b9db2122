from pydantic import BaseModel, Field


class GameRead(BaseModel):
    id: int = Field(..., description="ID игры")
    name: str = Field(..., description="Название")

    class Config:
        from_attributes = True
