from sqlalchemy import Column, BigInteger, DateTime, String, Text, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .base import Base
from .game import Game


class User(Base):
    """Игрок. Ядро только читает эту таблицу; пишет её сервис профилей."""

    __tablename__ = "users"

    id = Column(BigInteger, primary_key=True, index=True)
    username = Column(String(64), nullable=False)
    bio = Column(Text, nullable=True)
    rank_tier = Column(String(64), nullable=True)
    role = Column(String(64), nullable=True)
    game_id = Column(BigInteger, ForeignKey("games.id", ondelete="SET NULL"), nullable=True, index=True)
    avatar_url = Column(String(512), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    game = relationship(Game, lazy="joined")

    def __repr__(self):
        return f"<User id={self.id} username={self.username}>"
