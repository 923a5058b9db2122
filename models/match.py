from sqlalchemy import Column, Integer, BigInteger, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.sql import func

from .base import Base


class Match(Base):
    """Матч = переписка. Пара хранится канонично: user1_id < user2_id."""

    __tablename__ = "matches"

    id = Column(BigInteger, primary_key=True, index=True)
    user1_id = Column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    user2_id = Column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    # последний выданный номер сообщения в переписке
    last_sequence = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("user1_id", "user2_id", name="uq_matches_pair"),
        CheckConstraint("user1_id < user2_id", name="ck_matches_canonical_pair"),
    )

    @property
    def key(self) -> str:
        return f"{self.user1_id}:{self.user2_id}"

    def other_user_id(self, user_id: int) -> int:
        return self.user2_id if self.user1_id == user_id else self.user1_id

    def __repr__(self):
        return f"<Match {self.user1_id}↔{self.user2_id}>"
