from sqlalchemy import Column, Integer, BigInteger, DateTime, String, ForeignKey, CheckConstraint, Index
from sqlalchemy.sql import func

from .base import Base

LIKE = "like"
PASS = "pass"
DECISIONS = (LIKE, PASS)


class SwipeAction(Base):
    """
    Журнал свайпов, только добавление.
    Действующее решение по паре (swiper, target): запись с наибольшим id.
    """

    __tablename__ = "swipes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    swiper_id = Column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    target_id = Column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    decision = Column(String(8), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("swiper_id != target_id", name="ck_swipes_no_self_swipe"),
        CheckConstraint("decision IN ('like', 'pass')", name="ck_swipes_decision"),
        Index("ix_swipes_pair", "swiper_id", "target_id", "id"),
    )

    def __repr__(self):
        return f"<SwipeAction {self.swiper_id}→{self.target_id} {self.decision}>"
