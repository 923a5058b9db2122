from sqlalchemy import Column, Integer, BigInteger, DateTime, Text, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func

from .base import Base


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    match_id = Column(BigInteger, ForeignKey("matches.id", ondelete="CASCADE"), nullable=False)
    sender_id = Column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    body = Column(Text, nullable=False)
    sequence = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("match_id", "sequence", name="uq_messages_match_sequence"),
        # естественный ключ отправки: по нему находится сообщение после сбоя commit
        UniqueConstraint("match_id", "sender_id", "created_at", name="uq_messages_sender_sent_at"),
    )

    def __repr__(self):
        return f"<Message match={self.match_id} seq={self.sequence} from={self.sender_id}>"
