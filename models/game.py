from sqlalchemy import Column, BigInteger, String

from .base import Base


class Game(Base):
    __tablename__ = "games"

    id = Column(BigInteger, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)

    def __repr__(self):
        return f"<Game id={self.id} name={self.name}>"
