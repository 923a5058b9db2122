from sqlalchemy import func, select

from models.match import Match
from models.message import Message
from models.swipe import LIKE, SwipeAction
from models.user import User
from services.match_engine import MatchEngine
from services.message_store import MessageStore
from utils import reset_db


async def count(session_factory, model):
    async with session_factory() as session:
        return (await session.execute(select(func.count()).select_from(model))).scalar_one()


async def test_clear_interactions_keeps_players(engine, session_factory, players, monkeypatch):
    async with session_factory() as session:
        matches = MatchEngine(session)
        await matches.record_swipe(1, 2, LIKE)
        await matches.record_swipe(2, 1, LIKE)
        await MessageStore(session).append("1:2", 1, "gl hf")

    monkeypatch.setattr(reset_db, "engine", engine)
    await reset_db.clear_interactions()

    for model in (Message, Match, SwipeAction):
        assert await count(session_factory, model) == 0
    assert await count(session_factory, User) == len(players)
