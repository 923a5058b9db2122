import os

# настройки читаются при импорте core.config
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("STORAGE_RETRY_ATTEMPTS", "5")
os.environ.setdefault("STORAGE_RETRY_BACKOFF_SECONDS", "0.01")

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from models.base import Base
from models.game import Game
from models.user import User
from models import match, message, swipe  # noqa: F401

VALORANT_ID = 12
DOTA_ID = 22


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'squadfinder.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def players(session_factory):
    """Пять игроков: 1-3 в Valorant, 4 в Dota 2, 5 без игры."""
    async with session_factory() as session:
        session.add_all([
            Game(id=VALORANT_ID, name="Valorant"),
            Game(id=DOTA_ID, name="Dota 2"),
        ])
        await session.flush()
        session.add_all([
            User(id=1, username="ShadowNova", rank_tier="Gold", role="Duelist", game_id=VALORANT_ID, bio="Mic on"),
            User(id=2, username="FrostEcho", rank_tier="Diamond", role="Controller", game_id=VALORANT_ID),
            User(id=3, username="RogueHex", rank_tier="Silver", role="Initiator", game_id=VALORANT_ID),
            User(id=4, username="EmberZen", rank_tier="Ancient", role="Carry", game_id=DOTA_ID,
                 avatar_url="avatars/4.png"),
            User(id=5, username="OnyxFlux"),
        ])
        await session.commit()
    return [1, 2, 3, 4, 5]


def commit_then_fail(session, lands=True):
    """
    Подменяет commit: первый вызов обрывает соединение, после фиксации
    (lands=True) или до неё. Остальные вызовы обычные.
    """
    real_commit = session.commit
    calls = []

    async def commit():
        calls.append(1)
        if len(calls) == 1:
            if lands:
                await real_commit()
            raise OperationalError("COMMIT", {}, Exception("server closed the connection unexpectedly"))
        await real_commit()

    return commit
