# utils/seed_db.py
import asyncio
import logging
import random

from sqlalchemy import select

from core.database import AsyncSessionLocal, engine
from models.base import Base
from models.game import Game
from models.user import User

log = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)

# Константы для семплов
NUM_USERS = 30

GAMES = ["Valorant", "League of Legends", "Counter-Strike 2", "Dota 2", "Overwatch 2", "Apex Legends"]

RANK_TIERS = ["Iron", "Bronze", "Silver", "Gold", "Platinum", "Diamond", "Master", "Immortal"]
ROLES = ["Duelist", "Support", "Tank", "Controller", "Initiator", "Carry", "IGL", "Flex"]
NICK_PARTS = [
    "Shadow", "Nova", "Viper", "Frost", "Blaze", "Echo", "Rogue", "Pixel", "Storm", "Ghost",
    "Raven", "Bolt", "Drift", "Ember", "Sage", "Hex", "Onyx", "Zen", "Nyx", "Flux",
]
BIO_TEMPLATES = [
    "Grinding ranked every evening, looking for a chill duo.",
    "Mic on, tilt off. Let's climb.",
    "Shotcaller looking for a team that listens.",
    "Weekend warrior, mostly casual but competitive.",
    "Main support, will peel for you.",
]


async def seed():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        existing = await session.execute(select(Game.name))
        known = set(existing.scalars().all())
        for name in GAMES:
            if name not in known:
                session.add(Game(name=name))
        await session.commit()

        games = (await session.execute(select(Game))).scalars().all()

        for i in range(NUM_USERS):
            session.add(User(
                username=f"{random.choice(NICK_PARTS)}{random.choice(NICK_PARTS)}{i}",
                bio=random.choice(BIO_TEMPLATES),
                rank_tier=random.choice(RANK_TIERS),
                role=random.choice(ROLES),
                game_id=random.choice(games).id,
            ))
        await session.commit()

    log.info("Seeded %d games and %d players", len(GAMES), NUM_USERS)


if __name__ == "__main__":
    asyncio.run(seed())
