import argparse
import asyncio
import logging

from sqlalchemy import delete

from core.database import engine
from models.base import Base
from models.match import Match
from models.message import Message
from models.swipe import SwipeAction
# регистрируем все таблицы в metadata
from models import game, user  # noqa: F401

log = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)

# сообщения ссылаются на матчи, поэтому чистим в этом порядке
INTERACTION_TABLES = (Message, Match, SwipeAction)


async def clear_interactions():
    """Стирает свайпы, матчи и переписки. Игроки и игры остаются."""
    async with engine.begin() as conn:
        for model in INTERACTION_TABLES:
            result = await conn.execute(delete(model))
            log.info("Cleared %s: %d rows", model.__tablename__, result.rowcount)


async def recreate_schema():
    log.info("Dropping all tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all, checkfirst=True)
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    log.info("Database schema has been recreated.")


async def async_reset_database(drop_all: bool = False):
    try:
        if drop_all:
            await recreate_schema()
        else:
            await clear_interactions()
    finally:
        await engine.dispose()


def main():
    parser = argparse.ArgumentParser(
        description="Reset SquadFinder swipes, matches and chats"
    )
    parser.add_argument(
        "--all",
        action="store_true",
        dest="drop_all",
        help="Drop and recreate every table, players and games included",
    )
    args = parser.parse_args()
    asyncio.run(async_reset_database(drop_all=args.drop_all))


if __name__ == "__main__":
    main()
