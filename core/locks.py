import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Hashable, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from utils.pairs import conversation_key


class KeyedLock:
    """Набор asyncio.Lock по ключу; запись удаляется, когда её никто не держит."""

    def __init__(self) -> None:
        self._locks: Dict[Hashable, Tuple[asyncio.Lock, int]] = {}

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        lock, waiters = self._locks.get(key, (None, 0))
        if lock is None:
            lock = asyncio.Lock()
        self._locks[key] = (lock, waiters + 1)
        try:
            async with lock:
                yield
        finally:
            lock, waiters = self._locks[key]
            if waiters <= 1:
                del self._locks[key]
            else:
                self._locks[key] = (lock, waiters - 1)

    def __len__(self) -> int:
        return len(self._locks)


def pair_lock_key(user1_id: int, user2_id: int):
    # id пользователей произвольные bigint: ключ блокировки берём как
    # 64-битный хэш ключа переписки, коллизия лишь сериализует лишние пары
    return func.hashtextextended(conversation_key(user1_id, user2_id), 0)


async def acquire_pair_advisory_lock(session: AsyncSession, user1_id: int, user2_id: int) -> None:
    """
    Транзакционная advisory-блокировка PostgreSQL на каноническую пару.
    Сериализует проверку взаимности между несколькими процессами;
    снимается автоматически при commit/rollback. На других СУБД: no-op.
    """
    if session.get_bind().dialect.name != "postgresql":
        return
    await session.execute(select(func.pg_advisory_xact_lock(pair_lock_key(user1_id, user2_id))))
