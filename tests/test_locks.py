import asyncio
from types import SimpleNamespace

from sqlalchemy.dialects import postgresql

from core.locks import KeyedLock, acquire_pair_advisory_lock, pair_lock_key


async def test_same_key_is_serialized():
    locks = KeyedLock()
    order = []

    async def worker(name):
        async with locks.hold((1, 2)):
            order.append(f"{name}-in")
            await asyncio.sleep(0.01)
            order.append(f"{name}-out")

    await asyncio.gather(worker("a"), worker("b"))

    assert order in (["a-in", "a-out", "b-in", "b-out"], ["b-in", "b-out", "a-in", "a-out"])
    assert len(locks) == 0


async def test_different_keys_do_not_block_each_other():
    locks = KeyedLock()
    entered = asyncio.Event()

    async def holder():
        async with locks.hold((1, 2)):
            await asyncio.wait_for(entered.wait(), timeout=1)

    async def other():
        async with locks.hold((3, 4)):
            entered.set()

    await asyncio.gather(holder(), other())
    assert len(locks) == 0


class RecordingSession:
    """Сессия-заглушка: запоминает запросы вместо выполнения."""

    def __init__(self, dialect_name):
        self.dialect_name = dialect_name
        self.statements = []

    def get_bind(self):
        return SimpleNamespace(dialect=SimpleNamespace(name=self.dialect_name))

    async def execute(self, statement):
        self.statements.append(statement)


def compile_pg(statement):
    return str(statement.compile(dialect=postgresql.dialect(), compile_kwargs={"literal_binds": True}))


async def test_postgres_takes_advisory_lock_on_pair():
    session = RecordingSession("postgresql")

    await acquire_pair_advisory_lock(session, 1, 2)

    assert len(session.statements) == 1
    assert "pg_advisory_xact_lock(hashtextextended('1:2', 0))" in compile_pg(session.statements[0])


async def test_other_dialects_skip_advisory_lock():
    session = RecordingSession("sqlite")

    await acquire_pair_advisory_lock(session, 1, 2)

    assert session.statements == []


def test_pair_lock_key_handles_large_ids():
    big = 98_765_432_101_234
    assert compile_pg(pair_lock_key(big, 3)) == compile_pg(pair_lock_key(3, big))
    assert f"'3:{big}'" in compile_pg(pair_lock_key(big, 3))
    # у этих пар совпадает u1 * 10**9 + u2
    assert compile_pg(pair_lock_key(1, 2_000_000_000)) != compile_pg(pair_lock_key(2, 1_000_000_000))
