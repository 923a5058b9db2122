import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from conftest import commit_then_fail
from core.exceptions import StorageUnavailable
from core.retry import run_with_retry


def locked():
    return OperationalError("UPDATE matches", {}, Exception("database is locked"))


async def test_transient_error_is_retried(db):
    attempts = []

    async def operation():
        attempts.append(1)
        if len(attempts) < 3:
            raise locked()
        return "done"

    assert await run_with_retry(db, operation, attempts=3, backoff=0) == "done"
    assert len(attempts) == 3


async def test_gives_up_after_bounded_attempts(db):
    attempts = []

    async def operation():
        attempts.append(1)
        raise locked()

    with pytest.raises(StorageUnavailable):
        await run_with_retry(db, operation, attempts=2, backoff=0)
    assert len(attempts) == 2


async def test_non_transient_error_is_not_retried(db):
    attempts = []

    async def operation():
        attempts.append(1)
        raise IntegrityError("INSERT INTO matches", {}, Exception("UNIQUE constraint failed"))

    with pytest.raises(IntegrityError):
        await run_with_retry(db, operation, attempts=3, backoff=0)
    assert len(attempts) == 1


async def test_landed_commit_returns_stored_result(db, monkeypatch):
    monkeypatch.setattr(db, "commit", commit_then_fail(db, lands=True))
    writes, lookups = [], []

    async def operation():
        writes.append(1)
        return "written"

    async def recover():
        lookups.append(1)
        return "stored"

    assert await run_with_retry(db, operation, recover=recover, backoff=0) == "stored"
    assert len(writes) == 1
    assert len(lookups) == 1


async def test_lost_commit_is_repeated_when_nothing_stored(db, monkeypatch):
    monkeypatch.setattr(db, "commit", commit_then_fail(db, lands=False))
    writes = []

    async def operation():
        writes.append(1)
        return "written"

    async def recover():
        return None

    assert await run_with_retry(db, operation, recover=recover, backoff=0) == "written"
    assert len(writes) == 2


async def test_failure_before_commit_skips_lookup(db):
    writes, lookups = [], []

    async def operation():
        writes.append(1)
        if len(writes) == 1:
            raise locked()
        return "written"

    async def recover():
        lookups.append(1)
        return "stored"

    assert await run_with_retry(db, operation, recover=recover, backoff=0) == "written"
    assert lookups == []
