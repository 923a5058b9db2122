import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.exceptions import StorageUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_transient(exc: BaseException) -> bool:
    if isinstance(exc, (OperationalError, InterfaceError)):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


async def run_with_retry(
    session: AsyncSession,
    operation: Callable[[], Awaitable[T]],
    *,
    recover: Optional[Callable[[], Awaitable[Optional[T]]]] = None,
    attempts: Optional[int] = None,
    backoff: Optional[float] = None,
) -> T:
    """
    Выполняет единицу работы в одной транзакции и коммитит её.

    При временном сбое до commit транзакция откатывается целиком и
    операция повторяется заново (включая все проверки внутри неё).

    Сбой во время commit не означает, что запись не легла: ответ сервера
    мог потеряться после фиксации. Поэтому перед следующей попыткой
    вызывается recover: он ищет результат по естественному ключу и
    возвращает его, либо None, если записи нет. Без recover операция
    просто повторяется.

    После исчерпания попыток выбрасывается StorageUnavailable.
    Остальные ошибки пробрасываются после отката.
    """
    attempts = attempts or settings.STORAGE_RETRY_ATTEMPTS
    backoff = settings.STORAGE_RETRY_BACKOFF_SECONDS if backoff is None else backoff
    # исход последнего commit неизвестен
    commit_in_doubt = False

    for attempt in range(1, attempts + 1):
        committing = False
        try:
            if commit_in_doubt:
                stored = await recover()
                if stored is not None:
                    await session.commit()
                    logger.info("Commit landed before the connection failed, reusing stored result")
                    return stored
                commit_in_doubt = False

            result = await operation()
            committing = True
            await session.commit()
            return result
        except Exception as exc:
            await session.rollback()
            if not is_transient(exc):
                raise
            if committing and recover is not None:
                commit_in_doubt = True
            if attempt == attempts:
                logger.error("Storage unavailable after %d attempts: %s", attempts, exc)
                raise StorageUnavailable("Storage is temporarily unavailable") from exc
            logger.warning("Transient storage error (attempt %d/%d): %s", attempt, attempts, exc)
            await asyncio.sleep(backoff * attempt)

    raise StorageUnavailable("Storage is temporarily unavailable")
