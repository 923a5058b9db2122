import asyncio
import logging
from typing import Set

from aiohttp import ClientError, ClientSession, ClientTimeout

from core.config import settings

logger = logging.getLogger(__name__)

# ссылки на фоновые задачи, чтобы их не собрал GC до завершения
_background_tasks: Set[asyncio.Task] = set()


async def send_match_notification(user_a: int, user_b: int, match_key: str) -> bool:
    """
    Сообщает внешнему push-сервису о новом матче.
    Best-effort: ошибки только логируются, на матч они не влияют.
    """
    if not settings.PUSH_WEBHOOK_URL:
        logger.debug("PUSH_WEBHOOK_URL is not set, skipping match push for %s", match_key)
        return False

    payload = {
        "event": "match",
        "user_ids": [user_a, user_b],
        "match_key": match_key,
    }
    try:
        timeout = ClientTimeout(total=settings.PUSH_TIMEOUT_SECONDS)
        async with ClientSession(timeout=timeout) as session:
            async with session.post(settings.PUSH_WEBHOOK_URL, json=payload) as resp:
                if resp.status >= 400:
                    logger.warning("Push service answered %s for match %s", resp.status, match_key)
                    return False
    except (ClientError, asyncio.TimeoutError) as exc:
        logger.warning("Push notification for match %s failed: %s", match_key, exc)
        return False
    return True


def schedule_match_notification(user_a: int, user_b: int, match_key: str) -> asyncio.Task:
    task = asyncio.create_task(send_match_notification(user_a, user_b, match_key))
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    return task
