from typing import List, Optional

from pydantic.v1 import BaseSettings


class Settings(BaseSettings):

    DATABASE_URL: str
    DEBUG: bool = False

    # Лента
    FEED_DEFAULT_LIMIT: int = 50
    FEED_MAX_LIMIT: int = 200
    # None: pass никогда не возвращается в ленту, N: возвращается через N секунд
    PASS_RESURFACE_AFTER_SECONDS: Optional[int] = None

    # Чат
    MESSAGE_MAX_LENGTH: int = 2000
    POLL_BATCH_LIMIT: int = 200

    # Повторы при сбоях хранилища
    STORAGE_RETRY_ATTEMPTS: int = 3
    STORAGE_RETRY_BACKOFF_SECONDS: float = 0.05

    # Внешний сервис push-уведомлений
    PUSH_WEBHOOK_URL: Optional[str] = None
    PUSH_TIMEOUT_SECONDS: float = 5.0

    CORS_ORIGINS: str = "*"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Создаём глобальный объект, который будем импортировать везде
settings = Settings()
