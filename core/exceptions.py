"""Доменные ошибки ядра. HTTP-коды назначаются обработчиками в main.py."""


class SquadFinderError(Exception):
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(SquadFinderError):
    """Неверные или несуществующие id, фильтры, пустое сообщение."""

    status_code = 400


class AuthorizationError(SquadFinderError):
    """Операция с перепиской, для которой нет матча (или чужой матч)."""

    status_code = 403


class ConflictError(SquadFinderError):
    """Параллельная попытка создать уже существующий матч. Наружу не выходит."""

    status_code = 409


class StorageUnavailable(SquadFinderError):
    """Хранилище недоступно после всех локальных повторов."""

    status_code = 503
