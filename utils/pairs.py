"""Каноническая пара пользователей и ключ переписки вида "<меньший id>:<больший id>"."""
from typing import Tuple

from core.exceptions import ValidationError

KEY_SEPARATOR = ":"


def canonical_pair(user_a: int, user_b: int) -> Tuple[int, int]:
    if user_a == user_b:
        raise ValidationError("A pair needs two different users")
    return (user_a, user_b) if user_a < user_b else (user_b, user_a)


def conversation_key(user_a: int, user_b: int) -> str:
    u1, u2 = canonical_pair(user_a, user_b)
    return f"{u1}{KEY_SEPARATOR}{u2}"


def parse_conversation_key(key: str) -> Tuple[int, int]:
    """Разбирает ключ переписки; допускает любой порядок id, возвращает каноничный."""
    parts = (key or "").strip().split(KEY_SEPARATOR)
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        raise ValidationError(f"Malformed conversation key: {key!r}")
    user_a, user_b = (int(part) for part in parts)
    if user_a <= 0 or user_b <= 0:
        raise ValidationError(f"Malformed conversation key: {key!r}")
    return canonical_pair(user_a, user_b)
