import random

# Двухзначные коды сущностей со случайными id.
# swipes и messages сюда не входят: их id — автоинкремент, порядок важен.
TYPE_POSTFIX = {
    "users": 1,
    "games": 2,
    "matches": 5,
}


def uses_random_id(entity: str) -> bool:
    return entity in TYPE_POSTFIX


def generate_random_id(entity: str) -> int:
    """Возвращает 8-значный id: 6 случайных цифр + 2-значный постфикс."""
    if entity not in TYPE_POSTFIX:
        raise ValueError(f"Unknown entity for ID generation: {entity}")
    rand6 = random.randint(0, 999_999)
    postfix = TYPE_POSTFIX[entity]
    return rand6 * 100 + postfix
