"""
Генерация кодов комнат и сидов.
Коды не криптостойкие: их достаточно, чтобы продиктовать другу.
"""
import random

from .constants import ROOM_ID_ALPHABET, ROOM_ID_LENGTH, SEED_LIMIT


def new_room_id() -> str:
    """6 символов [A-Z0-9]."""
    return "".join(random.choices(ROOM_ID_ALPHABET, k=ROOM_ID_LENGTH))


def new_seed() -> int:
    return random.randrange(SEED_LIMIT)


def normalize_room_id(room_id: str) -> str:
    """Коды вводятся вручную, поэтому сравниваются без учёта регистра."""
    return room_id.strip().upper()
