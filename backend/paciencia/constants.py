"""Константы комнат и протокола."""
import string

ROOM_ID_LENGTH = 6
ROOM_ID_ALPHABET = string.ascii_uppercase + string.digits

# Сид раздачи: целое в [0, 2^31)
SEED_LIMIT = 2**31

MAX_PLAYERS = 2

DEFAULT_NAMES: list[str] = ["Jogador 1", "Jogador 2"]

ERROR_ROOM_NOT_FOUND = "Sala não encontrada"
ERROR_ROOM_FULL = "Sala cheia"
