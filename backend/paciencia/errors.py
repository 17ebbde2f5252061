"""Ошибки комнат и протокола."""
from .constants import ERROR_ROOM_FULL, ERROR_ROOM_NOT_FOUND


class RoomError(Exception):
    """Ошибка, которую показываем игроку в сообщении error."""

    user_message = ""

    def __init__(self, room_id: str):
        super().__init__(f"{self.__class__.__name__}: {room_id}")
        self.room_id = room_id


class RoomNotFound(RoomError):
    user_message = ERROR_ROOM_NOT_FOUND


class RoomFull(RoomError):
    user_message = ERROR_ROOM_FULL


class MalformedEvent(Exception):
    """Сообщение клиента не разобрано: битый JSON, неизвестный type или неверные поля."""
