"""
Сообщения протокола.
Входящие разбираются в типизированные события по полю type, исходящие
собираются моделями и отправляются с camelCase-ключами.
"""
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .errors import MalformedEvent


class Message(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


# Клиент -> сервер

class _Named(Message):
    name: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _stringify_name(cls, value: Any) -> str | None:
        """Любое непустое значение годится как имя; пустое заменится именем по умолчанию."""
        if not value:
            return None
        return value if isinstance(value, str) else str(value)


class CreateRoom(_Named):
    type: Literal["create_room"]


class JoinRoom(_Named):
    type: Literal["join_room"]
    room_id: str


class Ready(Message):
    type: Literal["ready"]


class Progress(Message):
    type: Literal["progress"]
    foundation: int
    moves: int


class Win(Message):
    type: Literal["win"]
    moves: int


class NewGame(Message):
    type: Literal["new_game"]


ClientEvent = Annotated[
    Union[CreateRoom, JoinRoom, Ready, Progress, Win, NewGame],
    Field(discriminator="type"),
]

_client_event_adapter = TypeAdapter(ClientEvent)


def parse_client_event(raw: str | bytes) -> ClientEvent:
    try:
        return _client_event_adapter.validate_json(raw)
    except ValidationError as e:
        raise MalformedEvent(str(e)) from e


# Сервер -> клиент

class RoomCreated(Message):
    type: Literal["room_created"] = "room_created"
    room_id: str
    seed: int
    player_index: int


class RoomJoined(Message):
    type: Literal["room_joined"] = "room_joined"
    room_id: str
    seed: int
    player_index: int
    opponent_name: str


class OpponentJoined(Message):
    type: Literal["opponent_joined"] = "opponent_joined"
    opponent_name: str


class OpponentReady(Message):
    type: Literal["opponent_ready"] = "opponent_ready"


class GameStart(Message):
    type: Literal["game_start"] = "game_start"


class OpponentProgress(Message):
    type: Literal["opponent_progress"] = "opponent_progress"
    foundation: int
    moves: int


class GameOver(Message):
    type: Literal["game_over"] = "game_over"
    winner: int
    winner_name: str
    time: str  # секунды с одним знаком после запятой, "12.3"
    moves: int


class NewGameStarted(Message):
    type: Literal["new_game"] = "new_game"
    seed: int


class OpponentDisconnected(Message):
    type: Literal["opponent_disconnected"] = "opponent_disconnected"


class Error(Message):
    type: Literal["error"] = "error"
    message: str
