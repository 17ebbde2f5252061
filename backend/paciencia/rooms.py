"""
Комнаты и игроки (in-memory).
Хранилище живёт столько же, сколько координатор, который им владеет.
"""
import asyncio
import enum
import logging
from dataclasses import dataclass, field

from .constants import DEFAULT_NAMES, MAX_PLAYERS
from .errors import RoomFull, RoomNotFound
from .ids import new_room_id, new_seed, normalize_room_id
from .ws_manager import Connection

logger = logging.getLogger(__name__)


class RoomState(str, enum.Enum):
    WAITING = "waiting"
    READY_PENDING = "ready_pending"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


@dataclass
class Player:
    index: int  # выдаётся при входе и больше не меняется
    connection: Connection
    name: str
    ready: bool = False
    progress: int = 0  # карт на фундаменте
    moves: int = 0

    def reset(self) -> None:
        self.ready = False
        self.progress = 0
        self.moves = 0


@dataclass
class Room:
    id: str
    seed: int
    players: list[Player] = field(default_factory=list)
    started: bool = False
    started_at: float | None = None  # time.monotonic() в момент game_start
    winner: int | None = None
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False, compare=False)

    @property
    def state(self) -> RoomState:
        if self.winner is not None:
            return RoomState.FINISHED
        if self.started:
            return RoomState.IN_PROGRESS
        if len(self.players) == MAX_PLAYERS:
            return RoomState.READY_PENDING
        return RoomState.WAITING

    @property
    def is_full(self) -> bool:
        return len(self.players) >= MAX_PLAYERS

    @property
    def all_ready(self) -> bool:
        return len(self.players) == MAX_PLAYERS and all(p.ready for p in self.players)

    def get_player(self, index: int) -> Player | None:
        for p in self.players:
            if p.index == index:
                return p
        return None

    def opponents(self, index: int) -> list[Player]:
        return [p for p in self.players if p.index != index]

    def add_player(self, connection: Connection, name: str | None = None) -> Player:
        """Посадить игрока на наименьший свободный индекс. Пустое имя заменяется именем по умолчанию."""
        if self.is_full:
            raise RoomFull(self.id)
        taken = {p.index for p in self.players}
        index = min(i for i in range(MAX_PLAYERS) if i not in taken)
        player = Player(index=index, connection=connection, name=name or DEFAULT_NAMES[index])
        self.players.append(player)
        self.players.sort(key=lambda p: p.index)
        return player

    def remove_player(self, index: int) -> Player | None:
        player = self.get_player(index)
        if player is not None:
            self.players.remove(player)
        return player

    def start(self, now: float) -> None:
        self.started = True
        self.started_at = now

    def elapsed_seconds(self, now: float) -> float:
        if self.started_at is None:
            return 0.0
        return round(now - self.started_at, 1)

    def reset(self, seed: int) -> None:
        """Новая партия в той же комнате: свежий сид, сброс готовности и прогресса."""
        self.seed = seed
        self.started = False
        self.started_at = None
        self.winner = None
        for p in self.players:
            p.reset()


class RoomStore:
    """Комнаты по коду. Порядок не гарантируется."""

    def __init__(self):
        self._rooms: dict[str, Room] = {}

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, room_id: str) -> bool:
        return normalize_room_id(room_id) in self._rooms

    def create(self, room_id: str, seed: int) -> Room:
        room_id = normalize_room_id(room_id)
        room = Room(id=room_id, seed=seed)
        self._rooms[room_id] = room
        return room

    def create_room(self) -> Room:
        """Новая комната со свободным кодом и случайным сидом."""
        room_id = new_room_id()
        while room_id in self._rooms:
            logger.info("room id collision %s, regenerating", room_id)
            room_id = new_room_id()
        return self.create(room_id, new_seed())

    def get(self, room_id: str) -> Room | None:
        return self._rooms.get(normalize_room_id(room_id))

    def require(self, room_id: str) -> Room:
        room = self.get(room_id)
        if room is None:
            raise RoomNotFound(normalize_room_id(room_id))
        return room

    def delete(self, room_id: str) -> None:
        self._rooms.pop(normalize_room_id(room_id), None)
