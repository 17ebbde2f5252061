"""
Координатор сессий: принимает события клиентов, меняет состояние комнат
и решает, кому что отправить.

Изменение комнаты и отправки по нему выполняются под room.lock.
"""
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from .errors import RoomError, RoomNotFound
from .ids import new_seed, normalize_room_id
from .messages import (
    ClientEvent,
    CreateRoom,
    Error,
    GameOver,
    GameStart,
    JoinRoom,
    Message,
    NewGame,
    NewGameStarted,
    OpponentDisconnected,
    OpponentJoined,
    OpponentProgress,
    OpponentReady,
    Progress,
    Ready,
    RoomCreated,
    RoomJoined,
    Win,
)
from .rooms import Player, Room, RoomStore
from .ws_manager import Connection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlayerSession:
    """Привязка соединения к комнате. Задаётся один раз при create_room/join_room."""
    room_id: str
    player_index: int
    name: str


class SessionCoordinator:
    def __init__(self, store: RoomStore, clock: Callable[[], float] = time.monotonic):
        self._store = store
        self._clock = clock
        self._sessions: dict[str, PlayerSession] = {}

    @property
    def store(self) -> RoomStore:
        return self._store

    def session_for(self, connection: Connection) -> PlayerSession | None:
        return self._sessions.get(connection.connection_id)

    async def handle_event(self, connection: Connection, event: ClientEvent) -> None:
        if isinstance(event, CreateRoom):
            await self.create_room(connection, event.name)
        elif isinstance(event, JoinRoom):
            await self.join_room(connection, event.room_id, event.name)
        elif isinstance(event, Ready):
            await self.ready(connection)
        elif isinstance(event, Progress):
            await self.progress(connection, event.foundation, event.moves)
        elif isinstance(event, Win):
            await self.win(connection, event.moves)
        elif isinstance(event, NewGame):
            await self.new_game(connection)
        else:
            logger.warning("unhandled event %r from %s", event, connection)

    async def create_room(self, connection: Connection, name: str | None = None) -> Room | None:
        if self._already_seated(connection, "create_room"):
            return None
        room = self._store.create_room()
        async with room.lock:
            player = room.add_player(connection, name)
            self._sessions[connection.connection_id] = PlayerSession(room.id, player.index, player.name)
            logger.info("room %s created by %s (%s)", room.id, connection, player.name)
            await connection.send(
                RoomCreated(room_id=room.id, seed=room.seed, player_index=player.index).payload()
            )
        return room

    async def join_room(self, connection: Connection, room_id: str, name: str | None = None) -> Room | None:
        if self._already_seated(connection, "join_room"):
            return None
        room_id = normalize_room_id(room_id)
        try:
            room = self._store.require(room_id)
            async with room.lock:
                self._ensure_live(room)
                player = room.add_player(connection, name)
                self._sessions[connection.connection_id] = PlayerSession(room.id, player.index, player.name)
                logger.info("room %s joined by %s (%s) as %d", room.id, connection, player.name, player.index)
                opponents = room.opponents(player.index)
                await connection.send(
                    RoomJoined(
                        room_id=room.id,
                        seed=room.seed,
                        player_index=player.index,
                        opponent_name=opponents[0].name if opponents else "",
                    ).payload()
                )
                await self._send_all(opponents, OpponentJoined(opponent_name=player.name))
        except RoomError as e:
            logger.info("join %s by %s rejected: %s", room_id, connection, e)
            await connection.send(Error(message=e.user_message).payload())
            return None
        return room

    async def ready(self, connection: Connection) -> None:
        found = self._lookup(connection, "ready")
        if not found:
            return
        session, room = found
        async with room.lock:
            player = self._live_player(room, session)
            if player is None:
                return
            player.ready = True
            await self._send_all(room.opponents(player.index), OpponentReady())
            if room.all_ready and not room.started:
                room.start(self._clock())
                logger.info("room %s: game started", room.id)
                await self._send_all(room.players, GameStart())

    async def progress(self, connection: Connection, foundation: int, moves: int) -> None:
        found = self._lookup(connection, "progress")
        if not found:
            return
        session, room = found
        async with room.lock:
            player = self._live_player(room, session)
            if player is None:
                return
            player.progress = foundation
            player.moves = moves
            await self._send_all(
                room.opponents(player.index),
                OpponentProgress(foundation=foundation, moves=moves),
            )

    async def win(self, connection: Connection, moves: int) -> None:
        found = self._lookup(connection, "win")
        if not found:
            return
        session, room = found
        async with room.lock:
            player = self._live_player(room, session)
            if player is None:
                return
            if not room.started or room.winner is not None:
                logger.info("room %s: win from %d dropped (state=%s)", room.id, player.index, room.state.value)
                return
            room.winner = player.index
            elapsed = room.elapsed_seconds(self._clock())
            logger.info("room %s: player %d won in %.1fs, %s moves", room.id, player.index, elapsed, moves)
            await self._send_all(
                room.players,
                GameOver(winner=player.index, winner_name=player.name, time=f"{elapsed:.1f}", moves=moves),
            )

    async def new_game(self, connection: Connection) -> None:
        found = self._lookup(connection, "new_game")
        if not found:
            return
        session, room = found
        async with room.lock:
            if self._live_player(room, session) is None:
                return
            seed = new_seed()
            while seed == room.seed:
                seed = new_seed()
            room.reset(seed)
            logger.info("room %s: new game", room.id)
            await self._send_all(room.players, NewGameStarted(seed=seed))

    async def disconnect(self, connection: Connection) -> None:
        """Соединение закрыто: оповестить соперника, убрать игрока, удалить пустую комнату."""
        session = self._sessions.pop(connection.connection_id, None)
        if session is None:
            return
        room = self._store.get(session.room_id)
        if room is None:
            return
        async with room.lock:
            if self._store.get(room.id) is not room:
                return
            for p in room.opponents(session.player_index):
                if p.connection.is_open:
                    await p.connection.send(OpponentDisconnected().payload())
            room.remove_player(session.player_index)
            logger.info("room %s: player %d left", room.id, session.player_index)
            if not room.players:
                self._store.delete(room.id)
                logger.info("room %s deleted", room.id)

    def _already_seated(self, connection: Connection, action: str) -> bool:
        session = self.session_for(connection)
        if session is not None:
            logger.warning("%s from %s ignored: already in room %s", action, connection, session.room_id)
            return True
        return False

    def _lookup(self, connection: Connection, action: str) -> tuple[PlayerSession, Room] | None:
        session = self.session_for(connection)
        if session is None:
            logger.debug("%s from %s ignored: no active room", action, connection)
            return None
        room = self._store.get(session.room_id)
        if room is None:
            logger.debug("%s from %s ignored: room %s is gone", action, connection, session.room_id)
            return None
        return session, room

    def _live_player(self, room: Room, session: PlayerSession) -> Player | None:
        if self._store.get(room.id) is not room:
            return None
        return room.get_player(session.player_index)

    def _ensure_live(self, room: Room) -> None:
        # комнату могли удалить, пока ждали блокировку
        if self._store.get(room.id) is not room:
            raise RoomNotFound(room.id)

    @staticmethod
    async def _send_all(players: list[Player], message: Message) -> None:
        payload = message.payload()
        for p in players:
            await p.connection.send(payload)
