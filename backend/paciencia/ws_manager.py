"""
Менеджер WebSocket: обёртка над соединением и реестр живых подключений.
"""
import logging
import uuid
from typing import Any

from fastapi import WebSocket
from starlette.websockets import WebSocketState

logger = logging.getLogger(__name__)


class Connection:
    """Одно клиентское соединение. Жизненным циклом сокета владеет транспорт."""

    def __init__(self, ws: WebSocket | None = None, connection_id: str | None = None):
        self.ws = ws
        self.connection_id = connection_id or uuid.uuid4().hex

    @property
    def is_open(self) -> bool:
        if self.ws is None:
            return False
        return (
            self.ws.client_state == WebSocketState.CONNECTED
            and self.ws.application_state == WebSocketState.CONNECTED
        )

    async def send(self, payload: dict[str, Any]) -> bool:
        """Отправить JSON. Ошибки не пробрасываются: закрытие придёт отдельным событием."""
        if self.ws is None:
            return False
        try:
            await self.ws.send_json(payload)
            return True
        except Exception as e:
            logger.warning("send to %s failed: %s", self.connection_id, e)
            return False

    def __repr__(self) -> str:
        return f"Connection({self.connection_id})"


class WSManager:
    def __init__(self):
        self._by_id: dict[str, Connection] = {}

    def __len__(self) -> int:
        return len(self._by_id)

    def connect(self, ws: WebSocket) -> Connection:
        conn = Connection(ws)
        self._by_id[conn.connection_id] = conn
        return conn

    def disconnect(self, connection_id: str) -> None:
        self._by_id.pop(connection_id, None)

    def get(self, connection_id: str) -> Connection | None:
        return self._by_id.get(connection_id)
