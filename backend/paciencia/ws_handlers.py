"""
Цикл приёма сообщений WebSocket: разбор, передача координатору, закрытие.
"""
import logging

from fastapi import WebSocket
from starlette.websockets import WebSocketDisconnect

from .coordinator import SessionCoordinator
from .errors import MalformedEvent
from .messages import parse_client_event
from .ws_manager import Connection, WSManager

logger = logging.getLogger(__name__)


async def handle_ws_message(coordinator: SessionCoordinator, conn: Connection, raw: str | bytes) -> None:
    """
    Обрабатывает одно сообщение. Ошибки не выходят наружу:
    неверное сообщение логируется, ответа клиенту нет.
    """
    try:
        event = parse_client_event(raw)
    except MalformedEvent as e:
        logger.warning("WS: malformed message from %s: %s", conn, e)
        return
    logger.info("WS: msg from %s type=%s", conn, event.type)
    try:
        await coordinator.handle_event(conn, event)
    except Exception as e:
        logger.exception("WS: error handling %s from %s: %s", event.type, conn, e)


async def ws_loop(ws: WebSocket, coordinator: SessionCoordinator, manager: WSManager) -> None:
    await ws.accept()
    conn = manager.connect(ws)
    logger.info("WS: accepted %s from %s", conn, ws.client)
    try:
        while True:
            message = await ws.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))
            # клиент может прислать JSON и текстовым, и бинарным кадром
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes") or b""
            await handle_ws_message(coordinator, conn, raw)
    except WebSocketDisconnect as e:
        logger.info("WS: client disconnected code=%s reason=%s conn=%s", e.code, e.reason or "", conn)
    except Exception as e:
        logger.exception("WS: error conn=%s: %s", conn, e)
    finally:
        manager.disconnect(conn.connection_id)
        await coordinator.disconnect(conn)
        logger.info("WS: disconnected %s", conn)
