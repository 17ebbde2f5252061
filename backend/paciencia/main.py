"""
Paciência multiplayer: API и WebSocket.
"""
import logging

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .config import get_config
from .coordinator import SessionCoordinator
from .rooms import RoomStore
from .ws_handlers import ws_loop
from .ws_manager import WSManager

config = get_config()

logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def create_app(coordinator: SessionCoordinator | None = None, static_dir=None) -> FastAPI:
    app = FastAPI(title="Paciência API", debug=config.debug)
    app.state.coordinator = coordinator or SessionCoordinator(RoomStore())
    app.state.ws_manager = WSManager()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health():
        return {
            "status": "ok",
            "rooms": len(app.state.coordinator.store),
            "connections": len(app.state.ws_manager),
        }

    @app.websocket("/ws")
    async def websocket_endpoint(ws: WebSocket):
        logger.info("WS: connection attempt from %s", ws.client)
        await ws_loop(ws, app.state.coordinator, app.state.ws_manager)

    # Статика клиента игры
    static_path = static_dir if static_dir is not None else config.static_dir
    if static_path.is_dir():
        app.mount("/", StaticFiles(directory=str(static_path), html=True), name="public")

    return app


app = create_app()
