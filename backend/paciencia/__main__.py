"""Запуск сервера: python -m paciencia"""
import logging
import socket

import uvicorn

from .config import get_config
from .main import app

logger = logging.getLogger(__name__)


def _lan_ip() -> str:
    """Адрес в локальной сети, по которому подключается второй игрок."""
    s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        # UDP connect ничего не отправляет, только выбирает интерфейс
        s.connect(("10.255.255.255", 1))
        return s.getsockname()[0]
    except OSError:
        return "localhost"
    finally:
        s.close()


def main() -> None:
    config = get_config()
    logger.info("Paciência multiplayer running")
    logger.info("Local:   http://localhost:%s", config.port)
    logger.info("Network: http://%s:%s", _lan_ip(), config.port)
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
