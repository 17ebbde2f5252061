"""Конфигурация приложения."""
import os
from functools import lru_cache
from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


@lru_cache
def get_config():
    return type("Config", (), {
        "host": os.environ.get("HOST", "0.0.0.0"),
        "port": int(os.environ.get("PORT", "3000")),
        "debug": os.environ.get("DEBUG", "0").lower() in ("1", "true", "yes"),
        "log_level": os.environ.get("LOG_LEVEL", "INFO").upper(),
        "allowed_origins": os.environ.get("ALLOWED_ORIGINS", "*").split(","),
        "static_dir": Path(os.environ.get("STATIC_DIR", str(_PROJECT_ROOT / "public"))),
    })()
