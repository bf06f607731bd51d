"""Application settings, read from the environment (and a .env file if present)."""

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///:memory:"
    log_level: str = "INFO"
    max_game_name_length: int = 100
    allowed_origins: tuple[str, ...] = ("*",)
    debug: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings(
        database_url=os.environ.get("DATABASE_URL", "sqlite:///:memory:"),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        max_game_name_length=int(os.environ.get("MAX_GAME_NAME_LENGTH", "100")),
        allowed_origins=tuple(os.environ.get("ALLOWED_ORIGINS", "*").split(",")),
        debug=os.environ.get("DEBUG", "0").lower() in ("1", "true", "yes"),
    )
