"""Runtime settings, read from the environment (and a ``.env`` file if present)."""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///data/menaje.db")
    database_echo: bool = _env_bool("DATABASE_ECHO", "False")

    # Reservation window around the event date, in days
    setup_days: int = int(os.getenv("MENAJE_SETUP_DAYS", "0"))
    teardown_days: int = int(os.getenv("MENAJE_TEARDOWN_DAYS", "0"))

    # Whether draft ("borrador") reservations hold stock
    drafts_commit_stock: bool = _env_bool("MENAJE_DRAFTS_COMMIT_STOCK", "True")

    # Extra attempts after a serialization conflict
    save_max_retries: int = int(os.getenv("MENAJE_SAVE_MAX_RETRIES", "3"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
