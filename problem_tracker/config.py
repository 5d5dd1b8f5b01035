# problem_tracker/config.py
import logging
import os

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

# .env in the directory the tool is invoked from; real env vars win
ENV_PATH = find_dotenv(usecwd=True)
if ENV_PATH:
    load_dotenv(dotenv_path=ENV_PATH, override=False)


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    DB_PATH = os.getenv("TRACKER_DB_PATH", "problems.db")
    LOG_LEVEL = os.getenv("TRACKER_LOG_LEVEL", "WARNING").upper()
    SQL_ECHO = _flag("TRACKER_SQL_ECHO")


settings = Settings()


def log_settings() -> None:
    logger.debug("[CONFIG] Loading .env from: %s", ENV_PATH or "<none>")
    logger.debug(
        "[CONFIG] Loaded db_path=%s log_level=%s sql_echo=%s",
        settings.DB_PATH, settings.LOG_LEVEL, settings.SQL_ECHO,
    )
