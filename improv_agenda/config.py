import logging
import os
from dataclasses import dataclass

DEFAULT_DATA_PATH = "improv_agenda.json"


@dataclass(frozen=True)
class Settings:
    data_path: str = DEFAULT_DATA_PATH
    log_level: int = logging.INFO


def load_settings() -> Settings:
    data_path = os.getenv("IMPROV_AGENDA_DATA_PATH", "").strip()
    level_name = os.getenv("IMPROV_AGENDA_LOG_LEVEL", "").strip().upper()
    level = logging.getLevelName(level_name or "INFO")
    # unknown names come back as "Level <name>"
    if not isinstance(level, int):
        level = logging.INFO
    return Settings(data_path=data_path or DEFAULT_DATA_PATH, log_level=level)
