"""Application configuration read from the environment."""
import os
from functools import lru_cache
from typing import List, NamedTuple


class Config(NamedTuple):
    log_level: str
    allowed_origins: List[str]
    debug: bool


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes")


def _parse_origins(value: str) -> List[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


@lru_cache
def get_config() -> Config:
    return Config(
        log_level=os.environ.get("TTT_LOG_LEVEL", "INFO").upper(),
        allowed_origins=_parse_origins(os.environ.get("TTT_ALLOWED_ORIGINS", "*")),
        debug=_parse_bool(os.environ.get("TTT_DEBUG", "0")),
    )
