import logging
import os
import sys
from dataclasses import dataclass

from .models import SpendMode

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    spend_mode: SpendMode = SpendMode.ACCUMULATE
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8080


def load_settings() -> Settings:
    raw_mode = os.getenv("POINTS_SPEND_MODE", SpendMode.ACCUMULATE.value).strip().lower()
    try:
        spend_mode = SpendMode(raw_mode)
    except ValueError:
        raise ValueError(
            f"POINTS_SPEND_MODE must be one of {[m.value for m in SpendMode]}, got {raw_mode!r}"
        ) from None

    return Settings(
        spend_mode=spend_mode,
        log_level=os.getenv("POINTS_LOG_LEVEL", "INFO").upper(),
        host=os.getenv("POINTS_HOST", "0.0.0.0"),
        port=int(os.getenv("POINTS_PORT", "8080")),
    )


def configure_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger("points")
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
