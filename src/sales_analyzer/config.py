import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    mock_delay: float = 2.0
    analysis_timeout: Optional[float] = None
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000


def _read_seconds(name: str, default: Optional[float], allow_zero: bool = True) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}.")
    if value < 0:
        raise ValueError(f"{name} cannot be negative, got {raw!r}.")
    if value == 0 and not allow_zero:
        raise ValueError(f"{name} must be greater than zero, got {raw!r}.")
    return value


def get_settings() -> Settings:
    """Read settings from the environment (and .env) with proper error handling"""
    port = os.getenv("PORT", "8000")
    if not port.isdigit():
        raise ValueError(f"PORT must be an integer, got {port!r}.")
    return Settings(
        mock_delay=_read_seconds("ANALYSIS_MOCK_DELAY", 2.0),
        analysis_timeout=_read_seconds("ANALYSIS_TIMEOUT", None, allow_zero=False),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(port),
    )
