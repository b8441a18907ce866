"""Runtime settings from environment variables (.env supported)."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


@dataclass
class Settings:
    """Execution defaults; CLI flags take precedence."""

    workers: int = 1
    band_rows: Optional[int] = None
    log_level: str = 'INFO'

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)


def _read_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def load_settings(dotenv: bool = True) -> Settings:
    """Build Settings from KERNELCONV_* variables."""
    if dotenv:
        load_dotenv()

    log_level = os.getenv('KERNELCONV_LOG_LEVEL', 'INFO').strip().upper()
    if log_level not in _LOG_LEVELS:
        raise ValueError(f"KERNELCONV_LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}, got {log_level!r}")

    return Settings(
        workers=_read_int('KERNELCONV_WORKERS', 1),
        band_rows=_read_int('KERNELCONV_BAND_ROWS', None),
        log_level=log_level,
    )
