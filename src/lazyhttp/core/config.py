"""Environment-driven settings.

Settings are read on every ``load_settings()`` call, never cached at import
time, so the switches can change between two imports in the same process.
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

ENABLE_LAZY_LOAD_ENV = "LAZYHTTP_ENABLE_LAZY_LOAD"
CONNECT_TIMEOUT_ENV = "LAZYHTTP_CONNECT_TIMEOUT"
READ_TIMEOUT_ENV = "LAZYHTTP_READ_TIMEOUT"
CHUNK_SIZE_ENV = "LAZYHTTP_CHUNK_SIZE"

DEFAULT_CHUNK_SIZE = 4 * 1024 * 1024  # 4 MB


@dataclass(frozen=True, slots=True)
class Settings:
    enable_lazy_load: bool = True
    connect_timeout: float | None = None
    read_timeout: float | None = None
    chunk_size: int = DEFAULT_CHUNK_SIZE

    @property
    def timeout(self) -> Optional[Tuple[Optional[float], Optional[float]]]:
        """Timeout in the ``(connect, read)`` form requests expects; None = transport default."""
        if self.connect_timeout is None and self.read_timeout is None:
            return None
        return (self.connect_timeout, self.read_timeout)


def _parse_bool(value: str) -> bool:
    # only the literal "true" switches a flag on
    return value.strip().lower() == "true"


def _parse_timeout(name: str, value: str | None) -> float | None:
    if value is None or not value.strip():
        return None
    try:
        seconds = float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got {value!r}")
    if seconds <= 0:
        raise ValueError(f"{name} must be positive, got {value!r}")
    return seconds


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from the process environment (or the given mapping)."""
    env = os.environ if environ is None else environ

    chunk_size = DEFAULT_CHUNK_SIZE
    raw_chunk = env.get(CHUNK_SIZE_ENV)
    if raw_chunk:
        try:
            chunk_size = int(raw_chunk)
        except ValueError:
            raise ValueError(f"{CHUNK_SIZE_ENV} must be an integer, got {raw_chunk!r}")
        if chunk_size <= 0:
            raise ValueError(f"{CHUNK_SIZE_ENV} must be positive, got {raw_chunk!r}")

    return Settings(
        enable_lazy_load=_parse_bool(env.get(ENABLE_LAZY_LOAD_ENV, "true")),
        connect_timeout=_parse_timeout(CONNECT_TIMEOUT_ENV, env.get(CONNECT_TIMEOUT_ENV)),
        read_timeout=_parse_timeout(READ_TIMEOUT_ENV, env.get(READ_TIMEOUT_ENV)),
        chunk_size=chunk_size,
    )
