"""Runtime settings, read from the environment with local defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# Resolve the default data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


def _seconds_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    data_dir: Path = _DEFAULT_DATA_DIR
    api_url: str | None = None      # remote cart service; local JSON store if unset
    api_timeout: float = 10.0       # seconds
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            data_dir=Path(os.getenv("STOREFRONT_DATA_DIR", str(_DEFAULT_DATA_DIR))),
            api_url=os.getenv("STOREFRONT_API_URL") or None,
            api_timeout=_seconds_from_env("STOREFRONT_API_TIMEOUT", 10.0),
            log_level=os.getenv("STOREFRONT_LOG_LEVEL", "WARNING").upper(),
        )
