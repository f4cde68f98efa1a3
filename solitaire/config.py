"""
Configuration - Environment-driven settings.

    SOLITAIRE_ENV                  development | production (default development)
    SOLITAIRE_LOG_LEVEL            logging level name (default INFO)
    SOLITAIRE_ENABLE_DEBUG_ROUTES  expose the debug endpoints (default: on in development)
    SOLITAIRE_SEED                 fixed shuffle seed for new games (default: random)
    ALLOWED_ORIGINS                comma separated CORS origins (default *)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import os


_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def _env_int(name: str) -> int | None:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


@dataclass(frozen=True)
class Settings:
    env: str = "development"
    log_level: str = "INFO"
    enable_debug_routes: bool = True
    seed: int | None = None
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])


def load_settings() -> Settings:
    """Read settings from the environment."""
    env = os.getenv("SOLITAIRE_ENV", "development")
    return Settings(
        env=env,
        log_level=os.getenv("SOLITAIRE_LOG_LEVEL", "INFO").upper(),
        enable_debug_routes=_env_flag("SOLITAIRE_ENABLE_DEBUG_ROUTES", env == "development"),
        seed=_env_int("SOLITAIRE_SEED"),
        allowed_origins=[
            origin.strip()
            for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",")
            if origin.strip()
        ],
    )
