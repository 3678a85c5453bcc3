"""
Controller configuration.

Values default to the interactive behaviour (auto-fill, auto-execute and
auto-start all on) and can be overridden from the environment:

    PICKFLOW_AUTO_FILL      enable skip-if-only-one auto-fill
    PICKFLOW_AUTO_EXECUTE   submit as soon as every selection is resolved
    PICKFLOW_AUTO_START     start the only available action automatically
    PICKFLOW_PLAYER_SEAT    seat sent as `player` on every remote call
"""

from __future__ import annotations
from dataclasses import dataclass
import os

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass
class ControllerConfig:
    """Behaviour switches for an ActionController."""
    auto_fill: bool = True
    auto_execute: bool = True
    auto_start: bool = True
    player_seat: int = 0

    @classmethod
    def from_env(cls) -> ControllerConfig:
        """Build a config from PICKFLOW_* environment variables."""
        return cls(
            auto_fill=_env_flag("PICKFLOW_AUTO_FILL", True),
            auto_execute=_env_flag("PICKFLOW_AUTO_EXECUTE", True),
            auto_start=_env_flag("PICKFLOW_AUTO_START", True),
            player_seat=int(os.getenv("PICKFLOW_PLAYER_SEAT", "0")),
        )
