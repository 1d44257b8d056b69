"""Environment-driven settings for the editor and its storage."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

ENV_PREFIX = "LINKPAD_"


def _lookup(env: Mapping[str, str], name: str) -> Optional[str]:
    return env.get(f"{ENV_PREFIX}{name}")


def _int(env: Mapping[str, str], name: str, fallback: int) -> int:
    raw = _lookup(env, name)
    if raw is None:
        return fallback
    try:
        return int(raw)
    except ValueError:
        return fallback


@dataclass(slots=True)
class Settings:
    db_path: Path = Path("notes.db")
    max_history: int = 100
    log_preset: Optional[str] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        source = os.environ if env is None else env
        db_path = _lookup(source, "DB_PATH")
        return cls(
            db_path=Path(db_path) if db_path else Path("notes.db"),
            max_history=max(1, _int(source, "MAX_HISTORY", 100)),
            log_preset=_lookup(source, "LOG_PRESET") or None,
        )

    @property
    def db_url(self) -> str:
        return f"sqlite:///{self.db_path}"


__all__ = ["Settings"]
