# src/task_tracker/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Every value has a working default; no .env is required.
- Paths default under a local, gitignored data directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKS"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    snapshot_path: Path
    export_path: Path

    # ---- Behaviour ----
    upcoming_days: int
    autosave: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "task-tracker") or "task-tracker"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/task_tracker"))
        snapshot_path = _env_path(_k("SNAPSHOT_PATH"), data_dir / "tasks.json")
        export_path = _env_path(_k("EXPORT_PATH"), data_dir / "tasks_export.txt")

        upcoming_days = max(0, _env_int(_k("UPCOMING_DAYS"), 7))
        autosave = _env_bool(_k("AUTOSAVE"), False)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            snapshot_path=snapshot_path,
            export_path=export_path,
            upcoming_days=upcoming_days,
            autosave=autosave,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
