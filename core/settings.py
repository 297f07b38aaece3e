"""Centralized application configuration."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional
import logging
import os
import sys


def get_default_data_dir(
    app_name: str,
    *,
    platform: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """Return an OS-specific user data directory for ``app_name``.

    ``TIMELINE_PLANNER_DATA_DIR`` in the environment wins over the platform
    defaults.
    """

    platform_id = (platform or sys.platform).lower()
    environ = dict(os.environ if env is None else env)
    override = environ.get(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()

    home_dir = Path(home or Path.home())
    sanitized = app_name.strip() or "app"
    sanitized = sanitized.replace("/", "-").replace("\\", "-")

    if platform_id.startswith("win"):
        base = Path(environ.get("APPDATA") or home_dir / "AppData" / "Roaming")
    elif platform_id == "darwin":
        base = Path(home_dir / "Library" / "Application Support")
    else:
        base = Path(environ.get("XDG_DATA_HOME") or home_dir / ".local" / "share")

    return base.expanduser() / sanitized


APP_NAME = "TimelinePlanner"
DATA_DIR_ENV = "TIMELINE_PLANNER_DATA_DIR"


DATA_DIR = get_default_data_dir(APP_NAME)
LOG_DIR = DATA_DIR / "logs"

for _dir in (DATA_DIR, LOG_DIR):
    _dir.mkdir(parents=True, exist_ok=True)


DB_PATH = DATA_DIR / "app.db"
LOG_PATH = LOG_DIR / "timeline.log"


@dataclass(frozen=True)
class TimelineSettings:
    # double-click offsets arrive in pixels; blocks are drawn at this scale
    px_per_minute: int = 2
    default_color: str = "#3B82F6"
    first_part_suffix: str = " (Part 1)"
    second_part_suffix: str = " (Part 2)"
    cut_order_offset: float = 0.5
    append_order_step: float = 1.0


TIMELINE = TimelineSettings()


@dataclass(frozen=True)
class LoggingSettings:
    path: Path = LOG_PATH
    level: int = logging.INFO
    max_bytes: int = 1_000_000
    backup_count: int = 3
    fmt: str = "%(asctime)s [%(levelname)s] %(message)s"


LOGGING = LoggingSettings()


@dataclass(frozen=True)
class ThemeColors:
    surface_bg: str = "#F1F5F9"
    outline: str = "#E5E7EB"
    text_subtle: str = "#6B7280"
    drop_idle_bg: str = "#F9FAFB"
    drop_hover_bg: str = "#EFF6FF"
    drop_hover_border: str = "#3B82F6"
    block_text: str = "#FFFFFF"


@dataclass(frozen=True)
class UISettings:
    app_title: str = "Timeline Planner"
    theme_mode: str = "system"
    color_scheme_seed: str = "#4F46E5"
    window_min_width: int = 900
    window_min_height: int = 600
    timeline_track_height: int = 28
    today_panel_width: int = 320
    header_height: int = 32
    # opaque owner id for the local, single-user desktop shell
    user_id: str = "local"
    theme: ThemeColors = ThemeColors()


UI = UISettings()


__all__ = [
    "APP_NAME",
    "DATA_DIR",
    "DATA_DIR_ENV",
    "LOG_DIR",
    "DB_PATH",
    "LOG_PATH",
    "TIMELINE",
    "LOGGING",
    "UI",
    "get_default_data_dir",
]
