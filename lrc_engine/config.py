from __future__ import annotations

import json
from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_FALSY = ("0", "false", "False", "no", "off")


def _config_dir() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "lrc-engine"
    return Path.home() / ".config" / "lrc-engine"


def _config_file() -> Path:
    return _config_dir() / "config.json"


@dataclass(frozen=True)
class AppConfig:
    config_dir: Path

    # Input
    encoding: str

    # Output
    color: bool
    show_timestamps: bool


def load_config() -> AppConfig:
    # Priority: env → config.json → defaults
    file_cfg = _load_file(_config_file())

    encoding = os.getenv("LRC_ENGINE_ENCODING") or str(file_cfg.get("encoding") or "utf-8")

    return AppConfig(
        config_dir=_config_dir(),
        encoding=encoding,
        color=_flag("LRC_ENGINE_COLOR", file_cfg.get("color"), True),
        show_timestamps=_flag("LRC_ENGINE_SHOW_TIMESTAMPS", file_cfg.get("show_timestamps"), True),
    )


def _flag(env_name: str, file_value: Any, default: bool) -> bool:
    env = os.getenv(env_name)
    if env is not None:
        return env not in _FALSY
    if isinstance(file_value, bool):
        return file_value
    return default


def _load_file(cfg_path: Path) -> dict[str, Any]:
    if not cfg_path.exists():
        return {}
    try:
        data = json.loads(cfg_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.debug("Ignoring unreadable config %s: %s", cfg_path, e)
        return {}
    return data if isinstance(data, dict) else {}
