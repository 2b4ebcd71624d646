from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_path, user_log_path

APP_NAME = "ygosearch"


@dataclass(frozen=True, slots=True)
class CliPaths:
    config_dir: Path
    config_path: Path
    log_dir: Path
    log_file: Path


def get_paths() -> CliPaths:
    """Per-user locations for the config file and the rotating log."""
    config_dir = user_config_path(APP_NAME, appauthor=False)
    log_dir = user_log_path(APP_NAME, appauthor=False)
    return CliPaths(
        config_dir=config_dir,
        config_path=config_dir / "config.toml",
        log_dir=log_dir,
        log_file=log_dir / f"{APP_NAME}.log",
    )
