"""Configuration loading and management."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

DB_PATH_ENV = "SLACKBOX_DB"


@dataclass
class StoreConfig:
    db_path: Path = field(default_factory=lambda: Path.home() / ".slackbox" / "slackbox.db")


@dataclass
class DisplayConfig:
    page_size: int = 10


@dataclass
class LoggingConfig:
    log_dir: Path = field(default_factory=lambda: Path.home() / ".slackbox" / "logs")
    level: str = "INFO"

    @property
    def level_number(self) -> int:
        level = logging.getLevelName(self.level.upper())
        if isinstance(level, int):
            return level
        return logging.INFO


@dataclass
class Config:
    store: StoreConfig = field(default_factory=StoreConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def expand_path(path_str: str) -> Path:
    """Expand ~ and environment variables in path."""
    return Path(os.path.expandvars(os.path.expanduser(path_str)))


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from YAML file.

    The SLACKBOX_DB environment variable overrides store.db_path.

    Raises:
        ValueError: If display.page_size is not a positive integer
    """
    if config_path is None:
        search_paths = [
            Path.cwd() / "slackbox.yaml",
            Path.home() / ".config" / "slackbox" / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = path
                break

    data: dict = {}
    if config_path is not None and config_path.exists():
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

    store_data = data.get("store", {})
    db_path = os.environ.get(DB_PATH_ENV) or store_data.get("db_path", "~/.slackbox/slackbox.db")
    store = StoreConfig(db_path=expand_path(db_path))

    display_data = data.get("display", {})
    page_size = int(display_data.get("page_size", 10))
    if page_size < 1:
        raise ValueError(f"display.page_size must be at least 1, got {page_size}")
    display = DisplayConfig(page_size=page_size)

    logging_data = data.get("logging", {})
    logging_config = LoggingConfig(
        log_dir=expand_path(logging_data.get("log_dir", "~/.slackbox/logs")),
        level=str(logging_data.get("level", "INFO")),
    )

    return Config(store=store, display=display, logging=logging_config)
