"""Configuration storage for taskledger.

Stores the storage settings in ~/.taskledger/config.json. The
directory can be moved with the TASKLEDGER_HOME environment variable
and the database URL overridden with TASKLEDGER_DATABASE_URL.
"""

import json
import logging
import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

HOME_ENV_VAR = "TASKLEDGER_HOME"
DATABASE_URL_ENV_VAR = "TASKLEDGER_DATABASE_URL"
CONFIG_FILENAME = "config.json"
DATABASE_FILENAME = "taskledger.db"


def get_config_dir() -> Path:
    """Get the taskledger config directory, creating it if needed."""
    override = os.environ.get(HOME_ENV_VAR)
    config_dir = Path(override) if override else Path.home() / ".taskledger"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def default_database_url() -> str:
    """SQLite database file inside the config directory."""
    return f"sqlite:///{get_config_dir() / DATABASE_FILENAME}"


class StorageConfig(BaseModel):
    """Where and how tasks are stored.

    ``database_url`` is passed to the storage backend untouched.
    """

    backend: Literal["sqlite", "memory"] = "sqlite"
    database_url: str = Field(default_factory=default_database_url)


class AppConfig(BaseModel):
    """Top-level taskledger configuration."""

    storage: StorageConfig = Field(default_factory=StorageConfig)


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration, falling back to defaults.

    A missing file yields the defaults. An unreadable or invalid file
    is reported with a warning and also yields the defaults. The
    TASKLEDGER_DATABASE_URL environment variable wins over the file.

    Args:
        path: Config file to read. Defaults to ~/.taskledger/config.json.
    """
    config_file = path or get_config_dir() / CONFIG_FILENAME
    config = AppConfig()
    if config_file.exists():
        try:
            data = json.loads(config_file.read_text(encoding="utf-8"))
            config = AppConfig(**data)
        except (OSError, json.JSONDecodeError, ValidationError, TypeError) as e:
            logger.warning(f"Ignoring invalid config file {config_file}: {e}")

    env_url = os.environ.get(DATABASE_URL_ENV_VAR)
    if env_url:
        config = config.model_copy(
            update={"storage": config.storage.model_copy(update={"database_url": env_url})}
        )
    return config


def save_config(config: AppConfig, path: Path | None = None) -> Path:
    """Write configuration as JSON and return the file written."""
    config_file = path or get_config_dir() / CONFIG_FILENAME
    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(
        json.dumps(config.model_dump(), indent=2),
        encoding="utf-8",
    )
    return config_file
