"""JSON configuration for the demo and management tools.

Example ``.userbase/config.json``::

    {
        "db_path": ".userbase/database-name",
        "fallback_to_destructive_migration": true,
        "worker_threads": 2
    }

Keys not present in the file keep their defaults.
"""

import json
from pathlib import Path
from typing import Any, Optional

import jsonschema

from .database import DEFAULT_DB_PATH, JOURNAL_MODES

DEFAULT_CONFIG_PATH = ".userbase/config.json"

DEFAULT_CONFIG: dict[str, Any] = {
    "db_path": DEFAULT_DB_PATH,
    "fallback_to_destructive_migration": False,
    "journal_mode": "WAL",
    "worker_threads": 1,
    "log_level": "INFO",
}

CONFIG_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "db_path": {"type": "string", "minLength": 1},
        "fallback_to_destructive_migration": {"type": "boolean"},
        "journal_mode": {"type": "string", "enum": list(JOURNAL_MODES)},
        "worker_threads": {"type": "integer", "minimum": 1},
        "log_level": {
            "type": "string",
            "enum": ["DEBUG", "INFO", "WARNING", "ERROR"],
        },
    },
}


class ConfigError(Exception):
    """The config file is unreadable or does not match CONFIG_SCHEMA."""


def load_config(config_path: Optional[str] = None) -> dict[str, Any]:
    """Load and validate a config file, filling in defaults.

    A ``None`` path or a missing file yields the defaults.

    Raises:
        ConfigError: The file is not valid JSON or fails validation.
    """
    config = dict(DEFAULT_CONFIG)
    if config_path is None:
        return config

    path = Path(config_path)
    if not path.exists():
        return config

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        jsonschema.validate(data, CONFIG_SCHEMA)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path}: invalid JSON: {exc}") from exc
    except jsonschema.ValidationError as exc:
        raise ConfigError(f"{path}: {exc.message}") from exc

    config.update(data)
    return config
