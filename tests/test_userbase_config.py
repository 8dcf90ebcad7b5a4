#!/usr/bin/env python3

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "tools"))

from userbase.config import DEFAULT_CONFIG, ConfigError, load_config


def test_no_path_returns_defaults():
    assert load_config(None) == DEFAULT_CONFIG


def test_missing_file_returns_defaults(tmp_path):
    assert load_config(str(tmp_path / "absent.json")) == DEFAULT_CONFIG


def test_defaults_are_copied():
    config = load_config(None)
    config["db_path"] = "elsewhere"
    assert DEFAULT_CONFIG["db_path"] != "elsewhere"


def test_file_overrides_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"db_path": "x.db", "worker_threads": 4}))

    config = load_config(str(path))
    assert config["db_path"] == "x.db"
    assert config["worker_threads"] == 4
    assert config["journal_mode"] == DEFAULT_CONFIG["journal_mode"]


@pytest.mark.parametrize(
    "data",
    [
        {"unknown_key": 1},
        {"worker_threads": 0},
        {"journal_mode": "fast"},
        {"fallback_to_destructive_migration": "yes"},
        {"db_path": ""},
    ],
)
def test_schema_violations(tmp_path, data):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data))
    with pytest.raises(ConfigError):
        load_config(str(path))


def test_invalid_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(ConfigError, match="invalid JSON"):
        load_config(str(path))
