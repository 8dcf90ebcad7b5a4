"""Append-only lifecycle log for runs against a user database.

Each line of the log is one JSON object::

    {"timestamp": "...", "event_type": "demo_started", "db_path": "...", "modes": ["basic"]}

The log is a side channel next to ``logging``: it records which database a
run touched and when, so separate runs can be compared afterwards. Failing
to write it never interrupts the run.
"""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

DEFAULT_EVENT_LOG = ".userbase/events.jsonl"


def event_log_path() -> Path:
    """Return the log file, overridable with ``USERBASE_EVENT_LOG``."""
    return Path(os.environ.get("USERBASE_EVENT_LOG", DEFAULT_EVENT_LOG))


def log_event(event_type: str, db_path: str, **details: Any) -> None:
    """Record an event for the database at ``db_path``.

    Args:
        event_type: What happened, e.g. "demo_started".
        db_path: Database the run works on.
        **details: Extra JSON-serialisable fields.
    """
    event = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "event_type": event_type,
        "db_path": db_path,
        "pid": os.getpid(),
        **details,
    }
    file_path = event_log_path()
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with file_path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(event, ensure_ascii=False) + "\n")
    except OSError:
        pass
