#!/usr/bin/env python3
"""Unit tests for the notice bus, displays and event log."""

import io
import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "tools"))

from userbase.bus import Notice, NoticeBus
from userbase.display import BaseDisplay, ConsoleDisplay
from userbase.events import event_log_path, log_event


class TestNoticeBus:
    @pytest.mark.asyncio
    async def test_fifo_order(self):
        bus = NoticeBus()
        await bus.publish(Notice("console", "one"))
        bus.publish_nowait(Notice("console", "two"))

        assert (await bus.consume()).content == "one"
        assert (await bus.consume()).content == "two"

    @pytest.mark.asyncio
    async def test_join_waits_for_task_done(self):
        bus = NoticeBus()
        await bus.publish(Notice("console", "one"))
        await bus.consume()
        bus.task_done()
        await bus.join()
        assert bus.outbound.empty()


class TestDisplays:
    def test_cannot_instantiate(self):
        """BaseDisplay is abstract — cannot be instantiated."""
        with pytest.raises(TypeError, match="abstract"):
            BaseDisplay()

    def test_name_from_class(self):
        assert ConsoleDisplay().name == "console"

    @pytest.mark.asyncio
    async def test_console_writes_line(self):
        stream = io.StringIO()
        await ConsoleDisplay(stream).show(Notice("console", "1: Karla Kolumna"))
        assert stream.getvalue() == "1: Karla Kolumna\n"


class TestEventLog:
    def test_default_path(self, monkeypatch):
        monkeypatch.delenv("USERBASE_EVENT_LOG", raising=False)
        assert event_log_path() == Path(".userbase/events.jsonl")

    def test_log_event_writes_jsonl(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("USERBASE_EVENT_LOG", raising=False)

        log_event("demo_started", db_path="database-name")

        event_file = tmp_path / ".userbase/events.jsonl"
        lines = event_file.read_text().strip().splitlines()
        assert len(lines) == 1

        payload = json.loads(lines[0])
        assert payload["event_type"] == "demo_started"
        assert payload["db_path"] == "database-name"
        assert isinstance(payload["pid"], int)
        assert payload["pid"] > 0
        assert "timestamp" in payload

    def test_unwritable_log_is_ignored(self, tmp_path, monkeypatch):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        monkeypatch.setenv("USERBASE_EVENT_LOG", str(blocker / "events.jsonl"))
        log_event("demo_stopped", db_path="database-name")
