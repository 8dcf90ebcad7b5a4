#!/usr/bin/env python3
"""Tests for the userbase-manage CLI."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "tools"))

from userbase.manage import main


@pytest.fixture
def run(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    db_path = str(tmp_path / "users.db")

    def _run(*args):
        return main(["--db-path", db_path, *args])

    return _run


def test_no_command_prints_help(run, capsys):
    assert run() == 1
    assert "usage" in capsys.readouterr().out


def test_add_and_list(run, capsys):
    assert run("add-user", "--first-name", "Karla", "--last-name", "Kolumna") == 0
    assert "✓ User created: 1 (Karla Kolumna)" in capsys.readouterr().out

    assert run("list-users") == 0
    out = capsys.readouterr().out
    assert "Karla" in out
    assert "Kolumna" in out


def test_list_empty(run, capsys):
    assert run("list-users") == 0
    assert "No users found" in capsys.readouterr().out


def test_duplicate_uid(run, capsys):
    assert run("add-user", "--first-name", "A", "--uid", "5") == 0
    assert run("add-user", "--first-name", "B", "--uid", "5") == 1
    assert "uid 5 already exists" in capsys.readouterr().err


def test_negative_uid(run, capsys):
    assert run("add-user", "--first-name", "A", "--uid", "-2") == 1
    assert "0 or positive" in capsys.readouterr().err


def test_show_users_skips_unknown(run, capsys):
    run("add-user", "--first-name", "Benjamin", "--last-name", "Blümchen")
    run("add-user", "--first-name", "Karla", "--last-name", "Kolumna")
    capsys.readouterr()

    assert run("show-users", "--uid", "2", "--uid", "99") == 0
    out = capsys.readouterr().out
    assert "Karla" in out
    assert "Benjamin" not in out


def test_find_user(run, capsys):
    run("add-user", "--first-name", "Karla", "--last-name", "Kolumna")
    capsys.readouterr()

    assert run("find-user", "--first-name", "Karla", "--last-name", "Kolumna") == 0
    assert "Kolumna" in capsys.readouterr().out

    assert run("find-user", "--first-name", "K%", "--last-name", "%", "--like") == 0
    assert "Karla" in capsys.readouterr().out

    assert run("find-user", "--first-name", "Nobody", "--last-name", "Here") == 1
    assert "No user named" in capsys.readouterr().err


def test_remove_user(run, capsys):
    run("add-user", "--first-name", "Gone")
    capsys.readouterr()

    assert run("remove-user", "--uid", "1") == 0
    assert "✓ Removed user 1" in capsys.readouterr().out

    assert run("remove-user", "--uid", "1") == 1
    assert "not found" in capsys.readouterr().err


def test_unopenable_database(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    blocker = tmp_path / "blocker"
    blocker.write_text("x")
    assert main(["--db-path", str(blocker / "db"), "list-users"]) == 1
    assert "Cannot open" in capsys.readouterr().err


def test_uid_too_large(run, capsys):
    assert run("add-user", "--first-name", "Huge", "--uid", str(2**63)) == 1
    assert "uid must be between 0 and" in capsys.readouterr().err

    assert run("remove-user", "--uid", str(2**64)) == 1
    assert "not found" in capsys.readouterr().err


def test_remove_user_help_mentions_missing_uid(run, capsys):
    with pytest.raises(SystemExit):
        run("remove-user", "--help")
    assert "exits 1 if the uid does not exist" in capsys.readouterr().out
