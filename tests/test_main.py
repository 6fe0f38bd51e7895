# tests/test_main.py
from __future__ import annotations

import pytest

import main
from peer.session import Session
from storage.credential_store import CredentialStore


def _scripted(answers):
    it = iter(answers)

    def read(prompt=""):
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    return read


def test_missing_port_prints_usage(monkeypatch, capsys) -> None:
    def fail(*args, **kwargs):
        raise AssertionError("no config or auth expected")

    monkeypatch.setattr(main, "load_config", fail)
    assert main.main([]) == 0
    assert main.USAGE in capsys.readouterr().out


def test_bad_port_prints_usage(capsys) -> None:
    assert main.main(["abc"]) == 2
    assert main.USAGE in capsys.readouterr().out


def test_authenticate_reprompts_until_login(credentials: CredentialStore, capsys) -> None:
    session = Session(credentials)
    inputs = _scripted(["x", "r", "alice", "l", "alice", "l", "alice"])
    passwords = _scripted(["secret", "wrong", "secret"])

    assert main.authenticate(session, input_fn=inputs, password_fn=passwords) is True
    assert session.username == "alice"
    out = capsys.readouterr().out
    assert "Please enter 'l' or 'r'." in out
    assert "User registered." in out
    assert "Login failed" in out
    assert "Login successful!" in out


def test_authenticate_reports_duplicate(credentials: CredentialStore, capsys) -> None:
    credentials.register("alice", "secret")
    session = Session(credentials)
    inputs = _scripted(["r", "alice"])
    passwords = _scripted(["other"])

    assert main.authenticate(session, input_fn=inputs, password_fn=passwords) is False
    assert "Registration failed" in capsys.readouterr().out
    assert not session.active
