"""Tests for the command-line server runner."""

import pytest

from readfast import __main__ as runner


@pytest.fixture
def uvicorn_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(runner.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    return calls


def test_defaults(monkeypatch, uvicorn_calls):
    monkeypatch.setattr("sys.argv", ["readfast"])

    runner.main()

    app, kwargs = uvicorn_calls[0]
    assert app == "readfast.main:app"
    assert kwargs == {"host": "127.0.0.1", "port": 8000, "reload": False, "log_level": "info"}


def test_debug_and_bind_flags(monkeypatch, uvicorn_calls):
    monkeypatch.setattr("sys.argv", ["readfast", "--host", "0.0.0.0", "--port", "9000", "--debug"])

    runner.main()

    _, kwargs = uvicorn_calls[0]
    assert kwargs["host"] == "0.0.0.0"
    assert kwargs["port"] == 9000
    assert kwargs["log_level"] == "debug"
