"""Tests for logging setup."""

import json
import logging

import pytest
import structlog

from boathub.core.logging import redact_sensitive, setup_logging


class TestRedactSensitive:
    def test_masks_credentials(self):
        event = {"event": "auth.login", "username": "alice", "password": "hunter2", "token": "t"}
        out = redact_sensitive(None, "info", event)
        assert out["password"] == "***"
        assert out["token"] == "***"
        assert out["username"] == "alice"

    def test_leaves_other_events_alone(self):
        event = {"event": "boat.created", "boat_id": "1"}
        assert redact_sensitive(None, "info", dict(event)) == event


@pytest.fixture
def restore_root_handlers():
    root = logging.getLogger()
    saved = list(root.handlers)
    yield
    root.handlers[:] = saved


class TestSetupLogging:
    def test_json_output(self, monkeypatch, capsys, restore_root_handlers):
        monkeypatch.setenv("BOATHUB_LOG_FORMAT", "json")
        setup_logging()

        structlog.get_logger("boathub.test").info("boat.created", boat_id="b1", password="x")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "boat.created"
        assert record["boat_id"] == "b1"
        assert record["password"] == "***"
        assert record["level"] == "info"
        assert record["logger"] == "boathub.test"
