"""Unit tests for AuditLog."""

import json
import logging
from unittest.mock import AsyncMock

import pytest

from ogw.domain.audit.model import ANONYMOUS
from ogw.domain.audit.service.audit import AuditLog
from ogw.infrastructure.audit.sink import InMemoryAuditSink, LoggingAuditSink


class TestAuditLog:
    @pytest.mark.asyncio
    async def test_records_event(self):
        sink = InMemoryAuditSink()
        audit = AuditLog(_sink=sink)

        event = await audit.record("ToS approved", actor="github-1", payload={"uid": "u"})

        assert sink.events == [event]
        assert event.actor == "github-1"
        assert event.payload == {"uid": "u"}

    @pytest.mark.asyncio
    async def test_anonymous_actor(self):
        sink = InMemoryAuditSink()

        event = await AuditLog(_sink=sink).record("Interaction aborted")

        assert event.actor == ANONYMOUS

    @pytest.mark.asyncio
    async def test_sink_failure_is_swallowed_and_logged(self, caplog):
        sink = AsyncMock()
        sink.record.side_effect = RuntimeError("disk full")

        with caplog.at_level(logging.ERROR, logger="ogw.domain.audit.service.audit"):
            event = await AuditLog(_sink=sink).record("Logged in", actor="github-1")

        assert event is None
        assert "Failed to record audit event" in caplog.text


class TestLoggingAuditSink:
    @pytest.mark.asyncio
    async def test_writes_json_line(self, caplog):
        audit = AuditLog(_sink=LoggingAuditSink())

        with caplog.at_level(logging.INFO, logger="ogw.audit"):
            event = await audit.record("Client authorized", actor="github-1", payload={"k": "v"})

        (record,) = [r for r in caplog.records if r.name == "ogw.audit"]
        data = json.loads(record.getMessage())
        assert data["id"] == str(event.id)
        assert data["action"] == "Client authorized"
        assert data["payload"] == {"k": "v"}
