"""Tests for the audit log."""

import json
import logging
from pathlib import Path

import pytest

from tagpurge import FileAuditSink, MemoryAuditSink, PurgeSettings
from tagpurge.audit import AuditSink, audit_record


class TestAuditRecord:
    """Tests for audit_record enrichment."""

    def test_enrichment(self, settings: PurgeSettings) -> None:
        """Test that host, site, level and timestamp are added."""
        record = audit_record("info", {"purge": False}, settings)
        assert record["purge"] is False
        assert record["level"] == "info"
        assert record["server"] == "web-1"
        assert record["site"] == "acme.example.com"
        assert len(record["created"]) == len("2024-01-01 00:00:00")


class TestFileAuditSink:
    """Tests for FileAuditSink."""

    def test_appends_json_lines(self, tmp_path: Path) -> None:
        """Test one JSON object per line, appended."""
        path = tmp_path / "cf.log"
        sink = FileAuditSink(str(path))
        sink.write({"level": "info", "n": 1})
        sink.write({"level": "purge", "n": 2})

        lines = path.read_text().splitlines()
        assert [json.loads(line)["n"] for line in lines] == [1, 2]

    def test_from_settings(self, tmp_path: Path) -> None:
        """Test that the path comes from CF_LOG_PATH."""
        path = tmp_path / "cf.log"
        sink = FileAuditSink.from_settings(PurgeSettings(log_path=str(path)))
        sink.write({"level": "info"})
        assert path.exists()

    def test_missing_path_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that an unset path only logs a diagnostic."""
        with caplog.at_level(logging.WARNING, logger="tagpurge.audit"):
            FileAuditSink(None).write({"level": "info"})
        assert "not configured" in caplog.text

    def test_unwritable_path_warns(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that an unwritable path never raises."""
        with caplog.at_level(logging.WARNING, logger="tagpurge.audit"):
            FileAuditSink(str(tmp_path)).write({"level": "info"})
        assert "not writable" in caplog.text


class TestMemoryAuditSink:
    """Tests for MemoryAuditSink."""

    def test_collects_and_clears(self, sink: MemoryAuditSink) -> None:
        """Test record collection."""
        sink.write({"level": "info"})
        assert sink.records == [{"level": "info"}]
        sink.clear()
        assert sink.records == []

    def test_satisfies_protocol(self, sink: MemoryAuditSink) -> None:
        """Test that both sinks match the AuditSink protocol."""
        assert isinstance(sink, AuditSink)
        assert isinstance(FileAuditSink(None), AuditSink)
