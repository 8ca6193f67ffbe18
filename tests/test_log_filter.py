"""Tests for SyncErrorLogFilter, which suppresses duplicate sync error console lines."""

import logging

from addon_manager_cli.ui.log_filter import SyncErrorLogFilter


def _make_record(message: str, level: int = logging.ERROR) -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )


class TestSyncErrorLogFilter:
    def setup_method(self) -> None:
        self.f = SyncErrorLogFilter()

    def test_suppresses_sync_error(self) -> None:
        assert self.f.filter(_make_record("Sync error: quota exceeded")) is False

    def test_passes_unrelated_error(self) -> None:
        assert self.f.filter(_make_record("Failed to write settings")) is True

    def test_passes_debug_sync_message(self) -> None:
        assert self.f.filter(_make_record("Sync error: details", level=logging.DEBUG)) is True

    def test_passes_warning_level_through(self) -> None:
        assert self.f.filter(_make_record("Sync error: x", level=logging.WARNING)) is True
