"""Bounded in-memory capture of recent log lines for the health endpoint."""

from __future__ import annotations

import logging
from collections import deque
from datetime import datetime, timezone


class LogBuffer(logging.Handler):
    """Logging handler keeping the newest ``capacity`` formatted records."""

    def __init__(self, capacity: int = 200, level: int = logging.INFO) -> None:
        super().__init__(level=level)
        self._lines: deque[str] = deque(maxlen=capacity)
        self.previous_level: int | None = None

    @property
    def capacity(self) -> int:
        return self._lines.maxlen or 0

    def emit(self, record: logging.LogRecord) -> None:
        try:
            timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
            line = f"[{timestamp}] [{record.levelname}] {record.getMessage()}"
            self.acquire()
            try:
                self._lines.append(line)
            finally:
                self.release()
        except Exception:
            self.handleError(record)

    def lines(self, newest_first: bool = True) -> list[str]:
        self.acquire()
        try:
            snapshot = list(self._lines)
        finally:
            self.release()
        return snapshot[::-1] if newest_first else snapshot

    def clear(self) -> None:
        self.acquire()
        try:
            self._lines.clear()
        finally:
            self.release()


def install_log_capture(capacity: int, logger: logging.Logger | None = None) -> LogBuffer:
    """Attach a new buffer to ``logger`` (the root logger by default)."""
    target = logger or logging.getLogger()
    buffer = LogBuffer(capacity=capacity)
    buffer.previous_level = target.level
    target.addHandler(buffer)
    # INFO records are dropped before reaching any handler while the logger sits at WARNING
    if target.level == logging.NOTSET or target.level > logging.INFO:
        target.setLevel(logging.INFO)
    return buffer


def remove_log_capture(buffer: LogBuffer, logger: logging.Logger | None = None) -> None:
    target = logger or logging.getLogger()
    target.removeHandler(buffer)
    if buffer.previous_level is not None:
        target.setLevel(buffer.previous_level)
    buffer.close()
