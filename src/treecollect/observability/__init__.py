"""Operator-facing observability helpers."""

from .log_capture import LogBuffer, install_log_capture, remove_log_capture

__all__ = ["LogBuffer", "install_log_capture", "remove_log_capture"]
