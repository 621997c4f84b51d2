"""Tests for the startup crash hooks."""

import threading
from types import SimpleNamespace

import start_app


class RecordingLogger:
    def __init__(self):
        self.records = []

    def critical(self, message, **kwargs):
        self.records.append(("critical", message, kwargs))

    def error(self, message, **kwargs):
        self.records.append(("error", message, kwargs))


def raised(exc):
    try:
        raise exc
    except Exception as e:
        return type(e), e, e.__traceback__


def test_uncaught_exception_is_logged_and_exits_with_failure(monkeypatch):
    log = RecordingLogger()
    exit_codes = []
    monkeypatch.setattr(start_app, "logger", log)
    monkeypatch.setattr(start_app.os, "_exit", exit_codes.append)

    start_app.handle_uncaught_exception(*raised(RuntimeError("boom")))

    assert exit_codes == [1]
    level, _, kwargs = log.records[0]
    assert level == "critical"
    assert kwargs["exc_info"][0] is RuntimeError


def test_keyboard_interrupt_does_not_force_exit(monkeypatch):
    exit_codes = []
    forwarded = []
    monkeypatch.setattr(start_app.os, "_exit", exit_codes.append)
    monkeypatch.setattr(start_app.sys, "__excepthook__", lambda *exc: forwarded.append(exc[0]))

    start_app.handle_uncaught_exception(KeyboardInterrupt, KeyboardInterrupt(), None)

    assert exit_codes == []
    assert forwarded == [KeyboardInterrupt]


def test_thread_exception_is_logged_without_exiting(monkeypatch):
    log = RecordingLogger()
    exit_codes = []
    monkeypatch.setattr(start_app, "logger", log)
    monkeypatch.setattr(start_app.os, "_exit", exit_codes.append)
    exc_type, exc_value, exc_traceback = raised(ValueError("worker failed"))
    args = SimpleNamespace(
        exc_type=exc_type,
        exc_value=exc_value,
        exc_traceback=exc_traceback,
        thread=SimpleNamespace(name="relay-worker"),
    )

    assert start_app.handle_thread_exception(args) is None

    assert exit_codes == []
    level, message, kwargs = log.records[0]
    assert level == "error"
    assert "relay-worker" in message
    assert kwargs["exc_info"][1] is exc_value


def test_install_hooks_registers_both_handlers(monkeypatch):
    signals = []
    monkeypatch.setattr(start_app.sys, "excepthook", start_app.sys.excepthook)
    monkeypatch.setattr(threading, "excepthook", threading.excepthook)
    monkeypatch.setattr(start_app.signal, "signal", lambda signum, handler: signals.append(signum))

    start_app.install_hooks()

    assert start_app.sys.excepthook is start_app.handle_uncaught_exception
    assert threading.excepthook is start_app.handle_thread_exception
    assert set(signals) == {start_app.signal.SIGTERM, start_app.signal.SIGINT}
