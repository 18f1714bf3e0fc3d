import logging

import requests

from raygate.log.handler import loki
from raygate.log.handler.loki import LokiHandler
from raygate.log.setup import setup_logging


class _Response:
    status_code = 204
    text = ""


def _record(message: str) -> logging.LogRecord:
    return logging.LogRecord("raygate.test", logging.WARNING, __file__, 1, message, None, None)


def test_loki_handler_flushes_full_batches(monkeypatch) -> None:
    calls = []

    def fake_post(url, json, headers, timeout):
        calls.append((url, json, headers))
        return _Response()

    monkeypatch.setattr(loki.requests, "post", fake_post)
    handler = LokiHandler("http://loki:3100/", org_id="tenant", flush_interval=60, batch_size=2)
    try:
        handler.emit(_record("first"))
        assert calls == []
        handler.emit(_record("second"))
    finally:
        handler.close()

    assert len(calls) == 1
    url, payload, headers = calls[0]
    assert url == "http://loki:3100/loki/api/v1/push"
    assert headers["X-Scope-OrgID"] == "tenant"
    streams = payload["streams"]
    assert [entry["values"][0][1] for entry in streams] == ["first", "second"]
    assert streams[0]["stream"]["level"] == "warning"
    assert streams[0]["stream"]["logger"] == "raygate.test"


def test_loki_handler_flushes_remaining_records_on_close(monkeypatch) -> None:
    calls = []
    monkeypatch.setattr(loki.requests, "post", lambda url, json, headers, timeout: calls.append(json) or _Response())
    handler = LokiHandler("http://loki:3100", flush_interval=60, batch_size=100)
    handler.emit(_record("pending"))
    handler.close()
    assert len(calls) == 1
    assert calls[0]["streams"][0]["values"][0][1] == "pending"


def test_loki_handler_survives_network_errors(monkeypatch, capsys) -> None:
    def unreachable(url, json, headers, timeout):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(loki.requests, "post", unreachable)
    handler = LokiHandler("http://loki:3100", flush_interval=60, batch_size=1)
    handler.emit(_record("lost"))
    handler.close()
    assert "Failed to send 1 logs to Loki" in capsys.readouterr().err


def test_setup_logging_installs_single_console_handler() -> None:
    root = logging.getLogger()
    previous = list(root.handlers)
    try:
        setup_logging(logging.WARNING)
        setup_logging(logging.WARNING)
        stream_handlers = [h for h in root.handlers if type(h) is logging.StreamHandler]
        assert len(stream_handlers) == 1
        assert stream_handlers[0].level == logging.WARNING
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
        for handler in previous:
            root.addHandler(handler)
