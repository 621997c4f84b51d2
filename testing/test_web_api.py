"""Tests for the HTTP and Socket.IO surface."""

from types import SimpleNamespace

import pytest

import web_api
from completion_client import CompletionClient
from connection_registry import ConnectionRegistry
from session_relay import SessionRelay


@pytest.fixture
def server():
    registry = ConnectionRegistry()
    relay = SessionRelay(
        completion_client=CompletionClient(api_key=None),
        registry=registry,
        verbose_logging=False,
    )
    app, socketio = web_api.create_app(relay=relay, registry=registry)
    app.config["TESTING"] = True
    return app, socketio, registry


def events_named(received, name):
    return [event for event in received if event["name"] == name]


def test_connect_is_confirmed_and_registered(server):
    app, socketio, registry = server

    client = socketio.test_client(app)
    confirmed = events_named(client.get_received(), "connection-confirmed")

    assert len(confirmed) == 1
    assert "voice-chat" in confirmed[0]["args"][0]["features"]
    assert registry.stats()["active"] == 1

    client.disconnect()
    assert registry.stats() == {"active": 0, "total": 1}


def test_chat_message_round_trip(server):
    app, socketio, registry = server
    client = socketio.test_client(app)
    client.get_received()

    client.emit("chat message", {"text": "hello how are you", "learningMode": "fluency"})
    responses = events_named(client.get_received(), "tutor response")

    assert len(responses) == 1
    payload = responses[0]["args"][0]
    assert "English tutor" in payload["reply"]
    assert payload["speechAnalysis"]["wordCount"] == 4
    assert payload["metadata"]["learningMode"] == "fluency"


def test_oversized_chat_message_gets_error_response(server):
    app, socketio, _ = server
    client = socketio.test_client(app)
    client.get_received()

    client.emit("chat message", "x" * 1001)
    payload = events_named(client.get_received(), "tutor response")[0]["args"][0]

    assert payload["error"] is True
    assert "1000 characters" in payload["reply"]


def test_ping_answers_pong(server):
    app, socketio, _ = server
    client = socketio.test_client(app)
    client.get_received()

    client.emit("ping")
    pongs = events_named(client.get_received(), "pong")

    assert isinstance(pongs[0]["args"][0]["timestamp"], int)


def test_health_reports_uptime_and_memory(server):
    app, _, _ = server

    response = app.test_client().get("/health")
    data = response.get_json()

    assert response.status_code == 200
    assert data["status"] == "healthy"
    assert data["uptime"] >= 0
    assert data["memory"]["rss"] > 0
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_memory_usage_reports_current_rss(monkeypatch):
    fake_info = SimpleNamespace(rss=52_428_800, vms=104_857_600)
    monkeypatch.setattr(
        web_api.psutil, "Process", lambda: SimpleNamespace(memory_info=lambda: fake_info)
    )

    assert web_api.memory_usage() == {"rss": 52_428_800, "vms": 104_857_600}


def test_models_and_personalities_endpoints(server):
    app, _, _ = server
    http = app.test_client()

    models = http.get("/api/models").get_json()
    personalities = http.get("/api/personalities").get_json()

    assert models[0]["id"] == "openai/gpt-3.5-turbo"
    assert {"id", "name", "description"} <= set(personalities[0])
    assert "conversation_partner" in [p["id"] for p in personalities]


def test_api_routes_are_rate_limited(monkeypatch):
    monkeypatch.setattr(web_api, "RATE_LIMIT_MAX", 2)
    app, _ = web_api.create_app(
        relay=SessionRelay(completion_client=CompletionClient(api_key=None), verbose_logging=False)
    )
    http = app.test_client()

    statuses = [http.get("/api/models").status_code for _ in range(3)]
    limited = http.get("/api/models")

    assert statuses == [200, 200, 429]
    assert limited.get_json()["retryAfter"] == web_api.RATE_LIMIT_WINDOW
    assert http.get("/health").status_code == 200


def test_unknown_route_returns_json_404(server):
    app, _, _ = server

    response = app.test_client().get("/does-not-exist")

    assert response.status_code == 404
    assert response.get_json()["success"] is False
