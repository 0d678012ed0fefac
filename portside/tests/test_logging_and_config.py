from __future__ import annotations

import logging

import pytest
from fastapi.testclient import TestClient


def _fresh_env(monkeypatch):
    for name in (
        "PORTSIDE_API_KEYS",
        "PORTSIDE_REQUIRE_AUTH",
        "PORTSIDE_COOKIE_SECURE",
        "PORTSIDE_COOKIE_PATH",
        "PORTSIDE_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def _records(caplog, message):
    return [r for r in caplog.records if r.getMessage() == message]


def test_access_log_one_record_per_request_without_form_values(monkeypatch, caplog):
    _fresh_env(monkeypatch)
    caplog.set_level(logging.INFO)

    from portside.api.server import create_app

    client = TestClient(create_app())
    caplog.clear()

    r = client.post("/boats/rename", data={"boatName": "Secret"})
    assert r.status_code == 200

    access = _records(caplog, "api_request")
    assert len(access) == 1
    rec = access[0]
    assert rec.name == "portside.api"
    assert rec.request_id == r.headers["x-request-id"]
    assert rec.actor_id is None
    assert rec.method == "POST"
    assert rec.path == "/boats/rename"
    assert rec.status_code == 200
    assert isinstance(rec.duration_ms, int)

    # Neither the form body nor the resulting cookie value reaches the logs.
    for record in caplog.records:
        assert "Secret" not in repr(record.__dict__)


def test_cookie_value_not_logged_on_load(monkeypatch, caplog):
    _fresh_env(monkeypatch)
    caplog.set_level(logging.INFO)

    from portside.api.server import create_app

    client = TestClient(create_app())
    client.cookies.set("boatName", "Hidden%20Cove")
    caplog.clear()

    assert client.get("/boats").json() == {"boatName": "Hidden Cove"}
    assert len(_records(caplog, "api_request")) == 1
    for record in caplog.records:
        assert "Hidden" not in repr(record.__dict__)


def test_gate_denial_is_logged_with_actor(monkeypatch, caplog):
    _fresh_env(monkeypatch)
    caplog.set_level(logging.INFO)

    from portside.api.server import create_app

    client = TestClient(create_app())
    caplog.clear()

    r = client.post("/api/dog")
    assert r.status_code == 401

    denied = _records(caplog, "resource_denied")
    assert len(denied) == 1
    assert denied[0].name == "portside.core"
    assert denied[0].actor_id == "anonymous"
    assert denied[0].resource == "dog"
    assert _records(caplog, "resource_granted") == []

    access = _records(caplog, "api_request")
    assert len(access) == 1
    assert access[0].actor_id == "anonymous"
    assert access[0].status_code == 401


def test_gate_grant_is_logged_with_actor(monkeypatch, caplog):
    _fresh_env(monkeypatch)
    monkeypatch.setenv("PORTSIDE_API_KEYS", "adminkey:alice:admin")
    caplog.set_level(logging.INFO)

    from portside.api.server import create_app

    client = TestClient(create_app())
    caplog.clear()

    r = client.post("/api/dog", headers={"X-Portside-API-Key": "adminkey"})
    assert r.status_code == 200

    granted = _records(caplog, "resource_granted")
    assert len(granted) == 1
    assert granted[0].actor_id == "alice"
    assert _records(caplog, "resource_denied") == []


def test_gate_without_identity_logs_missing_actor(caplog):
    from portside.core.errors import Unauthorized
    from portside.core.resources import ResourceGate

    caplog.set_level(logging.INFO, logger="portside.core")
    with pytest.raises(Unauthorized):
        ResourceGate().handle(None)

    denied = _records(caplog, "resource_denied")
    assert len(denied) == 1
    assert denied[0].actor_id is None


def test_malformed_cookie_secure_falls_back_to_false(monkeypatch):
    _fresh_env(monkeypatch)
    monkeypatch.setenv("PORTSIDE_COOKIE_SECURE", "maybe")

    from portside.api.server import ServiceConfig, create_app

    assert ServiceConfig.from_env().cookie_secure is False

    r = TestClient(create_app()).post("/boats/rename", data={"boatName": "Skipper"})
    assert "Secure" not in r.headers["set-cookie"]


def test_cookie_path_from_env(monkeypatch):
    _fresh_env(monkeypatch)
    monkeypatch.setenv("PORTSIDE_COOKIE_PATH", "/boats")

    from portside.api.server import ServiceConfig, create_app

    assert ServiceConfig.from_env().cookie_path == "/boats"

    r = TestClient(create_app()).post("/boats/rename", data={"boatName": "Skipper"})
    assert "Path=/boats" in r.headers["set-cookie"]


def test_blank_cookie_path_defaults_to_root(monkeypatch):
    _fresh_env(monkeypatch)
    monkeypatch.setenv("PORTSIDE_COOKIE_PATH", "   ")

    from portside.api.server import ServiceConfig

    assert ServiceConfig.from_env().cookie_path == "/"


def test_unknown_log_level_falls_back_to_info(monkeypatch):
    _fresh_env(monkeypatch)
    monkeypatch.setenv("PORTSIDE_LOG_LEVEL", "verbose")

    from portside.api.server import ServiceConfig, create_app

    assert ServiceConfig.from_env().log_level == "INFO"

    app = create_app()
    assert logging.getLogger("portside.api").level == logging.INFO
    assert TestClient(app).get("/health").status_code == 200


def test_log_level_name_is_case_insensitive(monkeypatch):
    _fresh_env(monkeypatch)
    monkeypatch.setenv("PORTSIDE_LOG_LEVEL", " debug ")

    from portside.api.server import ServiceConfig

    assert ServiceConfig.from_env().log_level == "DEBUG"
