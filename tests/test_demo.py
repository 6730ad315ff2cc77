"""End-to-end scenarios against the example service."""

import logging

import pytest
from pydantic import ValidationError
from starlette.testclient import TestClient

from typedroute import demo


@pytest.fixture
def client():
    return TestClient(demo.create_app())


def test_post_creates_random_id(client):
    response = client.post("/", json={"name": "Alice"})
    assert response.status_code == 200
    payload = response.json()
    assert set(payload) == {"id"}
    assert isinstance(payload["id"], int)
    assert 0 <= payload["id"] <= 999


def test_put_echoes_id_and_name(client):
    response = client.put("/5", json={"name": "Bob"})
    assert response.status_code == 200
    assert response.json() == {"id": 5, "result": "Bob"}


def test_get_with_non_numeric_id_is_rejected(client):
    response = client.get("/abc")
    assert response.status_code == 400
    assert "id" in response.text


def test_put_without_name_is_rejected(client):
    response = client.put("/5", json={})
    assert response.status_code == 400
    assert "name" in response.text
    assert "Field required" in response.text


def test_get_without_body(client):
    response = client.get("/5")
    assert response.status_code == 200
    assert response.json() == {"res": 5}


def test_get_keeps_ids_beyond_float_precision(client):
    response = client.get("/9007199254740993")
    assert response.status_code == 200
    assert response.json() == {"res": 9007199254740993}


def test_put_rejects_word_path_id(client):
    response = client.put("/true", json={"name": "Bob"})
    assert response.status_code == 400
    assert response.text == "params.id: Value error, 'true' is not a number"


def test_post_rejects_non_string_name(client):
    response = client.post("/", json={"name": 12})
    assert response.status_code == 400
    assert response.text.startswith("body.name: ")


def test_put_reports_all_violations(client):
    response = client.put("/x", json={"name": None})
    assert response.status_code == 400
    assert len(response.text.split("\n")) == 2


def test_demo_router_is_introspectable():
    app = demo.create_app(plugins=())
    assert app.state.typed_router.entries() == ("create_item", "update_item", "read_item")


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("TYPEDROUTE_PORT", "8081")
    monkeypatch.setenv("TYPEDROUTE_HOST", "0.0.0.0")
    settings = demo.DemoSettings()
    assert settings.port == 8081
    assert settings.host == "0.0.0.0"
    assert settings.log_level == "INFO"


def test_settings_reject_invalid_port(monkeypatch):
    monkeypatch.setenv("TYPEDROUTE_PORT", "0")
    with pytest.raises(ValidationError):
        demo.DemoSettings()


def test_main_logs_startup_and_runs_server(monkeypatch, caplog):
    import uvicorn

    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.setenv("TYPEDROUTE_PORT", "4000")
    caplog.set_level(logging.INFO, logger="typedroute.demo")

    demo.main()

    [(app, kwargs)] = calls
    assert kwargs["port"] == 4000
    assert kwargs["host"] == "127.0.0.1"
    assert "Example app listening on port 4000!" in caplog.text
