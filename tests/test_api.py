import pytest
from fastapi.testclient import TestClient

import api.app as app_module
from runtime.session import CastleSession


@pytest.fixture
def client():
    app_module.session = CastleSession(tick_interval=0.01)
    try:
        yield TestClient(app_module.app)
    finally:
        app_module.session.close()
        app_module.session = None


def test_state_and_health(client):
    state = client.get("/state").json()
    assert state["turn"] == 0
    assert state["gold"] == 25
    assert state["upgrade"] == {"active": False}

    assert client.get("/health").json() == {"status": "ok", "turn": 0}


def test_enqueue_then_tick(client):
    resp = client.post("/actions", json={"type": "Hire", "params": {"count": 2}, "requestedBy": "Accountant"})
    assert resp.status_code == 200
    assert resp.json() == {"accepted": True, "applies_at_turn": 1}

    pending = client.get("/actions").json()["pending"]
    assert pending[0]["type"] == "Hire"
    assert pending[0]["requested_by"] == "Accountant"
    assert pending[0]["queued_at_turn"] == 0

    client.post("/actions", json={"type": "StartUpgrade", "params": {}})
    client.post("/actions", json={"type": "BuyFood", "params": {"amount": 50}})

    tick = client.post("/tick").json()
    assert tick["success"] is True
    assert tick["turn"] == 1
    assert [a["type"] for a in tick["applied"]] == ["Hire", "StartUpgrade"]
    assert tick["rejected"][0]["type"] == "BuyFood"
    assert tick["rejected"][0]["error_code"] == "INSUFFICIENT_GOLD"
    assert any(event["type"] == "ACTION_REJECTED" for event in tick["events"])
    assert tick["state"]["workers"] == 7

    assert client.get("/state").json()["turn"] == 1
    assert client.get("/actions").json()["pending"] == []


@pytest.mark.parametrize(
    "payload",
    [
        {"type": "Hire", "params": {"count": -1}},
        {"type": "Hire", "params": {"count": 1.5}},
        {"type": "Summon", "params": {}},
        {"type": "AssignJobs", "params": {"miners": 1}},
    ],
)
def test_malformed_actions_get_400(client, payload):
    resp = client.post("/actions", json=payload)
    assert resp.status_code == 400
    assert resp.json()["detail"]
    assert client.get("/actions").json()["pending"] == []


def test_missing_type_is_a_validation_error(client):
    resp = client.post("/actions", json={"params": {}})
    assert resp.status_code == 422


def test_autotick_endpoints(client):
    assert client.get("/autotick/status").json()["enabled"] is False

    started = client.post("/autotick/start").json()
    assert started["started"] is True
    assert client.post("/autotick/start").json()["started"] is False
    assert client.get("/autotick/status").json()["enabled"] is True

    stopped = client.post("/autotick/stop").json()
    assert stopped["stopped"] is True
    assert client.get("/autotick/status").json()["enabled"] is False
    assert client.post("/autotick/stop").json()["stopped"] is False
