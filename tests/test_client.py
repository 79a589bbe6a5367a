import pytest

from api.client import CastleAPIError, CastleClient
from castle import Action, CastleState


class FakeResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload
        self.text = str(payload)

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        return self._payload


class FakeHTTP:
    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def request(self, method, url, json=None, timeout=None):
        self.calls.append((method, url, json))
        return self.responses[(method, url.split("localhost:8000", 1)[1])]


def test_get_state_parses_castle_state():
    http = FakeHTTP({("GET", "/state"): FakeResponse(200, CastleState.default().to_dict())})
    client = CastleClient("http://localhost:8000/", http=http)
    assert client.get_state() == CastleState.default()
    assert http.calls == [("GET", "http://localhost:8000/state", None)]


def test_enqueue_posts_action_dict():
    http = FakeHTTP({("POST", "/actions"): FakeResponse(200, {"accepted": True, "applies_at_turn": 1})})
    client = CastleClient(http=http)
    result = client.enqueue(Action.hire(2, requested_by="Accountant"))
    assert result["applies_at_turn"] == 1
    assert http.calls[0][2] == {"type": "Hire", "params": {"count": 2}, "requested_by": "Accountant"}


def test_error_responses_raise_with_detail():
    http = FakeHTTP({("POST", "/tick"): FakeResponse(500, {"detail": "engine exploded"})})
    client = CastleClient(http=http)
    with pytest.raises(CastleAPIError) as excinfo:
        client.tick()
    assert excinfo.value.status_code == 500
    assert excinfo.value.detail == "engine exploded"


def test_autotick_status():
    http = FakeHTTP({("GET", "/autotick/status"): FakeResponse(200, {"enabled": True, "interval": 1.0})})
    assert CastleClient(http=http).autotick_enabled() is True
