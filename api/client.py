"""Thin HTTP client for the castle API (used by scripts and external agents)."""

from __future__ import annotations

from typing import Any, Dict, Optional

import requests

from castle import Action, CastleState


class CastleAPIError(RuntimeError):
    """The API answered with a non-2xx status."""

    def __init__(self, status_code: int, detail: Any):
        super().__init__(f"Castle API error {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class CastleClient:
    def __init__(self, base_url: str = "http://localhost:8000", timeout: float = 5.0, http: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = http or requests.Session()

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        resp = self.http.request(method, f"{self.base_url}{path}", json=payload, timeout=self.timeout)
        if not resp.ok:
            try:
                detail = resp.json().get("detail", resp.text)
            except ValueError:
                detail = resp.text
            raise CastleAPIError(resp.status_code, detail)
        return resp.json()

    def get_state(self) -> CastleState:
        return CastleState.from_dict(self._request("GET", "/state"))

    def enqueue(self, action: Action) -> Dict[str, Any]:
        """Submit an action; raises CastleAPIError (400) when it is malformed."""
        return self._request("POST", "/actions", action.to_dict())

    def tick(self) -> Dict[str, Any]:
        return self._request("POST", "/tick")

    def start_autotick(self) -> Dict[str, Any]:
        return self._request("POST", "/autotick/start")

    def stop_autotick(self) -> Dict[str, Any]:
        return self._request("POST", "/autotick/stop")

    def autotick_enabled(self) -> bool:
        return bool(self._request("GET", "/autotick/status")["enabled"])

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/health")
