from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict

import requests

DEFAULT_BASE_URL = "http://localhost:3025"
DEFAULT_TIMEOUT = 30


class BackendError(Exception):
    """The automation backend could not be reached or answered with garbage."""


@dataclass
class BackendResponse:
    status_code: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class AutomationHttpClient:
    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
        logger=None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.logger = logger
        self.last_latency_ms: float | None = None

    def _log(self, level: str, message: str, *args: Any) -> None:
        if self.logger:
            getattr(self.logger, level)(message, *args)

    def post_json(self, path: str, payload: Dict[str, Any]) -> BackendResponse:
        """POST ``payload`` once. No retries: browser actions are not idempotent."""

        url = f"{self.base_url}{path}"
        start = time.time()
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            self._log("warning", "Automation backend request to %s failed: %s", path, exc)
            raise BackendError(f"Request to {path} failed: {exc}") from exc
        finally:
            self.last_latency_ms = (time.time() - start) * 1000

        try:
            body = response.json()
        except ValueError as exc:
            self._log("warning", "Automation backend returned non-JSON body for %s (%s)", path, response.status_code)
            raise BackendError(f"Invalid JSON from {path} (HTTP {response.status_code})") from exc
        return BackendResponse(status_code=response.status_code, body=body)

    def close(self) -> None:
        self.session.close()
