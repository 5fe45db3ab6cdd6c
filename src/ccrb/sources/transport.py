"""HTTP access to upstream sources."""

from __future__ import annotations

from typing import Any, Mapping, Protocol

import requests

from ..core.logging import get_logger
from ..errors import TransportError

logger = get_logger(__name__)


class Transport(Protocol):
    def fetch_text(self, url: str) -> str: ...

    def fetch_json(self, url: str, body: Mapping[str, Any], headers: Mapping[str, str] | None = None) -> Any: ...


class HttpTransport:
    """`requests`-backed transport sharing one session for the whole run."""

    def __init__(self, *, timeout: float = 60.0, user_agent: str | None = None) -> None:
        self.timeout = timeout
        self.session = requests.Session()
        if user_agent:
            self.session.headers["User-Agent"] = user_agent

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def fetch_text(self, url: str) -> str:
        response = self._send("GET", url)
        response.encoding = response.encoding or "utf-8"
        return response.text

    def fetch_json(self, url: str, body: Mapping[str, Any], headers: Mapping[str, str] | None = None) -> Any:
        response = self._send("POST", url, json=body, headers=dict(headers or {}))
        try:
            return response.json()
        except ValueError:
            raise TransportError(url, f"non-JSON response: {response.text[:200]}") from None

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        logger.debug("transport.request", method=method, url=url)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise TransportError(url, str(exc)) from exc

        if response.status_code >= 400:
            raise TransportError(
                url,
                f"HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        return response
