"""JSON-over-HTTP transport for the presence client (stdlib urllib)."""

from __future__ import annotations

import http.client
import json
import logging
from typing import Any, Optional, Protocol
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from presence_client.exceptions import TransportError
from presence_client.session import ClientSession

logger = logging.getLogger(__name__)


class Transport(Protocol):
    def request_json(self, method: str, path: str, *, body: Optional[dict] = None) -> Any: ...


def _safe_preview(text: str, limit: int = 200) -> str:
    text = (text or "").strip()
    if len(text) <= limit:
        return text
    return text[:limit] + "...(truncated)"


def error_message_from(payload: Any, fallback: str) -> str:
    if isinstance(payload, dict):
        for key in ("error", "detail", "message"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return fallback


class HttpTransport:
    """
    One request, one attempt: no retries, timeout from the session.

    Every failure is raised as TransportError (status set for HTTP errors).
    """

    def __init__(self, session: ClientSession) -> None:
        self.session = session

    def request_json(self, method: str, path: str, *, body: Optional[dict] = None) -> Any:
        data = None
        headers = {"Accept": "application/json", **self.session.auth_headers()}
        if body is not None:
            data = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = "application/json"

        req = Request(self.session.url(path), data=data, headers=headers, method=method)

        try:
            with urlopen(req, timeout=self.session.timeout) as resp:
                raw = resp.read().decode("utf-8", errors="replace")
        except HTTPError as e:
            try:
                raw = e.read().decode("utf-8", errors="replace")
            except OSError:
                raw = ""
            try:
                payload = json.loads(raw) if raw else None
            except ValueError:
                payload = None
            message = error_message_from(payload, _safe_preview(raw) or str(e.reason))
            logger.info("HTTP %s %s failed: %s %s", method, path, e.code, message)
            raise TransportError(message, status=e.code) from e
        except URLError as e:
            raise TransportError(f"Network error: {e.reason}") from e
        except http.client.HTTPException as e:
            # Truncated body or broken status line.
            raise TransportError(f"Network error: {e!r}") from e
        except OSError as e:
            raise TransportError(f"Network error: {e}") from e

        if not raw:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            raise TransportError(f"Non-JSON response: {_safe_preview(raw)}") from e
