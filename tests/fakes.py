"""In-memory stand-ins for the Bot API server used across the test suite."""

import json
import os
import sys
from typing import Any, Callable, Optional, Union

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from actiongram.core.result import Failure, Result, Success
from actiongram.sdk.client import ActiongramClient
from actiongram.sdk.codec import write_envelope
from actiongram.sdk.exceptions import TransportError

Responder = Union[Result[Any], Callable[[dict], Result[Any]], Exception]


class FakeTransport:
    """Records every exchange and answers from scripted envelopes.

    ``getUpdates`` is simulated like the real server: pending updates with
    an ``update_id`` at or above the requested offset are returned, at most
    ``limit`` of them.  Every other endpoint answers from ``responses``
    (a queue per endpoint, the last entry repeating) or ``Success(True)``.
    """

    def __init__(self, responses: Optional[dict[str, list[Responder]]] = None) -> None:
        self.responses: dict[str, list[Responder]] = responses or {}
        self.updates: list[dict] = []
        self.calls: list[dict] = []
        self.files: dict[str, bytes] = {}

    async def __call__(self, method, url, headers, body):
        endpoint = url.rsplit("/", 1)[-1]
        payload = None
        if body is not None and headers.get("Content-Type") == "application/json":
            payload = json.loads(body)
        self.calls.append(
            {"method": method, "url": url, "endpoint": endpoint, "headers": dict(headers), "body": body, "json": payload}
        )

        if "/file/" in url:
            file_path = url.split("/file/", 1)[1].split("/", 1)[1]
            if file_path in self.files:
                return 200, self.files[file_path]
            return 404, b"Not Found"

        if endpoint == "getUpdates" and endpoint not in self.responses:
            return 200, write_envelope(Success(self._pending(payload)))

        result = self._next(endpoint, payload)
        return (200 if isinstance(result, Success) else 400), write_envelope(result)

    def _pending(self, payload: Optional[dict]) -> list[dict]:
        payload = payload or {}
        offset = payload.get("offset", 0)
        pending = [u for u in self.updates if u["update_id"] >= offset]
        limit = payload.get("limit")
        return pending if limit is None else pending[:limit]

    def _next(self, endpoint: str, payload: Optional[dict]) -> Result[Any]:
        queue = self.responses.get(endpoint)
        if not queue:
            return Success(True)
        responder = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(responder, Exception):
            raise responder
        if callable(responder):
            return responder(payload)
        return responder

    # ── assertions helpers ───────────────────────────────────────────────

    def endpoints(self) -> list[str]:
        return [call["endpoint"] for call in self.calls]

    def calls_to(self, endpoint: str) -> list[dict]:
        return [call for call in self.calls if call["endpoint"] == endpoint]


def make_client(transport: FakeTransport) -> ActiongramClient:
    return ActiongramClient("https://api.example.com/bot123", bot_token="123", transport=transport)


def failing(message: str = "connection refused") -> TransportError:
    return TransportError(message)


# ── Wire fixtures ────────────────────────────────────────────────────────────

USER = {"id": 42, "is_bot": False, "first_name": "Ada", "username": "ada"}
GROUP = {"id": -100, "type": "group", "title": "Readers"}


def message_json(text: Optional[str] = None, message_id: int = 1, sender: Optional[dict] = None, **extra: Any) -> dict:
    data: dict[str, Any] = {
        "message_id": message_id,
        "date": 1_700_000_000,
        "chat": dict(GROUP),
        "from": dict(sender or USER),
    }
    if text is not None:
        data["text"] = text
    data.update(extra)
    return data


def update_json(update_id: int, **payload: Any) -> dict:
    return {"update_id": update_id, **payload}


__all__ = [
    "FakeTransport",
    "Failure",
    "Success",
    "GROUP",
    "USER",
    "failing",
    "make_client",
    "message_json",
    "update_json",
]
