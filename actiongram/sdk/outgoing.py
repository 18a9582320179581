"""Outbound request builder — JSON and multipart request bodies.

Every API call is described by an :class:`OutboundRequest`.  Calls that
reference a file by a previously issued ``file_id`` travel as JSON; calls
that upload a local file travel as multipart/form-data.  Field order is
stable: required fields first, then present optional fields, in the order
the caller listed them.
"""

from __future__ import annotations

import asyncio
import dataclasses
import json
import os
from pathlib import Path
from typing import Any, Iterable, Optional, Tuple

from actiongram.sdk.codec import encode_value
from actiongram.sdk.multipart import DEFAULT_CONTENT_TYPE, build_body, guess_content_type, new_boundary

JSON_CONTENT_TYPE = "application/json"


@dataclasses.dataclass(frozen=True, slots=True)
class OutboundRequest:
    """A fully encoded request for one Bot API method."""

    endpoint: str
    body: Optional[bytes] = None
    content_type: Optional[str] = None
    method: str = "POST"

    @property
    def headers(self) -> dict[str, str]:
        if self.content_type is None:
            return {}
        return {"Content-Type": self.content_type}

    def json(self) -> Any:
        """Decode a JSON body back into Python values (tests and logging)."""
        if self.body is None:
            return None
        return json.loads(self.body)


def fields(*required: Tuple[str, Any], **optional: Any) -> dict[str, Any]:
    """Build an ordered field mapping: *required* pairs, then non-``None`` *optional* values."""
    result: dict[str, Any] = {}
    for name, value in required:
        result[name] = value
    for name, value in optional.items():
        if value is not None:
            result[name] = value
    return result


def json_request(endpoint: str, payload: Optional[dict[str, Any]] = None) -> OutboundRequest:
    """Encode *payload* as a JSON request for *endpoint*.

    Nested records are encoded with :func:`~actiongram.sdk.codec.encode`.
    """
    if payload is None:
        return OutboundRequest(endpoint=endpoint, method="GET")
    encoded = {name: encode_value(value) for name, value in payload.items()}
    return OutboundRequest(
        endpoint=endpoint,
        body=json.dumps(encoded).encode("utf-8"),
        content_type=JSON_CONTENT_TYPE,
    )


async def multipart_request(
    endpoint: str,
    payload: dict[str, Any],
    file_field: str,
    path: str | os.PathLike[str],
    content_type: Optional[str] = None,
    default_content_type: str = DEFAULT_CONTENT_TYPE,
    boundary: Optional[str] = None,
) -> OutboundRequest:
    """Read *path* and encode an upload request for *endpoint*.

    The file is read fully into memory off the event loop.  Its content type
    is *content_type* when given, otherwise guessed from the extension with
    *default_content_type* as the fallback for unknown extensions.

    Raises:
        OSError: If the file cannot be read.
    """
    file_path = Path(path)
    content = await asyncio.to_thread(file_path.read_bytes)
    boundary = boundary or new_boundary()
    part_type = content_type or guess_content_type(file_path.name, default_content_type)
    body = build_body(
        _scalar_items(payload),
        file_field=file_field,
        filename=file_path.name,
        content=content,
        content_type=part_type,
        boundary=boundary,
    )
    return OutboundRequest(
        endpoint=endpoint,
        body=body,
        content_type=f"multipart/form-data; boundary={boundary}",
    )


def _scalar_items(payload: dict[str, Any]) -> Iterable[Tuple[str, Any]]:
    for name, value in payload.items():
        yield name, encode_value(value)
