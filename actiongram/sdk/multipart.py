"""multipart/form-data body assembly for file uploads.

The body has one part per scalar field followed by a single binary part for
the uploaded file.  Boundaries are random per request unless the caller
passes one explicitly (tests do, for reproducible bodies).  Payload bytes are
not scanned for the boundary, so a fixed boundary must never be reused for
arbitrary uploads.
"""

from __future__ import annotations

import json
import os
from enum import Enum
from typing import Any, Iterable, Tuple
from uuid import uuid4

from pydantic import BaseModel

DEFAULT_CONTENT_TYPE = "application/octet-stream"

_CRLF = "\r\n"

# Extension → content type.  Unknown extensions fall back to a default.
_CONTENT_TYPES: dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".mp3": "audio/mpeg",
    ".m4a": "audio/mp4",
    ".ogg": "audio/ogg",
    ".oga": "audio/ogg",
    ".mp4": "video/mp4",
    ".mov": "video/quicktime",
    ".webm": "video/webm",
    ".pdf": "application/pdf",
    ".zip": "application/zip",
    ".txt": "text/plain",
    ".json": "application/json",
}


def new_boundary() -> str:
    """Return a fresh random boundary token."""
    return f"actiongram-{uuid4().hex}"


def guess_content_type(filename: str, default: str = DEFAULT_CONTENT_TYPE) -> str:
    """Guess the content type of *filename* from its extension (case-insensitive)."""
    _, ext = os.path.splitext(filename)
    return _CONTENT_TYPES.get(ext.lower(), default)


def render_field(value: Any) -> str:
    """Render a scalar or nested value as the text of a form part."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, BaseModel):
        return json.dumps(value.model_dump(mode="json", by_alias=True, exclude_none=True))
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def build_body(
    fields: Iterable[Tuple[str, Any]],
    file_field: str,
    filename: str,
    content: bytes,
    content_type: str,
    boundary: str,
) -> bytes:
    """Assemble a complete multipart body.

    Args:
        fields: ``(name, value)`` pairs, emitted in the given order.
        file_field: Form name of the binary part (e.g. ``"photo"``).
        filename: Name announced for the uploaded file.
        content: Raw file bytes.
        content_type: Content type of the file part.
        boundary: Boundary token (without the leading dashes).
    """
    delimiter = f"--{boundary}{_CRLF}"
    body = bytearray()

    for name, value in fields:
        body.extend(delimiter.encode("utf-8"))
        body.extend(f'Content-Disposition: form-data; name="{name}"{_CRLF}{_CRLF}'.encode("utf-8"))
        body.extend(render_field(value).encode("utf-8"))
        body.extend(_CRLF.encode("utf-8"))

    safe_name = filename.replace('"', "").replace("\r", "").replace("\n", "")
    body.extend(delimiter.encode("utf-8"))
    body.extend(
        f'Content-Disposition: form-data; name="{file_field}"; filename="{safe_name}"{_CRLF}'.encode("utf-8")
    )
    body.extend(f"Content-Type: {content_type}{_CRLF}{_CRLF}".encode("utf-8"))
    body.extend(content)
    body.extend(_CRLF.encode("utf-8"))
    body.extend(f"--{boundary}--{_CRLF}".encode("utf-8"))
    return bytes(body)
