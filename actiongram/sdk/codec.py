"""Wire codec — JSON ⇄ typed records, and the response envelope.

Every response of the Bot API is wrapped in an envelope::

    {"ok": true,  "result": <payload>}
    {"ok": false, "description": "<why>"}

:func:`read_envelope` turns the first shape into
:class:`~actiongram.core.result.Success` and the second into
:class:`~actiongram.core.result.Failure`.  Anything else is a
:class:`~actiongram.sdk.exceptions.SchemaError`.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from actiongram.core.result import Failure, Result, Success
from actiongram.sdk.exceptions import SchemaError

M = TypeVar("M", bound=BaseModel)


def _schema_error(model: Type[BaseModel], exc: ValidationError) -> SchemaError:
    """Convert the first pydantic error into a :class:`SchemaError`."""
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error.get("loc", ()))
    return SchemaError(location or model.__name__, error.get("msg", "invalid value"))


def decode(model: Type[M], data: Any) -> M:
    """Decode *data* (parsed JSON) into an instance of *model*.

    Raises:
        SchemaError: If a required field is missing or a field has the wrong type.
    """
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise _schema_error(model, exc) from exc


def decode_list(model: Type[M], data: Any) -> List[M]:
    """Decode a JSON array of *model* records."""
    if not isinstance(data, list):
        raise SchemaError(model.__name__, "expected a JSON array")
    items: List[M] = []
    for index, item in enumerate(data):
        try:
            items.append(model.model_validate(item))
        except ValidationError as exc:
            inner = _schema_error(model, exc)
            raise SchemaError(f"{index}.{inner.field}", inner.reason) from exc
    return items


def encode(record: BaseModel) -> dict[str, Any]:
    """Encode *record* as a JSON-ready dict using wire field names.

    Absent optional fields are omitted; fields keep declaration order.
    """
    return record.model_dump(mode="json", by_alias=True, exclude_none=True)


def encode_value(value: Any) -> Any:
    """Encode a record, a list of records, or a plain JSON value."""
    if isinstance(value, BaseModel):
        return encode(value)
    if isinstance(value, (list, tuple)):
        return [encode_value(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    return value


# ── Envelope ─────────────────────────────────────────────────────────────────


def read_envelope(body: bytes | str) -> Result[Any]:
    """Parse a raw response body into a :class:`Success` or :class:`Failure`.

    Raises:
        SchemaError: If the body is not JSON or not an envelope.
    """
    try:
        obj = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise SchemaError("body", f"response is not valid JSON: {exc}") from exc
    if not isinstance(obj, dict):
        raise SchemaError("body", "response is not a JSON object")

    ok = obj.get("ok")
    if not isinstance(ok, bool):
        raise SchemaError("ok", "missing or not a boolean")
    if ok:
        if "result" not in obj:
            raise SchemaError("result", "missing from a successful response")
        return Success(obj["result"])

    description = obj.get("description")
    if not isinstance(description, str):
        raise SchemaError("description", "missing or not a string")
    return Failure(description)


def write_envelope(result: Result[Any]) -> bytes:
    """Serialize *result* into the envelope shape :func:`read_envelope` accepts."""
    if isinstance(result, Success):
        payload: dict[str, Any] = {"ok": True, "result": encode_value(result.value)}
    else:
        payload = {"ok": False, "description": result.error}
    return json.dumps(payload).encode("utf-8")
