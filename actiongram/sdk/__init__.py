"""Telegram Bot API SDK — Pydantic records, wire codec, request builder and client.

Usage::

    from actiongram.sdk import ActiongramClient, SchemaError, decode
    from actiongram.sdk.models import Message, Update
"""

from actiongram.sdk.client import ActiongramClient, RequestsTransport
from actiongram.sdk.codec import decode, decode_list, encode, read_envelope, write_envelope
from actiongram.sdk.exceptions import ActiongramError, SchemaError, TransportError
from actiongram.sdk.outgoing import OutboundRequest, json_request, multipart_request

__all__ = [
    "ActiongramClient",
    "RequestsTransport",
    "decode",
    "decode_list",
    "encode",
    "read_envelope",
    "write_envelope",
    "ActiongramError",
    "SchemaError",
    "TransportError",
    "OutboundRequest",
    "json_request",
    "multipart_request",
]
