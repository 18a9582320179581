"""Tests for ActiongramClient, RequestsTransport and the exception hierarchy."""

import sys
import os
from unittest.mock import MagicMock, patch

import pytest
import requests

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from fakes import FakeTransport, make_client

from actiongram.core.result import Failure, Success
from actiongram.sdk.client import ActiongramClient, RequestsTransport
from actiongram.sdk.exceptions import ActiongramError, SchemaError, TransportError
from actiongram.sdk.outgoing import json_request


# ── Exceptions ───────────────────────────────────────────────────────────────


class TestExceptions:
    """Validate the exception classes."""

    def test_schema_error_attributes(self) -> None:
        exc = SchemaError("chat.id", "expected an integer")
        assert exc.field == "chat.id"
        assert exc.reason == "expected an integer"
        assert "chat.id" in str(exc)

    def test_transport_error_status(self) -> None:
        exc = TransportError("Bad Gateway", status_code=502)
        assert exc.status_code == 502
        assert str(exc) == "HTTP 502: Bad Gateway"

    def test_hierarchy(self) -> None:
        assert issubclass(SchemaError, ActiongramError)
        assert issubclass(TransportError, ActiongramError)


# ── Construction ─────────────────────────────────────────────────────────────


class TestClientInit:
    """Validate client initialisation."""

    def test_base_url_strip(self) -> None:
        c = ActiongramClient("https://api.example.com/bot123/")
        assert c._base_url == "https://api.example.com/bot123"

    def test_default_timeout(self) -> None:
        c = ActiongramClient("https://api.example.com")
        assert c._timeout == 10

    def test_for_token(self) -> None:
        c = ActiongramClient.for_token("123:abc")
        assert c._base_url == "https://api.telegram.org/bot123:abc"
        assert c._file_base_url == "https://api.telegram.org/file/bot123:abc"

    def test_for_token_custom_root(self) -> None:
        c = ActiongramClient.for_token("123:abc", api_root="https://bots.example.org/")
        assert c._base_url == "https://bots.example.org/bot123:abc"
        assert c._file_base_url == "https://bots.example.org/file/bot123:abc"

    def test_file_url_follows_base_url(self) -> None:
        c = ActiongramClient("https://bots.example.org/bot123", bot_token="123")
        assert c._file_base_url == "https://bots.example.org/file/bot123"


# ── Calls through a fake transport ───────────────────────────────────────────


class TestCall:
    """Validate envelope handling in ActiongramClient.call."""

    @pytest.mark.asyncio
    async def test_success(self) -> None:
        transport = FakeTransport({"getMe": [Success({"id": 1, "first_name": "Bot"})]})
        result = await make_client(transport).call(json_request("getMe"))
        assert result == Success({"id": 1, "first_name": "Bot"})
        assert transport.calls[0]["url"] == "https://api.example.com/bot123/getMe"
        assert transport.calls[0]["method"] == "GET"

    @pytest.mark.asyncio
    async def test_api_failure_is_a_result(self) -> None:
        transport = FakeTransport({"sendMessage": [Failure("Bad Request: chat not found")]})
        result = await make_client(transport).call(json_request("sendMessage", {"chat_id": 1, "text": "x"}))
        assert result == Failure("Bad Request: chat not found")

    @pytest.mark.asyncio
    async def test_non_envelope_error_page(self) -> None:
        async def gateway(method, url, headers, body):
            return 502, b"<html>Bad Gateway</html>"

        client = ActiongramClient("https://api.example.com/bot1", transport=gateway)
        with pytest.raises(TransportError) as exc_info:
            await client.call(json_request("getMe"))
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_non_envelope_success_is_schema_error(self) -> None:
        async def garbled(method, url, headers, body):
            return 200, b'{"result": 1}'

        client = ActiongramClient("https://api.example.com/bot1", transport=garbled)
        with pytest.raises(SchemaError):
            await client.call(json_request("getMe"))


class TestDownload:
    """Validate file downloads."""

    @pytest.mark.asyncio
    async def test_download(self) -> None:
        transport = FakeTransport()
        transport.files["photos/file_1.jpg"] = b"JPEG"
        result = await make_client(transport).download("photos/file_1.jpg")
        assert result == Success(b"JPEG")
        assert transport.calls[0]["url"] == "https://api.example.com/file/bot123/photos/file_1.jpg"

    @pytest.mark.asyncio
    async def test_missing_file(self) -> None:
        result = await make_client(FakeTransport()).download("photos/none.jpg")
        assert isinstance(result, Failure)
        assert "404" in result.error

    @pytest.mark.asyncio
    async def test_no_file_url(self) -> None:
        client = ActiongramClient("https://api.example.com/bot1", transport=FakeTransport())
        assert await client.download("a.jpg") == Failure("no file download URL configured")


# ── Default transport ────────────────────────────────────────────────────────


class TestRequestsTransport:
    """Validate the requests-backed transport."""

    @pytest.mark.asyncio
    @patch("actiongram.sdk.client.requests.post")
    async def test_post(self, mock_post: MagicMock) -> None:
        mock_resp = MagicMock()
        mock_resp.status_code = 200
        mock_resp.content = b'{"ok": true, "result": true}'
        mock_post.return_value = mock_resp

        client = ActiongramClient("https://api.example.com/bot1", timeout=3)
        result = await client.call(json_request("sendChatAction", {"chat_id": 1, "action": "typing"}))

        assert result == Success(True)
        mock_post.assert_called_once()
        args, kwargs = mock_post.call_args
        assert args[0] == "https://api.example.com/bot1/sendChatAction"
        assert kwargs["headers"] == {"Content-Type": "application/json"}
        assert kwargs["timeout"] == 3

    @pytest.mark.asyncio
    @patch("actiongram.sdk.client.requests.get")
    async def test_network_error_wrapped(self, mock_get: MagicMock) -> None:
        mock_get.side_effect = requests.ConnectionError("offline")
        transport = RequestsTransport(timeout=1)
        with pytest.raises(TransportError) as exc_info:
            await transport("GET", "https://api.example.com/bot1/getMe", {}, None)
        assert "offline" in str(exc_info.value)
