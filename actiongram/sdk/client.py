"""ActiongramClient -- network layer between encoded requests and typed outcomes.

The client takes an :class:`~actiongram.sdk.outgoing.OutboundRequest`, hands
it to a *transport*, and reads the response envelope into a
:class:`~actiongram.core.result.Result`.  The default transport uses the
``requests`` library and offloads blocking I/O via :func:`asyncio.to_thread`
so the event loop is never blocked.

A transport is any async callable with the signature::

    async def transport(method, url, headers, body) -> (status_code, body_bytes)

Tests substitute an in-memory fake.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Mapping, Optional, Tuple

import requests

from actiongram.core.logger import ActiongramLogger
from actiongram.core.result import Failure, Result, Success
from actiongram.sdk.codec import read_envelope
from actiongram.sdk.exceptions import SchemaError, TransportError
from actiongram.sdk.outgoing import OutboundRequest

logger = ActiongramLogger.get_logger()

DEFAULT_API_ROOT = "https://api.telegram.org"

Transport = Callable[[str, str, Mapping[str, str], Optional[bytes]], Awaitable[Tuple[int, bytes]]]


async def make_request(method: str, url: str, **kwargs: object) -> requests.Response:
    """Run a :mod:`requests` call inside a thread to keep the event loop free.

    *method* is the HTTP verb (``"get"``, ``"post"``, …).
    """
    func = getattr(requests, method.lower())
    return await asyncio.to_thread(func, url, **kwargs)


class RequestsTransport:
    """Default transport: one blocking ``requests`` call per exchange.

    Raises:
        TransportError: On any :class:`requests.RequestException`.
    """

    def __init__(self, timeout: float) -> None:
        self._timeout = timeout

    async def __call__(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
    ) -> Tuple[int, bytes]:
        try:
            response = await make_request(method, url, headers=dict(headers), data=body, timeout=self._timeout)
        except requests.RequestException as exc:
            raise TransportError(str(exc)) from exc
        return response.status_code, response.content


class ActiongramClient:
    """Executes encoded Bot API requests and reads their envelopes.

    A server answering ``"ok": false`` yields a :class:`Failure`; only
    transport problems and malformed responses raise.
    """

    _DEFAULT_TIMEOUT: int = 10

    def __init__(
        self,
        base_url: str,
        timeout: float = _DEFAULT_TIMEOUT,
        bot_token: str | None = None,
        file_base_url: str | None = None,
        transport: Transport | None = None,
    ) -> None:
        """Create a new client bound to *base_url*.

        Args:
            base_url: Full Bot API base URL (e.g. ``https://api.telegram.org/bot<token>``).
            timeout: Request timeout in seconds for the default transport.
            bot_token: Raw bot token, used to derive the file-download URL
                on the same server as *base_url*.
            file_base_url: Explicit file-download base URL; overrides *bot_token*.
            transport: Async transport callable; defaults to :class:`RequestsTransport`.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._bot_token = bot_token
        if file_base_url is None and bot_token is not None:
            file_base_url = _file_base_url(self._base_url, bot_token)
        self._file_base_url = file_base_url.rstrip("/") if file_base_url else None
        self._transport: Transport = transport or RequestsTransport(timeout)

    @classmethod
    def for_token(
        cls,
        token: str,
        timeout: float = _DEFAULT_TIMEOUT,
        transport: Transport | None = None,
        api_root: str = DEFAULT_API_ROOT,
    ) -> "ActiongramClient":
        """Build a client for the Bot API server at *api_root* (the public one by default)."""
        api_root = api_root.rstrip("/")
        return cls(f"{api_root}/bot{token}", timeout=timeout, bot_token=token, transport=transport)

    # ------------------------------------------------------------------
    #  Requests
    # ------------------------------------------------------------------

    async def call(self, request: OutboundRequest) -> Result[Any]:
        """Send *request* and return the envelope's outcome.

        Raises:
            TransportError: If the exchange failed or a non-2xx response
                carried no envelope.
            SchemaError: If a 2xx response carried no envelope.
        """
        url = f"{self._base_url}/{request.endpoint}"
        logger.debug("Calling API", extra={"api_endpoint": request.endpoint, "method": request.method})
        status, body = await self._transport(request.method, url, request.headers, request.body)
        try:
            result = read_envelope(body)
        except SchemaError as exc:
            if not 200 <= status < 300:
                raise TransportError(f"{request.endpoint} returned no envelope", status_code=status) from exc
            raise
        if isinstance(result, Failure):
            logger.warning(
                "API call failed",
                extra={"api_endpoint": request.endpoint, "status_code": status, "error": result.error},
            )
        return result

    async def download(self, file_path: str) -> Result[bytes]:
        """Download raw bytes of a file previously resolved with ``getFile``.

        Raises:
            TransportError: On transport-level failures.
        """
        if self._file_base_url is None:
            return Failure("no file download URL configured")
        url = f"{self._file_base_url}/{file_path}"
        status, body = await self._transport("GET", url, {}, None)
        if 200 <= status < 300:
            return Success(body)
        logger.warning("File download failed", extra={"file_path": file_path, "status_code": status})
        return Failure(f"download of '{file_path}' failed with HTTP {status}")


def _file_base_url(base_url: str, bot_token: str) -> str:
    """Derive ``<root>/file/bot<token>`` from a ``<root>/bot<token>`` API URL."""
    suffix = f"/bot{bot_token}"
    root = base_url[: -len(suffix)] if base_url.endswith(suffix) else DEFAULT_API_ROOT
    return f"{root}/file/bot{bot_token}"
