"""Bot session — action interpreter and update polling loop.

A :class:`Bot` owns the only mutable state in the library: the update
*offset*, the cursor marking the oldest update not yet acknowledged to the
server.  It interprets :class:`~actiongram.bot.actions.Action` values by
performing their API calls in order and feeding each typed outcome to the
action's continuation.

Delivery is at-most-once: :meth:`Bot.pop_update` moves the offset past an
update and acknowledges it *before* decoding or handling it, so an update
that fails to decode, or whose handler fails, is never fetched again.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

from actiongram.bot.actions import (
    Action,
    ApiAction,
    Chain,
    GetUpdates,
    Nothing,
    PeekUpdate,
    PopUpdate,
    SessionAction,
)
from actiongram.bot.dispatcher import Handlers, route
from actiongram.bot.registry import Command, CommandRegistry
from actiongram.core.logger import ActiongramLogger
from actiongram.core.result import NO_RESULTS, Failure, Result, Success
from actiongram.sdk.client import ActiongramClient
from actiongram.sdk.codec import decode, decode_list
from actiongram.sdk.exceptions import SchemaError, TransportError
from actiongram.sdk.models import Update
from actiongram.sdk.outgoing import json_request

logger = ActiongramLogger.get_logger()


class Bot:
    """A bot session bound to one API client.

    Args:
        client: Client used for every API call.
        handlers: Commands plus inline, callback and chat-event handlers.
        command_postfix: The bot's username, used to ignore commands
            addressed to other bots (``/cmd@otherbot``).
        poll_timeout: Long-poll timeout in seconds sent with each fetch;
            ``0`` polls without waiting.
        idle_delay: Seconds :meth:`run` sleeps after an empty poll.
        retry_delay: Seconds :meth:`run` sleeps after a failed poll.
    """

    def __init__(
        self,
        client: ActiongramClient,
        handlers: Optional[Handlers] = None,
        command_postfix: Optional[str] = None,
        poll_timeout: int = 0,
        idle_delay: float = 0.0,
        retry_delay: float = 5.0,
    ) -> None:
        self.client = client
        self.handlers = handlers or Handlers()
        self.registry = CommandRegistry(self.handlers.commands, postfix=command_postfix)
        self.poll_timeout = poll_timeout
        self.idle_delay = idle_delay
        self.retry_delay = retry_delay
        self.offset = 0
        self._running = False

    @classmethod
    def from_config(cls, handlers: Optional[Handlers] = None) -> "Bot":
        """Build a session from :mod:`actiongram.config`.

        Raises:
            EnvironmentError: If ``BOT_TOKEN`` is not set.
        """
        from actiongram import config

        if not config.BOT_TOKEN:
            raise EnvironmentError("BOT_TOKEN environment variable is not set or is empty.")
        client = ActiongramClient.for_token(
            config.BOT_TOKEN,
            timeout=config.POLL_TIMEOUT + config.REQUEST_TIMEOUT,
            api_root=config.API_ROOT,
        )
        return cls(
            client,
            handlers=handlers,
            command_postfix=config.COMMAND_POSTFIX,
            poll_timeout=config.POLL_TIMEOUT,
            idle_delay=config.IDLE_DELAY,
            retry_delay=config.RETRY_DELAY,
        )

    @property
    def commands(self) -> list[Command]:
        return self.registry.commands

    # ── Interpreter ──────────────────────────────────────────────────────

    async def interpret(self, action: Action) -> None:
        """Perform *action* and every action its continuations return.

        Calls run strictly one after another.  A fire-and-forget call that
        fails is logged; a result-producing call passes its outcome, success
        or failure, to its continuation.

        Raises:
            TransportError: If the network exchange fails.
            SchemaError: If a response does not match its expected shape.
            TypeError: If a continuation returns something other than an action.
        """
        while True:
            if isinstance(action, Nothing):
                return
            if isinstance(action, Chain):
                await self.interpret(action.first)
                action = action.second
                continue

            result = await self.execute(action)
            continuation = getattr(action, "and_then", None)
            if continuation is None:
                if isinstance(result, Failure):
                    logger.warning(
                        "Action failed",
                        extra={"action": type(action).__name__, "error": result.error},
                    )
                return

            action = continuation(result)
            if not isinstance(action, Action):
                raise TypeError(f"continuation returned {type(action).__name__}, expected an Action")

    async def execute(self, action: Action) -> Result[Any]:
        """Run a single tag and return its typed outcome, ignoring its continuation."""
        if isinstance(action, GetUpdates):
            return await self.get_updates()
        if isinstance(action, PeekUpdate):
            return await self.peek_update()
        if isinstance(action, PopUpdate):
            return await self.pop_update(run_cmds=action.run_cmds)
        if isinstance(action, ApiAction):
            return await action.perform(self.client)
        if isinstance(action, SessionAction):
            raise TypeError(f"unsupported session action {type(action).__name__}")
        raise TypeError(f"cannot execute {type(action).__name__}")

    # ── Update retrieval ─────────────────────────────────────────────────

    async def get_updates(self) -> Result[list[Update]]:
        """Fetch every pending update.  The offset is left unchanged."""
        result = await self.client.call(json_request("getUpdates"))
        return result.map(lambda raw: decode_list(Update, raw))

    async def peek_update(self) -> Result[Update]:
        """Fetch the oldest pending update without consuming it."""
        result = await self.client.call(json_request("getUpdates", {"offset": 0, "limit": 1}))
        if isinstance(result, Failure):
            return result
        updates = decode_list(Update, result.value)
        if not updates:
            return Failure(NO_RESULTS)
        return Success(updates[0])

    async def pop_update(self, run_cmds: bool = True) -> Result[Update]:
        """Consume the next update and, when *run_cmds* is set, dispatch it.

        Returns:
            ``Failure(NO_RESULTS)`` when nothing is pending; the server's
            failure as-is; ``Success(Update(update_id=...))`` when a handler
            consumed the update; otherwise the decoded update.
        """
        try:
            fetched = await self._fetch_next()
        except (TransportError, SchemaError) as exc:
            logger.warning("Polling failed", extra={"offset": self.offset, "error": str(exc)})
            return Failure(str(exc))
        if isinstance(fetched, Failure):
            return fetched

        raw = fetched.value
        try:
            update = decode(Update, raw)
        except SchemaError as exc:
            logger.warning(
                "Dropping undecodable update",
                extra={"update_id": raw.get("update_id"), "error": str(exc)},
            )
            return Failure(str(exc))

        if not run_cmds:
            return Success(update)

        action = route(update, self.handlers, self.registry)
        if action is None:
            return Success(update)

        try:
            await self.interpret(action)
        except (TransportError, SchemaError) as exc:
            logger.error("Handler action failed", extra={"update_id": update.update_id, "error": str(exc)})
        return Success(Update(update_id=update.update_id))

    async def _fetch_next(self) -> Result[dict[str, Any]]:
        """Fetch one raw update, advance the offset past it and acknowledge it."""
        payload: dict[str, Any] = {"offset": self.offset, "limit": 1}
        if self.poll_timeout:
            payload["timeout"] = self.poll_timeout
        result = await self.client.call(json_request("getUpdates", payload))
        if isinstance(result, Failure):
            return result

        items = result.value
        if not isinstance(items, list):
            raise SchemaError("result", "expected a list of updates")
        if not items:
            return Failure(NO_RESULTS)

        raw = items[0]
        update_id = raw.get("update_id") if isinstance(raw, dict) else None
        if not isinstance(update_id, int) or isinstance(update_id, bool):
            raise SchemaError("result.0.update_id", "expected an integer update id")

        self.offset = max(self.offset, update_id + 1)
        logger.debug("Acknowledging update", extra={"update_id": update_id, "offset": self.offset})
        ack = await self.client.call(json_request("getUpdates", {"offset": self.offset, "limit": 0}))
        if isinstance(ack, Failure):
            logger.warning("Acknowledgement failed", extra={"offset": self.offset, "error": ack.error})
        return Success(raw)

    # ── Driver ───────────────────────────────────────────────────────────

    async def run(self) -> None:
        """Poll and dispatch updates until :meth:`stop` is called.

        Empty polls are silent.  Failed polls and unexpected errors are
        logged and the loop carries on after ``retry_delay`` seconds.
        """
        self._running = True
        logger.info("Bot is running. Polling for updates...", extra={"offset": self.offset})
        while self._running:
            try:
                result = await self.pop_update()
            except Exception as exc:  # noqa: BLE001
                logger.exception("Unexpected error while polling", extra={"offset": self.offset, "error": str(exc)})
                await asyncio.sleep(self.retry_delay)
                continue

            if isinstance(result, Failure):
                if result.error == NO_RESULTS:
                    if self.idle_delay:
                        await asyncio.sleep(self.idle_delay)
                    continue
                logger.warning("Poll returned a failure", extra={"offset": self.offset, "error": result.error})
                await asyncio.sleep(self.retry_delay)
        logger.info("Bot stopped", extra={"offset": self.offset})

    def stop(self) -> None:
        """Make :meth:`run` return after the current poll."""
        self._running = False

