"""Tests for the polling loop: offset handling, acknowledgement and dispatch."""

import logging
import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from fakes import USER, FakeTransport, failing, make_client, message_json, update_json

from actiongram.bot.actions import AnswerInlineQuery, Nothing, PopUpdate, send_message
from actiongram.bot.dispatcher import Handlers
from actiongram.bot.registry import Command
from actiongram.bot.session import Bot
from actiongram.core.result import NO_RESULTS, Failure, Success
from actiongram.sdk.models import Update


def greet(message):
    return send_message(message.chat.id, "Hi!")


def make_bot(transport: FakeTransport, **handlers) -> Bot:
    handlers.setdefault("commands", [Command(name="say_hi", description="Say hi", run=greet)])
    return Bot(make_client(transport), Handlers(**handlers), command_postfix="mybot")


def get_updates_payloads(transport: FakeTransport) -> list:
    return [call["json"] for call in transport.calls_to("getUpdates")]


# ── Offset and acknowledgement ───────────────────────────────────────────────


class TestOffset:
    """Validate at-most-once consumption."""

    @pytest.mark.asyncio
    async def test_empty_poll(self) -> None:
        transport = FakeTransport()
        bot = make_bot(transport)
        assert await bot.pop_update() == Failure(NO_RESULTS)
        assert bot.offset == 0
        assert get_updates_payloads(transport) == [{"offset": 0, "limit": 1}]

    @pytest.mark.asyncio
    async def test_consumes_and_acknowledges(self) -> None:
        transport = FakeTransport()
        transport.updates = [update_json(10, message=message_json("hello"))]
        bot = make_bot(transport)

        result = await bot.pop_update()

        assert result.value.update_id == 10
        assert result.value.message.text == "hello"
        assert bot.offset == 11
        assert get_updates_payloads(transport) == [
            {"offset": 0, "limit": 1},
            {"offset": 11, "limit": 0},
        ]

    @pytest.mark.asyncio
    async def test_next_poll_skips_consumed(self) -> None:
        transport = FakeTransport()
        transport.updates = [update_json(10, message=message_json("a")), update_json(11, message=message_json("b"))]
        bot = make_bot(transport)

        first = await bot.pop_update()
        second = await bot.pop_update()
        third = await bot.pop_update()

        assert first.value.message.text == "a"
        assert second.value.message.text == "b"
        assert third == Failure(NO_RESULTS)
        assert bot.offset == 12

    @pytest.mark.asyncio
    async def test_offset_never_decreases(self) -> None:
        transport = FakeTransport({"getUpdates": [Success([update_json(3)]), Success([])]})
        bot = make_bot(transport)
        bot.offset = 50
        await bot.pop_update()
        assert bot.offset == 50

    @pytest.mark.asyncio
    async def test_poisoned_update_stays_consumed(self) -> None:
        transport = FakeTransport()
        transport.updates = [update_json(4, message={"message_id": "not-a-number"})]
        bot = make_bot(transport)

        result = await bot.pop_update()

        assert isinstance(result, Failure)
        assert bot.offset == 5
        assert {"offset": 5, "limit": 0} in get_updates_payloads(transport)
        assert await bot.pop_update() == Failure(NO_RESULTS)

    @pytest.mark.asyncio
    async def test_two_payload_update_is_rejected_and_consumed(self) -> None:
        transport = FakeTransport()
        transport.updates = [update_json(8, message=message_json("a"), edited_message=message_json("b"))]
        bot = make_bot(transport)
        assert isinstance(await bot.pop_update(), Failure)
        assert bot.offset == 9

    @pytest.mark.asyncio
    async def test_server_failure_keeps_offset(self) -> None:
        transport = FakeTransport({"getUpdates": [Failure("Conflict: terminated by other getUpdates request")]})
        bot = make_bot(transport)
        bot.offset = 7
        assert await bot.pop_update() == Failure("Conflict: terminated by other getUpdates request")
        assert bot.offset == 7

    @pytest.mark.asyncio
    async def test_transport_error_becomes_failure(self) -> None:
        transport = FakeTransport({"getUpdates": [failing("connection reset")]})
        bot = make_bot(transport)
        result = await bot.pop_update()
        assert isinstance(result, Failure)
        assert "connection reset" in result.error
        assert bot.offset == 0

    @pytest.mark.asyncio
    async def test_long_poll_timeout_sent(self) -> None:
        transport = FakeTransport()
        bot = Bot(make_client(transport), poll_timeout=30)
        await bot.pop_update()
        assert get_updates_payloads(transport) == [{"offset": 0, "limit": 1, "timeout": 30}]


# ── Dispatch ─────────────────────────────────────────────────────────────────


class TestDispatch:
    """Validate routing of consumed updates."""

    @pytest.mark.asyncio
    async def test_command_runs_after_ack(self) -> None:
        transport = FakeTransport()
        transport.updates = [update_json(20, message=message_json("/say_hi@mybot now"))]
        bot = make_bot(transport)

        result = await bot.pop_update()

        assert result == Success(Update(update_id=20))
        assert transport.endpoints() == ["getUpdates", "getUpdates", "sendMessage"]
        assert transport.calls[2]["json"]["text"] == "Hi!"

    @pytest.mark.asyncio
    async def test_command_for_other_bot_not_run(self) -> None:
        transport = FakeTransport()
        transport.updates = [update_json(21, message=message_json("/say_hi@otherbot"))]
        await make_bot(transport).pop_update()
        assert "sendMessage" not in transport.endpoints()

    @pytest.mark.asyncio
    async def test_run_cmds_false_returns_update(self) -> None:
        transport = FakeTransport()
        transport.updates = [update_json(22, message=message_json("/say_hi"))]
        result = await make_bot(transport).pop_update(run_cmds=False)
        assert result.value.message.text == "/say_hi"
        assert "sendMessage" not in transport.endpoints()

    @pytest.mark.asyncio
    async def test_help_command(self) -> None:
        transport = FakeTransport()
        transport.updates = [update_json(23, message=message_json("/help"))]
        await make_bot(transport).pop_update()
        sent = transport.calls_to("sendMessage")[0]["json"]
        assert sent["text"] == "Commands:\n/say_hi - Say hi"
        assert sent["disable_notification"] is True

    @pytest.mark.asyncio
    async def test_inline_query(self) -> None:
        transport = FakeTransport()
        query = {"id": "q1", "from": USER, "query": "cats", "offset": ""}
        transport.updates = [update_json(24, inline_query=query)]
        bot = make_bot(transport, inline=lambda q: AnswerInlineQuery(inline_query_id=q.id, results=[]))

        result = await bot.pop_update()

        assert result == Success(Update(update_id=24))
        assert transport.calls_to("answerInlineQuery")[0]["json"] == {"inline_query_id": "q1", "results": []}

    @pytest.mark.asyncio
    async def test_callback_query(self) -> None:
        transport = FakeTransport()
        callback = {"id": "cb1", "from": USER, "chat_instance": "ci", "data": "vote:yes"}
        transport.updates = [update_json(25, callback_query=callback)]
        seen = []
        bot = make_bot(transport, callback=lambda cb: seen.append(cb.data) or Nothing())
        await bot.pop_update()
        assert seen == ["vote:yes"]

    @pytest.mark.asyncio
    async def test_new_chat_member_event(self) -> None:
        transport = FakeTransport()
        newcomer = {"id": 99, "is_bot": False, "first_name": "Zed"}
        transport.updates = [update_json(26, message=message_json(new_chat_member=newcomer))]
        bot = make_bot(transport, new_chat_member=lambda chat, user: send_message(chat.id, "Welcome, %s!", user.first_name))
        await bot.pop_update()
        assert transport.calls_to("sendMessage")[0]["json"]["text"] == "Welcome, Zed!"

    @pytest.mark.asyncio
    async def test_plain_text_not_routed(self) -> None:
        transport = FakeTransport()
        transport.updates = [update_json(27, message=message_json("just chatting"))]
        result = await make_bot(transport).pop_update()
        assert result.value.message.text == "just chatting"

    @pytest.mark.asyncio
    async def test_handler_transport_error_is_logged_and_discarded(self) -> None:
        transport = FakeTransport({"sendMessage": [failing()]})
        transport.updates = [update_json(28, message=message_json("/say_hi"))]
        bot = make_bot(transport)

        result = await bot.pop_update()

        assert result == Success(Update(update_id=28))
        assert bot.offset == 29


# ── Non-consuming reads ──────────────────────────────────────────────────────


class TestPeekAndGet:
    """Validate reads that leave the offset alone."""

    @pytest.mark.asyncio
    async def test_peek(self) -> None:
        transport = FakeTransport()
        transport.updates = [update_json(30, message=message_json("a"))]
        bot = make_bot(transport)
        result = await bot.peek_update()
        assert result.value.update_id == 30
        assert bot.offset == 0
        assert get_updates_payloads(transport) == [{"offset": 0, "limit": 1}]

    @pytest.mark.asyncio
    async def test_peek_empty(self) -> None:
        assert await make_bot(FakeTransport()).peek_update() == Failure(NO_RESULTS)

    @pytest.mark.asyncio
    async def test_get_updates(self) -> None:
        transport = FakeTransport()
        transport.updates = [update_json(31), update_json(32)]
        bot = make_bot(transport)
        result = await bot.get_updates()
        assert [u.update_id for u in result.value] == [31, 32]
        assert bot.offset == 0

    @pytest.mark.asyncio
    async def test_pop_update_action(self) -> None:
        transport = FakeTransport()
        transport.updates = [update_json(33, message=message_json("a"))]
        bot = make_bot(transport)
        seen = []
        await bot.interpret(PopUpdate(run_cmds=False, and_then=lambda r: seen.append(r.value.update_id) or Nothing()))
        assert seen == [33]
        assert bot.offset == 34


# ── Driver ───────────────────────────────────────────────────────────────────


class TestRun:
    """Validate the long-running loop keeps going until stopped."""

    @pytest.mark.asyncio
    async def test_run_survives_failures(self, caplog) -> None:
        bot = Bot(make_client(FakeTransport()), retry_delay=0)
        script = iter([
            Failure(NO_RESULTS),
            Failure("Bad Gateway"),
            RuntimeError("unexpected"),
            Success(Update(update_id=1)),
            None,
        ])
        polls = []

        async def fake_pop(run_cmds=True):
            polls.append(run_cmds)
            item = next(script)
            if item is None:
                bot.stop()
                return Failure(NO_RESULTS)
            if isinstance(item, Exception):
                raise item
            return item

        bot.pop_update = fake_pop
        with caplog.at_level(logging.INFO, logger="actiongram"):
            await bot.run()

        assert len(polls) == 5
        messages = [record.getMessage() for record in caplog.records]
        assert "Poll returned a failure" in messages
        assert "Unexpected error while polling" in messages
        assert not any("no results" in m for m in messages)
