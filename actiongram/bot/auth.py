"""Admin-only command handlers."""

from __future__ import annotations

from typing import Any

from actiongram.bot.actions import Action, GetChatAdministrators, Nothing
from actiongram.bot.registry import Handler
from actiongram.core.logger import ActiongramLogger
from actiongram.core.result import Result
from actiongram.sdk.models import ChatMember, Message

logger = ActiongramLogger.get_logger()


def with_auth(handler: Handler) -> Handler:
    """Wrap *handler* so it only runs for administrators of the message's chat.

    The wrapper issues ``getChatAdministrators`` and hands the message to
    *handler* when the sender is listed; otherwise it does nothing.
    """

    def guarded(message: Message) -> Action:
        def check(result: Result[list[ChatMember]]) -> Action:
            if not result.is_success:
                logger.warning(
                    "Could not fetch chat administrators",
                    extra={"chat_id": message.chat.id, "error": result.error},
                )
                return Nothing()
            if _sender_id(message) in {member.user.id for member in result.value}:
                return handler(message)
            logger.info("Unauthorized command attempt", extra={"chat_id": message.chat.id, "user_id": _sender_id(message)})
            return Nothing()

        return GetChatAdministrators(chat_id=message.chat.id, and_then=check)

    guarded.__name__ = getattr(handler, "__name__", "guarded")
    guarded.__doc__ = handler.__doc__
    return guarded


def _sender_id(message: Message) -> Any:
    return message.from_field.id if message.from_field is not None else None
