"""Update routing — picks the handler responsible for an incoming update.

Routing order:

1. inline queries → ``Handlers.inline``;
2. callback queries → ``Handlers.callback``;
3. messages whose text starts with ``/`` → the command registry;
4. chat-membership service messages (member joined/left, title or photo
   changed, chat created or migrated, message pinned) → the matching event
   handler.

Anything else is not routed and the polling loop hands the update back to
its caller.  Every handler returns an :class:`~actiongram.bot.actions.Action`;
the defaults return :class:`~actiongram.bot.actions.Nothing`.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Callable, List, Optional

from actiongram.bot.actions import Action, Nothing, chain
from actiongram.bot.registry import Command, CommandRegistry
from actiongram.core.logger import ActiongramLogger
from actiongram.sdk.models import CallbackQuery, Chat, InlineQuery, Message, PhotoSize, Update, User

logger = ActiongramLogger.get_logger()


def _ignore(*_args: Any) -> Action:
    return Nothing()


@dataclasses.dataclass
class Handlers:
    """Everything a bot reacts to, besides its commands' own handlers."""

    commands: List[Command] = dataclasses.field(default_factory=list)
    inline: Callable[[InlineQuery], Action] = _ignore
    callback: Callable[[CallbackQuery], Action] = _ignore

    # ── chat-membership events ───────────────────────────────────────────
    new_chat_member: Callable[[Chat, User], Action] = _ignore
    left_chat_member: Callable[[Chat, User], Action] = _ignore
    new_chat_title: Callable[[Chat, str], Action] = _ignore
    new_chat_photo: Callable[[Chat, List[PhotoSize]], Action] = _ignore
    delete_chat_photo: Callable[[Chat], Action] = _ignore
    group_chat_created: Callable[[Chat], Action] = _ignore
    supergroup_chat_created: Callable[[Chat], Action] = _ignore
    channel_chat_created: Callable[[Chat], Action] = _ignore
    migrate_to_chat_id: Callable[[Chat, int], Action] = _ignore
    migrate_from_chat_id: Callable[[Chat, int], Action] = _ignore
    pinned_message: Callable[[Chat, Message], Action] = _ignore


def route(update: Update, handlers: Handlers, registry: CommandRegistry) -> Optional[Action]:
    """Return the action answering *update*, or ``None`` when nothing handles it."""
    if update.inline_query is not None:
        logger.debug("Routing inline query", extra={"update_id": update.update_id})
        return handlers.inline(update.inline_query)

    if update.callback_query is not None:
        logger.debug("Routing callback query", extra={"update_id": update.update_id})
        return handlers.callback(update.callback_query)

    message = update.message
    if message is None:
        return None

    if message.text is not None and message.text.startswith("/"):
        return registry.match(message)

    return _route_service_message(message, handlers)


def _route_service_message(message: Message, handlers: Handlers) -> Optional[Action]:
    chat = message.chat

    if message.new_chat_members:
        return chain(*(handlers.new_chat_member(chat, user) for user in message.new_chat_members))
    if message.new_chat_member is not None:
        return handlers.new_chat_member(chat, message.new_chat_member)
    if message.left_chat_member is not None:
        return handlers.left_chat_member(chat, message.left_chat_member)
    if message.new_chat_title is not None:
        return handlers.new_chat_title(chat, message.new_chat_title)
    if message.new_chat_photo is not None:
        return handlers.new_chat_photo(chat, message.new_chat_photo)
    if message.delete_chat_photo:
        return handlers.delete_chat_photo(chat)
    if message.group_chat_created:
        return handlers.group_chat_created(chat)
    if message.supergroup_chat_created:
        return handlers.supergroup_chat_created(chat)
    if message.channel_chat_created:
        return handlers.channel_chat_created(chat)
    if message.migrate_to_chat_id is not None:
        return handlers.migrate_to_chat_id(chat, message.migrate_to_chat_id)
    if message.migrate_from_chat_id is not None:
        return handlers.migrate_from_chat_id(chat, message.migrate_from_chat_id)
    if message.pinned_message is not None:
        return handlers.pinned_message(chat, message.pinned_message)
    return None
