"""Bot layer — actions, the interpreter/polling session and command handling.

Usage::

    from actiongram.bot import Bot, Handlers, send_message

    handlers = Handlers(inline=lambda query: Nothing())
    bot = Bot.from_config(handlers)
    asyncio.run(bot.run())
"""

from actiongram.bot.actions import Action, Chain, Nothing, chain, send_message, then
from actiongram.bot.auth import with_auth
from actiongram.bot.dispatcher import Handlers, route
from actiongram.bot.registry import Command, CommandRegistry, is_command, make_help, tokenize
from actiongram.bot.session import Bot

__all__ = [
    "Action",
    "Chain",
    "Nothing",
    "chain",
    "send_message",
    "then",
    "with_auth",
    "Handlers",
    "route",
    "Command",
    "CommandRegistry",
    "is_command",
    "make_help",
    "tokenize",
    "Bot",
]
