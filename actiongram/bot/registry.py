"""Command registry — slash-command names mapped to action-returning handlers.

Design:
- :class:`Command` binds a name and a help description to a handler
  ``run(message) -> Action``.  Its ``enabled`` flag toggles the command
  without removing it.
- :class:`CommandRegistry` keeps commands in registration order, matches
  incoming text against them and synthesizes a ``help`` command listing
  the others.
- ``@registry.register`` binds a function to a command in one place.

Handlers are plain functions: they describe the reply as an
:class:`~actiongram.bot.actions.Action` and never perform I/O themselves.
"""

from __future__ import annotations

import dataclasses
from typing import Callable, Iterable, Optional

from actiongram.bot.actions import Action, Nothing, SendMessage
from actiongram.core.logger import ActiongramLogger
from actiongram.sdk.models import Message, Update

logger = ActiongramLogger.get_logger()

Handler = Callable[[Message], Action]

HELP_COMMAND = "help"


# ── Registry entry ───────────────────────────────────────────────────────────

@dataclasses.dataclass(slots=True)
class Command:
    """A single slash-command."""
    name: str                 # matched against the token after "/"
    description: str          # shown by /help
    run: Handler
    enabled: bool = True


# ── Text helpers ─────────────────────────────────────────────────────────────

def tokenize(text: str) -> list[str]:
    """Return the arguments following the command token of *text*."""
    return text.split()[1:]


def make_help(commands: Iterable[Command]) -> str:
    """Render the help text: a header and one ``/name - description`` line per command."""
    lines = ["Commands:"]
    lines.extend(f"/{command.name} - {command.description}" for command in commands)
    return "\n".join(lines)


def is_command(update: Update) -> bool:
    """Return ``True`` when *update* is a message whose text starts with ``/``."""
    message = update.message
    return message is not None and message.text is not None and message.text.startswith("/")


# ── Registry ─────────────────────────────────────────────────────────────────

class CommandRegistry:
    """Ordered collection of commands with a synthesized ``help`` command.

    Usage::

        registry = CommandRegistry(postfix="mybot")

        @registry.register("say_hi", "Say hi")
        def say_hi(message):
            return send_message(message.chat.id, "Hi")

        action = registry.match(message)

    Args:
        commands: Initial commands, copied and kept in the given order after ``help``.
        postfix: The bot's username.  When set, ``/cmd@other`` is ignored
            because it addresses another bot; when unset, any ``@suffix``
            is dropped before comparison.
    """

    def __init__(self, commands: Iterable[Command] = (), postfix: Optional[str] = None) -> None:
        self.postfix = postfix
        self._commands: list[Command] = [
            Command(name=HELP_COMMAND, description="Show this message", run=self._help)
        ]
        # Copies: enabled flags are per registry.
        self._commands.extend(dataclasses.replace(command) for command in commands)

    # ── decorator ────────────────────────────────────────────────────────

    def register(self, name: str, description: str) -> Callable[[Handler], Handler]:
        """Decorator that registers *handler* under *name*.

        Example::

            @registry.register("kick", "Kick the replied-to user")
            def kick(message): ...
        """
        def decorator(func: Handler) -> Handler:
            self.add(Command(name=name, description=description, run=func))
            return func
        return decorator

    def add(self, command: Command) -> None:
        if self.get(command.name) is not None:
            raise ValueError(f"Command '{command.name}' is already registered")
        self._commands.append(command)

    # ── lookup helpers ───────────────────────────────────────────────────

    @property
    def commands(self) -> list[Command]:
        """All commands in match order, ``help`` first."""
        return list(self._commands)

    def get(self, name: str) -> Command | None:
        """Return the command called *name*, or ``None``."""
        for command in self._commands:
            if command.name == name:
                return command
        return None

    def enable(self, name: str) -> None:
        self._require(name).enabled = True

    def disable(self, name: str) -> None:
        self._require(name).enabled = False

    def _require(self, name: str) -> Command:
        command = self.get(name)
        if command is None:
            raise KeyError(name)
        return command

    # ── matching ─────────────────────────────────────────────────────────

    def command_name(self, text: str) -> str | None:
        """Extract the command name addressed to this bot from *text*, if any."""
        tokens = text.split(maxsplit=1)
        if not tokens or not tokens[0].startswith("/"):
            return None
        name, at, suffix = tokens[0][1:].partition("@")
        if at and self.postfix is not None and suffix != self.postfix:
            return None
        return name

    def match(self, message: Message) -> Action:
        """Return the action of the first enabled command matching *message*.

        Non-text messages and unmatched commands yield :class:`Nothing`.
        """
        if message.text is None:
            return Nothing()
        name = self.command_name(message.text)
        if name is None:
            return Nothing()
        for command in self._commands:
            if command.enabled and command.name == name:
                logger.debug("Command matched", extra={"command": name, "chat_id": message.chat.id})
                return command.run(message)
        logger.debug("No command matched", extra={"command": name, "chat_id": message.chat.id})
        return Nothing()

    def _help(self, message: Message) -> Action:
        others = [c for c in self._commands if c.name != HELP_COMMAND and c.enabled]
        # Silent, so a help request does not wake anyone up.
        return SendMessage(chat_id=message.chat.id, text=make_help(others), disable_notification=True)
