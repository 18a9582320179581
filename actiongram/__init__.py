"""actiongram — a typed Telegram Bot API client where bot behaviour is data.

Handlers return :class:`~actiongram.bot.actions.Action` values; a
:class:`~actiongram.bot.session.Bot` interprets them against the API.
"""

__version__ = "0.3.0"
