"""Entry point of the example bot.

Run with ``python -m actiongram.main`` (or the ``actiongram-bot`` script)
after setting ``BOT_TOKEN`` in the environment or a ``.env`` file.
"""

import asyncio

from actiongram.bot.session import Bot
from actiongram.core.logger import ActiongramLogger
from actiongram.handlers import build_handlers

logger = ActiongramLogger.get_logger()


def main():
    bot = Bot.from_config(build_handlers())
    logger.info("Registered commands", extra={"commands": [c.name for c in bot.commands]})
    asyncio.run(bot.run())


if __name__ == "__main__":
    main()
