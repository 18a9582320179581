"""Application configuration — environment variables and derived constants.

Loads ``BOT_TOKEN``, ``COMMAND_POSTFIX`` and the polling settings from the
environment via ``python-dotenv``.  All values are resolved at import time
so other modules can ``from actiongram.config import …`` without repeated
lookups.
"""

# ── stdlib ───────────────────────────────────────────────────────────────────
import os

# ── third-party ──────────────────────────────────────────────────────────────
from dotenv import load_dotenv

# ── core ─────────────────────────────────────────────────────────────────────
from actiongram.core.logger import ActiongramLogger

# ── sdk ──────────────────────────────────────────────────────────────────────
from actiongram.sdk.client import DEFAULT_API_ROOT

# ── Environment bootstrap ────────────────────────────────────────────────────
load_dotenv()

# ── Logger (used for startup diagnostics at the bottom of this module) ───────
logger = ActiongramLogger.get_logger()


# ── Helper functions (private) ───────────────────────────────────────────────


def _env_number(name: str, default: float, cast=float):
    """Read a numeric environment variable, falling back to *default* when unset or invalid."""
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return cast(default)
    try:
        return cast(raw.strip())
    except ValueError:
        logger.warning("Ignoring invalid numeric setting", extra={"setting": name, "value": raw})
        return cast(default)


def _postfix(raw: str | None) -> str | None:
    """Normalise the bot username: strip whitespace and a leading ``@``."""
    if not raw:
        return None
    return raw.strip().lstrip("@") or None


# ── Public constants ─────────────────────────────────────────────────────────

BOT_TOKEN: str | None = os.environ.get("BOT_TOKEN")
API_ROOT: str = os.environ.get("API_ROOT", DEFAULT_API_ROOT).rstrip("/")
BASE_URL: str = f"{API_ROOT}/bot{BOT_TOKEN or ''}"
FILE_BASE_URL: str = f"{API_ROOT}/file/bot{BOT_TOKEN or ''}"
COMMAND_POSTFIX: str | None = _postfix(os.environ.get("COMMAND_POSTFIX"))
POLL_TIMEOUT: int = _env_number("POLL_TIMEOUT", 30, int)
REQUEST_TIMEOUT: int = _env_number("REQUEST_TIMEOUT", 10, int)
IDLE_DELAY: float = _env_number("IDLE_DELAY", 0.0)
RETRY_DELAY: float = _env_number("RETRY_DELAY", 5.0)
LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()

ActiongramLogger.set_level(LOG_LEVEL)


# ── Startup diagnostics ─────────────────────────────────────────────────────

if BOT_TOKEN:
    logger.info("Config loaded — BOT_TOKEN is set, BASE_URL ready")
else:
    logger.warning("Config loaded — BOT_TOKEN is NOT set")

if COMMAND_POSTFIX:
    logger.info("Command postfix configured", extra={"command_postfix": COMMAND_POSTFIX})

logger.info(
    "Polling settings resolved",
    extra={"poll_timeout": POLL_TIMEOUT, "idle_delay": IDLE_DELAY, "retry_delay": RETRY_DELAY},
)
