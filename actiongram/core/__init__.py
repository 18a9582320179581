"""Framework-agnostic building blocks — outcome type and logging.

This package must NEVER import from ``actiongram.sdk`` or ``actiongram.bot``.
"""

from actiongram.core.logger import ActiongramLogger
from actiongram.core.result import NO_RESULTS, Failure, Result, Success, first, success

__all__ = [
    "ActiongramLogger",
    "NO_RESULTS",
    "Failure",
    "Result",
    "Success",
    "first",
    "success",
]
