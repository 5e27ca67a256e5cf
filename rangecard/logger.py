"""Logging for the rangecard library.

All solver modules log through ``logger``. Console output is limited to
WARNING and above; ``enable_file_logging`` adds a DEBUG-level file handler
that records zero-angle results, ballistic coefficient clamping and early
trajectory termination.

Examples:
    >>> from rangecard.logger import enable_file_logging, disable_file_logging
    >>> enable_file_logging("rangecard_debug.log")
    >>> # ... compute trajectories ...
    >>> disable_file_logging()
"""
import logging
from typing import Optional

__all__ = ('logger',
           'enable_file_logging',
           'disable_file_logging',
)

formatter = logging.Formatter("%(levelname)s:%(name)s:%(message)s")
console_handler = logging.StreamHandler()
console_handler.setFormatter(formatter)
console_handler.setLevel(logging.WARNING)

logger: logging.Logger = logging.getLogger('rangecard')
logger.addHandler(console_handler)
logger.setLevel(logging.INFO)

# File handler (optional, added dynamically)
file_handler: Optional[logging.FileHandler] = None
# Logger level to restore once the file handler is removed
_saved_level: Optional[int] = None


def enable_file_logging(filename: str = "rangecard_debug.log") -> None:
    """Log everything at DEBUG and above to ``filename`` (append mode).

    Replaces a file handler installed by an earlier call. The logger level is
    lowered to DEBUG only while the file handler is attached.
    """
    global file_handler, _saved_level
    if file_handler is not None:
        disable_file_logging()

    file_handler = logging.FileHandler(filename)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter("%(asctime)s:%(levelname)s:%(message)s"))
    logger.addHandler(file_handler)
    _saved_level = logger.level
    if not logger.isEnabledFor(logging.DEBUG):
        logger.setLevel(logging.DEBUG)


def disable_file_logging() -> None:
    """Remove and close the file handler; safe to call when none is set."""
    global file_handler, _saved_level
    if file_handler is not None:
        logger.removeHandler(file_handler)
        file_handler.close()
        file_handler = None
        logger.setLevel(_saved_level)
        _saved_level = None
