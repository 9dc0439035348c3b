"""Logging setup for the command line.

Records up to WARNING go to stdout and ERROR+ to stderr, so command output
and failures can be redirected separately.
"""

import logging
import sys
from typing import Union

# HTTP transport loggers that are noisy below WARNING
_TRANSPORT_LOGGERS = ("urllib3", "requests")


class _MaxLevelFilter(logging.Filter):
    """Pass only records at or below ``max_level``."""

    def __init__(self, max_level: int) -> None:
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        return record.levelno <= self.max_level


def configure_logging(level: Union[int, str] = logging.INFO, debug_transport: bool = False) -> None:
    """Replace root logger handlers with the stdout/stderr pair.

    Args:
        level: Root level, as a number or a name such as "DEBUG".
        debug_transport: Keep urllib3/requests at the root level instead of WARNING.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level}")

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(logging.DEBUG)
    stdout_handler.addFilter(_MaxLevelFilter(logging.WARNING))
    stdout_handler.setFormatter(fmt)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.ERROR)
    stderr_handler.setFormatter(fmt)

    root.setLevel(level)
    root.addHandler(stdout_handler)
    root.addHandler(stderr_handler)

    transport_level = level if debug_transport else max(level, logging.WARNING)
    for name in _TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)
