"""Logging configuration"""

import logging

from rich.console import Console
from rich.logging import RichHandler

DATE_FORMAT = "[%Y-%m-%d %H:%M:%S]"

# Third-party loggers that only matter when something goes wrong
QUIET_LOGGERS = ("discord", "discord.http", "aiohttp", "httpx")


def _rich_handler() -> RichHandler:
    handler = RichHandler(
        console=Console(force_terminal=True, width=120),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_width=120,
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt=DATE_FORMAT))
    return handler


def setup_logging(level_name: str = "INFO") -> None:
    """Route the root logger through Rich and quiet library loggers."""
    level = getattr(logging, level_name.upper(), logging.INFO)

    try:
        logging.basicConfig(level=level, handlers=[_rich_handler()], force=True)
    except Exception as e:
        logging.basicConfig(
            level=level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            force=True,
        )
        logging.getLogger(__name__).warning(f"Rich logging setup failed: {e}, using standard logging")

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
