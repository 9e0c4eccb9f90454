"""
Logging setup shared by the API server and the dashboard CLI.
"""
import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Chatty third-party loggers kept at WARNING unless running at DEBUG
NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: str = "INFO", rich: bool = False, console: Optional[Console] = None) -> None:
    """
    Configure the root logger.

    Args:
        level: Level name ("DEBUG", "INFO", ...); unknown names fall back to INFO
        rich: Route records through a RichHandler (terminal use)
        console: Console for the RichHandler, stderr by default
    """
    numeric = getattr(logging, (level or "INFO").upper(), logging.INFO)
    if rich:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        logging.basicConfig(level=numeric, format="%(message)s", datefmt="[%X]", handlers=[handler], force=True)
    else:
        logging.basicConfig(level=numeric, format=LOG_FORMAT, force=True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(numeric if numeric <= logging.DEBUG else logging.WARNING)
