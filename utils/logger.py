"""
Logger Configuration
Unified logging setup for the gateway
"""
import logging
import sys
from typing import Union

from rich.logging import RichHandler
from rich.console import Console


# Shared console instance
console = Console(stderr=True)

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_FORMAT_SIMPLE = "%(message)s"

# Top-level packages whose module loggers (logging.getLogger(__name__)) are
# configured together at startup.
GATEWAY_PACKAGES = ("config", "content", "sources", "webapp")


def _coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level or "").strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logger(
    name: str,
    level: Union[int, str] = logging.INFO,
    use_rich: bool = True,
) -> logging.Logger:
    """
    Configure a logger

    Args:
        name: logger name
        level: log level (int or name such as "debug")
        use_rich: render console output with Rich

    Returns:
        The configured Logger
    """
    logger = logging.getLogger(name)
    numeric_level = _coerce_level(level)
    logger.setLevel(numeric_level)

    # Avoid stacking handlers on repeated setup
    if logger.handlers:
        return logger

    if use_rich:
        console_handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
        )
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE))
    else:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    console_handler.setLevel(numeric_level)
    logger.addHandler(console_handler)
    return logger


def configure_logging(level: Union[int, str] = logging.INFO, use_rich: bool = True) -> None:
    """Configure every gateway package logger at one level."""
    for package in GATEWAY_PACKAGES:
        setup_logger(package, level=level, use_rich=use_rich)
