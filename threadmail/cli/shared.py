"""Shared CLI helpers: console, logger."""

from rich.console import Console

from threadmail.utils.logger import get_logger

console = Console()
logger = get_logger("threadmail.cli")
