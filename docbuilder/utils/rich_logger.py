"""
Rich console logging for the command line.

Provides colorful log output and small table/panel helpers using the rich library.
"""

import logging
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .logger import configure_logging


class RichLogger:
    """
    Console reporter with rich formatting and colors.
    """

    def __init__(self, name: str = "docbuilder", console: Optional[Console] = None):
        self.name = name
        self.console = console or Console()
        self.logger = logging.getLogger(name)

    def info(self, message: str, **kwargs):
        self.logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs):
        self.logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs):
        self.logger.error(message, **kwargs)

    def success(self, message: str):
        """Print a success line."""
        self.console.print(f"[green]✓ {message}[/green]")

    def failure(self, message: str):
        """Print a failure line."""
        self.console.print(f"[red]✗ {message}[/red]")

    def panel(self, title: str, content: str, style: str = "blue"):
        """Display content in a rich panel."""
        self.console.print(Panel(content, title=title, style=style))

    def table(self, title: str, data: Dict[str, Any]):
        """Display key/value data in a rich table."""
        table = Table(title=title)
        table.add_column("Property", style="cyan")
        table.add_column("Value", style="magenta")
        for key, value in data.items():
            table.add_row(str(key), str(value))
        self.console.print(table)


def setup_logging(level: str = "INFO", use_rich: bool = True, console: Optional[Console] = None):
    """
    Setup root logging for the application.

    Args:
        level: Log level
        use_rich: Whether to log through a RichHandler or a plain stream handler
        console: Console used by the RichHandler (stderr by default)
    """
    if not use_rich:
        configure_logging(level, format_string="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        return

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))

    root_logger.addHandler(handler)
