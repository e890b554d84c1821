"""
Logging setup for gituim.

Configures the root logger with a rich console handler and an optional file
handler.

"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.rule import Rule
from rich.text import Text

console = Console(stderr=True)

FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s"


def setup_logging(
	is_verbose: bool = False,
	log_to_console: bool = True,
	log_file_path: Path | str | None = None,
	level: str | int | None = None,
) -> None:
	"""
	Set up logging configuration.

	Args:
	    is_verbose: Enable debug logging
	    log_to_console: Whether to log to the console
	    log_file_path: Optional path to a file for logging
	    level: Log level used when not verbose (defaults to INFO)

	"""
	log_level = logging.DEBUG if is_verbose else (level or logging.INFO)

	root_logger = logging.getLogger()
	root_logger.setLevel(log_level)

	# Clear existing handlers to avoid duplicate logs if called multiple times
	for handler in root_logger.handlers[:]:
		root_logger.removeHandler(handler)

	if log_to_console:
		console_handler = RichHandler(
			console=console,
			level=log_level,
			rich_tracebacks=True,
			show_time=True,
			show_path=is_verbose,
		)
		root_logger.addHandler(console_handler)

	if log_file_path:
		file_handler_path = Path(log_file_path)
		try:
			file_handler_path.parent.mkdir(parents=True, exist_ok=True)
			file_handler = logging.FileHandler(file_handler_path, mode="a", encoding="utf-8")
		except OSError as e:
			# Keep going with whatever console logging is configured
			root_logger.warning("Unable to log to file %s: %s", file_handler_path, e)
			return
		file_handler.setLevel(logging.DEBUG)
		file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
		root_logger.addHandler(file_handler)
		root_logger.debug("Logging to file: %s", file_handler_path)


def display_error_summary(error_message: str, title: str = "Error Summary") -> None:
	"""Print ``error_message`` to stderr between two red rules headed by ``title``."""
	console.print()
	console.print(Rule(Text(title, style="bold red"), style="red"))
	console.print(f"\n{error_message}\n")
	console.print(Rule(style="red"))
	console.print()
