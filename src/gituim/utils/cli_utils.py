"""Utility functions for CLI output."""

from __future__ import annotations

import logging

from rich.console import Console

from gituim.utils.log_setup import display_error_summary

console = Console()
logger = logging.getLogger(__name__)


def show_error(message: str, exception: Exception | None = None) -> None:
	"""
	Display an error summary with standardized formatting.

	Args:
	    message: The error message to display
	    exception: Optional exception that caused the error

	"""
	error_text = message
	if exception:
		error_text += f"\n\nDetails: {exception!s}"
		logger.debug("Error occurred", exc_info=exception)

	display_error_summary(error_text)
