"""Command-line interface package for gituim."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv

from gituim import __version__
from gituim.config import ConfigLoader, ConfigParsingError
from gituim.utils.cli_utils import show_error
from gituim.utils.log_setup import setup_logging

from .repo_cmd import repo_cmd
from .serve_cmd import serve_command

logger = logging.getLogger(__name__)

app = typer.Typer(
	help=f"gituim - browse bare git repositories over HTTP\n\nVersion: {__version__}",
	no_args_is_help=True,
	context_settings={"help_option_names": ["-h", "--help"]},
)


def _version_callback(value: bool) -> None:
	"""Callback for --version option."""
	if value:
		typer.echo(f"gituim version: {__version__}")
		raise typer.Exit


@app.callback()
def global_options(
	ctx: typer.Context,
	is_verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")] = False,
	config_file: Annotated[
		Path | None,
		typer.Option("--config", "-c", help="Path to configuration file.", show_default=False),
	] = None,
	log_file: Annotated[
		Path | None,
		typer.Option("--log-file", help="Also write debug logs to this file.", show_default=False),
	] = None,
	_version: Annotated[
		bool | None,
		typer.Option("--version", help="Show version and exit.", callback=_version_callback, is_eager=True),
	] = None,
) -> None:
	"""Global CLI options, configuration and logging setup."""
	# Try to load from .env.local first, then fall back to .env
	env_local = Path(".env.local")
	load_dotenv(dotenv_path=env_local if env_local.exists() else Path(".env"))

	try:
		config = ConfigLoader(config_file).get
	except ConfigParsingError as e:
		show_error("Invalid configuration", e)
		raise typer.Exit(1) from e

	setup_logging(is_verbose=is_verbose, log_file_path=log_file, level=config.log_level)
	ctx.obj = config


app.command(name="serve")(serve_command)
app.add_typer(repo_cmd)


def main() -> int:
	"""Run the CLI application."""
	return app()


if __name__ == "__main__":
	sys.exit(main())
