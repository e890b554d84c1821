"""Command for serving the HTTP API."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from gituim.api.server import APIServer
from gituim.config import AppConfigSchema
from gituim.utils.cli_utils import show_error


def serve_command(
	ctx: typer.Context,
	host: Annotated[str | None, typer.Option("--host", help="Address to bind to.", show_default=False)] = None,
	port: Annotated[int | None, typer.Option("--port", "-p", help="Port to listen on.", show_default=False)] = None,
	root: Annotated[
		Path | None,
		typer.Option("--root", "-r", help="Repository root directory.", show_default=False),
	] = None,
) -> None:
	"""Serve the repositories over HTTP."""
	config: AppConfigSchema = ctx.obj
	server = config.server.model_copy(
		update={key: value for key, value in {"host": host, "port": port}.items() if value is not None}
	)
	config = config.model_copy(update={"server": server})
	if root is not None:
		config = config.model_copy(update={"repository_root": root})

	if not config.repository_root.is_dir():
		show_error(f"Repository root is not a directory: {config.repository_root}")
		raise typer.Exit(1)

	APIServer(config).run()
