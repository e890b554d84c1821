"""Commands for managing repositories under the root directory."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from gituim.config import AppConfigSchema
from gituim.repository import RepositoryError, RepositoryRegistry, RepositoryService
from gituim.utils.cli_utils import console, show_error

RootOption = Annotated[
	Path | None,
	typer.Option("--root", "-r", help="Repository root directory.", show_default=False),
]
NameArgument = Annotated[str, typer.Argument(help="Repository name.")]

repo_cmd = typer.Typer(
	help="List, create, inspect and delete repositories.",
	name="repo",
	no_args_is_help=True,
)


def _service(ctx: typer.Context, root: Path | None) -> RepositoryService:
	config: AppConfigSchema | None = ctx.obj
	repository_root = root or (config.repository_root if config else Path.cwd())
	return RepositoryService(RepositoryRegistry(repository_root))


def _fail(message: str, error: RepositoryError) -> typer.Exit:
	show_error(message, error)
	return typer.Exit(1)


@repo_cmd.command("list")
def list_command(ctx: typer.Context, root: RootOption = None) -> None:
	"""List repositories."""
	service = _service(ctx, root)
	try:
		names = service.registry.list_repositories()
	except RepositoryError as e:
		raise _fail("Unable to list repositories", e) from e

	if not names:
		console.print(f"No repositories in {service.registry.root}")
		return

	table = Table(title=f"Repositories in {service.registry.root}")
	table.add_column("Name", style="cyan", no_wrap=True)
	for name in names:
		table.add_row(name)
	console.print(table)


@repo_cmd.command("create")
def create_command(ctx: typer.Context, name: NameArgument, root: RootOption = None) -> None:
	"""Create a bare repository."""
	service = _service(ctx, root)
	try:
		repository = service.registry.create_repository(name)
	except RepositoryError as e:
		raise _fail(f"Unable to create repository {name}", e) from e
	console.print(f"[green]Created repository {repository.name} at {repository.path}")


@repo_cmd.command("delete")
def delete_command(ctx: typer.Context, name: NameArgument, root: RootOption = None) -> None:
	"""Delete a repository."""
	service = _service(ctx, root)
	try:
		result = service.registry.delete_repository(name)
	except RepositoryError as e:
		raise _fail(f"Unable to delete repository {name}", e) from e

	if result.existed:
		console.print(f"[green]Deleted repository {name}")
	else:
		console.print(f"[yellow]Repository {name} does not exist")


@repo_cmd.command("show")
def show_command(ctx: typer.Context, name: NameArgument, root: RootOption = None) -> None:
	"""Show a repository's branches and tags."""
	service = _service(ctx, root)
	try:
		info = service.get_repository_info(name)
		branches = service.list_repository_branches(name)
		tags = service.list_repository_tags(name)
	except RepositoryError as e:
		raise _fail(f"Unable to read repository {name}", e) from e

	console.print(f"[bold]{info.name}[/bold] ({'bare' if info.is_bare else 'non-bare'}) at {info.path}")

	table = Table(title="Branches")
	table.add_column("Branch", style="cyan", no_wrap=True)
	table.add_column("Commit")
	table.add_column("Tree")
	table.add_column("Parent")
	for branch in branches:
		table.add_row(branch.name, branch.commit_id, branch.tree_id, branch.parent_id or "-")
	console.print(table)

	console.print(f"Tags: {', '.join(tags) if tags else '-'}")
