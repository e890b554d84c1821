"""
HTTP API server for gituim.

Maps HTTP verbs and paths onto RepositoryRegistry and RepositoryService
operations. Repository errors are turned into status codes in one place:
not found is 404, invalid argument is 400 and internal is 500.

"""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gituim import __version__
from gituim.api.models import (
	BlobModel,
	BranchListModel,
	BranchModel,
	CommitModel,
	CreateRepositoryRequest,
	ErrorResponse,
	RepositoryListModel,
	RepositoryModel,
	TagListModel,
	TagModel,
	TreeModel,
)
from gituim.config import AppConfigSchema
from gituim.repository import (
	ErrorKind,
	InvalidArgumentError,
	RepositoryError,
	RepositoryRegistry,
	RepositoryService,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
	ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
	ErrorKind.INVALID_ARGUMENT: status.HTTP_400_BAD_REQUEST,
	ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

ERROR_LABELS = {
	ErrorKind.NOT_FOUND: "Not found",
	ErrorKind.INVALID_ARGUMENT: "Invalid argument",
	ErrorKind.INTERNAL: "Internal error",
}

ERROR_RESPONSES = {
	status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
	status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
	status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def _no_content() -> Response:
	return Response(status_code=status.HTTP_204_NO_CONTENT)


def create_app(service: RepositoryService, config: AppConfigSchema | None = None) -> FastAPI:
	"""
	Create and configure the FastAPI application.

	Args:
	    service: Lookup service answering the queries
	    config: Application configuration (defaults to schema defaults)

	Returns:
	    FastAPI: Configured application

	"""
	config = config or AppConfigSchema(repository_root=service.registry.root)
	registry: RepositoryRegistry = service.registry

	app = FastAPI(
		title="gituim API",
		description="Browse bare git repositories",
		version=__version__,
	)

	cors_config = config.server.cors
	if cors_config.allow_cors:
		app.add_middleware(
			CORSMiddleware,
			allow_origins=cors_config.origins,
			allow_methods=["*"],
			allow_headers=["*"],
		)

	@app.exception_handler(RepositoryError)
	async def repository_error_handler(_request: Request, exc: RepositoryError) -> JSONResponse:
		"""Handle RepositoryError exceptions."""
		if exc.kind is ErrorKind.INTERNAL:
			logger.error("Internal repository error: %s", exc, exc_info=exc)
		return JSONResponse(
			status_code=ERROR_STATUS[exc.kind],
			content={"error": ERROR_LABELS[exc.kind], "detail": str(exc)},
		)

	@app.exception_handler(RequestValidationError)
	async def validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
		"""Handle malformed request bodies."""
		return JSONResponse(
			status_code=status.HTTP_400_BAD_REQUEST,
			content={"error": "Invalid request", "detail": str(exc)},
		)

	@app.exception_handler(Exception)
	async def general_exception_handler(_request: Request, _exc: Exception) -> JSONResponse:
		"""Handle unexpected exceptions."""
		logger.exception("Unexpected error")
		return JSONResponse(
			status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
			content={"error": "Internal server error", "detail": "An unexpected error occurred"},
		)

	@app.get("/health")
	async def health_check() -> dict:
		"""Get health status of the server."""
		return {"status": "ok"}

	# Repositories

	@app.get("/repositories", response_model=None, responses=ERROR_RESPONSES)
	def list_repositories() -> RepositoryListModel | Response:
		"""List repositories under the root."""
		repositories = registry.list_repositories()
		if not repositories:
			return _no_content()
		return RepositoryListModel(repositories=repositories)

	@app.post("/repositories", responses=ERROR_RESPONSES)
	def create_repository(request: CreateRepositoryRequest) -> Response:
		"""Create a bare repository."""
		if not request.name:
			msg = "invalid repository name"
			raise InvalidArgumentError(msg)
		registry.create_repository(request.name)
		return Response(status_code=status.HTTP_200_OK, headers={"Location": request.name})

	@app.get("/repositories/{repository}", response_model=RepositoryModel, responses=ERROR_RESPONSES)
	def get_repository_info(repository: str) -> RepositoryModel:
		"""Describe a repository."""
		info = service.get_repository_info(repository)
		return RepositoryModel(name=info.name, bare=info.is_bare)

	@app.delete("/repositories/{repository}", responses=ERROR_RESPONSES)
	def delete_repository(repository: str) -> Response:
		"""Delete a repository."""
		result = registry.delete_repository(repository)
		if result.existed:
			return _no_content()
		return Response(status_code=status.HTTP_404_NOT_FOUND)

	# Branches

	@app.get("/repositories/{repository}/branches", response_model=None, responses=ERROR_RESPONSES)
	def list_branches(repository: str) -> BranchListModel | Response:
		"""List the local branches of a repository."""
		branches = service.list_repository_branches(repository)
		if not branches:
			return _no_content()
		return BranchListModel(branches=[BranchModel.build(branch) for branch in branches])

	@app.get("/repositories/{repository}/branches/{branch}", response_model=BranchModel, responses=ERROR_RESPONSES)
	def get_branch(repository: str, branch: str) -> BranchModel:
		"""Resolve a branch."""
		return BranchModel.build(service.get_branch(repository, branch))

	# Objects

	@app.get("/repositories/{repository}/commits/{commit}", response_model=CommitModel, responses=ERROR_RESPONSES)
	def get_commit(repository: str, commit: str) -> CommitModel:
		"""Look up a commit."""
		return CommitModel.build(service.lookup_commit(repository, commit))

	@app.get("/repositories/{repository}/tree/{tree}", response_model=TreeModel, responses=ERROR_RESPONSES)
	def get_tree(repository: str, tree: str) -> TreeModel:
		"""Look up a tree and walk it recursively."""
		return TreeModel.build(service.lookup_tree(repository, tree))

	@app.get("/repositories/{repository}/blobs/{blob}", response_model=BlobModel, responses=ERROR_RESPONSES)
	def get_blob(repository: str, blob: str) -> BlobModel:
		"""Look up a blob."""
		return BlobModel.build(service.lookup_blob(repository, blob))

	# Tags

	@app.get("/repositories/{repository}/tags", response_model=None, responses=ERROR_RESPONSES)
	def list_tags(repository: str) -> TagListModel | Response:
		"""List tag names."""
		tags = service.list_repository_tags(repository)
		if not tags:
			return _no_content()
		return TagListModel(tags=tags)

	@app.get("/repositories/{repository}/tags/{tag}", response_model=TagModel, responses=ERROR_RESPONSES)
	def get_tag(repository: str, tag: str) -> TagModel:
		"""Resolve an annotated tag."""
		return TagModel.build(service.lookup_tag(repository, tag))

	logger.debug("Created FastAPI application with %d routes", len(app.routes))
	return app


class APIServer:
	"""Runs the gituim API with uvicorn."""

	def __init__(self, config: AppConfigSchema) -> None:
		"""
		Initialize the API server.

		Args:
		    config: Application configuration

		"""
		self.config = config
		self.registry = RepositoryRegistry(config.repository_root)
		self.service = RepositoryService(self.registry)
		self.app = create_app(self.service, config)

	def run(self) -> None:
		"""Serve requests until interrupted, then shut down gracefully."""
		server_config = self.config.server
		logger.info(
			"Serving repositories from %s on %s:%d",
			self.config.repository_root,
			server_config.host,
			server_config.port,
		)
		uvicorn_config = uvicorn.Config(
			app=self.app,
			host=server_config.host,
			port=server_config.port,
			log_level=self.config.log_level.lower(),
			timeout_graceful_shutdown=int(server_config.graceful_timeout),
		)
		uvicorn.Server(uvicorn_config).run()
		logger.info("shutting down")
