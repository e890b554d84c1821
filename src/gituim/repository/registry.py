"""
Registry of bare repositories under a root directory.

The root is fixed at construction. Names map to direct children of the root
and are validated so that no name can address a path outside of it.

"""

from __future__ import annotations

import contextlib
import logging
import os
import shutil
import threading
from typing import TYPE_CHECKING, Any

from gituim.repository.errors import (
	InternalError,
	InvalidArgumentError,
	NotFoundError,
	RepositoryExistsError,
)
from gituim.repository.models import DeleteResult, Repository
from gituim.repository.store import ObjectStore, Pygit2ObjectStore

if TYPE_CHECKING:
	from collections.abc import Iterator
	from pathlib import Path

logger = logging.getLogger(__name__)

# Directory name of a non-bare repository's metadata; never listed.
METADATA_DIR = ".git"

_FORBIDDEN_NAMES = frozenset({"", ".", ".."})


class RepositoryRegistry:
	"""Resolves, lists, creates and deletes repositories under a root directory."""

	def __init__(self, root: Path, store: ObjectStore | None = None) -> None:
		"""
		Initialize the registry.

		Args:
		    root: Directory holding the repositories
		    store: Object store adapter (defaults to pygit2)

		"""
		self._root = root
		self.store: ObjectStore = store or Pygit2ObjectStore()
		# name -> (lock, number of callers holding or waiting for it)
		self._locks: dict[str, tuple[threading.Lock, int]] = {}
		self._locks_guard = threading.Lock()

	@property
	def root(self) -> Path:
		"""The repository root directory."""
		return self._root

	@staticmethod
	def validate_name(name: str) -> str:
		"""
		Check that a repository name addresses a direct child of the root.

		Args:
		    name: Repository name

		Returns:
		    The name, unchanged

		Raises:
		    InvalidArgumentError: If the name is empty, a dot segment, or contains
		        a path separator or NUL byte

		"""
		separators = {"/", "\\", os.sep}
		if os.altsep:
			separators.add(os.altsep)
		if name in _FORBIDDEN_NAMES or "\0" in name or any(sep in name for sep in separators):
			msg = f"invalid repository name {name!r}"
			raise InvalidArgumentError(msg)
		return name

	def resolve_path(self, name: str) -> Path:
		"""Return the path of the repository called ``name``."""
		return self._root / self.validate_name(name)

	@contextlib.contextmanager
	def open(self, name: str) -> Iterator[Any]:
		"""
		Open a repository by name for the duration of the block.

		Raises:
		    InvalidArgumentError: If the name is invalid
		    NotFoundError: If no store exists at the resolved path

		"""
		with self.store.open(self.resolve_path(name)) as handle:
			yield handle

	@contextlib.contextmanager
	def _exclusive(self, name: str) -> Iterator[None]:
		"""Serialize create and delete calls on the same name."""
		with self._locks_guard:
			lock, users = self._locks.get(name, (None, 0))
			lock = lock or threading.Lock()
			self._locks[name] = (lock, users + 1)
		try:
			with lock:
				yield
		finally:
			with self._locks_guard:
				_, users = self._locks[name]
				if users == 1:
					del self._locks[name]
				else:
					self._locks[name] = (lock, users - 1)

	def list_repositories(self) -> list[str]:
		"""
		List names of the bare repositories under the root.

		Entries that are not directories, the ``.git`` metadata directory and
		directories that do not open as a store are skipped.

		Returns:
		    Sorted repository names; empty when none qualify

		Raises:
		    InternalError: If the root cannot be read

		"""
		try:
			entries = sorted(self._root.iterdir(), key=lambda p: p.name)
		except OSError as e:
			msg = "unable to list repository root"
			raise InternalError(msg) from e

		repositories = []
		for entry in entries:
			if entry.name == METADATA_DIR or not entry.is_dir():
				continue
			try:
				with self.store.open(entry):
					repositories.append(entry.name)
			except NotFoundError:
				logger.debug("Skipping %s: not a repository", entry)
		return repositories

	def get_repository_info(self, name: str) -> Repository:
		"""
		Describe a repository.

		Raises:
		    NotFoundError: If the repository does not exist

		"""
		path = self.resolve_path(name)
		with self.store.open(path) as handle:
			return Repository(name=name, path=path, is_bare=self.store.is_bare(handle))

	def create_repository(self, name: str) -> Repository:
		"""
		Initialize a new bare repository.

		Args:
		    name: Repository name

		Returns:
		    The created repository

		Raises:
		    InvalidArgumentError: If the name is invalid
		    RepositoryExistsError: If anything already exists at the path
		    InternalError: On I/O failure

		"""
		path = self.resolve_path(name)
		with self._exclusive(name):
			if path.exists() or path.is_symlink():
				msg = f"repository {name!r} already exists"
				raise RepositoryExistsError(msg)
			self.store.init(path)

		logger.info("Repository %s created", name)
		return Repository(name=name, path=path, is_bare=True)

	def delete_repository(self, name: str) -> DeleteResult:
		"""
		Recursively remove a repository.

		Args:
		    name: Repository name

		Returns:
		    DeleteResult; ``existed`` is False when there was nothing to remove

		Raises:
		    InvalidArgumentError: If the name is invalid
		    InternalError: If removal fails

		"""
		path = self.resolve_path(name)
		with self._exclusive(name):
			if not path.exists() and not path.is_symlink():
				return DeleteResult(existed=False)
			try:
				if path.is_dir() and not path.is_symlink():
					shutil.rmtree(path)
				else:
					path.unlink()
			except OSError as e:
				msg = "unable to delete repository"
				raise InternalError(msg) from e

		logger.info("Repository %s deleted", name)
		return DeleteResult(existed=True)
