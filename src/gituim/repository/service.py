"""
Lookup service.

Answers structural queries about a repository: branches, commits, trees,
blobs and tags. Each call opens the repository, performs its lookups and
releases the handle before returning; nothing is cached between calls.

"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from gituim.repository.errors import NotFoundError, translating
from gituim.repository.models import Blob, Branch, Commit, ObjectKind, Repository, Tag, Tree

if TYPE_CHECKING:
	from gituim.repository.registry import RepositoryRegistry
	from gituim.repository.store import ObjectStore

logger = logging.getLogger(__name__)


class RepositoryService:
	"""Read-only queries over the repositories of a registry."""

	def __init__(self, registry: RepositoryRegistry) -> None:
		"""
		Initialize the service.

		Args:
		    registry: Registry resolving names to stores

		"""
		self.registry = registry

	@property
	def store(self) -> ObjectStore:
		"""The object store adapter used by the registry."""
		return self.registry.store

	def get_repository_info(self, name: str) -> Repository:
		"""Describe a repository."""
		return self.registry.get_repository_info(name)

	# Branches

	def list_repository_branches(self, name: str) -> list[Branch]:
		"""
		Resolve every local branch of a repository.

		The first branch that fails to resolve aborts the whole listing.

		Args:
		    name: Repository name

		Returns:
		    Branches in enumeration order

		Raises:
		    NotFoundError: If the repository, or a branch's commit, is absent

		"""
		with self.registry.open(name) as handle:
			return [self._branch(handle, branch) for branch in self.store.local_branches(handle)]

	def get_branch(self, name: str, branch: str) -> Branch:
		"""
		Resolve a local branch to its commit, tree and first parent.

		Raises:
		    NotFoundError: If the repository, branch or target commit is absent

		"""
		with self.registry.open(name) as handle:
			return self._branch(handle, branch)

	def _branch(self, handle: Any, branch_name: str) -> Branch:
		commit = self.store.lookup_commit(handle, self.store.branch_target(handle, branch_name))
		return Branch(name=branch_name, commit_id=commit.id, tree_id=commit.tree_id, parent_id=commit.parent_id)

	# Objects

	def lookup_commit(self, name: str, commit_id: str) -> Commit:
		"""
		Look up a commit by full hex id.

		Raises:
		    InvalidArgumentError: If ``commit_id`` is malformed
		    NotFoundError: If the repository or commit is absent

		"""
		object_id = self.store.parse_id(commit_id)
		with self.registry.open(name) as handle:
			return self.store.lookup_commit(handle, object_id)

	def lookup_tree(self, name: str, tree_id: str) -> Tree:
		"""
		Look up a tree by full hex id and walk it recursively.

		Raises:
		    InvalidArgumentError: If ``tree_id`` is malformed
		    NotFoundError: If the repository or tree is absent

		"""
		object_id = self.store.parse_id(tree_id)
		with self.registry.open(name) as handle:
			entries = self.store.walk(handle, object_id)
			with translating("unable to walk through the tree"):
				return Tree(id=object_id, entries=tuple(entries))

	def lookup_blob(self, name: str, blob_id: str) -> Blob:
		"""
		Look up a blob by full hex id.

		Raises:
		    InvalidArgumentError: If ``blob_id`` is malformed
		    NotFoundError: If the repository or blob is absent

		"""
		object_id = self.store.parse_id(blob_id)
		with self.registry.open(name) as handle:
			return self.store.lookup_blob(handle, object_id)

	# Tags

	def lookup_tag(self, name: str, tag_name: str) -> Tag:
		"""
		Resolve an annotated tag to its commit.

		``tag_name`` accepts the full revision grammar. Lightweight tags, and
		anything else that does not resolve to an annotated tag object pointing
		at a commit, are reported as not found.

		Raises:
		    NotFoundError: If any resolution step fails

		"""
		with self.registry.open(name) as handle:
			ref = self.store.resolve_revision(handle, tag_name)
			if ref.kind is not ObjectKind.TAG:
				msg = f"unable to lookup tag {tag_name!r}: not an annotated tag"
				raise NotFoundError(msg)
			commit = self.store.lookup_commit(handle, self.store.tag_target(handle, ref.id))
			return Tag(name=tag_name, commit=commit)

	def list_repository_tags(self, name: str) -> list[str]:
		"""List annotated and lightweight tag names in backend order."""
		with self.registry.open(name) as handle:
			return self.store.tag_names(handle)
