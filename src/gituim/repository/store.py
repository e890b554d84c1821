"""
Object store adapter.

The lookup service talks to git through the ``ObjectStore`` protocol, which
deals only in hex ids and the entities of ``gituim.repository.models``.
Handles are opaque to callers. ``Pygit2ObjectStore`` implements the protocol
on top of libgit2 via pygit2 and is the only place where backend exceptions
are caught and classified.

"""

from __future__ import annotations

import contextlib
import logging
import string
from typing import TYPE_CHECKING, Any, Protocol

import pygit2
from pygit2 import GitError, Oid, Repository
from pygit2.enums import BranchType, RepositoryOpenFlag

from gituim.repository.errors import InternalError, InvalidArgumentError, NotFoundError, raise_translated, translating
from gituim.repository.models import Blob, Commit, EntryType, ObjectKind, ObjectRef, Signature, TreeEntry

if TYPE_CHECKING:
	from collections.abc import Iterator
	from pathlib import Path

	from pygit2 import Object

logger = logging.getLogger(__name__)

OPEN_FLAGS = RepositoryOpenFlag.BARE | RepositoryOpenFlag.NO_SEARCH
OID_HEX_LENGTH = pygit2.GIT_OID_HEXSZ
TAG_REF_PREFIX = "refs/tags/"
_HEX_DIGITS = frozenset(string.hexdigits)


def validate_object_id(id_hex: str, length: int = OID_HEX_LENGTH) -> str:
	"""
	Check that ``id_hex`` is a full-width hexadecimal object id.

	Returns:
	    The id in lowercase

	Raises:
	    InvalidArgumentError: On wrong length or non-hex characters

	"""
	if len(id_hex) != length or not _HEX_DIGITS.issuperset(id_hex):
		msg = f"unable to parse oid {id_hex!r}"
		raise InvalidArgumentError(msg)
	return id_hex.lower()


class ObjectStore(Protocol):
	"""Capabilities the lookup service needs from a git backend."""

	def open(self, path: Path) -> contextlib.AbstractContextManager[Any]:
		"""Open the store found exactly at ``path``, yielding an opaque handle."""
		...

	def init(self, path: Path) -> None:
		"""Initialize a new bare store at ``path``."""
		...

	def parse_id(self, id_hex: str) -> str:
		"""Validate a full-width hex object id and return it normalized."""
		...

	def is_bare(self, handle: Any) -> bool:
		"""Whether the opened store is bare."""
		...

	def lookup_commit(self, handle: Any, commit_id: str) -> Commit:
		"""Look up a commit."""
		...

	def lookup_blob(self, handle: Any, blob_id: str) -> Blob:
		"""Look up a blob."""
		...

	def walk(self, handle: Any, tree_id: str) -> Iterator[TreeEntry]:
		"""Look up a tree and walk it recursively."""
		...

	def resolve_revision(self, handle: Any, spec: str) -> ObjectRef:
		"""Resolve a revision expression to the object it names, without peeling."""
		...

	def tag_target(self, handle: Any, tag_id: str) -> str:
		"""Return the id of the object an annotated tag points at."""
		...

	def local_branches(self, handle: Any) -> list[str]:
		"""List local branch names."""
		...

	def branch_target(self, handle: Any, name: str) -> str:
		"""Return the id a local branch points at."""
		...

	def tag_names(self, handle: Any) -> list[str]:
		"""List tag names, annotated and lightweight."""
		...


def _signature(signature: pygit2.Signature) -> Signature:
	return Signature.from_epoch(signature.name, signature.email, signature.time, signature.offset)


class Pygit2ObjectStore:
	"""ObjectStore backed by pygit2."""

	@contextlib.contextmanager
	def open(self, path: Path) -> Iterator[Repository]:
		"""
		Open a repository as bare without searching parent directories.

		The handle is freed when the block exits, whatever the outcome.

		Args:
		    path: Exact location of the store

		Yields:
		    The opened pygit2 Repository

		Raises:
		    NotFoundError: If no store exists exactly at ``path``
		    InternalError: If the path cannot be accessed

		"""
		try:
			if not path.is_dir():
				msg = f"unable to open repository at {path}"
				raise NotFoundError(msg)
			handle = Repository(str(path), OPEN_FLAGS)
		except (GitError, KeyError) as e:
			msg = f"unable to open repository at {path}"
			raise NotFoundError(msg) from e
		except OSError as e:
			msg = f"unable to access repository at {path}"
			raise InternalError(msg) from e

		try:
			yield handle
		finally:
			handle.free()

	def init(self, path: Path) -> None:
		"""
		Initialize a bare repository.

		Args:
		    path: Location of the new store

		Raises:
		    InternalError: On any I/O or backend failure

		"""
		try:
			handle = pygit2.init_repository(str(path), bare=True)
		except (GitError, OSError, ValueError) as e:
			msg = "unable to create repository"
			raise InternalError(msg) from e
		handle.free()

	def parse_id(self, id_hex: str) -> str:
		"""
		Parse a full-width hexadecimal object id.

		Args:
		    id_hex: Hex string as supplied by the caller

		Returns:
		    The id in lowercase

		Raises:
		    InvalidArgumentError: On wrong length or non-hex characters

		"""
		return validate_object_id(id_hex)

	def is_bare(self, handle: Repository) -> bool:
		"""Whether the opened repository is bare."""
		with translating("unable to read repository info"):
			return handle.is_bare

	def lookup_object(self, handle: Repository, object_id: str | Oid, expected_kind: ObjectKind) -> Object:
		"""
		Look up an object and check its kind.

		Args:
		    handle: Open repository
		    object_id: Hex id or Oid
		    expected_kind: Kind of object the caller requires

		Returns:
		    The pygit2 object

		Raises:
		    InvalidArgumentError: If a hex id is malformed
		    NotFoundError: If the object is absent or of a different kind
		    InternalError: On backend failure

		"""
		oid = object_id if isinstance(object_id, Oid) else Oid(hex=self.parse_id(object_id))
		kind = expected_kind.value
		try:
			obj = handle[oid]
		except KeyError as e:
			msg = f"unable to lookup {kind}"
			raise NotFoundError(msg) from e
		except (GitError, OSError) as e:
			raise_translated(e, f"unable to lookup {kind}")

		if obj.type_str != kind:
			msg = f"unable to lookup {kind}: object {oid} is a {obj.type_str}"
			raise NotFoundError(msg)
		return obj

	def lookup_commit(self, handle: Repository, commit_id: str) -> Commit:
		"""
		Look up a commit and assemble it.

		Raises:
		    NotFoundError: If the commit is absent

		"""
		commit = self.lookup_object(handle, commit_id, ObjectKind.COMMIT)
		with translating("unable to read commit"):
			parent_ids = tuple(str(oid) for oid in commit.parent_ids)
			return Commit(
				id=str(commit.id),
				short_id=commit.short_id,
				tree_id=str(commit.tree_id),
				parent_id=parent_ids[0] if parent_ids else None,
				message=commit.raw_message,
				author=_signature(commit.author),
				committer=_signature(commit.committer),
				parent_ids=parent_ids,
			)

	def lookup_blob(self, handle: Repository, blob_id: str) -> Blob:
		"""
		Look up a blob with its contents and binary heuristic.

		Raises:
		    NotFoundError: If the blob is absent

		"""
		blob = self.lookup_object(handle, blob_id, ObjectKind.BLOB)
		with translating("unable to read blob"):
			return Blob(id=str(blob.id), short_id=blob.short_id, is_binary=blob.is_binary, contents=blob.data)

	def walk(self, handle: Repository, tree_id: str) -> Iterator[TreeEntry]:
		"""
		Look up a tree and walk it in pre-order, descending into sub-trees.

		The tree itself is looked up immediately; its entries are produced
		lazily. Submodule entries are yielded but not descended into.

		Args:
		    handle: Open repository
		    tree_id: Hex id of the tree

		Returns:
		    Iterator over every descendant entry; ``path`` is the parent path
		    relative to the walk root, with a trailing slash

		Raises:
		    NotFoundError: If the tree is absent

		"""
		return self._walk(handle, self.lookup_object(handle, tree_id, ObjectKind.TREE), "")

	def _walk(self, handle: Repository, tree: pygit2.Tree, path: str) -> Iterator[TreeEntry]:
		for entry in tree:
			yield TreeEntry(id=str(entry.id), name=entry.name, type=EntryType(entry.type_str), path=path)
			if entry.type_str == "tree":
				subtree = self.lookup_object(handle, entry.id, ObjectKind.TREE)
				yield from self._walk(handle, subtree, f"{path}{entry.name}/")

	def resolve_revision(self, handle: Repository, spec: str) -> ObjectRef:
		"""
		Resolve a revision expression without peeling it.

		Unknown and malformed expressions are both reported as not found.

		Args:
		    handle: Open repository
		    spec: Branch, tag, partial id or any other revision expression

		Returns:
		    Id and kind of the object the expression names

		Raises:
		    NotFoundError: If the expression resolves to nothing

		"""
		try:
			obj = handle.revparse_single(spec)
		except (KeyError, ValueError) as e:
			msg = f"unable to rev parse {spec!r}"
			raise NotFoundError(msg) from e
		except (GitError, OSError) as e:
			raise_translated(e, f"unable to rev parse {spec!r}")
		return ObjectRef(id=str(obj.id), kind=ObjectKind(obj.type_str))

	def tag_target(self, handle: Repository, tag_id: str) -> str:
		"""
		Return the id an annotated tag object points at.

		Raises:
		    NotFoundError: If ``tag_id`` is not an annotated tag

		"""
		tag = self.lookup_object(handle, tag_id, ObjectKind.TAG)
		return str(tag.target)

	def local_branches(self, handle: Repository) -> list[str]:
		"""List local branch names in backend order."""
		try:
			return list(handle.branches.local)
		except (GitError, OSError) as e:
			raise_translated(e, "unable to create branch iterator")

	def branch_target(self, handle: Repository, name: str) -> str:
		"""
		Resolve a local branch, following symbolic refs, to the id it points at.

		Args:
		    handle: Open repository
		    name: Short branch name, e.g. ``main``

		Raises:
		    NotFoundError: If no such local branch exists, the name is invalid
		        or the branch does not resolve to an object

		"""
		msg = f"unable to lookup branch {name!r}"
		try:
			branch = handle.lookup_branch(name, BranchType.LOCAL)
		except (KeyError, ValueError) as e:
			raise NotFoundError(msg) from e
		except (GitError, OSError) as e:
			raise_translated(e, msg)
		if branch is None:
			raise NotFoundError(msg)

		with translating("unable to resolve branch target"):
			target = branch.resolve().target
		if not isinstance(target, Oid):
			raise NotFoundError(msg)
		return str(target)

	def tag_names(self, handle: Repository) -> list[str]:
		"""List tag names in backend order."""
		try:
			references = handle.listall_references()
		except (GitError, OSError) as e:
			raise_translated(e, "unable to list tags")
		return [ref.removeprefix(TAG_REF_PREFIX) for ref in references if ref.startswith(TAG_REF_PREFIX)]
