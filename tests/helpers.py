"""Helpers for building git repositories and in-memory object stores in tests."""

from __future__ import annotations

import contextlib
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

import pygit2
from pygit2.enums import FileMode, ObjectType

from gituim.repository.errors import NotFoundError
from gituim.repository.models import Blob, Commit, ObjectKind, ObjectRef, TreeEntry
from gituim.repository.store import validate_object_id

AUTHOR = pygit2.Signature("Alice Author", "alice@example.com", 1_700_000_000, 60)
COMMITTER = pygit2.Signature("Carol Committer", "carol@example.com", 1_700_000_600, -300)

TEXT_A = b"hello from a\n"
TEXT_B = b"hello from b\n"
BINARY = b"\x00\x01\x02\xffbinary\x00payload"
ROOT_MESSAGE = "Initial commit\n\nWith a body.\n"


@dataclass(frozen=True)
class SampleRepository:
	"""Ids of the objects in the sample repository."""

	name: str
	path: Path
	root_commit: str
	second_commit: str
	merge_commit: str
	tree: str
	subtree: str
	blob_a: str
	blob_b: str
	blob_binary: str


def build_sample_repository(path: Path) -> SampleRepository:
	"""
	Create a bare repository with branches, tags and a nested tree.

	Layout of the root commit's tree::

	    a.txt
	    data.bin
	    sub/
	        b.txt

	Branches: ``main`` (root commit), ``develop`` (second commit, child of
	the root) and ``merge`` (merge of develop and main). Tags: ``v1``
	(annotated, root commit), ``light`` (lightweight, root commit) and
	``tree-tag`` (annotated, pointing at a tree).
	"""
	repo = pygit2.init_repository(str(path), bare=True)

	blob_a = repo.create_blob(TEXT_A)
	blob_b = repo.create_blob(TEXT_B)
	blob_binary = repo.create_blob(BINARY)

	sub_builder = repo.TreeBuilder()
	sub_builder.insert("b.txt", blob_b, FileMode.BLOB)
	subtree = sub_builder.write()

	builder = repo.TreeBuilder()
	builder.insert("a.txt", blob_a, FileMode.BLOB)
	builder.insert("data.bin", blob_binary, FileMode.BLOB)
	builder.insert("sub", subtree, FileMode.TREE)
	tree = builder.write()

	root_commit = repo.create_commit("refs/heads/main", AUTHOR, COMMITTER, ROOT_MESSAGE, tree, [])
	second_commit = repo.create_commit("refs/heads/develop", AUTHOR, COMMITTER, "Second commit\n", tree, [root_commit])
	merge_commit = repo.create_commit(
		"refs/heads/merge", AUTHOR, COMMITTER, "Merge main\n", tree, [second_commit, root_commit]
	)

	repo.create_tag("v1", root_commit, ObjectType.COMMIT, AUTHOR, "Release v1\n")
	repo.create_reference("refs/tags/light", root_commit)
	repo.create_tag("tree-tag", tree, ObjectType.TREE, AUTHOR, "Tagged tree\n")
	repo.free()

	return SampleRepository(
		name=path.name,
		path=path,
		root_commit=str(root_commit),
		second_commit=str(second_commit),
		merge_commit=str(merge_commit),
		tree=str(tree),
		subtree=str(subtree),
		blob_a=str(blob_a),
		blob_b=str(blob_b),
		blob_binary=str(blob_binary),
	)


@dataclass
class MemoryRepository:
	"""Contents of one repository held by ``InMemoryObjectStore``."""

	commits: dict[str, Commit] = field(default_factory=dict)
	trees: dict[str, tuple[TreeEntry, ...]] = field(default_factory=dict)
	blobs: dict[str, Blob] = field(default_factory=dict)
	branches: dict[str, str] = field(default_factory=dict)
	# tag object id -> (tag name, target id)
	annotated_tags: dict[str, tuple[str, str]] = field(default_factory=dict)
	lightweight_tags: dict[str, str] = field(default_factory=dict)
	bare: bool = True


class InMemoryObjectStore:
	"""ObjectStore over plain dictionaries, keyed by the last path component."""

	def __init__(self) -> None:
		self.repositories: dict[str, MemoryRepository] = {}
		self.open_handles = 0
		self.opened = 0

	@contextlib.contextmanager
	def open(self, path: Path) -> Iterator[MemoryRepository]:
		try:
			repository = self.repositories[path.name]
		except KeyError as e:
			msg = f"unable to open repository at {path}"
			raise NotFoundError(msg) from e
		self.opened += 1
		self.open_handles += 1
		try:
			yield repository
		finally:
			self.open_handles -= 1

	def init(self, path: Path) -> None:
		self.repositories[path.name] = MemoryRepository()

	def parse_id(self, id_hex: str) -> str:
		return validate_object_id(id_hex)

	def is_bare(self, handle: MemoryRepository) -> bool:
		return handle.bare

	@staticmethod
	def _get(objects: dict, object_id: str, kind: str):  # noqa: ANN205
		try:
			return objects[object_id]
		except KeyError as e:
			msg = f"unable to lookup {kind}"
			raise NotFoundError(msg) from e

	def lookup_commit(self, handle: MemoryRepository, commit_id: str) -> Commit:
		return self._get(handle.commits, commit_id, "commit")

	def lookup_blob(self, handle: MemoryRepository, blob_id: str) -> Blob:
		return self._get(handle.blobs, blob_id, "blob")

	def walk(self, handle: MemoryRepository, tree_id: str) -> Iterator[TreeEntry]:
		return iter(self._get(handle.trees, tree_id, "tree"))

	def resolve_revision(self, handle: MemoryRepository, spec: str) -> ObjectRef:
		for tag_id, (name, _) in handle.annotated_tags.items():
			if name == spec:
				return ObjectRef(tag_id, ObjectKind.TAG)
		if spec in handle.lightweight_tags:
			return ObjectRef(handle.lightweight_tags[spec], ObjectKind.COMMIT)
		if spec in handle.branches:
			return ObjectRef(handle.branches[spec], ObjectKind.COMMIT)
		msg = f"unable to rev parse {spec!r}"
		raise NotFoundError(msg)

	def tag_target(self, handle: MemoryRepository, tag_id: str) -> str:
		return self._get(handle.annotated_tags, tag_id, "tag")[1]

	def local_branches(self, handle: MemoryRepository) -> list[str]:
		return list(handle.branches)

	def branch_target(self, handle: MemoryRepository, name: str) -> str:
		return self._get(handle.branches, name, f"branch {name!r}")

	def tag_names(self, handle: MemoryRepository) -> list[str]:
		return [name for name, _ in handle.annotated_tags.values()] + list(handle.lightweight_tags)
