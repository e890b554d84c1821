"""Entities returned by the repository layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from pathlib import Path


class EntryType(str, Enum):
	"""Types of tree entries."""

	BLOB = "blob"
	TREE = "tree"
	COMMIT = "commit"


class ObjectKind(str, Enum):
	"""Kinds of objects in an object store."""

	COMMIT = "commit"
	TREE = "tree"
	BLOB = "blob"
	TAG = "tag"


@dataclass(frozen=True)
class ObjectRef:
	"""An object id together with the kind of object it names."""

	id: str
	kind: ObjectKind


@dataclass(frozen=True)
class Repository:
	"""A bare repository under the configured root."""

	name: str
	path: Path
	is_bare: bool


@dataclass(frozen=True)
class DeleteResult:
	"""Outcome of a repository deletion."""

	existed: bool


@dataclass(frozen=True)
class Signature:
	"""Author or committer identity with a timezone-aware timestamp."""

	name: str
	email: str
	when: datetime

	@classmethod
	def from_epoch(cls, name: str, email: str, epoch: int, offset_minutes: int) -> Signature:
		"""Build a signature from epoch seconds and a UTC offset in minutes."""
		tz = timezone(timedelta(minutes=offset_minutes))
		return cls(name=name, email=email, when=datetime.fromtimestamp(epoch, tz=tz))


@dataclass(frozen=True)
class Commit:
	"""
	A commit object.

	``parent_id`` is the first parent only (None for root commits); the full
	ordered list is kept in ``parent_ids``.

	"""

	id: str
	short_id: str
	tree_id: str
	parent_id: str | None
	message: bytes
	author: Signature
	committer: Signature
	parent_ids: tuple[str, ...] = field(default=())


@dataclass(frozen=True)
class TreeEntry:
	"""One entry of a recursive tree walk."""

	id: str
	name: str
	type: EntryType
	path: str = ""


@dataclass(frozen=True)
class Tree:
	"""A tree with every descendant entry in walk order."""

	id: str
	entries: tuple[TreeEntry, ...]


@dataclass(frozen=True)
class Blob:
	"""A blob with its raw contents."""

	id: str
	short_id: str
	is_binary: bool
	contents: bytes


@dataclass(frozen=True)
class Tag:
	"""An annotated tag resolved to its commit."""

	name: str
	commit: Commit


@dataclass(frozen=True)
class Branch:
	"""A local branch resolved to its commit, tree and first parent."""

	name: str
	commit_id: str
	tree_id: str
	parent_id: str | None
