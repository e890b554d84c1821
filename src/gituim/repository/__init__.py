"""Repository abstraction layer: registry, object store adapter and lookups."""

from gituim.repository.errors import (
	ErrorKind,
	InternalError,
	InvalidArgumentError,
	NotFoundError,
	RepositoryError,
	RepositoryExistsError,
	translate_error,
)
from gituim.repository.models import (
	Blob,
	Branch,
	Commit,
	DeleteResult,
	ObjectKind,
	ObjectRef,
	Repository,
	Signature,
	Tag,
	Tree,
	TreeEntry,
)
from gituim.repository.registry import RepositoryRegistry
from gituim.repository.service import RepositoryService
from gituim.repository.store import ObjectStore, Pygit2ObjectStore

__all__ = [
	"Blob",
	"Branch",
	"Commit",
	"DeleteResult",
	"ErrorKind",
	"InternalError",
	"InvalidArgumentError",
	"NotFoundError",
	"ObjectKind",
	"ObjectRef",
	"ObjectStore",
	"Pygit2ObjectStore",
	"Repository",
	"RepositoryError",
	"RepositoryExistsError",
	"RepositoryRegistry",
	"RepositoryService",
	"Signature",
	"Tag",
	"Tree",
	"TreeEntry",
	"translate_error",
]
