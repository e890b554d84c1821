"""
API request and response models.

Ids are lowercase hex strings, commit messages and blob contents are base64
encoded, and timestamps are RFC3339 strings.

"""

from __future__ import annotations

import base64

from pydantic import BaseModel, Field

from gituim.repository.models import Blob, Branch, Commit, Signature, Tag, Tree


def _b64(data: bytes) -> str:
	return base64.b64encode(data).decode("ascii")


class ErrorResponse(BaseModel):
	"""Model for standardized error responses."""

	error: str
	detail: str | None = None


class CreateRepositoryRequest(BaseModel):
	"""Body of a repository creation request."""

	name: str = ""


class RepositoryModel(BaseModel):
	"""Repository information."""

	name: str
	bare: bool


class RepositoryListModel(BaseModel):
	"""List of repository names."""

	repositories: list[str]


class BranchModel(BaseModel):
	"""A branch resolved to commit, tree and first parent."""

	branch: str
	commit: str
	tree: str
	parent: str | None

	@classmethod
	def build(cls, branch: Branch) -> BranchModel:
		"""Build the model from a Branch."""
		return cls(branch=branch.name, commit=branch.commit_id, tree=branch.tree_id, parent=branch.parent_id)


class BranchListModel(BaseModel):
	"""List of branches."""

	branches: list[BranchModel]


class SignatureModel(BaseModel):
	"""Author or committer."""

	name: str
	email: str
	when: str = Field(..., description="RFC3339 timestamp")

	@classmethod
	def build(cls, signature: Signature) -> SignatureModel:
		"""Build the model from a Signature."""
		return cls(name=signature.name, email=signature.email, when=signature.when.isoformat())


class CommitModel(BaseModel):
	"""A commit."""

	commit: str
	short_id: str
	tree: str
	parent: str | None
	message: str = Field(..., description="Base64 encoded raw message")
	author: SignatureModel
	committer: SignatureModel

	@classmethod
	def build(cls, commit: Commit) -> CommitModel:
		"""Build the model from a Commit."""
		return cls(
			commit=commit.id,
			short_id=commit.short_id,
			tree=commit.tree_id,
			parent=commit.parent_id,
			message=_b64(commit.message),
			author=SignatureModel.build(commit.author),
			committer=SignatureModel.build(commit.committer),
		)


class TreeEntryModel(BaseModel):
	"""One tree entry."""

	oid: str
	file_name: str
	type: str


class TreeModel(BaseModel):
	"""A tree and all of its descendant entries."""

	tree: str
	entries: list[TreeEntryModel]

	@classmethod
	def build(cls, tree: Tree) -> TreeModel:
		"""Build the model from a Tree."""
		return cls(
			tree=tree.id,
			entries=[TreeEntryModel(oid=e.id, file_name=e.name, type=e.type.value) for e in tree.entries],
		)


class BlobModel(BaseModel):
	"""A blob."""

	oid: str
	short_id: str
	is_binary: bool
	contents: str = Field(..., description="Base64 encoded contents")

	@classmethod
	def build(cls, blob: Blob) -> BlobModel:
		"""Build the model from a Blob."""
		return cls(oid=blob.id, short_id=blob.short_id, is_binary=blob.is_binary, contents=_b64(blob.contents))


class TagListModel(BaseModel):
	"""List of tag names."""

	tags: list[str]


class TagModel(BaseModel):
	"""An annotated tag and its commit."""

	tag: str
	commit: CommitModel

	@classmethod
	def build(cls, tag: Tag) -> TagModel:
		"""Build the model from a Tag."""
		return cls(tag=tag.name, commit=CommitModel.build(tag.commit))
