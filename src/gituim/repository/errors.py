"""
Error taxonomy for repository operations.

Every failure leaving the repository layer is one of three kinds: the
repository, ref or object is absent (``NotFoundError``), the caller supplied a
malformed identifier (``InvalidArgumentError``), or anything else went wrong
(``InternalError``). Backend exceptions are classified by their type, never by
their message text.

"""

from __future__ import annotations

import contextlib
import logging
from enum import Enum
from typing import TYPE_CHECKING, NoReturn

if TYPE_CHECKING:
	from collections.abc import Iterator

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
	"""Kinds of repository failures."""

	NOT_FOUND = "not_found"
	INVALID_ARGUMENT = "invalid_argument"
	INTERNAL = "internal"


class RepositoryError(Exception):
	"""Base exception for repository-layer failures."""

	kind: ErrorKind = ErrorKind.INTERNAL

	def __init__(self, context: str) -> None:
		"""
		Initialize the error.

		Args:
		    context: Human-readable description of the step that failed

		"""
		super().__init__(context)
		self.context = context

	def __str__(self) -> str:
		"""Return the context string followed by the chained cause, if any."""
		if self.__cause__ is not None and not isinstance(self.__cause__, RepositoryError):
			return f"{self.context}: {self.__cause__}"
		return self.context


class NotFoundError(RepositoryError):
	"""A repository, ref or object does not exist."""

	kind = ErrorKind.NOT_FOUND


class InvalidArgumentError(RepositoryError):
	"""A caller-supplied identifier is malformed."""

	kind = ErrorKind.INVALID_ARGUMENT


class RepositoryExistsError(InvalidArgumentError):
	"""Something already exists where a new repository was requested."""


class InternalError(RepositoryError):
	"""I/O failure, corruption or any unclassified backend fault."""

	kind = ErrorKind.INTERNAL


def classify(exc: BaseException) -> ErrorKind:
	"""
	Classify an exception into an error kind.

	libgit2 reports GIT_ENOTFOUND as ``KeyError`` and invalid input, invalid
	specs and ambiguous short ids as ``ValueError`` subclasses. Everything
	else, ``pygit2.GitError`` and ``OSError`` included, is internal.

	Args:
	    exc: The exception to classify

	Returns:
	    The matching ErrorKind

	"""
	if isinstance(exc, RepositoryError):
		return exc.kind
	if isinstance(exc, KeyError):
		return ErrorKind.NOT_FOUND
	if isinstance(exc, ValueError):
		return ErrorKind.INVALID_ARGUMENT
	return ErrorKind.INTERNAL


_ERROR_TYPES: dict[ErrorKind, type[RepositoryError]] = {
	ErrorKind.NOT_FOUND: NotFoundError,
	ErrorKind.INVALID_ARGUMENT: InvalidArgumentError,
	ErrorKind.INTERNAL: InternalError,
}


def translate_error(exc: BaseException, context: str) -> RepositoryError:
	"""
	Translate a backend exception into a RepositoryError.

	Already translated errors are returned unchanged so the innermost context
	is preserved.

	Args:
	    exc: The backend exception
	    context: Description of the step that failed, e.g. "unable to lookup commit"

	Returns:
	    A RepositoryError whose ``__cause__`` is ``exc``

	"""
	if isinstance(exc, RepositoryError):
		return exc
	error = _ERROR_TYPES[classify(exc)](context)
	error.__cause__ = exc
	logger.debug("%s (%s): %r", context, error.kind.value, exc)
	return error


def raise_translated(exc: BaseException, context: str) -> NoReturn:
	"""Raise the translated form of ``exc``."""
	error = translate_error(exc, context)
	if error is exc:
		raise error
	raise error from exc


@contextlib.contextmanager
def translating(context: str) -> Iterator[None]:
	"""
	Translate any exception raised in the block.

	Args:
	    context: Description of the step performed by the block

	"""
	try:
		yield
	except RepositoryError:
		raise
	except Exception as e:  # noqa: BLE001
		raise_translated(e, context)
