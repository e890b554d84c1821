"""Tests for the repository registry."""

from __future__ import annotations

import threading
from pathlib import Path
from unittest.mock import patch

import pytest

from gituim.repository import (
	InternalError,
	InvalidArgumentError,
	NotFoundError,
	RepositoryExistsError,
	RepositoryRegistry,
)
from tests.helpers import SampleRepository, build_sample_repository


@pytest.mark.git
class TestRepositoryLifecycle:
	"""Test cases for creating, listing and deleting repositories."""

	def test_create_then_list(self, registry: RepositoryRegistry) -> None:
		"""Test that a created repository is listed and reported as bare."""
		created = registry.create_repository("project")

		assert created.name == "project"
		assert created.path == registry.root / "project"
		assert "project" in registry.list_repositories()
		assert registry.get_repository_info("project").is_bare is True

	def test_create_existing_fails(self, registry: RepositoryRegistry) -> None:
		"""Test that creating over an existing repository fails distinguishably."""
		registry.create_repository("project")

		with pytest.raises(RepositoryExistsError) as excinfo:
			registry.create_repository("project")
		assert isinstance(excinfo.value, InvalidArgumentError)

	def test_create_failure_is_internal(self, registry: RepositoryRegistry) -> None:
		"""Test that an I/O failure during initialization is internal."""
		with patch("gituim.repository.store.pygit2.init_repository", side_effect=OSError("read-only")):
			with pytest.raises(InternalError) as excinfo:
				registry.create_repository("project")

		assert excinfo.value.context == "unable to create repository"

	def test_delete_existing(self, registry: RepositoryRegistry) -> None:
		"""Test that deleting an existing repository reports it existed."""
		registry.create_repository("project")

		result = registry.delete_repository("project")

		assert result.existed is True
		assert "project" not in registry.list_repositories()
		assert not (registry.root / "project").exists()

	def test_delete_missing_is_not_an_error(self, registry: RepositoryRegistry) -> None:
		"""Test that deleting a never-created repository is a no-op."""
		assert registry.delete_repository("never-created").existed is False

	def test_delete_failure_is_internal(self, registry: RepositoryRegistry) -> None:
		"""Test that a removal failure is internal."""
		registry.create_repository("project")

		with patch("gituim.repository.registry.shutil.rmtree", side_effect=OSError("busy")):
			with pytest.raises(InternalError) as excinfo:
				registry.delete_repository("project")

		assert excinfo.value.context == "unable to delete repository"
		assert isinstance(excinfo.value.__cause__, OSError)


@pytest.mark.git
class TestListRepositories:
	"""Test cases for scanning the root."""

	def test_empty_root(self, registry: RepositoryRegistry) -> None:
		"""Test that an empty root lists nothing."""
		assert registry.list_repositories() == []

	def test_skips_non_repositories(self, registry: RepositoryRegistry, repository_root: Path) -> None:
		"""Test that files, plain directories and .git are skipped."""
		build_sample_repository(repository_root / "beta")
		build_sample_repository(repository_root / "alpha")
		build_sample_repository(repository_root / ".git")
		(repository_root / "plain").mkdir()
		(repository_root / "README").write_text("not a repository")

		assert registry.list_repositories() == ["alpha", "beta"]

	def test_missing_root_is_internal(self, tmp_path: Path) -> None:
		"""Test that an unreadable root fails as internal."""
		registry = RepositoryRegistry(tmp_path / "does-not-exist")

		with pytest.raises(InternalError):
			registry.list_repositories()


@pytest.mark.unit
class TestNameResolution:
	"""Test cases for name validation."""

	@pytest.mark.parametrize("name", ["", ".", "..", "../etc", "a/b", "a\\b", "/abs", "nul\0byte"])
	def test_rejects_traversal(self, registry: RepositoryRegistry, name: str) -> None:
		"""Test that names able to escape the root are invalid arguments."""
		with pytest.raises(InvalidArgumentError):
			registry.resolve_path(name)

	@pytest.mark.parametrize("name", ["project", "my-repo.git", "with space", "..hidden"])
	def test_accepts_plain_names(self, registry: RepositoryRegistry, name: str) -> None:
		"""Test that plain names resolve to direct children of the root."""
		assert registry.resolve_path(name) == registry.root / name

	def test_invalid_name_rejected_before_filesystem(self, registry: RepositoryRegistry) -> None:
		"""Test that every operation validates names."""
		with pytest.raises(InvalidArgumentError):
			registry.create_repository("../escape")
		with pytest.raises(InvalidArgumentError):
			registry.delete_repository("..")
		with pytest.raises(InvalidArgumentError):
			registry.get_repository_info("a/b")
		assert not (registry.root.parent / "escape").exists()


@pytest.mark.git
class TestRepositoryInfo:
	"""Test cases for repository info."""

	def test_info(self, registry: RepositoryRegistry, sample_repo: SampleRepository) -> None:
		"""Test describing an existing repository."""
		info = registry.get_repository_info(sample_repo.name)

		assert info.name == "sample"
		assert info.path == sample_repo.path
		assert info.is_bare

	def test_info_missing(self, registry: RepositoryRegistry) -> None:
		"""Test that a missing repository is not found."""
		with pytest.raises(NotFoundError):
			registry.get_repository_info("missing")


@pytest.mark.unit
class TestNameLocks:
	"""Test cases for per-name serialization of create and delete."""

	def test_locks_released_after_missing_deletes(self, registry: RepositoryRegistry) -> None:
		"""Test that deleting many never-created names leaves no lock entries behind."""
		for i in range(500):
			assert registry.delete_repository(f"x{i}").existed is False

		assert registry._locks == {}

	def test_locks_released_after_failures(self, registry: RepositoryRegistry) -> None:
		"""Test that lock entries are dropped when the guarded operation raises."""
		registry.create_repository("project")
		with pytest.raises(RepositoryExistsError):
			registry.create_repository("project")

		assert registry._locks == {}

	def test_concurrent_callers_share_one_lock(self, registry: RepositoryRegistry) -> None:
		"""Test that a waiting caller keeps the entry alive until it is done."""
		started = threading.Event()
		release = threading.Event()

		def hold() -> None:
			with registry._exclusive("project"):
				started.set()
				release.wait(timeout=5)

		holder = threading.Thread(target=hold)
		holder.start()
		started.wait(timeout=5)
		waiter = threading.Thread(target=registry.delete_repository, args=("project",))
		waiter.start()

		assert registry._locks["project"][0].locked()
		release.set()
		holder.join(timeout=5)
		waiter.join(timeout=5)

		assert registry._locks == {}
