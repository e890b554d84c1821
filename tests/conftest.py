"""Global test fixtures: repository roots and sample repositories built with pygit2."""

from __future__ import annotations

from pathlib import Path

import pytest

from gituim.repository import RepositoryRegistry, RepositoryService
from tests.helpers import SampleRepository, build_sample_repository


@pytest.fixture
def repository_root(tmp_path: Path) -> Path:
	"""An empty repository root directory."""
	root = tmp_path / "repositories"
	root.mkdir()
	return root


@pytest.fixture
def registry(repository_root: Path) -> RepositoryRegistry:
	"""A registry over the temporary root."""
	return RepositoryRegistry(repository_root)


@pytest.fixture
def service(registry: RepositoryRegistry) -> RepositoryService:
	"""A lookup service over the temporary root."""
	return RepositoryService(registry)


@pytest.fixture
def sample_repo(repository_root: Path) -> SampleRepository:
	"""The sample repository, created under the temporary root as ``sample``."""
	return build_sample_repository(repository_root / "sample")
