"""Shared pytest fixtures for boundwire tests."""

import pytest

from boundwire.container import Container
from boundwire.reflection import DependenciesExtractor


@pytest.fixture()
def container() -> Container:
    """Default container."""
    return Container()


@pytest.fixture()
def container_without_shared_bases() -> Container:
    """Container that never treats a class as shared unless it is bound so."""
    return Container(shared_bases=())


@pytest.fixture()
def dependencies_extractor() -> DependenciesExtractor:
    """DependenciesExtractor instance."""
    return DependenciesExtractor()
