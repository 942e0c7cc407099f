from __future__ import annotations

from collections.abc import Iterator

import pytest

from boundwire.container import Container
from boundwire.container_context import container_context


@pytest.fixture()
def boundwire_container() -> Container:
    """Create a per-test container.

    The fixture is function-scoped, so bindings are isolated between tests
    unless users override fixture scope explicitly.

    Returns:
        A new ``Container`` instance.

    """
    return Container()


@pytest.fixture()
def boundwire_context(boundwire_container: Container) -> Iterator[Container]:
    """Bind ``boundwire_container`` to ``container_context`` for the duration of a test."""
    container_context.set_current(boundwire_container)
    try:
        yield boundwire_container
    finally:
        container_context.reset()
