from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from typing_extensions import Self

if TYPE_CHECKING:
    from boundwire.container import Container


class TaggedServices:
    """Single-pass lazy sequence of the services registered under a tag.

    Each step resolves the next identifier through ``Container.make``, so
    nothing is built until iteration reaches it. Once exhausted, iterating the
    same handle yields nothing; call ``Container.tagged`` again for a new pass.
    ``len()`` reports the number of tagged identifiers without building them.
    """

    def __init__(self, make: Callable[[Any], Any], abstracts: list[Any]) -> None:
        self._length = len(abstracts)
        self._iterator = (make(abstract) for abstract in abstracts)

    def __iter__(self) -> Self:
        return self

    def __next__(self) -> Any:
        return next(self._iterator)

    def __len__(self) -> int:
        return self._length

    def __repr__(self) -> str:
        return f"TaggedServices(length={self._length})"


class Tagger:
    """Named groups of identifiers."""

    def __init__(self, container: Container) -> None:
        self._container = container
        self._tags: dict[str, list[Any]] = {}

    def tag(self, abstracts: Any, tags: Any) -> None:
        """Assign every identifier in ``abstracts`` to every tag in ``tags``.

        Both arguments accept a single item or a list of items.
        """
        for tag in _wrap(tags):
            bucket = self._tags.setdefault(tag, [])
            bucket.extend(_wrap(abstracts))

    def tagged(self, tag: str) -> TaggedServices:
        return TaggedServices(self._container.make, list(self._tags.get(tag, ())))


def _wrap(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]
