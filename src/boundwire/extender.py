from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from boundwire.reflection import invoke

if TYPE_CHECKING:
    from boundwire.container import Container


class Extender:
    """Ordered post-construction decoration chains keyed by identifier."""

    def __init__(self, container: Container) -> None:
        self._container = container
        self._extenders: dict[Any, list[Callable[..., Any]]] = {}

    def extend(self, abstract: Any, closure: Callable[..., Any]) -> None:
        """Register ``closure`` to decorate every value resolved for ``abstract``.

        An already cached shared value is decorated right away and replaced in
        the cache. Otherwise the closure joins the chain, and if ``abstract``
        was resolved before, the rebound callbacks fire.
        """
        abstract = self._container.get_alias(abstract)
        sharer = self._container.get_instance_sharer()

        if sharer.has_shared_instance(abstract):
            decorated = invoke(closure, sharer.get_shared_instance(abstract), self._container)
            sharer.add_shared_instance(abstract, decorated)
            self._container.rebound(abstract)
            return

        self._extenders.setdefault(abstract, []).append(closure)

        if self._container.resolved(abstract):
            self._container.rebound(abstract)

    def apply(self, abstract: Any, value: Any) -> Any:
        """Run the chain for ``abstract`` over ``value`` in registration order."""
        for extender in self.get_extenders(abstract):
            value = invoke(extender, value, self._container)
        return value

    def has_extenders(self, abstract: Any) -> bool:
        return abstract in self._extenders

    def get_extenders(self, abstract: Any) -> list[Callable[..., Any]]:
        return list(self._extenders.get(self._container.get_alias(abstract), ()))

    def forget_extenders(self, abstract: Any) -> None:
        self._extenders.pop(self._container.get_alias(abstract), None)
