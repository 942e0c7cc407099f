from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from boundwire.container import Container

T = TypeVar("T")


class InstanceSharer:
    """Keyed cache of already constructed shared values."""

    def __init__(self, container: Container) -> None:
        self._container = container
        self._instances: dict[Any, Any] = {}

    def instance(self, abstract: Any, instance: T) -> T:
        """Register an existing value as shared under ``abstract``.

        If ``abstract`` was already bound, the rebound callbacks fire so that
        consumers resolved earlier can pick up the new value.
        """
        aliaser = self._container.get_aliaser()
        aliaser.remove_abstract_alias(abstract)

        is_bound = self._container.bound(abstract)

        aliaser.forget_alias(abstract)

        self._instances[abstract] = instance

        if is_bound:
            self._container.rebound(abstract)

        return instance

    def has_shared_instance(self, abstract: Any) -> bool:
        return abstract in self._instances

    def get_shared_instance(self, abstract: Any) -> Any:
        return self._instances[abstract]

    def add_shared_instance(self, abstract: Any, instance: Any) -> None:
        self._instances[abstract] = instance

    def forget_instance(self, abstract: Any) -> None:
        self._instances.pop(abstract, None)

    def forget_instances(self) -> None:
        self._instances.clear()
