from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from boundwire.exceptions import BindingError
from boundwire.markers import Token
from boundwire.reflection import invoke, is_instantiable

if TYPE_CHECKING:
    from boundwire.container import Container

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Binding:
    """Registered producer for an identifier."""

    concrete: Any
    """Factory callable, or another identifier to resolve in its place."""
    shared: bool = False


def class_binding_closure(abstract: Any, concrete: type) -> Callable[..., Any]:
    """Wrap a class so that it is built directly, or resolved when it differs from ``abstract``."""

    def closure(
        container: Container,
        parameters: Mapping[str, Any] | Sequence[Any] | None = None,
    ) -> Any:
        if abstract == concrete:
            return container.build(concrete)
        return container.get_resolver().resolve(concrete, parameters, raise_events=False)

    closure.__qualname__ = f"class_binding_closure.<{concrete.__name__}>"
    return closure


class Binder:
    """Identifier to producer registrations and rebind notifications."""

    def __init__(self, container: Container) -> None:
        self._container = container
        self._bindings: dict[Any, Binding] = {}
        self._rebound_callbacks: dict[Any, list[Callable[..., Any]]] = {}
        self._token_implementers: dict[Token, list[type]] = {}

    def has_binding(self, abstract: Any) -> bool:
        return abstract in self._bindings

    def get_binding(self, abstract: Any) -> Binding | None:
        return self._bindings.get(abstract)

    def get_bindings(self) -> dict[Any, Binding]:
        return self._bindings

    def bound(self, abstract: Any) -> bool:
        """Determine if ``abstract`` has a binding, a shared instance or is an alias."""
        return (
            abstract in self._bindings
            or self._container.get_instance_sharer().has_shared_instance(abstract)
            or self._container.is_alias(abstract)
        )

    def bind_if(self, abstract: Any, concrete: Any = None, *, shared: bool = False) -> None:
        if not self.bound(abstract):
            self.bind(abstract, concrete, shared=shared)

    def bind(self, abstract: Any, concrete: Any = None, *, shared: bool = False) -> None:
        """Register a binding with the container.

        Args:
            abstract: Identifier to register.
            concrete: Class, factory callable or another identifier. Defaults to
                ``abstract`` itself when it is an instantiable class.
            shared: Cache the first resolved value and hand it out afterwards.

        Raises:
            BindingError: If ``concrete`` is omitted and ``abstract`` is not an
                instantiable class.

        """
        self._drop_stale_instances(abstract)

        if concrete is None:
            if not is_instantiable(abstract):
                msg = "Cannot bind a non-instantiable to itself."
                raise BindingError(msg)
            concrete = abstract

        if isinstance(concrete, type):
            if isinstance(abstract, Token):
                self._token_implementers.setdefault(abstract, []).append(concrete)
            concrete = class_binding_closure(abstract, concrete)

        self._bindings[abstract] = Binding(concrete=concrete, shared=shared)
        logger.debug("Bound %r (shared=%s)", abstract, shared)

        if self._container.resolved(abstract):
            self.rebound(abstract)

    def rebinding(self, abstract: Any, callback: Callable[..., Any]) -> Any | None:
        """Register ``callback`` for rebind events of ``abstract``.

        Returns:
            The current value for ``abstract`` when it is already bound.

        """
        abstract = self._container.get_alias(abstract)
        self._rebound_callbacks.setdefault(abstract, []).append(callback)

        if self.bound(abstract):
            return self._container.make(abstract)
        return None

    def rebound(self, abstract: Any) -> None:
        """Resolve ``abstract`` afresh and hand it to every rebinding callback."""
        instance = self._container.make(abstract)
        callbacks = self._rebound_callbacks.get(abstract, [])
        logger.debug("Rebound %r, notifying %d callback(s)", abstract, len(callbacks))

        for callback in callbacks:
            invoke(callback, self._container, instance)

    def token_implementers(self, token: Any) -> list[type]:
        if not isinstance(token, Token):
            return []
        return self._token_implementers.get(token, [])

    def forget_binding(self, abstract: Any) -> None:
        self._bindings.pop(abstract, None)

    def forget_bindings(self) -> None:
        self._bindings.clear()
        self._token_implementers.clear()

    def _drop_stale_instances(self, abstract: Any) -> None:
        self._container.forget_instance(abstract)
        self._container.get_aliaser().forget_alias(abstract)
