from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from boundwire.reflection import invoke, is_factory, satisfies

if TYPE_CHECKING:
    from boundwire.builder import Parameters
    from boundwire.container import Container

logger = logging.getLogger(__name__)


class Resolver:
    """Orchestrate a single ``resolve`` call and the resolving callbacks.

    One call walks through these steps: alias resolution, the shared cache
    check, concrete lookup, build or delegation, the extender chain, caching,
    and finally the resolving callbacks.

    Per-call parameters or a contextual binding for the identifier bypass the
    shared cache for both read and write, so explicit arguments always produce
    a fresh value even for singletons.
    """

    def __init__(self, container: Container) -> None:
        self._container = container
        self._resolved: set[Any] = set()

        self._global_resolving_callbacks: list[Callable[..., Any]] = []
        self._global_after_resolving_callbacks: list[Callable[..., Any]] = []
        self._resolving_callbacks: dict[Any, list[Callable[..., Any]]] = {}
        self._after_resolving_callbacks: dict[Any, list[Callable[..., Any]]] = {}

    def resolve(
        self,
        abstract: Any,
        parameters: Parameters | None = None,
        *,
        raise_events: bool = True,
    ) -> Any:
        """Resolve the given identifier from the container.

        Args:
            abstract: Identifier to resolve.
            parameters: Per-call overrides for this resolution.
            raise_events: Fire the resolving callbacks. Delegating frames pass
                ``False`` so a value handed from one identifier to another is
                reported once, by the outermost identifier.

        """
        abstract =self._container.get_alias(abstract)
        sharer = self._container.get_instance_sharer()

        needs_contextual_build = bool(parameters) or (
            self._container.get_contextual_binder().has_contextual_concrete(abstract)
        )

        if sharer.has_shared_instance(abstract) and not needs_contextual_build:
            return sharer.get_shared_instance(abstract)

        builder = self._container.get_builder()
        with builder.parameter_override(parameters):
            concrete = self._get_concrete(abstract)

            if self._is_buildable(concrete, abstract):
                value = builder.build(concrete)
            else:
                logger.debug("Resolving %r through %r", abstract, concrete)
                value = self.resolve(concrete, raise_events=False)

            value = self._container.get_extender().apply(abstract, value)

            if self._container.is_shared(abstract) and not needs_contextual_build:
                sharer.add_shared_instance(abstract, value)

            if raise_events:
                self._fire_resolving_callbacks(abstract, value)
            self._resolved.add(abstract)

        return value

    def resolved(self, abstract: Any) -> bool:
        """Determine if the given identifier has been resolved or holds a shared instance."""
        if self._container.is_alias(abstract):
            abstract = self._container.get_alias(abstract)

        return (
            abstract in self._resolved
            or self._container.get_instance_sharer().has_shared_instance(abstract)
        )

    def forget_resolved(self, abstract: Any) -> None:
        self._resolved.discard(abstract)

    def forget_all_resolved(self) -> None:
        self._resolved.clear()

    def resolving(self, abstract: Any, callback: Callable[..., Any] | None = None) -> None:
        """Register a callback fired before a value is handed out.

        ``resolving(callback)`` registers a global callback, fired for every
        resolved value. ``resolving(abstract, callback)`` fires only for
        ``abstract`` and for values satisfying it.
        """
        self._register(
            abstract,
            callback,
            self._global_resolving_callbacks,
            self._resolving_callbacks,
        )

    def after_resolving(self, abstract: Any, callback: Callable[..., Any] | None = None) -> None:
        """Register a callback fired after the resolving callbacks."""
        self._register(
            abstract,
            callback,
            self._global_after_resolving_callbacks,
            self._after_resolving_callbacks,
        )

    def _register(
        self,
        abstract: Any,
        callback: Callable[..., Any] | None,
        global_callbacks: list[Callable[..., Any]],
        keyed_callbacks: dict[Any, list[Callable[..., Any]]],
    ) -> None:
        if callback is None:
            if not is_factory(abstract):
                msg = f"Expected a callback, got {abstract!r}."
                raise TypeError(msg)
            global_callbacks.append(abstract)
            return

        abstract = self._container.get_alias(abstract)
        keyed_callbacks.setdefault(abstract, []).append(callback)

    def _get_concrete(self, abstract: Any) -> Any:
        contextual = self._container.get_contextual_binder()
        if contextual.has_contextual_concrete(abstract):
            return contextual.get_contextual_concrete(abstract)

        # Without a registered binding the identifier is assumed to be a
        # concrete class and the builder gets a go at it directly.
        binding = self._container.get_binder().get_binding(abstract)
        if binding is not None:
            return binding.concrete

        return abstract

    @staticmethod
    def _is_buildable(concrete: Any, abstract: Any) -> bool:
        return concrete is abstract or concrete == abstract or is_factory(concrete)

    def _fire_resolving_callbacks(self, abstract: Any, value: Any) -> None:
        self._fire_callback_array(value, self._global_resolving_callbacks)
        self._fire_keyed_callbacks(abstract, value, self._resolving_callbacks)

        self._fire_callback_array(value, self._global_after_resolving_callbacks)
        self._fire_keyed_callbacks(abstract, value, self._after_resolving_callbacks)

    def _fire_keyed_callbacks(
        self,
        abstract: Any,
        value: Any,
        keyed_callbacks: dict[Any, list[Callable[..., Any]]],
    ) -> None:
        binder = self._container.get_binder()
        for key, callbacks in list(keyed_callbacks.items()):
            if key == abstract or satisfies(value, key, binder.token_implementers(key)):
                self._fire_callback_array(value, callbacks)

    def _fire_callback_array(self, value: Any, callbacks: list[Callable[..., Any]]) -> None:
        for callback in list(callbacks):
            invoke(callback, value, self._container)
