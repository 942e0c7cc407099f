from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, TypeVar, overload

from boundwire.aliaser import Aliaser
from boundwire.binder import Binder, Binding
from boundwire.bound_method import BoundMethod, CallableRef
from boundwire.builder import Builder
from boundwire.contextual import ContextualBinder, ContextualBindingBuilder
from boundwire.defaults import DEFAULT_BUILTIN_TYPES, DEFAULT_SHARED_BASES
from boundwire.exceptions import BoundwireError, EntryNotFoundError
from boundwire.extender import Extender
from boundwire.instance_sharer import InstanceSharer
from boundwire.method_binder import MethodBinder
from boundwire.reflection import DependenciesExtractor, is_factory
from boundwire.resolver import Resolver
from boundwire.tagger import TaggedServices, Tagger

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Any)

Parameters = Mapping[Any, Any] | Sequence[Any]


class Container:
    """Dependency injection container for binding and resolving identifiers.

    Identifiers are strings, ``Token`` markers or classes. Classes without a
    binding are built directly by injecting their constructor parameters.
    """

    __slots__ = (
        "_aliaser",
        "_binder",
        "_builder",
        "_contextual_binder",
        "_dependencies_extractor",
        "_extender",
        "_instance_sharer",
        "_method_binder",
        "_resolver",
        "_shared_bases",
        "_tagger",
    )

    def __init__(
        self,
        *,
        builtin_types: Iterable[Any] | None = None,
        shared_bases: Iterable[type] | None = None,
    ) -> None:
        """Create an empty container.

        Args:
            builtin_types: Annotations treated as builtin parameters, which are
                never resolved through the container. Defaults to
                ``DEFAULT_BUILTIN_TYPES``.
            shared_bases: Base classes whose subclasses are cached as singletons
                and built without injection when resolved without a binding.
                Defaults to ``DEFAULT_SHARED_BASES``.

        """
        self._shared_bases = frozenset(
            DEFAULT_SHARED_BASES if shared_bases is None else shared_bases,
        )
        self._dependencies_extractor = DependenciesExtractor(
            DEFAULT_BUILTIN_TYPES if builtin_types is None else builtin_types,
        )

        self._aliaser = Aliaser()
        self._instance_sharer = InstanceSharer(self)
        self._contextual_binder = ContextualBinder(self)
        self._builder = Builder(self, self._dependencies_extractor, self._shared_bases)
        self._extender = Extender(self)
        self._method_binder = MethodBinder(self)
        self._binder = Binder(self)
        self._resolver = Resolver(self)
        self._tagger = Tagger(self)

        self._register_self()

    # Registration

    def bind(self, abstract: Any, concrete: Any = None, *, shared: bool = False) -> None:
        """Register a binding with the container.

        Args:
            abstract: Identifier to register.
            concrete: A class, a factory ``(container, parameters)`` or another
                identifier. Defaults to ``abstract`` when it is a class.
            shared: Cache the first resolved value.

        Raises:
            BindingError: If ``concrete`` is omitted and ``abstract`` is not an
                instantiable class.

        """
        self._binder.bind(abstract, concrete, shared=shared)

    def bind_if(self, abstract: Any, concrete: Any = None, *, shared: bool = False) -> None:
        """Register a binding if it hasn't already been registered."""
        self._binder.bind_if(abstract, concrete, shared=shared)

    def singleton(self, abstract: Any, concrete: Any = None) -> None:
        """Register a shared binding in the container."""
        self._binder.bind(abstract, concrete, shared=True)

    def instance(self, abstract: Any, instance: T) -> T:
        """Register an existing value as shared in the container."""
        return self._instance_sharer.instance(abstract, instance)

    def set(self, identifier: Any, value: Any) -> None:
        """Bind ``identifier`` to a factory, or to a factory returning ``value``."""
        if is_factory(value):
            self.bind(identifier, value)
        else:
            self.bind(identifier, lambda: value)

    def unbind(self, abstract: Any) -> None:
        self._binder.forget_binding(abstract)
        self._instance_sharer.forget_instance(abstract)
        self._resolver.forget_resolved(abstract)

    def alias(self, abstract: Any, alias: Any) -> None:
        """Alias ``abstract`` to a different name.

        Raises:
            SelfAliasError: If ``alias`` equals ``abstract``.

        """
        self._aliaser.alias(abstract, alias)

    def when(self, concrete: Any) -> ContextualBindingBuilder:
        """Define a contextual binding for one class or a list of classes."""
        concretes = concrete if isinstance(concrete, (list, tuple)) else [concrete]
        return ContextualBindingBuilder(self, [self.get_alias(c) for c in concretes])

    def extend(self, abstract: Any, closure: Callable[..., Any]) -> None:
        """Extend an identifier with ``closure(value, container)``."""
        self._extender.extend(abstract, closure)

    def tag(self, abstracts: Any, tags: Any) -> None:
        """Assign a set of tags to a given binding."""
        self._tagger.tag(abstracts, tags)

    def tagged(self, tag: str) -> TaggedServices:
        """Resolve all of the bindings for a given tag, one at a time."""
        return self._tagger.tagged(tag)

    def bind_method(self, method: tuple[type, str] | str, callback: Callable[..., Any]) -> None:
        self._method_binder.bind_method(method, callback)

    def has_method_binding(self, method: str) -> bool:
        return self._method_binder.has_method_binding(method)

    def call_method_binding(self, method: str, instance: Any) -> Any:
        return self._method_binder.call_method_binding(method, instance)

    # Callbacks

    def resolving(self, abstract: Any, callback: Callable[..., Any] | None = None) -> None:
        """Register a resolving callback, global when only a callback is given."""
        self._resolver.resolving(abstract, callback)

    def after_resolving(self, abstract: Any, callback: Callable[..., Any] | None = None) -> None:
        """Register an after resolving callback, global when only a callback is given."""
        self._resolver.after_resolving(abstract, callback)

    def rebinding(self, abstract: Any, callback: Callable[..., Any]) -> Any | None:
        """Bind a new callback to an identifier's rebind event."""
        return self._binder.rebinding(abstract, callback)

    def refresh(self, abstract: Any, target: Any, method: str) -> Any | None:
        """Refresh ``target`` by calling ``target.method(instance)`` on every rebind."""
        return self.rebinding(
            abstract,
            lambda _container, instance: getattr(target, method)(instance),
        )

    def rebound(self, abstract: Any) -> None:
        """Fire the rebound callbacks for the given identifier."""
        self._binder.rebound(abstract)

    # Resolution

    @overload
    def make(self, abstract: type[T], parameters: Parameters | None = None) -> T: ...

    @overload
    def make(self, abstract: Any, parameters: Parameters | None = None) -> Any: ...

    def make(self, abstract: Any, parameters: Parameters | None = None) -> Any:
        """Resolve the given identifier from the container.

        Args:
            abstract: Identifier to resolve.
            parameters: Per-call overrides by constructor parameter name. A
                list is only visible to factory functions. Any non-empty value
                bypasses the shared cache.

        Raises:
            BindingResolutionError: If the dependency graph cannot be completed.

        """
        return self._resolver.resolve(abstract, parameters)

    def get(self, identifier: Any) -> Any:
        """Resolve ``identifier``, reporting unknown identifiers as ``EntryNotFoundError``.

        Failures of an identifier that is bound are raised unchanged.
        """
        try:
            return self._resolver.resolve(identifier)
        except BoundwireError as e:
            if self.has(identifier):
                raise
            raise EntryNotFoundError(identifier) from e

    def factory(self, abstract: Any) -> Callable[[], Any]:
        """Get a closure to resolve the given identifier from the container."""
        return lambda: self.make(abstract)

    def build(self, concrete: Any) -> Any:
        """Instantiate a concrete instance of the given class or run the given factory."""
        return self._builder.build(concrete)

    def call(
        self,
        callback: CallableRef | tuple[Any, str] | Callable[..., Any],
        parameters: Parameters | None = None,
        default_method: str | None = None,
    ) -> Any:
        """Call the given function or ``CallableRef`` and inject its dependencies."""
        return BoundMethod.call(self, callback, parameters, default_method)

    def wrap(
        self,
        callback: CallableRef | tuple[Any, str] | Callable[..., Any],
        parameters: Parameters | None = None,
    ) -> Callable[[], Any]:
        """Wrap ``callback`` so its dependencies are injected when executed."""
        return lambda: self.call(callback, parameters)

    # State queries

    def has(self, identifier: Any) -> bool:
        return self.bound(identifier)

    def bound(self, abstract: Any) -> bool:
        """Determine if the given identifier has been bound, shared or aliased."""
        return self._binder.bound(abstract)

    def resolved(self, abstract: Any) -> bool:
        return self._resolver.resolved(abstract)

    def is_shared(self, abstract: Any) -> bool:
        """Determine if the given identifier is shared."""
        if self._instance_sharer.has_shared_instance(abstract):
            return True

        binding = self._binder.get_binding(abstract)
        if binding is not None:
            return binding.shared

        return (
            isinstance(abstract, type)
            and bool(self._shared_bases)
            and issubclass(abstract, tuple(self._shared_bases))
        )

    def is_alias(self, name: Any) -> bool:
        return self._aliaser.is_alias(name)

    def get_alias(self, abstract: Any) -> Any:
        """Get the canonical identifier for an alias.

        Raises:
            SelfAliasError: If the alias chain is a cycle.

        """
        return self._aliaser.get_alias(abstract)

    def get_bindings(self) -> dict[Any, Binding]:
        return self._binder.get_bindings()

    # Cleanup

    def forget_extenders(self, abstract: Any) -> None:
        self._extender.forget_extenders(abstract)

    def forget_instance(self, abstract: Any) -> None:
        self._instance_sharer.forget_instance(abstract)

    def forget_instances(self) -> None:
        """Forget every shared instance except the container itself."""
        self._instance_sharer.forget_instances()
        self._register_self()

    def flush(self) -> None:
        """Flush the container of all bindings, aliases and resolved instances.

        The container stays registered as a shared instance of its own type.
        """
        self._aliaser.forget_aliases()
        self._resolver.forget_all_resolved()
        self._binder.forget_bindings()
        self._instance_sharer.forget_instances()
        self._aliaser.forget_abstract_aliases()
        self._register_self()
        logger.debug("Flushed container %r", self)

    def _register_self(self) -> None:
        self._instance_sharer.add_shared_instance(type(self), self)

    # Collaborators

    def get_aliaser(self) -> Aliaser:
        return self._aliaser

    def get_binder(self) -> Binder:
        return self._binder

    def get_builder(self) -> Builder:
        return self._builder

    def get_contextual_binder(self) -> ContextualBinder:
        return self._contextual_binder

    def get_dependencies_extractor(self) -> DependenciesExtractor:
        return self._dependencies_extractor

    def get_extender(self) -> Extender:
        return self._extender

    def get_instance_sharer(self) -> InstanceSharer:
        return self._instance_sharer

    def get_resolver(self) -> Resolver:
        return self._resolver

    # Mapping sugar

    def __contains__(self, identifier: Any) -> bool:
        return self.has(identifier)

    def __getitem__(self, identifier: Any) -> Any:
        return self.make(identifier)

    def __setitem__(self, identifier: Any, value: Any) -> None:
        self.set(identifier, value)

    def __delitem__(self, identifier: Any) -> None:
        self.unbind(identifier)

    def __repr__(self) -> str:
        return f"Container(bindings={len(self._binder.get_bindings())})"
