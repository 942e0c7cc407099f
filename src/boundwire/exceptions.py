from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from boundwire.reflection import ParameterDescriptor


def format_identifier(identifier: Any) -> str:
    """Return a human readable name for an identifier used in error messages."""
    if isinstance(identifier, type):
        return identifier.__name__
    name = getattr(identifier, "name", None)
    if isinstance(name, str):
        return name
    if isinstance(identifier, str):
        return identifier
    qualname = getattr(identifier, "__qualname__", None)
    if callable(identifier) and isinstance(qualname, str):
        return qualname
    return type(identifier).__name__


class BoundwireError(Exception):
    """Represent a base class for all boundwire-specific failures.

    Catch this type when you want to handle any container error path without
    matching each concrete exception class individually.
    """


class BindingResolutionError(BoundwireError):
    """Signal that a resolution tree could not be completed.

    Every failure raised while building an identifier derives from this class.
    The whole resolution is aborted; no partially built value is returned.
    """


class NotInstantiableError(BindingResolutionError):
    """Signal that the target identifier has no usable concrete.

    Raised by ``Container.make``/``Container.build`` when the identifier is an
    abstract class, a protocol, a ``Token`` or a plain name with nothing bound
    to it.

    Typical fix is binding an implementation with ``container.bind(abstract,
    Implementation)`` or a contextual ``when(...).needs(...).give(...)``.
    """

    def __init__(self, concrete: Any, build_stack: Sequence[Any] = ()) -> None:
        self.concrete = concrete
        self.build_stack = list(build_stack)

        message = f"Target [{format_identifier(concrete)}] is not instantiable"
        if self.build_stack:
            previous = ", ".join(format_identifier(item) for item in self.build_stack)
            message += f" while building [{previous}]."
        else:
            message += "."
        super().__init__(message)


class UnresolvableDependencyError(BindingResolutionError):
    """Signal that a builtin-typed parameter has no override and no default.

    Typical fixes are passing the value explicitly (``container.make(Service,
    {"timeout": 5})``), adding a contextual binding
    (``container.when(Service).needs("timeout").give(5)``) or declaring a default.
    """

    def __init__(self, parameter: ParameterDescriptor, owner: Any) -> None:
        self.parameter = parameter
        self.owner = owner
        super().__init__(
            f"Unresolvable dependency resolving [{parameter.name}] "
            f"in class {format_identifier(owner)}",
        )


class CircularDependencyError(BindingResolutionError):
    """Signal that a class depends on itself through its constructor graph."""

    def __init__(self, concrete: Any, build_stack: Sequence[Any]) -> None:
        self.concrete = concrete
        self.build_stack = list(build_stack)
        chain = " -> ".join(format_identifier(item) for item in (*self.build_stack, concrete))
        super().__init__(f"Circular dependency detected while building [{chain}].")


class DependencyExtractionError(BindingResolutionError):
    """Signal that parameter metadata could not be read for a target.

    Usually caused by forward references that cannot be evaluated in the
    module namespace of the class or function.
    """

    def __init__(self, target: Any, error: Exception) -> None:
        self.target = target
        self.error = error
        super().__init__(
            f"Failed to extract dependencies for [{format_identifier(target)}]: {error}",
        )


class SelfAliasError(BoundwireError):
    """Signal that an alias chain leads back to where it started."""

    def __init__(self, abstract: Any, chain: Sequence[Any] = ()) -> None:
        self.abstract = abstract
        self.chain = list(chain)

        message = f"[{format_identifier(abstract)}] is aliased to itself"
        if len(self.chain) > 1:
            path = " -> ".join(format_identifier(item) for item in self.chain)
            message += f" through [{path}]."
        else:
            message += "."
        super().__init__(message)


class BindingError(BoundwireError):
    """Signal an invalid registration.

    Raised by ``Container.bind`` when a non-instantiable abstract is bound to
    itself and by ``ContextualBindingBuilder.give`` when ``needs`` was not called.
    """


class EntryNotFoundError(BoundwireError):
    """Signal that ``Container.get`` was asked for an unknown identifier."""

    def __init__(self, identifier: Any) -> None:
        self.identifier = identifier
        super().__init__(f"No entry was found for [{format_identifier(identifier)}].")


class MissingMethodError(BoundwireError):
    """Signal a method invocation on a class or instance without a method name."""


class ContainerNotSetError(BoundwireError):
    """Signal use of ``container_context`` before a container is bound.

    Typical fix is calling ``container_context.set_current(container)`` during
    application startup before resolution calls.
    """
