from boundwire.binder import Binding
from boundwire.bound_method import CallableRef
from boundwire.container import Container
from boundwire.container_context import ContainerContext, container_context
from boundwire.contextual import ContextualBindingBuilder
from boundwire.exceptions import (
    BindingError,
    BindingResolutionError,
    BoundwireError,
    CircularDependencyError,
    ContainerNotSetError,
    DependencyExtractionError,
    EntryNotFoundError,
    MissingMethodError,
    NotInstantiableError,
    SelfAliasError,
    UnresolvableDependencyError,
)
from boundwire.markers import Inject, Token
from boundwire.tagger import TaggedServices

__all__ = [
    "BindingError",
    "BindingResolutionError",
    "Binding",
    "BoundwireError",
    "CallableRef",
    "CircularDependencyError",
    "Container",
    "ContainerContext",
    "ContainerNotSetError",
    "ContextualBindingBuilder",
    "DependencyExtractionError",
    "EntryNotFoundError",
    "Inject",
    "MissingMethodError",
    "NotInstantiableError",
    "SelfAliasError",
    "TaggedServices",
    "Token",
    "UnresolvableDependencyError",
    "container_context",
]
