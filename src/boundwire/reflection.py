"""Parameter introspection used by the builder and by method calls.

The container never parses source code. Everything it knows about a
constructor or a method comes from ``inspect.signature`` and
``typing.get_type_hints``, condensed into ordered ``ParameterDescriptor`` values.
"""

from __future__ import annotations

import inspect
import types
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Annotated, Any, Union, get_args, get_origin, get_type_hints

from boundwire.defaults import DEFAULT_BUILTIN_TYPES
from boundwire.exceptions import DependencyExtractionError
from boundwire.markers import Inject, Token

MIN_ANNOTATED_ARGS = 2


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()
"""Sentinel for parameters without a declared default."""


@dataclass(frozen=True, slots=True)
class ParameterDescriptor:
    """Information about a constructor or method parameter."""

    name: str
    position: int
    key: Any = None
    """Identifier to resolve, ``None`` for builtin parameters."""
    default: Any = MISSING
    builtin: bool = False
    keyword_only: bool = False
    type_name: str | None = None
    """``__name__`` of the declared type, used for name-keyed call parameters."""

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING


_VARIADIC_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


class DependenciesExtractor:
    """Extract ordered parameter descriptors from classes and callables."""

    def __init__(self, builtin_types: Iterable[Any] = DEFAULT_BUILTIN_TYPES) -> None:
        self._builtin_types = frozenset(builtin_types)
        self._constructor_cache: dict[type, tuple[ParameterDescriptor, ...]] = {}

    def get_constructor_parameters(self, cls: type) -> tuple[ParameterDescriptor, ...]:
        """Get the constructor parameters of a class, in declared order."""
        cached = self._constructor_cache.get(cls)
        if cached is not None:
            return cached

        if cls.__init__ is object.__init__ and cls.__new__ is object.__new__:
            result: tuple[ParameterDescriptor, ...] = ()
        else:
            hints_source = cls.__init__ if cls.__init__ is not object.__init__ else cls.__new__
            result = self._describe(cls, hints_source, owner=cls)

        self._constructor_cache[cls] = result
        return result

    def get_callable_parameters(self, func: Callable[..., Any]) -> tuple[ParameterDescriptor, ...]:
        """Get the parameters of a function, bound method or callable object."""
        hints_source = func
        if not inspect.isroutine(func) and not isinstance(func, type):
            hints_source = type(func).__call__
        return self._describe(func, hints_source, owner=func)

    def _describe(
        self,
        signature_target: Any,
        hints_source: Any,
        owner: Any,
    ) -> tuple[ParameterDescriptor, ...]:
        try:
            signature = inspect.signature(signature_target)
        except (ValueError, TypeError):
            return ()

        try:
            type_hints = get_type_hints(hints_source, include_extras=True)
        except (TypeError, NameError) as e:
            raise DependencyExtractionError(owner, e) from e

        result = []
        for position, parameter in enumerate(
            p for p in signature.parameters.values() if p.kind not in _VARIADIC_KINDS
        ):
            default = (
                MISSING if parameter.default is inspect.Parameter.empty else parameter.default
            )
            key = self._extract_key(type_hints.get(parameter.name, inspect.Parameter.empty))
            result.append(
                ParameterDescriptor(
                    name=parameter.name,
                    position=position,
                    key=key,
                    default=default,
                    builtin=key is None,
                    keyword_only=parameter.kind is inspect.Parameter.KEYWORD_ONLY,
                    type_name=key.__name__ if isinstance(key, type) else None,
                ),
            )
        return tuple(result)

    def _extract_key(self, hint: Any) -> Any | None:
        """Map a type hint to the identifier to resolve, or ``None`` for builtins."""
        if hint is inspect.Parameter.empty or hint is None or hint is type(None):
            return None

        origin = get_origin(hint)
        if origin is Annotated:
            args = get_args(hint)
            for metadata in args[1:]:
                if isinstance(metadata, Inject):
                    return metadata.key
            return self._extract_key(args[0])

        if origin is Union or origin is types.UnionType:
            members = [arg for arg in get_args(hint) if arg is not type(None)]
            if len(members) == 1:
                return self._extract_key(members[0])
            return None

        try:
            if hint in self._builtin_types:
                return None
        except TypeError:  # unhashable metadata
            return None

        if origin is not None or not isinstance(hint, type):
            return None

        return hint


def is_instantiable(target: Any) -> bool:
    """Return whether ``target`` is a class the builder can construct."""
    return (
        isinstance(target, type)
        and not inspect.isabstract(target)
        and not getattr(target, "_is_protocol", False)
    )


def is_factory(target: Any) -> bool:
    """Return whether ``target`` is a producer callable rather than a class."""
    return callable(target) and not isinstance(target, type) and not isinstance(target, Token)


def satisfies(value: Any, target: Any, implementers: Iterable[type] = ()) -> bool:
    """Capability test used to match callbacks registered for a type.

    Class targets use ``isinstance``; protocols that are not runtime checkable
    never match. Any other target matches when ``value`` is an instance of one
    of ``implementers``.
    """
    if isinstance(target, type):
        try:
            return isinstance(value, target)
        except TypeError:
            return False
    return any(isinstance(value, implementer) for implementer in implementers)


def invoke(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Call ``func`` with as many leading ``args`` as it accepts positionally.

    Surplus positional arguments are dropped, so ``lambda: ...``,
    ``lambda container: ...`` and ``lambda container, parameters: ...`` are all
    valid factories. Keyword arguments are passed through unchanged.
    """
    try:
        signature = inspect.signature(func)
    except (ValueError, TypeError):
        return func(*args, **kwargs)

    parameters = signature.parameters.values()
    if any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in parameters):
        return func(*args, **kwargs)

    accepted = sum(1 for p in parameters if p.kind in _POSITIONAL_KINDS)
    return func(*args[:accepted], **kwargs)
