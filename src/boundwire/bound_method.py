from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from boundwire.exceptions import (
    MissingMethodError,
    NotInstantiableError,
    UnresolvableDependencyError,
)
from boundwire.reflection import ParameterDescriptor, invoke

if TYPE_CHECKING:
    from boundwire.container import Container


@dataclass(frozen=True, slots=True)
class CallableRef:
    """Reference to a method on a class or an instance.

    A class target with ``is_static=False`` is resolved through the container
    before the method is looked up on the resulting instance.
    """

    target: Any
    method: str | None = None
    is_static: bool = False


class BoundMethod:
    """Call functions and methods with their parameters injected by the container."""

    @classmethod
    def call(
        cls,
        container: Container,
        callback: CallableRef | tuple[Any, str] | Callable[..., Any],
        parameters: Mapping[Any, Any] | Sequence[Any] | None = None,
        default_method: str | None = None,
    ) -> Any:
        """Call ``callback`` and inject its dependencies.

        Args:
            container: Container used to resolve parameters.
            callback: A ``CallableRef``, a ``(target, "method")`` pair, a class
                (requires ``default_method``) or any plain callable.
            parameters: Caller supplied values, keyed by parameter name, by the
                ``__name__`` of the declared type, or given as a list.
            default_method: Method name used when ``callback`` names none.

        Raises:
            MissingMethodError: If a class or instance is called without a
                method name and no ``default_method``.

        """
        if isinstance(callback, tuple):
            callback = CallableRef(*callback)
        elif isinstance(callback, type):
            callback = CallableRef(callback)

        if isinstance(callback, CallableRef):
            return cls._call_class(container, callback, parameters, default_method)

        if inspect.ismethod(callback) and not isinstance(callback.__self__, type):
            method = f"{type(callback.__self__).__name__}@{callback.__name__}"
            if container.has_method_binding(method):
                return container.call_method_binding(method, callback.__self__)

        return cls._call_function(container, callback, parameters)

    @classmethod
    def _call_class(
        cls,
        container: Container,
        ref: CallableRef,
        parameters: Mapping[Any, Any] | Sequence[Any] | None,
        default_method: str | None,
    ) -> Any:
        method = ref.method or default_method
        if method is None:
            msg = "Method not provided."
            raise MissingMethodError(msg)

        target = ref.target
        if isinstance(target, type) and not ref.is_static:
            target = container.make(target)

        # Here the method is turned into a "Type@method" string so a method
        # binding registered on the container can take over the call.
        owner = target if isinstance(target, type) else type(target)
        method_binding = f"{owner.__name__}@{method}"
        if container.has_method_binding(method_binding):
            return container.call_method_binding(method_binding, target)

        return cls._call_function(container, getattr(target, method), parameters)

    @classmethod
    def _call_function(
        cls,
        container: Container,
        func: Callable[..., Any],
        parameters: Mapping[Any, Any] | Sequence[Any] | None,
    ) -> Any:
        supplied = cls._key_parameters(parameters)
        dependencies = container.get_dependencies_extractor().get_callable_parameters(func)

        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for dependency in dependencies:
            value = cls._dependency_for_call_parameter(container, func, dependency, supplied)
            if dependency.keyword_only:
                kwargs[dependency.name] = value
            else:
                args.append(value)

        # Caller values that matched no declared parameter are passed on
        # positionally, after the injected ones.
        args.extend(supplied.values())
        return invoke(func, *args, **kwargs)

    @staticmethod
    def _key_parameters(parameters: Mapping[Any, Any] | Sequence[Any] | None) -> dict[Any, Any]:
        if parameters is None:
            return {}
        if isinstance(parameters, Mapping):
            return dict(parameters)
        return dict(enumerate(parameters))

    @staticmethod
    def _dependency_for_call_parameter(
        container: Container,
        func: Callable[..., Any],
        dependency: ParameterDescriptor,
        supplied: dict[Any, Any],
    ) -> Any:
        if dependency.name in supplied:
            return supplied.pop(dependency.name)

        if dependency.type_name is not None and dependency.type_name in supplied:
            return supplied.pop(dependency.type_name)

        if dependency.position in supplied:
            return supplied.pop(dependency.position)

        if not dependency.builtin:
            try:
                return container.make(dependency.key)
            except NotInstantiableError:
                if dependency.has_default:
                    return dependency.default
                raise

        if dependency.has_default:
            return dependency.default

        raise UnresolvableDependencyError(dependency, func)
