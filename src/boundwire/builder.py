from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from boundwire.exceptions import (
    CircularDependencyError,
    NotInstantiableError,
    UnresolvableDependencyError,
)
from boundwire.reflection import (
    DependenciesExtractor,
    ParameterDescriptor,
    invoke,
    is_factory,
    is_instantiable,
)

if TYPE_CHECKING:
    from boundwire.container import Container

logger = logging.getLogger(__name__)

Parameters = Mapping[str, Any] | Sequence[Any]


class Builder:
    """Recursive constructor injection.

    Owns the build-path stack (classes currently under construction, used for
    contextual lookups and error messages) and the parameter-override stack
    (one entry per in-flight ``resolve`` call, only the top one is active).
    Both stacks are only touched through context managers, so a failure deep
    in the graph always leaves them as they were before the call.
    """

    def __init__(
        self,
        container: Container,
        dependencies_extractor: DependenciesExtractor,
        self_constructing_bases: frozenset[type] = frozenset(),
    ) -> None:
        self._container = container
        self._dependencies_extractor = dependencies_extractor
        self._self_constructing_bases = tuple(self_constructing_bases)
        self._build_stack: list[Any] = []
        self._with: list[Parameters] = []

    def build(self, concrete: Any) -> Any:
        """Instantiate a concrete instance of the given class or run the given factory.

        Raises:
            NotInstantiableError: If ``concrete`` is neither a factory nor an
                instantiable class.
            CircularDependencyError: If ``concrete`` is already being built.

        """
        if is_factory(concrete):
            return invoke(concrete, self._container, self.get_last_parameter_override())

        if not is_instantiable(concrete):
            raise NotInstantiableError(concrete, self._build_stack)

        if concrete in self._build_stack:
            raise CircularDependencyError(concrete, self._build_stack)

        if self._self_constructing_bases and issubclass(concrete, self._self_constructing_bases):
            return concrete()

        dependencies = self._dependencies_extractor.get_constructor_parameters(concrete)
        if dependencies:
            logger.debug("Building %r with %d parameter(s)", concrete, len(dependencies))

        with self.building(concrete):
            args, kwargs = self._resolve_dependencies(concrete, dependencies)

        return concrete(*args, **kwargs)

    @contextmanager
    def building(self, concrete: Any) -> Iterator[None]:
        """Keep ``concrete`` on the build-path stack for the duration of the block."""
        self._build_stack.append(concrete)
        try:
            yield
        finally:
            self._build_stack.pop()

    @contextmanager
    def parameter_override(self, parameters: Parameters | None) -> Iterator[None]:
        """Make ``parameters`` the active override set for the duration of the block."""
        if parameters is None:
            parameters = []
        elif isinstance(parameters, Mapping):
            parameters = dict(parameters)
        self._with.append(parameters)
        try:
            yield
        finally:
            self._with.pop()

    def get_latest_build(self) -> Any | None:
        return self._build_stack[-1] if self._build_stack else None

    def get_build_stack(self) -> list[Any]:
        return list(self._build_stack)

    def get_last_parameter_override(self) -> Parameters:
        return self._with[-1] if self._with else []

    def _resolve_dependencies(
        self,
        concrete: type,
        dependencies: Sequence[ParameterDescriptor],
    ) -> tuple[list[Any], dict[str, Any]]:
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        override = self._get_named_parameter_override()

        for dependency in dependencies:
            # An override for this particular build wins over anything the
            # container could work out for the parameter.
            if override is not None and dependency.name in override:
                value = override.pop(dependency.name)
            elif dependency.builtin:
                value = self._resolve_primitive(concrete, dependency)
            else:
                value = self._resolve_class(dependency)

            if dependency.keyword_only:
                kwargs[dependency.name] = value
            else:
                args.append(value)

        return args, kwargs

    def _get_named_parameter_override(self) -> dict[str, Any] | None:
        override = self.get_last_parameter_override()
        return override if isinstance(override, dict) else None

    def _resolve_primitive(self, concrete: type, parameter: ParameterDescriptor) -> Any:
        contextual = self._container.get_contextual_binder()

        if contextual.has_contextual_concrete(parameter.name):
            implementation = contextual.get_contextual_concrete(parameter.name)
            if isinstance(implementation, type):
                return self._container.make(implementation)
            if is_factory(implementation):
                return invoke(implementation, self._container)
            return implementation

        if parameter.has_default:
            return parameter.default

        raise UnresolvableDependencyError(parameter, concrete)

    def _resolve_class(self, parameter: ParameterDescriptor) -> Any:
        try:
            return self._container.make(parameter.key)
        except NotInstantiableError:
            # An optional dependency that cannot be built falls back to its
            # declared default, the same way builtins do.
            if parameter.has_default:
                return parameter.default
            raise
