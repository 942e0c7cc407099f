from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from typing_extensions import Self

from boundwire.exceptions import BindingError

if TYPE_CHECKING:
    from boundwire.container import Container

_NOT_FOUND: Any = object()


class ContextualBinder:
    """Per build-path override table.

    Entries are keyed by ``(concrete under construction, needed identifier)``.
    Lookups always use the top of the builder's build-path stack, so the same
    identifier can resolve differently depending on which class asks for it.
    """

    def __init__(self, container: Container) -> None:
        self._container = container
        self._contextual: dict[tuple[Any, Any], Any] = {}

    def add_contextual_binding(self, concrete: Any, abstract: Any, implementation: Any) -> None:
        self._contextual[(concrete, self._container.get_alias(abstract))] = implementation

    def has_contextual_concrete(self, abstract: Any) -> bool:
        return self._lookup(abstract) is not _NOT_FOUND

    def get_contextual_concrete(self, abstract: Any) -> Any | None:
        """Get the contextual implementation for ``abstract`` or ``None``."""
        binding = self._lookup(abstract)
        return None if binding is _NOT_FOUND else binding

    def _lookup(self, abstract: Any) -> Any:
        binding = self._find_in_contextual_bindings(abstract)
        if binding is not _NOT_FOUND:
            return binding

        # A contextual binding may have been registered under one of the
        # aliases of the canonical identifier.
        for alias in self._container.get_aliaser().abstract_aliases(abstract):
            binding = self._find_in_contextual_bindings(alias)
            if binding is not _NOT_FOUND:
                return binding

        return _NOT_FOUND

    def _find_in_contextual_bindings(self, abstract: Any) -> Any:
        if not self._contextual:
            return _NOT_FOUND
        latest = self._container.get_builder().get_latest_build()
        try:
            return self._contextual.get((latest, abstract), _NOT_FOUND)
        except TypeError:  # unhashable identifier
            return _NOT_FOUND


class ContextualBindingBuilder:
    """Fluent ``when(...).needs(...).give(...)`` builder."""

    def __init__(self, container: Container, concretes: Iterable[Any]) -> None:
        self._container = container
        self._concretes = list(concretes)
        self._needs: Any = _NOT_FOUND

    def needs(self, abstract: Any) -> Self:
        """Define the identifier that depends on the context."""
        self._needs = abstract
        return self

    def give(self, implementation: Any) -> None:
        """Define the implementation for the contextual binding.

        Args:
            implementation: A class, a factory callable, another identifier, or
                a plain value for builtin-typed parameters.

        Raises:
            BindingError: If ``needs`` was not called first.

        """
        if self._needs is _NOT_FOUND:
            msg = "The abstract target is undefined."
            raise BindingError(msg)

        binder = self._container.get_contextual_binder()
        for concrete in self._concretes:
            binder.add_contextual_binding(concrete, self._needs, implementation)
