from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from boundwire.reflection import invoke

if TYPE_CHECKING:
    from boundwire.container import Container


class MethodBinder:
    """Explicit ``"Type@method"`` overrides consulted by ``Container.call``."""

    def __init__(self, container: Container) -> None:
        self._container = container
        self._method_bindings: dict[str, Callable[..., Any]] = {}

    def has_method_binding(self, method: str) -> bool:
        return method in self._method_bindings

    def bind_method(self, method: tuple[type, str] | str, callback: Callable[..., Any]) -> None:
        """Bind ``callback`` to run instead of ``method`` on ``Container.call``.

        Args:
            method: ``"Type@method"`` string or a ``(Type, "method")`` pair.
            callback: Called as ``callback(instance, container)``.

        """
        self._method_bindings[self._parse_bind_method(method)] = callback

    def call_method_binding(self, method: str, instance: Any) -> Any:
        return invoke(self._method_bindings[method], instance, self._container)

    @staticmethod
    def _parse_bind_method(method: tuple[type, str] | str) -> str:
        if isinstance(method, tuple):
            cls, name = method
            return f"{cls.__name__}@{name}"
        return method
