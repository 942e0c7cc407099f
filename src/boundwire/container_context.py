from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar, overload

from boundwire.bound_method import CallableRef
from boundwire.container import Container, Parameters
from boundwire.exceptions import ContainerNotSetError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ContainerContext:
    """Explicit holder of the container an application entry point works with.

    Nothing is bound by default. The active container is shared by every
    caller of this ``ContainerContext`` instance; it is neither task-local nor
    thread-local.
    """

    def __init__(self) -> None:
        self._container: Container | None = None

    def set_current(self, container: Container) -> None:
        """Set the active container.

        This method is expected to be called once during application startup.
        """
        self._container = container
        logger.debug("Container context bound to %r", container)

    def get_current(self) -> Container:
        """Return the active container or raise when not bound."""
        if self._container is None:
            msg = (
                "Container is not set for container_context. "
                "Call container_context.set_current(container) before using container_context."
            )
            raise ContainerNotSetError(msg)
        return self._container

    def reset(self) -> None:
        """Unbind the active container."""
        self._container = None

    @overload
    def make(self, abstract: type[T], parameters: Parameters | None = None) -> T: ...

    @overload
    def make(self, abstract: Any, parameters: Parameters | None = None) -> Any: ...

    def make(self, abstract: Any, parameters: Parameters | None = None) -> Any:
        return self.get_current().make(abstract, parameters)

    def call(
        self,
        callback: CallableRef | tuple[Any, str] | Callable[..., Any],
        parameters: Parameters | None = None,
        default_method: str | None = None,
    ) -> Any:
        return self.get_current().call(callback, parameters, default_method)


container_context = ContainerContext()
