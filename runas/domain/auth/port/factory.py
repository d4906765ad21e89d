"""Ports for turning identity declarations into security contexts."""

from abc import abstractmethod
from typing import Any, Protocol

from runas.domain.auth.model.context import SecurityContext
from runas.domain.shared.port import Port


class IdentityFactory[D](Port, Protocol):
    """Builds the security context for one identity declaration.

    Each ``IdentityMarker`` kind names the factory class that handles it.
    """

    @abstractmethod
    def create_security_context(self, declaration: D) -> SecurityContext | None:
        """Create the context to install, or None for an empty context."""
        ...


class FactoryResolver(Port, Protocol):
    """Produces identity factory instances from their classes."""

    @abstractmethod
    def resolve(self, kind: type[Any]) -> Any:
        """Construct an instance of ``kind``.

        Raises:
            ContainerUnavailableError: If the resolver relies on a dependency
                container that cannot be provided.
        """
        ...

    def close(self) -> None:
        """Release anything held for the lifetime of a test class."""
        return None
