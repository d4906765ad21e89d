"""@with_user_details: run a test as a user loaded from a UserDetailsService."""

from __future__ import annotations

from dataclasses import dataclass

from dishka import DEFAULT_COMPONENT, Container

from runas.domain.auth.model.context import SecurityContext
from runas.domain.auth.port.factory import IdentityFactory
from runas.domain.auth.port.user_details import UserDetailsService
from runas.domain.shared.error import DeclarationError
from runas.domain.shared.model.declaration import IdentityMarker


class UserDetailsFactory(IdentityFactory["WithUserDetails"]):
    """Loads the declared user from the test class's container.

    Needs a container, so it cannot be built for classes without
    ``container_configuration``.
    """

    def __init__(self, container: Container) -> None:
        self._container = container

    def create_security_context(self, declaration: WithUserDetails) -> SecurityContext:
        service = self._container.get(UserDetailsService, component=declaration.component)
        principal = service.load_user_by_username(declaration.username)
        return SecurityContext.for_principal(principal)


@dataclass(frozen=True)
class WithUserDetails(IdentityMarker, factory=UserDetailsFactory):
    """A stored user, looked up by name.

    ``component`` selects which Dishka component provides the
    ``UserDetailsService`` when the container has more than one.
    """

    username: str = "user"
    component: str = DEFAULT_COMPONENT

    def __post_init__(self) -> None:
        if not self.username:
            raise DeclarationError("username cannot be empty")


def with_user_details(username: str = "user", *, component: str = DEFAULT_COMPONENT) -> WithUserDetails:
    """Run the decorated test as a user from the container's UserDetailsService."""
    return WithUserDetails(username=username, component=component)
