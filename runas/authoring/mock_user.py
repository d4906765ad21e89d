"""@with_mock_user: run a test as an in-memory user built from the declaration."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from runas.domain.auth.model.context import SecurityContext
from runas.domain.auth.model.principal import ROLE_PREFIX, Principal
from runas.domain.auth.port.factory import IdentityFactory
from runas.domain.shared.error import DeclarationError
from runas.domain.shared.model.declaration import IdentityMarker

DEFAULT_ROLES = ("USER",)


class MockUserFactory(IdentityFactory["WithMockUser"]):
    """Builds a principal straight from a ``WithMockUser`` declaration."""

    def create_security_context(self, declaration: WithMockUser) -> SecurityContext:
        return SecurityContext.for_principal(declaration.principal())


@dataclass(frozen=True)
class WithMockUser(IdentityMarker, factory=MockUserFactory):
    """A mock user.

    ``roles`` are granted as ``ROLE_``-prefixed authorities. ``authorities``
    are granted as given and replace ``roles``, which must then be left at
    the default.
    """

    username: str = "user"
    roles: tuple[str, ...] = DEFAULT_ROLES
    authorities: tuple[str, ...] = ()
    password: str = "password"

    def __post_init__(self) -> None:
        # Lists are accepted for convenience but declarations must stay hashable
        object.__setattr__(self, "roles", tuple(self.roles))
        object.__setattr__(self, "authorities", tuple(self.authorities))

        if not self.username:
            raise DeclarationError("username cannot be empty")
        if self.authorities and self.roles != DEFAULT_ROLES:
            raise DeclarationError(
                f"You cannot define roles with authorities. Got roles={self.roles} "
                f"and authorities={self.authorities}"
            )
        for role in self.roles:
            if role.startswith(ROLE_PREFIX):
                raise DeclarationError(f"roles cannot start with {ROLE_PREFIX} Got {role}")

    def granted_authorities(self) -> frozenset[str]:
        if self.authorities:
            return frozenset(self.authorities)
        return frozenset(ROLE_PREFIX + role for role in self.roles)

    def principal(self) -> Principal:
        return Principal(
            username=self.username,
            password=self.password,
            authorities=self.granted_authorities(),
        )


def with_mock_user(
    username: str = "user",
    *,
    roles: Iterable[str] = DEFAULT_ROLES,
    authorities: Iterable[str] = (),
    password: str = "password",
) -> WithMockUser:
    """Run the decorated test (or every test of the decorated class) as a mock user.

    May be applied several times; the test then runs once per user.

    Usage:
        @with_mock_user(roles=["ADMIN"])
        @with_mock_user("bob")
        def test_list_accounts(self) -> None: ...
    """
    return WithMockUser(
        username=username,
        roles=tuple(roles),
        authorities=tuple(authorities),
        password=password,
    )
