"""Authentication and security context value objects."""

from __future__ import annotations

from dataclasses import dataclass, field

from runas.domain.auth.model.identity import Anonymous, Identity
from runas.domain.auth.model.principal import Principal


@dataclass(frozen=True)
class Authentication:
    """An authenticated principal together with its credentials and authorities."""

    principal: Principal
    credentials: str = field(default="", repr=False)
    authorities: frozenset[str] = frozenset()

    @classmethod
    def of(cls, principal: Principal) -> Authentication:
        """Authenticate a principal with its own password and authorities."""
        return cls(
            principal=principal,
            credentials=principal.password,
            authorities=principal.authorities,
        )

    @property
    def name(self) -> str:
        return self.principal.username


@dataclass(frozen=True)
class SecurityContext:
    """What the ambient security state holds while a test body runs."""

    authentication: Authentication | None = None

    @classmethod
    def empty(cls) -> SecurityContext:
        """An anonymous context carrying no authentication."""
        return cls()

    @classmethod
    def for_principal(cls, principal: Principal) -> SecurityContext:
        return cls(authentication=Authentication.of(principal))

    @property
    def principal(self) -> Principal | None:
        if self.authentication is None:
            return None
        return self.authentication.principal

    @property
    def identity(self) -> Identity:
        """The principal, or Anonymous when nothing is authenticated."""
        return self.principal or Anonymous()
