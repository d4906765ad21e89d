"""Principal: simulated authenticated identity installed for one test run."""

from dataclasses import dataclass, field

from runas.domain.auth.model.identity import Identity

ROLE_PREFIX = "ROLE_"
"""Prefix that turns a role name into a granted authority."""


@dataclass(frozen=True)
class Principal(Identity):
    """A simulated authenticated user.

    Compared by value, so two principals built from equal declarations are
    interchangeable. Immutable after creation.
    """

    username: str
    password: str = field(default="", repr=False)
    authorities: frozenset[str] = frozenset()

    def has_authority(self, authority: str) -> bool:
        """Check if the principal was granted the exact authority."""
        return authority in self.authorities

    def has_role(self, role: str) -> bool:
        """Check for a role, with or without the ROLE_ prefix."""
        if not role.startswith(ROLE_PREFIX):
            role = ROLE_PREFIX + role
        return self.has_authority(role)

    def has_any_role(self, *roles: str) -> bool:
        """Check if the principal holds any of the given roles."""
        return any(self.has_role(r) for r in roles)
