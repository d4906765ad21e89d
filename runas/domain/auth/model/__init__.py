"""Auth domain models."""

from runas.domain.auth.model.context import Authentication, SecurityContext
from runas.domain.auth.model.identity import Anonymous, Identity
from runas.domain.auth.model.principal import ROLE_PREFIX, Principal

__all__ = [
    "ROLE_PREFIX",
    "Anonymous",
    "Authentication",
    "Identity",
    "Principal",
    "SecurityContext",
]
