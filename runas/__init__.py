"""Run each test once per declared identity and check it ran as that identity."""

from runas.application.runner import IdentityRunner, RecordingReporter
from runas.authoring import (
    container_configuration,
    with_mock_user,
    with_user_details,
)
from runas.domain.auth import holder
from runas.domain.auth.model import Principal, SecurityContext
from runas.domain.shared.model.declaration import Declaration, IdentityMarker
from runas.infrastructure import InMemoryUserDetailsService, InMemoryUsersProvider

__all__ = [
    "Declaration",
    "IdentityMarker",
    "IdentityRunner",
    "InMemoryUserDetailsService",
    "InMemoryUsersProvider",
    "Principal",
    "RecordingReporter",
    "SecurityContext",
    "container_configuration",
    "holder",
    "with_mock_user",
    "with_user_details",
]
