"""Declarations for authoring identity-expanded tests."""

from runas.authoring.container import ContainerConfiguration, container_configuration
from runas.authoring.mock_user import MockUserFactory, WithMockUser, with_mock_user
from runas.authoring.user_details import UserDetailsFactory, WithUserDetails, with_user_details

__all__ = [
    "ContainerConfiguration",
    "MockUserFactory",
    "UserDetailsFactory",
    "WithMockUser",
    "WithUserDetails",
    "container_configuration",
    "with_mock_user",
    "with_user_details",
]
