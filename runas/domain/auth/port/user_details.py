"""User details lookup port."""

from abc import abstractmethod
from typing import Protocol

from runas.domain.auth.model.principal import Principal
from runas.domain.shared.port import Port


class UserDetailsService(Port, Protocol):
    """Looks up stored users by name for ``with_user_details`` declarations."""

    @abstractmethod
    def load_user_by_username(self, username: str) -> Principal:
        """Load a user.

        Raises:
            LookupError: If no user with that name exists.
        """
        ...
