"""In-memory UserDetailsService and a Dishka provider exposing it."""

import logging
from collections.abc import Iterable

from dishka import DEFAULT_COMPONENT, Provider, provide

from runas.domain.auth.model.principal import Principal
from runas.domain.auth.port.user_details import UserDetailsService
from runas.util.di.scope import Scope

logger = logging.getLogger(__name__)


class InMemoryUserDetailsService(UserDetailsService):
    """Users held in a dict keyed by username."""

    def __init__(self, users: Iterable[Principal] = ()) -> None:
        self._users: dict[str, Principal] = {}
        for user in users:
            self.create_user(user)

    def create_user(self, user: Principal) -> None:
        if user.username in self._users:
            raise ValueError(f"User '{user.username}' already exists")
        self._users[user.username] = user

    def user_exists(self, username: str) -> bool:
        return username in self._users

    def load_user_by_username(self, username: str) -> Principal:
        user = self._users.get(username)
        if user is None:
            logger.debug("No user named %r among %d users", username, len(self._users))
            raise LookupError(f"User '{username}' not found")
        return user


class InMemoryUsersProvider(Provider):
    """Provides an ``InMemoryUserDetailsService`` holding the given users.

    Pass ``component`` to register it under a named component, for tests
    that select among several services with ``with_user_details(component=...)``.
    """

    scope = Scope.CLASS

    def __init__(self, *users: Principal, component: str = DEFAULT_COMPONENT) -> None:
        super().__init__(component=component)
        self._users = users

    @provide
    def user_details_service(self) -> UserDetailsService:
        return InMemoryUserDetailsService(self._users)
