"""Class-level declaration of the Dishka providers identity factories may use."""

from __future__ import annotations

from dataclasses import dataclass

from dishka import Provider

from runas.domain.shared.error import ConfigurationError
from runas.domain.shared.model.declaration import Declaration


@dataclass(frozen=True)
class ContainerConfiguration(Declaration):
    """Providers for the container built once per test class."""

    providers: tuple[Provider | type[Provider], ...]

    def __post_init__(self) -> None:
        if not self.providers:
            raise ConfigurationError("container_configuration() needs at least one provider")


def container_configuration(*providers: Provider | type[Provider]) -> ContainerConfiguration:
    """Give identity factories of a test class access to a Dishka container.

    Usage:
        @container_configuration(UsersProvider)
        class TestAccounts:
            @with_user_details("alice")
            def test_close_account(self) -> None: ...
    """
    return ContainerConfiguration(providers=tuple(providers))
