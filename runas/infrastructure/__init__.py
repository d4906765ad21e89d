from runas.infrastructure.resolver import ContainerFactoryResolver, resolver_for
from runas.infrastructure.user_details import InMemoryUserDetailsService, InMemoryUsersProvider

__all__ = [
    "ContainerFactoryResolver",
    "InMemoryUserDetailsService",
    "InMemoryUsersProvider",
    "resolver_for",
]
