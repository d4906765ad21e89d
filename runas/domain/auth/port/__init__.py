from runas.domain.auth.port.factory import FactoryResolver, IdentityFactory
from runas.domain.auth.port.user_details import UserDetailsService

__all__ = ["FactoryResolver", "IdentityFactory", "UserDetailsService"]
