"""Turning identity declarations into security contexts."""

import logging
from typing import Any

from runas.domain.auth.model.context import SecurityContext
from runas.domain.auth.port.factory import FactoryResolver, IdentityFactory
from runas.domain.shared.error import ContainerUnavailableError, FactoryConstructionError
from runas.domain.shared.model.declaration import IdentityMarker

logger = logging.getLogger(__name__)


class BareFactoryResolver(FactoryResolver):
    """Constructs factories with their no-argument constructor."""

    def resolve(self, kind: type[Any]) -> Any:
        return kind()


_BARE = BareFactoryResolver()


def construct_factory(kind: type[IdentityFactory], resolver: FactoryResolver) -> IdentityFactory:
    """Construct a factory, falling back to bare construction without a container.

    Raises:
        FactoryConstructionError: If construction fails for any reason other
            than the container being unavailable.
    """
    try:
        return resolver.resolve(kind)
    except ContainerUnavailableError as e:
        logger.debug("Container unavailable for %s (%s), constructing directly", kind.__qualname__, e)
    except FactoryConstructionError:
        raise
    except Exception as e:
        raise FactoryConstructionError(f"Unable to construct an instance of {kind.__qualname__}") from e

    try:
        return _BARE.resolve(kind)
    except Exception as e:
        raise FactoryConstructionError(f"Unable to construct an instance of {kind.__qualname__}") from e


def create_security_context(marker: IdentityMarker, resolver: FactoryResolver) -> SecurityContext:
    """Build the context for an identity declaration.

    A factory that returns no context yields an empty one.
    """
    factory_kind = type(marker).identity_factory
    if factory_kind is None:
        raise FactoryConstructionError(f"{type(marker).__qualname__} names no identity factory")

    factory = construct_factory(factory_kind, resolver)
    context = factory.create_security_context(marker)
    if context is None:
        return SecurityContext.empty()
    return context
