"""Container-backed identity factory resolution."""

import inspect
import logging
from collections.abc import Sequence
from typing import Any, get_type_hints

from dishka import Container, Provider, make_container
from dishka.exceptions import DishkaError, NoFactoryError

from runas.authoring.container import ContainerConfiguration
from runas.domain.auth.port.factory import FactoryResolver
from runas.domain.auth.service.identity import BareFactoryResolver
from runas.domain.shared.error import ContainerUnavailableError, FactoryConstructionError
from runas.domain.shared.model.declaration import declarations_of
from runas.util.di.scope import Scope

logger = logging.getLogger(__name__)

AnyProvider = Provider | type[Provider]


class ContainerFactoryResolver(FactoryResolver):
    """Builds factories from a Dishka container created for one test class.

    A factory the container provides is returned as is. Otherwise it is
    constructed with each annotated constructor parameter taken from the
    container, so factories can depend on services without being registered
    themselves. The container is built lazily on first use and a failure to
    build it is reported as ``ContainerUnavailableError``.
    """

    def __init__(self, providers: Sequence[AnyProvider]) -> None:
        self._providers = tuple(providers)
        self._container: Container | None = None

    @property
    def container(self) -> Container:
        if self._container is None:
            instances = [p() if isinstance(p, type) else p for p in self._providers]
            try:
                self._container = make_container(*instances, scopes=Scope)  # type: ignore[arg-type]
            except DishkaError as e:
                raise ContainerUnavailableError(f"Failed to build container: {e}") from e
            logger.debug("Built container from %d providers", len(instances))
        return self._container

    def resolve(self, kind: type[Any]) -> Any:
        container = self.container
        try:
            return container.get(kind)
        except NoFactoryError:
            return self._autowire(container, kind)

    def close(self) -> None:
        if self._container is not None:
            self._container.close()
            self._container = None

    def _autowire(self, container: Container, kind: type[Any]) -> Any:
        hints = get_type_hints(kind.__init__)
        kwargs: dict[str, Any] = {}
        for name, param in inspect.signature(kind).parameters.items():
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            hint = hints.get(name)
            if hint is None:
                if param.default is param.empty:
                    raise FactoryConstructionError(
                        f"Cannot autowire parameter '{name}' of {kind.__qualname__}: no annotation"
                    )
                continue
            kwargs[name] = container.get(hint)
        return kind(**kwargs)


def resolver_for(test_class: type) -> FactoryResolver:
    """Choose how to build factories for a test class.

    Classes declaring ``container_configuration`` get a container-backed
    resolver; all others construct factories directly.
    """
    for declaration in declarations_of(test_class):
        if isinstance(declaration, ContainerConfiguration):
            return ContainerFactoryResolver(declaration.providers)
    return BareFactoryResolver()
