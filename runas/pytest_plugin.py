"""pytest integration.

Enable it from a conftest::

    pytest_plugins = ["runas.pytest_plugin"]

Each test decorated (directly, through its class, or through a composed
declaration) with identity declarations is parametrized with one case per
identity, in declaration order. The identity is installed before the test
and cleared after it. With verification on, the installed principal is
checked before every test, and the end of each class fails if any expected
identity never ran.
"""

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from types import ModuleType
from typing import Any

import pytest

from runas.application.log_principal import log_principal
from runas.config import Config, configure_logging
from runas.domain.auth import holder
from runas.domain.auth.model.context import SecurityContext
from runas.domain.auth.port.factory import FactoryResolver
from runas.domain.execution.model.child import ChildExecution
from runas.domain.execution.model.context import TestContext
from runas.domain.execution.model.descriptor import TestMethod, qualified_name
from runas.domain.execution.service import ExpectedIdentityTracker, IdentityInstaller
from runas.domain.execution.service.walker import find_method_identity_nodes
from runas.domain.shared.model.declaration import IdentityMarker
from runas.infrastructure.resolver import resolver_for

logger = logging.getLogger(__name__)

IDENTITY_FIXTURE = "runas_identity"

settings_key = pytest.StashKey[Config]()
incomplete_key = pytest.StashKey[set[Any]]()


@dataclass
class OwnerSession:
    """Everything shared by the tests of one class (or one module)."""

    owner: type | ModuleType
    resolver: FactoryResolver
    installer: IdentityInstaller
    tracker: ExpectedIdentityTracker | None


def _owner_of(item: pytest.Item) -> type | ModuleType | None:
    return getattr(item, "cls", None) or getattr(item, "module", None)


def _plain_function(function: Callable[..., Any]) -> Callable[..., Any]:
    return getattr(function, "__func__", function)


def _variant_of(item: pytest.Item) -> str:
    """The test's own parameters, so each combination is verified separately."""
    callspec = getattr(item, "callspec", None)
    if callspec is None:
        return ""
    names = sorted(name for name in callspec.params if name != IDENTITY_FIXTURE)
    return ",".join(f"{name}={callspec.params[name]!r}" for name in names)


def pytest_configure(config: pytest.Config) -> None:
    settings = Config()
    configure_logging(settings.logging)
    config.stash[settings_key] = settings
    config.stash[incomplete_key] = set()


def pytest_generate_tests(metafunc: pytest.Metafunc) -> None:
    if IDENTITY_FIXTURE not in metafunc.fixturenames:
        return
    owner = metafunc.cls or metafunc.module
    nodes = find_method_identity_nodes(owner, metafunc.function)  # type: ignore[arg-type]
    if nodes:
        metafunc.parametrize(IDENTITY_FIXTURE, nodes, indirect=True, ids=[str(n) for n in nodes])


def pytest_deselected(items: list[pytest.Item]) -> None:
    if not items:
        return
    incomplete = items[0].config.stash[incomplete_key]
    for item in items:
        owner = _owner_of(item)
        if owner is not None:
            incomplete.add(owner)


@pytest.hookimpl(wrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo[None]) -> Iterator[Any]:
    report = yield
    # A test that never reached its body leaves its expected identity unused
    if report.when == "setup" and not report.passed:
        owner = _owner_of(item)
        if owner is not None:
            item.config.stash[incomplete_key].add(owner)
    return report


def _owner_session(request: pytest.FixtureRequest, owner: type | ModuleType) -> Iterator[OwnerSession]:
    settings = request.config.stash[settings_key]
    resolver = resolver_for(owner)  # type: ignore[arg-type]
    session = OwnerSession(
        owner=owner,
        resolver=resolver,
        installer=IdentityInstaller(resolver=resolver),
        tracker=ExpectedIdentityTracker() if settings.verify else None,
    )
    try:
        yield session
        if session.tracker is not None:
            stopped = request.session.shouldstop or request.session.shouldfail
            if stopped or owner in request.config.stash[incomplete_key]:
                logger.info("Not every test of %s ran, skipping the unused identity check", qualified_name(owner))
            else:
                session.tracker.after_class(TestContext(owner, None, resolver))  # type: ignore[arg-type]
    finally:
        resolver.close()


@pytest.fixture(scope="class")
def runas_class_session(request: pytest.FixtureRequest) -> Iterator[OwnerSession]:
    yield from _owner_session(request, request.cls)


@pytest.fixture(scope="module")
def runas_module_session(request: pytest.FixtureRequest) -> Iterator[OwnerSession]:
    yield from _owner_session(request, request.module)


@pytest.fixture(autouse=True)
def runas_identity(request: pytest.FixtureRequest) -> Iterator[SecurityContext | None]:
    """Install the identity this test case was expanded for.

    Yields the installed context, or None for a test without identities.
    """
    if request.cls is not None:
        session: OwnerSession = request.getfixturevalue("runas_class_session")
    else:
        session = request.getfixturevalue("runas_module_session")

    marker: IdentityMarker | None = getattr(request, "param", None)
    function = _plain_function(request.function)
    child = ChildExecution(method=TestMethod(owner=session.owner, function=function), marker=marker)  # type: ignore[arg-type]

    # Expectations are consumed in order, so a class with cases that never ran
    # can no longer be checked case by case
    tracker = None if session.owner in request.config.stash[incomplete_key] else session.tracker

    with session.installer.installed(child) as context:
        if tracker is not None:
            tracker.before_method(
                TestContext(session.owner, function, session.resolver, _variant_of(request.node))  # type: ignore[arg-type]
            )
        if request.config.stash[settings_key].log_principal:
            log_principal(request.node.nodeid)
        yield context


@pytest.fixture
def security_context(runas_identity: SecurityContext | None) -> SecurityContext:
    """The security context the test runs under, empty when it has no identity."""
    return holder.get_context()
