"""Context handed to verification hooks around each test invocation."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from runas.domain.auth.port.factory import FactoryResolver
from runas.domain.shared.error import DeclarationError

type ExpectationKey = tuple[type, str, str]


@dataclass(frozen=True)
class TestContext:
    """The test class, the method about to run, and how to build its factories.

    ``variant`` separates invocations of one method that the host runner
    repeats for reasons other than identity, such as its own parameters.
    Each variant gets its own expectations.
    """

    __test__ = False

    test_class: type
    method: Callable[..., Any] | None
    resolver: FactoryResolver
    variant: str = ""

    @property
    def key(self) -> ExpectationKey:
        if self.method is None:
            raise DeclarationError("No test method in this context")
        return (self.test_class, self.method.__name__, self.variant)
