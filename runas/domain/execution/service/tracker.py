"""Verification that each expanded child ran under the identity declared for it.

The tracker runs the same discovery walk as the execution plan, resolves each
identity to the principal it should produce, and consumes one expectation per
invocation of the method. Expectations left over at the end of the class mean
the expansion and the verification disagreed.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import StrEnum

from runas.domain.auth import holder
from runas.domain.auth.model.principal import Principal
from runas.domain.auth.service.identity import create_security_context
from runas.domain.execution.model.context import ExpectationKey, TestContext
from runas.domain.execution.model.descriptor import qualified_name
from runas.domain.execution.service.walker import find_method_identity_nodes
from runas.domain.shared.error import DeclarationError, IdentityMismatchError, UnusedIdentitiesError
from runas.domain.shared.service import Service

logger = logging.getLogger(__name__)


class ExpectationState(StrEnum):
    UNBUILT = "unbuilt"
    BUILT = "built"
    DRAINING = "draining"
    EMPTY = "empty"


@dataclass
class MethodExpectations:
    """Principals still expected for one method, consumed front to back."""

    key: ExpectationKey
    pending: deque[Principal | None] = field(default_factory=deque)
    consumed: int = 0

    @property
    def state(self) -> ExpectationState:
        if self.pending:
            return ExpectationState.DRAINING if self.consumed else ExpectationState.BUILT
        return ExpectationState.EMPTY

    def pop(self) -> Principal | None:
        """Take the next expectation, or None once all are used."""
        if not self.pending:
            return None
        self.consumed += 1
        return self.pending.popleft()

    def __str__(self) -> str:
        test_class, method_name, variant = self.key
        name = f"{qualified_name(test_class)}:{method_name}"
        return f"{name}[{variant}]" if variant else name


class ExpectedIdentityTracker(Service):
    """Checks the ambient principal before every test method invocation."""

    _expectations: dict[ExpectationKey, MethodExpectations] = field(default_factory=dict, init=False)

    def state(self, test_class: type, method_name: str, variant: str = "") -> ExpectationState:
        expectations = self._expectations.get((test_class, method_name, variant))
        if expectations is None:
            return ExpectationState.UNBUILT
        return expectations.state

    def before_method(self, test_context: TestContext) -> None:
        """Consume one expectation and compare it with the ambient principal.

        Raises:
            IdentityMismatchError: If a principal is installed and differs
                from the expected one.
        """
        expectations = self._expectations.get(test_context.key)
        if expectations is None:
            expectations = self._build(test_context)
            self._expectations[test_context.key] = expectations

        expected = expectations.pop()
        actual = holder.current_principal()
        if actual is not None and actual != expected:
            raise IdentityMismatchError(actual=actual, expected=expected)

    def after_class(self, test_context: TestContext) -> None:
        """Fail once if any method still has unconsumed expectations.

        Tracked state is reset whether or not the check fails.

        Raises:
            UnusedIdentitiesError: Carrying the number of affected methods.
        """
        leftovers = [e for e in self._expectations.values() if e.pending]
        for expectations in leftovers:
            logger.warning("%d unused principals on %s", len(expectations.pending), expectations)
        self._expectations.clear()

        if leftovers:
            raise UnusedIdentitiesError(len(leftovers))
        logger.debug("All expected principals used for %s", qualified_name(test_context.test_class))

    def _build(self, test_context: TestContext) -> MethodExpectations:
        if test_context.method is None:
            raise DeclarationError("No test method in this context")
        nodes = find_method_identity_nodes(test_context.test_class, test_context.method)
        expectations = MethodExpectations(key=test_context.key)
        for node in nodes:
            try:
                context = create_security_context(node, test_context.resolver)
            except Exception as e:
                # The child for this node fails to install with the same error
                # and never reaches before_method
                logger.warning("No expected principal for %s on %s: %s", node, expectations, e)
                continue
            expectations.pending.append(context.principal)
        return expectations
