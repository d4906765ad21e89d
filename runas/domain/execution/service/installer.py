"""Installs a child's identity into ambient state for exactly one run."""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from runas.domain.auth import holder
from runas.domain.auth.model.context import SecurityContext
from runas.domain.auth.port.factory import FactoryResolver
from runas.domain.auth.service.identity import create_security_context
from runas.domain.execution.model.child import ChildExecution
from runas.domain.execution.model.description import Description
from runas.domain.execution.port.reporter import Reporter
from runas.domain.shared.service import Service

logger = logging.getLogger(__name__)


class IdentityInstaller(Service):
    """Brackets each child execution with install and clear of its identity."""

    resolver: FactoryResolver

    @contextmanager
    def installed(self, child: ChildExecution) -> Iterator[SecurityContext | None]:
        """Install the child's identity, if any, and always clear it on exit.

        Yields the installed context, or None for a child without identity.
        Factory failures propagate after the ambient state is cleared.
        """
        try:
            if child.marker is not None:
                context = create_security_context(child.marker, self.resolver)
                holder.set_context(context)
                logger.debug("Installed %s for %s", context.identity, child)
            yield holder.peek_context()
        finally:
            holder.clear_context()

    def run_child(
        self,
        child: ChildExecution,
        description: Description,
        body: Callable[[], None],
        reporter: Reporter,
    ) -> None:
        """Run the body once under the child's identity and report the outcome.

        Assertion failures are reported as failures, any other exception
        (including a factory that cannot be built) as an error. Other
        children are unaffected either way.
        """
        reporter.started(description)
        try:
            with self.installed(child):
                body()
        except AssertionError as e:
            reporter.failed(description, e)
        except Exception as e:
            logger.debug("Child %s raised %s", child, type(e).__name__)
            reporter.errored(description, e)
        else:
            reporter.passed(description)
