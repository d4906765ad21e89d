"""Runner integration: expands a test class, runs its children, reports results.

``IdentityRunner`` exposes the operations a host test runner calls in order:
``get_children`` to plan, ``get_description`` to announce the reporting tree,
and ``run_child`` once per child. ``run`` does all of it for one class and
finishes with the unused-identity check.
"""

import logging
from dataclasses import dataclass, field

from runas.application.log_principal import logging_principal
from runas.domain.auth.port.factory import FactoryResolver
from runas.domain.execution.model.child import ChildExecution
from runas.domain.execution.model.context import TestContext
from runas.domain.execution.model.description import Description
from runas.domain.execution.model.descriptor import TestClass, TestMethod
from runas.domain.execution.port.reporter import Reporter
from runas.domain.execution.service import (
    DescriptionTree,
    ExecutionPlanBuilder,
    ExpectedIdentityTracker,
    IdentityInstaller,
)
from runas.infrastructure.resolver import resolver_for

logger = logging.getLogger(__name__)

__all__ = [
    "IdentityRunner",
    "RecordingReporter",
    "Reporter",
    "ReportedEvent",
    "TestClass",
    "TestMethod",
]


@dataclass(frozen=True)
class ReportedEvent:
    kind: str  # "started", "passed", "failed" or "errored"
    description: Description
    error: BaseException | None = None


@dataclass
class RecordingReporter(Reporter):
    """Keeps every reported event in order."""

    events: list[ReportedEvent] = field(default_factory=list)

    def started(self, description: Description) -> None:
        self.events.append(ReportedEvent("started", description))

    def passed(self, description: Description) -> None:
        self.events.append(ReportedEvent("passed", description))

    def failed(self, description: Description, error: AssertionError) -> None:
        self.events.append(ReportedEvent("failed", description, error))

    def errored(self, description: Description, error: BaseException) -> None:
        self.events.append(ReportedEvent("errored", description, error))

    def of_kind(self, kind: str) -> list[ReportedEvent]:
        return [e for e in self.events if e.kind == kind]

    @property
    def passed_ids(self) -> list[str]:
        return [e.description.unique_id for e in self.of_kind("passed")]

    @property
    def failures(self) -> list[ReportedEvent]:
        return self.of_kind("failed") + self.of_kind("errored")


class IdentityRunner:
    """Runs every test method of a class once per identity declared for it."""

    def __init__(
        self,
        test_class: type,
        *,
        resolver: FactoryResolver | None = None,
        verify: bool = True,
        log_principal: bool = False,
    ) -> None:
        self.test_class = TestClass(test_class)
        self.resolver = resolver if resolver is not None else resolver_for(test_class)
        self.log_principal = log_principal

        self._plan = ExecutionPlanBuilder()
        self._tree = DescriptionTree()
        self._installer = IdentityInstaller(resolver=self.resolver)
        self._tracker = ExpectedIdentityTracker() if verify else None

        self._children: list[ChildExecution] | None = None
        self._description: Description | None = None
        self._leaves: dict[int, Description] = {}

    def get_children(self) -> list[ChildExecution]:
        """The expanded children, computed once and kept."""
        if self._children is None:
            self._children = self._plan.build_children(self.test_class.cls, self.test_class.methods())
        return self._children

    def get_description(self) -> Description:
        """The reporting tree, with one parent per expanded method."""
        if self._description is None:
            children = self.get_children()
            self._description = self._tree.describe(self.test_class.name, children)
            for child in children:
                self._leaves[id(child)] = self._claim_leaf(self._description, child)
        return self._description

    def describe_child(self, child: ChildExecution) -> Description:
        return self._tree.describe_one(child)

    def run_child(self, child: ChildExecution, reporter: Reporter) -> None:
        """Run one child under its identity and report the outcome.

        With verification on, the installed principal is checked against the
        expected one before the test body runs.
        """
        self.get_description()
        description = self._leaves.get(id(child)) or self.describe_child(child)

        def body() -> None:
            if self._tracker is not None:
                context = TestContext(self.test_class.cls, child.method.function, self.resolver)
                self._tracker.before_method(context)
            child.method.invoke()

        if self.log_principal:
            body = logging_principal(body, child.display_name)
        self._installer.run_child(child, description, body, reporter)

    def run(self, reporter: Reporter) -> Description:
        """Run every child of the class, then check for unused identities.

        An unused-identity failure is reported against the class's suite.
        The resolver is closed at the end whatever the outcome.
        """
        description = self.get_description()
        logger.debug("Running %s (%d tests)", self.test_class.name, description.test_count())
        try:
            for child in self.get_children():
                self.run_child(child, reporter)
            if self._tracker is not None:
                try:
                    self._tracker.after_class(TestContext(self.test_class.cls, None, self.resolver))
                except AssertionError as e:
                    reporter.failed(description, e)
        finally:
            self.resolver.close()
        return description

    def _claim_leaf(self, root: Description, child: ChildExecution) -> Description:
        unique_id = self.describe_child(child).unique_id
        claimed = {id(d) for d in self._leaves.values()}
        for node in root.leaves():
            if node.unique_id == unique_id and id(node) not in claimed:
                return node
        return self.describe_child(child)
