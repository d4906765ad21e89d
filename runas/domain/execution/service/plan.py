"""Expansion of test methods into one child execution per declared identity."""

import logging
from collections.abc import Sequence

from runas.domain.execution.model.child import ChildExecution
from runas.domain.execution.model.descriptor import TestMethod
from runas.domain.execution.service.walker import (
    find_class_identity_nodes,
    find_identity_nodes,
)
from runas.domain.shared.service import Service

logger = logging.getLogger(__name__)


class ExecutionPlanBuilder(Service):
    """Builds the ordered child executions of a test class."""

    def build_children(
        self,
        test_class: type,
        base_methods: Sequence[TestMethod],
    ) -> list[ChildExecution]:
        """Expand each method by the identities declared for it.

        Class-level identities come first and apply to every method, followed
        by the method's own. A method without identities yields one child
        with no marker; otherwise it yields one child per identity, in
        discovery order.
        """
        class_nodes = find_class_identity_nodes(test_class)

        children: list[ChildExecution] = []
        for method in base_methods:
            nodes = class_nodes + find_identity_nodes(method.declarations)
            if not nodes:
                children.append(ChildExecution(method=method))
                continue

            logger.debug("Expanding %s into %d identities", method, len(nodes))
            children.extend(ChildExecution.of(method, node) for node in nodes)

        return children
