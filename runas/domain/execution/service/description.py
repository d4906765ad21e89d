"""Reporting tree for expanded child executions."""

from collections.abc import Sequence

from runas.domain.execution.model.child import ChildExecution
from runas.domain.execution.model.description import Description
from runas.domain.shared.service import Service


class DescriptionTree(Service):
    """Groups the children of one method under a single suite node.

    A method expanded into N identities reports as one suite with N leaves;
    a method that was not expanded reports as a single leaf.
    """

    def describe(self, suite_name: str, children: Sequence[ChildExecution]) -> Description:
        root = Description.suite(suite_name)
        parents: dict[str, Description] = {}

        for child in children:
            if child.marker is None:
                root.add_child(self.describe_one(child))
                continue

            parent = parents.get(child.name)
            if parent is None:
                parent = self.describe_method(child)
                parents[child.name] = parent
                root.add_child(parent)
            parent.add_child(self.describe_one(child))

        return root

    def describe_method(self, child: ChildExecution) -> Description:
        """The method's own leaf, ignoring any identity."""
        return Description.test(child.method.class_name, child.name)

    def describe_one(self, child: ChildExecution) -> Description:
        """Describe a single child.

        A child with an identity keeps the method's class and method names,
        but is keyed by the method name plus the identity's string form so
        siblings stay distinguishable.
        """
        if child.marker is None:
            return self.describe_method(child)
        return Description.test(child.method.class_name, child.name, unique_id=child.unique_key)
