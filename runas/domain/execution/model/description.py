"""Result-reporting tree nodes."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass(eq=False)
class Description:
    """A node of the reporting tree.

    A node with children is a suite; a node without is a test. Identity is
    by object, so several leaves may share class and method names.
    """

    display_name: str
    class_name: str | None = None
    method_name: str | None = None
    unique_id: str = ""
    children: list[Description] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.unique_id:
            self.unique_id = self.display_name

    @classmethod
    def suite(cls, name: str) -> Description:
        return cls(display_name=name)

    @classmethod
    def test(cls, class_name: str, method_name: str, unique_id: str = "") -> Description:
        return cls(
            display_name=f"{class_name}::{method_name}",
            class_name=class_name,
            method_name=method_name,
            unique_id=unique_id,
        )

    @property
    def is_suite(self) -> bool:
        return bool(self.children)

    @property
    def is_test(self) -> bool:
        return not self.is_suite

    def add_child(self, child: Description) -> None:
        self.children.append(child)

    def walk(self) -> Iterator[Description]:
        """Yield this node and its descendants depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def leaves(self) -> list[Description]:
        return [d for d in self.walk() if d.is_test]

    def find(self, unique_id: str) -> Description | None:
        """Find the first node with the given unique id."""
        return next((d for d in self.walk() if d.unique_id == unique_id), None)

    def test_count(self) -> int:
        return len(self.leaves())
