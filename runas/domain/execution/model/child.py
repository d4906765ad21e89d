"""Child executions: one test method paired with at most one identity."""

from __future__ import annotations

from dataclasses import dataclass

from runas.domain.execution.model.descriptor import TestMethod
from runas.domain.shared.error import DeclarationError
from runas.domain.shared.model.declaration import IdentityMarker, is_identity_marker


@dataclass(frozen=True)
class ChildExecution:
    """A single runnable (method, identity) pairing.

    A child without a marker is the method run unexpanded. Two children of
    the same method compare equal only when their markers are equal.
    """

    method: TestMethod
    marker: IdentityMarker | None = None

    def __post_init__(self) -> None:
        if self.method is None:
            raise DeclarationError("The method provided is None")
        if self.marker is not None and not is_identity_marker(self.marker):
            raise DeclarationError(f"Not an identity declaration: {self.marker!r}")

    @classmethod
    def of(cls, method: TestMethod, marker: IdentityMarker) -> ChildExecution:
        """Pair a method with an identity declaration, which must not be None."""
        if marker is None:
            raise DeclarationError("The identity declaration provided is None")
        return cls(method=method, marker=marker)

    @property
    def test_class(self) -> type:
        return self.method.owner

    @property
    def name(self) -> str:
        return self.method.name

    @property
    def unique_key(self) -> str:
        """Unique id of this child's leaf in the reporting tree."""
        if self.marker is None:
            return f"{self.method.class_name}::{self.name}"
        return f"{self.name}{self.marker}"

    @property
    def display_name(self) -> str:
        if self.marker is None:
            return self.name
        return f"{self.name}[{self.marker}]"

    def __str__(self) -> str:
        return self.display_name
