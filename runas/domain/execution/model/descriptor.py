"""Descriptors for the test classes and methods a host runner discovers."""

from __future__ import annotations

import inspect
from types import ModuleType
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from runas.domain.shared.error import DeclarationError
from runas.domain.shared.model.declaration import Declaration, declarations_of

TEST_PREFIX = "test"


def qualified_name(owner: type | ModuleType) -> str:
    """Dotted name of a test class, or of the module holding module-level tests."""
    if isinstance(owner, ModuleType):
        return owner.__name__
    return f"{owner.__module__}.{owner.__qualname__}"


@dataclass(frozen=True)
class TestMethod:
    """One test function of a test class."""

    __test__ = False

    owner: type
    function: Callable[..., Any]

    def __post_init__(self) -> None:
        if self.function is None:
            raise DeclarationError("The method provided is None")
        if self.owner is None:
            raise DeclarationError("The owning class provided is None")

    @property
    def name(self) -> str:
        return self.function.__name__

    @property
    def class_name(self) -> str:
        return qualified_name(self.owner)

    @property
    def declarations(self) -> tuple[Declaration, ...]:
        return declarations_of(self.function)

    def invoke(self) -> None:
        """Run the test body on a fresh instance of the owning class.

        ``setup_method``/``teardown_method`` hooks run around the body when
        the class defines them; teardown runs even when the body fails.
        """
        instance = self.owner()
        setup = getattr(instance, "setup_method", None)
        teardown = getattr(instance, "teardown_method", None)
        if setup is not None:
            setup(self.function)
        try:
            getattr(instance, self.name)()
        finally:
            if teardown is not None:
                teardown(self.function)

    def __str__(self) -> str:
        return f"{self.class_name}.{self.name}"


@dataclass(frozen=True)
class TestClass:
    """A test class and the declarations made on it."""

    __test__ = False

    cls: type

    @property
    def name(self) -> str:
        return qualified_name(self.cls)

    @property
    def declarations(self) -> tuple[Declaration, ...]:
        return declarations_of(self.cls)

    def methods(self) -> list[TestMethod]:
        """Test methods in definition order, including inherited ones."""
        seen: set[str] = set()
        methods: list[TestMethod] = []
        for klass in reversed(self.cls.__mro__):
            for name, member in vars(klass).items():
                if not name.startswith(TEST_PREFIX) or not inspect.isfunction(member):
                    continue
                if name in seen:
                    continue
                seen.add(name)
                methods.append(TestMethod(owner=self.cls, function=getattr(self.cls, name)))
        return methods
