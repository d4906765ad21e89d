"""Declarations: explicit, decorator-applied metadata for test classes and methods.

A declaration is a frozen dataclass instance. Applying one as a decorator
attaches it to the decorated function or class; applying one to another
declaration *class* makes it a meta-declaration of that kind::

    @with_mock_user(roles=("ADMIN",))
    @dataclass(frozen=True)
    class WithAdmin(Declaration):
        pass

    class TestAccounts:
        @WithAdmin()
        def test_close_account(self) -> None: ...

Applying the same kind twice to one target folds both into a ``Repeated``
container, so a target never holds two direct declarations of one kind.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from runas.domain.shared.error import DeclarationError

if TYPE_CHECKING:
    from runas.domain.auth.port.factory import IdentityFactory

DECLARATIONS_ATTR = "__runas_declarations__"


@dataclass(frozen=True)
class Declaration:
    """Base for all declarations."""

    def __call__[T](self, target: T) -> T:
        """Attach this declaration to a function or class."""
        return declare(target, self)

    @property
    def kind(self) -> type[Declaration]:
        return type(self)

    @property
    def meta_declarations(self) -> tuple[Declaration, ...]:
        """Declarations attached to this declaration's kind."""
        return declarations_of(type(self))


@dataclass(frozen=True)
class IdentityMarker(Declaration):
    """Base for declarations that designate a simulated principal.

    Subclasses name the factory that turns an instance into a security
    context with a class keyword::

        @dataclass(frozen=True)
        class WithMockUser(IdentityMarker, factory=MockUserFactory):
            username: str = "user"
    """

    identity_factory: ClassVar[type[IdentityFactory] | None] = None

    def __init_subclass__(cls, factory: type[IdentityFactory] | None = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if factory is not None:
            cls.identity_factory = factory


@dataclass(frozen=True)
class Repeated(Declaration):
    """Container for a kind applied more than once to the same target."""

    value: tuple[Declaration, ...]

    def __post_init__(self) -> None:
        if not self.value:
            raise DeclarationError("A repeated declaration needs at least one entry")


def is_identity_marker(node: Declaration) -> bool:
    """Check whether the node's kind names an identity factory."""
    return getattr(type(node), "identity_factory", None) is not None


def declarations_of(target: Callable[..., Any] | type) -> tuple[Declaration, ...]:
    """Return the declarations attached directly to a target, in source order.

    Only the target's own ``__dict__`` is consulted, so a class never reports
    declarations made on its bases.
    """
    return tuple(vars(target).get(DECLARATIONS_ATTR, ()))


def _kind_of(node: Declaration) -> type[Declaration]:
    if isinstance(node, Repeated):
        return type(node.value[0])
    return type(node)


def declare[T](target: T, declaration: Declaration) -> T:
    """Attach a declaration to a function or class and return the target.

    Decorators are applied bottom-up, so each new declaration goes in front to
    keep source order. A second declaration of an already-present kind is
    folded, together with the existing ones, into a ``Repeated`` container at
    the front.
    """
    if declaration is None:
        raise DeclarationError("The declaration provided is None")
    if not isinstance(declaration, Declaration):
        raise DeclarationError(f"Not a declaration: {declaration!r}")

    existing = list(declarations_of(target))  # type: ignore[arg-type]
    kind = type(declaration)
    for index, node in enumerate(existing):
        if _kind_of(node) is not kind or isinstance(declaration, Repeated):
            continue
        siblings = node.value if isinstance(node, Repeated) else (node,)
        del existing[index]
        existing.insert(0, Repeated(value=(declaration, *siblings)))
        break
    else:
        existing.insert(0, declaration)

    setattr(target, DECLARATIONS_ATTR, tuple(existing))
    return target
