"""Custom Dishka scopes for runas."""

from dishka import BaseScope, new_scope


class Scope(BaseScope):  # type: ignore[misc]  # BaseScope is designed to be subclassed
    """runas dependency injection scopes.

    - CLASS: One container per test class; everything an identity factory
      needs is provided at this scope.
    """

    CLASS = new_scope("CLASS")
