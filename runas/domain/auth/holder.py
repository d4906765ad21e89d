"""Process-wide ambient security state.

A single mutable cell. Only the identity installer writes it, with exactly
one install/clear bracket per child execution, and children run one at a
time, so no locking is done here. Running children of one class in parallel
would need a per-thread or per-task cell instead.
"""

from runas.domain.auth.model.context import SecurityContext
from runas.domain.auth.model.principal import Principal

_context: SecurityContext | None = None


def peek_context() -> SecurityContext | None:
    """Return the installed context, or None when the cell is clear."""
    return _context


def get_context() -> SecurityContext:
    """Return the installed context, or an empty one when the cell is clear.

    The empty context is not stored.
    """
    return _context if _context is not None else SecurityContext.empty()


def set_context(context: SecurityContext) -> None:
    global _context
    if context is None:
        raise ValueError("Only non-None SecurityContext instances are permitted")
    _context = context


def clear_context() -> None:
    global _context
    _context = None


def current_principal() -> Principal | None:
    """The ambient principal, if one is authenticated."""
    return get_context().principal
