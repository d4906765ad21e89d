"""Discovery of identity declarations in a declaration graph.

Both the execution plan and the expected-identity tracker discover identities
through ``find_method_identity_nodes``. They must agree on order and count,
so neither builds its own walk.

Walk rules, per node:

1. An identity marker is yielded and not recursed into.
2. A container yields the identities found in each nested node, in order.
   Its own meta-declarations are not visited.
3. Anything else is recursed through its meta-declarations, in declared
   order, skipping declarations already visited in this walk.

The visited set is scoped to one root, so a self-referencing kind seen under
one root does not hide identities reachable from another root.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from runas.domain.shared.model.declaration import (
    Declaration,
    IdentityMarker,
    declarations_of,
    is_identity_marker,
)

logger = logging.getLogger(__name__)

CONTAINER_ATTR = "value"


def unwrap_container(node: Declaration) -> tuple[Declaration, ...]:
    """Return the nested declarations of a container node.

    A container is any declaration whose ``value`` is a non-empty sequence of
    declarations. Anything else, including a missing ``value`` or one that
    raises when read, yields an empty tuple and the node is treated as a
    plain declaration.
    """
    try:
        value = getattr(node, CONTAINER_ATTR, None)
    except Exception as e:
        logger.debug("Treating %s as a plain declaration: reading value raised %r", type(node).__qualname__, e)
        return ()
    if not isinstance(value, (list, tuple)):
        return ()
    if not all(isinstance(item, Declaration) for item in value):
        return ()
    return tuple(value)


def _walk(node: Declaration, seen: set[Declaration]) -> list[IdentityMarker]:
    if is_identity_marker(node):
        return [node]  # type: ignore[list-item]

    nested = unwrap_container(node)
    if nested:
        found: list[IdentityMarker] = []
        for child in nested:
            found.extend(_walk(child, seen))
        return found

    found = []
    for meta in node.meta_declarations:
        if meta in seen:
            continue
        seen.add(meta)
        found.extend(_walk(meta, seen))
    return found


def find_identity_nodes_in(node: Declaration) -> list[IdentityMarker]:
    """Find every identity declaration reachable from a single root."""
    return _walk(node, set())


def find_identity_nodes(roots: Iterable[Declaration]) -> list[IdentityMarker]:
    """Find identity declarations under each root, concatenated in root order."""
    found: list[IdentityMarker] = []
    for root in roots:
        found.extend(find_identity_nodes_in(root))
    return found


def find_class_identity_nodes(test_class: type) -> list[IdentityMarker]:
    """Identity declarations made on a test class itself."""
    return find_identity_nodes(declarations_of(test_class))


def find_method_identity_nodes(
    test_class: type,
    method: Callable[..., Any],
) -> list[IdentityMarker]:
    """Identities a method runs under: the class's, then the method's own."""
    return find_class_identity_nodes(test_class) + find_identity_nodes(declarations_of(method))
