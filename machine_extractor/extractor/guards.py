"""Guard (``cond``) interpretation."""

from __future__ import annotations

from machine_extractor.extractor.errors import ShapeError
from machine_extractor.extractor.location import location_of
from machine_extractor.extractor.syntax import (
    Node,
    NodeKind,
    SourceTree,
    describe,
    kind_of,
    string_value,
)
from machine_extractor.models.actions import AlwaysTrueGuard, GuardRef

_OPAQUE_GUARDS = (NodeKind.NAME, NodeKind.MEMBER, NodeKind.FUNCTION)


def get_cond(source: SourceTree, node: Node) -> GuardRef:
    """
    Classify a guard expression.

    String literals keep their name. Identifiers, member expressions and
    functions become an AlwaysTrueGuard placeholder.
    """
    kind = kind_of(node)
    if kind is NodeKind.STRING:
        return string_value(source, node)
    if kind in _OPAQUE_GUARDS:
        return AlwaysTrueGuard()
    raise ShapeError(
        "cond must be a string literal, function expression, identifier or "
        f"member expression, got {describe(node)}",
        location_of(source, node) if node is not None else None,
    )
