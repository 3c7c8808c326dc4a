"""Action interpretation.

Actions come in three flavours: string names, calls to the built-in action
creators (assign, send, sendParent, forwardTo, stop, choose), and arbitrary
code. Built-ins keep a placeholder of their own type; everything else
becomes a NoopAction.
"""

from __future__ import annotations

from typing import Any, Callable, Union

from machine_extractor.extractor.errors import ShapeError
from machine_extractor.extractor.guards import get_cond
from machine_extractor.extractor.location import location_of
from machine_extractor.extractor.syntax import (
    Node,
    NodeKind,
    SourceTree,
    call_arguments,
    callee_name,
    describe,
    is_identifier_key,
    kind_of,
    list_elements,
    record_entries,
    string_value,
)
from machine_extractor.models.actions import (
    PARENT_TARGET,
    ActionRef,
    AssignAction,
    ChooseAction,
    ChooseBranch,
    ForwardToAction,
    NoopAction,
    SendAction,
    StopAction,
)

Actions = Union[ActionRef, list[ActionRef]]


def get_actions(source: SourceTree, node: Node) -> Actions:
    """Interpret a single action or an array of actions, keeping the shape."""
    if kind_of(node) is NodeKind.LIST:
        return [get_action(source, element) for element in list_elements(node)]
    return get_action(source, node)


def get_action(source: SourceTree, node: Node) -> ActionRef:
    kind = kind_of(node)

    if kind is NodeKind.STRING:
        return string_value(source, node)

    if kind in (NodeKind.NAME, NodeKind.MEMBER, NodeKind.FUNCTION):
        return NoopAction()

    if kind is NodeKind.CALL:
        name = callee_name(source, node)
        if name is None:
            raise ShapeError(
                "action callee must be an identifier or member expression",
                location_of(source, node),
            )
        builder = _BUILTINS.get(name)
        if builder is None:
            return NoopAction()
        return builder(source, node)

    raise ShapeError(
        "action must be a string literal, known action creator call, identifier, "
        f"member expression or function expression, got {describe(node)}",
        location_of(source, node) if node is not None else None,
    )


def _assign(source: SourceTree, node: Node) -> ActionRef:
    return AssignAction()


def _send(source: SourceTree, node: Node) -> ActionRef:
    return SendAction()


def _send_parent(source: SourceTree, node: Node) -> ActionRef:
    return SendAction(to=PARENT_TARGET)


def _stop(source: SourceTree, node: Node) -> ActionRef:
    return StopAction()


def _forward_to(source: SourceTree, node: Node) -> ActionRef:
    args = call_arguments(node)
    if not args or kind_of(args[0]) is not NodeKind.STRING:
        raise ShapeError(
            "forwardTo arguments[0] must be a string literal",
            location_of(source, args[0] if args else node),
        )
    return ForwardToAction(target=string_value(source, args[0]))


def _choose(source: SourceTree, node: Node) -> ActionRef:
    args = call_arguments(node)
    if not args or kind_of(args[0]) is not NodeKind.LIST:
        raise ShapeError(
            "choose arguments[0] must be an array",
            location_of(source, args[0] if args else node),
        )

    branches = []
    for index, element in enumerate(list_elements(args[0])):
        if kind_of(element) is not NodeKind.RECORD:
            raise ShapeError(
                f"choose arguments[0][{index}] must be an object",
                location_of(source, element if element is not None else args[0]),
            )
        branches.append(_choose_branch(source, element, index))

    return ChooseAction(branches=tuple(branches))


def _choose_branch(source: SourceTree, node: Node, index: int) -> ChooseBranch:
    fields: dict[str, Any] = {"actions": []}
    for entry in record_entries(node):
        if entry.key is None:
            raise ShapeError(
                f"choose arguments[0][{index}] properties must be key/value properties",
                location_of(source, entry.node),
            )
        if not is_identifier_key(entry.key):
            raise ShapeError(
                f"choose arguments[0][{index}] key must be an identifier",
                location_of(source, entry.key),
            )
        key = source.text_of(entry.key)
        if key == "actions":
            fields["actions"] = get_actions(source, entry.value)
        elif key == "cond":
            fields["cond"] = get_cond(source, entry.value)
    return ChooseBranch(**fields)


_BUILTINS: dict[str, Callable[[SourceTree, Node], ActionRef]] = {
    "assign": _assign,
    "send": _send,
    "sendParent": _send_parent,
    "forwardTo": _forward_to,
    "stop": _stop,
    "choose": _choose,
}
