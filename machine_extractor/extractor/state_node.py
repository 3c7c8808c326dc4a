"""Recursive descent over state node object literals.

Each call returns the node's config together with the metadata of the node
and all of its descendants (preorder). Nothing is collected through shared
state, so any sub-tree can be parsed on its own.
"""

from __future__ import annotations

from typing import Any, Callable, NamedTuple, Sequence

from machine_extractor.extractor.actions import get_actions
from machine_extractor.extractor.errors import SchemaError, ShapeError
from machine_extractor.extractor.invoke import get_invoke_config
from machine_extractor.extractor.location import location_of
from machine_extractor.extractor.syntax import (
    Node,
    NodeKind,
    SourceTree,
    describe,
    is_identifier_key,
    kind_of,
    record_entries,
    string_value,
)
from machine_extractor.extractor.transitions import (
    get_delayed_transitions,
    get_transition_config_or_target,
    get_transitions_config,
)
from machine_extractor.models.machine import StateMeta, StateNodeConfig, TargetRef


class StateNodeResult(NamedTuple):
    """Config of a state node plus metadata for it and its descendants."""

    config: StateNodeConfig
    states_meta: list[StateMeta]


class _Partial(NamedTuple):
    config: dict[str, Any]
    targets: Sequence[TargetRef] = ()
    child_states_meta: Sequence[StateMeta] = ()


_NOTHING = _Partial(config={})


def parse_state_node(
    source: SourceTree,
    node: Node,
    path: tuple[str, ...] = (),
) -> StateNodeResult:
    """
    Build the config and metadata of one state node.

    Args:
        source: Parsed source the node belongs to
        node: Object literal defining the state node
        path: Keys from the root state node to this one

    Returns:
        StateNodeResult with this node's StateMeta first, followed by its
        descendants in preorder

    Raises:
        ExtractionError: On the first malformed entry
    """
    config: StateNodeConfig = {}
    targets: list[TargetRef] = []
    child_states_meta: list[StateMeta] = []

    for entry in record_entries(node):
        if entry.key is None:
            raise SchemaError(
                "properties on a state node must be key/value properties, "
                f"got {describe(entry.node)}",
                location_of(source, entry.node),
            )
        partial = parse_state_node_property(source, entry.key, entry.value, path)
        config.update(partial.config)
        targets.extend(partial.targets)
        child_states_meta.extend(partial.child_states_meta)

    meta = StateMeta(
        path=tuple(path),
        location=location_of(source, node),
        targets=tuple(targets),
    )
    return StateNodeResult(config=config, states_meta=[meta, *child_states_meta])


def parse_state_node_property(
    source: SourceTree,
    key: Node,
    value: Node,
    path: tuple[str, ...],
) -> _Partial:
    """Interpret one ``key: value`` entry of a state node."""
    if not is_identifier_key(key):
        raise SchemaError(
            f"property key of state node must be an identifier, got {describe(key)}",
            location_of(source, key),
        )
    name = source.text_of(key)
    handler = _HANDLERS.get(name)
    if handler is None:
        # Unknown keys are accepted and contribute nothing
        return _NOTHING
    return handler(source, name, value, path)


def _string_property(source: SourceTree, name: str, value: Node, path: tuple[str, ...]) -> _Partial:
    if kind_of(value) is not NodeKind.STRING:
        raise ShapeError(
            f"{name} must be a string literal, got {describe(value)}",
            location_of(source, value),
        )
    return _Partial(config={name: string_value(source, value)})


def _states(source: SourceTree, name: str, value: Node, path: tuple[str, ...]) -> _Partial:
    if kind_of(value) is not NodeKind.RECORD:
        raise SchemaError(
            f"states must be an object expression, got {describe(value)}",
            location_of(source, value),
        )

    states: dict[str, StateNodeConfig] = {}
    states_meta: list[StateMeta] = []
    for entry in record_entries(value):
        if entry.key is None:
            raise SchemaError(
                "state nodes must be key/value properties",
                location_of(source, entry.node),
            )
        state_name = _state_key(source, entry.key)
        if kind_of(entry.value) is not NodeKind.RECORD:
            # Defined elsewhere; the key is kept with an empty config and no meta
            states[state_name] = {}
            continue
        result = parse_state_node(source, entry.value, (*path, state_name))
        states[state_name] = result.config
        states_meta.extend(result.states_meta)

    return _Partial(config={"states": states}, child_states_meta=states_meta)


def _state_key(source: SourceTree, key: Node) -> str:
    if is_identifier_key(key):
        return source.text_of(key)
    if kind_of(key) is NodeKind.STRING:
        return string_value(source, key)
    raise SchemaError(
        f"keys in states must be identifiers or string literals, got {describe(key)}",
        location_of(source, key),
    )


def _on(source: SourceTree, name: str, value: Node, path: tuple[str, ...]) -> _Partial:
    if kind_of(value) is not NodeKind.RECORD:
        raise SchemaError(
            f"on must be an object expression, got {describe(value)}",
            location_of(source, value),
        )
    transitions, targets = get_transitions_config(source, value)
    return _Partial(config={"on": transitions}, targets=targets)


def _transition(source: SourceTree, name: str, value: Node, path: tuple[str, ...]) -> _Partial:
    transition, targets = get_transition_config_or_target(source, value)
    return _Partial(config={name: transition}, targets=targets)


def _after(source: SourceTree, name: str, value: Node, path: tuple[str, ...]) -> _Partial:
    delayed, targets = get_delayed_transitions(source, value)
    return _Partial(config={"after": delayed}, targets=targets)


def _actions(source: SourceTree, name: str, value: Node, path: tuple[str, ...]) -> _Partial:
    return _Partial(config={name: get_actions(source, value)})


def _invoke(source: SourceTree, name: str, value: Node, path: tuple[str, ...]) -> _Partial:
    if kind_of(value) not in (NodeKind.RECORD, NodeKind.LIST):
        raise SchemaError(
            f"invoke must be declared as an array or object, got {describe(value)}",
            location_of(source, value),
        )
    invoke, targets = get_invoke_config(source, value)
    return _Partial(config={"invoke": invoke}, targets=targets)


def _ignored(source: SourceTree, name: str, value: Node, path: tuple[str, ...]) -> _Partial:
    return _NOTHING


_Handler = Callable[[SourceTree, str, Node, tuple[str, ...]], _Partial]

_HANDLERS: dict[str, _Handler] = {
    "id": _string_property,
    "initial": _string_property,
    "type": _string_property,
    "states": _states,
    "on": _on,
    "always": _transition,
    "after": _after,
    "onEntry": _actions,
    "onExit": _actions,
    "entry": _actions,
    "exit": _actions,
    "onDone": _transition,
    "invoke": _invoke,
    # Accepted, but nothing is extracted from them
    "history": _ignored,
    "meta": _ignored,
}
