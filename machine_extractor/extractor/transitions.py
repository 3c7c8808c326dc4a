"""Transition normalisation.

A transition value may be a target string, a ``{target, cond, actions}``
object, or an array of either. Array order is guard priority and is kept as
written. Every target literal is reported as a TargetRef.
"""

from __future__ import annotations

from typing import Any

from machine_extractor.extractor.actions import get_actions
from machine_extractor.extractor.errors import SchemaError, ShapeError
from machine_extractor.extractor.guards import get_cond
from machine_extractor.extractor.location import location_of
from machine_extractor.extractor.syntax import (
    Node,
    NodeKind,
    SourceTree,
    describe,
    is_identifier_key,
    kind_of,
    list_elements,
    number_value,
    record_entries,
    string_value,
)
from machine_extractor.models.machine import TargetRef

TransitionConfigOrTarget = Any


def get_transition_config_or_target(
    source: SourceTree,
    node: Node,
) -> tuple[TransitionConfigOrTarget, list[TargetRef]]:
    """
    Resolve a transition value.

    Returns:
        Tuple of (normalised transition, targets in encounter order)

    Raises:
        ShapeError: If the value is not a string, object or array
    """
    kind = kind_of(node)

    if kind is NodeKind.STRING:
        target = string_value(source, node)
        return target, [TargetRef(target=target, location=location_of(source, node))]

    if kind is NodeKind.RECORD:
        return get_transition_config(source, node)

    if kind is NodeKind.LIST:
        configs = []
        targets: list[TargetRef] = []
        for element in list_elements(node):
            config, element_targets = get_transition_config_or_target(source, element)
            configs.append(config)
            targets.extend(element_targets)
        return configs, targets

    raise ShapeError(
        f"transition config must be either string, object, or array, got {describe(node)}",
        location_of(source, node) if node is not None else None,
    )


def get_transition_config(
    source: SourceTree,
    node: Node,
) -> tuple[dict[str, Any], list[TargetRef]]:
    """Resolve a ``{target?, cond?, actions?}`` object; other keys are ignored."""
    config: dict[str, Any] = {}
    targets: list[TargetRef] = []

    for entry in record_entries(node):
        if entry.key is None:
            raise SchemaError(
                "transition properties must be key/value properties",
                location_of(source, entry.node),
            )
        if not is_identifier_key(entry.key):
            raise SchemaError(
                "transition property key must be an identifier",
                location_of(source, entry.key),
            )

        key = source.text_of(entry.key)
        if key == "target":
            if kind_of(entry.value) is not NodeKind.STRING:
                raise ShapeError(
                    "targets of transitions must be string literals",
                    location_of(source, entry.value),
                )
            target = string_value(source, entry.value)
            config["target"] = target
            targets.append(TargetRef(target=target, location=location_of(source, entry.value)))
        elif key == "cond":
            config["cond"] = get_cond(source, entry.value)
        elif key == "actions":
            config["actions"] = get_actions(source, entry.value)

    return config, targets


def get_transitions_config(
    source: SourceTree,
    node: Node,
) -> tuple[dict[str, TransitionConfigOrTarget], list[TargetRef]]:
    """
    Resolve an event map such as the value of ``on``.

    Event names may be written as identifiers or string literals.
    """
    transitions: dict[str, TransitionConfigOrTarget] = {}
    targets: list[TargetRef] = []

    for entry in record_entries(node):
        if entry.key is None:
            raise SchemaError(
                "properties of on must be key/value properties",
                location_of(source, entry.node),
            )
        if is_identifier_key(entry.key):
            event = source.text_of(entry.key)
        elif kind_of(entry.key) is NodeKind.STRING:
            event = string_value(source, entry.key)
        else:
            raise SchemaError(
                f"on property key must be an identifier or string literal, got {describe(entry.key)}",
                location_of(source, entry.key),
            )

        config, event_targets = get_transition_config_or_target(source, entry.value)
        transitions[event] = config
        targets.extend(event_targets)

    return transitions, targets


def get_delayed_transitions(
    source: SourceTree,
    node: Node,
) -> tuple[dict[Any, TransitionConfigOrTarget], list[TargetRef]]:
    """Resolve the value of ``after``, keyed by delay (number or string)."""
    if kind_of(node) is not NodeKind.RECORD:
        raise SchemaError(
            f"after must be expressed as an object, got {describe(node)}",
            location_of(source, node) if node is not None else None,
        )

    delayed: dict[Any, TransitionConfigOrTarget] = {}
    targets: list[TargetRef] = []

    for entry in record_entries(node):
        if entry.key is None:
            raise SchemaError(
                "after value must be a key/value property",
                location_of(source, entry.node),
            )
        key_kind = kind_of(entry.key)
        if key_kind is NodeKind.STRING:
            delay: Any = string_value(source, entry.key)
        elif key_kind is NodeKind.NUMBER:
            delay = number_value(source, entry.key)
        else:
            raise SchemaError(
                f"after key must be string or number literal, got {describe(entry.key)}",
                location_of(source, entry.key),
            )

        config, delay_targets = get_transition_config_or_target(source, entry.value)
        delayed[delay] = config
        targets.extend(delay_targets)

    return delayed, targets
