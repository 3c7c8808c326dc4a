"""Invoked service configs."""

from __future__ import annotations

from typing import Any, Union

from machine_extractor.extractor.errors import SchemaError, ShapeError
from machine_extractor.extractor.location import location_of
from machine_extractor.extractor.syntax import (
    Node,
    NodeKind,
    SourceTree,
    describe,
    is_identifier_key,
    kind_of,
    list_elements,
    record_entries,
    string_value,
)
from machine_extractor.extractor.transitions import get_transition_config_or_target
from machine_extractor.models.actions import AnonymousService, ServiceRef
from machine_extractor.models.machine import TargetRef

InvokeConfig = dict[str, Any]

_OPAQUE_SOURCES = (NodeKind.FUNCTION, NodeKind.NAME, NodeKind.MEMBER)


def get_invoke_config(
    source: SourceTree,
    node: Node,
) -> tuple[Union[InvokeConfig, list[InvokeConfig]], list[TargetRef]]:
    """
    Resolve the value of ``invoke``.

    A single object gives a single config; an array gives a list in source
    order. Targets from ``onDone``/``onError`` are returned in encounter order.
    """
    if kind_of(node) is NodeKind.RECORD:
        return get_invoke_config_from_object(source, node)

    if kind_of(node) is not NodeKind.LIST:
        raise SchemaError(
            f"invoke must be declared as an array or object, got {describe(node)}",
            location_of(source, node) if node is not None else None,
        )

    invokes: list[InvokeConfig] = []
    targets: list[TargetRef] = []
    for element in list_elements(node):
        if kind_of(element) is not NodeKind.RECORD:
            raise ShapeError(
                f"invoke must be an object, got {describe(element)}",
                location_of(source, element if element is not None else node),
            )
        config, element_targets = get_invoke_config_from_object(source, element)
        invokes.append(config)
        targets.extend(element_targets)
    return invokes, targets


def get_invoke_config_from_object(
    source: SourceTree,
    node: Node,
) -> tuple[InvokeConfig, list[TargetRef]]:
    config: InvokeConfig = {"src": AnonymousService()}
    targets: list[TargetRef] = []

    for entry in record_entries(node):
        if entry.key is None:
            raise SchemaError(
                "invoke property must be a key/value property",
                location_of(source, entry.node),
            )
        if not is_identifier_key(entry.key):
            raise SchemaError(
                "invoke property key must be an identifier",
                location_of(source, entry.key),
            )

        key = source.text_of(entry.key)
        if key == "id":
            if kind_of(entry.value) is not NodeKind.STRING:
                raise ShapeError(
                    "invoke.id must be a string literal",
                    location_of(source, entry.value),
                )
            config["id"] = string_value(source, entry.value)
        elif key == "src":
            config["src"] = _get_src(source, entry.value)
        elif key in ("onDone", "onError"):
            transition, transition_targets = get_transition_config_or_target(source, entry.value)
            config[key] = transition
            targets.extend(transition_targets)
        # autoForward, forward and data carry no structure we keep

    return config, targets


def _get_src(source: SourceTree, node: Node) -> ServiceRef:
    kind = kind_of(node)
    if kind is NodeKind.STRING:
        return string_value(source, node)
    if kind in _OPAQUE_SOURCES:
        return AnonymousService()
    raise ShapeError(
        "invoke.src must be string literal, arrow function, function or identifier, "
        f"got {describe(node)}",
        location_of(source, node),
    )
