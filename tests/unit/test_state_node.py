"""Tests for the state node builder."""

import pytest

from machine_extractor.extractor.errors import SchemaError, ShapeError
from machine_extractor.extractor.state_node import parse_state_node
from machine_extractor.models.actions import AnonymousService, AssignAction, NoopAction


def test_string_properties_are_copied(expr):
    source, node = expr('{ id: "m", initial: "a", type: "parallel" }')
    result = parse_state_node(source, node)
    assert result.config == {"id": "m", "initial": "a", "type": "parallel"}


@pytest.mark.parametrize("key", ["id", "initial", "type"])
def test_string_properties_must_be_strings(expr, key):
    source, node = expr(f"{{ {key}: someValue }}")
    with pytest.raises(ShapeError, match=f"{key} must be a string literal"):
        parse_state_node(source, node)


def test_shorthand_id_fails(expr):
    source, node = expr("{ id }")
    with pytest.raises(ShapeError, match="id must be a string literal"):
        parse_state_node(source, node)


def test_unknown_keys_are_ignored(expr):
    source, node = expr('{ foo: 123, context: { a: 1 }, id: "m", tags: ["x"] }')
    result = parse_state_node(source, node)
    assert result.config == {"id": "m"}
    assert len(result.states_meta) == 1


def test_history_and_meta_contribute_nothing(expr):
    source, node = expr('{ history: "deep", meta: { description: "x" } }')
    result = parse_state_node(source, node)
    assert result.config == {}


def test_non_identifier_key_fails(expr):
    source, node = expr('{ "id": "m" }')
    with pytest.raises(SchemaError, match="property key of state node must be an identifier"):
        parse_state_node(source, node)


def test_spread_fails(expr):
    source, node = expr("{ ...base }")
    with pytest.raises(SchemaError, match="properties on a state node must be key/value properties"):
        parse_state_node(source, node)


def test_method_fails(expr):
    source, node = expr("{ entry() {} }")
    with pytest.raises(SchemaError, match="properties on a state node"):
        parse_state_node(source, node)


def test_actions_keys(expr):
    source, node = expr('{ entry: "a", exit: [b, "c"], onEntry: assign({}), onExit: () => {} }')
    result = parse_state_node(source, node)
    assert result.config == {
        "entry": "a",
        "exit": [NoopAction(), "c"],
        "onEntry": AssignAction(),
        "onExit": NoopAction(),
    }


def test_nested_states_preorder_and_paths(expr):
    source, node = expr(
        """{
          initial: "a",
          states: {
            a: { states: { a1: {}, a2: {} } },
            "b.c": {},
          },
        }"""
    )
    result = parse_state_node(source, node)
    assert [meta.path for meta in result.states_meta] == [
        (),
        ("a",),
        ("a", "a1"),
        ("a", "a2"),
        ("b.c",),
    ]
    assert result.config["states"]["a"]["states"] == {"a1": {}, "a2": {}}
    assert result.config["states"]["b.c"] == {}


def test_path_is_relative_to_given_prefix(expr):
    source, node = expr("{ states: { child: {} } }")
    result = parse_state_node(source, node, ("root", "sub"))
    assert [meta.path for meta in result.states_meta] == [("root", "sub"), ("root", "sub", "child")]


def test_states_must_be_object(expr):
    source, node = expr('{ states: ["a"] }')
    with pytest.raises(SchemaError, match="states must be an object expression"):
        parse_state_node(source, node)


def test_child_state_given_by_reference_is_empty(expr):
    source, node = expr('{ states: { a: childConfig, b: { on: { GO: "a" } }, c: makeState() } }')
    result = parse_state_node(source, node)
    assert result.config["states"] == {"a": {}, "b": {"on": {"GO": "a"}}, "c": {}}
    assert [meta.path for meta in result.states_meta] == [(), ("b",)]


def test_on_must_be_object(expr):
    source, node = expr('{ on: "a" }')
    with pytest.raises(SchemaError, match="on must be an object expression"):
        parse_state_node(source, node)


def test_invoke_must_be_object_or_array(expr):
    source, node = expr("{ invoke: loader }")
    with pytest.raises(SchemaError, match="invoke must be declared as an array or object"):
        parse_state_node(source, node)


def test_targets_belong_to_their_own_node(expr):
    source, node = expr(
        """{
          on: { NEXT: "b" },
          always: [{ target: "c", cond: "ready" }],
          after: { 100: "d" },
          onDone: "e",
          invoke: { src: load, onDone: "f", onError: "g" },
          states: { b: { on: { BACK: "#root" } } },
        }"""
    )
    result = parse_state_node(source, node)
    root, child = result.states_meta
    assert [ref.target for ref in root.targets] == ["b", "c", "d", "e", "f", "g"]
    assert [ref.target for ref in child.targets] == ["#root"]
    assert result.config["invoke"]["src"] == AnonymousService()
    assert result.config["always"] == [{"target": "c", "cond": "ready"}]


def test_targets_follow_source_order_of_keys(expr):
    source, node = expr('{ onDone: "z", on: { A: "a" } }')
    result = parse_state_node(source, node)
    assert [ref.target for ref in result.states_meta[0].targets] == ["z", "a"]


def test_location_spans_the_object(expr):
    source, node = expr('{ id: "m" }')
    result = parse_state_node(source, node)
    assert result.states_meta[0].location.slice(source.text) == '{ id: "m" }'
