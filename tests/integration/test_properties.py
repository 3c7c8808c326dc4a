"""End-to-end checks on a realistic machine definition."""

import json

import pytest

from machine_extractor import parse_machines_from_file
from machine_extractor.models.actions import (
    AlwaysTrueGuard,
    AnonymousService,
    AssignAction,
    NoopAction,
    serialize_value,
)


@pytest.fixture
def fetch_machine(fetch_machine_source):
    [machine] = parse_machines_from_file(fetch_machine_source)
    return machine


def test_config_shape(fetch_machine):
    config = fetch_machine.config
    assert config["id"] == "fetch"
    assert config["initial"] == "idle"
    assert "context" not in config
    assert list(config["states"]) == ["idle", "loading", "success", "failure"]

    loading = config["states"]["loading"]
    assert loading["entry"] == ["startSpinner", AssignAction()]
    assert loading["invoke"] == {
        "src": AnonymousService(),
        "id": "fetchData",
        "onDone": {"target": "success", "actions": "storeData"},
        "onError": [{"target": "loading", "cond": "canRetry"}, {"target": "failure"}],
    }
    assert loading["after"] == {5000: "failure"}

    failure = config["states"]["failure"]
    assert failure["exit"] == NoopAction()
    assert failure["on"] == {"RETRY": {"target": "loading", "cond": AlwaysTrueGuard()}}


def test_states_meta_preorder(fetch_machine):
    assert [meta.path for meta in fetch_machine.states_meta] == [
        (),
        ("idle",),
        ("loading",),
        ("success",),
        ("failure",),
    ]


def test_parent_paths_come_first():
    text = (
        "createMachine({ states: {\n"
        "  a: { states: { a1: { states: { deep: {} } }, a2: {} } },\n"
        "  b: {},\n"
        "  c: { states: { c1: {} } },\n"
        "} });"
    )
    [machine] = parse_machines_from_file(text)
    paths = [meta.path for meta in machine.states_meta]
    assert paths[0] == ()
    assert len(set(paths)) == len(paths) == 8
    for index, path in enumerate(paths[1:], start=1):
        assert paths.index(path[:-1]) < index


def test_state_locations_slice_to_object_literals(fetch_machine, fetch_machine_source):
    root = fetch_machine.location.slice(fetch_machine_source)
    assert root.startswith("{\n  id: \"fetch\"")
    assert root.endswith("}")
    success = fetch_machine.find_state(["success"]).location.slice(fetch_machine_source)
    assert success.split() == ["{", 'type:', '"final",', "}"]


def test_target_locations_slice_to_quoted_strings(fetch_machine, fetch_machine_source):
    for meta in fetch_machine.states_meta:
        for ref in meta.targets:
            assert ref.location.slice(fetch_machine_source) == f'"{ref.target}"'


def test_targets_in_encounter_order(fetch_machine):
    loading = fetch_machine.find_state(("loading",))
    assert [ref.target for ref in loading.targets] == ["success", "loading", "failure", "failure"]
    assert [ref.target for ref in fetch_machine.find_state(("idle",)).targets] == ["loading"]
    assert fetch_machine.find_state(()).targets == ()
    assert fetch_machine.find_state(("missing",)) is None


def test_positions_are_consistent(fetch_machine, fetch_machine_source):
    lines = fetch_machine_source.splitlines(keepends=True)
    for meta in fetch_machine.states_meta:
        for ref in meta.targets:
            start = ref.location.start
            line_offset = sum(len(line) for line in lines[:start.line - 1])
            assert start.absolute_offset == line_offset + start.column


def test_on_keys_match_source_keys(fetch_machine):
    # Every event key written in an `on` map comes back unchanged
    assert list(fetch_machine.config["states"]["idle"]["on"]) == ["FETCH"]
    assert list(fetch_machine.config["states"]["failure"]["on"]) == ["RETRY"]


def test_serialized_config_is_json(fetch_machine):
    data = json.loads(json.dumps(fetch_machine.to_dict()))
    loading = data["config"]["states"]["loading"]
    assert loading["entry"] == ["startSpinner", {"type": "xstate.assign"}]
    assert loading["invoke"]["src"] == {"type": "anonymous"}
    assert loading["after"] == {"5000": "failure"}
    assert data["states_meta"][0]["path"] == []
    assert data["factory"] == "createMachine"


def test_choose_and_send_parent_in_source():
    text = (
        "createMachine({\n"
        "  entry: choose([\n"
        '    { cond: "isAdmin", actions: ["grant", sendParent("GRANTED")] },\n'
        "    { actions: forwardTo(\"audit\") },\n"
        "  ]),\n"
        "});"
    )
    [machine] = parse_machines_from_file(text)
    assert serialize_value(machine.config["entry"]) == {
        "type": "xstate.choose",
        "branches": [
            {
                "cond": "isAdmin",
                "actions": ["grant", {"type": "xstate.send", "event": "ANY", "to": "#_parent"}],
            },
            {"actions": {"type": "xstate.forwardTo", "target": "audit"}},
        ],
    }


def test_non_ascii_text_before_machine():
    text = '// état: déjà vu 🚀\nconst label = "naïve";\ncreateMachine({ on: { GO: "suivant" } });'
    [machine] = parse_machines_from_file(text)
    [ref] = machine.states_meta[0].targets
    assert ref.location.slice(text) == '"suivant"'
    assert ref.location.start.line == 3
    assert ref.location.start.column == text.splitlines()[2].index('"suivant"')


def test_escaped_target_keeps_decoded_value():
    text = r'createMachine({ on: { GO: "a\u0062c" } });'
    [machine] = parse_machines_from_file(text)
    [ref] = machine.states_meta[0].targets
    assert ref.target == "abc"
    assert ref.location.slice(text) == r'"a\u0062c"'
