"""Tests for the tree-sitter front end."""

import pytest

from machine_extractor.extractor.location import location_of
from machine_extractor.extractor.syntax import (
    NodeKind,
    call_arguments,
    callee_name,
    first_error,
    kind_of,
    list_elements,
    number_value,
    parse_source,
    record_entries,
    string_value,
)


class TestKindOf:
    @pytest.mark.parametrize(
        "code, kind",
        [
            ("{ a: 1 }", NodeKind.RECORD),
            ("[1, 2]", NodeKind.LIST),
            ('"text"', NodeKind.STRING),
            ("'text'", NodeKind.STRING),
            ("42", NodeKind.NUMBER),
            ("doIt()", NodeKind.CALL),
            ("someName", NodeKind.NAME),
            ("ns.member", NodeKind.MEMBER),
            ("(ctx) => true", NodeKind.FUNCTION),
            ("function () { return 1; }", NodeKind.FUNCTION),
            ("`template`", NodeKind.OTHER),
            ("true", NodeKind.OTHER),
        ],
    )
    def test_classifies_expressions(self, expr, code, kind):
        _, node = expr(code)
        assert kind_of(node) is kind

    def test_unwraps_parentheses_and_casts(self, expr):
        _, node = expr('({ id: "a" } as const)')
        assert kind_of(node) is NodeKind.RECORD

    def test_unwraps_satisfies(self, expr):
        _, node = expr('{ id: "a" } satisfies Config')
        assert kind_of(node) is NodeKind.RECORD

    def test_missing_node_is_other(self):
        assert kind_of(None) is NodeKind.OTHER


class TestStringValue:
    def test_plain(self, expr):
        source, node = expr('"hello"')
        assert string_value(source, node) == "hello"

    def test_empty(self, expr):
        source, node = expr('""')
        assert string_value(source, node) == ""

    def test_escapes(self, expr):
        source, node = expr(r"'it\'s\nA\x42\u{1F600}'")
        assert string_value(source, node) == "it's\nAB\U0001F600"

    def test_unknown_escape_keeps_character(self, expr):
        source, node = expr(r'"\q"')
        assert string_value(source, node) == "q"


class TestNumberValue:
    @pytest.mark.parametrize(
        "code, value",
        [
            ("1000", 1000),
            ("1_000", 1000),
            ("0x10", 16),
            ("1e3", 1000),
            ("1.5", 1.5),
            ("10n", 10),
        ],
    )
    def test_values(self, expr, code, value):
        source, node = expr(code)
        assert number_value(source, node) == value


class TestAccessors:
    def test_record_entries_skip_comments(self, expr):
        source, node = expr("{\n  // leading\n  a: 1,\n  /* inner */ b: 2,\n}")
        entries = record_entries(node)
        assert [source.text_of(entry.key) for entry in entries] == ["a", "b"]

    def test_shorthand_property(self, expr):
        source, node = expr("{ entry }")
        [entry] = record_entries(node)
        assert entry.key == entry.value
        assert kind_of(entry.value) is NodeKind.NAME

    def test_spread_has_no_key(self, expr):
        _, node = expr("{ ...base }")
        [entry] = record_entries(node)
        assert entry.key is None and entry.value is None

    def test_list_elements_in_order(self, expr):
        source, node = expr('["a", /* c */ "b", "c"]')
        assert [string_value(source, e) for e in list_elements(node)] == ["a", "b", "c"]

    @pytest.mark.parametrize(
        "code, kinds",
        [
            ('["a", , "b"]', [NodeKind.STRING, None, NodeKind.STRING]),
            ('[, "a"]', [None, NodeKind.STRING]),
            ('["a", ,]', [NodeKind.STRING, None]),
            ('["a",]', [NodeKind.STRING]),
            ("[]", []),
        ],
    )
    def test_list_holes_are_none(self, expr, code, kinds):
        _, node = expr(code)
        elements = list_elements(node)
        assert [None if e is None else kind_of(e) for e in elements] == kinds

    def test_call_arguments_and_callee(self, expr):
        source, node = expr('actions.forwardTo("child", { to: 1 })')
        assert callee_name(source, node) == "forwardTo"
        args = call_arguments(node)
        assert [kind_of(a) for a in args] == [NodeKind.STRING, NodeKind.RECORD]

    def test_callee_name_for_computed_callee(self, expr):
        source, node = expr("getFactory()()")
        assert callee_name(source, node) is None


class TestParseSource:
    def test_unknown_dialect(self):
        with pytest.raises(ValueError, match="Unknown dialect"):
            parse_source("const a = 1;", "coffeescript")

    def test_tsx_dialect_parses_jsx(self):
        source = parse_source("const el = <div>{createMachine}</div>;", "tsx")
        assert first_error(source.root) is None

    def test_first_error(self):
        source = parse_source("const a = {;")
        assert first_error(source.root) is not None

    def test_char_offsets_with_multibyte_text(self):
        text = 'const label = "café"; const next = "x";'
        source = parse_source(text)
        strings = [n for n in _walk(source.root) if n.type == "string"]
        location = location_of(source, strings[1])
        assert location.slice(text) == '"x"'
        assert location.start.column == text.index('"x"')


def _walk(node):
    yield node
    for child in node.children:
        yield from _walk(child)
