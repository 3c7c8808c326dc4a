"""Tree-sitter front end for JavaScript/TypeScript sources.

The extractor never looks at tree-sitter node types directly. Everything it
needs goes through this module:

- ``parse_source`` turns text into a ``SourceTree``
- ``kind_of`` classifies a node into one of the ``NodeKind`` values
- accessors read object entries, array elements, call arguments and
  literal values

Transparent wrappers (parentheses, ``as``/``satisfies`` casts, ``!``) are
removed by ``unwrap`` so ``{...} as const`` reads like the bare literal.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Any, Iterator, NamedTuple, Optional

import tree_sitter
import tree_sitter_typescript

Node = tree_sitter.Node

# Grammar per dialect. The TypeScript grammar also parses plain JavaScript.
DIALECTS: dict[str, Any] = {
    "typescript": tree_sitter_typescript.language_typescript,
    "tsx": tree_sitter_typescript.language_tsx,
}


class NodeKind(Enum):
    """Node shapes the extractor distinguishes."""

    RECORD = auto()
    LIST = auto()
    STRING = auto()
    NUMBER = auto()
    CALL = auto()
    NAME = auto()
    MEMBER = auto()
    FUNCTION = auto()
    OTHER = auto()


_KINDS: dict[str, NodeKind] = {
    "object": NodeKind.RECORD,
    "array": NodeKind.LIST,
    "string": NodeKind.STRING,
    "number": NodeKind.NUMBER,
    "call_expression": NodeKind.CALL,
    "identifier": NodeKind.NAME,
    "shorthand_property_identifier": NodeKind.NAME,
    "member_expression": NodeKind.MEMBER,
    "subscript_expression": NodeKind.MEMBER,
    "arrow_function": NodeKind.FUNCTION,
    "function_expression": NodeKind.FUNCTION,
    "function": NodeKind.FUNCTION,
    "generator_function": NodeKind.FUNCTION,
}

_TRANSPARENT = frozenset({
    "parenthesized_expression",
    "as_expression",
    "satisfies_expression",
    "non_null_expression",
    "type_assertion",
})

# Property keys written as bare names
IDENTIFIER_KEYS = frozenset({
    "property_identifier",
    "shorthand_property_identifier",
    "identifier",
})

_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


class Entry(NamedTuple):
    """
    One member of an object literal.

    ``key`` and ``value`` are None for members that are not key/value
    properties (spreads, methods, accessors).
    """

    key: Optional[Node]
    value: Optional[Node]
    node: Node


class SourceTree:
    """Parsed source text plus byte-to-character offset translation."""

    def __init__(self, text: str, data: bytes, tree: tree_sitter.Tree) -> None:
        self.text = text
        self.data = data
        self.tree = tree
        self.root = tree.root_node
        self._char_offsets: Optional[list[int]] = None
        if len(data) != len(text):
            self._char_offsets = _build_char_offsets(text, len(data))

    def char_offset(self, byte_offset: int) -> int:
        """Translate a byte offset of the UTF-8 data into a ``str`` index."""
        if self._char_offsets is None:
            return byte_offset
        return self._char_offsets[byte_offset]

    def text_of(self, node: Node) -> str:
        return self.data[node.start_byte:node.end_byte].decode("utf-8", "surrogatepass")


def _build_char_offsets(text: str, size: int) -> list[int]:
    offsets = [0] * (size + 1)
    position = 0
    for index, char in enumerate(text):
        width = len(char.encode("utf-8", "surrogatepass"))
        for step in range(width):
            offsets[position + step] = index
        position += width
    offsets[position] = len(text)
    return offsets


def parse_source(text: str, dialect: str = "typescript") -> SourceTree:
    """
    Parse source text with tree-sitter.

    Args:
        text: Full file contents
        dialect: "typescript" or "tsx"

    Returns:
        SourceTree wrapping the syntax tree

    Raises:
        ValueError: If the dialect is unknown
    """
    try:
        language_fn = DIALECTS[dialect]
    except KeyError:
        raise ValueError(f"Unknown dialect: {dialect}") from None

    parser = tree_sitter.Parser(tree_sitter.Language(language_fn()))
    data = text.encode("utf-8", "surrogatepass")
    return SourceTree(text, data, parser.parse(data))


def first_error(root: Node) -> Optional[Node]:
    """Return the first ERROR or missing node in document order, if any."""
    if not root.has_error:
        return None
    for node in iter_nodes(root):
        if node.is_error or node.is_missing:
            return node
    return root


def iter_nodes(root: Node, node_type: Optional[str] = None) -> Iterator[Node]:
    """Yield nodes in preorder (source order), optionally filtered by type."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node_type is None or node.type == node_type:
            yield node
        stack.extend(reversed(node.children))


def _named(node: Node) -> list[Node]:
    return [child for child in node.named_children if child.type != "comment"]


def unwrap(node: Optional[Node]) -> Optional[Node]:
    """Strip wrappers that do not change the value of an expression."""
    while node is not None and node.type in _TRANSPARENT:
        children = _named(node)
        if not children:
            break
        # <T>expr puts the type first
        node = children[-1] if node.type == "type_assertion" else children[0]
    return node


def kind_of(node: Optional[Node]) -> NodeKind:
    if node is None:
        return NodeKind.OTHER
    return _KINDS.get(node.type, NodeKind.OTHER)


def describe(node: Optional[Node]) -> str:
    """Human readable name of a node type for error messages."""
    if node is None:
        return "nothing"
    return node.type.replace("_", " ")


def is_identifier_key(node: Optional[Node]) -> bool:
    return node is not None and node.type in IDENTIFIER_KEYS


def record_entries(node: Node) -> list[Entry]:
    """Members of an object literal in source order."""
    entries = []
    for child in _named(node):
        if child.type == "pair":
            entries.append(Entry(
                key=child.child_by_field_name("key"),
                value=unwrap(child.child_by_field_name("value")),
                node=child,
            ))
        elif child.type == "shorthand_property_identifier":
            # { entry } is { entry: entry }
            entries.append(Entry(key=child, value=child, node=child))
        else:
            entries.append(Entry(key=None, value=None, node=child))
    return entries


def list_elements(node: Node) -> list[Optional[Node]]:
    """
    Elements of an array literal in source order.

    Holes (`["a", , "b"]`) come back as None; a single trailing comma does
    not make one.
    """
    elements: list[Optional[Node]] = []
    expecting = True
    for child in node.children:
        if child.type in ("comment", "[", "]"):
            continue
        if child.type == ",":
            if expecting:
                elements.append(None)
            expecting = True
            continue
        elements.append(unwrap(child))
        expecting = False
    return elements


def call_arguments(node: Node) -> list[Node]:
    args = node.child_by_field_name("arguments")
    # Tagged templates have a template string instead of an argument list
    if args is None or args.type != "arguments":
        return []
    return [unwrap(child) for child in _named(args)]


def callee_name(source: SourceTree, node: Node) -> Optional[str]:
    """
    Name of the invoked function.

    ``raise()`` gives "raise" and ``actions.raise()`` gives "raise". Other
    callee shapes give None.
    """
    callee = unwrap(node.child_by_field_name("function"))
    if callee is None:
        return None
    if callee.type == "identifier":
        return source.text_of(callee)
    if callee.type == "member_expression":
        prop = callee.child_by_field_name("property")
        if prop is not None and prop.type == "property_identifier":
            return source.text_of(prop)
    return None


def string_value(source: SourceTree, node: Node) -> str:
    """Value of a string literal with escape sequences decoded."""
    parts = []
    for child in node.named_children:
        if child.type == "escape_sequence":
            parts.append(_decode_escape(source.text_of(child)))
        elif child.type != "comment":
            parts.append(source.text_of(child))
    return "".join(parts)


def _decode_escape(sequence: str) -> str:
    body = sequence[1:]
    if not body or body[0] in "\r\n\u2028\u2029":
        # Line continuation
        return ""
    head = body[0]
    if head in _SIMPLE_ESCAPES and len(body) == 1:
        return _SIMPLE_ESCAPES[head]
    if head == "x" and len(body) == 3:
        return chr(int(body[1:], 16))
    if head == "u":
        digits = body[2:-1] if body.startswith("u{") else body[1:]
        return chr(int(digits, 16))
    if all(char in "01234567" for char in body):
        # Legacy octal escape
        return chr(int(body, 8))
    return body


def number_value(source: SourceTree, node: Node) -> int | float:
    """Value of a numeric literal; integral values come back as int."""
    raw = source.text_of(node).replace("_", "")
    if raw.endswith("n"):
        return int(raw[:-1], 0)
    if raw.lower().startswith(("0x", "0o", "0b")):
        return int(raw, 0)
    if raw.isdigit():
        return int(raw)
    value = float(raw)
    if value.is_integer():
        return int(value)
    return value


def find_variable_declarator(source: SourceTree, name: str) -> Optional[Node]:
    """
    First variable declarator in the file that binds ``name``.

    This is a flat, file-wide search in source order; lexical scope is not
    taken into account.
    """
    for node in iter_nodes(source.root, "variable_declarator"):
        binding = node.child_by_field_name("name")
        if binding is not None and binding.type == "identifier" and source.text_of(binding) == name:
            return node
    return None


def declarator_value(node: Node) -> Optional[Node]:
    return unwrap(node.child_by_field_name("value"))
