"""Source spans for syntax nodes."""

from __future__ import annotations

from machine_extractor.extractor.syntax import Node, SourceTree
from machine_extractor.models.location import Location, Position


def _position(source: SourceTree, byte_offset: int, point: tuple[int, int]) -> Position:
    row, byte_column = point
    line_start = source.char_offset(byte_offset - byte_column)
    offset = source.char_offset(byte_offset)
    return Position(absolute_offset=offset, line=row + 1, column=offset - line_start)


def location_of(source: SourceTree, node: Node) -> Location:
    """
    Span of a node in character offsets.

    Lines are 1-based and columns 0-based, both counted in characters of the
    decoded source rather than UTF-8 bytes.
    """
    return Location(
        start=_position(source, node.start_byte, tuple(node.start_point)),
        end=_position(source, node.end_byte, tuple(node.end_point)),
    )
