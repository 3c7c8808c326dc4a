"""Source span models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    """
    A single point in the source text.

    Attributes:
        absolute_offset: 0-based character offset into the source string
        line: 1-based line number
        column: 0-based column, counted in characters
    """

    absolute_offset: int
    line: int
    column: int

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "absolute_offset": self.absolute_offset,
            "line": self.line,
            "column": self.column,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Position":
        """Create from dictionary."""
        return cls(
            absolute_offset=data["absolute_offset"],
            line=data["line"],
            column=data["column"],
        )


@dataclass(frozen=True)
class Location:
    """Half-open span of a syntax node: ``source[start:end]`` is its text."""

    start: Position
    end: Position

    def slice(self, text: str) -> str:
        """Return the part of ``text`` covered by this span."""
        return text[self.start.absolute_offset:self.end.absolute_offset]

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Location":
        """Create from dictionary."""
        return cls(
            start=Position.from_dict(data["start"]),
            end=Position.from_dict(data["end"]),
        )
