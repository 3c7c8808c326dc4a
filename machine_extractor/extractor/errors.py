"""Errors raised while extracting machine definitions.

Every error aborts extraction of the enclosing machine. Messages name the
offending key or shape; ``location`` points at the node that was rejected.
"""

from __future__ import annotations

from typing import Optional

from machine_extractor.models.location import Location


class ExtractionError(Exception):
    """Base class for extraction failures."""

    kind = "extraction"

    def __init__(self, message: str, location: Optional[Location] = None) -> None:
        self.message = message
        self.location = location
        super().__init__(self._format())

    def _format(self) -> str:
        if self.location is None:
            return self.message
        start = self.location.start
        return f"{self.message} (line {start.line}, column {start.column})"

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "kind": self.kind,
            "message": self.message,
            "location": self.location.to_dict() if self.location else None,
        }


class ShapeError(ExtractionError):
    """A syntactic form was found where a more specific literal was required."""

    kind = "shape"


class ResolutionError(ExtractionError):
    """A machine config referenced by name could not be resolved to an object literal."""

    kind = "resolution"


class SchemaError(ExtractionError):
    """A state node key is not identifier-like, or a key holds the wrong literal kind."""

    kind = "schema"


class SourceSyntaxError(ExtractionError):
    """The source text could not be parsed."""

    kind = "syntax"
