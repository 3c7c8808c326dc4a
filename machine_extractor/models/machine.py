"""Extraction results for machine definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from machine_extractor.models.actions import serialize_value
from machine_extractor.models.location import Location

# Root configuration of a state node. Keys mirror the source object literal
# (id, initial, type, states, on, always, after, entry, exit, onEntry, onExit,
# invoke, onDone) and are only present when written in source.
StateNodeConfig = dict[str, Any]


@dataclass(frozen=True)
class TargetRef:
    """
    A transition target as written in source.

    Attributes:
        target: Target string, not resolved against the state tree
        location: Span of the string literal, quotes included
    """

    target: str
    location: Location

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "target": self.target,
            "location": self.location.to_dict(),
        }


@dataclass(frozen=True)
class StateMeta:
    """
    Metadata for one state node.

    Attributes:
        path: Keys from the root state node to this one; empty for the root
        location: Span of the object literal defining the state
        targets: Targets of this node's own transitions, in encounter order
    """

    path: tuple[str, ...]
    location: Location
    targets: tuple[TargetRef, ...] = ()

    @property
    def depth(self) -> int:
        return len(self.path)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "path": list(self.path),
            "location": self.location.to_dict(),
            "targets": [target.to_dict() for target in self.targets],
        }


@dataclass(frozen=True)
class ParseResult:
    """
    One machine found in a file.

    Attributes:
        config: Reconstructed root state node config
        node: Syntax node of the object literal the config was read from
        states_meta: One entry per state node, root first, preorder
        factory: Name of the factory function that was called
        call_location: Span of the factory call expression
    """

    config: StateNodeConfig
    node: Any = field(compare=False, repr=False)
    states_meta: tuple[StateMeta, ...] = ()
    factory: str = "createMachine"
    call_location: Optional[Location] = None

    @property
    def location(self) -> Location:
        """Span of the root object literal."""
        return self.states_meta[0].location

    def find_state(self, path: tuple[str, ...] | list[str]) -> Optional[StateMeta]:
        """Look up the metadata of a state node by path."""
        wanted = tuple(path)
        for meta in self.states_meta:
            if meta.path == wanted:
                return meta
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "factory": self.factory,
            "call_location": self.call_location.to_dict() if self.call_location else None,
            "config": serialize_value(self.config),
            "states_meta": [meta.to_dict() for meta in self.states_meta],
        }
