"""Action, guard and service references found in machine configs.

Plain strings are used for references written as string literals. Anything
that cannot be resolved statically is replaced by one of the placeholder
classes below, so the config keeps the shape of the source without
evaluating foreign code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional, Union

# Target used by sendParent()
PARENT_TARGET = "#_parent"

# Event type carried by send placeholders; the payload is never evaluated
ANY_EVENT = "ANY"


@dataclass(frozen=True)
class NoopAction:
    """Stand-in for an action implementation that is not inspected."""

    type: ClassVar[str] = "noop"

    def to_dict(self) -> dict:
        return {"type": self.type}


@dataclass(frozen=True)
class AssignAction:
    """``assign(...)``; the updater is not evaluated."""

    type: ClassVar[str] = "xstate.assign"

    def to_dict(self) -> dict:
        return {"type": self.type}


@dataclass(frozen=True)
class SendAction:
    """``send(...)`` or ``sendParent(...)``."""

    type: ClassVar[str] = "xstate.send"

    event: str = ANY_EVENT
    to: Optional[str] = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"type": self.type, "event": self.event}
        if self.to is not None:
            data["to"] = self.to
        return data


@dataclass(frozen=True)
class ForwardToAction:
    """``forwardTo("<id>")``."""

    type: ClassVar[str] = "xstate.forwardTo"

    target: str

    def to_dict(self) -> dict:
        return {"type": self.type, "target": self.target}


@dataclass(frozen=True)
class StopAction:
    """``stop(...)``."""

    type: ClassVar[str] = "xstate.stop"

    def to_dict(self) -> dict:
        return {"type": self.type}


@dataclass(frozen=True)
class AlwaysTrueGuard:
    """
    Stand-in for a guard given as code.

    Treated as satisfied for structural purposes only.
    """

    type: ClassVar[str] = "always"

    def to_dict(self) -> dict:
        return {"type": self.type}


@dataclass(frozen=True)
class AnonymousService:
    """Stand-in for an invoked service given as code."""

    type: ClassVar[str] = "anonymous"

    def to_dict(self) -> dict:
        return {"type": self.type}


GuardRef = Union[str, AlwaysTrueGuard]


@dataclass(frozen=True)
class ChooseBranch:
    """One ``{cond?, actions}`` entry of a ``choose([...])`` call."""

    actions: Any = field(default_factory=list)
    cond: Optional[GuardRef] = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"actions": serialize_value(self.actions)}
        if self.cond is not None:
            data["cond"] = serialize_value(self.cond)
        return data


@dataclass(frozen=True)
class ChooseAction:
    """``choose([...])`` with its branches in source order."""

    type: ClassVar[str] = "xstate.choose"

    branches: tuple[ChooseBranch, ...] = ()

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "branches": [branch.to_dict() for branch in self.branches],
        }


ActionRef = Union[
    str,
    NoopAction,
    AssignAction,
    SendAction,
    ForwardToAction,
    StopAction,
    ChooseAction,
]

ServiceRef = Union[str, AnonymousService]


def serialize_value(value: Any) -> Any:
    """
    Convert a config value into JSON-ready data.

    Dicts and lists are walked recursively and placeholder objects are
    replaced by their ``to_dict()`` form.
    """
    if isinstance(value, dict):
        return {str(key): serialize_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_value(item) for item in value]
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value
