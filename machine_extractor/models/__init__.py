"""Data models for machine-extractor."""

from machine_extractor.models.actions import (
    ANY_EVENT,
    PARENT_TARGET,
    ActionRef,
    AlwaysTrueGuard,
    AnonymousService,
    AssignAction,
    ChooseAction,
    ChooseBranch,
    ForwardToAction,
    GuardRef,
    NoopAction,
    SendAction,
    ServiceRef,
    StopAction,
    serialize_value,
)
from machine_extractor.models.location import Location, Position
from machine_extractor.models.machine import (
    ParseResult,
    StateMeta,
    StateNodeConfig,
    TargetRef,
)

__all__ = [
    # Locations
    "Position",
    "Location",
    # Results
    "ParseResult",
    "StateMeta",
    "StateNodeConfig",
    "TargetRef",
    # Actions, guards, services
    "ActionRef",
    "GuardRef",
    "ServiceRef",
    "NoopAction",
    "AssignAction",
    "SendAction",
    "ForwardToAction",
    "StopAction",
    "ChooseAction",
    "ChooseBranch",
    "AlwaysTrueGuard",
    "AnonymousService",
    "ANY_EVENT",
    "PARENT_TARGET",
    "serialize_value",
]
