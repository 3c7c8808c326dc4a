"""Static extraction of machine definitions from source files."""

from machine_extractor.extractor.errors import (
    ExtractionError,
    ResolutionError,
    SchemaError,
    ShapeError,
    SourceSyntaxError,
)
from machine_extractor.extractor.locator import extract_machines, parse_machines_from_file
from machine_extractor.extractor.state_node import StateNodeResult, parse_state_node

__all__ = [
    "parse_machines_from_file",
    "extract_machines",
    "parse_state_node",
    "StateNodeResult",
    # Errors
    "ExtractionError",
    "ShapeError",
    "ResolutionError",
    "SchemaError",
    "SourceSyntaxError",
]
