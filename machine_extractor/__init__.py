"""Extract state machine definitions and their source locations from JS/TS files."""

__version__ = "0.1.0"

from machine_extractor.extractor import (  # noqa: E402
    ExtractionError,
    ResolutionError,
    SchemaError,
    ShapeError,
    SourceSyntaxError,
    extract_machines,
    parse_machines_from_file,
)
from machine_extractor.models import Location, ParseResult, Position, StateMeta, TargetRef  # noqa: E402

__all__ = [
    "__version__",
    "parse_machines_from_file",
    "extract_machines",
    "ParseResult",
    "StateMeta",
    "TargetRef",
    "Location",
    "Position",
    "ExtractionError",
    "ShapeError",
    "ResolutionError",
    "SchemaError",
    "SourceSyntaxError",
]
