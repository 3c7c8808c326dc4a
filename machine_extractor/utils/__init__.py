"""Utility modules for machine-extractor."""

from machine_extractor.utils.logging import (
    configure_logging,
    get_logger,
    set_source_path,
)
from machine_extractor.utils.result import (
    ConfigError,
    Err,
    ExitCode,
    MachineError,
    Ok,
    Result,
)

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    "set_source_path",
    # Results
    "Ok",
    "Err",
    "Result",
    "ConfigError",
    "MachineError",
    "ExitCode",
]
