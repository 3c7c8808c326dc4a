"""Configuration module for machine-extractor."""

from machine_extractor.config.settings import (
    ON_ERROR_ABORT,
    ON_ERROR_SKIP,
    ExtractorConfig,
    LoggingConfig,
    load_config,
)

__all__ = [
    "ExtractorConfig",
    "LoggingConfig",
    "ON_ERROR_ABORT",
    "ON_ERROR_SKIP",
    "load_config",
]
