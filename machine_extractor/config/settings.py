"""Extractor configuration.

Defaults live here; a YAML file can override any of them. Loading and
validation report problems as ``Err(ConfigError)`` instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from machine_extractor.utils.result import ConfigError, Err, Ok, Result

DEFAULT_FACTORY_NAMES: tuple[str, ...] = ("Machine", "createMachine")

# Abort the whole file on the first failing machine, or skip that machine
ON_ERROR_ABORT = "abort"
ON_ERROR_SKIP = "skip"
ON_ERROR_POLICIES = (ON_ERROR_ABORT, ON_ERROR_SKIP)

LOG_LEVELS = ("debug", "info", "warn", "warning", "error")
LOG_FORMATS = ("json", "text")

# Grammars available in tree-sitter-typescript
DIALECTS = ("typescript", "tsx")


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "info"
    format: str = "json"


@dataclass
class ExtractorConfig:
    """
    Complete extractor configuration.

    Attributes:
        factory_names: Callee names recognised as machine factories
        dialect: Grammar used to parse sources ("typescript" or "tsx")
        on_error: What to do when one machine in a file fails ("abort" or "skip")
        max_file_bytes: Files larger than this are not parsed by the CLI
        logging: Logging settings
    """

    factory_names: tuple[str, ...] = DEFAULT_FACTORY_NAMES
    dialect: str = "typescript"
    on_error: str = ON_ERROR_ABORT
    max_file_bytes: int = 1024 * 1024
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> Result["ExtractorConfig", ConfigError]:
        """
        Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Result with loaded config or error
        """
        path = Path(path)

        if not path.exists():
            return Err(ConfigError(
                field="path",
                message=f"Configuration file not found: {path}",
            ))

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            return Err(ConfigError(
                field="yaml",
                message=f"Failed to parse YAML: {e}",
            ))
        except OSError as e:
            return Err(ConfigError(
                field="file",
                message=f"Failed to read config file: {e}",
            ))

        if not isinstance(data, dict):
            return Err(ConfigError(
                field="yaml",
                message="Top level of the configuration must be a mapping",
            ))

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Result["ExtractorConfig", ConfigError]:
        """
        Create configuration from a dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            Result with loaded and validated config or error
        """
        factory_names = data.get("factory_names", list(DEFAULT_FACTORY_NAMES))
        if isinstance(factory_names, str) or not isinstance(factory_names, (list, tuple)):
            return Err(ConfigError(
                field="factory_names",
                message=f"Must be a list of names, got {factory_names!r}",
            ))

        logging_data = data.get("logging", {}) or {}
        if not isinstance(logging_data, dict):
            return Err(ConfigError(
                field="logging",
                message=f"Must be a mapping, got {logging_data!r}",
            ))

        try:
            max_file_bytes = int(data.get("max_file_bytes", 1024 * 1024))
        except (TypeError, ValueError):
            return Err(ConfigError(
                field="max_file_bytes",
                message=f"Must be an integer, got {data.get('max_file_bytes')!r}",
            ))

        config = cls(
            factory_names=tuple(str(name) for name in factory_names),
            dialect=str(data.get("dialect", "typescript")),
            on_error=str(data.get("on_error", ON_ERROR_ABORT)),
            max_file_bytes=max_file_bytes,
            logging=LoggingConfig(
                level=str(logging_data.get("level", "info")),
                format=str(logging_data.get("format", "json")),
            ),
        )

        validation_result = config.validate()
        if validation_result.is_err():
            return Err(validation_result.unwrap_err())
        return Ok(config)

    def validate(self) -> Result[None, ConfigError]:
        """
        Validate configuration values.

        Returns:
            Result indicating success or validation error
        """
        if not self.factory_names:
            return Err(ConfigError(
                field="factory_names",
                message="At least one factory name is required",
            ))
        for name in self.factory_names:
            if not name.isidentifier():
                return Err(ConfigError(
                    field="factory_names",
                    message=f"Not an identifier: {name!r}",
                ))

        if self.dialect not in DIALECTS:
            return Err(ConfigError(
                field="dialect",
                message=f"Must be one of {', '.join(DIALECTS)}, got {self.dialect!r}",
            ))

        if self.on_error not in ON_ERROR_POLICIES:
            return Err(ConfigError(
                field="on_error",
                message=f"Must be one of {', '.join(ON_ERROR_POLICIES)}, got {self.on_error!r}",
            ))

        if self.max_file_bytes < 1:
            return Err(ConfigError(
                field="max_file_bytes",
                message=f"Must be positive, got {self.max_file_bytes}",
            ))

        if self.logging.level.lower() not in LOG_LEVELS:
            return Err(ConfigError(
                field="logging.level",
                message=f"Must be one of {', '.join(LOG_LEVELS)}, got {self.logging.level!r}",
            ))
        if self.logging.format not in LOG_FORMATS:
            return Err(ConfigError(
                field="logging.format",
                message=f"Must be one of {', '.join(LOG_FORMATS)}, got {self.logging.format!r}",
            ))

        return Ok(None)

    def with_overrides(
        self,
        dialect: Optional[str] = None,
        on_error: Optional[str] = None,
    ) -> "ExtractorConfig":
        """
        Return a new config with command-line overrides applied.

        Args:
            dialect: Grammar to parse with
            on_error: Failure policy for machines

        Returns:
            New ExtractorConfig
        """
        return replace(
            self,
            dialect=dialect or self.dialect,
            on_error=on_error or self.on_error,
        )

    def is_candidate(self, text: str) -> bool:
        """Cheap textual check for any factory name before parsing."""
        return any(name in text for name in self.factory_names)


def load_config(path: Optional[Path] = None) -> Result[ExtractorConfig, ConfigError]:
    """
    Load configuration.

    Args:
        path: YAML configuration file; defaults are used when None

    Returns:
        Result with loaded config or error
    """
    if path is None:
        config = ExtractorConfig()
        validation_result = config.validate()
        if validation_result.is_err():
            return Err(validation_result.unwrap_err())
        return Ok(config)

    return ExtractorConfig.from_yaml(path)
