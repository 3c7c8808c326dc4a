"""CLI entry point for machine-extractor."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Optional

import click

from machine_extractor import __version__
from machine_extractor.config.settings import (
    DIALECTS,
    ON_ERROR_ABORT,
    ON_ERROR_POLICIES,
    ExtractorConfig,
    load_config,
)
from machine_extractor.extractor import ExtractionError, extract_machines
from machine_extractor.utils.logging import configure_logging, get_logger, set_source_path
from machine_extractor.utils.result import ExitCode


class Context:
    """CLI context for sharing state between commands."""

    def __init__(self, config: ExtractorConfig) -> None:
        self.config = config
        self.logger = get_logger("cli")


pass_context = click.make_pass_decorator(Context)


def output_json(data: dict, pretty: bool = True) -> None:
    """Output JSON to stdout."""
    click.echo(json.dumps(data, indent=2 if pretty else None, default=str))


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help="Path to YAML configuration file",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warn", "error"], case_sensitive=False),
    default=None,
    help="Logging level (overrides the config file)",
)
@click.option(
    "--log-format",
    type=click.Choice(["json", "text"], case_sensitive=False),
    default=None,
    help="Log format (overrides the config file)",
)
@click.version_option(version=__version__)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Optional[Path],
    log_level: Optional[str],
    log_format: Optional[str],
) -> None:
    """
    Machine Extractor - static extraction of state machine definitions.

    Finds Machine(...) and createMachine(...) calls in JavaScript/TypeScript
    files and prints their configs along with source locations of every
    state and transition target.
    """
    result = load_config(config_path)
    if result.is_err():
        click.echo(str(result.unwrap_err()), err=True)
        ctx.exit(ExitCode.CONFIG_ERROR)
    config = result.unwrap()

    configure_logging(
        level=log_level or config.logging.level,
        format_type=log_format or config.logging.format,
    )

    ctx.obj = Context(config=config)
    ctx.obj.logger.debug(
        "config_loaded",
        config_path=str(config_path) if config_path else None,
        factory_names=list(config.factory_names),
        dialect=config.dialect,
        on_error=config.on_error,
    )


@cli.command()
@click.argument(
    "files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--on-error",
    type=click.Choice(ON_ERROR_POLICIES),
    default=None,
    help="Abort a file on the first failing machine, or skip the machine",
)
@click.option(
    "--dialect",
    type=click.Choice(DIALECTS),
    default=None,
    help="Grammar used to parse the files",
)
@click.option(
    "--pretty/--compact",
    default=True,
    help="Indent the JSON output",
)
@pass_context
def extract(
    ctx: Context,
    files: tuple[Path, ...],
    on_error: Optional[str],
    dialect: Optional[str],
    pretty: bool,
) -> None:
    """Extract machine definitions from FILES and print them as JSON."""
    config = ctx.config.with_overrides(dialect=dialect, on_error=on_error)

    reports = [extract_file(path, config) for path in files]
    failed = sum(1 for report in reports if report["errors"])

    ctx.logger.info(
        "extract_completed",
        files=len(reports),
        machines=sum(len(report["machines"]) for report in reports),
        failed_files=failed,
    )

    output_json({"files": reports}, pretty=pretty)

    if failed:
        sys.exit(ExitCode.EXTRACTION_FAILED)


def extract_file(path: Path, config: ExtractorConfig) -> dict[str, Any]:
    """
    Extract all machines from one file into a JSON-ready report.

    Args:
        path: Source file
        config: Extractor configuration

    Returns:
        Dictionary with the path, extracted machines and errors
    """
    set_source_path(str(path))
    logger = get_logger("cli")
    report: dict[str, Any] = {"path": str(path), "machines": [], "errors": []}

    size = path.stat().st_size
    if size > config.max_file_bytes:
        logger.warning("file_too_large", size=size, limit=config.max_file_bytes)
        report["errors"].append({
            "kind": "limit",
            "message": f"File is {size} bytes, limit is {config.max_file_bytes}",
            "location": None,
        })
        return report

    try:
        # newline="" keeps \r\n so offsets match the file on disk
        with open(path, encoding="utf-8", newline="") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.error("file_read_failed", error=str(e))
        report["errors"].append({"kind": "io", "message": str(e), "location": None})
        return report

    try:
        results = extract_machines(text, config)
    except ExtractionError as e:
        logger.error("file_parse_failed", error=str(e))
        report["errors"].append(e.to_dict())
        return report

    for result in results:
        if result.is_ok():
            report["machines"].append(result.unwrap().to_dict())
            continue

        error = result.unwrap_err()
        logger.warning("machine_failed", factory=error.factory, error=str(error.error))
        report["errors"].append(error.to_dict())
        if config.on_error == ON_ERROR_ABORT:
            # Nothing from a file is reported once one of its machines fails
            report["machines"] = []
            break

    return report


def main() -> None:
    """Main entry point."""
    try:
        cli()
    except Exception as e:
        logger = get_logger("cli")
        logger.error("cli_error", error=str(e))
        sys.exit(ExitCode.INTERNAL_ERROR)


if __name__ == "__main__":
    main()
