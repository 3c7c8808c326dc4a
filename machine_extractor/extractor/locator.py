"""Finding machine factory calls in a file."""

from __future__ import annotations

from typing import Iterator, Optional

from machine_extractor.config.settings import ON_ERROR_ABORT, ExtractorConfig
from machine_extractor.extractor.errors import (
    ExtractionError,
    ResolutionError,
    ShapeError,
    SourceSyntaxError,
)
from machine_extractor.extractor.location import location_of
from machine_extractor.extractor.state_node import parse_state_node
from machine_extractor.extractor.syntax import (
    Node,
    NodeKind,
    SourceTree,
    call_arguments,
    declarator_value,
    describe,
    find_variable_declarator,
    first_error,
    iter_nodes,
    kind_of,
    parse_source,
)
from machine_extractor.models.machine import ParseResult
from machine_extractor.utils.logging import get_logger
from machine_extractor.utils.result import Err, MachineError, Ok, Result

logger = get_logger("extractor.locator")


def parse_machines_from_file(
    text: str,
    config: Optional[ExtractorConfig] = None,
) -> list[ParseResult]:
    """
    Extract every machine defined in a file.

    With the default ``on_error="abort"`` the first failing machine raises
    and nothing is returned for the file. With ``on_error="skip"`` failing
    machines are logged and left out.

    Args:
        text: Full file contents
        config: Extractor configuration (defaults when None)

    Returns:
        ParseResults in source order of the factory calls

    Raises:
        ExtractionError: On malformed machine definitions (abort policy) or
            unparseable source (any policy)
    """
    config = config or ExtractorConfig()

    if not config.is_candidate(text):
        logger.debug("file_skipped_prefilter")
        return []

    source = _parse(text, config)
    machines: list[ParseResult] = []

    for call, factory in _factory_calls(source, config):
        if config.on_error == ON_ERROR_ABORT:
            machines.append(_extract_machine(source, call, factory))
            continue

        result = _try_extract_machine(source, call, factory)
        if result.is_err():
            error = result.unwrap_err()
            logger.warning(
                "machine_skipped",
                factory=factory,
                line=error.call_location.start.line if error.call_location else None,
                error=str(error.error),
            )
            continue
        machines.append(result.unwrap())

    logger.info("machines_extracted", count=len(machines))
    return machines


def extract_machines(
    text: str,
    config: Optional[ExtractorConfig] = None,
) -> list[Result[ParseResult, MachineError]]:
    """
    Extract every machine defined in a file, one Result per factory call.

    Failures are isolated per machine regardless of ``config.on_error``.

    Raises:
        SourceSyntaxError: If the source cannot be parsed
    """
    config = config or ExtractorConfig()

    if not config.is_candidate(text):
        logger.debug("file_skipped_prefilter")
        return []

    source = _parse(text, config)
    return [
        _try_extract_machine(source, call, factory)
        for call, factory in _factory_calls(source, config)
    ]


def _parse(text: str, config: ExtractorConfig) -> SourceTree:
    source = parse_source(text, config.dialect)
    error = first_error(source.root)
    if error is not None:
        raise SourceSyntaxError(
            f"source could not be parsed near {describe(error)}",
            location_of(source, error),
        )
    return source


def _factory_calls(source: SourceTree, config: ExtractorConfig) -> Iterator[tuple[Node, str]]:
    """Calls whose callee is a bare identifier naming a machine factory."""
    names = set(config.factory_names)
    for call in iter_nodes(source.root, "call_expression"):
        callee = call.child_by_field_name("function")
        if callee is None or callee.type != "identifier":
            continue
        name = source.text_of(callee)
        if name in names:
            yield call, name


def _try_extract_machine(
    source: SourceTree,
    call: Node,
    factory: str,
) -> Result[ParseResult, MachineError]:
    try:
        return Ok(_extract_machine(source, call, factory))
    except ExtractionError as e:
        return Err(MachineError(
            factory=factory,
            error=e,
            call_location=location_of(source, call),
        ))


def _extract_machine(source: SourceTree, call: Node, factory: str) -> ParseResult:
    config_node = _resolve_machine_config(source, call)
    result = parse_state_node(source, config_node, ())
    return ParseResult(
        config=result.config,
        node=config_node,
        states_meta=tuple(result.states_meta),
        factory=factory,
        call_location=location_of(source, call),
    )


def _resolve_machine_config(source: SourceTree, call: Node) -> Node:
    """
    Object literal holding the machine config of a factory call.

    The first argument is either the literal itself or the name of a
    variable; in the latter case the first declarator of that name anywhere
    in the file is used.
    """
    args = call_arguments(call)
    argument = args[0] if args else None
    kind = kind_of(argument)

    if kind is NodeKind.RECORD:
        return argument

    if kind is NodeKind.NAME:
        name = source.text_of(argument)
        declarator = find_variable_declarator(source, name)
        if declarator is None:
            raise ResolutionError(
                f"could not find machine config '{name}' in this file",
                location_of(source, argument),
            )
        value = declarator_value(declarator)
        if kind_of(value) is not NodeKind.RECORD:
            raise ResolutionError(
                f"machine config '{name}' must be an object literal, got {describe(value)}",
                location_of(source, value if value is not None else declarator),
            )
        return value

    raise ShapeError(
        f"machine config must be an object literal, got {describe(argument)}",
        location_of(source, argument if argument is not None else call),
    )
