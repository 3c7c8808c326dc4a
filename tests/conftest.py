"""Shared fixtures for the extractor tests."""

from textwrap import dedent

import pytest

from machine_extractor.extractor.syntax import declarator_value, find_variable_declarator, parse_source


@pytest.fixture
def expr():
    """Parse a single expression; returns (SourceTree, node)."""

    def _expr(code: str, dialect: str = "typescript"):
        source = parse_source(f"const value = {code};\n", dialect)
        declarator = find_variable_declarator(source, "value")
        return source, declarator_value(declarator)

    return _expr


@pytest.fixture
def fetch_machine_source() -> str:
    """A realistic machine touching most of the supported keys."""
    return dedent(
        """\
        import { createMachine, assign, actions } from "xstate";

        export const fetchMachine = createMachine({
          id: "fetch",
          initial: "idle",
          context: { retries: 0 },
          states: {
            idle: {
              on: {
                FETCH: "loading",
              },
            },
            loading: {
              entry: ["startSpinner", assign({ retries: (ctx) => ctx.retries + 1 })],
              invoke: {
                id: "fetchData",
                src: (ctx) => fetch("/api"),
                onDone: { target: "success", actions: "storeData" },
                onError: [
                  { target: "loading", cond: "canRetry" },
                  { target: "failure" },
                ],
              },
              after: {
                5000: "failure",
              },
            },
            success: {
              type: "final",
            },
            failure: {
              exit: actions.log("left"),
              on: {
                RETRY: { target: "loading", cond: (ctx) => ctx.retries < 3 },
              },
            },
          },
        });
        """
    )
