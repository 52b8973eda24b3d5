"""Report ``if``/``elif`` guards whose truth value is the same on every run."""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from constguard import config
from constguard.abstractions import lattice
from constguard.evaluator import evaluate
from constguard.syntax import (
    Guard,
    IfStatement,
    Location,
    Node,
    find_if_statements,
    read_source,
)


@dataclass(frozen=True)
class Diagnostic:
    location: Location
    message: str
    verdict: bool

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"


type Sink = Callable[[Diagnostic], None]


def verdict(expr: Node) -> bool | None:
    """Return the constant truth value of ``expr``, or ``None`` if it varies."""
    return lattice.to_bool(evaluate(expr))


def check_guard(guard: Guard, sink: Sink | None = None) -> Diagnostic | None:
    try:
        result = verdict(guard.expr)
    except RecursionError:
        logger.warning(f"guard at {guard.location} is nested too deeply, skipping it")
        return None
    logger.debug(f"guard {guard.text!r} at {guard.location}: {result}")
    if result is None:
        return None
    diagnostic = Diagnostic(guard.location, config.message(result), result)
    if sink is not None:
        sink(diagnostic)
    return diagnostic


def check_if_statement(
    stmt: IfStatement, sink: Sink | None = None
) -> list[Diagnostic]:
    """
    Check the ``if`` guard and each ``elif`` guard of one statement.

    Guards are judged one by one: an ``elif`` knows nothing about the
    guards before it.
    """
    return [
        diagnostic
        for guard in stmt.guards
        if (diagnostic := check_guard(guard, sink)) is not None
    ]


def check_source(source: str | bytes, sink: Sink | None = None) -> list[Diagnostic]:
    diagnostics = []
    for stmt in find_if_statements(source):
        diagnostics.extend(check_if_statement(stmt, sink))
    return diagnostics


def check_file(path: Path, sink: Sink | None = None) -> list[Diagnostic]:
    logger.info(f"Checking {path}")
    return check_source(read_source(path), sink)
