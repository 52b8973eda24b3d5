"""Static detection of `if`/`elif` guards whose truth value never changes."""

from loguru import logger

from constguard.checker import (
    Diagnostic,
    check_file,
    check_guard,
    check_if_statement,
    check_source,
    verdict,
)
from constguard.evaluator import evaluate

logger.disable("constguard")

__all__ = [
    "Diagnostic",
    "check_file",
    "check_guard",
    "check_if_statement",
    "check_source",
    "evaluate",
    "verdict",
]
