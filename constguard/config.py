"""Analysis constants for constguard."""

# Signed width of the integers the evaluator is willing to fold.
INT_BITS = 64
INT_MIN = -(1 << (INT_BITS - 1))
INT_MAX = (1 << (INT_BITS - 1)) - 1

MESSAGE = "The condition is always {verdict}"

SOURCE_SUFFIXES = (".py", ".pyi")

EXCLUDED_DIRS = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        ".tox",
        ".nox",
        ".venv",
        "venv",
        "__pycache__",
        ".mypy_cache",
        ".pytest_cache",
        ".ruff_cache",
        "build",
        "dist",
    }
)


def fits(value: int) -> bool:
    """Return true if value is representable in the native signed width."""
    return INT_MIN <= value <= INT_MAX


def message(verdict: bool) -> str:
    return MESSAGE.format(verdict=str(verdict).lower())
