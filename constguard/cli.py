import json
from collections.abc import Iterable, Iterator
from pathlib import Path

import click

from constguard import checker, config
from constguard.abstractions import lattice
from constguard.evaluator import evaluate
from constguard.logger import initialize, log
from constguard.syntax import parse_expression


def iter_sources(paths: Iterable[Path]) -> Iterator[Path]:
    """Yield the python files named by ``paths``, walking directories."""
    for path in paths:
        if path.is_dir():
            for candidate in sorted(path.rglob("*")):
                relative = candidate.relative_to(path).parts
                if any(part in config.EXCLUDED_DIRS for part in relative[:-1]):
                    continue
                if candidate.is_file() and candidate.suffix in config.SOURCE_SUFFIXES:
                    yield candidate
        else:
            yield path


@click.group()
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="sets the verbosity of the program, more means more information",
)
def cli(verbose):
    """Find if/elif conditions that are always true or always false."""
    initialize(verbose)


@cli.command()
@click.option(
    "--format",
    type=click.Choice(["text", "json"], case_sensitive=True),
    default="text",
    help="The format to print the diagnostics in.",
)
@click.argument(
    "paths",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, path_type=Path),
)
@click.pass_context
def check(ctx, paths, format):
    """Check python files and directories for constant conditions."""
    found = []
    files = 0
    for path in iter_sources(paths):
        try:
            diagnostics = checker.check_file(path)
        except OSError as e:
            log.warning(f"Could not read {path}: {e}")
            continue
        files += 1
        found.extend((path, d) for d in diagnostics)

    match format:
        case "text":
            for path, d in found:
                click.echo(f"{path}:{d}")
        case "json":
            records = [
                {
                    "path": str(path),
                    "line": d.location.line,
                    "column": d.location.column,
                    "end_line": d.location.end_line,
                    "end_column": d.location.end_column,
                    "verdict": d.verdict,
                    "message": d.message,
                }
                for path, d in found
            ]
            click.echo(json.dumps(records, indent=2))

    log.success(f"Checked {files} file(s), found {len(found)} constant condition(s)")
    if found:
        ctx.exit(1)


@cli.command(name="eval")
@click.argument("expression")
def evaluate_expression(expression):
    """Print the abstract value of a single EXPRESSION."""
    try:
        node = parse_expression(expression)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="EXPRESSION") from e

    value = evaluate(node)
    result = lattice.to_bool(value)
    click.echo(f"value:   {value}")
    click.echo(f"verdict: {'unknown' if result is None else str(result).lower()}")


if __name__ == "__main__":
    cli()
