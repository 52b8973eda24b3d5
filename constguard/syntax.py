"""
constguard.syntax

The expression nodes the evaluator understands, and an adapter that builds
them from Python source using tree-sitter.

"""

from dataclasses import dataclass
from pathlib import Path

import tree_sitter
import tree_sitter_python
from loguru import logger

from constguard.abstractions.lattice import BinaryOp, UnaryOp

# ============================================================================
# NODES
# ============================================================================


@dataclass(frozen=True)
class NumericLiteral:
    """A number literal; ``value`` is only set for integer literals."""

    value: int | None
    is_integer: bool = True


@dataclass(frozen=True)
class BoolLiteral:
    value: bool


@dataclass(frozen=True)
class Name:
    identifier: str


@dataclass(frozen=True)
class Parenthesized:
    inner: "Node"


@dataclass(frozen=True)
class Unary:
    op: UnaryOp
    operand: "Node"


@dataclass(frozen=True)
class Binary:
    """
    A binary operation.

    ``chained`` marks a comparison that continues the comparison held in
    ``left``: ``a < b < c`` is ``Binary("<", Binary("<", a, b), c, True)``.
    """

    op: BinaryOp
    left: "Node"
    right: "Node"
    chained: bool = False


@dataclass(frozen=True)
class Opaque:
    """Anything outside the supported subset, e.g. calls or strings."""

    kind: str


type Node = (
    NumericLiteral | BoolLiteral | Name | Parenthesized | Unary | Binary | Opaque
)


@dataclass(frozen=True)
class Location:
    line: int
    column: int
    end_line: int
    end_column: int

    @classmethod
    def of(cls, node: tree_sitter.Node, source: bytes) -> "Location":
        """Locate ``node`` in ``source``, counting columns in characters."""
        start, end = node.start_point, node.end_point
        return cls(
            start[0] + 1,
            _column(source, node.start_byte, start[1]),
            end[0] + 1,
            _column(source, node.end_byte, end[1]),
        )

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


def _column(source: bytes, offset: int, byte_column: int) -> int:
    # tree-sitter points count bytes since the start of the line
    prefix = source[offset - byte_column : offset]
    return len(prefix.decode("utf-8", "replace")) + 1


@dataclass(frozen=True)
class Guard:
    """The condition of an ``if`` or ``elif`` clause."""

    expr: Node
    location: Location
    text: str


@dataclass(frozen=True)
class IfStatement:
    guards: tuple[Guard, ...]
    location: Location


# ============================================================================
# TREE-SITTER ADAPTER
# ============================================================================

PYTHON_LANGUAGE = tree_sitter.Language(tree_sitter_python.language())
parser = tree_sitter.Parser(PYTHON_LANGUAGE)

IF_QUERY = tree_sitter.Query(PYTHON_LANGUAGE, "(if_statement) @if")

UNARY_OPS: dict[str, UnaryOp] = {"+": "+", "-": "-"}
BINARY_OPS: dict[str, BinaryOp] = {
    op: op for op in ("+", "-", "*", "/", "//", "%", "**")
}
BOOLEAN_OPS: dict[str, BinaryOp] = {"and": "and", "or": "or"}
COMPARISON_OPS: dict[str, BinaryOp] = {
    op: op for op in ("==", "!=", "<", ">", "<=", ">=")
}

# expression_statement children that are not expressions
STATEMENT_ONLY = frozenset({"assignment", "augmented_assignment", "yield"})


def _text(node: tree_sitter.Node) -> str:
    return node.text.decode("utf-8", "replace") if node.text is not None else ""


def _named(node: tree_sitter.Node) -> list[tree_sitter.Node]:
    return [child for child in node.named_children if child.type != "comment"]


def parse_integer(text: str) -> int | None:
    """Parse a Python integer literal; ``None`` for anything else."""
    text = text.lower()
    if text.endswith("j"):
        return None
    try:
        return int(text, 0)
    except ValueError:
        return None


def _convert_comparison(node: tree_sitter.Node) -> Node:
    operands = _named(node)
    operators = [_text(o) for o in node.children_by_field_name("operators")]
    if len(operands) != len(operators) + 1 or not operators:
        return Opaque(node.type)
    if any(o not in COMPARISON_OPS for o in operators):
        return Opaque(node.type)

    result: Node = Binary(
        COMPARISON_OPS[operators[0]], convert(operands[0]), convert(operands[1])
    )
    for operator, operand in zip(operators[1:], operands[2:]):
        result = Binary(COMPARISON_OPS[operator], result, convert(operand), True)
    return result


def _convert_operator(node: tree_sitter.Node, table: dict[str, BinaryOp]) -> Node:
    """
    Convert a left-associative operator chain such as ``a and b and c``.

    The left spine is walked in a loop, so long chains do not use up the
    interpreter stack.
    """
    links: list[tuple[BinaryOp, tree_sitter.Node]] = []
    current = node
    while current.type == node.type:
        left = current.child_by_field_name("left")
        right = current.child_by_field_name("right")
        operator = current.child_by_field_name("operator")
        if left is None or right is None or operator is None:
            break
        if (bop := table.get(operator.type)) is None:
            break
        links.append((bop, right))
        current = left
    if not links:
        return Opaque(node.type)

    result = convert(current)
    for bop, right in reversed(links):
        result = Binary(bop, result, convert(right))
    return result


def convert(node: tree_sitter.Node) -> Node:
    """Convert a tree-sitter expression into an evaluator node."""
    match node.type:
        case "integer":
            value = parse_integer(_text(node))
            return NumericLiteral(value, value is not None)
        case "float":
            return NumericLiteral(None, False)
        case "true":
            return BoolLiteral(True)
        case "false":
            return BoolLiteral(False)
        case "identifier":
            return Name(_text(node))
        case "parenthesized_expression":
            inner = _named(node)
            if len(inner) != 1:
                return Opaque(node.type)
            return Parenthesized(convert(inner[0]))
        case "not_operator":
            argument = node.child_by_field_name("argument")
            if argument is None:
                return Opaque(node.type)
            return Unary("not", convert(argument))
        case "unary_operator":
            argument = node.child_by_field_name("argument")
            operator = node.child_by_field_name("operator")
            if argument is None or operator is None:
                return Opaque(node.type)
            if (uop := UNARY_OPS.get(operator.type)) is None:
                return Opaque(node.type)
            return Unary(uop, convert(argument))
        case "boolean_operator":
            return _convert_operator(node, BOOLEAN_OPS)
        case "binary_operator":
            return _convert_operator(node, BINARY_OPS)
        case "comparison_operator":
            return _convert_comparison(node)
        case _:
            return Opaque(node.type)


def parse_expression(text: str) -> Node:
    """Parse ``text`` as exactly one Python expression."""
    tree = parser.parse(text.encode("utf-8"))
    root = tree.root_node
    if root.has_error:
        raise ValueError(f"could not parse expression: {text!r}")
    statements = _named(root)
    if len(statements) != 1 or statements[0].type != "expression_statement":
        raise ValueError(f"expected a single expression, got {text!r}")
    expressions = _named(statements[0])
    if len(expressions) != 1 or expressions[0].type in STATEMENT_ONLY:
        raise ValueError(f"expected a single expression, got {text!r}")
    try:
        return convert(expressions[0])
    except RecursionError as e:
        raise ValueError("expression is nested too deeply") from e


def _guard(condition: tree_sitter.Node, source: bytes) -> Guard:
    location = Location.of(condition, source)
    try:
        expr = convert(condition)
    except RecursionError:
        logger.warning(f"guard at {location} is nested too deeply, skipping it")
        expr = Opaque(condition.type)
    return Guard(expr, location, _text(condition))


def _if_statement(node: tree_sitter.Node, source: bytes) -> IfStatement | None:
    condition = node.child_by_field_name("condition")
    if condition is None:
        return None
    guards = [_guard(condition, source)]
    for clause in node.children_by_field_name("alternative"):
        if clause.type != "elif_clause":
            continue
        if (elif_condition := clause.child_by_field_name("condition")) is not None:
            guards.append(_guard(elif_condition, source))
    return IfStatement(tuple(guards), Location.of(node, source))


def find_if_statements(source: str | bytes) -> list[IfStatement]:
    """Return every ``if`` statement of a module, nested ones included."""
    if isinstance(source, str):
        source = source.encode("utf-8")
    tree = parser.parse(source)
    captures = tree_sitter.QueryCursor(IF_QUERY).captures(tree.root_node)
    nodes = sorted(captures.get("if", []), key=lambda n: n.start_byte)
    return [
        stmt for node in nodes if (stmt := _if_statement(node, source)) is not None
    ]


def read_source(path: Path) -> bytes:
    with path.open("rb") as f:
        return f.read()
