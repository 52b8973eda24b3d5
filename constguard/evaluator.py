"""Abstract evaluation of guard expressions."""

from loguru import logger

from constguard import config
from constguard.abstractions import lattice
from constguard.abstractions.lattice import (
    AbstractValue,
    BoolValue,
    Unknown,
    VarRef,
)
from constguard.syntax import (
    Binary,
    BoolLiteral,
    Name,
    Node,
    NumericLiteral,
    Parenthesized,
    Unary,
)


def _is_chain_link(node: Binary) -> bool:
    return (
        node.chained
        and node.op in lattice.COMPARISONS
        and isinstance(node.left, Binary)
    )


def _evaluate_binary(node: Binary) -> AbstractValue:
    """
    Evaluate a binary node and its left-nested operands bottom up.

    ``a and b and c`` nests to the left, so the left spine is collected
    first and then folded in a loop.
    """
    spine: list[Binary] = []
    current: Node = node
    while isinstance(current, Binary):
        spine.append(current)
        current = current.left

    result = evaluate(current)
    # right operand of the previous link; a chain link compares against it
    middle = result
    for link in reversed(spine):
        right = evaluate(link.right)
        if _is_chain_link(link):
            result = lattice.chain_compare(result, middle, link.op, right)
        else:
            result = lattice.binary(link.op, result, right)
        middle = right
        logger.trace("EVAL {} => {}", link.op, result)
    return result


def evaluate(node: Node) -> AbstractValue:
    match node:
        case NumericLiteral(value=value, is_integer=True) if value is not None:
            result = lattice.IntValue(value) if config.fits(value) else Unknown()
        case BoolLiteral(value=value):
            result = BoolValue(value)
        case Name(identifier=identifier):
            result = VarRef(identifier)
        case Parenthesized(inner=inner):
            result = evaluate(inner)
        case Unary(op=uop, operand=operand):
            result = lattice.unary(uop, evaluate(operand))
        case Binary():
            return _evaluate_binary(node)
        case _:
            result = Unknown()
    logger.trace("EVAL {} => {}", type(node).__name__, result)
    return result
