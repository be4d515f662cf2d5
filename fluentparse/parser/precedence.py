"""
Generator for left-associative binary operator levels.

Each precedence level is a pair of productions:

    LEVEL        := NEXT SUBSEQUENT^*
    SUBSEQUENT   := OP~ NEXT

so ``1 + 2 + 3`` becomes one SUM node with three operand children and no
operator tokens. Reading the operands left to right gives left associativity.

Author: fluentparse developers
"""

from typing import Iterable, Tuple

from ..lexer.tokens import TokenType
from .ast_nodes import NodeTag
from .rules import RuleRegistry


def add_binary_operator_level(
    registry: RuleRegistry,
    level: NodeTag,
    continuation: NodeTag,
    next_level: NodeTag,
    operator: TokenType,
) -> None:
    """
    Register one binary operator level.

    Args:
        registry: Registry to add both productions to
        level: Tag of the level itself
        continuation: Tag of the "operator operand" tail
        next_level: Tag of the next tighter level (the operands)
        operator: Token kind of the operator, excluded from the tree
    """
    registry.register(level, lambda o: o
        .with_rule(next_level).once()
        .then_rule(continuation).hoist().zero_or_more())

    registry.register(continuation, lambda o: o
        .with_token(operator).exclude().once()
        .then_rule(next_level).once())


def add_operator_chain(
    registry: RuleRegistry,
    levels: Iterable[Tuple[NodeTag, NodeTag, TokenType]],
    terminal: NodeTag,
) -> None:
    """
    Register a whole chain of levels, loosest binding first.

    Each level's operands are the following level; the last level's operands
    are ``terminal``.
    """
    levels = list(levels)
    for index, (level, continuation, operator) in enumerate(levels):
        next_level = levels[index + 1][0] if index + 1 < len(levels) else terminal
        add_binary_operator_level(registry, level, continuation, next_level, operator)
