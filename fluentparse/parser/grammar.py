"""
The grammar of the pseudocode language.

Statements are if statements, assignments, prints and bare expressions, each
terminated by END_OF_LINE. Expressions climb a chain of binary operator levels
down to unary operators and primaries.

Author: fluentparse developers
"""

import logging
from typing import Optional

from ..lexer.tokens import TokenType
from .ast_nodes import NodeTag
from .rules import RuleRegistry
from .precedence import add_operator_chain

logger = logging.getLogger(__name__)


# Binary operator levels, loosest binding first
BINARY_LEVELS = [
    (NodeTag.LOGICAL_OR, NodeTag.SUBSEQUENT_LOGICAL_OR, TokenType.OR),
    (NodeTag.LOGICAL_AND, NodeTag.SUBSEQUENT_LOGICAL_AND, TokenType.AND),
    (NodeTag.BITWISE_OR, NodeTag.SUBSEQUENT_BITWISE_OR, TokenType.BITWISE_OR),
    (NodeTag.BITWISE_XOR, NodeTag.SUBSEQUENT_BITWISE_XOR, TokenType.BITWISE_XOR),
    (NodeTag.BITWISE_AND, NodeTag.SUBSEQUENT_BITWISE_AND, TokenType.BITWISE_AND),
    (NodeTag.NOT_EQUAL, NodeTag.SUBSEQUENT_NOT_EQUAL, TokenType.NOT_EQUAL),
    (NodeTag.EQUAL, NodeTag.SUBSEQUENT_EQUAL, TokenType.EQUAL),
    (NodeTag.LESS_THAN, NodeTag.SUBSEQUENT_LESS_THAN, TokenType.LESS_THAN),
    (NodeTag.LESS_THAN_EQUAL, NodeTag.SUBSEQUENT_LESS_THAN_EQUAL, TokenType.LESS_THAN_EQUAL),
    (NodeTag.GREATER_THAN, NodeTag.SUBSEQUENT_GREATER_THAN, TokenType.GREATER_THAN),
    (NodeTag.GREATER_THAN_EQUAL, NodeTag.SUBSEQUENT_GREATER_THAN_EQUAL, TokenType.GREATER_THAN_EQUAL),
    (NodeTag.BITWISE_LEFT_SHIFT, NodeTag.SUBSEQUENT_BITWISE_LEFT_SHIFT, TokenType.BITWISE_LEFT_SHIFT),
    (NodeTag.BITWISE_RIGHT_SHIFT, NodeTag.SUBSEQUENT_BITWISE_RIGHT_SHIFT, TokenType.BITWISE_RIGHT_SHIFT),
    (NodeTag.SUM, NodeTag.SUBSEQUENT_SUM, TokenType.PLUS),
    (NodeTag.SUBTRACT, NodeTag.SUBSEQUENT_SUBTRACT, TokenType.MINUS),
    (NodeTag.MULTIPLY, NodeTag.SUBSEQUENT_MULTIPLY, TokenType.MULTIPLY),
    (NodeTag.DIVIDE, NodeTag.SUBSEQUENT_DIVIDE, TokenType.DIVIDE),
    (NodeTag.MODULUS, NodeTag.SUBSEQUENT_MODULUS, TokenType.MODULUS),
    (NodeTag.POWER, NodeTag.SUBSEQUENT_POWER, TokenType.POWER),
]

UNARY_OPERATORS = [
    (NodeTag.UNARY_MINUS, TokenType.MINUS),
    (NodeTag.UNARY_PLUS, TokenType.PLUS),
    (NodeTag.UNARY_BITWISE_NOT, TokenType.BITWISE_NOT),
    (NodeTag.UNARY_NOT, TokenType.NOT),
]


def build_grammar(registry: Optional[RuleRegistry] = None) -> RuleRegistry:
    """
    Register every production of the language.

    Args:
        registry: Registry to populate; a new one is created if omitted

    Returns:
        The validated and frozen registry
    """
    if registry is None:
        registry = RuleRegistry()

    _add_statements(registry)
    _add_expressions(registry)

    registry.validate()
    registry.freeze()
    logger.debug("Grammar built with %d productions", len(registry))
    return registry


def _add_statements(registry: RuleRegistry) -> None:
    # ROOT
    registry.register(NodeTag.ROOT, lambda o: o
        .with_rule(NodeTag.STATEMENT).hoist().at_least_once())

    # STATEMENT: the bare expression goes last so it cannot shadow the others
    registry.register(NodeTag.STATEMENT, lambda o: o
        .with_rule(
            NodeTag.IF_STATEMENT,
            NodeTag.ASSIGNMENT,
            NodeTag.PRINT,
            NodeTag.EXPRESSION,
        ).once()
        .then_token(TokenType.END_OF_LINE).exclude().once())

    # IF_STATEMENT
    registry.register(NodeTag.IF_STATEMENT, lambda o: o
        .with_token(TokenType.IF).exclude().once()
        .then_rule(NodeTag.EXPRESSION).once()
        .then_token(TokenType.THEN).exclude().once()
        .then_token(TokenType.END_OF_LINE).exclude().once()
        .then_token(TokenType.INDENT).exclude().once()
        .then_rule(NodeTag.STATEMENT).at_least_once()
        .then_token(TokenType.DEDENT).exclude().once())

    # ASSIGNMENT
    registry.register(NodeTag.ASSIGNMENT, lambda o: o
        .with_token(TokenType.IDENTIFIER).once()
        .then_token(TokenType.ASSIGN).exclude().once()
        .then_rule(NodeTag.EXPRESSION).once())

    # PRINT
    registry.register(NodeTag.PRINT, lambda o: o
        .with_token(TokenType.WRITE).exclude().once()
        .then_rule(NodeTag.EXPRESSION).once()
        .then_rule(NodeTag.SUBSEQUENT_PRINT).hoist().zero_or_more())

    registry.register(NodeTag.SUBSEQUENT_PRINT, lambda o: o
        .with_token(TokenType.COMMA).exclude().once()
        .then_rule(NodeTag.EXPRESSION).once())


def _add_expressions(registry: RuleRegistry) -> None:
    # EXPRESSION
    registry.register(NodeTag.EXPRESSION, lambda o: o
        .with_rule(NodeTag.LOGICAL_OR).once())

    add_operator_chain(registry, BINARY_LEVELS, terminal=NodeTag.UNARY)

    for tag, operator in UNARY_OPERATORS:
        registry.register(tag, lambda o, operator=operator: o
            .with_token(operator).exclude().once()
            .then_rule(NodeTag.UNARY).once())

    # UNARY: operators first, then primaries
    registry.register(NodeTag.UNARY, lambda o: o
        .with_rule(*(tag for tag, _ in UNARY_OPERATORS)).once())
    registry.register(NodeTag.UNARY, lambda o: o
        .with_rule(NodeTag.PRIMARY).once())

    # FLOOR
    registry.register(NodeTag.FLOOR, lambda o: o
        .with_token(TokenType.LEFT_SQUARE_BRACKET).exclude().once()
        .then_rule(NodeTag.EXPRESSION).once()
        .then_token(TokenType.RIGHT_SQUARE_BRACKET).exclude().once())

    # GROUP
    registry.register(NodeTag.GROUP, lambda o: o
        .with_token(TokenType.LEFT_PARENTHESIS).exclude().once()
        .then_rule(NodeTag.EXPRESSION).once()
        .then_token(TokenType.RIGHT_PARENTHESIS).exclude().once())

    # PRIMARY
    registry.register(NodeTag.PRIMARY, lambda o: o
        .with_token(TokenType.NUMBER).once())
    registry.register(NodeTag.PRIMARY, lambda o: o
        .with_token(TokenType.STRING).once())
    registry.register(NodeTag.PRIMARY, lambda o: o
        .with_token(TokenType.IDENTIFIER).once())
    registry.register(NodeTag.PRIMARY, lambda o: o
        .with_rule(NodeTag.GROUP).hoist().once())
    registry.register(NodeTag.PRIMARY, lambda o: o
        .with_rule(NodeTag.FLOOR).once())
