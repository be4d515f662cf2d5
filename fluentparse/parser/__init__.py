"""
fluentparse Parser Package

Implements a recursive-descent rule engine driven by a fluent grammar DSL.
Productions are immutable descriptions; each evaluation runs on its own
cursor and tree, so recursive grammars are safe.

Key Features:
- Ordered choice over alternatives and candidate nonterminals
- Once / at-most-once / at-least-once / zero-or-more quantifiers
- Token exclusion and subtree hoisting to shape the AST
- Generated left-associative binary operator levels
- Fail-fast rule violations with token positions

Author: fluentparse developers
"""

from .ast_nodes import Node, NodeTag
from .rules import (
    Quantifier, SequenceElement, Production, Match,
    RuleBuilder, RuleRegistry, RuleEvaluator,
)
from .precedence import add_binary_operator_level, add_operator_chain
from .grammar import build_grammar
from .parser import Parser, parse_tokens
from .errors import (
    GrammarError, ParseError, RuleViolation,
    UnderMatchError, OverMatchError, TrailingTokensError, NestingTooDeepError,
)

__all__ = [
    # Core parser
    "Parser", "parse_tokens",

    # AST nodes
    "Node", "NodeTag",

    # Rule engine
    "Quantifier", "SequenceElement", "Production", "Match",
    "RuleBuilder", "RuleRegistry", "RuleEvaluator",
    "add_binary_operator_level", "add_operator_chain", "build_grammar",

    # Error handling
    "GrammarError", "ParseError", "RuleViolation",
    "UnderMatchError", "OverMatchError", "TrailingTokensError", "NestingTooDeepError",
]
