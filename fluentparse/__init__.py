"""
fluentparse

A recursive-descent parsing engine with a fluent grammar-definition DSL, and
the grammar of a small imperative pseudocode language built with it.

Architecture:
    fluentparse/
    ├── lexer/           # Token model and serialized token streams
    ├── parser/          # Rule engine, AST nodes, grammar and driver
    ├── config.py        # Parser options
    └── cli.py           # Command line interface

License: MIT
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .lexer import Token, TokenType, load_tokens
from .parser import Parser, Node, NodeTag, RuleRegistry, build_grammar, parse_tokens
from .config import ParserConfig

__all__ = [
    # Core classes
    "Parser",
    "ParserConfig",
    "RuleRegistry",
    "Node",
    "NodeTag",
    "Token",
    "TokenType",

    # Functions
    "build_grammar",
    "parse_tokens",
    "load_tokens",

    # Version info
    "__version__",
    "__license__",
]
