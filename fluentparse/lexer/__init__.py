"""
fluentparse Token Package

The token model shared with the external tokenizer, plus helpers for reading
serialized token streams. The tokenizer itself is not part of this package.

Author: fluentparse developers
"""

from .tokens import Token, TokenType, SourceLocation
from .errors import Diagnostic, TokenStreamError
from .stream import load_tokens, load_tokens_file, dump_tokens

__all__ = [
    "Token",
    "TokenType",
    "SourceLocation",
    "Diagnostic",
    "TokenStreamError",
    "load_tokens",
    "load_tokens_file",
    "dump_tokens",
]
