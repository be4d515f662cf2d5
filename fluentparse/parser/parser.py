"""
fluentparse parser driver.

Applies the root production's alternatives to the token stream and assembles
the final AST. All matching is done by the rule engine; the driver only keeps
the global cursor.

Author: fluentparse developers
"""

import logging
import sys
from typing import List, Optional, Sequence, TYPE_CHECKING

from ..lexer.tokens import Token, TokenType
from .ast_nodes import Node
from .errors import NestingTooDeepError, TrailingTokensError
from .rules import Production, RuleRegistry
from .grammar import build_grammar

if TYPE_CHECKING:
    from ..config import ParserConfig

logger = logging.getLogger(__name__)

# Every nesting level of an expression runs through the whole operator chain
RECURSION_FRAMES_PER_TOKEN = 120
RECURSION_LIMIT_CEILING = 10000


class Parser:
    """
    Recursive-descent parser driven by a RuleRegistry.
    """

    def __init__(
        self,
        tokens: Sequence[Token],
        registry: Optional[RuleRegistry] = None,
        config: Optional["ParserConfig"] = None,
    ):
        """
        Initialize parser with a list of tokens.

        Args:
            tokens: Tokens from the external tokenizer
            registry: Grammar to use; the built-in grammar if omitted
            config: Parser options; defaults if omitted
        """
        if config is None:
            from ..config import ParserConfig
            config = ParserConfig()

        self.tokens: List[Token] = list(tokens)
        self.registry = registry if registry is not None else build_grammar()
        self.config = config
        self.current = 0
        self._tree = Node(config.root)

    def parse(self) -> Node:
        """
        Parse the token stream into an AST.

        Returns:
            Root node whose children are the top-level statements

        Raises:
            RuleViolation: If a committed production fails to match
            TrailingTokensError: In strict mode, if tokens remain unparsed
            NestingTooDeepError: If the input nests beyond the recursion limit
        """
        alternatives = self.registry.lookup(self.config.root)
        logger.debug("Parsing %d tokens from %s", len(self.tokens), self.config.root.name)

        previous_limit = sys.getrecursionlimit()
        limit = max(
            previous_limit,
            min(previous_limit + RECURSION_FRAMES_PER_TOKEN * len(self.tokens), RECURSION_LIMIT_CEILING),
        )
        sys.setrecursionlimit(limit)
        try:
            self._parse_alternatives(alternatives)
        except RecursionError:
            token = self.tokens[self.current] if self.current < len(self.tokens) else None
            raise NestingTooDeepError(self.current, token, limit) from None
        finally:
            sys.setrecursionlimit(previous_limit)

        if self.config.strict and not self._is_at_end():
            raise TrailingTokensError(self.current, self.tokens[self.current])

        logger.info(
            "Parsed %d of %d tokens into %d top-level statements",
            self.current, len(self.tokens), len(self._tree.children),
        )
        return self._tree

    def _parse_alternatives(self, alternatives: Sequence[Production]) -> None:
        # Each root alternative is applied in turn at the cursor, not as a choice
        for production in alternatives:
            if self._is_at_end():
                break

            match = self.registry.evaluate(
                production,
                self.tokens,
                self.current,
                max_depth=self.config.max_depth,
            )
            if not match.matched:
                continue

            if self._tree.is_empty:
                self._tree = match.node
            else:
                self._tree.add(match.node)
            self.current += match.consumed

    def get_tree(self) -> Node:
        """The tree built so far (empty ROOT before parse())."""
        return self._tree

    def _is_at_end(self) -> bool:
        return (
            self.current >= len(self.tokens)
            or self.tokens[self.current].kind == TokenType.EOF
        )


def parse_tokens(
    tokens: Sequence[Token],
    registry: Optional[RuleRegistry] = None,
    config: Optional["ParserConfig"] = None,
) -> Node:
    """
    Convenience function to parse a token sequence.

    Raises:
        ParseError: If parsing fails
    """
    return Parser(tokens, registry, config).parse()
