"""
Error handling for the fluentparse engine.

The engine fails fast: a rule violation is raised where it is detected and
unwinds the whole evaluation. Nothing is recovered and no partial tree is
returned.

Author: fluentparse developers
"""

from typing import Optional, List, TYPE_CHECKING

from ..lexer.tokens import Token
from ..lexer.errors import Diagnostic

if TYPE_CHECKING:
    from .ast_nodes import NodeTag
    from .rules import SequenceElement


class GrammarError(Exception):
    """
    Raised for mistakes in a grammar definition rather than in the input:
    illegal DSL call order, unknown nonterminals, registration after the
    registry was frozen, or runaway recursion.
    """


class ParseError(Exception):
    """
    Exception raised when the token stream does not fit the grammar.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        message: str,
        token: Optional[Token] = None,
        position: Optional[int] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.token = token
        self.position = position
        self.diagnostic = Diagnostic(
            message=message,
            location=token.location if token is not None else None,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    def __str__(self) -> str:
        return str(self.diagnostic)


class RuleViolation(ParseError):
    """
    A committed production could not satisfy one of its elements.

    Attributes:
        tag: The production that was being evaluated
        element_index: Position of the failing element in that production
        element: The failing sequence element
        position: Absolute index of the token where matching stopped
        token: The token at that index, or None at the end of input
    """

    code = "P100"
    reason = "violated"

    def __init__(
        self,
        tag: "NodeTag",
        element_index: int,
        element: "SequenceElement",
        position: int,
        token: Optional[Token] = None,
    ):
        self.tag = tag
        self.element_index = element_index
        self.element = element
        found = str(token) if token is not None else "end of input"
        super().__init__(
            f"Rule {tag.name} has matched {self.reason}: "
            f"element {element_index} ({element}) at token {position}, found {found}",
            token=token,
            position=position,
            code=self.code,
            help_text=f"{tag.name} had already matched its first element, "
                      f"so every following element is mandatory.",
        )


class UnderMatchError(RuleViolation):
    """A mandatory element matched fewer times than its quantifier requires."""
    code = "P101"
    reason = "less than once"


class OverMatchError(RuleViolation):
    """An at-most-once element found a second consecutive occurrence."""
    code = "P102"
    reason = "more than once"


class TrailingTokensError(ParseError):
    """Strict mode only: tokens remained after the root production finished."""

    def __init__(self, position: int, token: Token):
        super().__init__(
            f"Unexpected {token} at token {position} after the last statement",
            token=token,
            position=position,
            code="P103",
            help_text="No statement could start at this token.",
            suggestions=["Check for a missing END_OF_LINE", "Check the statement syntax"],
        )


class NestingTooDeepError(ParseError):
    """The input nests deeper than the interpreter's recursion limit allows."""

    def __init__(self, position: int, token: Optional[Token], limit: int):
        self.limit = limit
        super().__init__(
            f"Input nests too deeply to parse from token {position}: "
            f"evaluation exceeded a recursion depth of {limit}",
            token=token,
            position=position,
            code="P104",
            help_text="Each level of grouping or unary operators adds a full pass through the expression grammar.",
            suggestions=["Split the expression into intermediate assignments"],
        )


# Parser error codes for categorization
PARSER_ERROR_CODES = {
    "P100": "Rule violated",
    "P101": "Rule matched less than once",
    "P102": "Rule matched more than once",
    "P103": "Unparsed trailing tokens",
    "P104": "Nesting too deep",
}
