"""
Diagnostics shared by the token-stream reader and the parser.

Author: fluentparse developers
"""

from typing import Optional, List
from dataclasses import dataclass

from .tokens import SourceLocation


@dataclass
class Diagnostic:
    """A single error or warning with an optional source location."""
    message: str
    location: Optional[SourceLocation]
    severity: str  # "error", "warning", "info", "hint"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        result = f"{severity_prefix}: {self.message}\n"
        if self.location is not None:
            result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class TokenStreamError(Exception):
    """
    Raised when a serialized token stream cannot be turned into tokens.
    """

    def __init__(
        self,
        message: str,
        index: Optional[int] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.index = index
        self.diagnostic = Diagnostic(
            message=message if index is None else f"{message} (token #{index})",
            location=None,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    def __str__(self) -> str:
        return str(self.diagnostic)


def suggest_token_kinds(name: str) -> List[str]:
    """Suggest known token kinds close to an unknown kind name."""
    from .tokens import TokenType

    candidates = []
    for kind in TokenType:
        distance = _edit_distance(name.upper(), kind.name)
        if distance <= 2:
            candidates.append((distance, kind.name))

    return [name for _, name in sorted(candidates)[:3]]


def _edit_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein distance between two strings."""
    if len(s1) < len(s2):
        return _edit_distance(s2, s1)

    if len(s2) == 0:
        return len(s1)

    previous_row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


# Error codes for token stream problems
ERROR_CODES = {
    "T001": "Malformed token stream",
    "T002": "Unknown token kind",
    "T003": "Malformed token entry",
}
