"""
Reading and writing serialized token streams.

The tokenizer lives outside this package; its output reaches the command line
tool as JSON. Two entry shapes are accepted:

    {"kind": "NUMBER", "lexeme": "1", "line": 3, "column": 5}
    ["NUMBER", "1"]

Author: fluentparse developers
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from .tokens import Token, TokenType, SourceLocation
from .errors import TokenStreamError, suggest_token_kinds

logger = logging.getLogger(__name__)


def load_tokens(data: Iterable[Any], filename: str = "<tokens>") -> List[Token]:
    """
    Build tokens from already-decoded JSON data.

    Raises:
        TokenStreamError: If an entry is malformed or names an unknown kind
    """
    if isinstance(data, (str, bytes, dict)):
        raise TokenStreamError(
            "Token stream must be a list of entries",
            code="T001",
            help_text="Wrap the tokens in a JSON array.",
        )

    tokens = []
    for index, entry in enumerate(data):
        if isinstance(entry, dict):
            if "kind" not in entry:
                raise TokenStreamError(
                    "Token entry has no 'kind'", index=index, code="T003"
                )
            kind_name = entry["kind"]
            lexeme = entry.get("lexeme", "")
            location = _location(entry, filename)
        elif isinstance(entry, (list, tuple)) and 1 <= len(entry) <= 2:
            kind_name = entry[0]
            lexeme = entry[1] if len(entry) == 2 else ""
            location = None
        else:
            raise TokenStreamError(
                f"Malformed token entry: {entry!r}",
                index=index,
                code="T003",
                help_text="Use an object with 'kind'/'lexeme' or a [kind, lexeme] pair.",
            )

        tokens.append(Token(_kind(kind_name, index), str(lexeme or ""), location))

    logger.debug("Loaded %d tokens from %s", len(tokens), filename)
    return tokens


def load_tokens_file(path: Union[str, Path]) -> List[Token]:
    """Read a JSON token stream from a file."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise TokenStreamError(
            f"Invalid JSON in {path}: {e.msg} at line {e.lineno}",
            code="T001",
        ) from e
    return load_tokens(data, filename=str(path))


def dump_tokens(tokens: Iterable[Token]) -> List[Dict[str, Any]]:
    """Serialize tokens into the object form understood by load_tokens."""
    result = []
    for token in tokens:
        entry: Dict[str, Any] = {"kind": token.kind.name, "lexeme": token.lexeme}
        if token.location is not None:
            entry["line"] = token.location.line
            entry["column"] = token.location.column
        result.append(entry)
    return result


def _kind(name: Any, index: int) -> TokenType:
    if isinstance(name, TokenType):
        return name
    try:
        return TokenType[str(name).upper()]
    except KeyError:
        suggestions = [f"Did you mean '{s}'?" for s in suggest_token_kinds(str(name))]
        raise TokenStreamError(
            f"Unknown token kind '{name}'",
            index=index,
            code="T002",
            suggestions=suggestions or None,
        ) from None


def _location(entry: Dict[str, Any], filename: str) -> Optional[SourceLocation]:
    if "line" not in entry:
        return None
    return SourceLocation(
        filename,
        int(entry["line"]),
        int(entry.get("column", 1)),
        int(entry.get("offset", 0)),
    )
