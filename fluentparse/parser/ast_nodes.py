"""
Abstract Syntax Tree node definitions for fluentparse.

Every result of a production, intermediate or final, is a Node: a tag naming
the nonterminal that produced it and an ordered list of children, each either
a Token or a nested Node. A node without children stands for a failed match.

Author: fluentparse developers
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Union

from ..lexer.tokens import Token


class NodeTag(Enum):
    """Enumeration of all nonterminals produced by the grammar."""

    # Marker used for token leaves in serialized trees
    TERMINAL = "Terminal"

    # Top-level
    ROOT = "Root"

    # Statements
    STATEMENT = "Statement"
    IF_STATEMENT = "IfStatement"
    ASSIGNMENT = "Assignment"
    PRINT = "Print"
    SUBSEQUENT_PRINT = "SubsequentPrint"

    # Expressions
    EXPRESSION = "Expression"

    LOGICAL_OR = "LogicalOr"
    SUBSEQUENT_LOGICAL_OR = "SubsequentLogicalOr"
    LOGICAL_AND = "LogicalAnd"
    SUBSEQUENT_LOGICAL_AND = "SubsequentLogicalAnd"
    BITWISE_OR = "BitwiseOr"
    SUBSEQUENT_BITWISE_OR = "SubsequentBitwiseOr"
    BITWISE_XOR = "BitwiseXor"
    SUBSEQUENT_BITWISE_XOR = "SubsequentBitwiseXor"
    BITWISE_AND = "BitwiseAnd"
    SUBSEQUENT_BITWISE_AND = "SubsequentBitwiseAnd"
    NOT_EQUAL = "NotEqual"
    SUBSEQUENT_NOT_EQUAL = "SubsequentNotEqual"
    EQUAL = "Equal"
    SUBSEQUENT_EQUAL = "SubsequentEqual"
    LESS_THAN = "LessThan"
    SUBSEQUENT_LESS_THAN = "SubsequentLessThan"
    LESS_THAN_EQUAL = "LessThanEqual"
    SUBSEQUENT_LESS_THAN_EQUAL = "SubsequentLessThanEqual"
    GREATER_THAN = "GreaterThan"
    SUBSEQUENT_GREATER_THAN = "SubsequentGreaterThan"
    GREATER_THAN_EQUAL = "GreaterThanEqual"
    SUBSEQUENT_GREATER_THAN_EQUAL = "SubsequentGreaterThanEqual"
    BITWISE_LEFT_SHIFT = "BitwiseLeftShift"
    SUBSEQUENT_BITWISE_LEFT_SHIFT = "SubsequentBitwiseLeftShift"
    BITWISE_RIGHT_SHIFT = "BitwiseRightShift"
    SUBSEQUENT_BITWISE_RIGHT_SHIFT = "SubsequentBitwiseRightShift"
    SUM = "Sum"
    SUBSEQUENT_SUM = "SubsequentSum"
    SUBTRACT = "Subtract"
    SUBSEQUENT_SUBTRACT = "SubsequentSubtract"
    MULTIPLY = "Multiply"
    SUBSEQUENT_MULTIPLY = "SubsequentMultiply"
    DIVIDE = "Divide"
    SUBSEQUENT_DIVIDE = "SubsequentDivide"
    MODULUS = "Modulus"
    SUBSEQUENT_MODULUS = "SubsequentModulus"
    POWER = "Power"
    SUBSEQUENT_POWER = "SubsequentPower"

    # Unary expressions
    UNARY = "Unary"
    UNARY_MINUS = "UnaryMinus"
    UNARY_PLUS = "UnaryPlus"
    UNARY_NOT = "UnaryNot"
    UNARY_BITWISE_NOT = "UnaryBitwiseNot"

    # Primaries
    PRIMARY = "Primary"
    GROUP = "Group"
    FLOOR = "Floor"


Child = Union[Token, "Node"]


@dataclass
class Node:
    """
    A tree node built while a production is evaluated.

    Children are only ever appended. Equality is structural: two nodes are
    equal when their tags and children are equal.
    """
    tag: NodeTag
    children: List[Child] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when nothing has been attached, i.e. the match failed."""
        return not self.children

    def add(self, child: Child) -> None:
        """Append a token leaf or a nested node."""
        if not isinstance(child, (Token, Node)):
            raise TypeError(f"Cannot attach {type(child).__name__} to a Node")
        self.children.append(child)

    def add_children(self, other: "Node") -> None:
        """Splice another node's children into this one (hoisting)."""
        self.children.extend(other.children)

    @property
    def nodes(self) -> List["Node"]:
        """Child nodes, without token leaves."""
        return [child for child in self.children if isinstance(child, Node)]

    def tokens(self) -> Iterator[Token]:
        """Yield every token leaf of this subtree in source order."""
        for child in self.children:
            if isinstance(child, Node):
                yield from child.tokens()
            else:
                yield child

    def find_all(self, tag: NodeTag) -> Iterator["Node"]:
        """Yield every node in this subtree (self included) with the given tag."""
        if self.tag is tag:
            yield self
        for child in self.nodes:
            yield from child.find_all(tag)

    def depth(self) -> int:
        """Number of node levels in this subtree; token leaves do not count."""
        return 1 + max((child.depth() for child in self.nodes), default=0)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation of the subtree."""
        children = []
        for child in self.children:
            if isinstance(child, Node):
                children.append(child.to_dict())
            else:
                children.append({
                    "tag": NodeTag.TERMINAL.value,
                    "kind": child.kind.name,
                    "lexeme": child.lexeme,
                })
        return {"tag": self.tag.value, "children": children}

    def pretty(self, indent: str = "  ") -> str:
        """Indented multi-line dump, one node or token per line."""
        lines: List[str] = []
        self._pretty(lines, 0, indent)
        return "\n".join(lines)

    def _pretty(self, lines: List[str], level: int, indent: str) -> None:
        lines.append(f"{indent * level}{self.tag.value}")
        for child in self.children:
            if isinstance(child, Node):
                child._pretty(lines, level + 1, indent)
            else:
                lines.append(f"{indent * (level + 1)}{child}")

    def __len__(self) -> int:
        return len(self.children)

    def __str__(self) -> str:
        return f"{self.tag.value}[{', '.join(str(c) for c in self.children)}]"
