"""
Parser configuration.

Author: fluentparse developers
"""

from dataclasses import dataclass
from typing import Optional

from .parser.ast_nodes import NodeTag


@dataclass
class ParserConfig:
    """Options controlling a parse."""
    root: NodeTag = NodeTag.ROOT        # production the driver starts from
    strict: bool = False                # fail on tokens left after the last statement
    max_depth: Optional[int] = None     # evaluation nesting limit, None for unbounded

    def __post_init__(self):
        if self.max_depth is not None and self.max_depth < 1:
            raise ValueError("max_depth must be a positive integer")
        if self.root is NodeTag.TERMINAL:
            raise ValueError("TERMINAL cannot be the root production")
