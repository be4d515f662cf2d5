"""
Grammar rules and the recursive-descent matching engine.

A grammar is a RuleRegistry of Productions. A Production is an immutable
description: a nonterminal tag and the ordered SequenceElements of its right
hand side. Productions sharing a tag are ordered alternatives. Productions are
declared with the fluent RuleBuilder:

    registry.register(NodeTag.ASSIGNMENT, lambda o: o
        .with_token(TokenType.IDENTIFIER).once()
        .then_token(TokenType.ASSIGN).exclude().once()
        .then_rule(NodeTag.EXPRESSION).once())

Matching never touches a Production. Every evaluation gets its own
RuleEvaluator holding the cursor and the tree under construction, so a
production can recurse into itself or be evaluated at several offsets at once.

Author: fluentparse developers
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import (
    Callable, Dict, FrozenSet, Iterator, List, Optional, Sequence, Tuple, Union
)

from ..lexer.tokens import Token, TokenType
from .ast_nodes import Node, NodeTag
from .errors import GrammarError, RuleViolation, UnderMatchError, OverMatchError

logger = logging.getLogger(__name__)


class Quantifier(Enum):
    """Repetition policy closing every sequence element."""
    ONCE = ""
    AT_MOST_ONCE = "?"
    AT_LEAST_ONCE = "+"
    ZERO_OR_MORE = "*"

    @property
    def minimum(self) -> int:
        return 1 if self in (Quantifier.ONCE, Quantifier.AT_LEAST_ONCE) else 0

    @property
    def maximum(self) -> Optional[int]:
        """Upper bound on matches, None when unbounded."""
        return 1 if self in (Quantifier.ONCE, Quantifier.AT_MOST_ONCE) else None


@dataclass(frozen=True)
class SequenceElement:
    """
    One step of a production: a set of token kinds or a tuple of nonterminal
    tags, a quantifier, and the tree-shaping flags.
    """
    tokens: FrozenSet[TokenType] = frozenset()
    rules: Tuple[NodeTag, ...] = ()
    quantifier: Quantifier = Quantifier.ONCE
    excluded: bool = False
    hoisted: bool = False
    is_first: bool = False

    @property
    def is_token(self) -> bool:
        return bool(self.tokens)

    def __str__(self) -> str:
        if self.tokens:
            names = sorted(kind.name for kind in self.tokens)
            suffix = "~" if self.excluded else ""
        else:
            names = [tag.name for tag in self.rules]
            suffix = "^" if self.hoisted else ""
        target = names[0] if len(names) == 1 else f"({' | '.join(names)})"
        return f"{target}{suffix}{self.quantifier.value}"


@dataclass(frozen=True)
class Production:
    """One alternative for a nonterminal."""
    tag: NodeTag
    elements: Tuple[SequenceElement, ...]

    def references(self) -> Iterator[NodeTag]:
        """Nonterminals named by this production's elements."""
        for element in self.elements:
            yield from element.rules

    def __str__(self) -> str:
        return f"{self.tag.name} := {' '.join(str(e) for e in self.elements)}"


@dataclass
class Match:
    """
    Outcome of evaluating a production or a choice of productions.

    A failed match has an empty node. When a non-final alternative failed after
    committing, ``violation`` holds the error it would have raised. On a
    successful match ``violation`` is the furthest soft failure seen along
    the way, used to report a better error if matching stops before it.
    """
    node: Node
    consumed: int
    violation: Optional[RuleViolation] = None

    @property
    def matched(self) -> bool:
        return not self.node.is_empty


# ============================================================================
# Fluent definition DSL
# ============================================================================

class _BuilderState(Enum):
    START = "start"     # nothing declared yet, only with_* is legal
    OPEN = "open"       # element target chosen, waiting for a quantifier
    CLOSED = "closed"   # element closed, then_* or a modifier is legal


class RuleBuilder:
    """
    Fluent declaration of one production.

    Each element is opened by ``with_token``/``with_rule`` (first element) or
    ``then_token``/``then_rule`` (every later element) and closed by exactly
    one quantifier. ``exclude()`` applies to token elements and ``hoist()``
    to rule elements, either before or right after the quantifier.
    """

    def __init__(self, tag: NodeTag):
        self.tag = tag
        self._elements: List[SequenceElement] = []
        self._pending: Optional[SequenceElement] = None
        self._state = _BuilderState.START

    # ------------------------------------------------------------------
    # Element targets
    # ------------------------------------------------------------------

    def with_token(self, *kinds: TokenType) -> "RuleBuilder":
        self._expect(_BuilderState.START, "with_token")
        return self._open(SequenceElement(tokens=self._token_set(kinds), is_first=True))

    def with_rule(self, *tags: NodeTag) -> "RuleBuilder":
        self._expect(_BuilderState.START, "with_rule")
        return self._open(SequenceElement(rules=self._rule_tuple(tags), is_first=True))

    def then_token(self, *kinds: TokenType) -> "RuleBuilder":
        self._expect(_BuilderState.CLOSED, "then_token")
        return self._open(SequenceElement(tokens=self._token_set(kinds)))

    def then_rule(self, *tags: NodeTag) -> "RuleBuilder":
        self._expect(_BuilderState.CLOSED, "then_rule")
        return self._open(SequenceElement(rules=self._rule_tuple(tags)))

    # ------------------------------------------------------------------
    # Quantifiers
    # ------------------------------------------------------------------

    def once(self) -> "RuleBuilder":
        return self._close(Quantifier.ONCE)

    def at_most_once(self) -> "RuleBuilder":
        return self._close(Quantifier.AT_MOST_ONCE)

    def at_least_once(self) -> "RuleBuilder":
        return self._close(Quantifier.AT_LEAST_ONCE)

    def zero_or_more(self) -> "RuleBuilder":
        return self._close(Quantifier.ZERO_OR_MORE)

    # ------------------------------------------------------------------
    # Tree shaping
    # ------------------------------------------------------------------

    def exclude(self) -> "RuleBuilder":
        """Consume the matched tokens but leave them out of the tree."""
        element = self._modifiable("exclude")
        if not element.is_token:
            raise GrammarError(f"{self.tag.name}: exclude() only applies to token elements")
        return self._modify(replace(element, excluded=True))

    def hoist(self) -> "RuleBuilder":
        """Splice the matched node's children into this production's tree."""
        element = self._modifiable("hoist")
        if element.is_token:
            raise GrammarError(f"{self.tag.name}: hoist() only applies to rule elements")
        return self._modify(replace(element, hoisted=True))

    def build(self) -> Production:
        if self._state is not _BuilderState.CLOSED:
            raise GrammarError(
                f"{self.tag.name}: every element must be closed by a quantifier"
                if self._state is _BuilderState.OPEN
                else f"{self.tag.name}: production has no elements"
            )
        return Production(self.tag, tuple(self._elements))

    # ------------------------------------------------------------------
    # State machine helpers
    # ------------------------------------------------------------------

    def _expect(self, state: _BuilderState, call: str) -> None:
        if self._state is not state:
            raise GrammarError(
                f"{self.tag.name}: {call}() is not allowed while the builder is {self._state.value}"
            )

    def _open(self, element: SequenceElement) -> "RuleBuilder":
        self._pending = element
        self._state = _BuilderState.OPEN
        return self

    def _close(self, quantifier: Quantifier) -> "RuleBuilder":
        self._expect(_BuilderState.OPEN, quantifier.name.lower())
        self._elements.append(replace(self._pending, quantifier=quantifier))
        self._pending = None
        self._state = _BuilderState.CLOSED
        return self

    def _modifiable(self, call: str) -> SequenceElement:
        if self._state is _BuilderState.OPEN:
            return self._pending
        if self._state is _BuilderState.CLOSED:
            return self._elements[-1]
        raise GrammarError(f"{self.tag.name}: {call}() needs an element to apply to")

    def _modify(self, element: SequenceElement) -> "RuleBuilder":
        if self._state is _BuilderState.OPEN:
            self._pending = element
        else:
            self._elements[-1] = element
        return self

    def _token_set(self, kinds: Sequence[TokenType]) -> FrozenSet[TokenType]:
        if not kinds or not all(isinstance(kind, TokenType) for kind in kinds):
            raise GrammarError(f"{self.tag.name}: token elements need one or more TokenType values")
        return frozenset(kinds)

    def _rule_tuple(self, tags: Sequence[NodeTag]) -> Tuple[NodeTag, ...]:
        if not tags or not all(isinstance(tag, NodeTag) for tag in tags):
            raise GrammarError(f"{self.tag.name}: rule elements need one or more NodeTag values")
        if NodeTag.TERMINAL in tags:
            raise GrammarError(f"{self.tag.name}: TERMINAL is not a nonterminal")
        return tuple(tags)


Definition = Union[Production, Callable[[RuleBuilder], RuleBuilder]]


# ============================================================================
# Registry
# ============================================================================

class RuleRegistry:
    """
    The table of productions, keyed by nonterminal.

    Built once, then frozen and shared read-only by every parse.
    """

    def __init__(self):
        self._rules: Dict[NodeTag, List[Production]] = {}
        self._frozen = False

    def register(self, tag: NodeTag, definition: Definition) -> Production:
        """
        Add an alternative for ``tag``.

        Args:
            tag: Nonterminal the alternative belongs to
            definition: A Production, or a callable that receives a fresh
                RuleBuilder and returns it after declaring the elements

        Returns:
            The registered Production
        """
        if self._frozen:
            raise GrammarError(f"Cannot register {tag.name}: the registry is frozen")

        if isinstance(definition, Production):
            production = definition
        else:
            builder = definition(RuleBuilder(tag))
            if not isinstance(builder, RuleBuilder):
                raise GrammarError(f"{tag.name}: definition must return the RuleBuilder it received")
            production = builder.build()

        if production.tag is not tag:
            raise GrammarError(f"Production for {production.tag.name} registered under {tag.name}")

        self._rules.setdefault(tag, []).append(production)
        logger.debug("Registered %s", production)
        return production

    def add_rule(self, production: Production) -> Production:
        """Register a ready Production under its own tag."""
        return self.register(production.tag, production)

    def lookup(self, tag: NodeTag) -> Tuple[Production, ...]:
        """The ordered alternatives of ``tag``."""
        try:
            return tuple(self._rules[tag])
        except KeyError:
            raise GrammarError(f"No production registered for {tag.name}") from None

    def candidates(self, tags: Sequence[NodeTag]) -> List[Production]:
        """Every alternative of every tag, in the order they are tried."""
        result: List[Production] = []
        for tag in tags:
            result.extend(self.lookup(tag))
        return result

    def freeze(self) -> "RuleRegistry":
        self._frozen = True
        return self

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def validate(self) -> None:
        """Raise GrammarError if any production names an unregistered tag."""
        missing = set()
        for production in self:
            for tag in production.references():
                if tag not in self._rules:
                    missing.add(tag.name)
        if missing:
            raise GrammarError(f"Undefined nonterminals: {', '.join(sorted(missing))}")

    @property
    def tags(self) -> List[NodeTag]:
        return list(self._rules)

    def __contains__(self, tag: NodeTag) -> bool:
        return tag in self._rules

    def __iter__(self) -> Iterator[Production]:
        for alternatives in self._rules.values():
            yield from alternatives

    def __len__(self) -> int:
        return sum(len(alternatives) for alternatives in self._rules.values())

    def __str__(self) -> str:
        return "\n".join(str(production) for production in self)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate(
        self,
        target: Union[NodeTag, Production],
        tokens: Sequence[Token],
        start: int = 0,
        final: bool = True,
        max_depth: Optional[int] = None,
        depth: int = 0,
    ) -> Match:
        """
        Match ``target`` against ``tokens[start:]``.

        A tag is an ordered choice over its alternatives; a Production is
        evaluated on its own.

        Returns:
            The Match; ``consumed`` counts tokens from ``start``

        Raises:
            RuleViolation: If a committed final alternative fails
        """
        if isinstance(target, Production):
            evaluator = RuleEvaluator(self, target, tokens, start, final, max_depth, depth)
            return evaluator.run()
        return self.choose((target,), tokens, start, max_depth=max_depth, depth=depth, probing=not final)

    def choose(
        self,
        tags: Sequence[NodeTag],
        tokens: Sequence[Token],
        start: int,
        max_depth: Optional[int] = None,
        depth: int = 0,
        probing: bool = False,
    ) -> Match:
        """
        Ordered choice: the first alternative of the first tag producing a
        non-empty node wins and nothing after it is tried.

        Only the last alternative is final. Earlier ones that fail after
        committing report their violation softly; if nothing matches, the
        violation that got furthest is raised. When ``probing`` no
        alternative is final, nested choices included, and nothing is raised.
        """
        alternatives = self.candidates(tags)
        furthest: Optional[RuleViolation] = None

        for index, production in enumerate(alternatives):
            final = not probing and index == len(alternatives) - 1
            evaluator = RuleEvaluator(
                self, production, tokens, start, final, max_depth, depth, probing
            )
            match = evaluator.run()
            if match.matched:
                match.violation = _furthest(furthest, match.violation)
                return match
            furthest = _furthest(furthest, match.violation)

        if furthest is not None and not probing:
            raise furthest
        return Match(Node(tags[0]), 0, furthest)


def _furthest(
    current: Optional[RuleViolation], candidate: Optional[RuleViolation]
) -> Optional[RuleViolation]:
    if candidate is None:
        return current
    if current is None or candidate.position > current.position:
        return candidate
    return current


# ============================================================================
# Evaluation
# ============================================================================

class RuleEvaluator:
    """
    Mutable state for one evaluation of one production.

    The cursor is relative to ``start``. ``committed`` becomes true once the
    first element matches; from then on every element is mandatory.
    """

    def __init__(
        self,
        registry: RuleRegistry,
        production: Production,
        tokens: Sequence[Token],
        start: int = 0,
        final: bool = True,
        max_depth: Optional[int] = None,
        depth: int = 0,
        probing: bool = False,
    ):
        self.registry = registry
        self.production = production
        self.tokens = tokens
        self.start = start
        self.final = final
        self.max_depth = max_depth
        self.depth = depth
        self.probing = probing

        self.cursor = 0
        self.tree = Node(production.tag)
        self.committed = False
        self.violation: Optional[RuleViolation] = None
        self.hint: Optional[RuleViolation] = None

    @property
    def position(self) -> int:
        """Absolute index of the next token to match."""
        return self.start + self.cursor

    def run(self) -> Match:
        if self.max_depth is not None and self.depth > self.max_depth:
            raise GrammarError(
                f"Evaluation of {self.production.tag.name} exceeded the maximum depth of "
                f"{self.max_depth}; the grammar may be left-recursive"
            )

        if self.start >= len(self.tokens):
            return Match(self.tree, 0)

        for index, element in enumerate(self.production.elements):
            if not element.is_first and not self.committed:
                continue
            self._apply(index, element)
            if self.violation is not None:
                logger.debug("%s failed softly: %s", self.production.tag.name, self.violation.args[0])
                return Match(Node(self.production.tag), 0, self.violation)

        if not self.tree.is_empty:
            logger.debug(
                "%s matched tokens %d-%d",
                self.production.tag.name, self.start, self.position - 1,
            )
        return Match(self.tree, self.cursor, self.hint)

    def _apply(self, index: int, element: SequenceElement) -> None:
        """Match one element as often as its quantifier allows."""
        limit = element.quantifier.maximum
        count = 0
        while limit is None or count < limit:
            if not self._match_one(element):
                break
            count += 1

        if element.is_first:
            self.committed = count > 0
            return

        if count < element.quantifier.minimum:
            self._violate(UnderMatchError, index, element)
        elif element.quantifier is Quantifier.AT_MOST_ONCE and count == 1 and self._probe(element):
            self._violate(OverMatchError, index, element)

    def _match_one(self, element: SequenceElement) -> bool:
        position = self.position
        if position >= len(self.tokens):
            return False

        if element.is_token:
            token = self.tokens[position]
            if token.kind not in element.tokens:
                return False
            if not element.excluded:
                self.tree.add(token)
            self.cursor += 1
            return True

        match = self.registry.choose(
            element.rules, self.tokens, position,
            max_depth=self.max_depth, depth=self.depth + 1, probing=self.probing,
        )
        if not match.matched:
            return False
        self.hint = _furthest(self.hint, match.violation)
        self._attach(match.node, element)
        self.cursor += match.consumed
        return True

    def _probe(self, element: SequenceElement) -> bool:
        """Whether the element would match again at the cursor, without consuming."""
        position = self.position
        if position >= len(self.tokens):
            return False
        if element.is_token:
            return self.tokens[position].kind in element.tokens
        match = self.registry.choose(
            element.rules, self.tokens, position,
            max_depth=self.max_depth, depth=self.depth + 1, probing=True,
        )
        return match.matched

    def _attach(self, node: Node, element: SequenceElement) -> None:
        if element.hoisted or node.tag is self.production.tag:
            self.tree.add_children(node)
        else:
            self.tree.add(node)

    def _violate(self, error_class, index: int, element: SequenceElement) -> None:
        position = self.position
        token = self.tokens[position] if position < len(self.tokens) else None
        violation = error_class(self.production.tag, index, element, position, token)
        # An alternative that got further explains the failure better
        if self.hint is not None and self.hint.position > position:
            violation = self.hint
        if self.final:
            raise violation
        self.violation = violation
