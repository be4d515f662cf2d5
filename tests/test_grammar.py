"""
Test suite for the pseudocode grammar.

Tests cover:
- Binary operator levels and left-associative flattening
- Unary operators, grouping and floor expressions
- Statements: assignment, print, if
- Mandatory failures inside statements

Author: fluentparse developers
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from fluentparse.lexer.tokens import Token, TokenType
from fluentparse.parser.ast_nodes import Node, NodeTag
from fluentparse.parser.errors import GrammarError, UnderMatchError
from fluentparse.parser.grammar import build_grammar, BINARY_LEVELS
from fluentparse.parser.precedence import add_binary_operator_level
from fluentparse.parser.rules import Quantifier, RuleRegistry

T = TokenType
N = NodeTag


def tok(kind, lexeme=""):
    return Token(kind, lexeme)


def num(value):
    return Token(T.NUMBER, str(value))


def ident(name):
    return Token(T.IDENTIFIER, name)


EOL = tok(T.END_OF_LINE)


def first(node, tag):
    return next(node.find_all(tag))


class TestPrecedenceGenerator(unittest.TestCase):
    """Test cases for the binary operator level generator."""

    def test_generates_level_and_continuation(self):
        registry = RuleRegistry()
        add_binary_operator_level(registry, N.SUM, N.SUBSEQUENT_SUM, N.PRIMARY, T.PLUS)

        (level,) = registry.lookup(N.SUM)
        (continuation,) = registry.lookup(N.SUBSEQUENT_SUM)

        self.assertEqual(str(level), "SUM := PRIMARY SUBSEQUENT_SUM^*")
        self.assertEqual(str(continuation), "SUBSEQUENT_SUM := PLUS~ PRIMARY")
        self.assertEqual(level.elements[1].quantifier, Quantifier.ZERO_OR_MORE)

    def test_generated_level_flattens_operands(self):
        registry = RuleRegistry()
        registry.register(N.PRIMARY, lambda o: o.with_token(T.NUMBER).once())
        add_binary_operator_level(registry, N.SUM, N.SUBSEQUENT_SUM, N.PRIMARY, T.PLUS)

        stream = [num(1), tok(T.PLUS), num(2), tok(T.PLUS), num(3)]
        match = registry.evaluate(N.SUM, stream)

        self.assertEqual(match.consumed, 5)
        self.assertEqual([c.tag for c in match.node.children], [N.PRIMARY] * 3)


class TestGrammar(unittest.TestCase):
    """Test cases for the built-in grammar."""

    @classmethod
    def setUpClass(cls):
        cls.registry = build_grammar()

    def expression(self, *stream):
        match = self.registry.evaluate(N.EXPRESSION, list(stream))
        self.assertTrue(match.matched)
        self.assertEqual(match.consumed, len(stream))
        return match.node

    def statements(self, *stream):
        match = self.registry.evaluate(N.ROOT, list(stream))
        self.assertTrue(match.matched)
        return match.node

    def test_registry_is_frozen_and_complete(self):
        self.assertTrue(self.registry.is_frozen)
        self.registry.validate()
        with self.assertRaises(GrammarError):
            self.registry.register(N.PRIMARY, lambda o: o.with_token(T.NUMBER).once())

    def test_every_binary_level_is_chained(self):
        for index, (level, continuation, operator) in enumerate(BINARY_LEVELS):
            (production,) = self.registry.lookup(level)
            expected = BINARY_LEVELS[index + 1][0] if index + 1 < len(BINARY_LEVELS) else N.UNARY
            self.assertEqual(production.elements[0].rules, (expected,))
            (tail,) = self.registry.lookup(continuation)
            self.assertEqual(tail.elements[0].tokens, frozenset({operator}))

    def test_sum_is_flattened(self):
        tree = self.expression(num(1), tok(T.PLUS), num(2), tok(T.PLUS), num(3))

        sums = list(tree.find_all(N.SUM))
        self.assertEqual(len(sums), 1)
        self.assertEqual(len(sums[0].children), 3)
        self.assertTrue(all(isinstance(c, Node) for c in sums[0].children))
        self.assertNotIn(T.PLUS, [t.kind for t in tree.tokens()])
        self.assertEqual(list(tree.tokens()), [num(1), num(2), num(3)])

    def test_tighter_level_nests_under_looser(self):
        tree = self.expression(num(1), tok(T.PLUS), num(2), tok(T.MULTIPLY), num(3))

        total = first(tree, N.SUM)
        self.assertEqual(len(total.children), 2)
        products = [n for n in tree.find_all(N.MULTIPLY) if len(n.children) == 2]
        self.assertEqual(len(products), 1)
        self.assertEqual(list(products[0].tokens()), [num(2), num(3)])

    def test_single_operand_has_single_child_chain(self):
        tree = self.expression(num(7))

        self.assertEqual(tree.tag, N.EXPRESSION)
        for tag, _, _ in BINARY_LEVELS:
            self.assertEqual(len(first(tree, tag).children), 1)
        self.assertEqual(first(tree, N.PRIMARY).children, [num(7)])

    def test_unary_operators(self):
        cases = [
            (T.MINUS, N.UNARY_MINUS),
            (T.PLUS, N.UNARY_PLUS),
            (T.NOT, N.UNARY_NOT),
            (T.BITWISE_NOT, N.UNARY_BITWISE_NOT),
        ]
        for kind, tag in cases:
            with self.subTest(operator=kind.name):
                tree = self.expression(tok(kind), ident("x"))
                unary = first(tree, tag)
                self.assertEqual(list(unary.tokens()), [ident("x")])
                self.assertEqual(unary.children[0].tag, N.UNARY)

    def test_nested_unary(self):
        tree = self.expression(tok(T.MINUS), tok(T.NOT), num(1))

        self.assertEqual(len(list(tree.find_all(N.UNARY_MINUS))), 1)
        self.assertEqual(len(list(tree.find_all(N.UNARY_NOT))), 1)

    def test_subtracting_a_negative(self):
        tree = self.expression(num(1), tok(T.MINUS), tok(T.MINUS), num(2))

        difference = first(tree, N.SUBTRACT)
        self.assertEqual(len(difference.children), 2)
        self.assertEqual(len(list(difference.children[1].find_all(N.UNARY_MINUS))), 1)

    def test_grouping_is_hoisted(self):
        bare = self.expression(num(1), tok(T.PLUS), num(2))
        grouped = self.expression(
            tok(T.LEFT_PARENTHESIS), num(1), tok(T.PLUS), num(2), tok(T.RIGHT_PARENTHESIS)
        )

        primary = first(grouped, N.PRIMARY)
        self.assertEqual(primary.children, [bare])
        self.assertEqual(list(grouped.find_all(N.GROUP)), [])

    def test_floor_is_nested(self):
        bare = self.expression(num(1), tok(T.PLUS), num(2))
        floored = self.expression(
            tok(T.LEFT_SQUARE_BRACKET), num(1), tok(T.PLUS), num(2), tok(T.RIGHT_SQUARE_BRACKET)
        )

        primary = first(floored, N.PRIMARY)
        self.assertEqual(len(primary.children), 1)
        floor = primary.children[0]
        self.assertEqual(floor.tag, N.FLOOR)
        self.assertEqual(floor.children, [bare])

    def test_primaries(self):
        for token in (num(3), tok(T.STRING, "hi"), ident("y")):
            with self.subTest(kind=token.kind.name):
                self.assertEqual(first(self.expression(token), N.PRIMARY).children, [token])

    def test_unclosed_group(self):
        with self.assertRaises(UnderMatchError) as cm:
            self.registry.evaluate(N.EXPRESSION, [tok(T.LEFT_PARENTHESIS), num(1), EOL])
        self.assertEqual(cm.exception.tag, N.GROUP)
        self.assertEqual(cm.exception.position, 2)

    def test_dangling_operator(self):
        with self.assertRaises(UnderMatchError) as cm:
            self.registry.evaluate(N.EXPRESSION, [num(1), tok(T.PLUS), EOL])
        self.assertEqual(cm.exception.tag, N.SUBSEQUENT_SUM)

    def test_assignment_excludes_assign_token(self):
        tree = self.statements(ident("x"), tok(T.ASSIGN), num(5), EOL)

        (assignment,) = tree.children
        self.assertEqual(assignment.tag, N.ASSIGNMENT)
        self.assertEqual(len(assignment.children), 2)
        self.assertEqual(assignment.children[0], ident("x"))
        self.assertEqual(assignment.children[1].tag, N.EXPRESSION)
        self.assertNotIn(T.ASSIGN, [t.kind for t in assignment.tokens()])

    def test_bare_expression_statement(self):
        tree = self.statements(ident("x"), tok(T.PLUS), num(1), EOL)

        (statement,) = tree.children
        self.assertEqual(statement.tag, N.EXPRESSION)

    def test_print_with_several_expressions(self):
        tree = self.statements(
            tok(T.WRITE), num(1), tok(T.COMMA), ident("a"), tok(T.COMMA), tok(T.STRING, "s"), EOL
        )

        (printed,) = tree.children
        self.assertEqual(printed.tag, N.PRINT)
        self.assertEqual([c.tag for c in printed.children], [N.EXPRESSION] * 3)
        self.assertEqual(list(printed.tokens()), [num(1), ident("a"), tok(T.STRING, "s")])

    def test_if_statement(self):
        tree = self.statements(
            tok(T.IF), ident("c"), tok(T.THEN), EOL,
            tok(T.INDENT),
            tok(T.WRITE), num(1), EOL,
            ident("x"), tok(T.ASSIGN), num(2), EOL,
            tok(T.DEDENT), EOL,
        )

        (statement,) = tree.children
        self.assertEqual(statement.tag, N.IF_STATEMENT)
        condition, *body = statement.children
        self.assertEqual(condition.tag, N.EXPRESSION)
        self.assertEqual([s.tag for s in body], [N.STATEMENT, N.STATEMENT])
        self.assertEqual(body[0].children[0].tag, N.PRINT)
        self.assertEqual(body[1].children[0].tag, N.ASSIGNMENT)
        kinds = {t.kind for t in statement.tokens()}
        self.assertFalse(kinds & {T.IF, T.THEN, T.INDENT, T.DEDENT, T.END_OF_LINE})

    def test_nested_if_statements(self):
        tree = self.statements(
            tok(T.IF), ident("a"), tok(T.THEN), EOL,
            tok(T.INDENT),
            tok(T.IF), ident("b"), tok(T.THEN), EOL,
            tok(T.INDENT),
            tok(T.WRITE), num(1), EOL,
            tok(T.DEDENT), EOL,
            tok(T.DEDENT), EOL,
        )

        self.assertEqual(len(list(tree.find_all(N.IF_STATEMENT))), 2)

    def test_if_without_dedent_is_under_match(self):
        stream = [
            tok(T.IF), ident("c"), tok(T.THEN), EOL,
            tok(T.INDENT),
            tok(T.WRITE), num(1), EOL,
        ]

        with self.assertRaises(UnderMatchError) as cm:
            self.registry.evaluate(N.ROOT, stream)
        self.assertEqual(cm.exception.tag, N.IF_STATEMENT)
        self.assertEqual(cm.exception.position, len(stream))
        self.assertEqual(cm.exception.element.tokens, frozenset({T.DEDENT}))

    def test_if_token_resolves_to_if_statement(self):
        tree = self.statements(
            tok(T.IF), num(1), tok(T.THEN), EOL,
            tok(T.INDENT), num(2), EOL, tok(T.DEDENT), EOL,
        )

        self.assertEqual(tree.children[0].tag, N.IF_STATEMENT)

    def test_assignment_missing_expression(self):
        with self.assertRaises(UnderMatchError) as cm:
            self.registry.evaluate(N.ROOT, [ident("x"), tok(T.ASSIGN), EOL])
        self.assertEqual(cm.exception.tag, N.ASSIGNMENT)

    def test_statement_missing_end_of_line(self):
        with self.assertRaises(UnderMatchError) as cm:
            self.registry.evaluate(N.ROOT, [tok(T.WRITE), num(1), num(2), EOL])
        self.assertEqual(cm.exception.tag, N.STATEMENT)
        self.assertEqual(cm.exception.token, num(2))


if __name__ == "__main__":
    unittest.main()
