"""
Test suite for the token model and serialized token streams.

Author: fluentparse developers
"""

import json
import os
import sys
import tempfile
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from fluentparse.lexer import (
    Token, TokenType, SourceLocation, TokenStreamError,
    load_tokens, load_tokens_file, dump_tokens,
)


class TestToken(unittest.TestCase):
    """Test cases for Token."""

    def test_str(self):
        self.assertEqual(str(Token(TokenType.NUMBER, "1")), "NUMBER('1')")
        self.assertEqual(str(Token(TokenType.END_OF_LINE)), "END_OF_LINE")

    def test_categories(self):
        self.assertTrue(Token(TokenType.STRING, "s").is_literal)
        self.assertTrue(Token(TokenType.WRITE).is_keyword)
        self.assertTrue(Token(TokenType.DEDENT).is_layout)
        self.assertFalse(Token(TokenType.PLUS).is_keyword)

    def test_equality_and_hash(self):
        a = Token(TokenType.IDENTIFIER, "x")
        b = Token(TokenType.IDENTIFIER, "x")

        self.assertEqual(a, b)
        self.assertEqual(len({a, b}), 1)


class TestLoadTokens(unittest.TestCase):
    """Test cases for reading token streams."""

    def test_object_entries(self):
        tokens = load_tokens([
            {"kind": "IDENTIFIER", "lexeme": "x", "line": 1, "column": 1},
            {"kind": "assign"},
        ], filename="prog.tokens")

        self.assertEqual(tokens[0].kind, TokenType.IDENTIFIER)
        self.assertEqual(tokens[0].lexeme, "x")
        self.assertEqual(tokens[0].location, SourceLocation("prog.tokens", 1, 1))
        self.assertEqual(tokens[1], Token(TokenType.ASSIGN))

    def test_pair_entries(self):
        tokens = load_tokens([["NUMBER", "1"], ["END_OF_LINE"]])

        self.assertEqual(tokens, [Token(TokenType.NUMBER, "1"), Token(TokenType.END_OF_LINE)])

    def test_unknown_kind_suggests(self):
        with self.assertRaises(TokenStreamError) as cm:
            load_tokens([["NUMBR", "1"]])

        self.assertEqual(cm.exception.index, 0)
        self.assertEqual(cm.exception.diagnostic.code, "T002")
        self.assertIn("NUMBER", str(cm.exception))

    def test_rejects_non_list(self):
        with self.assertRaises(TokenStreamError) as cm:
            load_tokens({"kind": "NUMBER"})
        self.assertEqual(cm.exception.diagnostic.code, "T001")

    def test_missing_kind(self):
        with self.assertRaises(TokenStreamError) as cm:
            load_tokens([{"kind": "NUMBER"}, {"lexeme": "1"}])
        self.assertEqual(cm.exception.index, 1)
        self.assertEqual(cm.exception.diagnostic.code, "T003")

    def test_malformed_entry(self):
        with self.assertRaises(TokenStreamError):
            load_tokens([42])

    def test_dump_round_trip(self):
        tokens = [
            Token(TokenType.WRITE, "write", SourceLocation("<tokens>", 2, 1)),
            Token(TokenType.STRING, "hi"),
        ]

        self.assertEqual(load_tokens(dump_tokens(tokens)), tokens)


class TestLoadTokensFile(unittest.TestCase):
    """Test cases for reading token files."""

    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.directory.name, "tokens.json")

    def tearDown(self):
        self.directory.cleanup()

    def test_reads_file(self):
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump([{"kind": "NUMBER", "lexeme": "7", "line": 4, "column": 2}], f)

        tokens = load_tokens_file(self.path)

        self.assertEqual(tokens[0].lexeme, "7")
        self.assertEqual(tokens[0].location.filename, self.path)
        self.assertEqual(tokens[0].location.line, 4)

    def test_invalid_json(self):
        with open(self.path, "w", encoding="utf-8") as f:
            f.write("[{]")

        with self.assertRaises(TokenStreamError) as cm:
            load_tokens_file(self.path)
        self.assertEqual(cm.exception.diagnostic.code, "T001")


if __name__ == "__main__":
    unittest.main()
