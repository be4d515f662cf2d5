"""
Test suite for the command line interface.

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

from click.testing import CliRunner

from fluentparse.cli import cli


class TestCli(unittest.TestCase):
    """Test cases for the fluentparse command."""

    def setUp(self):
        self.runner = CliRunner()
        self.directory = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.directory.cleanup()

    def write_tokens(self, entries):
        path = os.path.join(self.directory.name, "tokens.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump(entries, f)
        return path

    def test_parse_json(self):
        path = self.write_tokens([
            ["IDENTIFIER", "x"], ["ASSIGN"], ["NUMBER", "1"], ["END_OF_LINE"],
        ])

        result = self.runner.invoke(cli, ["parse", path, "--format", "json"])

        self.assertEqual(result.exit_code, 0, result.output)
        tree = json.loads(result.output)
        self.assertEqual(tree["tag"], "Root")
        self.assertEqual(tree["children"][0]["tag"], "Assignment")
        self.assertEqual(
            tree["children"][0]["children"][0],
            {"tag": "Terminal", "kind": "IDENTIFIER", "lexeme": "x"},
        )

    def test_parse_tree(self):
        path = self.write_tokens([["WRITE"], ["STRING", "hi"], ["END_OF_LINE"]])

        result = self.runner.invoke(cli, ["parse", path])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Root", result.output)
        self.assertIn("Print", result.output)
        self.assertIn("'hi'", result.output)

    def test_parse_error_exits_nonzero(self):
        path = self.write_tokens([["IF"], ["IDENTIFIER", "x"], ["END_OF_LINE"]])

        result = self.runner.invoke(cli, ["parse", path])

        self.assertEqual(result.exit_code, 1)
        self.assertIn("IF_STATEMENT", result.output)

    def test_strict_trailing_tokens(self):
        path = self.write_tokens([["NUMBER", "1"], ["END_OF_LINE"], ["RIGHT_PARENTHESIS"]])

        self.assertEqual(self.runner.invoke(cli, ["parse", path]).exit_code, 0)
        result = self.runner.invoke(cli, ["parse", path, "--strict"])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("RIGHT_PARENTHESIS", result.output)

    def test_bad_token_file(self):
        path = self.write_tokens([["NUMBR", "1"]])

        result = self.runner.invoke(cli, ["parse", path])

        self.assertEqual(result.exit_code, 1)
        self.assertIn("Unknown token kind", result.output)

    def test_invalid_max_depth(self):
        path = self.write_tokens([])

        result = self.runner.invoke(cli, ["parse", path, "--max-depth", "0"])

        self.assertEqual(result.exit_code, 2)

    def test_grammar_listing(self):
        result = self.runner.invoke(cli, ["grammar"])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("ROOT", result.output)
        self.assertIn("SUBSEQUENT_SUM", result.output)


if __name__ == "__main__":
    unittest.main()
