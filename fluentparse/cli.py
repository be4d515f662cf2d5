"""
Command line interface for fluentparse.

    fluentparse parse tokens.json [--format tree|json] [--strict] [--max-depth N]
    fluentparse grammar

Token files are JSON token streams as produced by the external tokenizer
(see fluentparse.lexer.stream).

Author: fluentparse developers
"""

import json
import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from . import __version__
from .config import ParserConfig
from .lexer import TokenStreamError, load_tokens_file
from .parser import Node, Parser, build_grammar
from .parser.errors import GrammarError, ParseError

logger = logging.getLogger(__name__)

console = Console()
error_console = Console(stderr=True)


@click.group()
@click.version_option(__version__, prog_name="fluentparse")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """fluentparse: recursive-descent parser for pseudocode token streams."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command("parse")
@click.argument("tokens_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["tree", "json"]),
    default="tree",
    help="Output format",
)
@click.option("--strict", is_flag=True, help="Fail on tokens left after the last statement")
@click.option("--max-depth", type=int, default=None, help="Maximum evaluation depth")
def parse_cmd(tokens_path: str, output_format: str, strict: bool, max_depth: Optional[int]) -> None:
    """Parse a JSON token stream and print the AST."""
    try:
        config = ParserConfig(strict=strict, max_depth=max_depth)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--max-depth")

    try:
        tokens = load_tokens_file(tokens_path)
        tree = Parser(tokens, config=config).parse()
    except (TokenStreamError, ParseError) as e:
        error_console.print(str(e), markup=False, highlight=False)
        sys.exit(1)
    except GrammarError as e:
        error_console.print(f"Grammar error: {e}", markup=False, highlight=False)
        sys.exit(2)

    if output_format == "json":
        click.echo(json.dumps(tree.to_dict(), indent=2))
    else:
        console.print(render_tree(tree))


@cli.command("grammar")
def grammar_cmd() -> None:
    """List the productions of the built-in grammar."""
    registry = build_grammar()

    table = Table(title=f"Grammar ({len(registry)} productions)")
    table.add_column("Nonterminal", style="cyan")
    table.add_column("Alternative")
    for production in registry:
        rhs = " ".join(str(element) for element in production.elements)
        table.add_row(production.tag.name, rhs)

    console.print(table)


def render_tree(node: Node, tree: Optional[Tree] = None) -> Tree:
    """Convert a Node into a rich Tree for display."""
    label = f"[bold]{node.tag.value}[/bold]"
    branch = Tree(label) if tree is None else tree.add(label)
    for child in node.children:
        if isinstance(child, Node):
            render_tree(child, branch)
        else:
            label = f"[green]{child.kind.name}[/green]"
            if child.lexeme:
                label += f" {escape(repr(child.lexeme))}"
            branch.add(label)
    return branch


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
