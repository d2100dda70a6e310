"""CLI main entry point"""

import logging

import click

from manvsgod import __version__
from manvsgod.cli.chess import chess_group
from manvsgod.cli.levels import levels_group
from manvsgod.cli.rules import rules_group
from manvsgod.cli.stats import stats_cmd
from manvsgod.cli.web import web_cmd


@click.group()
@click.version_option(version=__version__, prog_name="manvsgod")
@click.option("--verbose", "-v", is_flag=True, help="Print log records to stderr")
def cli(verbose: bool):
    """Man vs God - chess moral-choice game with evolving rules"""
    if verbose:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


cli.add_command(web_cmd)
cli.add_command(levels_group)
cli.add_command(rules_group)
cli.add_command(stats_cmd)
cli.add_command(chess_group)


def main():
    cli()


if __name__ == "__main__":
    main()
