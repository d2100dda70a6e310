"""CLI commands for board queries"""

import click
from rich.console import Console
from rich.table import Table

from manvsgod.core.chess import board


console = Console()


@click.group(name="chess")
def chess_group():
    """Simplified chess board queries"""
    pass


@chess_group.command("moves")
@click.argument("fen")
@click.argument("square")
def show_moves(fen: str, square: str):
    """Candidate moves for the piece on SQUARE"""
    symbol = board.piece_at(fen, square)
    if not symbol:
        console.print(f"[yellow]No piece on {square}[/yellow]")
        return

    moves = board.legal_moves_for(fen, square)
    console.print(f"{board.piece_icon(symbol)} {board.piece_name(symbol)} on {square}: {len(moves)} moves")
    console.print(" ".join(moves))


@chess_group.command("board")
@click.argument("fen")
def show_board(fen: str):
    """Render the placement field of FEN"""
    grid = board.parse_board(fen)
    table = Table(show_header=True, show_lines=False)
    table.add_column("")
    for file_name in "abcdefgh":
        table.add_column(file_name, justify="center")

    for row_index, row in enumerate(grid):
        rank = str(8 - row_index)
        table.add_row(rank, *[board.piece_icon(symbol) if symbol else "." for symbol in row])

    console.print(table)
    console.print(f"Material balance: {board.material_balance(grid)}")
