"""CLI commands for the level catalog"""

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from manvsgod.core import levels


console = Console()


@click.group(name="levels")
def levels_group():
    """Level catalog commands"""
    pass


@levels_group.command("list")
def list_levels():
    """List bundled levels"""
    table = Table(title=f"Levels (max score {levels.calculate_max_score()})")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title")
    table.add_column("Piece", style="magenta")
    table.add_column("Difficulty", style="yellow")
    table.add_column("Base", justify="right")
    table.add_column("Rebellion", justify="right")

    for level in levels.all_levels():
        table.add_row(
            str(level.id),
            level.title,
            level.piece,
            level.difficulty,
            str(level.base_score),
            str(level.rebellion_bonus),
        )

    console.print(table)


@levels_group.command("show")
@click.argument("level_id", type=int)
def show_level(level_id: int):
    """Show an enriched level"""
    level = levels.get_level(level_id)
    if level is None:
        console.print(f"[red]Level not found: {level_id}[/red]")
        raise click.Abort()

    details = f"""
[cyan]Title:[/cyan] {level.title}
[cyan]Piece:[/cyan] {level.piece} on {level.position}
[cyan]Difficulty:[/cyan] {level.difficulty} ({level.hazard})
[cyan]Board:[/cyan] {level.board_state}
[cyan]Moves:[/cyan] {', '.join(level.available_moves)}

{level.background}

[green]A:[/green] {level.choice_a}
    {level.consequences.choice_a}
[green]B:[/green] {level.choice_b}
    {level.consequences.choice_b}

[cyan]God suggests:[/cyan] {level.god_move.suggested_move} ({level.god_move.confidence}%)
    {level.god_move.reasoning}
"""
    console.print(Panel(details, title=f"Level {level.id}", border_style="cyan"))
