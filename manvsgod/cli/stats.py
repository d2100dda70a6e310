"""CLI command for collective scenario statistics"""

import click
from rich.console import Console
from rich.table import Table

from manvsgod.core.config import get_config
from manvsgod.store.decisions import DecisionStoreError, build_decision_store
from manvsgod.store.stats import all_stats, scenario_stats


console = Console()


@click.command(name="stats")
@click.option("--scenario", "scenario_id", type=int, default=None, help="Only this scenario")
def stats_cmd(scenario_id):
    """Show how players chose per scenario"""
    store = build_decision_store(get_config())
    try:
        decisions = store.read_all()
    except DecisionStoreError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise click.Abort()

    rows = [scenario_stats(decisions, scenario_id)] if scenario_id is not None else all_stats(decisions)
    if not rows:
        console.print("[yellow]No decisions recorded[/yellow]")
        return

    table = Table(title=f"Scenario stats ({store.name})")
    table.add_column("Scenario", style="cyan", justify="right")
    table.add_column("Players", justify="right")
    table.add_column("Choice A", justify="right")
    table.add_column("Choice B", justify="right")

    for stats in rows:
        table.add_row(
            str(stats.scenario_id),
            str(stats.total_players),
            f"{stats.choice_a_count} ({stats.choice_a_percentage:.0f}%)",
            f"{stats.choice_b_count} ({stats.choice_b_percentage:.0f}%)",
        )

    console.print(table)
