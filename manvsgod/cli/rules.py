"""CLI commands for the dynamic rules engine"""

import random
from datetime import timedelta

import click
from rich.console import Console
from rich.table import Table

from manvsgod.core.rules import Decision, MoralOutcome, RulesEngine
from manvsgod.core.rules.evolution import DEFAULT_COOLDOWN
from manvsgod.core.time import utc_now


console = Console()


@click.group(name="rules")
def rules_group():
    """Dynamic rules engine commands"""
    pass


def print_rules(engine: RulesEngine, title: str = "Rules") -> None:
    table = Table(title=title)
    table.add_column("Rule ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Category", style="magenta")
    table.add_column("Value", justify="right", style="green")
    table.add_column("Base", justify="right", style="dim")
    table.add_column("Influence", justify="right")
    table.add_column("Threshold", justify="right", style="dim")
    table.add_column("Evolutions", justify="right")

    for rule in engine.get_active_rules():
        table.add_row(
            rule.id,
            rule.display_name,
            rule.category.value,
            str(rule.current_value.number),
            str(rule.base_value.number),
            f"{rule.accumulated_influence:.2f}",
            f"{rule.mutation_threshold:.2f}",
            str(len(rule.evolution_history)),
        )

    console.print(table)


@rules_group.command("list")
def list_rules():
    """Show the seeded rule set"""
    print_rules(RulesEngine())


@rules_group.command("simulate")
@click.option("--decisions", "count", default=10, type=click.IntRange(min=1), help="Number of decisions to replay")
@click.option("--bet", default=80.0, type=click.FloatRange(min=0), help="Bet amount of every decision")
@click.option("--interval-hours", default=24.0, type=click.FloatRange(min=0), help="Simulated time between decisions")
@click.option("--follow/--disobey", default=True, help="Whether players follow God's suggestion")
@click.option("--spare/--capture", default=True, help="Whether players spare the piece")
@click.option("--cooldown-days", default=DEFAULT_COOLDOWN.days, type=float, help="Evolution cooldown")
@click.option("--seed", default=None, type=int, help="Random seed for the estimators")
def simulate(count, bet, interval_hours, follow, spare, cooldown_days, seed):
    """Replay synthetic decisions on a fresh engine and print the evolutions"""
    clock = {"now": utc_now()}
    engine = RulesEngine(
        clock=lambda: clock["now"],
        cooldown=timedelta(days=cooldown_days),
        rng=random.Random(seed),
    )

    events = []
    for index in range(count):
        clock["now"] += timedelta(hours=interval_hours)
        decision = Decision(
            actor_id=f"sim-{index % 3}",
            timestamp=clock["now"],
            level_index=index % 5 + 1,
            piece_kind="knight",
            position="e5",
            chosen_move="f3e5",
            bet_amount=bet,
            suggested_move="spare",
            suggested_confidence=70,
            followed_suggestion=follow,
            disobedience_cost=0 if follow else 100,
            strategic_score=60,
            moral_score=80 if spare else 30,
            outcome="continue",
            moral_outcome=MoralOutcome(piece_kind="knight", was_captured=not spare, moral_weight=7),
        )
        events.extend((index + 1, event) for event in engine.record_decision(decision))

    if events:
        table = Table(title=f"Evolutions ({len(events)})")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Rule ID", style="cyan")
        table.add_column("Previous", justify="right")
        table.add_column("New", justify="right", style="green")
        table.add_column("Kind", style="magenta")
        table.add_column("Trigger")
        for decision_number, event in events:
            table.add_row(
                str(decision_number),
                event.rule_id,
                str(event.previous_value.number),
                str(event.new_value.number),
                event.mutation_kind.value,
                event.trigger_description,
            )
        console.print(table)
    else:
        console.print("[yellow]No rule evolved[/yellow]")

    print_rules(engine, title=f"Rules after {count} decisions")
