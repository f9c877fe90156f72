#!/usr/bin/env python3
"""
List stored signals.

Usage:
    python scripts/list_signals.py
    python scripts/list_signals.py --status error
    python scripts/list_signals.py --show sig_001
"""

import sys
import argparse
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger
from rich.console import Console
from rich.table import Table

from outreach_planner.core.signal import SignalStatus, StoredSignal
from outreach_planner.models.base import init_db
from outreach_planner.storage.signal_store import SignalStore


def display_signals(signals, console: Console):
    """Display stored signals in a table"""

    table = Table(title=f"Stored Signals ({len(signals)})")

    table.add_column("ID", style="cyan")
    table.add_column("Company", style="white")
    table.add_column("Type", style="magenta")
    table.add_column("Strength", justify="center")
    table.add_column("Status", justify="center")
    table.add_column("Landing", justify="center")
    table.add_column("Generated", style="dim")

    for stored in signals:
        signal = stored.signal

        strength_style = {"HIGH": "green", "MEDIUM": "yellow", "LOW": "red"}[signal.strength.value]
        status_style = "green" if stored.status == SignalStatus.GENERATED else "red"

        table.add_row(
            signal.id,
            signal.company,
            signal.type,
            f"[{strength_style}]{signal.strength.value}[/{strength_style}]",
            f"[{status_style}]{stored.status.value}[/{status_style}]",
            "yes" if stored.landing_page_html else "-",
            stored.generated_at[:19],
        )

    console.print(table)


def display_signal(stored: StoredSignal, console: Console):
    """Display one signal's outreach content"""

    signal = stored.signal
    outreach = stored.outreach

    console.print(f"\n[bold]{signal.company}[/bold] - {signal.type} ({signal.strength.value}, {signal.date})")
    console.print(f"{signal.summary}\n")

    if stored.status == SignalStatus.ERROR:
        console.print(f"[red]Error:[/red] {stored.error}\n")
        return

    console.print(f"[bold cyan]Email subject:[/bold cyan] {outreach.email.subject}")
    console.print(f"{outreach.email.body}\n")
    console.print(f"[bold cyan]LinkedIn:[/bold cyan] {outreach.linkedin}\n")
    console.print(f"[bold cyan]Twitter:[/bold cyan] {outreach.twitter}\n")
    console.print("[bold cyan]Call points:[/bold cyan]")
    for point in outreach.call_points:
        console.print(f"  • {point}")
    console.print(f"\n[bold cyan]Summary:[/bold cyan] {outreach.summary}")
    console.print(f"\nLanding page: {'available' if stored.landing_page_html else 'not available'}")


def main():
    parser = argparse.ArgumentParser(description="List stored signals")
    parser.add_argument(
        "--status",
        type=str,
        choices=[s.value for s in SignalStatus],
        help="Only show signals with this status"
    )
    parser.add_argument(
        "--show",
        type=str,
        help="Show the outreach content for one signal ID"
    )

    args = parser.parse_args()

    console = Console()
    init_db()
    store = SignalStore()

    if args.show:
        stored = store.get(args.show)
        if stored is None:
            logger.error(f"Signal {args.show} not found")
            return
        display_signal(stored, console)
        return

    signals = store.list_signals()
    if args.status:
        signals = [s for s in signals if s.status.value == args.status]

    if not signals:
        logger.warning("No signals stored")
        return

    display_signals(signals, console)


if __name__ == "__main__":
    main()
