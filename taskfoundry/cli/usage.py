"""CLI command for showing free-tier usage."""

import typer

from taskfoundry.usage import UsageTracker


def usage_command() -> None:
    """Show free-tier usage for today and this month."""
    tracker = UsageTracker()
    counter = tracker.read_counters()

    typer.echo("Free tier usage:")
    typer.echo(f"  Today ({counter.last_day_key}): {counter.day_count}/{tracker.daily_limit} requests")
    typer.echo(
        f"  This month ({counter.last_month_key}): "
        f"{counter.month_count}/{tracker.monthly_limit} requests"
    )
    typer.echo(f"  Remaining: {tracker.remaining(counter)}")
