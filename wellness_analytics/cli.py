"""Command-line interface for the wellness analytics engine."""

import json
import logging
from datetime import date, datetime

import click
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .analysis import GoalOptimizer, MoodAnalytics, assess_data_quality, calculate_streak
from .config import AnalyticsConfig, config
from .loader import load_goal_bundle, load_wellness_records

console = Console()

DIRECTION_STYLES = {"increasing": "green", "decreasing": "red", "stable": "yellow"}


def _build_config(min_correlation, min_trends, confidence) -> AnalyticsConfig:
    options = AnalyticsConfig.from_env().to_dict()
    if min_correlation is not None:
        options['min_entries_for_correlation'] = min_correlation
    if min_trends is not None:
        options['min_entries_for_trends'] = min_trends
    if confidence is not None:
        options['confidence_threshold'] = confidence
    try:
        return AnalyticsConfig.from_dict(options)
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}")


def _load(loader, path):
    try:
        return loader(path)
    except (OSError, ValueError, KeyError, TypeError) as e:
        raise click.ClickException(f"Could not read {path}: {e}")


@click.group()
@click.option("--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """Wellness tracking analytics: correlations, trends and goal optimization."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("entries_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON instead of tables")
@click.option("--min-correlation", type=int, default=None, help="Minimum entries for correlations")
@click.option("--min-trends", type=int, default=None, help="Minimum entries for trends and patterns")
@click.option("--confidence", type=float, default=None, help="p-value threshold for suggestions")
def insights(entries_file, as_json, min_correlation, min_trends, confidence):
    """Analyze a JSON export of mood entries."""
    analytics_config = _build_config(min_correlation, min_trends, confidence)
    records = _load(load_wellness_records, entries_file)
    analytics = MoodAnalytics(records, analytics_config)
    result = analytics.generate_advanced_insights()
    metrics = analytics.calculate_wellness_metrics()

    if as_json:
        payload = result.to_dict()
        payload['wellness_metrics'] = metrics.to_dict()
        click.echo(json.dumps(payload, indent=2))
        return

    console.print(Panel.fit(f"📊 Wellness Insights ({len(records)} entries)", style="bold blue"))

    console.print(Panel(
        f"""
[bold]Average Mood:[/bold] {metrics.average_mood:.1f}/10
[bold]Average Energy:[/bold] {metrics.average_energy:.1f}/10
[bold]Average Stress:[/bold] {metrics.average_stress:.1f}/10
[bold]Average Sleep:[/bold] {metrics.average_sleep:.1f}h
[bold]Logging Consistency:[/bold] {metrics.consistency_score:.0f}%
[bold]Mood Trend:[/bold] {metrics.improvement_trend}
        """,
        title="Summary",
        box=box.ROUNDED,
    ))

    if result.correlations:
        table = Table(title="Mood Correlations", box=box.ROUNDED)
        table.add_column("Factor", style="cyan")
        table.add_column("r", style="yellow")
        table.add_column("p-value", style="magenta")
        table.add_column("Interpretation", style="green")
        for corr in result.correlations:
            table.add_row(
                corr.factor,
                f"{corr.correlation:+.2f}",
                f"{corr.p_value:.3f}",
                corr.interpretation.replace("_", " "),
            )
        console.print(table)
    else:
        console.print(
            f"[yellow]Correlations need at least {analytics_config.min_entries_for_correlation} entries.[/yellow]"
        )

    if result.trends:
        table = Table(title="Weekly Trends", box=box.ROUNDED)
        table.add_column("Metric", style="cyan")
        table.add_column("Direction")
        table.add_column("Change/week", style="yellow")
        table.add_column("R²", style="magenta")
        for trend in result.trends:
            style = DIRECTION_STYLES[trend.direction]
            table.add_row(
                trend.metric.label,
                f"[{style}]{trend.direction}[/{style}]",
                f"{trend.weekly_change:+.2f}",
                f"{trend.significance:.2f}",
            )
        console.print(table)
    else:
        console.print(f"[yellow]Trends need at least {analytics_config.min_entries_for_trends} entries.[/yellow]")

    for pattern in result.patterns:
        console.print(f"\n[bold]🗓  {pattern.description}[/bold] (strength {pattern.strength:.2f})")
        for recommendation in pattern.recommendations:
            console.print(f"  • {recommendation}")

    if result.optimizations:
        console.print("\n[bold]💡 Suggestions:[/bold]")
        for suggestion in result.optimizations:
            console.print(
                f"  [{suggestion.priority}] [bold]{suggestion.title}[/bold] "
                f"({suggestion.timeframe}, {suggestion.difficulty})"
            )
            console.print(f"      {suggestion.description}")

    prediction = result.prediction
    console.print(
        f"\n[bold]🔮 Next week mood:[/bold] {prediction.next_week_mood:.1f}/10 "
        f"(confidence {prediction.confidence:.0f}%)"
    )
    if prediction.based_on:
        console.print(f"   Based on: {', '.join(prediction.based_on)}")


@cli.command()
@click.argument("goal_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON instead of tables")
@click.option("--now", "now_str", default=None, help="Evaluate at this ISO timestamp instead of the current time")
def goal(goal_file, as_json, now_str):
    """Analyze one goal and its progress log."""
    goal_record, samples, other_goals = _load(load_goal_bundle, goal_file)
    try:
        now = datetime.fromisoformat(now_str) if now_str else datetime.now()
    except ValueError as e:
        raise click.ClickException(f"Invalid --now value: {e}")

    optimizer = GoalOptimizer(AnalyticsConfig.from_env())
    analysis = optimizer.analyze_goal_optimization(goal_record, samples, other_goals, now)

    if as_json:
        click.echo(json.dumps(analysis.to_dict(), indent=2))
        return

    metrics = analysis.metrics
    unit = f" {goal_record.unit}" if goal_record.unit else ""
    console.print(Panel.fit(f"🎯 {goal_record.name}", style="bold blue"))
    console.print(Panel(
        f"""
[bold]Completion:[/bold] {metrics.completion_rate:.1f}% ({goal_record.current_value:g}/{goal_record.target_value:g}{unit})
[bold]Days Remaining:[/bold] {metrics.time_remaining:.1f}
[bold]Daily Progress:[/bold] {metrics.average_daily_progress:.2f}{unit}/day
[bold]Projected Completion:[/bold] {metrics.projected_completion:%Y-%m-%d}
[bold]Efficiency:[/bold] {metrics.efficiency_score:.0f}%
[bold]Consistency:[/bold] {metrics.consistency_score:.0f}%
        """,
        title="Metrics",
        box=box.ROUNDED,
    ))

    if analysis.bottlenecks:
        console.print("[bold red]⚠️  Bottlenecks:[/bold red]")
        for bottleneck in analysis.bottlenecks:
            console.print(f"  • {bottleneck.description}")

    if analysis.recommendations:
        console.print("\n[bold]💡 Recommendations:[/bold]")
        for recommendation in analysis.recommendations:
            console.print(
                f"  [{recommendation.priority}] {recommendation.description} "
                f"(+{recommendation.expected_improvement:.0f}%)"
            )

    if analysis.correlation_matrix:
        table = Table(title="Correlations", box=box.ROUNDED)
        table.add_column("Variables", style="cyan")
        table.add_column("r", style="yellow")
        table.add_column("p-value", style="magenta")
        table.add_column("n")
        for corr in analysis.correlation_matrix:
            table.add_row(
                f"{corr.variable_1} ↔ {corr.variable_2}",
                f"{corr.correlation:+.2f}",
                f"{corr.significance:.3f}",
                str(corr.sample_size),
            )
        console.print(table)


@cli.command()
@click.argument("entries_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--as-of", "as_of_str", default=None, help="Evaluate on this day (YYYY-MM-DD) instead of today")
def quality(entries_file, as_of_str):
    """Show logging completeness, regularity and streak."""
    records = _load(load_wellness_records, entries_file)
    try:
        as_of = date.fromisoformat(as_of_str) if as_of_str else date.today()
    except ValueError as e:
        raise click.ClickException(f"Invalid --as-of value: {e}")

    data_quality = assess_data_quality(records, as_of)
    streak = calculate_streak(records, as_of)

    table = Table(title="Data Quality", box=box.ROUNDED)
    table.add_column("Measure", style="cyan")
    table.add_column("Value", style="yellow")
    table.add_row("Completeness", f"{data_quality.completeness:.0f}%")
    table.add_row("Consistency", f"{data_quality.consistency:.0f}%")
    table.add_row("Depth", f"{data_quality.depth:.0f}%")
    table.add_row("Reliability", f"{data_quality.reliability:.0f}%")
    table.add_row("Days Tracked", f"{data_quality.days_tracked}/{data_quality.total_possible_days}")
    table.add_row("Current Streak", f"{streak} days")
    console.print(table)


if __name__ == "__main__":
    cli()
