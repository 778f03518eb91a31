"""
Systematics CLI

Commands:
- systematics show 3 [--language canonical|none]
- systematics parse loc_3_1
- systematics check [--language canonical|none]
"""

import logging
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from systematics import MAX_ORDER, MIN_ORDER, __version__
from systematics.config import get_config, validate_config
from systematics.errors import DecodeError, SystematicsError
from systematics.graph.checks import check_graph
from systematics.identifiers import LinkRef, canonical_identifier, parse_identifier
from systematics.service import SystematicsService

logger = logging.getLogger(__name__)
console = Console()


def _configure_logging(level: str, fmt: str) -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=fmt)


@click.group()
@click.version_option(version=__version__, prog_name="systematics")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Override the configured log level"
)
@click.pass_context
def cli(ctx, log_level: Optional[str]):
    """Systematics - property graph of the twelve systems"""
    config = get_config()
    _configure_logging(log_level or config.log_level, config.log_format)
    ctx.ensure_object(dict)
    ctx.obj["service"] = SystematicsService(config=config)


@cli.command(name="show")
@click.argument("order", type=click.IntRange(MIN_ORDER, MAX_ORDER))
@click.option(
    "--language",
    default=None,
    help="Vocabulary language, or 'none' for structure only (default: configured)"
)
@click.pass_context
def show_cmd(ctx, order: int, language: Optional[str]):
    """
    Show one system: summary, terms and connectives.

    Examples:
        systematics show 3
        systematics show 5 --language none
    """
    service: SystematicsService = ctx.obj["service"]
    try:
        view = service.system_view(order, language)
    except SystematicsError as e:
        console.print(f"[red]Error:[/red] {e}")
        ctx.exit(1)

    summary = view.summary
    console.print(f"[bold]{summary.name}[/bold] ({view.notation})")
    console.print(f"  Coherence: [cyan]{summary.coherence}[/cyan]")
    console.print(f"  Terms: [cyan]{summary.term_designation or '-'}[/cyan]")
    console.print(f"  Connectives: [cyan]{summary.connective_designation or '-'}[/cyan]")
    console.print()

    terms = Table(title="Terms")
    terms.add_column("Position", justify="right")
    terms.add_column("Term", style="cyan")
    terms.add_column("Colour")
    terms.add_column("Coordinate")
    term_values = {t["location"]: t["value"] for t in view.terms}
    colours = {c["location"]: c["value"] for c in view.colours}
    for coordinate in view.coordinates:
        location = coordinate["location"]
        point = coordinate["point"]
        terms.add_row(
            location.rsplit("_", 1)[1],
            term_values.get(location) or "-",
            colours.get(location, "-"),
            f"({point['x']:.3f}, {point['y']:.3f}, {point['z']:.3f})",
        )
    console.print(terms)

    if view.connectives:
        connectives = Table(title="Connectives")
        connectives.add_column("Identifier", style="dim")
        connectives.add_column("Base")
        connectives.add_column("Target")
        connectives.add_column("Label", style="cyan")
        for link in view.connectives:
            connectives.add_row(link["id"], link["base"], link["target"], link["value"] or "-")
        console.print(connectives)


@cli.command(name="parse")
@click.argument("identifier")
@click.pass_context
def parse_cmd(ctx, identifier: str):
    """
    Parse an identifier and show its structural fields.

    Examples:
        systematics parse loc_3_1
        systematics parse conn_loc_3_3_loc_3_1
    """
    try:
        ref = parse_identifier(identifier)
        canonical = canonical_identifier(identifier)
    except DecodeError as e:
        console.print(f"[red]Error:[/red] {e}")
        ctx.exit(1)

    table = Table(show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("kind", ref.kind.value)
    table.add_row("canonical", canonical)
    if isinstance(ref, LinkRef):
        table.add_row("order", str(ref.order))
        table.add_row("endpoints", ", ".join(endpoint.id for endpoint in ref.endpoints))
    else:
        for field in ("order", "position", "language", "value"):
            value = getattr(ref, field)
            if value is not None:
                table.add_row(field, getattr(value, "value", str(value)))
    console.print(table)


@cli.command(name="check")
@click.option(
    "--language",
    default=None,
    help="Vocabulary language, or 'none' for structure only (default: configured)"
)
@click.pass_context
def check_cmd(ctx, language: Optional[str]):
    """
    Build all twelve orders and verify their invariants.

    Exits non-zero on configuration errors and on failed builds or checks.
    """
    service: SystematicsService = ctx.obj["service"]
    _, problems = validate_config()

    table = Table(title="Systems")
    table.add_column("Order", justify="right")
    table.add_column("Name")
    table.add_column("Entries", justify="right")
    table.add_column("Links", justify="right")
    table.add_column("Status")

    for order in range(MIN_ORDER, MAX_ORDER + 1):
        try:
            graph = service.graph(order, language)
        except SystematicsError as e:
            problems.append(f"order {order}: {e}")
            table.add_row(str(order), "-", "-", "-", "[red]build failed[/red]")
            continue

        order_problems = check_graph(graph)
        if len(graph.positions()) != order:
            order_problems.append(f"order {order}: {len(graph.positions())} positions, expected {order}")
        problems.extend(order_problems)
        table.add_row(
            str(order),
            graph.order_summary(order).name or "-",
            str(len(graph.entries)),
            str(len(graph.links)),
            "[red]failed[/red]" if order_problems else "[green]ok[/green]",
        )

    try:
        problems.extend(check_graph(service.all_orders(language)))
    except SystematicsError as e:
        problems.append(f"all orders: {e}")

    console.print(table)
    if problems:
        for problem in problems:
            console.print(f"[red]✗[/red] {problem}")
        ctx.exit(1)
    console.print("[green]✓[/green] All systems passed")


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
