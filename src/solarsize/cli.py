"""Command-line interface for solar system sizing estimates."""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .analysis import summary
from .catalog import CatalogError, load_catalog
from .household import load_household
from .quote import QuoteError, build_quote, send_quote
from .reports.hourly_profile import generate_hourly_report
from .schedule import format_hour, format_slots

console = Console()

PACKAGE_CHOICES = ["essential", "standard", "premium"]


def print_error(e: Exception):
    console.print(f"[red]Error: {escape(str(e))}[/red]")


@click.group()
@click.option("--config-dir", type=click.Path(file_okay=False), help="Directory holding catalog.yaml and countries.yaml")
@click.option("--verbose", "-v", is_flag=True, help="Show where config is loaded from")
@click.pass_context
def cli(ctx, config_dir, verbose):
    """Solar sizing - estimate energy use and size a solar system."""
    ctx.ensure_object(dict)
    ctx.obj["config_dir"] = Path(config_dir) if config_dir else None
    ctx.obj["verbose"] = verbose


def get_catalog(ctx):
    """Load the catalog once per invocation."""
    if "catalog" not in ctx.obj:
        if ctx.obj["verbose"]:
            source = ctx.obj["config_dir"] or "default config search path"
            console.print(f"[dim]Loading catalog from {source}[/dim]")
        ctx.obj["catalog"] = load_catalog(ctx.obj["config_dir"])
    return ctx.obj["catalog"]


@cli.command()
@click.pass_context
def countries(ctx):
    """List supported countries with tariffs and sun hours."""
    try:
        catalog = get_catalog(ctx)
    except FileNotFoundError as e:
        print_error(e)
        ctx.exit(1)

    table = Table(title="Countries")
    table.add_column("Code", style="cyan")
    table.add_column("Country")
    table.add_column("Currency")
    table.add_column("Avg tariff", justify="right")
    table.add_column("Sun hours", justify="right")
    table.add_column("Sun window")

    for country in catalog.countries.values():
        table.add_row(
            country.code,
            country.name,
            f"{country.currency} ({country.currency_symbol})",
            f"{country.avg_tariff}",
            f"{country.sun_hours}",
            f"{format_hour(country.sun_start)} - {format_hour(country.sun_end)}",
        )

    console.print(table)


@cli.command()
@click.pass_context
def spaces(ctx):
    """List space types and their adjustable room counts."""
    try:
        catalog = get_catalog(ctx)
    except FileNotFoundError as e:
        print_error(e)
        ctx.exit(1)

    table = Table(title="Space Types")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Rooms")
    table.add_column("BQ")

    for space in catalog.spaces.values():
        counts = ", ".join(
            f"{rc.room_id} {rc.min}-{rc.max} (default {rc.default})" for rc in space.room_counts
        )
        table.add_row(space.id, space.name, counts or "-", "yes" if space.bq_available else "")

    console.print(table)


@cli.command()
@click.argument("space")
@click.pass_context
def rooms(ctx, space):
    """Show the rooms and equipment available for a space type."""
    try:
        catalog = get_catalog(ctx)
        templates = catalog.rooms_for_space(space)
        space_type = catalog.space(space)
    except (CatalogError, FileNotFoundError) as e:
        print_error(e)
        ctx.exit(1)

    if space_type.bq_available:
        templates = templates + (catalog.bq_room,)

    for room in templates:
        table = Table(title=f"{room.name} ({room.id})")
        table.add_column("Equipment", style="cyan")
        table.add_column("Name")
        table.add_column("Options")
        table.add_column("Default schedule")

        for eq in room.equipment:
            options = "; ".join(f"{key}: {', '.join(values)}" for key, values in eq.fields.items())
            table.add_row(eq.id, eq.name, options, format_slots(catalog.default_slots(eq.id)))

        console.print(table)


@cli.command()
@click.pass_context
def suggestions(ctx):
    """List suggested wattages for custom equipment."""
    try:
        catalog = get_catalog(ctx)
    except FileNotFoundError as e:
        print_error(e)
        ctx.exit(1)

    table = Table(title="Custom Equipment Suggestions")
    table.add_column("Name", style="cyan")
    table.add_column("Watts", justify="right")
    table.add_column("Category")

    for s in catalog.custom_suggestions:
        table.add_row(s.name, f"{s.wattage:g}", s.category)

    console.print(table)


@cli.command()
@click.argument("household", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--html", "html_path", type=click.Path(dir_okay=False), help="Write an HTML report to this path")
@click.pass_context
def estimate(ctx, household, as_json, html_path):
    """Estimate energy use and solar packages for a household file."""
    try:
        catalog = get_catalog(ctx)
        data = summary.get_estimate(load_household(Path(household)), catalog)
    except (ValueError, FileNotFoundError) as e:
        print_error(e)
        ctx.exit(1)

    if as_json:
        click.echo(json.dumps(data, indent=2, ensure_ascii=False))
    else:
        console.print(summary.format_estimate_text(data), highlight=False)

    if html_path:
        Path(html_path).write_text(generate_hourly_report(data), encoding="utf-8")
        console.print(f"[green]Report written to {html_path}[/green]")


@cli.command()
@click.argument("household", type=click.Path(exists=True, dir_okay=False))
@click.option("--package", "package_name", type=click.Choice(PACKAGE_CHOICES, case_sensitive=False), default="standard", help="Package tier to quote")
@click.option("--name", required=True, help="Contact name")
@click.option("--email", required=True, help="Contact email")
@click.option("--phone", default="", help="Contact phone")
@click.option("--address", default="", help="Installation address")
@click.option("--notes", default="", help="Notes for the installer")
@click.option("--send", is_flag=True, help="POST the quote to SOLARSIZE_QUOTE_URL")
@click.pass_context
def quote(ctx, household, package_name, name, email, phone, address, notes, send):
    """Build a quote request for one package, and optionally send it."""
    contact = {"name": name, "email": email, "phone": phone, "address": address, "notes": notes}
    try:
        catalog = get_catalog(ctx)
        data = summary.get_estimate(load_household(Path(household)), catalog)
        payload = build_quote(data, PACKAGE_CHOICES.index(package_name.lower()), contact)
    except (ValueError, FileNotFoundError, QuoteError) as e:
        print_error(e)
        ctx.exit(1)

    if not send:
        click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    try:
        send_quote(payload)
    except QuoteError as e:
        print_error(e)
        ctx.exit(1)

    console.print(f"[green]Quote {payload['reference']} sent for the {payload['package']['name']} package[/green]")


if __name__ == "__main__":
    cli()
