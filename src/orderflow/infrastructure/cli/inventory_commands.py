"""CLI commands for stock administration."""

from __future__ import annotations

import click

from orderflow.domain.exceptions import DomainException
from orderflow.infrastructure.bootstrap import set_stock_handler, show_inventory_handler
from orderflow.infrastructure.config import Settings


@click.command("set")
@click.option("--variant", default=None, help="Variant ID.")
@click.option("--bundle", default=None, help="Bundle ID.")
@click.option("--location", default=None, help="Location ID (variants only).")
@click.option("--quantity", required=True, type=int, help="Quantity on hand.")
@click.pass_obj
def inventory_set(
    settings: Settings,
    variant: str | None,
    bundle: str | None,
    location: str | None,
    quantity: int,
) -> None:
    """Set the stock level of a variant at a location, or of a bundle."""
    if (variant is None) == (bundle is None):
        raise click.UsageError("Pass exactly one of --variant or --bundle.")
    if variant is not None and location is None:
        raise click.UsageError("--location is required with --variant.")

    handler = set_stock_handler(settings)
    try:
        if variant is not None:
            handler.handle_variant(variant, location, quantity)
            click.echo(f"Stock of variant '{variant}' at {location} set to {quantity}")
        else:
            handler.handle_bundle(bundle, quantity)
            click.echo(f"Stock of bundle '{bundle}' set to {quantity}")
    except DomainException as exc:
        raise click.ClickException(str(exc))


@click.command("show")
@click.pass_obj
def inventory_show(settings: Settings) -> None:
    """Show current stock levels per variant and location."""
    lines = show_inventory_handler(settings).handle()

    if not lines:
        click.echo("No inventory records found.")
        return

    click.echo(
        f"{'Variant':<10} {'SKU':<14} {'Location':<10} "
        f"{'On hand':>8} {'Reserved':>10} {'Available':>10}"
    )
    click.echo("-" * 67)
    for line in lines:
        click.echo(
            f"{line.variant_id:<10} {line.sku:<14} {line.location_id:<10} "
            f"{line.on_hand:>8} {line.reserved:>10} {line.available:>10}"
        )
