"""CLI commands for catalog reference data and seller commission."""

from __future__ import annotations

import json

import click

from orderflow.domain.exceptions import DomainException
from orderflow.infrastructure.bootstrap import load_catalog_handler, preview_commission_handler
from orderflow.infrastructure.config import Settings


@click.command("load")
@click.argument("file", type=click.File("r", encoding="utf-8"))
@click.pass_obj
def catalog_load(settings: Settings, file) -> None:
    """Load variants, bundles, shipping methods, sellers and stock from FILE."""
    try:
        document = json.load(file)
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"{file.name} is not valid JSON: {exc}")
    if not isinstance(document, dict):
        raise click.ClickException(f"{file.name} must contain a JSON object")

    try:
        summary = load_catalog_handler(settings).handle(document)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Loaded {summary.variants} variants, {summary.bundles} bundles, "
        f"{summary.shipping_methods} shipping methods, {summary.sellers} sellers, "
        f"{summary.seller_categories} seller categories, "
        f"{summary.stock_levels} stock levels."
    )


@click.command("preview")
@click.option("--seller", required=True, help="Seller ID.")
@click.option("--amount", required=True, help="Line total (e.g. 100.00).")
@click.pass_obj
def commission_preview(settings: Settings, seller: str, amount: str) -> None:
    """Show how an amount would be split between platform and seller."""
    try:
        preview = preview_commission_handler(settings).handle(seller, amount)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Seller:        {preview.seller_id}")
    click.echo(f"Fee:           {preview.fee_type} ({preview.fee_rate})")
    click.echo(f"Line total:    {preview.line_total}")
    click.echo(f"Platform fee:  {preview.platform_fee}")
    click.echo(f"Seller amount: {preview.seller_amount}")
