import click

from orderflow.infrastructure.cli.catalog_commands import catalog_load, commission_preview
from orderflow.infrastructure.cli.inventory_commands import inventory_set, inventory_show
from orderflow.infrastructure.cli.order_commands import (
    order_cancel,
    order_create,
    order_customer,
    order_list,
    order_show,
    order_status,
)
from orderflow.infrastructure.config import Settings
from orderflow.infrastructure.logging import configure_logging


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Orderflow: Order Placement & Fulfillment"""
    settings = Settings.from_env()
    configure_logging(settings.log_level, settings.log_json)
    ctx.obj = settings


@cli.group()
def order() -> None:
    """Place and manage orders."""


@cli.group()
def inventory() -> None:
    """Manage stock levels."""


@cli.group()
def catalog() -> None:
    """Manage catalog reference data."""


@cli.group()
def commission() -> None:
    """Inspect seller commission."""


# Register subcommands
order.add_command(order_cancel)
order.add_command(order_create)
order.add_command(order_customer)
order.add_command(order_list)
order.add_command(order_show)
order.add_command(order_status)
inventory.add_command(inventory_set)
inventory.add_command(inventory_show)
catalog.add_command(catalog_load)
commission.add_command(commission_preview)
