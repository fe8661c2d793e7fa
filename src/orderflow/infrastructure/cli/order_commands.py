"""CLI commands for the Order aggregate."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation

import click

from orderflow.application.dto import CreateOrderCommand, OrderDTO, OrderItemSpec
from orderflow.domain.exceptions import DomainException, InsufficientInventoryError
from orderflow.domain.model.order import OrderStatus
from orderflow.domain.repository.order_query import (
    DEFAULT_PAGE_SIZE,
    OrderFilter,
    SortField,
    SortOrder,
)
from orderflow.infrastructure.bootstrap import order_orchestrator
from orderflow.infrastructure.config import Settings

_KINDS = ("variant", "bundle")


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse 'variant:V1:2,bundle:B1:1' into OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for entry in raw.split(","):
        entry = entry.strip()
        parts = entry.split(":")
        if len(parts) != 3 or parts[0] not in _KINDS:
            raise click.BadParameter(
                f"Invalid item format '{entry}'. Expected 'variant:ID:Qty' or 'bundle:ID:Qty'."
            )
        kind, item_id, qty_str = parts
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(f"Invalid quantity '{qty_str}' for {kind} '{item_id}'.")
        if kind == "variant":
            specs.append(OrderItemSpec(quantity=qty, variant_id=item_id.strip()))
        else:
            specs.append(OrderItemSpec(quantity=qty, bundle_id=item_id.strip()))
    return specs


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id} {dto.external_ref}  (status={dto.status})")
    click.echo(f"Customer: {dto.customer_id}")
    click.echo(f"Placed:   {dto.placed_at}")
    if dto.shipping_method_id:
        click.echo(f"Shipping: {dto.shipping_method_id}")
    click.echo()

    click.echo(f"  {'SKU':<14} {'Item':<20} {'Qty':>5} {'Price':>10} {'Total':>10} {'Fee':>9}")
    click.echo(f"  {'-'*73}")
    for item in dto.items:
        click.echo(
            f"  {item.sku:<14} {item.product_name:<20} {item.quantity:>5} "
            f"{item.unit_price:>10} {item.line_total:>10} {item.platform_fee:>9}"
        )
    click.echo(f"  {'-'*73}")
    click.echo(f"  {'Subtotal':<40} {dto.subtotal:>21}")
    click.echo(f"  {'Shipping':<40} {dto.shipping:>21}")
    click.echo(f"  {'Order Total':<40} {dto.total:>21}")

    if dto.history:
        click.echo()
        click.echo("History:")
        for entry in dto.history:
            note = f"  {entry.note}" if entry.note else ""
            click.echo(f"  {entry.created_at}  {entry.status:<10}{note}")


@click.command("create")
@click.option("--customer", required=True, help="Customer ID.")
@click.option("--items", required=True, help="Items as 'variant:ID:Qty,bundle:ID:Qty'.")
@click.option("--shipping-method", default=None, help="Shipping method ID.")
@click.option("--billing-address", default=None, help="Billing address ID.")
@click.option("--shipping-address", default=None, help="Shipping address ID.")
@click.pass_obj
def order_create(
    settings: Settings,
    customer: str,
    items: str,
    shipping_method: str | None,
    billing_address: str | None,
    shipping_address: str | None,
) -> None:
    """Place a new order and reserve its stock."""
    command = CreateOrderCommand(
        customer_id=customer,
        items=_parse_items(items),
        shipping_method_id=shipping_method,
        billing_address_id=billing_address,
        shipping_address_id=shipping_address,
    )

    try:
        dto = order_orchestrator(settings).create_order(command)
    except InsufficientInventoryError as exc:
        if exc.order_id is not None:
            raise click.ClickException(f"{exc} (order #{exc.order_id} was cancelled)")
        raise click.ClickException(str(exc))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} placed as {dto.external_ref}")
    click.echo()
    _display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@click.pass_obj
def order_show(settings: Settings, order_id: int) -> None:
    """Show details of an existing order."""
    try:
        dto = order_orchestrator(settings).get_order(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--status", default=None, help="Only orders in this status.")
@click.option("--customer", default=None, help="Only orders of this customer.")
@click.option("--from", "start_date", type=click.DateTime(), default=None, help="Placed on or after (UTC).")
@click.option("--to", "end_date", type=click.DateTime(), default=None, help="Placed on or before (UTC).")
@click.option("--min-amount", default=None, help="Minimum order total.")
@click.option("--max-amount", default=None, help="Maximum order total.")
@click.option("--search", default=None, help="Substring of the order reference.")
@click.option("--sort-by", type=click.Choice([f.value for f in SortField]), default=None)
@click.option("--sort-order", type=click.Choice([o.value for o in SortOrder]), default=None)
@click.option("--page", type=int, default=1, show_default=True)
@click.option("--limit", type=int, default=DEFAULT_PAGE_SIZE, show_default=True)
@click.pass_obj
def order_list(
    settings: Settings,
    status: str | None,
    customer: str | None,
    start_date: datetime | None,
    end_date: datetime | None,
    min_amount: str | None,
    max_amount: str | None,
    search: str | None,
    sort_by: str | None,
    sort_order: str | None,
    page: int,
    limit: int,
) -> None:
    """List orders with filters, sorting and pagination."""
    try:
        filters = OrderFilter(
            status=OrderStatus.parse(status) if status else None,
            customer_id=customer,
            start_date=start_date,
            end_date=end_date,
            min_amount=_amount(min_amount, "--min-amount"),
            max_amount=_amount(max_amount, "--max-amount"),
            search=search,
            sort_by=SortField(sort_by) if sort_by else None,
            sort_order=SortOrder(sort_order) if sort_order else None,
            page=page,
            limit=limit,
        )
        result = order_orchestrator(settings).list_orders(filters)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not result.items:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'Reference':<15} {'Customer':<14} {'Status':<11} {'Total':>12}  Placed")
    click.echo("-" * 82)
    for dto in result.items:
        click.echo(
            f"{dto.id:<6} {dto.external_ref:<15} {dto.customer_id:<14} "
            f"{dto.status:<11} {dto.total:>12}  {dto.placed_at}"
        )
    click.echo(
        f"Page {result.page} of {result.total_pages} ({result.total_items} orders)"
    )


@click.command("customer")
@click.option("--id", "customer_id", required=True, help="Customer ID.")
@click.pass_obj
def order_customer(settings: Settings, customer_id: str) -> None:
    """List every order of one customer, newest first."""
    orders = order_orchestrator(settings).get_customer_orders(customer_id)

    if not orders:
        click.echo(f"No orders found for customer '{customer_id}'.")
        return

    for dto in orders:
        click.echo(f"#{dto.id:<5} {dto.external_ref:<15} {dto.status:<11} {dto.total:>12}")


@click.command("status")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option(
    "--to",
    "new_status",
    required=True,
    type=click.Choice([s.value for s in OrderStatus]),
    help="Target status.",
)
@click.option("--note", default=None, help="Note recorded in the status history.")
@click.pass_obj
def order_status(settings: Settings, order_id: int, new_status: str, note: str | None) -> None:
    """Move an order to a new status (shipping fulfills its stock, cancelling releases it)."""
    try:
        dto = order_orchestrator(settings).update_status(
            order_id, OrderStatus(new_status), note
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} is now {dto.status}.")


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
@click.option("--reason", default=None, help="Cancellation reason.")
@click.pass_obj
def order_cancel(settings: Settings, order_id: int, reason: str | None) -> None:
    """Cancel an order (releases its reserved stock)."""
    try:
        order_orchestrator(settings).cancel_order(order_id, reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} cancelled.")


def _amount(raw: str | None, option: str) -> Decimal | None:
    if raw is None:
        return None
    try:
        return Decimal(raw)
    except InvalidOperation:
        raise click.BadParameter(f"Invalid amount '{raw}'.", param_hint=option)
