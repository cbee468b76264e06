"""CLI commands for deliveries (goods collected by the customer)."""

from __future__ import annotations

from datetime import date, datetime

from contextlib import closing

import click

from shopstock.application.dto import DeliveryItemSpec
from shopstock.application.mark_as_taken import MarkAsTakenHandler
from shopstock.domain.exceptions import DomainException
from shopstock.domain.model.delivery import DeliveryMetadata
from shopstock.infrastructure.bootstrap import unit_of_work
from shopstock.infrastructure.config import Settings


def _parse_items(raw: str) -> list[DeliveryItemSpec]:
    """Parse '7:20,8:10' (line ID:quantity) into DeliveryItemSpec list."""
    specs: list[DeliveryItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'LineID:Quantity'."
            )
        line_str, qty_str = pair.split(":", 1)
        try:
            specs.append(DeliveryItemSpec(line_id=int(line_str), quantity=int(qty_str)))
        except ValueError:
            raise click.BadParameter(f"Invalid line ID or quantity in '{pair}'.")
    return specs


@click.command("take")
@click.option("--invoice", "transaction_id", required=True, type=int, help="Invoice ID.")
@click.option("--items", "items_str", default=None, help="Lines as 'LineID:Qty,...'; omit to deliver everything left.")
@click.option("--date", "delivery_date", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.option("--delivered-by", default=None)
@click.option("--received-by", default=None)
@click.option("--vehicle", "vehicle_number", default=None)
@click.option("--notes", default=None)
@click.pass_obj
def delivery_take(
    settings: Settings,
    transaction_id: int,
    items_str: str | None,
    delivery_date: datetime | None,
    delivered_by: str | None,
    received_by: str | None,
    vehicle_number: str | None,
    notes: str | None,
) -> None:
    """Mark goods as taken by the customer (releases and consumes stock)."""
    items = _parse_items(items_str) if items_str else None
    metadata = DeliveryMetadata(
        delivery_date=delivery_date.date() if delivery_date else date.today(),
        delivered_by=delivered_by,
        received_by=received_by,
        vehicle_number=vehicle_number,
        notes=notes,
    )
    with closing(unit_of_work(settings)) as uow:
        handler = MarkAsTakenHandler(
            uow, strict_reservations=settings.strict_reservations
        )

        try:
            result = handler.handle(transaction_id, items, metadata)
        except DomainException as exc:
            raise click.ClickException(str(exc))

    click.echo(f"Delivery note {result.delivery_number} for {result.transaction_number}")
    for line in result.lines:
        click.echo(f"  {line.product_name:<20} {line.quantity:>5} {line.line_total:>16}")
    click.echo(f"Invoice is now: {result.new_status}")
