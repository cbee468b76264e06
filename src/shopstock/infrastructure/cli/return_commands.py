"""CLI commands for sales returns."""

from __future__ import annotations

from datetime import datetime

from contextlib import closing

import click

from shopstock.application.create_return import CreateReturnHandler
from shopstock.application.dto import ReturnLineSpec, ReturnSpec
from shopstock.application.update_refund import UpdateRefundHandler
from shopstock.domain.exceptions import DomainException
from shopstock.infrastructure.bootstrap import unit_of_work
from shopstock.infrastructure.config import Settings

_DATE = click.DateTime(formats=["%Y-%m-%d"])


def _parse_items(raw: str, restock: bool) -> list[ReturnLineSpec]:
    """Parse '7:2,8:1:Damaged' (line ID:quantity[:condition]) into ReturnLineSpec list.

    Only goods in Good condition are restocked.
    """
    specs: list[ReturnLineSpec] = []
    for part in raw.split(","):
        fields = [f.strip() for f in part.strip().split(":")]
        if len(fields) not in (2, 3):
            raise click.BadParameter(
                f"Invalid item format '{part}'. Expected 'LineID:Quantity[:Condition]'."
            )
        condition = fields[2] if len(fields) == 3 else "Good"
        try:
            line_id, qty = int(fields[0]), int(fields[1])
        except ValueError:
            raise click.BadParameter(f"Invalid line ID or quantity in '{part}'.")
        specs.append(
            ReturnLineSpec(
                line_id=line_id,
                quantity=qty,
                condition=condition,
                restock=restock and condition.lower() == "good",
            )
        )
    return specs


@click.command("create")
@click.option("--invoice", "transaction_id", required=True, type=int, help="Invoice ID.")
@click.option("--customer", "customer_id", required=True, type=int, help="Customer ID.")
@click.option("--items", required=True, help="Lines as 'LineID:Qty[:Condition],...'.")
@click.option("--restock/--no-restock", default=True, help="Put Good items back on the shelf.")
@click.option("--reason", default="", help="Why the goods came back.")
@click.option("--notes", default=None)
@click.option("--refund-method", default=None, help="Cash, Credit Note, Exchange, ...")
@click.option("--refund-status", default="Pending", help="Pending, Completed or Credit Note.")
@click.option("--date", "return_date", type=_DATE, default=None, help="Return date (YYYY-MM-DD).")
@click.pass_obj
def return_create(
    settings: Settings,
    transaction_id: int,
    customer_id: int,
    items: str,
    restock: bool,
    reason: str,
    notes: str | None,
    refund_method: str | None,
    refund_status: str,
    return_date: datetime | None,
) -> None:
    """Record goods returned against an invoice."""
    spec = ReturnSpec(
        transaction_id=transaction_id,
        counterparty_id=customer_id,
        lines=_parse_items(items, restock),
        return_date=return_date.date() if return_date else None,
        reason=reason,
        notes=notes,
        refund_method=refund_method,
        refund_status=refund_status,
    )
    with closing(unit_of_work(settings)) as uow:
        handler = CreateReturnHandler(
            uow,
            base_currency=settings.base_currency,
            strict_reservations=settings.strict_reservations,
        )

        try:
            dto = handler.handle(spec)
        except DomainException as exc:
            raise click.ClickException(str(exc))

    click.echo(f"Return {dto.number} (#{dto.id}) against {dto.transaction_number}")
    for line in dto.lines:
        restocked = "restocked" if line.restocked else "not restocked"
        click.echo(
            f"  {line.product_name:<20} {line.quantity:>5} {line.condition:<10} "
            f"{restocked:<14} {line.line_total:>16}"
        )
    click.echo(f"Total: {dto.total}  Refund: {dto.refund_method or '-'} ({dto.refund_status})")


@click.command("refund")
@click.option("--id", "return_id", required=True, type=int, help="Return ID.")
@click.option("--status", required=True, help="Pending, Completed or Credit Note.")
@click.option("--date", "refund_date", type=_DATE, default=None, help="Refund date (YYYY-MM-DD).")
@click.option("--amount", default=None, help="Amount refunded.")
@click.pass_obj
def return_refund(
    settings: Settings,
    return_id: int,
    status: str,
    refund_date: datetime | None,
    amount: str | None,
) -> None:
    """Update the refund status of a return."""
    with closing(unit_of_work(settings)) as uow:
        handler = UpdateRefundHandler(uow)

        try:
            new_status = handler.handle(
                return_id, status, refund_date.date() if refund_date else None, amount
            )
        except DomainException as exc:
            raise click.ClickException(str(exc))

    click.echo(f"Return #{return_id} refund status: {new_status}")
