"""CLI commands for invoices and quotations."""

from __future__ import annotations

from datetime import datetime

from contextlib import closing

import click

from shopstock.application.convert_quotation import ConvertQuotationHandler
from shopstock.application.delete_transaction import DeleteTransactionHandler
from shopstock.application.dto import IssueTransactionSpec, LineSpec, TransactionDTO
from shopstock.application.issue_transaction import IssueTransactionHandler
from shopstock.application.pending_collections import PendingCollectionsHandler
from shopstock.application.show_transaction import ShowTransactionHandler
from shopstock.domain.exceptions import DomainException
from shopstock.infrastructure.bootstrap import unit_of_work
from shopstock.infrastructure.config import Settings

_DATE = click.DateTime(formats=["%Y-%m-%d"])


def _parse_lines(raw: str, discount: str | None, tax: str | None) -> list[LineSpec]:
    """Parse '1:10@1500,2:3@250.50' (product ID:quantity@unit price) into LineSpec list."""
    specs: list[LineSpec] = []
    for part in raw.split(","):
        part = part.strip()
        if ":" not in part or "@" not in part:
            raise click.BadParameter(
                f"Invalid item format '{part}'. Expected 'ProductID:Quantity@Price'."
            )
        product, rest = part.split(":", 1)
        qty_str, price = rest.split("@", 1)
        try:
            product_id = int(product)
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(f"Invalid product ID or quantity in '{part}'.")
        specs.append(
            LineSpec(
                product_id=product_id,
                quantity=qty,
                unit_price=price.strip(),
                discount_percent=discount,
                tax_percent=tax,
            )
        )
    return specs


def _display_transaction(dto: TransactionDTO) -> None:
    """Shared formatting for displaying an invoice or quotation."""
    click.echo(f"{dto.document_type} {dto.number}  (#{dto.id}, {dto.delivery_status})")
    click.echo(f"Customer: {dto.customer_name}")
    click.echo(f"Date:     {dto.issue_date}")
    if dto.quotation_id is not None:
        click.echo(f"From quotation #{dto.quotation_id}")
    click.echo()
    click.echo(
        f"  {'Line':<5} {'Product':<20} {'Qty':>5} {'Taken':>6} {'Left':>5} "
        f"{'Price':>16} {'Total':>16}"
    )
    click.echo(f"  {'-'*79}")
    for line in dto.lines:
        click.echo(
            f"  {line.line_id:<5} {line.product_name:<20} {line.quantity:>5} "
            f"{line.delivered:>6} {line.remaining:>5} {line.unit_price:>16} {line.line_total:>16}"
        )
    click.echo(f"  {'-'*79}")
    click.echo(f"  {'Subtotal':<40} {dto.subtotal:>38}")
    click.echo(f"  {'Discount':<40} {dto.discount:>38}")
    click.echo(f"  {'Tax':<40} {dto.tax:>38}")
    click.echo(f"  {'Total':<40} {dto.total:>38}")
    if dto.total_base != dto.total:
        click.echo(f"  {'Total (base)':<40} {dto.total_base:>38}")
    click.echo(f"  {'Paid (' + dto.payment_status + ')':<40} {dto.amount_paid:>38}")


@click.command("issue")
@click.option("--customer", "customer_id", required=True, type=int, help="Customer ID.")
@click.option("--items", required=True, help="Items as 'ProductID:Qty@Price,...'.")
@click.option("--discount", default=None, help="Discount percent applied to every line.")
@click.option("--tax", default=None, help="Tax percent applied to every line.")
@click.option("--currency", default=None, help="Invoice currency (defaults to base currency).")
@click.option("--rate", "exchange_rate", default="1", help="Exchange rate to the base currency.")
@click.option("--quotation", is_flag=True, default=False, help="Issue a quotation (no reservation).")
@click.option("--payment-status", default="Unpaid", help="Paid, Partial or Unpaid.")
@click.option("--amount-paid", default=None, help="Amount received up front.")
@click.option("--payment-method", default=None, help="Cash, Mobile Money, ...")
@click.option("--date", "issue_date", type=_DATE, default=None, help="Issue date (YYYY-MM-DD).")
@click.option("--collect-by", type=_DATE, default=None, help="Expected collection date.")
@click.option("--notes", default=None, help="Collection notes.")
@click.pass_obj
def invoice_issue(
    settings: Settings,
    customer_id: int,
    items: str,
    discount: str | None,
    tax: str | None,
    currency: str | None,
    exchange_rate: str,
    quotation: bool,
    payment_status: str,
    amount_paid: str | None,
    payment_method: str | None,
    issue_date: datetime | None,
    collect_by: datetime | None,
    notes: str | None,
) -> None:
    """Issue an invoice (reserves stock) or a quotation."""
    spec = IssueTransactionSpec(
        counterparty_id=customer_id,
        lines=_parse_lines(items, discount, tax),
        issue_date=issue_date.date() if issue_date else None,
        currency=currency,
        exchange_rate=exchange_rate,
        is_quotation=quotation,
        payment_status=payment_status,
        amount_paid=amount_paid,
        payment_method=payment_method,
        expected_collection_date=collect_by.date() if collect_by else None,
        collection_notes=notes,
    )
    with closing(unit_of_work(settings)) as uow:
        handler = IssueTransactionHandler(
            uow,
            base_currency=settings.base_currency,
            strict_reservations=settings.strict_reservations,
        )

        try:
            dto = handler.handle(spec)
        except DomainException as exc:
            raise click.ClickException(str(exc))

    _display_transaction(dto)


@click.command("show")
@click.option("--id", "transaction_id", required=True, type=int, help="Invoice ID.")
@click.pass_obj
def invoice_show(settings: Settings, transaction_id: int) -> None:
    """Show an invoice with per-line collection progress."""
    with closing(unit_of_work(settings)) as uow:
        handler = ShowTransactionHandler(uow)

        try:
            dto = handler.handle(transaction_id)
        except DomainException as exc:
            raise click.ClickException(str(exc))

    _display_transaction(dto)


@click.command("delete")
@click.option("--id", "transaction_id", required=True, type=int, help="Invoice ID.")
@click.confirmation_option(prompt="Delete this invoice and reverse its stock and balance?")
@click.pass_obj
def invoice_delete(settings: Settings, transaction_id: int) -> None:
    """Delete an invoice, releasing its reservation and restoring collected stock."""
    with closing(unit_of_work(settings)) as uow:
        handler = DeleteTransactionHandler(
            uow, strict_reservations=settings.strict_reservations
        )

        try:
            handler.handle(transaction_id)
        except DomainException as exc:
            raise click.ClickException(str(exc))

    click.echo(f"Invoice #{transaction_id} deleted.")


@click.command("convert")
@click.option("--id", "quotation_id", required=True, type=int, help="Quotation ID.")
@click.pass_obj
def invoice_convert(settings: Settings, quotation_id: int) -> None:
    """Turn a quotation into an invoice (reserves stock)."""
    with closing(unit_of_work(settings)) as uow:
        handler = ConvertQuotationHandler(
            uow,
            base_currency=settings.base_currency,
            strict_reservations=settings.strict_reservations,
        )

        try:
            dto = handler.handle(quotation_id)
        except DomainException as exc:
            raise click.ClickException(str(exc))

    _display_transaction(dto)


@click.command("pending")
@click.option("--customer", "customer_id", default=None, type=int, help="Only this customer.")
@click.option("--overdue", is_flag=True, default=False, help="Only past the collection date.")
@click.pass_obj
def invoice_pending(settings: Settings, customer_id: int | None, overdue: bool) -> None:
    """List invoices with goods not yet collected."""
    with closing(unit_of_work(settings)) as uow:
        handler = PendingCollectionsHandler(uow, settings.base_currency)
        report = handler.handle(counterparty_id=customer_id, overdue_only=overdue)

    if not report.items:
        click.echo("Nothing waiting for collection.")
        return

    for item in report.items:
        overdue_mark = "  OVERDUE" if item.is_overdue else ""
        click.echo(
            f"{item.number}  {item.customer_name}  {item.delivery_status}  "
            f"{item.days_pending} day(s){overdue_mark}"
        )
        for line in item.lines:
            click.echo(f"    {line.product_name:<20} {line.remaining:>5} of {line.quantity}")
        click.echo(f"    Pending value: {item.value_pending}")

    click.echo()
    click.echo(
        f"{report.total_invoices} invoice(s), {report.total_lines} line(s), "
        f"{report.total_value} pending, {report.overdue_count} overdue"
    )
