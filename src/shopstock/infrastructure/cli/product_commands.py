"""CLI commands for products and stock levels."""

from __future__ import annotations

from contextlib import closing

import click

from shopstock.application.add_product import AddProductHandler
from shopstock.application.adjust_stock import AdjustStockHandler
from shopstock.application.show_inventory import ShowInventoryHandler
from shopstock.application.verify_consistency import VerifyConsistencyHandler
from shopstock.domain.exceptions import DomainException
from shopstock.infrastructure.bootstrap import unit_of_work
from shopstock.infrastructure.config import Settings


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--stock", "opening_stock", default=0, type=int, help="Opening stock.")
@click.option("--reorder-level", default=0, type=int, help="Low-stock threshold.")
@click.option("--unit", default="PCS", help="Unit of measure.")
@click.pass_obj
def product_add(
    settings: Settings, name: str, opening_stock: int, reorder_level: int, unit: str
) -> None:
    """Add a new product, optionally with opening stock."""
    with closing(unit_of_work(settings)) as uow:
        handler = AddProductHandler(uow)

        try:
            product_id = handler.handle(
                name=name, opening_stock=opening_stock, reorder_level=reorder_level, unit=unit
            )
        except DomainException as exc:
            raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} '{name.strip()}' added with {opening_stock} {unit}")


@click.command("list")
@click.option("--low-stock", is_flag=True, default=False, help="Only products at or below reorder level.")
@click.pass_obj
def product_list(settings: Settings, low_stock: bool) -> None:
    """Show physical, reserved and available stock."""
    with closing(unit_of_work(settings)) as uow:
        lines = ShowInventoryHandler(uow).handle(low_stock_only=low_stock)

    if not lines:
        click.echo("No products found.")
        return

    click.echo(
        f"{'ID':<6} {'Product':<20} {'Physical':>9} {'Reserved':>9} {'Available':>10}  Flag"
    )
    click.echo("-" * 64)
    for line in lines:
        flag = "OUT" if line.out_of_stock else ("LOW" if line.low_stock else "")
        click.echo(
            f"{line.product_id:<6} {line.product_name:<20} {line.physical:>9} "
            f"{line.reserved:>9} {line.available:>10}  {flag}"
        )


@click.command("adjust")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
@click.option("--delta", required=True, type=int, help="Signed change to physical stock.")
@click.option("--notes", default=None, help="Why the stock changed.")
@click.option("--approved-by", default=None, help="Who approved the change.")
@click.pass_obj
def product_adjust(
    settings: Settings,
    product_id: int,
    delta: int,
    notes: str | None,
    approved_by: str | None,
) -> None:
    """Correct physical stock after a stock take, damage or theft."""
    with closing(unit_of_work(settings)) as uow:
        handler = AdjustStockHandler(uow)

        try:
            physical = handler.handle(product_id, delta, notes=notes, approved_by=approved_by)
        except DomainException as exc:
            raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} adjusted by {delta:+d}; physical stock now {physical}")


@click.command("verify")
@click.pass_obj
def product_verify(settings: Settings) -> None:
    """Check reserved stock against uncollected invoice lines."""
    with closing(unit_of_work(settings)) as uow:
        violations = VerifyConsistencyHandler(uow).handle()

    if not violations:
        click.echo("Reserved stock matches open invoices.")
        return

    for violation in violations:
        click.echo(str(violation))
    raise click.ClickException(f"{len(violations)} product(s) out of step")
