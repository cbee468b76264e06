"""CLI commands for customers."""

from __future__ import annotations

from contextlib import closing

import click

from shopstock.application.add_customer import AddCustomerHandler, ShowCustomerHandler
from shopstock.domain.exceptions import DomainException
from shopstock.infrastructure.bootstrap import unit_of_work
from shopstock.infrastructure.config import Settings


@click.command("add")
@click.option("--name", required=True, help="Customer name.")
@click.option("--phone", default=None, help="Phone number.")
@click.pass_obj
def customer_add(settings: Settings, name: str, phone: str | None) -> None:
    """Add a new customer."""
    with closing(unit_of_work(settings)) as uow:
        handler = AddCustomerHandler(uow)

        try:
            customer_id = handler.handle(name=name, phone=phone)
        except DomainException as exc:
            raise click.ClickException(str(exc))

    click.echo(f"Customer #{customer_id} '{name.strip()}' added")


@click.command("show")
@click.option("--id", "customer_id", required=True, type=int, help="Customer ID.")
@click.pass_obj
def customer_show(settings: Settings, customer_id: int) -> None:
    """Show a customer's balances and store credit."""
    with closing(unit_of_work(settings)) as uow:
        handler = ShowCustomerHandler(uow)

        try:
            dto = handler.handle(customer_id)
        except DomainException as exc:
            raise click.ClickException(str(exc))

    click.echo(f"Customer #{dto.id}  {dto.name}")
    if dto.phone:
        click.echo(f"Phone:    {dto.phone}")
    if not dto.balances:
        click.echo("No balances recorded.")
        return
    click.echo()
    click.echo(f"  {'Currency':<10} {'Owes':>15} {'Credit':>15}")
    click.echo(f"  {'-'*42}")
    for currency, balance in dto.balances.items():
        click.echo(f"  {currency:<10} {balance:>15} {dto.advances.get(currency, '0.00'):>15}")
