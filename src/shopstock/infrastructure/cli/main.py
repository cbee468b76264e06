import click

from shopstock.infrastructure.cli.customer_commands import customer_add, customer_show
from shopstock.infrastructure.cli.delivery_commands import delivery_take
from shopstock.infrastructure.cli.invoice_commands import (
    invoice_convert,
    invoice_delete,
    invoice_issue,
    invoice_pending,
    invoice_show,
)
from shopstock.infrastructure.cli.product_commands import (
    product_add,
    product_adjust,
    product_list,
    product_verify,
)
from shopstock.infrastructure.cli.return_commands import return_create, return_refund
from shopstock.infrastructure.config import load_settings
from shopstock.infrastructure.loggers import configure_logging


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """shopstock — stock reservation and delivery tracking"""
    settings = load_settings()
    configure_logging(settings.log_level)
    ctx.obj = settings


@cli.group()
def customer() -> None:
    """Manage customers."""


@cli.group()
def product() -> None:
    """Manage products and stock."""


@cli.group()
def invoice() -> None:
    """Issue and manage invoices and quotations."""


@cli.group()
def delivery() -> None:
    """Record goods collected by customers."""


@cli.group("return")
def return_() -> None:
    """Record sales returns."""


# Register subcommands
customer.add_command(customer_add)
customer.add_command(customer_show)
product.add_command(product_add)
product.add_command(product_adjust)
product.add_command(product_list)
product.add_command(product_verify)
invoice.add_command(invoice_convert)
invoice.add_command(invoice_delete)
invoice.add_command(invoice_issue)
invoice.add_command(invoice_pending)
invoice.add_command(invoice_show)
delivery.add_command(delivery_take)
return_.add_command(return_create)
return_.add_command(return_refund)
