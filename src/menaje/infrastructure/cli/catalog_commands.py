"""CLI commands for the rentable-item catalog."""

from __future__ import annotations

import click

from menaje.application.add_item import AddItemHandler
from menaje.application.list_items import ListItemsHandler
from menaje.application.set_stock import SetStockHandler
from menaje.application.update_item import UpdateItemHandler
from menaje.domain.exceptions import DomainException
from menaje.domain.model.inventory import Unidad
from menaje.infrastructure.bootstrap import commitment_policy, unit_of_work


@click.command("add")
@click.option("--name", required=True, help="Item name.")
@click.option(
    "--unit",
    default=Unidad.UNIDAD.code,
    show_default=True,
    type=click.Choice([u.code for u in Unidad]),
    help="Unit the item is counted in.",
)
@click.option("--stock", required=True, type=int, help="Physical units owned.")
@click.option("--category", default="general", show_default=True, help="Catalog category.")
def catalog_add(name: str, unit: str, stock: int, category: str) -> None:
    """Add a rentable item to the catalog."""
    handler = AddItemHandler(uow=unit_of_work())

    try:
        dto = handler.handle(nombre=name, unidad=unit, stock_total=stock, categoria=category)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item #{dto.id} '{dto.nombre}' added  (stock={dto.stock_total} {dto.unidad})")


@click.command("list")
@click.option("--all", "include_inactive", is_flag=True, default=False, help="Include inactive items.")
def catalog_list(include_inactive: bool) -> None:
    """List catalog items."""
    items = ListItemsHandler(uow=unit_of_work()).handle(include_inactive=include_inactive)

    if not items:
        click.echo("No items in the catalog.")
        return

    click.echo(f"{'ID':>4}  {'Item':<24} {'Category':<14} {'Unit':<8} {'Stock':>6}")
    click.echo("-" * 60)
    for item in items:
        flag = "" if item.activo else "  (inactive)"
        click.echo(
            f"{item.id:>4}  {item.nombre:<24} {item.categoria:<14} {item.unidad:<8} {item.stock_total:>6}{flag}"
        )


@click.command("set-stock")
@click.option("--id", "item_id", required=True, type=int, help="Item ID.")
@click.option("--stock", required=True, type=int, help="New physical stock count.")
def catalog_set_stock(item_id: int, stock: int) -> None:
    """Record a new stock count for an item."""
    handler = SetStockHandler(uow=unit_of_work(), policy=commitment_policy())

    try:
        dto = handler.handle(item_id, stock)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock for '{dto.nombre}' set to {dto.stock_total}")


@click.command("update")
@click.option("--id", "item_id", required=True, type=int, help="Item ID.")
@click.option("--name", default=None, help="New item name.")
@click.option("--category", default=None, help="New catalog category.")
@click.option("--unit", default=None, type=click.Choice([u.code for u in Unidad]), help="New unit.")
@click.option("--active/--inactive", "activo", default=None, help="Offer the item or withdraw it.")
def catalog_update(
    item_id: int,
    name: str | None,
    category: str | None,
    unit: str | None,
    activo: bool | None,
) -> None:
    """Edit an item's name, category, unit or active flag."""
    if name is None and category is None and unit is None and activo is None:
        raise click.UsageError("Nothing to update; pass at least one option.")

    handler = UpdateItemHandler(uow=unit_of_work())

    try:
        dto = handler.handle(item_id, nombre=name, categoria=category, unidad=unit, activo=activo)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    status = "active" if dto.activo else "inactive"
    click.echo(f"Item #{dto.id} '{dto.nombre}' updated  ({dto.categoria}, {dto.unidad}, {status})")
