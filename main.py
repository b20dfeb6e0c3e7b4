#!/usr/bin/env python3
"""
Purchase Order Service — CLI entry point.

Usage examples:
  python main.py check                              # Verify the database file
  python main.py init                               # Create / repair the database file
  python main.py serve                              # Run the HTTP API (default port 5000)
  python main.py serve --port 8080 --reload

  python main.py create --item-name Bolt --category Hardware --quantity 100 --supplier Acme
  python main.py list
  python main.py show <id>
  python main.py update <id> --status Approved
  python main.py delete <id>
  python main.py search --item-name bolt --status pending
  python main.py backup backups/
"""
import json
import logging
import os
import sys
import zipfile
from datetime import datetime
from pathlib import Path

import click

from bootstrap import ensure_database_file
from config import Config
from models.purchase_order import ALL_STATUSES, PurchaseOrder
from orders.errors import OrderError
from orders.service import OrderService
from orders.store import DocumentShapeError, RecordStore, parse_document


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
        datefmt="%H:%M:%S",
    )
    # Quieten noisy third-party loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def _service(ctx: click.Context) -> OrderService:
    config: Config = ctx.obj["config"]
    return OrderService(RecordStore(config.db_path, pretty=config.pretty_json))


def _echo_order(order: PurchaseOrder) -> None:
    click.echo(
        f"  {order.id}  {order.status:<9}  {order.quantity:>6} x {order.item_name}"
        f"  [{order.category}]  from {order.supplier}"
    )


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _fail(exc: OrderError) -> None:
    click.echo(f"Error: {exc.message}", err=True)
    sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--db", "db_path", default=None, type=click.Path(), help="Path to the database JSON file")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, db_path: str | None) -> None:
    """Purchase Order Service — manage purchase orders stored in a JSON file."""
    ctx.ensure_object(dict)
    _setup_logging(verbose)
    config = Config()
    if db_path:
        config.db_path = Path(db_path)
    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config


# --------------------------------------------------------------------
# setup commands
# --------------------------------------------------------------------

@cli.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Verify that the database file exists and parses."""
    config: Config = ctx.obj["config"]
    path = config.db_path

    click.echo("\n=== Purchase Order Service Check ===\n")
    click.echo(f"  Database file:  {path}")
    if not path.exists():
        click.echo("  Status:         ✗ not found (run `python main.py init`)")
        click.echo()
        return

    try:
        with open(path, encoding="utf-8") as f:
            db = parse_document(json.load(f), source=str(path))
    except (OSError, ValueError, DocumentShapeError) as exc:
        click.echo(f"  Status:         ✗ invalid ({exc}) — will load as empty")
    else:
        count = len(db.purchase_orders)
        if db.invalid_records:
            click.echo(
                f"  Status:         ⚠ {count} valid, {len(db.invalid_records)} invalid"
                " purchase order(s) — invalid records are skipped on read and kept on disk"
            )
        else:
            click.echo(f"  Status:         ✓ valid ({count} purchase orders)")
    click.echo(f"  Server:         http://{config.host}:{config.port}")
    click.echo()


@cli.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Create the database file, or repair it if it is not valid JSON."""
    config: Config = ctx.obj["config"]
    result = ensure_database_file(config.db_path)
    click.echo(f"Database {result}: {config.db_path}")


@cli.command()
@click.option("--host", default=None, help="Bind address (default: HOST env var or 127.0.0.1)")
@click.option("--port", "-p", default=None, type=int, help="Port (default: PORT env var or 5000)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes (development)")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None, reload: bool) -> None:
    """Run the purchase order HTTP API."""
    import uvicorn

    config: Config = ctx.obj["config"]
    if host:
        config.host = host
    if port is not None:
        config.port = port
    ensure_database_file(config.db_path)
    # The app builds its own Config in the server process
    os.environ["DB_PATH"] = str(config.db_path)

    click.echo(f"Server running on http://{config.host}:{config.port}")
    uvicorn.run(
        "api.app:app",
        host=config.host,
        port=config.port,
        reload=reload,
        log_level="debug" if ctx.obj["verbose"] else "info",
    )


# --------------------------------------------------------------------
# record commands
# --------------------------------------------------------------------

@cli.command("list")
@click.option("--json", "as_json", is_flag=True, help="Print the raw JSON records")
@click.pass_context
def list_orders(ctx: click.Context, as_json: bool) -> None:
    """List every purchase order in stored order."""
    orders = _service(ctx).list_all()
    if as_json:
        _echo_json([o.to_json_dict() for o in orders])
        return
    if not orders:
        click.echo("No purchase orders.")
    for order in orders:
        _echo_order(order)


@cli.command()
@click.argument("order_id")
@click.pass_context
def show(ctx: click.Context, order_id: str) -> None:
    """Show one purchase order as JSON."""
    try:
        order = _service(ctx).get_by_id(order_id)
    except OrderError as exc:
        _fail(exc)
    _echo_json(order.to_json_dict())


@cli.command()
@click.option("--item-name", required=True)
@click.option("--category", required=True)
@click.option("--quantity", required=True, type=int)
@click.option("--supplier", required=True)
@click.pass_context
def create(ctx: click.Context, item_name: str, category: str, quantity: int, supplier: str) -> None:
    """Create a purchase order (status starts as Pending)."""
    try:
        order = _service(ctx).create(
            {"item_name": item_name, "category": category, "quantity": quantity, "supplier": supplier}
        )
    except OrderError as exc:
        _fail(exc)
    click.echo("✓ Purchase order created")
    _echo_order(order)


@cli.command()
@click.argument("order_id")
@click.option("--item-name", default=None)
@click.option("--category", default=None)
@click.option("--quantity", default=None, type=int)
@click.option("--supplier", default=None)
@click.option("--status", default=None, type=click.Choice(ALL_STATUSES))
@click.pass_context
def update(ctx: click.Context, order_id: str, **fields) -> None:
    """Change one or more fields of a purchase order."""
    patch = {k: v for k, v in fields.items() if v is not None}
    if not patch:
        click.echo("Nothing to update.", err=True)
        sys.exit(1)
    try:
        order = _service(ctx).update(order_id, patch)
    except OrderError as exc:
        _fail(exc)
    click.echo("✓ Purchase order updated")
    _echo_order(order)


@cli.command()
@click.argument("order_id")
@click.pass_context
def delete(ctx: click.Context, order_id: str) -> None:
    """Delete a purchase order."""
    try:
        _service(ctx).delete(order_id)
    except OrderError as exc:
        _fail(exc)
    click.echo(f"✓ Purchase order deleted: {order_id}")


@cli.command()
@click.option("--item-name", default=None, help="Substring of the item name")
@click.option("--category", default=None, help="Substring of the category")
@click.option("--supplier", default=None, help="Substring of the supplier")
@click.option("--status", default=None, help="Substring of the status")
@click.option("--json", "as_json", is_flag=True, help="Print the raw JSON records")
@click.pass_context
def search(ctx: click.Context, as_json: bool, **filters) -> None:
    """
    Find purchase orders. Matching is case-insensitive and by substring;
    all given filters must match.
    """
    orders = _service(ctx).search(filters)
    if as_json:
        _echo_json([o.to_json_dict() for o in orders])
        return
    click.echo(f"{len(orders)} matching purchase order(s)")
    for order in orders:
        _echo_order(order)


# --------------------------------------------------------------------
# backup command
# --------------------------------------------------------------------

@cli.command()
@click.argument("destination", type=click.Path(), default="backups")
@click.pass_context
def backup(ctx: click.Context, destination: str) -> None:
    """
    Create a timestamped ZIP backup of the database file.
    """
    config: Config = ctx.obj["config"]
    dest_dir = Path(destination)
    dest_dir.mkdir(parents=True, exist_ok=True)

    if not config.db_path.exists():
        click.echo(f"✗ Nothing to back up: {config.db_path} does not exist", err=True)
        sys.exit(1)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    zip_name = f"purchase_orders_backup_{timestamp}.zip"
    zip_path = dest_dir / zip_name

    click.echo(f"Creating backup: {zip_path}")

    # Hold the write lock so the snapshot never straddles a save
    store = RecordStore(config.db_path)
    try:
        with store.transaction():
            with zipfile.ZipFile(zip_path, "w", zipfile.ZIP_DEFLATED) as zipf:
                zipf.write(config.db_path, arcname=f"data/{config.db_path.name}")
        click.echo(f"\n✓ Backup successful: {zip_name}")

    except OSError as e:
        click.echo(f"\n✗ Backup failed: {e}", err=True)
        if zip_path.exists():
            zip_path.unlink()
        sys.exit(1)


if __name__ == "__main__":
    cli()
