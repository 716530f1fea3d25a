"""Typer CLI for inspecting catalog change-event envelopes."""

from __future__ import annotations

from pathlib import Path

import structlog
import typer
from rich.console import Console
from rich.table import Table

from catalog_events.config.loader import load_messaging_config
from catalog_events.messaging.deserializer import JSONMessageDeserializer
from catalog_events.messaging.envelope import (
    MESSAGE_FORMAT,
    MESSAGE_VERSION,
    get_json_tree,
)
from catalog_events.messaging.errors import MessageDecodeError
from catalog_events.messaging.messages import (
    AddPartitionMessage,
    AlterIndexMessage,
    AlterPartitionMessage,
    AlterTableMessage,
    CreateFunctionMessage,
    CreateIndexMessage,
    CreateTableMessage,
    DropFunctionMessage,
    DropIndexMessage,
    DropPartitionMessage,
    InsertMessage,
    Message,
)

logger = structlog.get_logger()
console = Console()
app = typer.Typer(name="catalog-events", help="Catalog change-event envelope tools")


def _describe(message: Message) -> list[tuple[str, str]]:
    """Decode the embedded objects of *message* into printable rows."""
    rows: list[tuple[str, str]] = []
    if isinstance(
        message,
        CreateTableMessage
        | AlterTableMessage
        | AddPartitionMessage
        | AlterPartitionMessage,
    ):
        table = message.get_table_obj()
        keys = ", ".join(k.name for k in table.partition_keys) or "-"
        rows.append(("table", f"{table.db_name}.{table.table_name} ({keys})"))
    if isinstance(message, AddPartitionMessage):
        for i, part in enumerate(message.get_partition_objs()):
            rows.append((f"partition[{i}]", "/".join(part.values)))
    elif isinstance(message, AlterPartitionMessage):
        before = message.get_partition_obj_before()
        after = message.get_partition_obj_after()
        rows.append(("partition before", "/".join(before.values)))
        rows.append(("partition after", "/".join(after.values)))
    elif isinstance(message, DropPartitionMessage):
        for i, spec in enumerate(message.partition_key_values_array):
            pairs = ", ".join(f"{k}={v}" for k, v in spec.items())
            rows.append((f"partition[{i}]", pairs))
    elif isinstance(message, CreateFunctionMessage | DropFunctionMessage):
        fn = message.get_function_obj()
        rows.append(("function", f"{fn.db_name}.{fn.function_name} ({fn.class_name})"))
    elif isinstance(message, CreateIndexMessage | DropIndexMessage):
        idx = message.get_index_obj()
        rows.append(("index", f"{idx.index_name} on {idx.db_name}.{idx.orig_table_name}"))
    elif isinstance(message, AlterIndexMessage):
        rows.append(("index before", message.get_index_obj_before().index_name))
        rows.append(("index after", message.get_index_obj_after().index_name))
    elif isinstance(message, InsertMessage):
        pairs = ", ".join(f"{k}={v}" for k, v in message.partition_key_values.items())
        rows.append(("partition", pairs or "-"))
        rows.append(("files", str(len(message.files))))
    return rows


@app.command()
def info() -> None:
    """Show the envelope format and version this build produces."""
    console.print(f"format:  {MESSAGE_FORMAT}")
    console.print(f"version: {MESSAGE_VERSION}")


@app.command()
def inspect(
    envelope_path: str = typer.Argument(..., help="Path to an envelope JSON file"),
) -> None:
    """Decode an envelope file and summarize its contents."""
    path = Path(envelope_path)
    if not path.exists():
        console.print(f"[red]Envelope file not found: {path}[/red]")
        raise typer.Exit(1)

    try:
        tree = get_json_tree(path.read_bytes())
        message = JSONMessageDeserializer().from_json_tree(tree)
        details = _describe(message)
    except MessageDecodeError as exc:
        console.print(f"[red]Decode error:[/red] {exc}")
        raise typer.Exit(1) from exc
    logger.debug("cli.inspect", path=str(path), event_type=str(message.event_type))

    table = Table(title=f"{message.event_type}")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("server", message.server)
    table.add_row("principal", message.service_principal)
    table.add_row("timestamp", str(message.timestamp))
    for db_field in ("db_name", "table_name"):
        value = getattr(message, db_field, None)
        if value is not None:
            table.add_row(db_field, value)
    for name, value in details:
        table.add_row(name, value)
    console.print(table)


@app.command()
def validate(
    config_path: str = typer.Argument(..., help="Path to messaging YAML"),
) -> None:
    """Validate a messaging configuration file."""
    try:
        config = load_messaging_config(Path(config_path))
    except Exception as exc:
        console.print(f"[red]Validation error:[/red] {exc}")
        raise typer.Exit(1) from exc
    console.print(f"[green]Valid[/green] — format={config.message_format}")
    console.print(f"  server:    {config.server_url or '(unset)'}")
    console.print(f"  principal: {config.service_principal or '(unset)'}")
