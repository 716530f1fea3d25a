#!/usr/bin/env python3
"""Runnable demo: build catalog change events and read them back.

    uv run python examples/catalog_events_demo.py
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

from catalog_events.catalog.models import FieldSchema, Partition, Table
from catalog_events.config.loader import load_messaging_config
from catalog_events.messaging.envelope import (
    get_json_tree,
    get_partition_obj_list,
    to_notification_event,
)
from catalog_events.messaging.factory import create_message_factory, deserializer_for

console = Console()


def main() -> None:
    # 1. Load identity from the demo config (env vars override)
    config = load_messaging_config(Path(__file__).parent / "messaging.yaml")
    factory = create_message_factory(config)
    console.print(
        f"[bold]Factory ready[/bold] format={factory.get_message_format()} "
        f"version={factory.get_version()}"
    )

    # 2. Build an ADD_PARTITION event for a partitioned table
    table = Table(
        table_name="events",
        db_name="sales",
        partition_keys=[
            FieldSchema(name="ds", type="string"),
            FieldSchema(name="region", type="string"),
        ],
    )
    parts = (
        Partition(values=["2024-01-01", region], db_name="sales", table_name="events")
        for region in ("us", "eu", "apac")
    )
    message = factory.build_add_partition(table, parts)
    event = to_notification_event(message, event_id=1)
    console.print(f"[cyan]{event.event_type}[/cyan] {event.db_name}.{event.table_name}")
    console.print(f"  envelope: {len(event.message)} bytes")

    # 3. Read it back, both as a typed message and as a raw tree
    decoded = deserializer_for(event).deserialize(event)
    console.print(f"  decoded kind: {decoded.event_type}")
    for part in get_partition_obj_list(get_json_tree(event)):
        console.print(f"  partition: {'/'.join(part.values)}")


if __name__ == "__main__":
    main()
