"""Outer JSON envelope — serialization, parsing and typed extraction.

The envelope is a flat JSON object.  Embedded catalog objects are stored as
JSON strings holding inner-encoded text and are never expanded into nested
JSON; this module only locates them and hands them to the record codec.
"""

from __future__ import annotations

import json
from typing import Any

from catalog_events.catalog.codec import RecordCodec
from catalog_events.catalog.models import (
    Function,
    Index,
    NotificationEvent,
    Partition,
    Table,
)
from catalog_events.messaging.errors import (
    FieldMissingError,
    MessageDecodeError,
    OuterParseError,
)
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
    EventKind,
    Message,
    decode_embedded,
)

MESSAGE_FORMAT = "json"
MESSAGE_VERSION = "0.1"

EVENT_TYPE_KEY = "eventType"


# -- Write path ----------------------------------------------------------------


def to_json_tree(message: Message) -> dict[str, Any]:
    """Return the envelope object for *message* using wire key names."""
    return message.model_dump(mode="json", by_alias=True)


def serialize(message: Message) -> str:
    """Serialize *message* to compact envelope JSON."""
    return json.dumps(to_json_tree(message), separators=(",", ":"))


def to_notification_event(
    message: Message,
    event_id: int,
    *,
    codec: RecordCodec | None = None,
) -> NotificationEvent:
    """Wrap *message* as a notification-log row.

    The row's database and table columns are filled from whichever identity
    the message carries, decoding the embedded object when needed.
    """
    db_name: str | None = getattr(message, "db_name", None)
    table_name: str | None = getattr(message, "table_name", None)

    if isinstance(
        message,
        CreateTableMessage
        | AlterTableMessage
        | AddPartitionMessage
        | AlterPartitionMessage,
    ):
        table = message.get_table_obj(codec)
        db_name, table_name = table.db_name, table.table_name
    elif isinstance(message, CreateFunctionMessage | DropFunctionMessage):
        db_name = message.get_function_obj(codec).db_name
    elif isinstance(message, CreateIndexMessage | DropIndexMessage):
        index = message.get_index_obj(codec)
        db_name, table_name = index.db_name, index.orig_table_name
    elif isinstance(message, AlterIndexMessage):
        index = message.get_index_obj_after(codec)
        db_name, table_name = index.db_name, index.orig_table_name

    return NotificationEvent(
        event_id=event_id,
        event_time=message.timestamp,
        event_type=str(message.event_type),
        db_name=db_name,
        table_name=table_name,
        message=serialize(message),
        message_format=MESSAGE_FORMAT,
    )


# -- Read path -----------------------------------------------------------------


def get_json_tree(data: bytes | str | NotificationEvent) -> dict[str, Any]:
    """Parse an envelope once into a generic JSON object."""
    if isinstance(data, NotificationEvent):
        data = data.message
    try:
        tree = json.loads(data)
    except (ValueError, RecursionError) as exc:
        msg = f"Envelope is not valid JSON: {exc}"
        raise OuterParseError(msg) from exc
    if not isinstance(tree, dict):
        msg = f"Envelope must be a JSON object, got {type(tree).__name__}"
        raise OuterParseError(msg)
    return tree


def event_kind(tree: dict[str, Any]) -> EventKind:
    """Return the envelope's kind, ``UNKNOWN`` when absent or unrecognized."""
    value = tree.get(EVENT_TYPE_KEY)
    if not isinstance(value, str):
        return EventKind.UNKNOWN
    return EventKind(value)


def _require(tree: dict[str, Any], key: str) -> Any:
    if key not in tree or tree[key] is None:
        raise FieldMissingError(key)
    return tree[key]


def _require_text(tree: dict[str, Any], key: str) -> str:
    value = _require(tree, key)
    if not isinstance(value, str):
        msg = f"Envelope field '{key}' must be a string, got {type(value).__name__}"
        raise MessageDecodeError(msg)
    return value


def _require_text_list(tree: dict[str, Any], key: str) -> list[str]:
    value = _require(tree, key)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        msg = f"Envelope field '{key}' must be an array of strings"
        raise MessageDecodeError(msg)
    return value


def get_table_obj(
    tree: dict[str, Any],
    key: str = "tableObjJson",
    *,
    codec: RecordCodec | None = None,
) -> Table:
    return decode_embedded(_require_text(tree, key), Table, key, codec)


def get_partition_obj(
    tree: dict[str, Any],
    key: str,
    *,
    codec: RecordCodec | None = None,
) -> Partition:
    """Decode a single embedded partition, e.g. ``partitionObjAfterJson``."""
    return decode_embedded(_require_text(tree, key), Partition, key, codec)


def get_partition_obj_list(
    tree: dict[str, Any],
    key: str = "partitionListJson",
    *,
    codec: RecordCodec | None = None,
) -> list[Partition]:
    """Decode every embedded partition, preserving array order.

    Each element is decoded into its own record; nothing is shared between
    the returned partitions.
    """
    texts = _require_text_list(tree, key)
    return [decode_embedded(text, Partition, key, codec) for text in texts]


def get_function_obj(
    tree: dict[str, Any],
    key: str = "functionObjJson",
    *,
    codec: RecordCodec | None = None,
) -> Function:
    return decode_embedded(_require_text(tree, key), Function, key, codec)


def get_index_obj(
    tree: dict[str, Any],
    key: str = "indexObjJson",
    *,
    codec: RecordCodec | None = None,
) -> Index:
    """Decode an embedded index.

    ALTER_INDEX envelopes store two indexes, so pass ``indexObjBeforeJson``
    or ``indexObjAfterJson`` as *key* for those.
    """
    return decode_embedded(_require_text(tree, key), Index, key, codec)


def get_partition_key_values(
    tree: dict[str, Any],
    key: str = "partitionKeyValuesArray",
) -> list[dict[str, str]]:
    """Return the per-partition key/value maps of a DROP_PARTITION envelope."""
    value = _require(tree, key)
    if not isinstance(value, list) or not all(
        isinstance(item, dict)
        and all(isinstance(k, str) and isinstance(v, str) for k, v in item.items())
        for item in value
    ):
        msg = f"Envelope field '{key}' must be an array of string maps"
        raise MessageDecodeError(msg)
    return [dict(item) for item in value]
