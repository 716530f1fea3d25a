"""JSON implementation of the message factory.

Builds one typed message per catalog operation.  Full catalog objects are
inner-encoded whole by the record codec and stored as strings; the outer JSON
envelope is produced later by ``envelope.serialize``.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

import structlog

from catalog_events.catalog.codec import RecordCodec
from catalog_events.catalog.models import Database, Function, Index, Partition, Table
from catalog_events.config.models import MessagingConfig
from catalog_events.messaging.deserializer import JSONMessageDeserializer
from catalog_events.messaging.envelope import MESSAGE_FORMAT, MESSAGE_VERSION
from catalog_events.messaging.errors import ContractViolation
from catalog_events.messaging.messages import (
    AddPartitionMessage,
    AlterIndexMessage,
    AlterPartitionMessage,
    AlterTableMessage,
    CreateDatabaseMessage,
    CreateFunctionMessage,
    CreateIndexMessage,
    CreateTableMessage,
    DropDatabaseMessage,
    DropFunctionMessage,
    DropIndexMessage,
    DropPartitionMessage,
    DropTableMessage,
    InsertMessage,
    _MessageBase,
)

logger = structlog.get_logger()

M = TypeVar("M", bound=_MessageBase)

_DESERIALIZER = JSONMessageDeserializer()


def partition_spec(table: Table, partition: Partition) -> dict[str, str]:
    """Pair the table's partition-key names with the partition's values.

    Keys keep table schema order.  Raises ``ContractViolation`` when the
    partition does not carry exactly one value per partition key.
    """
    keys = table.partition_keys
    if len(keys) != len(partition.values):
        msg = (
            f"Partition of {table.db_name}.{table.table_name} has "
            f"{len(partition.values)} value(s) for {len(keys)} partition key(s)"
        )
        raise ContractViolation(msg)
    return {key.name: value for key, value in zip(keys, partition.values)}


class JSONMessageFactory:
    """Builds messages stamped with this server's identity.

    *clock* returns the current Unix time in seconds; it is truncated to whole
    seconds for the ``timestamp`` field.
    """

    def __init__(
        self,
        config: MessagingConfig | None = None,
        *,
        codec: RecordCodec | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config or MessagingConfig()
        self._codec = codec or RecordCodec()
        self._clock = clock

    def get_deserializer(self) -> JSONMessageDeserializer:
        return _DESERIALIZER

    def get_version(self) -> str:
        return MESSAGE_VERSION

    def get_message_format(self) -> str:
        return MESSAGE_FORMAT

    def _metadata(self) -> dict[str, Any]:
        return {
            "server": self._config.server_url,
            "service_principal": self._config.service_principal,
            "timestamp": int(self._clock()),
        }

    def _built(self, message: M) -> M:
        logger.debug(
            "message.built",
            event_type=str(message.event_type),
            timestamp=message.timestamp,
        )
        return message

    # -- Database --------------------------------------------------------------

    def build_create_database(self, db: Database) -> CreateDatabaseMessage:
        return self._built(CreateDatabaseMessage(**self._metadata(), db_name=db.name))

    def build_drop_database(self, db: Database) -> DropDatabaseMessage:
        return self._built(DropDatabaseMessage(**self._metadata(), db_name=db.name))

    # -- Table -----------------------------------------------------------------

    def build_create_table(self, table: Table) -> CreateTableMessage:
        return self._built(
            CreateTableMessage(
                **self._metadata(), table_obj_json=self._codec.encode(table)
            )
        )

    def build_alter_table(self, before: Table, after: Table) -> AlterTableMessage:
        """Record the altered table.

        Only *after* is embedded; callers that need the prior state must
        capture *before* themselves.
        """
        return self._built(
            AlterTableMessage(
                **self._metadata(), table_obj_json=self._codec.encode(after)
            )
        )

    def build_drop_table(self, table: Table) -> DropTableMessage:
        return self._built(
            DropTableMessage(
                **self._metadata(),
                db_name=table.db_name,
                table_name=table.table_name,
            )
        )

    # -- Partition -------------------------------------------------------------

    def build_add_partition(
        self, table: Table, partitions: Iterable[Partition]
    ) -> AddPartitionMessage:
        """Embed the table and every added partition.

        *partitions* may be a one-shot iterator; it is consumed here.
        """
        return self._built(
            AddPartitionMessage(
                **self._metadata(),
                table_obj_json=self._codec.encode(table),
                partition_list_json=[self._codec.encode(p) for p in partitions],
            )
        )

    def build_alter_partition(
        self, table: Table, before: Partition, after: Partition
    ) -> AlterPartitionMessage:
        return self._built(
            AlterPartitionMessage(
                **self._metadata(),
                table_obj_json=self._codec.encode(table),
                partition_obj_before_json=self._codec.encode(before),
                partition_obj_after_json=self._codec.encode(after),
            )
        )

    def build_drop_partition(
        self, table: Table, partitions: Iterable[Partition]
    ) -> DropPartitionMessage:
        """Record dropped partitions by their key values, not as full objects."""
        return self._built(
            DropPartitionMessage(
                **self._metadata(),
                db_name=table.db_name,
                table_name=table.table_name,
                partition_key_values_array=[
                    partition_spec(table, p) for p in partitions
                ],
            )
        )

    # -- Function --------------------------------------------------------------

    def build_create_function(self, fn: Function) -> CreateFunctionMessage:
        return self._built(
            CreateFunctionMessage(
                **self._metadata(), function_obj_json=self._codec.encode(fn)
            )
        )

    def build_drop_function(self, fn: Function) -> DropFunctionMessage:
        return self._built(
            DropFunctionMessage(
                **self._metadata(), function_obj_json=self._codec.encode(fn)
            )
        )

    # -- Index -----------------------------------------------------------------

    def build_create_index(self, idx: Index) -> CreateIndexMessage:
        return self._built(
            CreateIndexMessage(**self._metadata(), index_obj_json=self._codec.encode(idx))
        )

    def build_drop_index(self, idx: Index) -> DropIndexMessage:
        return self._built(
            DropIndexMessage(**self._metadata(), index_obj_json=self._codec.encode(idx))
        )

    def build_alter_index(self, before: Index, after: Index) -> AlterIndexMessage:
        return self._built(
            AlterIndexMessage(
                **self._metadata(),
                index_obj_before_json=self._codec.encode(before),
                index_obj_after_json=self._codec.encode(after),
            )
        )

    # -- Insert ----------------------------------------------------------------

    def build_insert(
        self,
        db_name: str,
        table_name: str,
        partition_key_values: dict[str, str],
        files: Iterable[str],
    ) -> InsertMessage:
        return self._built(
            InsertMessage(
                **self._metadata(),
                db_name=db_name,
                table_name=table_name,
                partition_key_values=dict(partition_key_values),
                files=list(files),
            )
        )
