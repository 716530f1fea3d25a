"""Protocols for message factories and deserializers.

Producers build messages through a ``MessageFactory``; consumers read them
back through the ``MessageDeserializer`` that the same factory hands out.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from catalog_events.catalog.models import (
    Database,
    Function,
    Index,
    NotificationEvent,
    Partition,
    Table,
)
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
    Message,
)


@runtime_checkable
class MessageDeserializer(Protocol):
    """Turns envelope text back into typed messages."""

    def deserialize(self, data: bytes | str | NotificationEvent) -> Message:
        """Parse an envelope into the message variant it names."""
        ...


@runtime_checkable
class MessageFactory(Protocol):
    """Builds one message per catalog operation.

    Implementations: JSONMessageFactory.
    """

    def get_deserializer(self) -> MessageDeserializer: ...

    def get_version(self) -> str: ...

    def get_message_format(self) -> str: ...

    def build_create_database(self, db: Database) -> CreateDatabaseMessage: ...

    def build_drop_database(self, db: Database) -> DropDatabaseMessage: ...

    def build_create_table(self, table: Table) -> CreateTableMessage: ...

    def build_alter_table(self, before: Table, after: Table) -> AlterTableMessage: ...

    def build_drop_table(self, table: Table) -> DropTableMessage: ...

    def build_add_partition(
        self, table: Table, partitions: Iterable[Partition]
    ) -> AddPartitionMessage: ...

    def build_alter_partition(
        self, table: Table, before: Partition, after: Partition
    ) -> AlterPartitionMessage: ...

    def build_drop_partition(
        self, table: Table, partitions: Iterable[Partition]
    ) -> DropPartitionMessage: ...

    def build_create_function(self, fn: Function) -> CreateFunctionMessage: ...

    def build_drop_function(self, fn: Function) -> DropFunctionMessage: ...

    def build_create_index(self, idx: Index) -> CreateIndexMessage: ...

    def build_drop_index(self, idx: Index) -> DropIndexMessage: ...

    def build_alter_index(self, before: Index, after: Index) -> AlterIndexMessage: ...

    def build_insert(
        self,
        db_name: str,
        table_name: str,
        partition_key_values: dict[str, str],
        files: Iterable[str],
    ) -> InsertMessage: ...
