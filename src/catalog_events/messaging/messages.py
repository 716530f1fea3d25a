"""Typed change-event messages.

``Message`` is a tagged union discriminated on ``event_type`` (wire key
``eventType``).  Every variant carries the same metadata (server, principal,
timestamp) plus only the fields its kind needs.  Embedded object fields hold
inner-encoded text; the ``get_*`` accessors decode them on demand.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Literal, TypeVar

import structlog
from pydantic import BaseModel, Field

from catalog_events.catalog.codec import RecordCodec, RecordSerializationError
from catalog_events.catalog.models import Function, Index, Partition, Table
from catalog_events.messaging.errors import InnerDecodeError

logger = structlog.get_logger()

R = TypeVar("R", Table, Partition, Function, Index)

_DEFAULT_CODEC = RecordCodec()


class EventKind(StrEnum):
    """Catalog operations that produce a change event."""

    CREATE_DATABASE = "CREATE_DATABASE"
    DROP_DATABASE = "DROP_DATABASE"
    CREATE_TABLE = "CREATE_TABLE"
    ALTER_TABLE = "ALTER_TABLE"
    DROP_TABLE = "DROP_TABLE"
    ADD_PARTITION = "ADD_PARTITION"
    ALTER_PARTITION = "ALTER_PARTITION"
    DROP_PARTITION = "DROP_PARTITION"
    CREATE_FUNCTION = "CREATE_FUNCTION"
    DROP_FUNCTION = "DROP_FUNCTION"
    CREATE_INDEX = "CREATE_INDEX"
    DROP_INDEX = "DROP_INDEX"
    ALTER_INDEX = "ALTER_INDEX"
    INSERT = "INSERT"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def _missing_(cls, value: object) -> EventKind:
        return cls.UNKNOWN


def decode_embedded(
    text: str,
    record_type: type[R],
    key: str,
    codec: RecordCodec | None = None,
) -> R:
    """Inner-decode the text stored under *key*, tagging failures with it."""
    try:
        return (codec or _DEFAULT_CODEC).decode(text, record_type)
    except RecordSerializationError as exc:
        logger.warning(
            "envelope.decode_failed", key=key, record_type=record_type.__name__
        )
        raise InnerDecodeError(key, str(exc)) from exc


class _MessageBase(BaseModel, frozen=True, populate_by_name=True):
    server: str
    service_principal: str = Field(alias="principal")
    timestamp: int = Field(ge=0, strict=True)
    event_type: EventKind = Field(alias="eventType")


# -- Database ------------------------------------------------------------------


class CreateDatabaseMessage(_MessageBase):
    event_type: Literal[EventKind.CREATE_DATABASE] = Field(
        EventKind.CREATE_DATABASE, alias="eventType"
    )
    db_name: str = Field(alias="dbName")


class DropDatabaseMessage(_MessageBase):
    event_type: Literal[EventKind.DROP_DATABASE] = Field(
        EventKind.DROP_DATABASE, alias="eventType"
    )
    db_name: str = Field(alias="dbName")


# -- Table ---------------------------------------------------------------------


class CreateTableMessage(_MessageBase):
    event_type: Literal[EventKind.CREATE_TABLE] = Field(
        EventKind.CREATE_TABLE, alias="eventType"
    )
    table_obj_json: str = Field(alias="tableObjJson")

    def get_table_obj(self, codec: RecordCodec | None = None) -> Table:
        return decode_embedded(self.table_obj_json, Table, "tableObjJson", codec)


class AlterTableMessage(_MessageBase):
    """Carries only the post-alter table; the prior state is not recorded."""

    event_type: Literal[EventKind.ALTER_TABLE] = Field(
        EventKind.ALTER_TABLE, alias="eventType"
    )
    table_obj_json: str = Field(alias="tableObjJson")

    def get_table_obj(self, codec: RecordCodec | None = None) -> Table:
        return decode_embedded(self.table_obj_json, Table, "tableObjJson", codec)


class DropTableMessage(_MessageBase):
    event_type: Literal[EventKind.DROP_TABLE] = Field(
        EventKind.DROP_TABLE, alias="eventType"
    )
    db_name: str = Field(alias="dbName")
    table_name: str = Field(alias="tableName")


# -- Partition -----------------------------------------------------------------


class AddPartitionMessage(_MessageBase):
    event_type: Literal[EventKind.ADD_PARTITION] = Field(
        EventKind.ADD_PARTITION, alias="eventType"
    )
    table_obj_json: str = Field(alias="tableObjJson")
    partition_list_json: list[str] = Field(alias="partitionListJson")

    def get_table_obj(self, codec: RecordCodec | None = None) -> Table:
        return decode_embedded(self.table_obj_json, Table, "tableObjJson", codec)

    def get_partition_objs(self, codec: RecordCodec | None = None) -> list[Partition]:
        return [
            decode_embedded(text, Partition, "partitionListJson", codec)
            for text in self.partition_list_json
        ]


class AlterPartitionMessage(_MessageBase):
    """Unlike ALTER_TABLE, both the before and after partition are kept."""

    event_type: Literal[EventKind.ALTER_PARTITION] = Field(
        EventKind.ALTER_PARTITION, alias="eventType"
    )
    table_obj_json: str = Field(alias="tableObjJson")
    partition_obj_before_json: str = Field(alias="partitionObjBeforeJson")
    partition_obj_after_json: str = Field(alias="partitionObjAfterJson")

    def get_table_obj(self, codec: RecordCodec | None = None) -> Table:
        return decode_embedded(self.table_obj_json, Table, "tableObjJson", codec)

    def get_partition_obj_before(self, codec: RecordCodec | None = None) -> Partition:
        return decode_embedded(
            self.partition_obj_before_json, Partition, "partitionObjBeforeJson", codec
        )

    def get_partition_obj_after(self, codec: RecordCodec | None = None) -> Partition:
        return decode_embedded(
            self.partition_obj_after_json, Partition, "partitionObjAfterJson", codec
        )


class DropPartitionMessage(_MessageBase):
    event_type: Literal[EventKind.DROP_PARTITION] = Field(
        EventKind.DROP_PARTITION, alias="eventType"
    )
    db_name: str = Field(alias="dbName")
    table_name: str = Field(alias="tableName")
    # One partition-key-name -> value map per dropped partition, keys in
    # table schema order.
    partition_key_values_array: list[dict[str, str]] = Field(
        alias="partitionKeyValuesArray"
    )


# -- Function ------------------------------------------------------------------


class CreateFunctionMessage(_MessageBase):
    event_type: Literal[EventKind.CREATE_FUNCTION] = Field(
        EventKind.CREATE_FUNCTION, alias="eventType"
    )
    function_obj_json: str = Field(alias="functionObjJson")

    def get_function_obj(self, codec: RecordCodec | None = None) -> Function:
        return decode_embedded(
            self.function_obj_json, Function, "functionObjJson", codec
        )


class DropFunctionMessage(_MessageBase):
    """Embeds the full function, not just its name."""

    event_type: Literal[EventKind.DROP_FUNCTION] = Field(
        EventKind.DROP_FUNCTION, alias="eventType"
    )
    function_obj_json: str = Field(alias="functionObjJson")

    def get_function_obj(self, codec: RecordCodec | None = None) -> Function:
        return decode_embedded(
            self.function_obj_json, Function, "functionObjJson", codec
        )


# -- Index ---------------------------------------------------------------------


class CreateIndexMessage(_MessageBase):
    event_type: Literal[EventKind.CREATE_INDEX] = Field(
        EventKind.CREATE_INDEX, alias="eventType"
    )
    index_obj_json: str = Field(alias="indexObjJson")

    def get_index_obj(self, codec: RecordCodec | None = None) -> Index:
        return decode_embedded(self.index_obj_json, Index, "indexObjJson", codec)


class DropIndexMessage(_MessageBase):
    event_type: Literal[EventKind.DROP_INDEX] = Field(
        EventKind.DROP_INDEX, alias="eventType"
    )
    index_obj_json: str = Field(alias="indexObjJson")

    def get_index_obj(self, codec: RecordCodec | None = None) -> Index:
        return decode_embedded(self.index_obj_json, Index, "indexObjJson", codec)


class AlterIndexMessage(_MessageBase):
    event_type: Literal[EventKind.ALTER_INDEX] = Field(
        EventKind.ALTER_INDEX, alias="eventType"
    )
    index_obj_before_json: str = Field(alias="indexObjBeforeJson")
    index_obj_after_json: str = Field(alias="indexObjAfterJson")

    def get_index_obj_before(self, codec: RecordCodec | None = None) -> Index:
        return decode_embedded(
            self.index_obj_before_json, Index, "indexObjBeforeJson", codec
        )

    def get_index_obj_after(self, codec: RecordCodec | None = None) -> Index:
        return decode_embedded(
            self.index_obj_after_json, Index, "indexObjAfterJson", codec
        )


# -- Insert --------------------------------------------------------------------


class InsertMessage(_MessageBase):
    event_type: Literal[EventKind.INSERT] = Field(EventKind.INSERT, alias="eventType")
    db_name: str = Field(alias="dbName")
    table_name: str = Field(alias="tableName")
    partition_key_values: dict[str, str] = Field(
        default_factory=dict, alias="partitionKeyValues"
    )
    files: list[str] = Field(default_factory=list)


Message = Annotated[
    CreateDatabaseMessage
    | DropDatabaseMessage
    | CreateTableMessage
    | AlterTableMessage
    | DropTableMessage
    | AddPartitionMessage
    | AlterPartitionMessage
    | DropPartitionMessage
    | CreateFunctionMessage
    | DropFunctionMessage
    | CreateIndexMessage
    | DropIndexMessage
    | AlterIndexMessage
    | InsertMessage,
    Field(discriminator="event_type"),
]

MESSAGE_TYPES: dict[EventKind, type[_MessageBase]] = {
    EventKind.CREATE_DATABASE: CreateDatabaseMessage,
    EventKind.DROP_DATABASE: DropDatabaseMessage,
    EventKind.CREATE_TABLE: CreateTableMessage,
    EventKind.ALTER_TABLE: AlterTableMessage,
    EventKind.DROP_TABLE: DropTableMessage,
    EventKind.ADD_PARTITION: AddPartitionMessage,
    EventKind.ALTER_PARTITION: AlterPartitionMessage,
    EventKind.DROP_PARTITION: DropPartitionMessage,
    EventKind.CREATE_FUNCTION: CreateFunctionMessage,
    EventKind.DROP_FUNCTION: DropFunctionMessage,
    EventKind.CREATE_INDEX: CreateIndexMessage,
    EventKind.DROP_INDEX: DropIndexMessage,
    EventKind.ALTER_INDEX: AlterIndexMessage,
    EventKind.INSERT: InsertMessage,
}
