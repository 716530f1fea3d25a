"""Pydantic models for catalog objects carried in change events.

These mirror the metastore's catalog structs closely enough that a record
survives an encode/decode cycle through the inner Avro format unchanged.
Records are frozen and compare by value.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class PrincipalType(StrEnum):
    """Kinds of principal that can own a catalog object."""

    USER = "USER"
    ROLE = "ROLE"
    GROUP = "GROUP"


class ResourceType(StrEnum):
    """Resource kinds a function may depend on."""

    JAR = "JAR"
    FILE = "FILE"
    ARCHIVE = "ARCHIVE"


class FunctionType(StrEnum):
    JAVA = "JAVA"


class FieldSchema(BaseModel, frozen=True):
    """A single column: name, type string and optional comment."""

    name: str
    type: str
    comment: str | None = None


class SerDeInfo(BaseModel, frozen=True):
    name: str | None = None
    serialization_lib: str | None = None
    parameters: dict[str, str] = Field(default_factory=dict)


class Order(BaseModel, frozen=True):
    col: str
    # 1 = ascending, 0 = descending
    order: int = 1


class StorageDescriptor(BaseModel, frozen=True):
    """Physical layout of a table, partition or index table."""

    cols: list[FieldSchema] = Field(default_factory=list)
    location: str | None = None
    input_format: str | None = None
    output_format: str | None = None
    compressed: bool = False
    num_buckets: int = -1
    serde_info: SerDeInfo | None = None
    bucket_cols: list[str] = Field(default_factory=list)
    sort_cols: list[Order] = Field(default_factory=list)
    parameters: dict[str, str] = Field(default_factory=dict)
    stored_as_sub_directories: bool = False


class Database(BaseModel, frozen=True):
    name: str
    description: str | None = None
    location_uri: str | None = None
    parameters: dict[str, str] = Field(default_factory=dict)
    owner_name: str | None = None
    owner_type: PrincipalType | None = None


class Table(BaseModel, frozen=True):
    """A catalog table.

    ``partition_keys`` is in schema order; a partition's ``values`` list
    corresponds to it positionally.
    """

    table_name: str
    db_name: str
    owner: str | None = None
    create_time: int = 0
    last_access_time: int = 0
    retention: int = 0
    sd: StorageDescriptor | None = None
    partition_keys: list[FieldSchema] = Field(default_factory=list)
    parameters: dict[str, str] = Field(default_factory=dict)
    view_original_text: str | None = None
    view_expanded_text: str | None = None
    table_type: str | None = None
    temporary: bool = False


class Partition(BaseModel, frozen=True):
    values: list[str] = Field(default_factory=list)
    db_name: str
    table_name: str
    create_time: int = 0
    last_access_time: int = 0
    sd: StorageDescriptor | None = None
    parameters: dict[str, str] = Field(default_factory=dict)


class ResourceUri(BaseModel, frozen=True):
    resource_type: ResourceType
    uri: str


class Function(BaseModel, frozen=True):
    """A user-defined function registered in a database."""

    function_name: str
    db_name: str
    class_name: str
    owner_name: str | None = None
    owner_type: PrincipalType | None = None
    create_time: int = 0
    function_type: FunctionType = FunctionType.JAVA
    resource_uris: list[ResourceUri] = Field(default_factory=list)


class Index(BaseModel, frozen=True):
    index_name: str
    index_handler_class: str
    db_name: str
    orig_table_name: str
    create_time: int = 0
    last_access_time: int = 0
    index_table_name: str | None = None
    sd: StorageDescriptor | None = None
    parameters: dict[str, str] = Field(default_factory=dict)
    deferred_rebuild: bool = False


class NotificationEvent(BaseModel, frozen=True):
    """One row of the catalog notification log.

    ``message`` holds the serialized envelope; ``message_format`` names the
    factory that produced it.
    """

    event_id: int = Field(ge=0)
    event_time: int
    event_type: str
    db_name: str | None = None
    table_name: str | None = None
    message: str
    message_format: str | None = None
