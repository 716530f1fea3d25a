"""Inner record codec — Avro binary wrapped in base64 text.

Each catalog record is written whole with its registered Avro schema and the
resulting bytes are base64-encoded so they can sit inside a JSON string.
"""

from __future__ import annotations

import base64
import binascii
import io
from typing import Any, TypeVar

from fastavro import schemaless_reader, schemaless_writer
from pydantic import BaseModel

from catalog_events.catalog import schemas
from catalog_events.catalog.models import Database, Function, Index, Partition, Table

R = TypeVar("R", bound=BaseModel)

_SCHEMA_REGISTRY: dict[type[BaseModel], dict[str, Any]] = {
    Database: schemas.DATABASE,
    Table: schemas.TABLE,
    Partition: schemas.PARTITION,
    Function: schemas.FUNCTION,
    Index: schemas.INDEX,
}


class RecordSerializationError(Exception):
    """Raised when a record cannot be encoded to or decoded from inner text."""


class RecordCodec:
    """Encodes whole catalog records to text and back.

    Holds only the parsed schema registry, which is never mutated, so one
    instance can be shared freely between threads.
    """

    __slots__ = ("_schemas",)

    def __init__(
        self, schema_registry: dict[type[BaseModel], dict[str, Any]] | None = None
    ) -> None:
        self._schemas = dict(schema_registry or _SCHEMA_REGISTRY)

    def _schema_for(self, record_type: type[BaseModel]) -> dict[str, Any]:
        schema = self._schemas.get(record_type)
        if schema is None:
            msg = f"No inner schema registered for {record_type.__name__}"
            raise RecordSerializationError(msg)
        return schema

    def encode(self, record: BaseModel) -> str:
        """Serialize *record* to base64 text."""
        schema = self._schema_for(type(record))
        buf = io.BytesIO()
        try:
            schemaless_writer(buf, schema, record.model_dump(mode="json"))
        except Exception as exc:
            msg = f"Failed to encode {type(record).__name__}: {exc}"
            raise RecordSerializationError(msg) from exc
        return base64.b64encode(buf.getvalue()).decode("ascii")

    def decode(self, text: str, record_type: type[R]) -> R:
        """Deserialize *text* into a newly allocated *record_type* instance."""
        schema = self._schema_for(record_type)
        try:
            raw = base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError) as exc:
            msg = f"Inner text for {record_type.__name__} is not valid base64"
            raise RecordSerializationError(msg) from exc

        buf = io.BytesIO(raw)
        try:
            data = schemaless_reader(buf, schema)
            record = record_type.model_validate(data)
        except Exception as exc:
            msg = f"Failed to decode {record_type.__name__}: {exc}"
            raise RecordSerializationError(msg) from exc
        if buf.tell() != len(raw):
            msg = (
                f"Trailing bytes after {record_type.__name__} record "
                f"({len(raw) - buf.tell()} unread)"
            )
            raise RecordSerializationError(msg)
        return record
