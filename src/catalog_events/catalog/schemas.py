"""Avro schemas for catalog records embedded in change-event envelopes.

Nested structs are registered once as named types and referenced by their
full name from the record schemas that contain them.
"""

from __future__ import annotations

from typing import Any

from fastavro import parse_schema

NAMESPACE = "catalog_events.catalog"

_named: dict[str, Any] = {}


def _nullable(avro_type: Any) -> list[Any]:
    return ["null", avro_type]


def _ref(name: str) -> str:
    return f"{NAMESPACE}.{name}"


_STRING_MAP = {"type": "map", "values": "string"}
_STRING_ARRAY = {"type": "array", "items": "string"}


def _register(schema: dict[str, Any]) -> dict[str, Any]:
    return parse_schema({"namespace": NAMESPACE, **schema}, named_schemas=_named)


PRINCIPAL_TYPE = _register(
    {"type": "enum", "name": "PrincipalType", "symbols": ["USER", "ROLE", "GROUP"]}
)

RESOURCE_TYPE = _register(
    {"type": "enum", "name": "ResourceType", "symbols": ["JAR", "FILE", "ARCHIVE"]}
)

FUNCTION_TYPE = _register(
    {"type": "enum", "name": "FunctionType", "symbols": ["JAVA"]}
)

FIELD_SCHEMA = _register(
    {
        "type": "record",
        "name": "FieldSchema",
        "fields": [
            {"name": "name", "type": "string"},
            {"name": "type", "type": "string"},
            {"name": "comment", "type": _nullable("string"), "default": None},
        ],
    }
)

SERDE_INFO = _register(
    {
        "type": "record",
        "name": "SerDeInfo",
        "fields": [
            {"name": "name", "type": _nullable("string"), "default": None},
            {
                "name": "serialization_lib",
                "type": _nullable("string"),
                "default": None,
            },
            {"name": "parameters", "type": _STRING_MAP, "default": {}},
        ],
    }
)

ORDER = _register(
    {
        "type": "record",
        "name": "Order",
        "fields": [
            {"name": "col", "type": "string"},
            {"name": "order", "type": "int"},
        ],
    }
)

STORAGE_DESCRIPTOR = _register(
    {
        "type": "record",
        "name": "StorageDescriptor",
        "fields": [
            {
                "name": "cols",
                "type": {"type": "array", "items": _ref("FieldSchema")},
                "default": [],
            },
            {"name": "location", "type": _nullable("string"), "default": None},
            {"name": "input_format", "type": _nullable("string"), "default": None},
            {"name": "output_format", "type": _nullable("string"), "default": None},
            {"name": "compressed", "type": "boolean", "default": False},
            {"name": "num_buckets", "type": "int", "default": -1},
            {
                "name": "serde_info",
                "type": _nullable(_ref("SerDeInfo")),
                "default": None,
            },
            {"name": "bucket_cols", "type": _STRING_ARRAY, "default": []},
            {
                "name": "sort_cols",
                "type": {"type": "array", "items": _ref("Order")},
                "default": [],
            },
            {"name": "parameters", "type": _STRING_MAP, "default": {}},
            {
                "name": "stored_as_sub_directories",
                "type": "boolean",
                "default": False,
            },
        ],
    }
)

RESOURCE_URI = _register(
    {
        "type": "record",
        "name": "ResourceUri",
        "fields": [
            {"name": "resource_type", "type": _ref("ResourceType")},
            {"name": "uri", "type": "string"},
        ],
    }
)

DATABASE = _register(
    {
        "type": "record",
        "name": "Database",
        "fields": [
            {"name": "name", "type": "string"},
            {"name": "description", "type": _nullable("string"), "default": None},
            {"name": "location_uri", "type": _nullable("string"), "default": None},
            {"name": "parameters", "type": _STRING_MAP, "default": {}},
            {"name": "owner_name", "type": _nullable("string"), "default": None},
            {
                "name": "owner_type",
                "type": _nullable(_ref("PrincipalType")),
                "default": None,
            },
        ],
    }
)

TABLE = _register(
    {
        "type": "record",
        "name": "Table",
        "fields": [
            {"name": "table_name", "type": "string"},
            {"name": "db_name", "type": "string"},
            {"name": "owner", "type": _nullable("string"), "default": None},
            {"name": "create_time", "type": "long", "default": 0},
            {"name": "last_access_time", "type": "long", "default": 0},
            {"name": "retention", "type": "long", "default": 0},
            {
                "name": "sd",
                "type": _nullable(_ref("StorageDescriptor")),
                "default": None,
            },
            {
                "name": "partition_keys",
                "type": {"type": "array", "items": _ref("FieldSchema")},
                "default": [],
            },
            {"name": "parameters", "type": _STRING_MAP, "default": {}},
            {
                "name": "view_original_text",
                "type": _nullable("string"),
                "default": None,
            },
            {
                "name": "view_expanded_text",
                "type": _nullable("string"),
                "default": None,
            },
            {"name": "table_type", "type": _nullable("string"), "default": None},
            {"name": "temporary", "type": "boolean", "default": False},
        ],
    }
)

PARTITION = _register(
    {
        "type": "record",
        "name": "Partition",
        "fields": [
            {"name": "values", "type": _STRING_ARRAY, "default": []},
            {"name": "db_name", "type": "string"},
            {"name": "table_name", "type": "string"},
            {"name": "create_time", "type": "long", "default": 0},
            {"name": "last_access_time", "type": "long", "default": 0},
            {
                "name": "sd",
                "type": _nullable(_ref("StorageDescriptor")),
                "default": None,
            },
            {"name": "parameters", "type": _STRING_MAP, "default": {}},
        ],
    }
)

FUNCTION = _register(
    {
        "type": "record",
        "name": "Function",
        "fields": [
            {"name": "function_name", "type": "string"},
            {"name": "db_name", "type": "string"},
            {"name": "class_name", "type": "string"},
            {"name": "owner_name", "type": _nullable("string"), "default": None},
            {
                "name": "owner_type",
                "type": _nullable(_ref("PrincipalType")),
                "default": None,
            },
            {"name": "create_time", "type": "long", "default": 0},
            {"name": "function_type", "type": _ref("FunctionType")},
            {
                "name": "resource_uris",
                "type": {"type": "array", "items": _ref("ResourceUri")},
                "default": [],
            },
        ],
    }
)

INDEX = _register(
    {
        "type": "record",
        "name": "Index",
        "fields": [
            {"name": "index_name", "type": "string"},
            {"name": "index_handler_class", "type": "string"},
            {"name": "db_name", "type": "string"},
            {"name": "orig_table_name", "type": "string"},
            {"name": "create_time", "type": "long", "default": 0},
            {"name": "last_access_time", "type": "long", "default": 0},
            {
                "name": "index_table_name",
                "type": _nullable("string"),
                "default": None,
            },
            {
                "name": "sd",
                "type": _nullable(_ref("StorageDescriptor")),
                "default": None,
            },
            {"name": "parameters", "type": _STRING_MAP, "default": {}},
            {"name": "deferred_rebuild", "type": "boolean", "default": False},
        ],
    }
)
