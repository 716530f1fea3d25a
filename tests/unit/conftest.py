"""Shared catalog fixtures for unit tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from catalog_events.catalog.models import (
    Database,
    FieldSchema,
    Function,
    Index,
    Order,
    Partition,
    PrincipalType,
    ResourceType,
    ResourceUri,
    SerDeInfo,
    StorageDescriptor,
    Table,
)
from catalog_events.config.models import MessagingConfig
from catalog_events.messaging.json_factory import JSONMessageFactory

FIXED_NOW = 1_700_000_000.75


def _sd(location: str) -> StorageDescriptor:
    return StorageDescriptor(
        cols=[
            FieldSchema(name="id", type="bigint"),
            FieldSchema(name="payload", type="string", comment="raw event"),
        ],
        location=location,
        input_format="org.apache.hadoop.mapred.TextInputFormat",
        output_format="org.apache.hadoop.hive.ql.io.HiveIgnoreKeyTextOutputFormat",
        num_buckets=4,
        serde_info=SerDeInfo(
            name="events",
            serialization_lib="org.apache.hadoop.hive.serde2.lazy.LazySimpleSerDe",
            parameters={"field.delim": ","},
        ),
        bucket_cols=["id"],
        sort_cols=[Order(col="id", order=1)],
        parameters={"EXTERNAL": "TRUE"},
    )


def _make_partition(ds: str, region: str, **kwargs: object) -> Partition:
    return Partition(
        values=[ds, region],
        db_name="sales",
        table_name="events",
        create_time=1_690_000_000,
        sd=_sd(f"hdfs://nn/warehouse/sales.db/events/ds={ds}/region={region}"),
        **kwargs,  # type: ignore[arg-type]
    )


@pytest.fixture
def database() -> Database:
    return Database(
        name="sales",
        description="Sales data",
        location_uri="hdfs://nn/warehouse/sales.db",
        parameters={"team": "analytics"},
        owner_name="etl",
        owner_type=PrincipalType.USER,
    )


@pytest.fixture
def table() -> Table:
    return Table(
        table_name="events",
        db_name="sales",
        owner="etl",
        create_time=1_690_000_000,
        sd=_sd("hdfs://nn/warehouse/sales.db/events"),
        partition_keys=[
            FieldSchema(name="ds", type="string"),
            FieldSchema(name="region", type="string"),
        ],
        parameters={"transient_lastDdlTime": "1690000000"},
        table_type="MANAGED_TABLE",
    )


@pytest.fixture
def partitions() -> list[Partition]:
    return [
        _make_partition("2024-01-01", "us"),
        _make_partition("2024-01-01", "eu"),
        _make_partition("2024-01-02", "apac"),
    ]


@pytest.fixture
def function() -> Function:
    return Function(
        function_name="normalize_region",
        db_name="sales",
        class_name="com.example.udf.NormalizeRegion",
        owner_name="etl",
        owner_type=PrincipalType.ROLE,
        create_time=1_690_000_100,
        resource_uris=[
            ResourceUri(resource_type=ResourceType.JAR, uri="hdfs://nn/udf/region.jar"),
            ResourceUri(resource_type=ResourceType.FILE, uri="hdfs://nn/udf/map.txt"),
        ],
    )


@pytest.fixture
def index() -> Index:
    return Index(
        index_name="events_id_idx",
        index_handler_class="org.apache.hadoop.hive.ql.index.compact.CompactIndexHandler",
        db_name="sales",
        orig_table_name="events",
        create_time=1_690_000_200,
        index_table_name="sales__events_events_id_idx__",
        sd=_sd("hdfs://nn/warehouse/sales.db/sales__events_events_id_idx__"),
        parameters={"comment": "by id"},
        deferred_rebuild=True,
    )


@pytest.fixture
def config() -> MessagingConfig:
    return MessagingConfig(
        server_url="thrift://metastore.example.com:9083",
        service_principal="hive/_HOST@EXAMPLE.COM",
    )


@pytest.fixture
def factory(config: MessagingConfig) -> JSONMessageFactory:
    return JSONMessageFactory(config, clock=lambda: FIXED_NOW)


@pytest.fixture
def make_partition() -> Callable[..., Partition]:
    return _make_partition
