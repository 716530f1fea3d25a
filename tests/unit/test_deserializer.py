"""Unit tests for JSONMessageDeserializer and the factory registry."""

from __future__ import annotations

import json

import pytest

from catalog_events.catalog.models import (
    Database,
    Function,
    Index,
    NotificationEvent,
    Partition,
    Table,
)
from catalog_events.config.models import MessagingConfig
from catalog_events.messaging.base import MessageDeserializer, MessageFactory
from catalog_events.messaging.deserializer import JSONMessageDeserializer
from catalog_events.messaging.envelope import serialize, to_notification_event
from catalog_events.messaging.errors import (
    FieldMissingError,
    InnerDecodeError,
    MessageDecodeError,
    UnknownEventKindError,
    UnsupportedFormatError,
)
from catalog_events.messaging.factory import (
    create_message_factory,
    deserializer_for,
    get_deserializer,
)
from catalog_events.messaging.json_factory import JSONMessageFactory
from catalog_events.messaging.messages import (
    AddPartitionMessage,
    AlterIndexMessage,
    AlterPartitionMessage,
    CreateTableMessage,
    DropPartitionMessage,
    DropTableMessage,
    EventKind,
    InsertMessage,
)


class TestDeserialize:
    def test_every_kind_round_trips(
        self,
        factory: JSONMessageFactory,
        database: Database,
        table: Table,
        partitions: list[Partition],
        function: Function,
        index: Index,
    ):
        messages = [
            factory.build_create_database(database),
            factory.build_drop_database(database),
            factory.build_create_table(table),
            factory.build_alter_table(table, table),
            factory.build_drop_table(table),
            factory.build_add_partition(table, partitions),
            factory.build_alter_partition(table, partitions[0], partitions[1]),
            factory.build_drop_partition(table, partitions),
            factory.build_create_function(function),
            factory.build_drop_function(function),
            factory.build_create_index(index),
            factory.build_drop_index(index),
            factory.build_alter_index(index, index),
            factory.build_insert("sales", "events", {"ds": "x"}, ["f"]),
        ]
        deser = JSONMessageDeserializer()
        for message in messages:
            decoded = deser.deserialize(serialize(message))
            assert type(decoded) is type(message)
            assert decoded == message

        kinds = {m.event_type for m in messages}
        assert kinds == set(EventKind) - {EventKind.UNKNOWN}

    def test_decoded_accessors_rebuild_objects(
        self, factory: JSONMessageFactory, table: Table, partitions: list[Partition]
    ):
        text = serialize(factory.build_add_partition(table, partitions))
        msg = JSONMessageDeserializer().deserialize_as(text, AddPartitionMessage)
        assert msg.get_table_obj() == table
        assert msg.get_partition_objs() == partitions

    def test_alter_partition_accessors(
        self, factory: JSONMessageFactory, table: Table, partitions: list[Partition]
    ):
        text = serialize(factory.build_alter_partition(table, *partitions[:2]))
        msg = JSONMessageDeserializer().deserialize_as(text, AlterPartitionMessage)
        assert msg.get_partition_obj_before() == partitions[0]
        assert msg.get_partition_obj_after() == partitions[1]

    def test_alter_index_accessors(self, factory: JSONMessageFactory, index: Index):
        after = index.model_copy(update={"index_name": "renamed"})
        text = serialize(factory.build_alter_index(index, after))
        msg = JSONMessageDeserializer().deserialize_as(text, AlterIndexMessage)
        assert msg.get_index_obj_before() == index
        assert msg.get_index_obj_after() == after

    def test_drop_partition_and_insert_fields(
        self, factory: JSONMessageFactory, table: Table, partitions: list[Partition]
    ):
        deser = JSONMessageDeserializer()
        drop = deser.deserialize_as(
            serialize(factory.build_drop_partition(table, partitions[:1])),
            DropPartitionMessage,
        )
        assert drop.partition_key_values_array == [{"ds": "2024-01-01", "region": "us"}]
        insert = deser.deserialize_as(
            serialize(factory.build_insert("sales", "events", {}, ["a", "b"])),
            InsertMessage,
        )
        assert insert.files == ["a", "b"]
        assert insert.partition_key_values == {}

    def test_from_notification_event(self, factory: JSONMessageFactory, table: Table):
        event = to_notification_event(factory.build_drop_table(table), 11)
        msg = deserializer_for(event).deserialize(event)
        assert isinstance(msg, DropTableMessage)
        assert msg.table_name == "events"


class TestDeserializeErrors:
    def test_missing_embedded_field(self):
        text = json.dumps(
            {"server": "s", "principal": "p", "timestamp": 1, "eventType": "CREATE_TABLE"}
        )
        with pytest.raises(FieldMissingError) as exc_info:
            JSONMessageDeserializer().deserialize(text)
        assert exc_info.value.key == "tableObjJson"

    def test_null_embedded_field_counts_as_missing(self):
        text = json.dumps(
            {
                "server": "s",
                "principal": "p",
                "timestamp": 1,
                "eventType": "CREATE_TABLE",
                "tableObjJson": None,
            }
        )
        with pytest.raises(FieldMissingError) as exc_info:
            JSONMessageDeserializer().deserialize(text)
        assert exc_info.value.key == "tableObjJson"

    def test_null_metadata_field_counts_as_missing(self):
        text = json.dumps(
            {
                "server": None,
                "principal": "p",
                "timestamp": 1,
                "eventType": "DROP_DATABASE",
                "dbName": "d",
            }
        )
        with pytest.raises(FieldMissingError) as exc_info:
            JSONMessageDeserializer().deserialize(text)
        assert exc_info.value.key == "server"

    def test_string_timestamp_is_rejected(self):
        text = json.dumps(
            {
                "server": "s",
                "principal": "p",
                "timestamp": "12",
                "eventType": "DROP_DATABASE",
                "dbName": "d",
            }
        )
        with pytest.raises(MessageDecodeError, match="DROP_DATABASE"):
            JSONMessageDeserializer().deserialize(text)

    def test_missing_metadata_field(self):
        text = json.dumps({"eventType": "DROP_DATABASE", "dbName": "d"})
        with pytest.raises(FieldMissingError):
            JSONMessageDeserializer().deserialize(text)

    def test_wrong_field_type(self):
        text = json.dumps(
            {
                "server": "s",
                "principal": "p",
                "timestamp": 1,
                "eventType": "INSERT",
                "dbName": "d",
                "tableName": "t",
                "files": "not-a-list",
            }
        )
        with pytest.raises(MessageDecodeError, match="INSERT"):
            JSONMessageDeserializer().deserialize(text)

    def test_unknown_kind(self):
        text = json.dumps({"eventType": "RENAME_EVERYTHING"})
        with pytest.raises(UnknownEventKindError):
            JSONMessageDeserializer().deserialize(text)

    def test_missing_kind(self):
        with pytest.raises(UnknownEventKindError):
            JSONMessageDeserializer().deserialize(b"{}")

    def test_deserialize_as_checks_kind(
        self, factory: JSONMessageFactory, table: Table
    ):
        text = serialize(factory.build_drop_table(table))
        with pytest.raises(MessageDecodeError, match="CreateTableMessage"):
            JSONMessageDeserializer().deserialize_as(text, CreateTableMessage)

    def test_corrupt_embedded_text_surfaces_on_access(
        self, factory: JSONMessageFactory, table: Table
    ):
        tree = json.loads(serialize(factory.build_create_table(table)))
        tree["tableObjJson"] = "AAAA"
        msg = JSONMessageDeserializer().deserialize_as(
            json.dumps(tree), CreateTableMessage
        )
        with pytest.raises(InnerDecodeError):
            msg.get_table_obj()


class TestRegistry:
    def test_create_message_factory(self, config: MessagingConfig):
        factory = create_message_factory(config, clock=lambda: 5.0)
        assert isinstance(factory, JSONMessageFactory)
        assert isinstance(factory, MessageFactory)
        assert factory.build_create_database(Database(name="d")).timestamp == 5

    def test_get_deserializer_by_format_and_version(self):
        deser = get_deserializer("json", "0.1")
        assert isinstance(deser, JSONMessageDeserializer)
        assert isinstance(deser, MessageDeserializer)

    def test_unknown_format_or_version(self):
        with pytest.raises(UnsupportedFormatError):
            get_deserializer("avro", "0.1")
        with pytest.raises(UnsupportedFormatError):
            get_deserializer("json", "2.0")

    def test_unsupported_factory_format(self, config: MessagingConfig):
        bogus = config.model_copy(update={"message_format": "xml"})
        with pytest.raises(UnsupportedFormatError, match="xml"):
            create_message_factory(bogus)

    def test_deserializer_for_defaults_to_json(self):
        event = NotificationEvent(
            event_id=1, event_time=0, event_type="DROP_DATABASE", message="{}"
        )
        assert isinstance(deserializer_for(event), JSONMessageDeserializer)
