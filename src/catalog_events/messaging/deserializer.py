"""JSON envelope deserializer."""

from __future__ import annotations

from typing import Any, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from catalog_events.catalog.models import NotificationEvent
from catalog_events.messaging.envelope import EVENT_TYPE_KEY, event_kind, get_json_tree
from catalog_events.messaging.errors import (
    FieldMissingError,
    MessageDecodeError,
    UnknownEventKindError,
)
from catalog_events.messaging.messages import MESSAGE_TYPES, EventKind, Message

logger = structlog.get_logger()

M = TypeVar("M", bound=BaseModel)


class JSONMessageDeserializer:
    """Reads JSON envelopes into typed messages.

    Has no state at all; one instance may be shared by any number of threads.
    Embedded objects are left encoded; call the message's ``get_*`` accessors
    to decode them.
    """

    __slots__ = ()

    def deserialize(self, data: bytes | str | NotificationEvent) -> Message:
        return self.from_json_tree(get_json_tree(data))

    def from_json_tree(self, tree: dict[str, Any]) -> Message:
        """Validate an already-parsed envelope into its message variant."""
        kind = event_kind(tree)
        if kind == EventKind.UNKNOWN:
            logger.warning(
                "deserializer.unknown_event_kind",
                event_type=tree.get(EVENT_TYPE_KEY),
            )
            msg = f"Envelope has no recognized '{EVENT_TYPE_KEY}'"
            raise UnknownEventKindError(msg)

        try:
            return MESSAGE_TYPES[kind].model_validate(tree)  # type: ignore[return-value]
        except ValidationError as exc:
            for error in exc.errors():
                if error["type"] == "missing" or error["input"] is None:
                    raise FieldMissingError(str(error["loc"][0])) from exc
            msg = f"Malformed {kind} envelope:\n{exc}"
            raise MessageDecodeError(msg) from exc

    def deserialize_as(
        self, data: bytes | str | NotificationEvent, message_type: type[M]
    ) -> M:
        """Deserialize and check that the envelope is a *message_type*."""
        message = self.deserialize(data)
        if not isinstance(message, message_type):
            msg = (
                f"Expected {message_type.__name__}, "
                f"envelope holds {type(message).__name__}"
            )
            raise MessageDecodeError(msg)
        return message
