"""Message factory registry — maps a message format to its implementation."""

from __future__ import annotations

import time
from collections.abc import Callable

import structlog

from catalog_events.catalog.codec import RecordCodec
from catalog_events.catalog.models import NotificationEvent
from catalog_events.config.models import MessageFormat, MessagingConfig
from catalog_events.messaging.base import MessageDeserializer, MessageFactory
from catalog_events.messaging.deserializer import JSONMessageDeserializer
from catalog_events.messaging.envelope import MESSAGE_FORMAT, MESSAGE_VERSION
from catalog_events.messaging.errors import UnsupportedFormatError
from catalog_events.messaging.json_factory import JSONMessageFactory

logger = structlog.get_logger()

_FACTORY_REGISTRY: dict[MessageFormat, type] = {
    MessageFormat.JSON: JSONMessageFactory,
}

_DESERIALIZER_REGISTRY: dict[tuple[str, str], type] = {
    (MESSAGE_FORMAT, MESSAGE_VERSION): JSONMessageDeserializer,
}


def create_message_factory(
    config: MessagingConfig,
    *,
    codec: RecordCodec | None = None,
    clock: Callable[[], float] = time.time,
) -> MessageFactory:
    """Create the message factory for ``config.message_format``.

    Adding a format = one factory class + one dict entry in
    ``_FACTORY_REGISTRY``.
    """
    cls = _FACTORY_REGISTRY.get(config.message_format)
    if cls is None:
        msg = f"Unknown message format: {config.message_format}"
        raise UnsupportedFormatError(msg)
    factory: MessageFactory = cls(config, codec=codec, clock=clock)
    logger.info(
        "factory.created",
        message_format=factory.get_message_format(),
        version=factory.get_version(),
        server=config.server_url,
    )
    return factory


def get_deserializer(
    message_format: str = MESSAGE_FORMAT,
    version: str = MESSAGE_VERSION,
) -> MessageDeserializer:
    """Return the deserializer registered for a format/version pair."""
    cls = _DESERIALIZER_REGISTRY.get((message_format, version))
    if cls is None:
        msg = f"No deserializer for message format '{message_format}' v{version}"
        raise UnsupportedFormatError(msg)
    return cls()  # type: ignore[no-any-return]


def deserializer_for(event: NotificationEvent) -> MessageDeserializer:
    """Pick the deserializer for a notification-log row.

    Rows written without a ``message_format`` are assumed to be JSON.
    """
    return get_deserializer(event.message_format or MESSAGE_FORMAT)
