"""Pydantic configuration models for change-event messaging."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class MessageFormat(StrEnum):
    """Supported envelope formats."""

    JSON = "json"


class MessagingConfig(BaseModel, extra="forbid"):
    """Identity stamped on every message, and the envelope format to emit.

    ``server_url`` and ``service_principal`` are copied verbatim into each
    envelope's ``server`` and ``principal`` fields.
    """

    server_url: str = ""
    service_principal: str = ""
    message_format: MessageFormat = MessageFormat.JSON
