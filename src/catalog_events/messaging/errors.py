"""Errors raised while building or decoding change-event envelopes."""

from __future__ import annotations


class MessageDecodeError(Exception):
    """Base class for envelopes that cannot be decoded.

    Decoding is all-or-nothing: when one of these is raised no partial
    result has been returned to the caller.
    """


class OuterParseError(MessageDecodeError):
    """The envelope bytes are not a JSON object."""


class FieldMissingError(MessageDecodeError):
    """An expected key is absent from the parsed envelope."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Envelope has no '{key}' field")


class InnerDecodeError(MessageDecodeError):
    """The inner record codec rejected the text stored under ``key``."""

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        super().__init__(f"Cannot decode embedded '{key}': {reason}")


class UnknownEventKindError(MessageDecodeError):
    """The envelope's ``eventType`` is missing or not a known kind."""


class UnsupportedFormatError(ValueError):
    """No factory or deserializer is registered for a format/version pair."""


class ContractViolation(ValueError):
    """Builder operands break a caller precondition (e.g. length mismatch)."""
