"""Protocol module - Payload serialization."""

from dualstore_core.protocol.serializer import (
    Serializer,
    JSONSerializer,
    TextSerializer,
    SerializerRegistry,
)

__all__ = [
    "Serializer",
    "JSONSerializer",
    "TextSerializer",
    "SerializerRegistry",
]
