"""DualStore Serializer - Payload Serialization.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

The file extension of an entry selects its on-disk format. ``json`` entries
are pretty-printed JSON; any other extension stores the payload's plain
string form.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class Serializer(ABC):
    """Abstract serializer for stored payloads."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Get format name."""
        pass

    @abstractmethod
    def serialize(self, value: Any) -> bytes:
        """Serialize value to bytes.

        Args:
            value: Value to serialize

        Returns:
            Serialized bytes
        """
        pass

    @abstractmethod
    def deserialize(self, data: bytes) -> Any:
        """Deserialize bytes to value.

        Args:
            data: Serialized bytes

        Returns:
            Deserialized value
        """
        pass


class JSONSerializer(Serializer):
    """JSON serializer.

    Writes indented, human-readable JSON. Limited to JSON-compatible types;
    anything else raises ``TypeError`` on serialize.
    """

    def __init__(self, indent: Any = "\t", encoding: str = "utf-8"):
        """Initialize JSON serializer.

        Args:
            indent: Indent passed to ``json.dumps``
            encoding: Text encoding
        """
        super().__init__(encoding)
        self.indent = indent

    @property
    def format_name(self) -> str:
        return "json"

    def serialize(self, value: Any) -> bytes:
        return json.dumps(value, indent=self.indent).encode(self.encoding)

    def deserialize(self, data: bytes) -> Any:
        return json.loads(data.decode(self.encoding))


class TextSerializer(Serializer):
    """Plain text serializer.

    Stores ``str(value)``; reads return the raw text.
    """

    @property
    def format_name(self) -> str:
        return "text"

    def serialize(self, value: Any) -> bytes:
        return str(value).encode(self.encoding)

    def deserialize(self, data: bytes) -> Any:
        return data.decode(self.encoding)


class SerializerRegistry:
    """Registry of serializers keyed by file extension.

    Extensions without a registered serializer use the fallback, which is
    plain text unless configured otherwise.
    """

    def __init__(
        self,
        fallback: Optional[Serializer] = None,
        json_indent: Any = "\t",
        encoding: str = "utf-8",
    ):
        self._serializers: Dict[str, Serializer] = {}
        self._fallback = fallback or TextSerializer(encoding)

        self.register("json", JSONSerializer(indent=json_indent, encoding=encoding))

    def register(self, extension: str, serializer: Serializer) -> None:
        """Register a serializer for an extension.

        Args:
            extension: File extension without the leading dot
            serializer: Serializer to use for it
        """
        if not extension or extension.startswith("."):
            raise ValueError(f"Invalid extension: {extension!r}")
        self._serializers[extension] = serializer

    def get(self, extension: str) -> Serializer:
        """Get the serializer for an extension.

        Args:
            extension: File extension

        Returns:
            Registered serializer, or the fallback
        """
        return self._serializers.get(extension, self._fallback)

    def list_extensions(self) -> List[str]:
        """List extensions with a dedicated serializer."""
        return list(self._serializers.keys())


__all__ = [
    "Serializer",
    "JSONSerializer",
    "TextSerializer",
    "SerializerRegistry",
]
