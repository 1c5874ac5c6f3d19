"""RoadBench Codecs - Value Encoding for Byte-Oriented Engines.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import pickle
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class ValueCodec(ABC):
    """Converts benchmark values to and from bytes.

    Engines that only store bytes (LMDB, dbm, LevelDB, Redis, plain files)
    go through a codec; ``decode(encode(v)) == v`` for every value.
    """

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Get format name."""
        pass

    @abstractmethod
    def encode(self, value: str) -> bytes:
        """Encode value to bytes.

        Args:
            value: Value to encode

        Returns:
            Encoded bytes
        """
        pass

    @abstractmethod
    def decode(self, data: bytes) -> str:
        """Decode bytes to value.

        Args:
            data: Encoded bytes

        Returns:
            Decoded value
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class Utf8Codec(ValueCodec):
    """Plain UTF-8. The default, adds no framing overhead."""

    @property
    def format_name(self) -> str:
        return "utf8"

    def encode(self, value: str) -> bytes:
        return value.encode("utf-8")

    def decode(self, data: bytes) -> str:
        return bytes(data).decode("utf-8")


class PickleCodec(ValueCodec):
    """Pickle codec.

    Not safe for untrusted data.
    """

    def __init__(self, protocol: int = pickle.HIGHEST_PROTOCOL):
        """Initialize pickle codec.

        Args:
            protocol: Pickle protocol version
        """
        self.protocol = protocol

    @property
    def format_name(self) -> str:
        return "pickle"

    def encode(self, value: str) -> bytes:
        return pickle.dumps(value, protocol=self.protocol)

    def decode(self, data: bytes) -> str:
        return pickle.loads(bytes(data))


class MsgPackCodec(ValueCodec):
    """MessagePack codec.

    Requires msgpack package.
    """

    @property
    def format_name(self) -> str:
        return "msgpack"

    def encode(self, value: str) -> bytes:
        try:
            import msgpack
        except ImportError:
            raise ImportError("msgpack package not installed. Run: pip install msgpack")
        return msgpack.packb(value, use_bin_type=True)

    def decode(self, data: bytes) -> str:
        try:
            import msgpack
        except ImportError:
            raise ImportError("msgpack package not installed. Run: pip install msgpack")
        return msgpack.unpackb(bytes(data), raw=False)


class CodecRegistry:
    """Registry of value codecs."""

    def __init__(self):
        self._codecs: Dict[str, ValueCodec] = {}
        self._default: str = "utf8"

        self.register(Utf8Codec())
        self.register(PickleCodec())
        self.register(MsgPackCodec())

    def register(self, codec: ValueCodec) -> None:
        """Register a codec.

        Args:
            codec: Codec to register
        """
        self._codecs[codec.format_name] = codec

    def get(self, format_name: str) -> ValueCodec:
        """Get codec by format.

        Args:
            format_name: Format name

        Returns:
            ValueCodec instance

        Raises:
            KeyError: If format not found
        """
        if format_name not in self._codecs:
            raise KeyError(f"Unknown codec format: {format_name}")
        return self._codecs[format_name]

    def get_default(self) -> ValueCodec:
        return self._codecs[self._default]

    def list_formats(self) -> List[str]:
        return list(self._codecs.keys())


_registry = CodecRegistry()


def get_codec(format_name: Optional[str] = None) -> ValueCodec:
    """Get codec by format.

    Args:
        format_name: Format name or None for default

    Returns:
        ValueCodec instance
    """
    if format_name is None:
        return _registry.get_default()
    return _registry.get(format_name)


__all__ = [
    "ValueCodec",
    "Utf8Codec",
    "PickleCodec",
    "MsgPackCodec",
    "CodecRegistry",
    "get_codec",
]
