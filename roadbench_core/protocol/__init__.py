"""Protocol module - Value codecs."""

from roadbench_core.protocol.serializer import (
    CodecRegistry,
    MsgPackCodec,
    PickleCodec,
    Utf8Codec,
    ValueCodec,
    get_codec,
)

__all__ = [
    "CodecRegistry",
    "MsgPackCodec",
    "PickleCodec",
    "Utf8Codec",
    "ValueCodec",
    "get_codec",
]
