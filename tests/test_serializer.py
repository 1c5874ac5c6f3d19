"""Tests for value codecs.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

import pytest

from roadbench_core.profile.value_profile import ValueProfile
from roadbench_core.protocol.serializer import (
    CodecRegistry,
    PickleCodec,
    Utf8Codec,
    get_codec,
)


class TestCodecs:
    """Tests for built-in codecs."""

    def test_default_is_utf8(self):
        """Test the default codec."""
        assert isinstance(get_codec(), Utf8Codec)
        assert get_codec().format_name == "utf8"

    def test_utf8_is_raw(self):
        """Test UTF-8 adds no framing."""
        assert Utf8Codec().encode("key_1") == b"key_1"

    def test_utf8_accepts_memoryview(self):
        """Test decoding from a buffer object."""
        assert Utf8Codec().decode(memoryview(b"abc")) == "abc"

    @pytest.mark.parametrize("name", ["utf8", "pickle"])
    def test_profile_payload_identity(self, name):
        """Test multi-line payloads survive encoding."""
        codec = get_codec(name)
        value = ValueProfile.for_lines(5).value_for_index(3)
        assert codec.decode(codec.encode(value)) == value

    def test_msgpack_identity(self):
        """Test msgpack codec when installed."""
        pytest.importorskip("msgpack")
        codec = get_codec("msgpack")
        value = ValueProfile.for_bytes(64).value_for_index(9)
        assert codec.decode(codec.encode(value)) == value

    def test_unknown_codec(self):
        """Test unknown name raises KeyError."""
        with pytest.raises(KeyError):
            get_codec("yaml")


class TestCodecRegistry:
    """Tests for CodecRegistry."""

    def test_list_formats(self):
        """Test built-ins are registered."""
        formats = CodecRegistry().list_formats()
        assert {"utf8", "pickle", "msgpack"} <= set(formats)

    def test_register(self):
        """Test registering a codec under its format name."""
        registry = CodecRegistry()
        codec = PickleCodec(protocol=2)
        registry.register(codec)
        assert registry.get("pickle") is codec


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
