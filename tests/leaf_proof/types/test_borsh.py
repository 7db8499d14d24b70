"""Tests for the borsh primitives."""

import pytest

from leaf_proof.types import Bytes32, Uint8, Uint32, Uint64
from leaf_proof.types.borsh import (
    BorshReader,
    encode_bool,
    encode_enum,
    encode_option,
    encode_string,
    encode_vec,
)


class TestEncoding:
    """Each primitive encodes to its documented layout."""

    def test_bool(self) -> None:
        assert encode_bool(True) == b"\x01"
        assert encode_bool(False) == b"\x00"

    def test_string_prefixes_utf8_byte_length(self) -> None:
        assert encode_string("abc") == b"\x03\x00\x00\x00abc"
        # Two bytes per character in UTF-8.
        assert encode_string("éé") == b"\x04\x00\x00\x00" + "éé".encode()

    def test_empty_string(self) -> None:
        assert encode_string("") == b"\x00\x00\x00\x00"

    def test_option(self) -> None:
        encode_u8 = lambda v: Uint8(v).encode_bytes()  # noqa: E731
        assert encode_option(None, encode_u8) == b"\x00"
        assert encode_option(7, encode_u8) == b"\x01\x07"
        # Zero is present, not absent.
        assert encode_option(0, encode_u8) == b"\x01\x00"

    def test_vec(self) -> None:
        encoded = encode_vec([Uint8(1), Uint8(2)], lambda v: v.encode_bytes())
        assert encoded == b"\x02\x00\x00\x00\x01\x02"
        assert encode_vec([], lambda v: v) == b"\x00\x00\x00\x00"

    def test_enum(self) -> None:
        assert encode_enum(3) == b"\x03"


class TestReader:
    """Sequential reads with bounds checks."""

    def test_reads_in_order(self) -> None:
        data = b"\x01" + Uint32(9).encode_bytes() + b"\xaa" * 32 + b"\x00\x00" + b"\x05" * 8
        reader = BorshReader(data)

        assert reader.read_bool() is True
        assert reader.read_uint(Uint32) == 9
        assert reader.read_fixed(Bytes32) == b"\xaa" * 32
        reader.skip(2)
        assert reader.offset == 39
        assert reader.read_uint(Uint64) == int.from_bytes(b"\x05" * 8, "little")
        assert reader.remaining == 0

    def test_short_buffer_names_offset(self) -> None:
        reader = BorshReader(b"\x00\x00")
        reader.skip(1)
        with pytest.raises(ValueError, match="offset 1: needed 4 bytes, 1 left"):
            reader.read_uint(Uint32)

    def test_rejects_non_canonical_bool(self) -> None:
        with pytest.raises(ValueError, match="Invalid bool byte 0x02"):
            BorshReader(b"\x02").read_bool()

    def test_rejects_negative_length(self) -> None:
        with pytest.raises(ValueError):
            BorshReader(b"").read_bytes(-1)
